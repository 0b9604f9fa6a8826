import threading

import pytest

from engine import MAX_INTERVAL_MS, SchedulerState, Visualizer
from settings import Settings


# -----------------------------
# Editing policy
# -----------------------------

def test_defaults(visualizer):
    assert visualizer.status == SchedulerState.IDLE
    assert visualizer.start == (0, 0)
    assert visualizer.end == (2, 2)
    assert visualizer.current_operation is None
    assert visualizer.animating == set()


def test_toggle_wall_default_action(visualizer):
    assert visualizer.on_cell_primary_action(1, 1)
    assert visualizer.grid.cell((1, 1)).is_wall
    assert visualizer.on_cell_primary_action(1, 1)
    assert not visualizer.grid.cell((1, 1)).is_wall


def test_markers_cannot_be_walled(visualizer):
    assert not visualizer.on_cell_primary_action(0, 0)
    assert not visualizer.on_cell_primary_action(2, 2)
    assert visualizer.grid.walls() == []


def test_out_of_bounds_click_ignored(visualizer):
    assert not visualizer.on_cell_primary_action(7, 7)


def test_move_end_takes_precedence(visualizer):
    assert visualizer.on_cell_primary_action(1, 0, move_end=True, cycle_weight_mode=True)
    assert visualizer.end == (1, 0)
    assert visualizer.grid.cell((1, 0)).weight == 1
    assert not visualizer.grid.cell((1, 0)).is_wall


def test_weight_beats_wall(visualizer):
    assert visualizer.on_cell_primary_action(1, 1, cycle_weight_mode=True)
    cell = visualizer.grid.cell((1, 1))
    assert cell.weight == 2 and not cell.is_wall


def test_move_end_rejected_on_wall_and_start(visualizer):
    visualizer.on_cell_primary_action(1, 1)
    assert not visualizer.on_cell_primary_action(1, 1, move_end=True)
    assert not visualizer.on_cell_primary_action(0, 0, move_end=True)
    assert visualizer.end == (2, 2)
    assert visualizer.grid.cell((1, 1)).is_wall


# -----------------------------
# Running state
# -----------------------------

def test_everything_rejected_while_running(visualizer):
    assert visualizer.on_request_search()
    assert visualizer.is_running
    grid = visualizer.grid

    assert not visualizer.on_request_search()
    assert not visualizer.on_cell_primary_action(1, 1)
    assert not visualizer.on_cell_primary_action(1, 0, move_end=True)
    assert not visualizer.on_cell_primary_action(1, 0, cycle_weight_mode=True)
    assert not visualizer.on_request_soft_reset()
    assert not visualizer.on_request_hard_reset()
    assert not visualizer.on_request_random_example()
    assert visualizer.grid is grid
    assert visualizer.end == (2, 2)


def test_full_run_replays_to_completion(visualizer, play_out):
    visualizer.on_cell_primary_action(1, 0, cycle_weight_mode=True)
    assert visualizer.on_request_search()
    result = visualizer.last_result
    assert result.found

    play_out(visualizer)
    assert visualizer.status == SchedulerState.IDLE
    assert visualizer.reset_required
    for pos in result.path:
        assert visualizer.grid.cell(pos).is_path
    for pos in result.visited_order:
        assert visualizer.grid.cell(pos).is_visited
    assert visualizer.animating == set()
    assert visualizer.grid.cell((1, 0)).weight == 2

    metrics = visualizer.last_metrics
    assert metrics.path_found
    assert metrics.path_cost == result.total_distance == 4
    assert metrics.nodes_visited == len(result.visited_order)


def test_next_edit_after_run_clears_results(visualizer, play_out):
    visualizer.on_request_search()
    play_out(visualizer)
    assert visualizer.on_cell_primary_action(1, 1)
    assert not visualizer.reset_required
    assert visualizer.grid.cell((1, 1)).is_wall
    assert not any(visualizer.grid.cell(p).is_visited for p in visualizer.grid.coords())
    assert not any(visualizer.grid.cell(p).is_path for p in visualizer.grid.coords())


def test_unreachable_end_completes(visualizer, play_out):
    visualizer.on_cell_primary_action(1, 2)
    visualizer.on_cell_primary_action(2, 1)
    assert visualizer.on_request_search()
    assert visualizer.last_result.path == []
    assert not visualizer.last_metrics.path_found
    play_out(visualizer)
    assert not visualizer.is_running


def test_cancel_unblocks_editing(visualizer, clock):
    visualizer.on_request_search()
    clock.advance(35)
    visualizer.tick()
    assert visualizer.on_request_cancel()
    assert not visualizer.is_running
    assert visualizer.animating == set()
    assert visualizer.on_cell_primary_action(1, 1)
    assert visualizer.grid.cell((1, 1)).is_wall
    assert not any(visualizer.grid.cell(p).is_visited for p in visualizer.grid.coords())
    assert not visualizer.on_request_cancel()


def test_speed_change_applies_to_next_run_only(visualizer, clock, play_out):
    visualizer.on_request_search()
    ops = visualizer.last_result.operations
    visualizer.set_animation_speed(1000)
    assert visualizer.speed_ms == 1000

    # still on the 10ms pace
    clock.advance(10 * (len(ops) - 1))
    visualizer.tick()
    assert visualizer.current_operation == ops[-1]
    play_out(visualizer)

    visualizer.on_request_soft_reset()
    visualizer.on_request_search()
    clock.advance(999)
    visualizer.tick()
    assert visualizer.current_operation == visualizer.last_result.operations[0]


def test_speed_is_clamped(visualizer):
    visualizer.set_animation_speed(-5)
    assert visualizer.speed_ms >= 1
    visualizer.set_speed_preset("fast")
    assert visualizer.speed_ms == 150


# -----------------------------
# Resets & examples
# -----------------------------

def test_soft_and_hard_reset(visualizer, play_out):
    visualizer.on_cell_primary_action(1, 1)
    visualizer.on_request_search()
    play_out(visualizer)

    assert visualizer.on_request_soft_reset()
    assert visualizer.grid.cell((1, 1)).is_wall
    assert not any(visualizer.grid.cell(p).is_visited for p in visualizer.grid.coords())

    assert visualizer.on_request_hard_reset()
    assert visualizer.grid.walls() == []
    assert visualizer.last_metrics is None


def test_random_example(visualizer):
    assert visualizer.on_request_random_example()
    assert visualizer.end != visualizer.start
    assert not visualizer.grid.cell(visualizer.end).is_wall
    assert not visualizer.grid.cell(visualizer.start).is_wall


def test_snapshot_shape(visualizer):
    visualizer.on_request_search()
    visualizer.tick()
    snap = visualizer.snapshot()
    assert snap["status"] == "running"
    assert snap["running"] is True
    assert snap["current_operation"]["kind"] == "initialize"
    assert snap["grid"]["width"] == 3
    assert snap["start"] == [0, 0] and snap["end"] == [2, 2]


def test_invalid_marker_settings_rejected():
    with pytest.raises(ValueError):
        Visualizer(Settings(grid_columns=1, grid_rows=1))


@pytest.mark.parametrize("interval", [float("inf"), float("nan")])
def test_non_finite_speed_rejected(visualizer, play_out, interval):
    with pytest.raises(ValueError):
        visualizer.set_animation_speed(interval)
    assert visualizer.speed_ms == 10

    visualizer.on_request_search()
    play_out(visualizer)
    assert not visualizer.is_running
    assert visualizer.on_cell_primary_action(1, 1)


def test_huge_speed_is_capped(visualizer):
    visualizer.set_animation_speed(1e300)
    assert visualizer.speed_ms == MAX_INTERVAL_MS


def test_show_weights_allowed_while_running(visualizer):
    assert visualizer.show_weights
    visualizer.on_request_search()
    visualizer.set_show_weights(False)
    assert visualizer.snapshot()["show_weights"] is False


# -----------------------------
# Threads
# -----------------------------

def test_cancel_from_another_thread_waits_for_tick(visualizer, clock):
    visualizer.on_request_search()
    seen = {}

    def cancel_elsewhere():
        worker = threading.Thread(target=visualizer.on_request_cancel)
        worker.start()
        worker.join(timeout=0.2)
        seen["blocked"] = worker.is_alive()
        seen["worker"] = worker
        seen["running"] = visualizer.is_running

    # due together with record 0, after it
    visualizer.timers.call_at(clock.now, cancel_elsewhere)
    visualizer.tick()
    seen["worker"].join(timeout=5)

    assert seen["blocked"]
    assert seen["running"]
    assert not visualizer.is_running
    assert visualizer.timers.pending == 0

    op = visualizer.current_operation
    grid = visualizer.grid
    clock.advance(10000)
    visualizer.tick()
    assert visualizer.current_operation is op
    assert visualizer.grid is grid
