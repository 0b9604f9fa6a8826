import random

import pytest

from algorithms import OperationKind, dijkstra
from grid import INF, create_grid, toggle_wall

# -----------------------------
# Helpers
# -----------------------------

def brute_force_cost(grid, start, end):
    """Cheapest simple path by exhaustive DFS (small grids only)."""
    best = INF

    def walk(pos, cost, seen):
        nonlocal best
        if cost >= best:
            return
        if pos == end:
            best = cost
            return
        for nbr in grid.neighbours(pos):
            if nbr in seen or grid.cell(nbr).is_wall:
                continue
            seen.add(nbr)
            walk(nbr, cost + grid.cell(nbr).weight, seen)
            seen.discard(nbr)

    walk(start, 0, {start})
    return best


def random_grid(rng, size=3):
    start, end = (0, 0), (size - 1, size - 1)
    updates = {}
    for pos in create_grid(size, size).coords():
        if pos in (start, end):
            continue
        if rng.random() < 0.25:
            updates[pos] = {"is_wall": True}
        else:
            updates[pos] = {"weight": rng.randint(1, 5)}
    return create_grid(size, size).with_cells(updates), start, end


def path_is_connected(path, start):
    prev = start
    for pos in path:
        if abs(pos[0] - prev[0]) + abs(pos[1] - prev[1]) != 1:
            return False
        prev = pos
    return True


# -----------------------------
# Scenario
# -----------------------------

def test_open_3x3_scenario():
    grid = create_grid(3, 3)
    result = dijkstra(grid, (0, 0), (2, 2))

    assert result.found
    assert len(result.path) == 4
    assert result.path[-1] == (2, 2)
    assert (0, 0) not in result.path
    assert sum(grid.cell(p).weight for p in result.path) == 4
    assert result.total_distance == 4

    assert sorted(result.visited_order) == sorted(grid.coords())
    assert result.visited_order[-1] == (2, 2)

    found = [op for op in result.operations if op.kind == OperationKind.FOUND]
    assert len(found) == 1
    assert result.operations[-1] == found[0]
    assert result.operations[-2].kind == OperationKind.VISIT
    assert result.operations[-2].position == (2, 2)


def test_exact_log_for_two_cells():
    grid = create_grid(2, 1)
    result = dijkstra(grid, (0, 0), (1, 0))
    kinds = [op.kind.value for op in result.operations]
    assert kinds == [
        "initialize", "enqueue",
        "dequeue", "visit", "check", "update",
        "dequeue", "visit", "found",
    ]
    messages = [op.message for op in result.operations]
    assert messages[0] == "Setting start node distance to 0"
    assert messages[1] == "Enqueue start node with priority 0"
    assert messages[2] == "Dequeue node (0,0) with distance 0"
    assert messages[4] == "Checking neighbor (1,0), current: inf, new: 1"
    assert messages[5] == "Update distance to 1 and enqueue"
    assert messages[-1] == "End node found! Total distance: 1"
    assert result.path == [(1, 0)]


def test_log_structure_invariants():
    grid, start, end = random_grid(random.Random(3), size=5)
    result = dijkstra(grid, start, end)
    ops = result.operations

    assert ops[0].kind == OperationKind.INITIALIZE and ops[0].position == start
    assert ops[1].kind == OperationKind.ENQUEUE and ops[1].position == start
    for i, op in enumerate(ops):
        if op.kind in (OperationKind.VISIT, OperationKind.SKIP):
            assert ops[i - 1].kind == OperationKind.DEQUEUE
            assert ops[i - 1].position == op.position
        if op.kind == OperationKind.UPDATE:
            assert ops[i - 1].kind == OperationKind.CHECK
            assert ops[i - 1].position == op.position
    visits = [op.position for op in ops if op.kind == OperationKind.VISIT]
    assert visits == result.visited_order


# -----------------------------
# Correctness vs brute force
# -----------------------------

@pytest.mark.parametrize("seed", range(25))
def test_matches_brute_force_on_small_grids(seed):
    grid, start, end = random_grid(random.Random(seed))
    result = dijkstra(grid, start, end)
    expected = brute_force_cost(grid, start, end)

    if expected == INF:
        assert not result.found
        assert result.path == []
        return

    assert result.found
    assert result.total_distance == expected
    assert sum(grid.cell(p).weight for p in result.path) == expected
    assert path_is_connected(result.path, start)
    assert all(not grid.cell(p).is_wall for p in result.path)


@pytest.mark.parametrize("seed", range(10))
def test_monotonic_settlement(seed):
    grid, start, end = random_grid(random.Random(100 + seed), size=6)
    result = dijkstra(grid, start, end)
    order = result.visited_order
    assert len(order) == len(set(order))
    dists = [result.distances[p] for p in order]
    assert dists == sorted(dists)


def test_input_grid_is_not_mutated():
    grid = create_grid(4, 4)
    before = grid
    result = dijkstra(grid, (0, 0), (3, 3))
    assert grid == before
    assert grid.cell((3, 3)).distance == INF
    annotated = result.searched_grid
    assert annotated.cell((3, 3)).distance == 6
    assert annotated.cell((3, 3)).previous is not None


# -----------------------------
# Walls / unreachable
# -----------------------------

def test_walls_force_detour():
    grid = create_grid(3, 3)
    for pos in [(1, 0), (1, 1)]:
        grid = toggle_wall(grid, pos, (0, 0), (2, 0))
    result = dijkstra(grid, (0, 0), (2, 0))
    assert result.path == [(0, 1), (0, 2), (1, 2), (2, 2), (2, 1), (2, 0)]
    assert result.total_distance == 6


def test_weights_prefer_cheaper_route():
    grid = create_grid(3, 2).with_cells({(1, 0): {"weight": 5}})
    result = dijkstra(grid, (0, 0), (2, 0))
    assert result.path == [(0, 1), (1, 1), (2, 1), (2, 0)]
    assert result.total_distance == 4


def test_unreachable_end():
    grid = create_grid(3, 3)
    for pos in [(1, 2), (2, 1)]:
        grid = toggle_wall(grid, pos, (0, 0), (2, 2))
    result = dijkstra(grid, (0, 0), (2, 2))

    assert not result.found
    assert result.path == []
    assert (2, 2) not in result.visited_order
    assert result.total_distance == INF
    assert all(op.kind != OperationKind.FOUND for op in result.operations)
    assert len(result.visited_order) == 6


def test_walls_are_never_checked():
    grid = toggle_wall(create_grid(3, 1), (1, 0), (0, 0), (2, 0))
    result = dijkstra(grid, (0, 0), (2, 0))
    checked = {op.position for op in result.operations if op.kind == OperationKind.CHECK}
    assert (1, 0) not in checked
    assert not result.found


def test_start_outside_grid_raises():
    with pytest.raises(ValueError):
        dijkstra(create_grid(2, 2), (5, 5), (1, 1))
