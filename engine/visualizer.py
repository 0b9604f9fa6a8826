"""
visualizer.py — Visualizer Session State
=========================================
The one object the web layer talks to.  It bundles everything a
session owns (grid, Start, End, speed, the last search) and enforces
the editing policy:

    IDLE     – edits, resets, examples and searches are accepted
    RUNNING  – all of the above are ignored (return False); only
               cancel() and speed changes go through

Every request method returns True if it changed something and False if
it was rejected.  Rejections are policy, not errors.

After a visualization completes the board still shows the visited /
path cells.  The next accepted edit wipes them first (`reset_required`).

Threading:
  The web server handles requests on several threads, and a poll that
  runs due ticks can overlap a cancel or an edit for the same session.
  Every public method holds `lock` (reentrant) for its whole body, so a
  tick and a cancel are never interleaved.
"""

import functools
import logging
import random
import threading
import time
from typing import Optional, Set

from algorithms import DEFAULT_ALGORITHM, Operation, SearchResult, get_algorithm
from engine.recorder import RunMetrics, record_run
from engine.scheduler import AnimationScheduler, SchedulerState, SPEED_PRESETS, clamp_interval
from engine.timers import TimerQueue
from grid import (
    Coord,
    Grid,
    can_place_end,
    create_grid,
    cycle_weight,
    random_example,
    soft_reset,
    toggle_wall,
)
from settings import Settings

_logger = logging.getLogger(__name__)


def synchronized(method):
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self.lock:
            return method(self, *args, **kwargs)
    return wrapper


class Visualizer:
    """
    Attributes:
        grid           : Current grid snapshot (replaced, never mutated).
        start, end     : Marker coordinates.
        speed_ms       : Interval between replayed records for the NEXT run.
        show_weights   : Whether the board draws weight labels.
        reset_required : True after a completed run until the board is cleared.
        last_result    : SearchResult of the most recent run.
        last_metrics   : RunMetrics of the most recent run.
        lock           : Held by every public method.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        timers: Optional[TimerQueue] = None,
        rng: Optional[random.Random] = None,
    ):
        self.settings = settings or Settings()
        self.timers = timers or TimerQueue()
        self.rng = rng or random.Random(self.settings.random_seed)
        self.lock = threading.RLock()

        self.grid: Grid = create_grid(self.settings.grid_columns, self.settings.grid_rows)
        self.start: Coord = self.settings.start
        self.end: Coord = self.settings.default_end
        if not self.grid.in_bounds(self.start) or not self.grid.in_bounds(self.end) or self.start == self.end:
            raise ValueError(f"Invalid start {self.start} / end {self.end} for {self.grid}")

        self.speed_ms: float = clamp_interval(self.settings.interval_ms)
        self.show_weights: bool = True
        self.reset_required: bool = False
        self.last_result: Optional[SearchResult] = None
        self.last_metrics: Optional[RunMetrics] = None

        self.scheduler = AnimationScheduler(
            self.timers,
            on_change=self._on_replay_change,
            on_complete=self._on_replay_complete,
            pulse_ms=self.settings.pulse_ms,
            path_gap_ms=self.settings.path_gap_ms,
        )

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------
    @property
    def status(self) -> SchedulerState:
        return self.scheduler.state

    @property
    def is_running(self) -> bool:
        return self.scheduler.is_running

    @property
    def current_operation(self) -> Optional[Operation]:
        return self.scheduler.current_operation

    @property
    def animating(self) -> Set[Coord]:
        return set(self.scheduler.animating)

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------
    @synchronized
    def on_cell_primary_action(self, x: int, y: int, move_end: bool = False, cycle_weight_mode: bool = False) -> bool:
        """Move End > cycle weight > toggle wall."""
        if self._reject("cell action"):
            return False
        pos = (x, y)
        if not self.grid.in_bounds(pos):
            return False

        if move_end:
            if not can_place_end(self.grid, pos, self.start) or pos == self.end:
                return False
            self.end = pos
            self._clear_previous_run()
            return True

        if cycle_weight_mode:
            new_grid = cycle_weight(self.grid, pos, self.start, self.end)
        else:
            new_grid = toggle_wall(self.grid, pos, self.start, self.end)
        if new_grid is self.grid:
            return False
        self.grid = new_grid
        self._clear_previous_run()
        return True

    @synchronized
    def on_request_soft_reset(self) -> bool:
        if self._reject("soft reset"):
            return False
        self.grid = soft_reset(self.grid)
        self.reset_required = False
        return True

    @synchronized
    def on_request_hard_reset(self) -> bool:
        if self._reject("hard reset"):
            return False
        self.grid = create_grid(self.grid.width, self.grid.height)
        self.reset_required = False
        self.last_result = None
        self.last_metrics = None
        return True

    @synchronized
    def on_request_random_example(self) -> bool:
        if self._reject("random example"):
            return False
        self.grid, self.end = random_example(
            self.grid.width,
            self.grid.height,
            self.start,
            rng=self.rng,
            wall_probability=self.settings.wall_probability,
        )
        self.reset_required = False
        _logger.info("random example loaded, end=%s, %d walls", self.end, len(self.grid.walls()))
        return True

    @synchronized
    def set_animation_speed(self, interval_ms: float) -> None:
        """
        Applies to the next run; an animation in flight keeps its pace.
        Out-of-range values are clamped.  Raises ValueError for NaN or
        infinity.
        """
        self.speed_ms = clamp_interval(interval_ms)

    @synchronized
    def set_speed_preset(self, preset: str) -> None:
        self.set_animation_speed(SPEED_PRESETS.get(preset, SPEED_PRESETS["medium"]))

    @synchronized
    def set_show_weights(self, show: bool) -> None:
        """Display only, so it is accepted while running too."""
        self.show_weights = bool(show)

    # ------------------------------------------------------------------
    # Search + animation
    # ------------------------------------------------------------------
    @synchronized
    def on_request_search(self) -> bool:
        if self._reject("search"):
            return False
        algo = get_algorithm(DEFAULT_ALGORITHM)
        board = soft_reset(self.grid)

        t0 = time.perf_counter()
        result = algo.fn(board, self.start, self.end)
        wall_ms = (time.perf_counter() - t0) * 1000

        self.grid = board
        self.reset_required = False
        self.last_result = result
        self.last_metrics = record_run(result, board, wall_ms)
        _logger.info(
            "search %s -> %s: %d operations, path %s",
            self.start, self.end, len(result.operations),
            len(result.path) if result.found else "not found",
        )
        self.scheduler.start(board, result.operations, result.path, self.speed_ms)
        return True

    @synchronized
    def on_request_cancel(self) -> bool:
        if not self.is_running:
            return False
        self.scheduler.cancel()
        self.reset_required = True
        _logger.info("visualization cancelled")
        return True

    @synchronized
    def tick(self, now: Optional[float] = None) -> int:
        """Run every due animation tick.  Call from the host loop / each poll."""
        return self.timers.run_due(now)

    # ------------------------------------------------------------------
    # Read-only view
    # ------------------------------------------------------------------
    @synchronized
    def snapshot(self) -> dict:
        op = self.current_operation
        return {
            "status":            self.status.value,
            "running":           self.is_running,
            "start":             list(self.start),
            "end":               list(self.end),
            "speed_ms":          self.speed_ms,
            "show_weights":      self.show_weights,
            "reset_required":    self.reset_required,
            "current_operation": op.to_dict() if op else None,
            "animating":         sorted([list(p) for p in self.scheduler.animating]),
            "metrics":           self.last_metrics.to_dict() if self.last_metrics else None,
            "grid":              self.grid.to_dict(),
        }

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _reject(self, what: str) -> bool:
        if self.is_running:
            _logger.debug("ignored %s while running", what)
            return True
        return False

    def _clear_previous_run(self) -> None:
        if self.reset_required:
            self.grid = soft_reset(self.grid)
            self.reset_required = False

    def _on_replay_change(self, grid: Grid) -> None:
        self.grid = grid

    def _on_replay_complete(self) -> None:
        self.reset_required = True
        _logger.info("visualization complete")
