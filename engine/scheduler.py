"""
scheduler.py — Animation Scheduler
===================================
Replays a search's operation log, then its path, on the timer queue.
The scheduler owns the replay grid and every pending timer handle.

Timeline for a log of N records at `interval` ms:

    record i            at  origin + i * interval
      pulse off         at  that time + pulse_ms
    path segment j      at  origin + N * interval + path_gap_ms + j * interval
      pulse off         at  that time + pulse_ms   (last one → complete)
    empty path          →   complete at origin + N * interval + path_gap_ms

State machine:
    IDLE     →  start()              →  RUNNING
    RUNNING  →  last pulse cleared   →  IDLE   (on_complete fires)
    RUNNING  →  cancel() / start()   →  IDLE   (no completion signal)

Every grid change replaces `self.grid` wholesale and is reported to
`on_change`, so observers never see a half-updated grid.
"""

import logging
import math
from enum import Enum
from typing import Callable, Dict, List, Optional, Set

from algorithms.operation import Operation, OperationKind, PULSING_KINDS, path_operation
from grid import Coord, Grid
from engine.timers import TimerHandle, TimerQueue

_logger = logging.getLogger(__name__)


class SchedulerState(Enum):
    IDLE    = "idle"
    RUNNING = "running"


# ---------------------------------------------------------------------------
# Speed presets (milliseconds per record)
# ---------------------------------------------------------------------------
SPEED_PRESETS = {
    "slow":   1000,   # teaching mode
    "medium": 400,
    "fast":   150,    # demo mode
    "turbo":  20,
}

PULSE_MS = 300
PATH_GAP_MS = 100
MIN_INTERVAL_MS = 1
MAX_INTERVAL_MS = 10000


def clamp_interval(interval_ms: float) -> float:
    """Clamp into [MIN_INTERVAL_MS, MAX_INTERVAL_MS]; NaN and infinities raise."""
    if not math.isfinite(interval_ms):
        raise ValueError(f"Animation interval must be a finite number, got {interval_ms!r}")
    return min(MAX_INTERVAL_MS, max(MIN_INTERVAL_MS, interval_ms))


class AnimationScheduler:
    """
    Attributes:
        state             : Current SchedulerState.
        grid              : Replay grid (None before the first start()).
        current_operation : Most recent record shown (log record or path segment).
        animating         : Cells currently pulsing.
        on_change         : Optional callback(Grid) after every grid replacement.
        on_complete       : Optional callback() when a run plays out fully.
    """

    def __init__(
        self,
        timers: TimerQueue,
        on_change: Optional[Callable[[Grid], None]] = None,
        on_complete: Optional[Callable[[], None]] = None,
        pulse_ms: float = PULSE_MS,
        path_gap_ms: float = PATH_GAP_MS,
    ):
        self.timers = timers
        self.on_change = on_change
        self.on_complete = on_complete
        self.pulse_ms = pulse_ms
        self.path_gap_ms = path_gap_ms

        self.state: SchedulerState = SchedulerState.IDLE
        self.grid: Optional[Grid] = None
        self.current_operation: Optional[Operation] = None
        self.animating: Set[Coord] = set()
        self._handles: List[TimerHandle] = []
        self._pulse_owner: Dict[Coord, int] = {}
        self._pulse_seq = 0

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def start(self, grid: Grid, operations: List[Operation], path: List[Coord], interval_ms: float) -> None:
        """Cancel whatever is in flight, then schedule the whole replay."""
        interval = clamp_interval(interval_ms)
        self.cancel()
        origin = self.timers.now()

        self.grid = grid
        self.current_operation = None
        self.state = SchedulerState.RUNNING

        for i, op in enumerate(operations):
            self._at(origin + i * interval, self._operation_tick(op, origin + i * interval))

        path_start = origin + len(operations) * interval + self.path_gap_ms
        for j, pos in enumerate(path):
            due = path_start + j * interval
            last = j == len(path) - 1
            self._at(due, self._path_tick(pos, j, len(path), due, last))

        if not path:
            self._at(path_start, self._finish)

        _logger.debug(
            "scheduled %d records + %d path cells at %sms/record",
            len(operations), len(path), interval,
        )

    def cancel(self) -> None:
        """Drop every pending tick in one step and return to IDLE."""
        if self.state == SchedulerState.RUNNING:
            _logger.debug("animation cancelled with %d ticks pending", self.pending)
        self._drop_pending()
        self.state = SchedulerState.IDLE

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------
    @property
    def is_running(self) -> bool:
        return self.state == SchedulerState.RUNNING

    @property
    def pending(self) -> int:
        return sum(1 for h in self._handles if h.pending)

    # ------------------------------------------------------------------
    # Ticks
    # ------------------------------------------------------------------
    def _operation_tick(self, op: Operation, due: float) -> Callable[[], None]:
        def fire():
            self.current_operation = op
            if op.kind not in PULSING_KINDS:
                return
            changes = {"is_animating": True}
            if op.kind == OperationKind.VISIT:
                changes["is_visited"] = True
            token = self._pulse_on(op.position, changes)
            self._at(due + self.pulse_ms, lambda: self._pulse_off(op.position, token))
        return fire

    def _path_tick(self, pos: Coord, index: int, total: int, due: float, last: bool) -> Callable[[], None]:
        def fire():
            self.current_operation = path_operation(pos, index, total)
            token = self._pulse_on(pos, {"is_path": True, "is_animating": True})

            def off():
                self._pulse_off(pos, token)
                if last:
                    self._finish()

            self._at(due + self.pulse_ms, off)
        return fire

    def _pulse_on(self, pos: Coord, changes: dict) -> int:
        self._pulse_seq += 1
        self._pulse_owner[pos] = self._pulse_seq
        self.animating.add(pos)
        self._replace(self.grid.with_cell(pos, **changes))
        return self._pulse_seq

    def _pulse_off(self, pos: Coord, token: int) -> None:
        # a newer pulse on the same cell owns the highlight until its own off
        if self._pulse_owner.get(pos) != token:
            return
        del self._pulse_owner[pos]
        self.animating.discard(pos)
        self._replace(self.grid.with_cell(pos, is_animating=False))

    def _finish(self) -> None:
        # short intervals can leave log pulses running past an empty path
        self._drop_pending()
        self.state = SchedulerState.IDLE
        if self.on_complete:
            self.on_complete()

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _drop_pending(self) -> None:
        for handle in self._handles:
            self.timers.cancel(handle)
        self._handles = []
        if self.animating and self.grid is not None:
            self._replace(self.grid.with_cells({p: {"is_animating": False} for p in self.animating}))
        self.animating = set()
        self._pulse_owner = {}

    def _at(self, due: float, callback: Callable[[], None]) -> None:
        self._handles.append(self.timers.call_at(due, callback))

    def _replace(self, grid: Grid) -> None:
        self.grid = grid
        if self.on_change:
            self.on_change(grid)
