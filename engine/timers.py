"""
timers.py — Cooperative Timer Queue
====================================
A tiny single-threaded event loop: callbacks are registered with a delay
and fire when the host calls `run_due()`.  The web app calls it on every
state poll; tests drive it with a manual clock.

Ordering:
  Callbacks fire by (due time, registration order).  A callback that
  schedules another one which is already due (delay 0, or a late poll)
  sees it fire within the same `run_due()` call, after itself.

Cancellation:
  `cancel()` flags the handle; flagged handles are dropped when they
  reach the front of the heap and never fire.
"""

import heapq
import itertools
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


@dataclass(eq=False)
class TimerHandle:
    due:       float
    callback:  Callable[[], None] = field(repr=False)
    cancelled: bool = False
    fired:     bool = False

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.fired)


class TimerQueue:
    """
    Attributes:
        clock : zero-arg callable returning the current time in milliseconds.
    """

    def __init__(self, clock: Optional[Callable[[], float]] = None):
        self.clock = clock or monotonic_ms
        self._heap: List[Tuple[float, int, TimerHandle]] = []
        self._counter = itertools.count()

    def now(self) -> float:
        return self.clock()

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle(due=self.now() + max(0.0, delay_ms), callback=callback)
        heapq.heappush(self._heap, (handle.due, next(self._counter), handle))
        return handle

    def call_at(self, due_ms: float, callback: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle(due=due_ms, callback=callback)
        heapq.heappush(self._heap, (handle.due, next(self._counter), handle))
        return handle

    def cancel(self, handle: TimerHandle) -> None:
        handle.cancelled = True

    def run_due(self, now: Optional[float] = None) -> int:
        """Fire every callback due at `now` (default: clock()).  Returns how many fired."""
        now = self.now() if now is None else now
        fired = 0
        while self._heap and self._heap[0][0] <= now:
            _, _, handle = heapq.heappop(self._heap)
            if handle.cancelled:
                continue
            handle.fired = True
            handle.callback()
            fired += 1
        return fired

    @property
    def pending(self) -> int:
        return sum(1 for _, _, h in self._heap if h.pending)

    def next_due(self) -> Optional[float]:
        for due, _, handle in sorted(self._heap):
            if handle.pending:
                return due
        return None
