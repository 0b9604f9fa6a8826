"""
priority_queue.py — Stable Min-Priority Queue
==============================================
A min-heap (heapq) over (priority, sequence, element).  The sequence
number makes ties pop in insertion order, which is exactly what a full
stable re-sort after every insert would give, so the operation log is
reproducible run to run.

Duplicate elements are allowed: the search pushes the same cell again
whenever it finds a shorter distance and discards the stale copies on
dequeue.
"""

import heapq
import itertools
from dataclasses import dataclass
from typing import Generic, List, Optional, Tuple, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class QueueEntry(Generic[T]):
    element:  T
    priority: float


class PriorityQueue(Generic[T]):

    def __init__(self):
        self._heap: List[Tuple[float, int, T]] = []
        self._counter = itertools.count()

    def enqueue(self, element: T, priority: float) -> None:
        heapq.heappush(self._heap, (priority, next(self._counter), element))

    def dequeue(self) -> Optional[QueueEntry[T]]:
        """Lowest priority first; None when empty (check is_empty() first)."""
        if not self._heap:
            return None
        priority, _, element = heapq.heappop(self._heap)
        return QueueEntry(element, priority)

    def is_empty(self) -> bool:
        return not self._heap

    def __len__(self) -> int:
        return len(self._heap)
