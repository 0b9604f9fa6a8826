"""
dijkstra.py — Dijkstra's Shortest Path on a Weighted Grid
==========================================================
Runs to completion in one call and returns a SearchResult holding:

  • visited_order – cells in the order they were settled
  • path          – cells from the one after Start up to End (inclusive)
  • operations    – the full operation log for replay
  • distances     – final best-known distance per reached cell
  • found         – True when End was settled

Moving onto a cell costs that cell's weight.  Walls are impassable.
Decreased distances are handled by pushing the cell again and skipping
the stale copy when it is dequeued (no decrease-key).

Correctness note: weights are positive, so the first time End is
dequeued its distance is final and the search stops there.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from grid import Coord, Grid, INF, soft_reset
from algorithms.operation import Operation, OperationKind, OperationLog
from algorithms.priority_queue import PriorityQueue

_logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Pseudocode (served to the "view source" popup)
# ---------------------------------------------------------------------------
PSEUDOCODE: List[str] = [
    "def dijkstra(grid, start, end):",
    "    dist[start] ← 0",
    "    pq.enqueue(start, 0)",
    "    while pq is not empty:",
    "        node ← pq.dequeue()",
    "        if node.visited: continue",
    "        node.visited ← True",
    "        if node == end: break",
    "        for nbr in (left, right, up, down):",
    "            if nbr in bounds and not visited and not wall:",
    "                new_dist ← dist[node] + nbr.weight",
    "                if new_dist < dist[nbr]:",
    "                    dist[nbr] ← new_dist",
    "                    nbr.previous ← node",
    "                    pq.enqueue(nbr, new_dist)",
    "    return path(end → start via previous)",
]

# operation kind → pseudocode line it corresponds to
OPERATION_LINES: Dict[OperationKind, int] = {
    OperationKind.INITIALIZE: 1,
    OperationKind.ENQUEUE:    2,
    OperationKind.DEQUEUE:    4,
    OperationKind.SKIP:       5,
    OperationKind.VISIT:      6,
    OperationKind.FOUND:      7,
    OperationKind.CHECK:      10,
    OperationKind.UPDATE:     12,
    OperationKind.PATH:       15,
}


@dataclass
class SearchResult:
    visited_order: List[Coord]        = field(default_factory=list)
    path:          List[Coord]        = field(default_factory=list)
    operations:    List[Operation]    = field(default_factory=list)
    distances:     Dict[Coord, float] = field(default_factory=dict)
    found:         bool               = False
    searched_grid: Optional[Grid]     = None

    @property
    def total_distance(self) -> float:
        """Distance to End, or INF when End was never reached."""
        if not self.found:
            return INF
        return self.distances[self.path[-1]] if self.path else 0


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------
def dijkstra(grid: Grid, start: Coord, end: Coord) -> SearchResult:
    """Search `grid` (unchanged) from start to end."""
    if not grid.in_bounds(start) or not grid.in_bounds(end):
        raise ValueError(f"Start {start} / end {end} outside the grid")

    log = OperationLog()
    pq: PriorityQueue[Coord] = PriorityQueue()
    dist: Dict[Coord, float] = {start: 0}
    previous: Dict[Coord, Coord] = {}
    visited: set = set()
    visited_order: List[Coord] = []
    found = False

    log.initialize(start)
    pq.enqueue(start, 0)
    log.enqueue(start, 0)

    while not pq.is_empty():
        node = pq.dequeue().element
        log.dequeue(node, dist.get(node, INF))

        # stale entry
        if node in visited:
            log.skip(node)
            continue

        visited.add(node)
        visited_order.append(node)
        log.visit(node, dist[node])

        if node == end:
            log.found(node, dist[node])
            found = True
            break

        for nbr in grid.neighbours(node):
            if nbr in visited or grid.cell(nbr).is_wall:
                continue
            current = dist.get(nbr, INF)
            candidate = dist[node] + grid.cell(nbr).weight
            log.check(nbr, current, candidate)
            if candidate < current:
                dist[nbr] = candidate
                previous[nbr] = node
                pq.enqueue(nbr, candidate)
                log.update(nbr, candidate)

    path = _reconstruct(previous, start, end) if found else []

    _logger.debug(
        "dijkstra %s -> %s: %d settled, %d operations, found=%s",
        start, end, len(visited_order), len(log), found,
    )

    return SearchResult(
        visited_order=visited_order,
        path=path,
        operations=log.build(),
        distances=dist,
        found=found,
        searched_grid=_annotate(grid, dist, previous),
    )


# ---------------------------------------------------------------------------
def _reconstruct(previous: Dict[Coord, Coord], start: Coord, end: Coord) -> List[Coord]:
    """Follow back-pointers End → Start; Start itself is excluded."""
    path: List[Coord] = []
    cur: Optional[Coord] = end
    while cur is not None and cur != start:
        path.append(cur)
        cur = previous.get(cur)
    if cur is None:
        # chain broke before reaching Start
        return []
    path.reverse()
    return path


def _annotate(grid: Grid, dist: Dict[Coord, float], previous: Dict[Coord, Coord]) -> Grid:
    updates = {
        pos: {"distance": d, "previous": previous.get(pos)}
        for pos, d in dist.items()
    }
    return soft_reset(grid).with_cells(updates)
