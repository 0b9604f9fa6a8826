"""
recorder.py — Run Analytics
============================
Turns a finished SearchResult into the numbers the Analytics panel
shows.

Usage:
    result  = dijkstra(grid, start, end)
    metrics = record_run(result, grid, wall_time_ms=0.8)
"""

from collections import Counter
from dataclasses import dataclass, asdict

from algorithms import OperationKind, SearchResult
from grid import Grid


@dataclass
class RunMetrics:
    nodes_visited:     int   = 0
    cells_checked:     int   = 0     # number of `check` records
    distance_updates:  int   = 0     # number of `update` records
    stale_skips:       int   = 0     # dequeued entries already settled
    path_length:       int   = 0     # cells on the path (Start excluded)
    path_cost:         int   = 0     # sum of path cell weights
    total_operations:  int   = 0
    wall_time_ms:      float = 0.0   # time spent inside the search
    path_found:        bool  = False

    def to_dict(self) -> dict:
        return asdict(self)


def record_run(result: SearchResult, grid: Grid, wall_time_ms: float = 0.0) -> RunMetrics:
    counts = Counter(op.kind for op in result.operations)
    return RunMetrics(
        nodes_visited=len(result.visited_order),
        cells_checked=counts[OperationKind.CHECK],
        distance_updates=counts[OperationKind.UPDATE],
        stale_skips=counts[OperationKind.SKIP],
        path_length=len(result.path),
        path_cost=sum(grid.cell(p).weight for p in result.path),
        total_operations=len(result.operations),
        wall_time_ms=round(wall_time_ms, 2),
        path_found=result.found,
    )
