"""
cell.py — Grid Cell Value
==========================
One position on the board.  A Cell is a frozen value: every change
produces a new Cell via `evolve()`, so a Grid that holds it can be
shared safely between the editor, the search and the animation replay.

Attributes fall into two groups:

    persistent   – is_wall, weight            (survive soft resets)
    search state – distance, is_visited,
                   previous, is_path,
                   is_animating               (wiped by soft resets)
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Tuple

Coord = Tuple[int, int]   # (x, y): x is the column, y the row

INF = float("inf")
MIN_WEIGHT = 1
MAX_WEIGHT = 5


# ---------------------------------------------------------------------------
# Cell State Enum — what the renderer paints, in priority order
# ---------------------------------------------------------------------------
class CellState(Enum):
    EMPTY   = "empty"
    WALL    = "wall"
    VISITED = "visited"
    PATH    = "path"
    START   = "start"
    END     = "end"


@dataclass(frozen=True)
class Cell:
    is_wall:      bool            = False
    distance:     float           = INF
    is_visited:   bool            = False
    previous:     Optional[Coord] = None
    is_path:      bool            = False
    weight:       int             = MIN_WEIGHT
    is_animating: bool            = False

    def evolve(self, **changes) -> "Cell":
        return replace(self, **changes)

    def cleared(self) -> "Cell":
        """Drop search results, keep walls and weights."""
        return Cell(is_wall=self.is_wall, weight=self.weight)

    @property
    def passable(self) -> bool:
        return not self.is_wall

    @property
    def state(self) -> CellState:
        if self.is_wall:
            return CellState.WALL
        if self.is_path:
            return CellState.PATH
        if self.is_visited:
            return CellState.VISITED
        return CellState.EMPTY

    def next_weight(self) -> int:
        return (self.weight % MAX_WEIGHT) + 1

    def to_dict(self) -> dict:
        return {
            "wall":      self.is_wall,
            "distance":  None if self.distance == INF else self.distance,
            "visited":   self.is_visited,
            "previous":  list(self.previous) if self.previous else None,
            "path":      self.is_path,
            "weight":    self.weight,
            "animating": self.is_animating,
        }
