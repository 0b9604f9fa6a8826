"""
grid.py — Grid Container & Edits
=================================
Single source of truth for the board.  The search, the animation
replay and the renderer all read this object; nobody mutates it.

Responsibilities:
  1. Cell access & geometry               (cell, in_bounds, neighbours)
  2. Copy-on-write updates                (with_cell, with_cells)
  3. User edits                           (toggle_wall, cycle_weight)
  4. Reset helpers                        (soft_reset, create_grid)
  5. Example generator                    (random_example)
  6. Serialisation for the UI             (to_dict)

Design decisions:
  - `cells` is a tuple of columns, `cells[x][y]`, so a Grid is hashable
    and compares by value.
  - Every edit returns a NEW Grid.  A rejected edit returns the very same
    object, so callers can test `new is old` to see if anything happened.
"""

import random
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

from grid.cell import Cell, Coord

# left, right, up, down
NEIGHBOUR_OFFSETS: Tuple[Coord, ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))

# weight → cumulative probability for random examples
WEIGHT_DISTRIBUTION: Tuple[Tuple[int, float], ...] = (
    (1, 0.60),
    (2, 0.80),
    (3, 0.90),
    (4, 0.95),
    (5, 1.00),
)


@dataclass(frozen=True)
class Grid:
    """
    Attributes:
        width  : number of columns (x range).
        height : number of rows (y range).
        cells  : tuple of columns, each a tuple of Cells.
    """

    width:  int
    height: int
    cells:  Tuple[Tuple[Cell, ...], ...]

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------
    def in_bounds(self, pos: Coord) -> bool:
        x, y = pos
        return 0 <= x < self.width and 0 <= y < self.height

    def cell(self, pos: Coord) -> Cell:
        if not self.in_bounds(pos):
            raise IndexError(f"Cell {pos} outside {self.width}x{self.height} grid")
        x, y = pos
        return self.cells[x][y]

    def __getitem__(self, pos: Coord) -> Cell:
        return self.cell(pos)

    def neighbours(self, pos: Coord) -> List[Coord]:
        """In-bounds axis-aligned neighbours, in search order."""
        x, y = pos
        out = []
        for dx, dy in NEIGHBOUR_OFFSETS:
            n = (x + dx, y + dy)
            if self.in_bounds(n):
                out.append(n)
        return out

    def coords(self) -> Iterator[Coord]:
        for x in range(self.width):
            for y in range(self.height):
                yield (x, y)

    # ------------------------------------------------------------------
    # Copy-on-write
    # ------------------------------------------------------------------
    def with_cell(self, pos: Coord, **changes) -> "Grid":
        return self.with_cells({pos: changes})

    def with_cells(self, updates: Dict[Coord, dict]) -> "Grid":
        """Apply {pos: field_changes} in one copy; untouched columns are shared."""
        if not updates:
            return self
        columns = list(self.cells)
        by_column: Dict[int, Dict[int, dict]] = {}
        for pos, changes in updates.items():
            self.cell(pos)   # bounds check
            by_column.setdefault(pos[0], {})[pos[1]] = changes
        for x, rows in by_column.items():
            column = list(columns[x])
            for y, changes in rows.items():
                column[y] = column[y].evolve(**changes)
            columns[x] = tuple(column)
        return Grid(self.width, self.height, tuple(columns))

    def map_cells(self, fn) -> "Grid":
        return Grid(
            self.width,
            self.height,
            tuple(tuple(fn(c) for c in column) for column in self.cells),
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def walls(self) -> List[Coord]:
        return [p for p in self.coords() if self.cell(p).is_wall]

    def layout(self) -> Tuple[Tuple[Tuple[bool, int], ...], ...]:
        """(is_wall, weight) per cell: the part a soft reset must keep."""
        return tuple(tuple((c.is_wall, c.weight) for c in column) for column in self.cells)

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------
    def to_dict(self) -> dict:
        return {
            "width":  self.width,
            "height": self.height,
            "cells":  [[c.to_dict() for c in column] for column in self.cells],
        }

    def __repr__(self) -> str:
        return f"Grid({self.width}x{self.height}, walls={len(self.walls())})"


# ======================================================================
# Module-level operations (pure)
# ======================================================================
def create_grid(width: int, height: int) -> Grid:
    if width <= 0 or height <= 0:
        raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")
    column = tuple(Cell() for _ in range(height))
    return Grid(width, height, tuple(column for _ in range(width)))


def soft_reset(grid: Grid) -> Grid:
    """Independent copy with the same walls/weights and no search results."""
    return grid.map_cells(Cell.cleared)


def toggle_wall(grid: Grid, pos: Coord, start: Coord, end: Coord) -> Grid:
    if pos == start or pos == end:
        return grid
    return grid.with_cell(pos, is_wall=not grid.cell(pos).is_wall)


def cycle_weight(grid: Grid, pos: Coord, start: Coord, end: Coord) -> Grid:
    if pos == start or pos == end:
        return grid
    cell = grid.cell(pos)
    if cell.is_wall:
        return grid
    return grid.with_cell(pos, weight=cell.next_weight())


def can_place_end(grid: Grid, pos: Coord, start: Coord) -> bool:
    """End may only land on an in-bounds, non-wall cell other than Start."""
    return grid.in_bounds(pos) and pos != start and not grid.cell(pos).is_wall


def _random_weight(rng: random.Random) -> int:
    roll = rng.random()
    for weight, threshold in WEIGHT_DISTRIBUTION:
        if roll < threshold:
            return weight
    return WEIGHT_DISTRIBUTION[-1][0]


def random_example(
    width: int,
    height: int,
    start: Coord,
    rng: Optional[random.Random] = None,
    wall_probability: float = 0.3,
) -> Tuple[Grid, Coord]:
    """
    Fresh grid with random walls and weights plus a random End.

    Start is never walled.  End is redrawn until it lands on a non-wall
    cell distinct from Start.
    """
    if width * height < 2:
        raise ValueError("Need at least two cells to place Start and End")
    rng = rng or random.Random()
    grid = create_grid(width, height)

    updates: Dict[Coord, dict] = {}
    for pos in grid.coords():
        if pos != start and rng.random() < wall_probability:
            updates[pos] = {"is_wall": True}
    for pos in grid.coords():
        if pos not in updates:
            updates[pos] = {"weight": _random_weight(rng)}
    grid = grid.with_cells(updates)

    # every cell could be a wall except start; keep one free so End can land
    if all(grid.cell(p).is_wall for p in grid.coords() if p != start):
        fallback = next(p for p in grid.coords() if p != start)
        grid = grid.with_cell(fallback, is_wall=False)

    while True:
        end = (rng.randrange(width), rng.randrange(height))
        if can_place_end(grid, end, start):
            return grid, end
