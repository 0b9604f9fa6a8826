"""
grid/
-----
Core data layer.  Public API:

    from grid import Grid, Cell, CellState, Coord
    from grid import create_grid, soft_reset, toggle_wall, cycle_weight
"""

from grid.cell import Cell, CellState, Coord, INF, MIN_WEIGHT, MAX_WEIGHT
from grid.grid import (
    Grid,
    create_grid,
    soft_reset,
    toggle_wall,
    cycle_weight,
    can_place_end,
    random_example,
)

__all__ = [
    "Cell",        "CellState",   "Coord",
    "INF",         "MIN_WEIGHT",  "MAX_WEIGHT",
    "Grid",
    "create_grid", "soft_reset",  "toggle_wall",
    "cycle_weight", "can_place_end", "random_example",
]
