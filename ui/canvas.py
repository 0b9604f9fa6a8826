"""
canvas.py — SVG Grid Renderer
==============================
Pure rendering function: Grid + markers → SVG string.

Design decisions:
  - NO mutation.  The caller passes in a grid snapshot and gets back a
    string; the same snapshot always renders the same SVG.
  - Cell colour is a dict lookup on CellState, with Start / End drawn
    over everything and pulsing cells outlined on top.
  - Each <rect> carries data-x / data-y so the page can map clicks back
    to grid coordinates.
"""

from typing import Dict, Optional

from grid import Cell, CellState, Coord, Grid, MIN_WEIGHT


# ---------------------------------------------------------------------------
# Visual Config — colours, sizes
# ---------------------------------------------------------------------------
class CanvasConfig:
    tile:      int = 30
    gap:       int = 1
    bg:        str = "#0d1117"

    cell_colors: Dict[str, str] = {
        "empty":   "#1c2128",
        "wall":    "#010409",
        "visited": "#0ea5e9",
        "path":    "#f59e0b",
        "start":   "#10b981",
        "end":     "#f43f5e",
    }

    # weight → fill for unvisited cells (heavier = warmer)
    weight_colors: Dict[int, str] = {
        1: "#1c2128",
        2: "#3b2f1e",
        3: "#4d3a1f",
        4: "#634620",
        5: "#7c5522",
    }

    pulse_stroke:      str = "#06b6d4"
    pulse_stroke_width: int = 3
    weight_text_color: str = "#e6edf3"
    weight_text_size:  int = 12


CONFIG = CanvasConfig()


def render_grid(
    grid: Grid,
    start: Coord,
    end: Coord,
    config: CanvasConfig = CONFIG,
    show_weights: bool = True,
) -> str:
    """Returns an SVG string for the whole board."""
    width = grid.width * config.tile
    height = grid.height * config.tile
    parts = [
        f'<svg id="grid-svg" width="{width}" height="{height}" '
        f'viewBox="0 0 {width} {height}" xmlns="http://www.w3.org/2000/svg">',
        f'<rect width="{width}" height="{height}" fill="{config.bg}"/>',
    ]
    for pos in grid.coords():
        parts.append(_render_cell(pos, grid.cell(pos), start, end, config, show_weights))
    parts.append("</svg>")
    return "\n".join(parts)


def cell_state(pos: Coord, cell: Cell, start: Coord, end: Coord) -> CellState:
    if pos == start:
        return CellState.START
    if pos == end:
        return CellState.END
    return cell.state


def _fill(state: CellState, cell: Cell, config: CanvasConfig) -> str:
    if state == CellState.EMPTY:
        return config.weight_colors.get(cell.weight, config.cell_colors["empty"])
    return config.cell_colors[state.value]


def _render_cell(
    pos: Coord,
    cell: Cell,
    start: Coord,
    end: Coord,
    config: CanvasConfig,
    show_weights: bool,
) -> str:
    x, y = pos
    state = cell_state(pos, cell, start, end)
    px, py = x * config.tile, y * config.tile
    size = config.tile - config.gap

    stroke = ""
    if cell.is_animating:
        stroke = f' stroke="{config.pulse_stroke}" stroke-width="{config.pulse_stroke_width}"'

    parts = [
        f'<rect class="cell {state.value}{" animating" if cell.is_animating else ""}" '
        f'data-x="{x}" data-y="{y}" x="{px}" y="{py}" width="{size}" height="{size}" '
        f'fill="{_fill(state, cell, config)}"{stroke}/>'
    ]

    label: Optional[str] = None
    if show_weights and state not in (CellState.WALL, CellState.START, CellState.END) and cell.weight > MIN_WEIGHT:
        label = str(cell.weight)
    if label:
        parts.append(
            f'<text x="{px + size / 2}" y="{py + size / 2 + 4}" text-anchor="middle" '
            f'font-size="{config.weight_text_size}" fill="{config.weight_text_color}" '
            f'font-weight="700" pointer-events="none">{label}</text>'
        )
    return "\n".join(parts)
