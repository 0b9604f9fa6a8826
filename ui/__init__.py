"""
ui/
---
Presentation layer.

    from ui import render_grid
    from ui import control_panel, operation_panel, analytics_panel, …
"""

from ui.canvas import render_grid, cell_state, CanvasConfig

from ui.controls import (
    control_panel,
    operation_panel,
    analytics_panel,
    pseudocode_viewer,
    legend_panel,
)

__all__ = [
    "render_grid",
    "cell_state",
    "CanvasConfig",
    "control_panel",
    "operation_panel",
    "analytics_panel",
    "pseudocode_viewer",
    "legend_panel",
]
