"""
controls.py — UI Control Panels
=================================
Every panel is a pure function that takes state and returns HTML.

Panels:
  • control_panel     – visualize / reset / clear / random / speed
  • operation_panel   – the record being replayed right now
  • analytics_panel   – counts for the last run
  • pseudocode_viewer – with live line highlighting
  • legend_panel      – colour key and mouse bindings
"""

from html import escape
from typing import List, Optional

from algorithms import Operation, OperationKind
from engine import RunMetrics, SPEED_PRESETS


# ---------------------------------------------------------------------------
# Controls
# ---------------------------------------------------------------------------
def control_panel(is_running: bool = False, speed_ms: float = 1000, show_weights: bool = True) -> str:
    disabled = "disabled" if is_running else ""
    checked = "checked" if show_weights else ""
    options = []
    for name, ms in SPEED_PRESETS.items():
        sel = "selected" if ms == speed_ms else ""
        options.append(f'<option value="{ms}" {sel}>{name.title()} ({ms} ms)</option>')
    return f"""
    <div class="panel controls">
      <h3>Controls</h3>
      <div class="button-row">
        <button id="btn-search" class="btn-primary" {disabled}>Visualize</button>
        <button id="btn-cancel" class="btn-secondary" {'' if is_running else 'disabled'}>Stop</button>
      </div>
      <div class="button-row">
        <button id="btn-soft-reset" class="btn-secondary" {disabled}>Reset Grid</button>
        <button id="btn-hard-reset" class="btn-secondary" {disabled}>Clear All</button>
        <button id="btn-random" class="btn-secondary" {disabled}>Random Maze</button>
      </div>
      <label for="speed-selector">Speed</label>
      <select id="speed-selector">
        {''.join(options)}
      </select>
      <label class="toggle"><input type="checkbox" id="toggle-weights" {checked}> Show weights</label>
      <div class="button-row">
        <button id="btn-source" class="btn-secondary">View Source</button>
      </div>
    </div>
    """


# ---------------------------------------------------------------------------
# Current operation
# ---------------------------------------------------------------------------
OPERATION_COLORS = {
    OperationKind.INITIALIZE: "#a855f7",
    OperationKind.ENQUEUE:    "#10b981",
    OperationKind.DEQUEUE:    "#f59e0b",
    OperationKind.SKIP:       "#7d8590",
    OperationKind.VISIT:      "#0ea5e9",
    OperationKind.CHECK:      "#7d8590",
    OperationKind.UPDATE:     "#f97316",
    OperationKind.FOUND:      "#f43f5e",
    OperationKind.PATH:       "#f59e0b",
}


def operation_panel(operation: Optional[Operation] = None) -> str:
    if not operation:
        return '<div class="panel operation-panel"><p class="placeholder">Idle.</p></div>'
    x, y = operation.position
    color = OPERATION_COLORS.get(operation.kind, "#7d8590")
    return f"""
    <div class="panel operation-panel">
      <span class="badge" style="border-color: {color}; color: {color};">{operation.kind.value.upper()}</span>
      <span class="position">Position: ({x}, {y})</span>
      <p>{escape(operation.message)}</p>
    </div>
    """


# ---------------------------------------------------------------------------
# Analytics
# ---------------------------------------------------------------------------
def analytics_panel(metrics: Optional[RunMetrics] = None) -> str:
    if not metrics:
        return """
        <div class="panel analytics-panel">
          <h3>Analytics</h3>
          <p class="placeholder">Run a search to see metrics.</p>
        </div>
        """

    path_status = "Found" if metrics.path_found else "Not Found"
    return f"""
    <div class="panel analytics-panel">
      <h3>Analytics</h3>
      <table>
        <tr><td>Cells Visited:</td><td><strong>{metrics.nodes_visited}</strong></td></tr>
        <tr><td>Neighbours Checked:</td><td><strong>{metrics.cells_checked}</strong></td></tr>
        <tr><td>Distance Updates:</td><td><strong>{metrics.distance_updates}</strong></td></tr>
        <tr><td>Stale Skips:</td><td><strong>{metrics.stale_skips}</strong></td></tr>
        <tr><td>Path Length:</td><td><strong>{metrics.path_length} cells</strong></td></tr>
        <tr><td>Path Cost:</td><td><strong>{metrics.path_cost}</strong></td></tr>
        <tr><td>Operations:</td><td><strong>{metrics.total_operations}</strong></td></tr>
        <tr><td>Search Time:</td><td><strong>{metrics.wall_time_ms:.2f} ms</strong></td></tr>
        <tr><td>Path:</td><td><strong>{path_status}</strong></td></tr>
      </table>
    </div>
    """


# ---------------------------------------------------------------------------
# Pseudocode Viewer
# ---------------------------------------------------------------------------
def pseudocode_viewer(pseudocode_lines: List[str], current_line: int = -1) -> str:
    lines_html = []
    for i, line in enumerate(pseudocode_lines):
        highlight = "highlight" if i == current_line else ""
        lines_html.append(f'<div class="code-line {highlight}" data-line="{i}">{escape(line)}</div>')
    return f"""
    <div class="code-block">
      {''.join(lines_html)}
    </div>
    """


# ---------------------------------------------------------------------------
# Legend
# ---------------------------------------------------------------------------
def legend_panel() -> str:
    swatches = [
        ("#10b981", "Start"),
        ("#f43f5e", "End"),
        ("#010409", "Wall"),
        ("#0ea5e9", "Visited"),
        ("#f59e0b", "Shortest Path"),
    ]
    items = "".join(
        f'<span class="swatch"><i style="background: {c};"></i>{label}</span>'
        for c, label in swatches
    )
    return f"""
    <div class="panel legend">
      <h3>Legend</h3>
      <div class="swatches">{items}</div>
      <p><strong>Click:</strong> place / remove walls</p>
      <p><strong>Shift + Click:</strong> move end point</p>
      <p><strong>Ctrl + Click:</strong> change cell weight (1-5)</p>
    </div>
    """
