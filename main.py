"""
main.py — Grid Dijkstra Visualizer Flask App
=============================================
The web server that powers the visualizer.

Routes:
  GET  /                    – main UI
  GET  /api/state           – run due animation ticks, return current state
  POST /api/cell            – primary action on a cell (wall / end / weight)
  POST /api/search          – start a search + animation
  POST /api/cancel          – stop the animation in flight
  POST /api/reset           – soft reset, or hard reset with {"hard": true}
  POST /api/random          – load a random example
  POST /api/config/speed    – set the interval for the next run
  POST /api/config/weights  – show or hide weight labels
  GET  /api/source          – pseudocode for the "view source" popup

State management:
  Each browser session gets a session id; the server keeps one
  Visualizer per id in `SESSIONS` (in-memory, lost on restart; idle
  and least recently used sessions are evicted).
  The page polls /api/state, and each poll advances that session's
  timer queue, so the animation moves on the server's clock.
"""

import logging
import os
import secrets
import sys
import uuid
from typing import Optional

from flask import Flask, jsonify, render_template_string, request, session

# add project root to path so imports work
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from algorithms import DEFAULT_ALGORITHM, OPERATION_LINES, get_algorithm
from engine import SPEED_PRESETS, SessionStore, Visualizer
from settings import Settings
from ui import (
    analytics_panel,
    control_panel,
    legend_panel,
    operation_panel,
    pseudocode_viewer,
    render_grid,
)

_logger = logging.getLogger(__name__)

SETTINGS = Settings.from_env()

app = Flask(__name__)
app.secret_key = os.environ.get("VISUALIZER_SECRET_KEY") or secrets.token_hex(32)

SESSIONS = SessionStore(
    lambda: Visualizer(SETTINGS),
    max_sessions=SETTINGS.max_sessions,
    idle_ms=SETTINGS.session_idle_s * 1000,
)

CELL_MODES = ("wall", "end", "weight")


# ---------------------------------------------------------------------------
# Session helpers
# ---------------------------------------------------------------------------
def get_visualizer() -> Visualizer:
    """Visualizer for this browser session, created on first use."""
    sid = session.get("sid")
    if sid is None:
        sid = uuid.uuid4().hex
        session["sid"] = sid
    return SESSIONS.get(sid)


def state_payload(viz: Visualizer, accepted: Optional[bool] = None) -> dict:
    algo = get_algorithm(DEFAULT_ALGORITHM)
    with viz.lock:
        viz.tick()
        snap = viz.snapshot()
        op = viz.current_operation
        payload = {k: v for k, v in snap.items() if k != "grid"}
        payload.update({
            "svg":        render_grid(viz.grid, viz.start, viz.end, show_weights=viz.show_weights),
            "operation":  operation_panel(op),
            "analytics":  analytics_panel(viz.last_metrics),
            "controls":   control_panel(viz.is_running, viz.speed_ms, viz.show_weights),
            "pseudocode": pseudocode_viewer(algo.pseudocode, OPERATION_LINES.get(op.kind, -1) if op else -1),
        })
    if accepted is not None:
        payload["accepted"] = accepted
    return payload


def _json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _bad_request(message: str):
    return jsonify({"error": message}), 400


# ---------------------------------------------------------------------------
# Main UI Route
# ---------------------------------------------------------------------------
@app.route("/")
def index():
    viz = get_visualizer()
    state = state_payload(viz)
    return render_template_string(
        INDEX_TEMPLATE,
        svg=state["svg"],
        controls=state["controls"],
        operation=state["operation"],
        analytics=state["analytics"],
        pseudocode=state["pseudocode"],
        legend=legend_panel(),
    )


@app.route("/api/state")
def api_state():
    viz = get_visualizer()
    payload = state_payload(viz)
    if request.args.get("grid"):
        payload["grid"] = viz.grid.to_dict()
    return jsonify(payload)


# ---------------------------------------------------------------------------
# API: Editing
# ---------------------------------------------------------------------------
@app.route("/api/cell", methods=["POST"])
def api_cell():
    data = _json_body()
    try:
        x = int(data["x"])
        y = int(data["y"])
    except (KeyError, TypeError, ValueError):
        return _bad_request("x and y must be integers")
    mode = data.get("mode", "wall")
    if mode not in CELL_MODES:
        return _bad_request(f"Unknown mode: {mode}")

    viz = get_visualizer()
    if not viz.grid.in_bounds((x, y)):
        return _bad_request(f"Cell ({x}, {y}) is outside the grid")

    accepted = viz.on_cell_primary_action(
        x, y, move_end=(mode == "end"), cycle_weight_mode=(mode == "weight")
    )
    return jsonify(state_payload(viz, accepted))


@app.route("/api/reset", methods=["POST"])
def api_reset():
    viz = get_visualizer()
    if _json_body().get("hard"):
        accepted = viz.on_request_hard_reset()
    else:
        accepted = viz.on_request_soft_reset()
    return jsonify(state_payload(viz, accepted))


@app.route("/api/random", methods=["POST"])
def api_random():
    viz = get_visualizer()
    return jsonify(state_payload(viz, viz.on_request_random_example()))


# ---------------------------------------------------------------------------
# API: Run / Cancel
# ---------------------------------------------------------------------------
@app.route("/api/search", methods=["POST"])
def api_search():
    viz = get_visualizer()
    return jsonify(state_payload(viz, viz.on_request_search()))


@app.route("/api/cancel", methods=["POST"])
def api_cancel():
    viz = get_visualizer()
    return jsonify(state_payload(viz, viz.on_request_cancel()))


# ---------------------------------------------------------------------------
# API: Config
# ---------------------------------------------------------------------------
@app.route("/api/config/speed", methods=["POST"])
def api_config_speed():
    data = _json_body()
    viz = get_visualizer()
    if "preset" in data:
        preset = data["preset"]
        if not isinstance(preset, str) or preset not in SPEED_PRESETS:
            return _bad_request(f"Unknown preset: {preset}")
        viz.set_speed_preset(preset)
    else:
        try:
            viz.set_animation_speed(float(data["interval_ms"]))
        except (KeyError, TypeError, ValueError):
            return _bad_request("interval_ms must be a finite number")
    return jsonify({"speed_ms": viz.speed_ms})


@app.route("/api/config/weights", methods=["POST"])
def api_config_weights():
    show = _json_body().get("show")
    if not isinstance(show, bool):
        return _bad_request("show must be true or false")
    viz = get_visualizer()
    viz.set_show_weights(show)
    return jsonify(state_payload(viz))


@app.route("/api/source")
def api_source():
    return jsonify(get_algorithm(DEFAULT_ALGORITHM).to_dict())


# ---------------------------------------------------------------------------
# HTML Template
# ---------------------------------------------------------------------------
INDEX_TEMPLATE = """
<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Dijkstra's Pathfinding Visualizer</title>
  <style>
    * { margin: 0; padding: 0; box-sizing: border-box; }
    :root {
      --bg-dark: #0d1117;
      --bg-darker: #010409;
      --bg-panel: #161b22;
      --border: #30363d;
      --text-primary: #e6edf3;
      --text-secondary: #7d8590;
      --accent-cyan: #0ea5e9;
      --accent-emerald: #10b981;
    }
    body {
      font-family: -apple-system, BlinkMacSystemFont, sans-serif;
      background: var(--bg-darker);
      color: var(--text-primary);
      display: flex;
      min-height: 100vh;
    }
    #sidebar { width: 320px; padding: 20px 16px; border-right: 1px solid var(--border); }
    #main { flex: 1; display: flex; flex-direction: column; align-items: center; padding: 20px; gap: 16px; }
    .panel {
      background: var(--bg-panel);
      border: 1px solid var(--border);
      border-radius: 12px;
      padding: 16px;
      margin-bottom: 16px;
    }
    .panel h3 { font-size: 13px; text-transform: uppercase; margin-bottom: 12px; }
    .button-row { display: flex; gap: 8px; margin-bottom: 10px; }
    button {
      background: var(--accent-cyan);
      color: #fff;
      border: none;
      padding: 8px 14px;
      border-radius: 8px;
      cursor: pointer;
      font-weight: 600;
    }
    button:disabled { opacity: 0.4; cursor: not-allowed; }
    .btn-primary { background: var(--accent-emerald); }
    .btn-secondary { background: #1c2128; border: 1px solid var(--border); }
    select { width: 100%; padding: 8px; background: var(--bg-darker); color: var(--text-primary); border: 1px solid var(--border); border-radius: 8px; }
    label { display: block; margin: 8px 0 4px; font-size: 12px; color: var(--text-secondary); }
    table { width: 100%; font-size: 13px; }
    table td:first-child { color: var(--text-secondary); }
    .placeholder { color: var(--text-secondary); font-size: 13px; }
    .badge { border: 1px solid; border-radius: 999px; padding: 2px 10px; font-size: 12px; font-weight: 700; }
    .position { font-family: monospace; margin-left: 8px; }
    .operation-panel p { margin-top: 8px; color: var(--text-secondary); }
    .code-block { font-family: monospace; font-size: 12px; line-height: 1.6; }
    .code-line { padding: 0 8px; white-space: pre; }
    .code-line.highlight { background: rgba(14, 165, 233, 0.2); border-left: 3px solid var(--accent-cyan); }
    .swatches { display: flex; flex-wrap: wrap; gap: 10px; margin-bottom: 10px; font-size: 13px; }
    .swatch i { display: inline-block; width: 12px; height: 12px; border-radius: 3px; margin-right: 4px; border: 1px solid var(--border); }
    .legend p { font-size: 13px; color: var(--text-secondary); }
    #grid-container rect.cell { cursor: pointer; }
    .toggle { display: flex; align-items: center; gap: 6px; margin: 12px 0; }
    #source-modal { display: none; position: fixed; inset: 0; background: rgba(1, 4, 9, 0.8); align-items: center; justify-content: center; }
    #source-modal.open { display: flex; }
    #source-modal .panel { max-width: 640px; max-height: 80vh; overflow: auto; }
    #source-modal pre { font-family: monospace; font-size: 12px; line-height: 1.6; margin: 12px 0; }
  </style>
</head>
<body>
  <div id="sidebar">
    <div id="controls">{{ controls|safe }}</div>
    <div id="analytics">{{ analytics|safe }}</div>
    {{ legend|safe }}
  </div>
  <div id="main">
    <h1>Dijkstra's Pathfinding Visualizer</h1>
    <div id="grid-container">{{ svg|safe }}</div>
    <div id="operation">{{ operation|safe }}</div>
    <div class="panel"><div id="pseudocode">{{ pseudocode|safe }}</div></div>
  </div>

  <div id="source-modal">
    <div class="panel">
      <h3 id="source-title">Source</h3>
      <p id="source-complexity" class="placeholder"></p>
      <pre id="source-code"></pre>
      <button id="btn-source-close" class="btn-secondary">Close</button>
    </div>
  </div>

  <script>
    let mouseDown = false;
    let polling = null;

    async function post(url, data) {
      const res = await fetch(url, {
        method: 'POST',
        headers: {'Content-Type': 'application/json'},
        body: JSON.stringify(data || {}),
      });
      return await res.json();
    }

    function apply(data) {
      if (!data || data.error) return;
      document.getElementById('grid-container').innerHTML = data.svg;
      document.getElementById('operation').innerHTML = data.operation;
      document.getElementById('analytics').innerHTML = data.analytics;
      document.getElementById('controls').innerHTML = data.controls;
      document.getElementById('pseudocode').innerHTML = data.pseudocode;
      bindControls();
      if (data.running && !polling) {
        polling = setInterval(poll, 50);
      } else if (!data.running && polling) {
        clearInterval(polling);
        polling = null;
      }
    }

    async function poll() {
      const res = await fetch('/api/state');
      apply(await res.json());
    }

    function cellMode(e) {
      if (e.shiftKey) return 'end';
      if (e.ctrlKey || e.metaKey) return 'weight';
      return 'wall';
    }

    async function cellAction(target, e) {
      if (!target.classList || !target.classList.contains('cell')) return;
      apply(await post('/api/cell', {
        x: parseInt(target.dataset.x), y: parseInt(target.dataset.y), mode: cellMode(e),
      }));
    }

    const grid = document.getElementById('grid-container');
    grid.addEventListener('mousedown', (e) => { mouseDown = true; cellAction(e.target, e); });
    grid.addEventListener('mouseover', (e) => { if (mouseDown && e.buttons === 1) cellAction(e.target, e); });
    document.addEventListener('mouseup', () => { mouseDown = false; });

    function bindControls() {
      const on = (id, fn) => { const el = document.getElementById(id); if (el) el.onclick = fn; };
      on('btn-search', async () => apply(await post('/api/search')));
      on('btn-cancel', async () => apply(await post('/api/cancel')));
      on('btn-soft-reset', async () => apply(await post('/api/reset', {hard: false})));
      on('btn-hard-reset', async () => apply(await post('/api/reset', {hard: true})));
      on('btn-random', async () => apply(await post('/api/random')));
      const speed = document.getElementById('speed-selector');
      if (speed) speed.onchange = async (e) => {
        await post('/api/config/speed', {interval_ms: parseInt(e.target.value)});
      };
      const weights = document.getElementById('toggle-weights');
      if (weights) weights.onchange = async (e) => {
        apply(await post('/api/config/weights', {show: e.target.checked}));
      };
      on('btn-source', showSource);
    }

    async function showSource() {
      const res = await fetch('/api/source');
      const info = await res.json();
      document.getElementById('source-title').textContent = info.label;
      document.getElementById('source-complexity').textContent =
        `Time ${info.complexity_time}, space ${info.complexity_space}. ${info.description}`;
      document.getElementById('source-code').textContent = info.pseudocode.join('\\n');
      document.getElementById('source-modal').classList.add('open');
    }
    document.getElementById('btn-source-close').onclick = () => {
      document.getElementById('source-modal').classList.remove('open');
    };
    bindControls();
  </script>
</body>
</html>
"""


# ---------------------------------------------------------------------------
# Run
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    logging.basicConfig(
        level=SETTINGS.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    print("=" * 60)
    print("  Dijkstra's Pathfinding Visualizer")
    print("  Starting Flask server...")
    print(f"  Open http://localhost:{SETTINGS.port}")
    print("=" * 60)
    app.run(debug=SETTINGS.debug, host=SETTINGS.host, port=SETTINGS.port)
