"""
main.py — Sorting Visualizer Flask App
=======================================
The web server that powers the visualizer.

Routes:
  GET  /                       – main UI
  GET  /api/state              – sink snapshot + playback state (polled)
  GET  /api/algorithms         – registry listing (?tag=… filters)
  POST /api/array/random       – generate a new random array
  POST /api/array/custom       – load a comma-separated custom array
  POST /api/run                – compile the selected algorithm and play it
  POST /api/pause              – toggle pause / resume
  POST /api/step               – apply one operation while paused
  POST /api/reset              – stop and restore the original array
  POST /api/config/algo        – select algorithm
  POST /api/config/speed       – change the tick delay (delay_ms, slider or preset)
  POST /api/config/numbers     – show / hide bar values
  POST /api/compare            – compare two algorithms on the current array

State management:
  Each browser gets a random id in its Flask cookie session.  The id keys
  a process-local dict of VisualizerSession objects, because a live
  scheduler and its timer thread cannot be serialised into a cookie.

Configuration:
  DEFAULT_CONFIG below, overridable from the environment with the
  SORTVIS_ prefix, e.g.  SORTVIS_DEFAULT_SIZE=50  SORTVIS_DEFAULT_DELAY_MS=20
  MAX_SESSIONS caps the live sessions; the least recently used one is
  closed when a new browser arrives over the cap.
"""

from flask import Flask, render_template_string, request, jsonify, session
import atexit
import secrets
import sys
import os
import threading
from collections import OrderedDict
from typing import Any, Optional

import structlog

# add project root to path so imports work
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from algorithms import get_algorithm, list_algorithms, algorithms_by_tag
from algorithms.errors import VisualizerError, InvalidInput, PlaybackActive
from engine import VisualizerSession, IntervalTimer, DEFAULT_DELAY_MS, SPEED_PRESETS, speed_to_delay
from engine.session import DEFAULT_ARRAY_SIZE, MIN_ARRAY_SIZE, MAX_ARRAY_SIZE
from ui import (
    render_bars,
    playback_controls,
    algorithm_selector,
    array_panel,
    status_bar,
    analytics_panel,
    comparison_panel,
    pseudocode_viewer,
)


structlog.configure(
    processors=[
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer(),
    ],
)

logger = structlog.get_logger()


DEFAULT_CONFIG = {
    "DEFAULT_SIZE":     DEFAULT_ARRAY_SIZE,
    "MIN_SIZE":         MIN_ARRAY_SIZE,
    "MAX_SIZE":         MAX_ARRAY_SIZE,
    "DEFAULT_DELAY_MS": DEFAULT_DELAY_MS,
    "RANDOM_SEED":      None,
    "TIMER_FACTORY":    IntervalTimer,
    "MAX_SESSIONS":     64,             # least recently used is closed beyond this
}

app = Flask(__name__)
app.secret_key = secrets.token_hex(32)
app.config.update(DEFAULT_CONFIG)
app.config.from_prefixed_env("SORTVIS")


# ---------------------------------------------------------------------------
# Session Store
# ---------------------------------------------------------------------------
_SESSIONS: "OrderedDict[str, VisualizerSession]" = OrderedDict()
_SESSIONS_LOCK = threading.Lock()


def get_visualizer() -> VisualizerSession:
    """Return this browser's VisualizerSession, creating it on first use."""
    sid = session.get("sid")
    with _SESSIONS_LOCK:
        if sid and sid in _SESSIONS:
            _SESSIONS.move_to_end(sid)
            return _SESSIONS[sid]
        sid = secrets.token_hex(16)
        session["sid"] = sid
        viz = VisualizerSession(
            size=int(app.config["DEFAULT_SIZE"]),
            delay_ms=int(app.config["DEFAULT_DELAY_MS"]),
            timer_factory=app.config["TIMER_FACTORY"],
            seed=app.config["RANDOM_SEED"],
            min_size=int(app.config["MIN_SIZE"]),
            max_size=int(app.config["MAX_SIZE"]),
        )
        _SESSIONS[sid] = viz
        evicted = []
        while len(_SESSIONS) > max(1, int(app.config["MAX_SESSIONS"])):
            evicted.append(_SESSIONS.popitem(last=False)[1])
        logger.info("session_created", sessions=len(_SESSIONS), evicted=len(evicted))

    # closing joins timer threads, so keep it outside the store lock
    for old in evicted:
        old.close()
    return viz


def close_all_sessions() -> None:
    with _SESSIONS_LOCK:
        sessions = list(_SESSIONS.values())
        _SESSIONS.clear()
    for viz in sessions:
        viz.close()


atexit.register(close_all_sessions)


def request_data() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def int_field(data: dict, key: str, default: Optional[Any] = None) -> int:
    """Read an integer from the JSON body; anything else is InvalidInput."""
    raw = data.get(key, default)
    if isinstance(raw, bool):
        raise InvalidInput(f"'{key}' must be an integer (got {raw!r}).")
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise InvalidInput(f"'{key}' must be an integer (got {raw!r}).") from None


def state_payload(viz: VisualizerSession) -> dict:
    data = viz.state()
    data["svg"] = render_bars(viz.sink.snapshot(), show_numbers=viz.show_numbers)
    return data


# ---------------------------------------------------------------------------
# Error Handling
# ---------------------------------------------------------------------------
@app.errorhandler(VisualizerError)
def handle_visualizer_error(err: VisualizerError):
    status = 409 if isinstance(err, PlaybackActive) else 400
    logger.info("request_rejected", error=str(err), kind=type(err).__name__)
    return jsonify({"error": str(err), "kind": type(err).__name__}), status


def invalid_transition(action: str):
    return jsonify({"error": f"Cannot {action} in the current state", "kind": "InvalidStateTransition"}), 409


# ---------------------------------------------------------------------------
# Main UI Route
# ---------------------------------------------------------------------------
@app.route("/")
def index():
    viz = get_visualizer()
    algo_info = get_algorithm(viz.algo_key)
    run = viz.current_run

    html = render_template_string(INDEX_TEMPLATE,
        svg=render_bars(viz.sink.snapshot(), show_numbers=viz.show_numbers),
        playback=playback_controls(
            is_playing=viz.scheduler.is_playing(),
            is_paused=viz.scheduler.is_paused(),
            cursor=viz.scheduler.cursor,
            total=viz.scheduler.total,
            speed=viz.delay_ms,
        ),
        algo_selector=algorithm_selector(list_algorithms(), selected_key=viz.algo_key),
        array=array_panel(
            size=len(viz.sink),
            min_size=viz.min_size,
            max_size=viz.max_size,
        ),
        status=status_bar(viz.status_text(), show_numbers=viz.show_numbers),
        analytics=analytics_panel(run.stats if run else None),
        comparison=comparison_panel(),
        pseudocode=pseudocode_viewer(
            pseudocode_lines=algo_info.pseudocode if algo_info else [],
            algo_label=algo_info.label if algo_info else "",
        ),
    )
    return html


@app.route("/api/state")
def api_state():
    return jsonify(state_payload(get_visualizer()))


@app.route("/api/algorithms")
def api_algorithms():
    tag = request.args.get("tag", "")
    return jsonify([
        {
            "key":              a.key,
            "label":            a.label,
            "tags":             a.tags,
            "stable":           a.stable,
            "complexity_time":  a.complexity_time,
            "complexity_space": a.complexity_space,
            "description":      a.description,
        }
        for a in (algorithms_by_tag(tag) if tag else list_algorithms())
    ])


# ---------------------------------------------------------------------------
# API: Array Source
# ---------------------------------------------------------------------------
@app.route("/api/array/random", methods=["POST"])
def api_array_random():
    viz = get_visualizer()
    data = request_data()
    seed = int_field(data, "seed") if data.get("seed") is not None else None
    viz.generate_random(int_field(data, "size", app.config["DEFAULT_SIZE"]), seed=seed)
    return jsonify(state_payload(viz))


@app.route("/api/array/custom", methods=["POST"])
def api_array_custom():
    viz = get_visualizer()
    viz.load_custom_array(request_data().get("values", ""))
    return jsonify(state_payload(viz))


# ---------------------------------------------------------------------------
# API: Playback
# ---------------------------------------------------------------------------
@app.route("/api/run", methods=["POST"])
def api_run():
    viz = get_visualizer()
    algo = request_data().get("algo_key") or viz.algo_key
    future = viz.start_sorting(algo)
    if future is None:
        return invalid_transition("start a run")
    return jsonify(state_payload(viz)), 202


@app.route("/api/pause", methods=["POST"])
def api_pause():
    viz = get_visualizer()
    if not viz.toggle_pause():
        return invalid_transition("pause or resume")
    return jsonify(state_payload(viz))


@app.route("/api/step", methods=["POST"])
def api_step():
    viz = get_visualizer()
    if not viz.step():
        return invalid_transition("step")
    return jsonify(state_payload(viz))


@app.route("/api/reset", methods=["POST"])
def api_reset():
    viz = get_visualizer()
    viz.reset()
    return jsonify(state_payload(viz))


# ---------------------------------------------------------------------------
# API: Config Changes
# ---------------------------------------------------------------------------
@app.route("/api/config/algo", methods=["POST"])
def api_config_algo():
    viz = get_visualizer()
    key = viz.select_algorithm(request_data().get("algo_key", ""))
    algo_info = get_algorithm(key)
    return jsonify({
        "algo_key":      key,
        "algo_selector": algorithm_selector(list_algorithms(), selected_key=key),
        "pseudocode":    pseudocode_viewer(algo_info.pseudocode, algo_info.label),
    })


@app.route("/api/config/speed", methods=["POST"])
def api_config_speed():
    viz = get_visualizer()
    data = request_data()
    if "preset" in data:
        if not isinstance(data["preset"], str) or data["preset"] not in SPEED_PRESETS:
            raise InvalidInput(f"Unknown speed preset {data['preset']!r}.")
        delay = viz.set_preset(data["preset"])
    elif "slider" in data:
        delay = viz.set_delay(speed_to_delay(int_field(data, "slider")))
    else:
        delay = viz.set_delay(int_field(data, "delay_ms", DEFAULT_DELAY_MS))
    return jsonify({"delay_ms": delay})


@app.route("/api/config/numbers", methods=["POST"])
def api_config_numbers():
    viz = get_visualizer()
    viz.show_numbers = bool(request_data().get("show", True))
    return jsonify({"show_numbers": viz.show_numbers})


@app.route("/api/compare", methods=["POST"])
def api_compare():
    viz = get_visualizer()
    data = request_data()
    comp = viz.compare(data.get("left", "bubble"), data.get("right", "quick"))
    return jsonify({
        "left":            comp.left.to_dict(),
        "right":           comp.right.to_dict(),
        "winner_compares": comp.winner_compares,
        "winner_writes":   comp.winner_writes,
        "winner_total":    comp.winner_total,
        "html":            comparison_panel(comp),
    })


# ---------------------------------------------------------------------------
# HTML Template
# ---------------------------------------------------------------------------
INDEX_TEMPLATE = """
<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Sorting Visualizer</title>
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
      --accent-teal: #06b6d4;
      --accent-emerald: #10b981;
    }
    body {
      font-family: -apple-system, BlinkMacSystemFont, sans-serif;
      background: var(--bg-darker);
      color: var(--text-primary);
      display: flex;
      height: 100vh;
      overflow: hidden;
    }
    #sidebar {
      width: 340px;
      background: var(--bg-dark);
      border-right: 1px solid var(--border);
      overflow-y: auto;
      padding: 24px 16px;
    }
    #main { flex: 1; display: flex; flex-direction: column; }
    #canvas-container {
      flex: 1;
      display: flex;
      align-items: center;
      justify-content: center;
      border-bottom: 1px solid var(--border);
    }
    #canvas-svg svg { max-width: 100%; max-height: 100%; }
    #bottom-panel {
      display: grid;
      grid-template-columns: 1fr 1fr;
      gap: 20px;
      padding: 20px;
      background: var(--bg-dark);
      max-height: 320px;
      overflow: hidden;
    }
    .panel {
      background: var(--bg-panel);
      border: 1px solid var(--border);
      border-radius: 12px;
      padding: 18px;
      margin-bottom: 16px;
    }
    .panel h3 {
      font-size: 13px;
      font-weight: 700;
      margin-bottom: 14px;
      text-transform: uppercase;
      letter-spacing: 0.5px;
    }
    .button-row { display: flex; gap: 8px; margin-bottom: 12px; }
    button {
      background: linear-gradient(135deg, var(--accent-cyan), var(--accent-teal));
      color: #fff;
      border: none;
      padding: 10px 16px;
      border-radius: 8px;
      cursor: pointer;
      font-size: 13px;
      font-weight: 600;
    }
    button:disabled { opacity: 0.4; cursor: default; }
    .btn-primary { background: linear-gradient(135deg, var(--accent-emerald), #059669); }
    .btn-secondary { background: var(--bg-panel); border: 1px solid var(--border); }
    select, input[type="text"], input[type="range"] {
      width: 100%;
      padding: 8px 10px;
      margin: 6px 0;
      background: var(--bg-darker);
      border: 1px solid var(--border);
      border-radius: 8px;
      color: var(--text-primary);
    }
    label {
      display: block;
      margin: 10px 0 4px;
      font-size: 12px;
      color: var(--text-secondary);
      text-transform: uppercase;
    }
    .step-info, .status-bar {
      font-family: monospace;
      font-size: 13px;
      color: var(--text-secondary);
      padding: 8px 12px;
      background: var(--bg-darker);
      border-left: 3px solid var(--accent-cyan);
      border-radius: 6px;
    }
    .status-bar { display: flex; justify-content: space-between; margin: 0 20px; }
    .status-bar label { margin: 0; }
    .code-block {
      background: var(--bg-darker);
      border: 1px solid var(--border);
      border-radius: 8px;
      padding: 16px;
      overflow-y: auto;
      font-family: monospace;
      font-size: 13px;
      line-height: 1.6;
    }
    table { width: 100%; font-size: 13px; }
    table td:first-child { color: var(--text-secondary); }
    .hint, .placeholder { color: var(--text-secondary); font-size: 12px; margin-top: 8px; }
    .error { color: #f43f5e; }
  </style>
</head>
<body>
  <div id="sidebar">
    {{ playback|safe }}
    {{ algo_selector|safe }}
    {{ array|safe }}
    <div id="analytics">{{ analytics|safe }}</div>
    <div id="comparison">{{ comparison|safe }}</div>
  </div>
  <div id="main">
    <div id="canvas-container"><div id="canvas-svg">{{ svg|safe }}</div></div>
    {{ status|safe }}
    <div id="bottom-panel">
      <div id="pseudocode">{{ pseudocode|safe }}</div>
      <div id="error" class="error"></div>
    </div>
  </div>

  <script>
    async function call(url, data, method = 'POST') {
      const opts = {method, headers: {'Content-Type': 'application/json'}};
      if (method === 'POST') opts.body = JSON.stringify(data || {});
      const res = await fetch(url, opts);
      const body = await res.json();
      document.getElementById('error').textContent = body.error || '';
      return body;
    }

    function paint(state) {
      if (!state || !state.sink) return;
      document.getElementById('canvas-svg').innerHTML = state.svg;
      document.getElementById('status').textContent = 'Status: ' + state.status;
      document.getElementById('cursor').textContent = state.playback.cursor;
      document.getElementById('total').textContent = state.playback.total;
      document.getElementById('btn-pause').textContent =
        state.playback.state === 'paused' ? 'Resume' : 'Pause';
      document.getElementById('btn-start').disabled =
        state.compiling || state.playback.state === 'playing' || state.playback.state === 'paused';
    }

    // the renderer polls the sink; the server-side timer drives playback
    let polling = null;
    function poll() {
      if (polling) return;
      polling = setInterval(async () => {
        const state = await call('/api/state', null, 'GET');
        paint(state);
        const active = state.compiling || state.playback.state === 'playing' || state.playback.state === 'paused';
        if (!active) { clearInterval(polling); polling = null; }
      }, 40);
    }

    document.getElementById('btn-start').addEventListener('click', async () => {
      const algo = document.getElementById('algo-selector').value;
      paint(await call('/api/run', {algo_key: algo}));
      poll();
    });
    document.getElementById('btn-pause').addEventListener('click', async () => {
      paint(await call('/api/pause'));
    });
    document.getElementById('btn-step').addEventListener('click', async () => {
      paint(await call('/api/step'));
    });
    document.getElementById('btn-reset').addEventListener('click', async () => {
      paint(await call('/api/reset'));
    });
    document.getElementById('btn-randomize').addEventListener('click', async () => {
      paint(await call('/api/array/random', {size: +document.getElementById('size-slider').value}));
    });
    document.getElementById('size-slider').addEventListener('input', (e) => {
      document.getElementById('size-val').textContent = e.target.value;
    });
    document.getElementById('size-slider').addEventListener('change', async (e) => {
      paint(await call('/api/array/random', {size: +e.target.value}));
    });
    document.getElementById('btn-load-custom').addEventListener('click', async () => {
      paint(await call('/api/array/custom', {values: document.getElementById('custom-array').value}));
    });
    document.getElementById('speed-slider').addEventListener('input', async (e) => {
      await call('/api/config/speed', {slider: +e.target.value});
    });
    document.querySelectorAll('.btn-preset').forEach((btn) => {
      btn.addEventListener('click', async () => {
        await call('/api/config/speed', {preset: btn.dataset.preset});
      });
    });
    document.getElementById('numbers-toggle').addEventListener('change', async (e) => {
      await call('/api/config/numbers', {show: e.target.checked});
      paint(await call('/api/state', null, 'GET'));
    });
    document.getElementById('algo-selector').addEventListener('change', async (e) => {
      const data = await call('/api/config/algo', {algo_key: e.target.value});
      if (data.pseudocode) document.getElementById('pseudocode').innerHTML = data.pseudocode;
    });

    poll();
  </script>
</body>
</html>
"""


if __name__ == "__main__":
    app.run(debug=False, threaded=True, port=int(os.environ.get("PORT", 5000)))
