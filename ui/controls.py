"""
controls.py — UI Control Panels
================================
Every UI panel is a pure function that takes state and returns HTML.

Panels:
  • playback_controls   – start / pause-resume / step / reset / speed slider
  • algorithm_selector  – dropdown of the registered sorting algorithms
  • array_panel         – random size slider + custom array input
  • status_bar          – "Status: …" line plus the Show Numbers toggle
  • analytics_panel     – operation counts for the current run
  • comparison_panel    – side-by-side counts of two algorithms
  • pseudocode_viewer   – the selected algorithm's pseudocode

Design:
  - All panels are stateless render functions.
  - State is passed in as kwargs.
  - Output is raw HTML strings (no templating engine).
  - The main app stitches them together.
"""

from html import escape
from typing import List, Optional

from algorithms import AlgoInfo
from engine import ComparisonResult, LogStats
from engine.scheduler import SPEED_PRESETS, SPEED_SLIDER_MAX, SPEED_SLIDER_MIN


# ---------------------------------------------------------------------------
# Playback Controls
# ---------------------------------------------------------------------------
def playback_controls(
    is_playing: bool = False,
    is_paused: bool = False,
    cursor: int = 0,
    total: int = 0,
    speed: int = 80,
) -> str:
    pause_label = "Resume" if is_paused else "Pause"
    start_disabled = "disabled" if is_playing else ""
    presets = "".join(
        f'<button class="btn-secondary btn-preset" data-preset="{name}">{name.title()}</button>'
        for name in SPEED_PRESETS
    )

    # the slider is drawn inverted: dragging right lowers the delay
    return f"""
    <div class="panel playback-controls">
      <h3>⏯ Playback</h3>
      <div class="button-row">
        <button id="btn-start" class="btn-primary" {start_disabled}>▶ Start</button>
        <button id="btn-pause">{pause_label}</button>
        <button id="btn-step" title="One operation (while paused)">⏭</button>
        <button id="btn-reset" class="btn-secondary">Reset</button>
      </div>
      <div class="step-info">
        Op <span id="cursor">{cursor}</span> / <span id="total">{total}</span>
      </div>
      <label>Speed:
        <input type="range" id="speed-slider" min="{SPEED_SLIDER_MIN}" max="{SPEED_SLIDER_MAX}"
               value="{speed}" style="direction: rtl;">
      </label>
      <div class="button-row">{presets}</div>
    </div>
    """


# ---------------------------------------------------------------------------
# Algorithm Selector
# ---------------------------------------------------------------------------
def algorithm_selector(algorithms: List[AlgoInfo], selected_key: str = "bubble") -> str:
    options = []
    for algo in algorithms:
        sel = 'selected' if algo.key == selected_key else ''
        options.append(
            f'<option value="{algo.key}" {sel}>{algo.label} — {algo.complexity_time}</option>'
        )
    selected = next((a for a in algorithms if a.key == selected_key), None)
    description = escape(selected.description) if selected else ""

    return f"""
    <div class="panel algorithm-selector">
      <h3>🧠 Algorithm</h3>
      <select id="algo-selector">
        {''.join(options)}
      </select>
      <p class="hint">{description}</p>
    </div>
    """


# ---------------------------------------------------------------------------
# Array Source
# ---------------------------------------------------------------------------
def array_panel(size: int = 80, min_size: int = 10, max_size: int = 300) -> str:
    return f"""
    <div class="panel array-panel">
      <h3>📊 Array</h3>
      <label>Size: <span id="size-val">{size}</span>
        <input type="range" id="size-slider" min="{min_size}" max="{max_size}" value="{size}">
      </label>
      <button id="btn-randomize" class="btn-secondary">Randomize</button>
      <label>Custom (positive integers, comma separated):</label>
      <input type="text" id="custom-array" placeholder="50,20,80,10">
      <button id="btn-load-custom" class="btn-secondary">Load Custom Array</button>
    </div>
    """


# ---------------------------------------------------------------------------
# Status Bar
# ---------------------------------------------------------------------------
def status_bar(status: str = "Ready", show_numbers: bool = True) -> str:
    return f"""
    <div class="status-bar">
      <span id="status">Status: {escape(status)}</span>
      <label>
        <input type="checkbox" id="numbers-toggle" {'checked' if show_numbers else ''}>
        Show Numbers
      </label>
    </div>
    """


# ---------------------------------------------------------------------------
# Analytics Panel
# ---------------------------------------------------------------------------
def analytics_panel(stats: Optional[LogStats] = None) -> str:
    if not stats:
        return """
        <div class="panel analytics-panel">
          <h3>📈 Analytics</h3>
          <p class="placeholder">Start a run to see operation counts.</p>
        </div>
        """

    return f"""
    <div class="panel analytics-panel">
      <h3>📈 Analytics — {escape(stats.algo_label)}</h3>
      <table>
        <tr><td>Array Size:</td><td><strong>{stats.input_size}</strong></td></tr>
        <tr><td>Comparisons:</td><td><strong>{stats.compares}</strong></td></tr>
        <tr><td>Swaps:</td><td><strong>{stats.swaps}</strong></td></tr>
        <tr><td>Overwrites:</td><td><strong>{stats.overwrites}</strong></td></tr>
        <tr><td>Array Writes:</td><td><strong>{stats.writes}</strong></td></tr>
        <tr><td>Total Ops:</td><td><strong>{stats.total}</strong></td></tr>
        <tr><td>Compile Time:</td><td><strong>{stats.wall_time_ms:.2f} ms</strong></td></tr>
      </table>
    </div>
    """


# ---------------------------------------------------------------------------
# Comparison Panel (side-by-side)
# ---------------------------------------------------------------------------
def comparison_panel(comp: Optional[ComparisonResult] = None) -> str:
    if not comp:
        return """
        <div class="panel comparison-panel">
          <h3>⚖️ Comparison Mode</h3>
          <p class="placeholder">Compile two algorithms on the same array to compare.</p>
        </div>
        """

    left, right = comp.left, comp.right

    def winner_badge(winner_label):
        if winner_label == "tie":
            return "🟰 Tie"
        return f"👑 {escape(winner_label)}"

    return f"""
    <div class="panel comparison-panel">
      <h3>⚖️ {escape(left.algo_label)} vs {escape(right.algo_label)}</h3>
      <table class="comparison-table">
        <thead>
          <tr><th>Metric</th><th>{escape(left.algo_label)}</th><th>{escape(right.algo_label)}</th><th>Winner</th></tr>
        </thead>
        <tbody>
          <tr><td>Comparisons</td><td>{left.compares}</td><td>{right.compares}</td><td>{winner_badge(comp.winner_compares)}</td></tr>
          <tr><td>Array Writes</td><td>{left.writes}</td><td>{right.writes}</td><td>{winner_badge(comp.winner_writes)}</td></tr>
          <tr><td>Total Ops</td><td>{left.total}</td><td>{right.total}</td><td>{winner_badge(comp.winner_total)}</td></tr>
        </tbody>
      </table>
    </div>
    """


# ---------------------------------------------------------------------------
# Pseudocode Viewer
# ---------------------------------------------------------------------------
def pseudocode_viewer(pseudocode_lines: List[str], algo_label: str = "") -> str:
    if not pseudocode_lines:
        return """
        <div class="code-block">
          <div style="color: #7d8590; padding: 20px; text-align: center;">
            Select an algorithm to view pseudocode
          </div>
        </div>
        """

    lines_html = [
        f'<div class="code-line" data-line="{i}">{escape(line)}</div>'
        for i, line in enumerate(pseudocode_lines)
    ]
    return f"""
    <div class="code-block" title="{escape(algo_label)}">
      {''.join(lines_html)}
    </div>
    """
