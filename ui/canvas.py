"""
canvas.py — SVG Bar Renderer
=============================
Pure rendering function: SinkSnapshot → SVG string.

The renderer consumes:
  • snapshot     – array values, the two highlighted indices, final marks
  • config       – visual config (canvas size, colors, fonts, …)
  • show_numbers – draw each value above its bar when there is room

Design decisions:
  - NO mutation.  The snapshot is immutable; the caller passes in
    everything and gets back a string.
  - Bar height is scaled against the current maximum, so a custom array
    of small values still fills the canvas.
  - Unhighlighted bars are coloured by value along a hue ramp (blue for
    small, warm for large); highlighted bars are rose, finalised bars
    emerald.
"""

import colorsys
from typing import Dict

from sink import SinkSnapshot


# ---------------------------------------------------------------------------
# Visual Config — color palette, dimensions, fonts
# ---------------------------------------------------------------------------
class CanvasConfig:
    # canvas
    width:  int = 1000
    height: int = 520
    bg:     str = "#010409"
    top_margin: int = 20          # headroom for value labels

    # bar colors
    bar_colors: Dict[str, str] = {
        "highlight": "#f43f5e",   # rose — compared / swapped / written
        "final":     "#10b981",   # emerald — marked final
    }
    hue_start:  float = 0.6
    saturation: float = 0.9
    brightness: float = 0.9

    # value labels
    label_color:    str = "#ffffff"
    label_bg:       str = "rgba(0,0,0,0.7)"
    label_font:     str = "Arial, sans-serif"


CONFIG = CanvasConfig()


# ---------------------------------------------------------------------------
# Main Render Function
# ---------------------------------------------------------------------------
def render_bars(
    snapshot: SinkSnapshot,
    config: CanvasConfig = CONFIG,
    show_numbers: bool = True,
) -> str:
    """
    Returns an SVG string.

    Args:
        snapshot     : Read-only view of the sink.
        config       : Visual config.
        show_numbers : If True, label bars that are wide enough.
    """
    w, h = config.width, config.height
    svg_parts = [
        f'<svg width="{w}" height="{h}" viewBox="0 0 {w} {h}" '
        f'xmlns="http://www.w3.org/2000/svg" style="background: {config.bg};">',
        f'<rect width="{w}" height="{h}" fill="{config.bg}"/>',
    ]

    values = snapshot.array
    n = len(values)
    if n == 0:
        svg_parts.append("</svg>")
        return "\n".join(svg_parts)

    bar_width = max(1.0, w / n)
    font_size = _font_size(n)
    top = max(1, max(values))

    for i, val in enumerate(values):
        bar_h = max(0, int((val / top) * (h - config.top_margin)))
        x = i * bar_width
        y = h - bar_h
        fill = _bar_color(i, val, top, snapshot, config)
        svg_parts.append(
            f'<rect class="bar" data-index="{i}" x="{x:.2f}" y="{y}" '
            f'width="{bar_width:.2f}" height="{bar_h}" fill="{fill}"/>'
        )
        if show_numbers:
            svg_parts.append(_render_label(val, x, y, bar_width, n, font_size, config))

    svg_parts.append("</svg>")
    return "\n".join(p for p in svg_parts if p)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def _font_size(n: int) -> int:
    if n <= 50:
        return 14
    if n <= 120:
        return 10
    return 7


def _bar_color(i: int, val: int, top: int, snapshot: SinkSnapshot, config: CanvasConfig) -> str:
    if i == snapshot.highlight_a or i == snapshot.highlight_b:
        return config.bar_colors["highlight"]
    if i in snapshot.marked:
        return config.bar_colors["final"]
    hue = config.hue_start - (val / top) * config.hue_start
    r, g, b = colorsys.hsv_to_rgb(max(0.0, hue), config.saturation, config.brightness)
    return f"#{int(r * 255):02x}{int(g * 255):02x}{int(b * 255):02x}"


def _render_label(val: int, x: float, y: int, bar_width: float, n: int, font_size: int, config: CanvasConfig) -> str:
    text = str(val)
    # rough advance width of a bold digit
    text_width = len(text) * font_size * 0.6
    if not (bar_width > text_width * 0.9 or n < 50):
        return ""
    cx = x + bar_width / 2
    return (
        f'<g class="value-label">'
        f'<rect x="{cx - text_width / 2 - 2:.2f}" y="{y - font_size - 2}" '
        f'width="{text_width + 4:.2f}" height="{font_size + 2}" fill="{config.label_bg}"/>'
        f'<text x="{cx:.2f}" y="{y - 3}" text-anchor="middle" font-size="{font_size}" '
        f'font-family="{config.label_font}" font-weight="700" fill="{config.label_color}">{text}</text>'
        f'</g>'
    )
