# runtrack/visualize/plot.py
"""
Plotting routines for runtrack
"""

from __future__ import annotations

import colorsys
import re
from pathlib import Path

import matplotlib
import matplotlib.pyplot as plt
from matplotlib.collections import LineCollection
from matplotlib.colors import to_rgb as _mpl_to_rgb

from runtrack.visualize.colors import ColoredSegment

_HSL_RE = re.compile(r"hsl\(\s*([-\d.]+),\s*([\d.]+)%,\s*([\d.]+)%\s*\)")


def to_rgb(color: str) -> tuple[float, float, float]:
    """Convert an `hsl(...)` string or any matplotlib colour to RGB."""
    m = _HSL_RE.fullmatch(color.strip())
    if m is None:
        return _mpl_to_rgb(color)
    h, s, l = (float(g) for g in m.groups())
    # colorsys uses HLS ordering
    return colorsys.hls_to_rgb((h % 360) / 360.0, l / 100.0, s / 100.0)


def plot_segments(segments: list[ColoredSegment], *, title: str = "", ax=None):
    """Draw coloured segments on lon/lat axes and return the Axes."""
    if ax is None:
        _, ax = plt.subplots(figsize=(8, 6))

    lines = [[(s.p1.lon, s.p1.lat), (s.p2.lon, s.p2.lat)] for s in segments]
    lc = LineCollection(lines, colors=[to_rgb(s.color) for s in segments], linewidths=2)
    ax.add_collection(lc)
    if segments:
        ax.autoscale()
    ax.set_aspect("equal", adjustable="datalim")
    ax.set_xlabel("Longitude")
    ax.set_ylabel("Latitude")
    if title:
        ax.set_title(title)
    return ax


def save_segments_plot(segments: list[ColoredSegment], out_path: Path, *, title: str = "") -> Path:
    """Render to a PNG without needing a display."""
    matplotlib.use("Agg")
    fig, ax = plt.subplots(figsize=(8, 6))
    try:
        plot_segments(segments, title=title, ax=ax)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(out_path, dpi=120)
    finally:
        plt.close(fig)
    return out_path
