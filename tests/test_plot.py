import matplotlib

matplotlib.use("Agg")

import pytest

from runtrack.visualize.colors import segment_colors
from runtrack.visualize.plot import plot_segments, save_segments_plot, to_rgb


def test_to_rgb_hsl():
    r, g, b = to_rgb("hsl(0, 90%, 50%)")
    assert (r, g, b) == pytest.approx((0.95, 0.05, 0.05))


def test_to_rgb_hex_passthrough():
    assert to_rgb("#ff0000") == pytest.approx((1.0, 0.0, 0.0))


def test_plot_segments_adds_collection(ten_km_track):
    ax = plot_segments(segment_colors(ten_km_track, "speed"), title="speed")
    assert len(ax.collections) == 1
    assert ax.get_title() == "speed"


def test_save_segments_plot(tmp_path, ten_km_track):
    out = save_segments_plot(segment_colors(ten_km_track, "elevation"), tmp_path / "out" / "track.png")
    assert out.exists()
    assert out.stat().st_size > 0
