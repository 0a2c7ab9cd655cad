import pytest

from runtrack.constants import DEFAULT_SEGMENT_COLOR
from runtrack.core.metrics import build_track
from runtrack.visualize.colors import GradientMetric, hr_zone_color, hsl, ramp, segment_colors
from conftest import line_track, point


def test_none_metric_uses_default(ten_km_track):
    segs = segment_colors(ten_km_track, "none")
    assert len(segs) == len(ten_km_track) - 1
    assert {s.color for s in segs} == {DEFAULT_SEGMENT_COLOR}
    assert segs[0].p1 is ten_km_track.points[0]
    assert segs[0].p2 is ten_km_track.points[1]


def test_single_point_track_has_no_segments():
    assert segment_colors(build_track([point(0, 0)]), GradientMetric.PACE) == []


def test_hsl_format():
    assert hsl(260) == "hsl(260, 90%, 50%)"
    assert hsl(130.25) == "hsl(130.2, 90%, 50%)"
    assert ramp(0.5, 120, 60) == "hsl(90, 90%, 50%)"


@pytest.mark.parametrize(
    "hr, expected",
    [
        (100, "#3b82f6"),
        (130, "#22c55e"),
        (150, "#eab308"),
        (170, "#f97316"),
        (190, "#ef4444"),
    ],
)
def test_hr_zone_buckets(hr, expected):
    assert hr_zone_color(hr, 190) == expected


def test_hr_zones_use_track_max():
    t = line_track(n=3, hr=lambda i: [100.0, 120.0, 200.0][i])
    segs = segment_colors(t, GradientMetric.HR_ZONES)
    # 120/200 = 0.6 -> zone 2; 200/200 -> zone 5
    assert [s.color for s in segs] == ["#22c55e", "#ef4444"]


def test_pace_ramp_fast_to_slow():
    # 5:00 min/km for 1 km, then 10:00 min/km
    pts = [point(i * 0.1, i * 30) for i in range(11)]
    pts += [point(1.0 + i * 0.1, 300 + i * 60) for i in range(1, 11)]
    segs = segment_colors(build_track(pts), "pace")

    assert segs[0].value == pytest.approx(5.0)
    assert segs[0].color == "hsl(260, 90%, 50%)"
    assert segs[-1].value == pytest.approx(10.0)
    assert segs[-1].color == "hsl(0, 90%, 50%)"


def test_speed_ramp_inverted():
    pts = [point(i * 0.1, i * 30) for i in range(11)]
    pts += [point(1.0 + i * 0.1, 300 + i * 60) for i in range(1, 11)]
    segs = segment_colors(build_track(pts), GradientMetric.SPEED)

    assert segs[0].value == pytest.approx(12.0)
    assert segs[0].color == "hsl(260, 90%, 50%)"   # fastest
    assert segs[-1].color == "hsl(0, 90%, 50%)"    # slowest


def test_elevation_two_stage_ramp():
    t = line_track(n=3, ele=lambda i: [100.0, 150.0, 200.0][i])
    segs = segment_colors(t, GradientMetric.ELEVATION)
    assert [s.color for s in segs] == ["hsl(60, 90%, 50%)", "hsl(0, 90%, 50%)"]


def test_flat_metric_gets_fallback_range(ten_km_track):
    # all elevations equal: range falls back to [0, 1], ratio clamps to 1
    segs = segment_colors(ten_km_track, GradientMetric.ELEVATION)
    assert {s.color for s in segs} == {"hsl(0, 90%, 50%)"}


def test_unknown_metric_rejected(ten_km_track):
    with pytest.raises(ValueError):
        segment_colors(ten_km_track, "cadence")
