# runtrack/visualize/colors.py
"""
Map a per-segment metric onto colours for map/chart rendering.

Continuous metrics are normalised into the [min, max] seen on the track
and turned into an HSL hue ramp. Heart-rate zones use five fixed colours
instead of a ramp.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from runtrack.constants import (
    COLOR_MIN_PACE_STEP_KM,
    DEFAULT_MAX_HR,
    DEFAULT_SEGMENT_COLOR,
    HR_ZONE_COLORS,
    HR_ZONE_MAX_COLOR,
    PACE_COLOR_RANGE,
)
from runtrack.core.geodesy import elapsed_s
from runtrack.core.model import Track, TrackPoint


class GradientMetric(str, Enum):
    NONE = "none"
    ELEVATION = "elevation"
    PACE = "pace"
    SPEED = "speed"
    HR = "hr"
    HR_ZONES = "hr_zones"
    POWER = "power"


@dataclass(frozen=True)
class ColoredSegment:
    p1: TrackPoint
    p2: TrackPoint
    color: str
    value: Optional[float] = None


def hsl(hue: float) -> str:
    return f"hsl({round(hue, 1):g}, 90%, 50%)"


def ramp(ratio: float, start_hue: float, end_hue: float) -> str:
    """Colour `ratio` (0..1) of the way from start_hue to end_hue."""
    return hsl(start_hue + (end_hue - start_hue) * ratio)


def hr_zone_color(hr: float, max_hr: float) -> str:
    ratio = hr / max_hr
    for upper, color in HR_ZONE_COLORS:
        if ratio < upper:
            return color
    return HR_ZONE_MAX_COLOR


def _point_value(track: Track, i: int, metric: GradientMetric) -> float:
    p = track.points[i]
    if metric is GradientMetric.ELEVATION:
        return p.ele
    if metric in (GradientMetric.HR, GradientMetric.HR_ZONES):
        return p.hr or 0.0
    if metric is GradientMetric.POWER:
        return p.power or 0.0

    if i == 0:
        return 0.0
    prev = track.points[i - 1]
    dist = p.cumulative_distance - prev.cumulative_distance
    hours = elapsed_s(prev.time, p.time) / 3600.0
    if metric is GradientMetric.PACE:
        return (hours * 60.0) / dist if dist > COLOR_MIN_PACE_STEP_KM and hours > 0 else 0.0
    return dist / hours if hours > 0 else 0.0


def _value_range(values: list[float], metric: GradientMetric) -> tuple[float, float]:
    if metric is GradientMetric.PACE:
        lo, hi = PACE_COLOR_RANGE
        valid = [v for v in values if lo < v < hi]
    else:
        valid = [v for v in values if v > 0]

    # Degenerate (empty or flat) tracks still get a usable range.
    if not valid or min(valid) == max(valid):
        return 0.0, 1.0
    return min(valid), max(valid)


def _metric_color(metric: GradientMetric, ratio: float) -> str:
    if metric is GradientMetric.PACE:
        # fast (low pace) -> purple, slow -> red
        return ramp(ratio ** 0.8, 260, 0)
    if metric is GradientMetric.SPEED:
        return ramp(1 - ratio, 260, 0)
    if metric is GradientMetric.HR:
        return ramp(ratio, 200, 0)
    if metric is GradientMetric.ELEVATION:
        if ratio < 0.5:
            return ramp(ratio * 2, 120, 60)
        return ramp((ratio - 0.5) * 2, 60, 0)
    return ramp(ratio, 60, 280)  # power


def segment_colors(
        track: Track,
        metric: GradientMetric | str,
        default_color: str = DEFAULT_SEGMENT_COLOR,
) -> list[ColoredSegment]:
    """One ColoredSegment per consecutive point pair."""
    metric = GradientMetric(metric)
    pts = track.points
    pairs = list(zip(pts, pts[1:]))

    if metric is GradientMetric.NONE or len(pts) < 2:
        return [ColoredSegment(p1, p2, default_color) for p1, p2 in pairs]

    values = [_point_value(track, i, metric) for i in range(len(pts))]
    lo, hi = _value_range(values, metric)
    span = (hi - lo) or 1.0
    max_hr = max((p.hr or 0.0 for p in pts), default=0.0) or DEFAULT_MAX_HR

    out = []
    for i, (p1, p2) in enumerate(pairs, start=1):
        val = values[i]
        if metric is GradientMetric.HR_ZONES:
            color = hr_zone_color(val, max_hr)
        else:
            ratio = max(0.0, min(1.0, (val - lo) / span))
            color = _metric_color(metric, ratio)
        out.append(ColoredSegment(p1, p2, color, val))
    return out
