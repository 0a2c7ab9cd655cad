# runtrack/analyze/segment.py
"""
Statistics for an arbitrary distance range of a track (selections,
suggested segments).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from runtrack.constants import SEGMENT_MIN_STEP_KM
from runtrack.core.geodesy import elapsed_ms
from runtrack.core.model import Track, TrackPoint
from runtrack.analyze.query import points_in_range


@dataclass(frozen=True)
class SegmentStats:
    distance: float          # km
    duration: float          # ms
    pace: float              # min/km
    min_pace: float
    max_pace: float
    elevation_gain: float    # m, naive delta sum
    elevation_loss: float
    min_ele: float
    max_ele: float
    avg_hr: Optional[float] = None
    min_hr: Optional[float] = None
    max_hr: Optional[float] = None
    avg_power: Optional[float] = None
    avg_cadence: Optional[float] = None


def _present(points: Sequence[TrackPoint], field: str) -> list[float]:
    return [v for v in (getattr(p, field) for p in points) if v is not None]


def _mean(values: list[float]) -> Optional[float]:
    return sum(values) / len(values) if values else None


def segment_stats(track: Track, start_km: float, end_km: float) -> Optional[SegmentStats]:
    """Aggregate [start_km, end_km]; None when under 2 points fall in range."""
    points = points_in_range(track, start_km, end_km)
    if len(points) < 2:
        return None

    distance = points[-1].cumulative_distance - points[0].cumulative_distance
    duration = elapsed_ms(points[0].time, points[-1].time)
    pace = (duration / 60000.0) / distance if distance > 0 else 0.0

    gain = loss = 0.0
    paces: list[float] = []
    for p1, p2 in zip(points, points[1:]):
        diff = p2.ele - p1.ele
        if diff > 0:
            gain += diff
        else:
            loss -= diff

        d = p2.cumulative_distance - p1.cumulative_distance
        t = elapsed_ms(p1.time, p2.time) / 60000.0
        if d > SEGMENT_MIN_STEP_KM and t > 0:
            paces.append(t / d)

    eles = [p.ele for p in points]
    hrs = _present(points, "hr")

    return SegmentStats(
        distance=distance,
        duration=duration,
        pace=pace,
        min_pace=min(paces) if paces else pace,
        max_pace=max(paces) if paces else pace,
        elevation_gain=gain,
        elevation_loss=loss,
        min_ele=min(eles),
        max_ele=max(eles),
        avg_hr=_mean(hrs),
        min_hr=min(hrs) if hrs else None,
        max_hr=max(hrs) if hrs else None,
        avg_power=_mean(_present(points, "power")),
        avg_cadence=_mean(_present(points, "cad")),
    )
