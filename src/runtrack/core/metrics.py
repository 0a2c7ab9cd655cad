# runtrack/core/metrics.py
"""
Metrics recomputation for runtrack

Adapted from the step-metrics pass of the GPX analyzer: walk consecutive
point pairs once, accumulate great-circle distance, and derive the track
summary from the endpoints.

`recompute` is the single place allowed to set
TrackPoint.cumulative_distance. Every editing operation funnels its
output through `build_track`, which calls it.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, Sequence

from runtrack.core.geodesy import distance_km, elapsed_ms
from runtrack.core.model import Track, TrackPoint


@dataclass(frozen=True)
class RecomputedMetrics:
    points: tuple[TrackPoint, ...]
    distance: float   # km
    duration: float   # ms


def recompute(points: Sequence[TrackPoint]) -> RecomputedMetrics:
    """
    Re-stamp cumulative distance and derive distance/duration.

    Input cumulative distances are ignored. With fewer than 2 points the
    points are returned as-is and both totals are 0.
    """
    pts = tuple(points)
    if len(pts) < 2:
        return RecomputedMetrics(points=pts, distance=0.0, duration=0.0)

    total = 0.0
    stamped = [replace(pts[0], cumulative_distance=0.0)]
    for p0, p1 in zip(pts, pts[1:]):
        total += distance_km(p0, p1)
        stamped.append(replace(p1, cumulative_distance=total))

    return RecomputedMetrics(
        points=tuple(stamped),
        distance=total,
        duration=elapsed_ms(pts[0].time, pts[-1].time),
    )


def build_track(
        points: Iterable[TrackPoint], *,
        id: str = "",
        name: str = "",
        color: str = "",
) -> Track:
    """Build a consistent Track from raw (or edited) points."""
    m = recompute(list(points))
    return Track(
        points=m.points,
        distance=m.distance,
        duration=m.duration,
        id=id,
        name=name,
        color=color,
    )


def rebuild(track: Track, points: Iterable[TrackPoint]) -> Track:
    """New Track with `track`'s identity and the given points."""
    return build_track(points, id=track.id, name=track.name, color=track.color)
