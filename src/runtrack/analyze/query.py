# runtrack/analyze/query.py
"""
Random-access queries over a Track.

- point_at_distance: hover / drag / selection boundaries
- state_at_time:     playback, called every animation frame
- smoothed_pace:     windowed pace for the playback HUD

Both lookups use bisect. Time is the hot path and must stay O(log n);
distance gets the same treatment since cumulative distance is monotonic.
"""

from __future__ import annotations

import bisect
import datetime as _dt
from typing import NamedTuple, Optional

from runtrack.constants import (
    DEFAULT_PACE_LOOKBACK_M,
    SMOOTHED_PACE_MIN_DELTA_KM,
    SMOOTHED_PACE_MIN_KM,
    TIME_QUERY_MIN_DELTA_KM,
)
from runtrack.core.geodesy import elapsed_ms, lerp, lerp_optional
from runtrack.core.model import Track, TrackPoint


class TimeState(NamedTuple):
    point: TrackPoint
    pace: float  # min/km, 0 when unknown


def _cd(p: TrackPoint) -> float:
    return p.cumulative_distance


def _time(p: TrackPoint) -> _dt.datetime:
    return p.time


def point_at_distance(track: Track, target_km: float) -> Optional[TrackPoint]:
    """
    Interpolated point `target_km` into the track, or None out of range.
    """
    pts = track.points
    if len(pts) < 2 or target_km < 0 or target_km > track.distance:
        return None
    if target_km <= 0:
        return pts[0]
    if target_km >= track.distance:
        return pts[-1]

    # First point at or past the target; cd[0] == 0 < target so i >= 1.
    i = bisect.bisect_left(pts, target_km, key=_cd)
    if i >= len(pts):
        return pts[-1]
    p1, p2 = pts[i - 1], pts[i]

    seg = p2.cumulative_distance - p1.cumulative_distance
    if seg == 0:
        return p1
    ratio = (target_km - p1.cumulative_distance) / seg

    return TrackPoint(
        lat=lerp(p1.lat, p2.lat, ratio),
        lon=lerp(p1.lon, p2.lon, ratio),
        ele=lerp(p1.ele, p2.ele, ratio),
        time=p1.time + (p2.time - p1.time) * ratio,
        cumulative_distance=target_km,
        hr=lerp_optional(p1.hr, p2.hr, ratio),
        cad=lerp_optional(p1.cad, p2.cad, ratio),
        power=lerp_optional(p1.power, p2.power, ratio),
    )


def state_at_time(track: Track, offset_ms: float) -> Optional[TimeState]:
    """
    Interpolated position and pace `offset_ms` after the first point.

    Clamps to the first/last point (pace 0) outside the track. An exact
    timestamp hit returns the stored point, also with pace 0.
    """
    pts = track.points
    if len(pts) < 2:
        return None

    # Clamp on the number; huge offsets overflow datetime.
    if not offset_ms > 0:
        return TimeState(pts[0], 0.0)
    if offset_ms >= track.duration:
        return TimeState(pts[-1], 0.0)

    target = pts[0].time + _dt.timedelta(milliseconds=offset_ms)
    if target >= pts[-1].time:
        return TimeState(pts[-1], 0.0)

    i = bisect.bisect_left(pts, target, key=_time)
    if pts[i].time == target:
        return TimeState(pts[i], 0.0)
    p1, p2 = pts[i - 1], pts[i]

    dt_ms = elapsed_ms(p1.time, p2.time)
    ratio = elapsed_ms(p1.time, target) / dt_ms if dt_ms > 0 else 0.0
    dd = p2.cumulative_distance - p1.cumulative_distance

    point = TrackPoint(
        lat=lerp(p1.lat, p2.lat, ratio),
        lon=lerp(p1.lon, p2.lon, ratio),
        ele=lerp(p1.ele, p2.ele, ratio),
        time=target,
        cumulative_distance=p1.cumulative_distance + dd * ratio,
        hr=lerp_optional(p1.hr, p2.hr, ratio),
        cad=lerp_optional(p1.cad, p2.cad, ratio),
        power=lerp_optional(p1.power, p2.power, ratio),
    )
    pace = (dt_ms / 60000.0) / dd if dd > TIME_QUERY_MIN_DELTA_KM else 0.0
    return TimeState(point, pace)


def smoothed_pace(
        track: Track,
        at_km: float,
        lookback_m: float = DEFAULT_PACE_LOOKBACK_M,
) -> float:
    """
    Pace (min/km) over the `lookback_m` metres ending at `at_km`.

    Raw point-to-point pace is far too noisy at 1 Hz; the caller picks
    the window (usually wider at higher playback speed).
    """
    if at_km < SMOOTHED_PACE_MIN_KM:
        return 0.0

    start_km = max(0.0, at_km - lookback_m / 1000.0)
    p_end = point_at_distance(track, at_km)
    p_start = point_at_distance(track, start_km)
    if p_end is None or p_start is None:
        return 0.0

    dd = p_end.cumulative_distance - p_start.cumulative_distance
    dt_ms = elapsed_ms(p_start.time, p_end.time)
    if dd > SMOOTHED_PACE_MIN_DELTA_KM and dt_ms > 0:
        return (dt_ms / 60000.0) / dd
    return 0.0


def points_in_range(track: Track, start_km: float, end_km: float) -> list[TrackPoint]:
    """
    Points covering [start_km, end_km], with interpolated boundary points.

    A boundary outside the track is simply left off.
    """
    out: list[TrackPoint] = []
    first = point_at_distance(track, start_km)
    if first is not None:
        out.append(first)
    out.extend(p for p in track.points if start_km < p.cumulative_distance < end_km)
    last = point_at_distance(track, end_km)
    if last is not None:
        out.append(last)
    return out
