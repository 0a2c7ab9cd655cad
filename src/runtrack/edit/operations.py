# runtrack/edit/operations.py
"""
Editing operations for runtrack

Each operation takes Track(s) and returns a brand-new Track built through
`runtrack.core.metrics`. Inputs are never modified. Bad selections
(empty track, start >= end, boundary outside the track) give back the
input unchanged so chained edits from a UI never blow up.
"""

from __future__ import annotations

import datetime as _dt
import logging
from dataclasses import replace
from typing import NamedTuple, Sequence

from runtrack.constants import (
    EPOCH,
    MERGE_SEAM_MS,
    MERGED_TRACK_COLOR,
    OUTLIER_MAX_SPEED_KMH,
)
from runtrack.core.geodesy import distance_km, elapsed_s
from runtrack.core.metrics import build_track, rebuild
from runtrack.core.model import Track, TrackPoint
from runtrack.analyze.query import point_at_distance, points_in_range

logger = logging.getLogger(__name__)


class RepairResult(NamedTuple):
    track: Track
    corrected_count: int


def cut(track: Track, start_km: float, end_km: float) -> Track:
    """
    Remove [start_km, end_km] and close the gap.

    Points after the cut are shifted back by the time the removed stretch
    took, so the splice shows no pause.
    """
    if start_km >= end_km or not track.points:
        return track

    p_start = point_at_distance(track, start_km)
    p_end = point_at_distance(track, end_km)
    if p_start is None or p_end is None:
        return track

    removed = p_end.time - p_start.time
    before = [p for p in track.points if p.cumulative_distance < start_km]
    after = [
        replace(p, time=p.time - removed)
        for p in track.points
        if p.cumulative_distance > end_km
    ]

    logger.debug(
        "cut %s: %.3f-%.3f km, removed %.1f s",
        track.id, start_km, end_km, removed.total_seconds(),
    )
    return rebuild(track, [*before, p_start, *after])


def trim_to_range(track: Track, start_km: float, end_km: float) -> Track:
    """
    Keep only [start_km, end_km], re-based to time 0 and distance 0.

    Fewer than 2 resulting points gives an empty track with the same
    identity.
    """
    kept = points_in_range(track, start_km, end_km)
    if len(kept) < 2:
        return replace(track, points=(), distance=0.0, duration=0.0)

    t0 = kept[0].time
    rebased = [replace(p, time=EPOCH + (p.time - t0)) for p in kept]
    return rebuild(track, rebased)


def _start_ms(track: Track) -> float:
    t = track.start_time
    return t.timestamp() * 1000.0 if t is not None else 0.0


def merge(tracks: Sequence[Track]) -> Track:
    """
    Concatenate tracks in start-time order.

    Every track after the first is shifted to start exactly one second
    after the previous one ended, keeping its own internal timing. Time
    stays strictly increasing across each seam.
    """
    ordered = sorted(tracks, key=_start_ms)
    seam = _dt.timedelta(milliseconds=MERGE_SEAM_MS)

    points: list[TrackPoint] = []
    for t in ordered:
        if not t.points:
            continue
        if points:
            offset = (points[-1].time + seam) - t.points[0].time
        else:
            offset = _dt.timedelta(0)
        points.extend(replace(p, time=p.time + offset) for p in t.points)

    now_ms = int(_dt.datetime.now(_dt.timezone.utc).timestamp() * 1000)
    return build_track(
        points,
        id=f"merged-{now_ms}",
        name=" + ".join(t.name for t in ordered),
        color=MERGED_TRACK_COLOR,
    )


def repair_gps_outliers(
        track: Track, *,
        max_speed_kmh: float = OUTLIER_MAX_SPEED_KMH,
) -> RepairResult:
    """
    Pull implausible fixes back onto their neighbours.

    An interior point reached from its predecessor faster than
    `max_speed_kmh` gets the midpoint of its two neighbours (lat, lon,
    ele). One forward pass over a working copy: the predecessor is
    already repaired, the successor is still raw. No second pass.
    """
    src = track.points
    if len(src) < 3:
        return RepairResult(track, 0)

    fixed = list(src)
    corrected = 0
    for i in range(1, len(fixed) - 1):
        p0, p1, p2 = fixed[i - 1], fixed[i], fixed[i + 1]
        hours = elapsed_s(p0.time, p1.time) / 3600.0
        if hours > 0 and distance_km(p0, p1) / hours > max_speed_kmh:
            fixed[i] = replace(
                p1,
                lat=(p0.lat + p2.lat) / 2,
                lon=(p0.lon + p2.lon) / 2,
                ele=(p0.ele + p2.ele) / 2,
            )
            corrected += 1

    logger.debug("repair %s: corrected %d of %d points", track.id, corrected, len(src))
    return RepairResult(rebuild(track, fixed), corrected)
