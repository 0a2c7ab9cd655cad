# runtrack/analyze/pauses.py
"""
Pause detection: stretches where the runner was (almost) standing still.
"""

from __future__ import annotations

import math
from typing import Optional

from runtrack.constants import PAUSE_MAX_SPEED_KMH, PAUSE_MIN_DURATION_S, PAUSE_MIN_STEP_S
from runtrack.core.geodesy import elapsed_s
from runtrack.core.model import PauseSegment, Track, TrackPoint


def find_pauses(
        track: Track,
        min_duration_s: float = PAUSE_MIN_DURATION_S,
        max_speed_kmh: float = PAUSE_MAX_SPEED_KMH,
) -> list[PauseSegment]:
    """
    Return the slow intervals that lasted at least `min_duration_s`.

    A pause is only reported once movement resumes. If the track ends
    while still slow, that trailing stretch is dropped.
    """
    pts = track.points
    if len(pts) < 2:
        return []

    pauses: list[PauseSegment] = []
    start: Optional[TrackPoint] = None

    for p1, p2 in zip(pts, pts[1:]):
        dt = elapsed_s(p1.time, p2.time)
        dd = p2.cumulative_distance - p1.cumulative_distance
        # Near-simultaneous fixes must never look like standing still.
        speed = (dd / dt) * 3600.0 if dt > PAUSE_MIN_STEP_S else math.inf

        if speed < max_speed_kmh:
            if start is None:
                start = p1
            continue

        if start is not None:
            dur = elapsed_s(start.time, p1.time)
            if dur >= min_duration_s:
                pauses.append(PauseSegment(start_point=start, end_point=p1, duration=dur))
            start = None

    return pauses
