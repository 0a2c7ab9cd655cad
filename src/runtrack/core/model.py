# runtrack/core/model.py
"""
Value types shared by the whole engine.

Everything here is frozen. A Track is never edited in place: editing
operations build a new one through `runtrack.core.metrics.build_track`,
which is also the only place cumulative distance gets stamped.
"""

from __future__ import annotations

import datetime as _dt
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class TrackPoint:
    """
    A single GPS fix plus derived fields.

    cumulative_distance is in km from the first point of the owning
    track. Optional sensor fields are None when absent, never 0.
    """

    lat: float
    lon: float
    ele: float
    time: _dt.datetime
    cumulative_distance: float = 0.0
    hr: Optional[float] = None
    cad: Optional[float] = None
    power: Optional[float] = None


@dataclass(frozen=True)
class Track:
    """
    Ordered points with redundant summary fields.

    distance (km) and duration (ms) always match the points; build
    instances with `build_track` rather than calling this directly.
    """

    points: tuple[TrackPoint, ...]
    distance: float = 0.0
    duration: float = 0.0
    id: str = ""
    name: str = ""
    color: str = ""

    def __len__(self) -> int:
        return len(self.points)

    @property
    def start_time(self) -> Optional[_dt.datetime]:
        return self.points[0].time if self.points else None


@dataclass(frozen=True)
class PauseSegment:
    """A slow interval. Points are the track's own objects, not copies."""

    start_point: TrackPoint
    end_point: TrackPoint
    duration: float  # seconds
