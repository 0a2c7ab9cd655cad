# runtrack/core/geodesy.py
"""
Great-circle helpers for runtrack
"""

from __future__ import annotations

import datetime as _dt

from haversine import haversine, Unit

from runtrack.constants import EARTH_RADIUS_KM

_MS = _dt.timedelta(milliseconds=1)


def distance_km(p1, p2) -> float:
    """
    Haversine distance in km between two objects with lat/lon attributes.

    The library gives the central angle (Unit.RADIANS); scaling it
    ourselves keeps the radius at exactly 6371 km.
    """
    angle = haversine((p1.lat, p1.lon), (p2.lat, p2.lon), unit=Unit.RADIANS)
    return angle * EARTH_RADIUS_KM


def elapsed_ms(t0: _dt.datetime, t1: _dt.datetime) -> float:
    """Milliseconds from t0 to t1 (negative if t1 is earlier)."""
    return (t1 - t0) / _MS


def elapsed_s(t0: _dt.datetime, t1: _dt.datetime) -> float:
    return (t1 - t0).total_seconds()


def lerp(a: float, b: float, ratio: float) -> float:
    return a + (b - a) * ratio


def lerp_optional(a: float | None, b: float | None, ratio: float) -> float | None:
    """
    Interpolate a sparse sensor field.

    Both present -> interpolate, one present -> that one, none -> None.
    """
    if a is not None and b is not None:
        return a + (b - a) * ratio
    return a if a is not None else b
