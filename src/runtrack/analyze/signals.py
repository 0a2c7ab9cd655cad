# runtrack/analyze/signals.py
"""
Derived signals computed from noisy sensor data.

- smooth_points:      time-window mean of elevation and heart rate
- smooth_elevation:   index moving average of elevation
- metrics_at:         windowed speed/pace at one index
- elevation_stats:    gain/loss with a hysteresis (peak/valley) filter
- running_power:      gradient-aware power estimate (Minetti energy cost)

All functions return new point lists; inputs are left untouched.
Cumulative distance is never changed here, only values derived from it.
"""

from __future__ import annotations

import datetime as _dt
from dataclasses import replace
from typing import NamedTuple, Sequence

from runtrack.constants import (
    DEFAULT_WEIGHT_KG,
    ELEVATION_HYSTERESIS_M,
    ELEVATION_MOVING_AVERAGE_WINDOW,
    MAX_ENERGY_COST,
    MECHANICAL_EFFICIENCY,
    MIN_ENERGY_COST,
    MIN_PACE_SPEED_KMH,
    POWER_LOOKBACK,
    SMOOTHING_SEARCH_RADIUS,
)
from runtrack.core.geodesy import elapsed_s
from runtrack.core.model import TrackPoint


class PaceSample(NamedTuple):
    speed: float  # km/h
    pace: float   # min/km


class ElevationStats(NamedTuple):
    gain: float   # m
    loss: float   # m


# ---------------------------
# Smoothing
# ---------------------------

def smooth_points(
        points: Sequence[TrackPoint],
        window_seconds: float,
        *,
        search_radius: int = SMOOTHING_SEARCH_RADIUS,
) -> list[TrackPoint]:
    """
    Average elevation and heart rate over +/- window_seconds/2.

    Only neighbours within `search_radius` indices are considered. Heart
    rate keeps its own sample count so points without HR don't drag the
    mean down. Points with fewer than 2 samples in window stay as they are.
    """
    pts = list(points)
    if window_seconds <= 1 or len(pts) < 2:
        return pts

    half = _dt.timedelta(seconds=window_seconds / 2)
    n = len(pts)
    out: list[TrackPoint] = []

    for i, p in enumerate(pts):
        lo_t, hi_t = p.time - half, p.time + half
        ele_sum = hr_sum = 0.0
        count = hr_count = 0

        for q in pts[max(0, i - search_radius):min(n, i + search_radius + 1)]:
            if lo_t <= q.time <= hi_t:
                ele_sum += q.ele
                count += 1
                if q.hr is not None:
                    hr_sum += q.hr
                    hr_count += 1

        if count < 2:
            out.append(p)
            continue
        out.append(replace(
            p,
            ele=ele_sum / count,
            hr=hr_sum / hr_count if hr_count else p.hr,
        ))

    return out


def smooth_elevation(
        points: Sequence[TrackPoint],
        window_size: int = ELEVATION_MOVING_AVERAGE_WINDOW,
) -> list[TrackPoint]:
    """Centred moving average of elevation over `window_size` points."""
    pts = list(points)
    if len(pts) < window_size:
        return pts

    half = window_size // 2
    out = []
    for i, p in enumerate(pts):
        window = pts[max(0, i - half):min(len(pts), i + half + 1)]
        out.append(replace(p, ele=sum(q.ele for q in window) / len(window)))
    return out


# ---------------------------
# Speed / pace
# ---------------------------

def _sample(dist_km: float, hours: float) -> PaceSample:
    speed = dist_km / hours if hours > 0 else 0.0
    return PaceSample(speed, 60.0 / speed if speed > MIN_PACE_SPEED_KMH else 0.0)


def metrics_at(points: Sequence[TrackPoint], index: int, window_seconds: float) -> PaceSample:
    """
    Speed (km/h) and pace (min/km) at `index`, averaged over a time window.

    The window grows symmetrically by index until it leaves
    +/- window_seconds/2. Without a window (or at index 0) this is the
    plain consecutive-point value.
    """
    if index == 0:
        return PaceSample(0.0, 0.0)

    if window_seconds <= 1:
        p1, p2 = points[index - 1], points[index]
        return _sample(
            p2.cumulative_distance - p1.cumulative_distance,
            elapsed_s(p1.time, p2.time) / 3600.0,
        )

    half = _dt.timedelta(seconds=window_seconds / 2)
    now = points[index].time

    lo = index
    while lo > 0 and points[lo].time > now - half:
        lo -= 1
    hi = index
    while hi < len(points) - 1 and points[hi].time < now + half:
        hi += 1

    dist = points[hi].cumulative_distance - points[lo].cumulative_distance
    hours = elapsed_s(points[lo].time, points[hi].time) / 3600.0
    if hours > 0 and dist > 0:
        return _sample(dist, hours)
    return PaceSample(0.0, 0.0)


# ---------------------------
# Elevation gain / loss
# ---------------------------

def elevation_stats(points: Sequence, threshold: float = ELEVATION_HYSTERESIS_M) -> ElevationStats:
    """
    Elevation gain/loss with a hysteresis filter.

    Tracks the current peak and valley; a climb or descent is only
    committed once the reversal from the tracked extremum reaches
    `threshold` metres. The open segment is flushed at the end.
    Accepts anything with an `ele` attribute.
    """
    if len(points) < 2:
        return ElevationStats(0.0, 0.0)

    gain = loss = 0.0
    valley = peak = points[0].ele
    climbing = points[1].ele >= points[0].ele

    for p in points[1:]:
        ele = p.ele
        if climbing:
            if ele > peak:
                peak = ele
            elif peak - ele >= threshold:
                if peak - valley > 0:
                    gain += peak - valley
                valley = peak = ele
                climbing = False
        else:
            if ele < valley:
                valley = ele
            elif ele - valley >= threshold:
                if peak - valley > 0:
                    loss += peak - valley
                peak = valley = ele
                climbing = True

    if peak - valley > 0:
        if climbing:
            gain += peak - valley
        else:
            loss += peak - valley

    return ElevationStats(gain, loss)


# ---------------------------
# Running power
# ---------------------------

def minetti_energy_cost(
        gradient: float, *,
        min_cost: float = MIN_ENERGY_COST,
        max_cost: float = MAX_ENERGY_COST,
) -> float:
    """
    Energy cost of running (J/kg/m) at a gradient (rise/run).

    Minetti et al. 2002, clamped to [min_cost, max_cost] so GPS or
    elevation glitches can't produce absurd values.
    """
    i = gradient
    ec = 155.4 * i**5 - 30.4 * i**4 - 43.3 * i**3 + 46.3 * i**2 + 19.5 * i + 3.6
    return max(min_cost, min(ec, max_cost))


def running_power(
        points: Sequence[TrackPoint],
        weight_kg: float = DEFAULT_WEIGHT_KG,
        *,
        lookback: int = POWER_LOOKBACK,
        min_cost: float = MIN_ENERGY_COST,
        max_cost: float = MAX_ENERGY_COST,
        efficiency: float = MECHANICAL_EFFICIENCY,
) -> list[TrackPoint]:
    """
    Estimate mechanical running power (W) for every point.

    Speed and gradient come from the points `lookback` indices either
    side; points too close to an end get 0.
    """
    pts = list(points)
    if len(pts) < 2:
        return pts

    out = []
    for i, p in enumerate(pts):
        if i < lookback or i >= len(pts) - lookback:
            out.append(replace(p, power=0.0))
            continue

        prev, nxt = pts[i - lookback], pts[i + lookback]
        dist_m = (nxt.cumulative_distance - prev.cumulative_distance) * 1000.0
        dt_s = elapsed_s(prev.time, nxt.time)
        if dt_s <= 0 or dist_m <= 0:
            out.append(replace(p, power=0.0))
            continue

        speed = dist_m / dt_s
        cost = minetti_energy_cost((nxt.ele - prev.ele) / dist_m, min_cost=min_cost, max_cost=max_cost)
        metabolic = cost * speed * weight_kg
        out.append(replace(p, power=max(0.0, metabolic * efficiency)))

    return out
