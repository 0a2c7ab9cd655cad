# runtrack/analyze/summary.py
"""
Whole-track summary used by the analyze report.
"""

from __future__ import annotations

from runtrack.analyze.pauses import find_pauses
from runtrack.analyze.signals import elevation_stats, running_power, smooth_points
from runtrack.config import RunTrackConfig
from runtrack.core.model import Track


def summarize(track: Track, cfg: RunTrackConfig) -> dict:
    """Return a flat dict of headline numbers for `track`."""
    if len(track) < 2:
        return {"points": len(track), "distance_km": 0.0, "duration_s": 0.0}

    points = smooth_points(track.points, cfg.elevation.smoothing_window_s)
    elev = elevation_stats(points, cfg.elevation.hysteresis_threshold_m)

    pauses = find_pauses(track, cfg.pauses.min_duration_s, cfg.pauses.max_speed_kmh)

    pw = cfg.power
    powered = running_power(
        points, pw.weight_kg,
        lookback=pw.lookback,
        min_cost=pw.min_energy_cost,
        max_cost=pw.max_energy_cost,
        efficiency=pw.mechanical_efficiency,
    )
    watts = [p.power for p in powered if p.power]

    hrs = [p.hr for p in track.points if p.hr is not None]
    duration_s = track.duration / 1000.0

    return {
        "points": len(track),
        "distance_km": track.distance,
        "duration_s": duration_s,
        "avg_pace_min_km": (duration_s / 60.0) / track.distance if track.distance > 0 else 0.0,
        "elevation_gain_m": elev.gain,
        "elevation_loss_m": elev.loss,
        "pauses": len(pauses),
        "paused_s": sum(p.duration for p in pauses),
        "max_hr": max(hrs) if hrs else None,
        "avg_power_w": sum(watts) / len(watts) if watts else None,
    }
