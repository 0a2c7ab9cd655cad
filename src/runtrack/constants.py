# runtrack/constants.py
"""
Tuning constants for the runtrack engine.

These are the hard defaults. Scripts can override most of them through
`runtrack.config` (TOML / environment), engine functions take them as
keyword defaults.
"""

from __future__ import annotations

import datetime as _dt

# ---------------------------
# Geodesy
# ---------------------------
EARTH_RADIUS_KM = 6371.0

# Origin used when a trimmed track is re-based to "time 0".
EPOCH = _dt.datetime(1970, 1, 1, tzinfo=_dt.timezone.utc)

# ---------------------------
# Editing
# ---------------------------
OUTLIER_MAX_SPEED_KMH = 45.0
MERGE_SEAM_MS = 1000
MERGED_TRACK_COLOR = "#0ea5e9"

# ---------------------------
# Queries
# ---------------------------
SMOOTHED_PACE_MIN_KM = 0.05
SMOOTHED_PACE_MIN_DELTA_KM = 0.001
TIME_QUERY_MIN_DELTA_KM = 0.0001
DEFAULT_PACE_LOOKBACK_M = 200.0

# ---------------------------
# Segment aggregation
# ---------------------------
SEGMENT_MIN_STEP_KM = 0.001

# ---------------------------
# Pauses
# ---------------------------
PAUSE_MIN_DURATION_S = 10.0
PAUSE_MAX_SPEED_KMH = 1.5
PAUSE_MIN_STEP_S = 0.1

# ---------------------------
# Signals
# ---------------------------
SMOOTHING_SEARCH_RADIUS = 100
ELEVATION_MOVING_AVERAGE_WINDOW = 15
ELEVATION_HYSTERESIS_M = 4.0
MIN_PACE_SPEED_KMH = 0.1

POWER_LOOKBACK = 2
DEFAULT_WEIGHT_KG = 70.0
MIN_ENERGY_COST = 2.0    # J/kg/m
MAX_ENERGY_COST = 20.0   # J/kg/m
MECHANICAL_EFFICIENCY = 0.31

# ---------------------------
# Colours
# ---------------------------
DEFAULT_SEGMENT_COLOR = "#06b6d4"
DEFAULT_MAX_HR = 190.0
COLOR_MIN_PACE_STEP_KM = 0.0005
PACE_COLOR_RANGE = (2.5, 15.0)   # min/km, exclusive bounds
HR_ZONE_COLORS = (
    (0.6, "#3b82f6"),   # Z1
    (0.7, "#22c55e"),   # Z2
    (0.8, "#eab308"),   # Z3
    (0.9, "#f97316"),   # Z4
)
HR_ZONE_MAX_COLOR = "#ef4444"   # Z5
