"""
runtrack configuration loader

This module centralizes *all* configuration handling for runtrack.

The engine functions take their tuning values as keyword arguments with
defaults from `runtrack.constants`. Scripts load a RunTrackConfig here
and pass the values through, so per-sport or per-sensor tuning never
requires touching code.

Precedence (highest to lowest) for any given value:
1) CLI argument (handled by each script)
2) Environment variables (RUNTRACK_*)
3) User config: ~/.config/runtrack/config.toml
4) Repo config: <repo_root>/config/config.toml
5) Hard defaults (runtrack.constants)

TOML is read with the standard library `tomllib`.

Example config.toml:

    [outliers]
    max_speed_kmh = 45.0

    [pauses]
    min_duration_s = 10
    max_speed_kmh = 1.5

    [elevation]
    hysteresis_threshold_m = 4.0
    smoothing_window_s = 0

    [power]
    weight_kg = 70
    lookback = 2

    [pace]
    lookback_m = 200
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from runtrack import constants as C
from runtrack.errors import ConfigError

# ---------------------------------------------------------------------------
# TOML loading helpers
# ---------------------------------------------------------------------------
def _load_toml(path: Path) -> dict[str, Any]:
    """
    Parse a TOML file at `path`.

    Behavior:
    - If the file does not exist, return an empty dict (non-fatal).
    - If the file exists but is invalid TOML, raise ConfigError
      with the offending path.
    """
    if not path.is_file():
        return {}

    try:
        return tomllib.loads(path.read_text(encoding="utf-8")) or {}
    except (tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
        raise ConfigError(f"Failed to parse TOML config: {path} ({e})") from e


# ---------------------------------------------------------------------------
# Generic coercion helpers
# ---------------------------------------------------------------------------
def _deep_get(d: dict[str, Any], dotted_key: str) -> Any:
    """
    Fetch nested dictionary values using dot-separated keys.

    Example:
        _deep_get(cfg, "pauses.min_duration_s")

    Returns None if any part of the path is missing.
    """
    cur: Any = d
    for part in dotted_key.split("."):
        if not isinstance(cur, dict) or part not in cur:
            return None
        cur = cur[part]
    return cur


def _as_float(v: Any) -> Optional[float]:
    """
    Coerce a config value into a float.

    Booleans are rejected (TOML `true` is not a threshold). Returns None
    when the value can't be read as a number, so the lower layer wins.
    """
    if v is None or isinstance(v, bool):
        return None
    if isinstance(v, (int, float)):
        return float(v)
    if isinstance(v, str):
        try:
            return float(v.strip())
        except ValueError:
            return None
    return None


def _as_int(v: Any) -> Optional[int]:
    f = _as_float(v)
    return int(f) if f is not None else None


# ---------------------------------------------------------------------------
# Repo discovery
# ---------------------------------------------------------------------------
def find_repo_root(start: Path) -> Optional[Path]:
    """
    Walk upward from `start` looking for the runtrack repo root.

    Heuristic:
    - The presence of a `config/` directory marks the repo root
    """
    start = start.resolve()
    for p in [start] + list(start.parents):
        if (p / "config").is_dir():
            return p
    return None


# ---------------------------------------------------------------------------
# Typed config dataclasses
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class OutlierConfig:
    """GPS outlier repair: fixes implying a faster speed get corrected."""

    max_speed_kmh: float = C.OUTLIER_MAX_SPEED_KMH


@dataclass(frozen=True)
class PauseConfig:
    min_duration_s: float = C.PAUSE_MIN_DURATION_S
    max_speed_kmh: float = C.PAUSE_MAX_SPEED_KMH


@dataclass(frozen=True)
class ElevationConfig:
    """
    Elevation processing.

    smoothing_window_s <= 1 disables time-window smoothing before
    gain/loss is computed.
    """

    hysteresis_threshold_m: float = C.ELEVATION_HYSTERESIS_M
    smoothing_window_s: float = 0.0


@dataclass(frozen=True)
class PowerConfig:
    weight_kg: float = C.DEFAULT_WEIGHT_KG
    lookback: int = C.POWER_LOOKBACK
    min_energy_cost: float = C.MIN_ENERGY_COST
    max_energy_cost: float = C.MAX_ENERGY_COST
    mechanical_efficiency: float = C.MECHANICAL_EFFICIENCY


@dataclass(frozen=True)
class PaceConfig:
    lookback_m: float = C.DEFAULT_PACE_LOOKBACK_M


@dataclass(frozen=True)
class RunTrackConfig:
    """
    Fully merged runtrack configuration.

    Attributes:
    - one typed block per engine concern
    - source: provenance map showing where each value came from
    """

    outliers: OutlierConfig
    pauses: PauseConfig
    elevation: ElevationConfig
    power: PowerConfig
    pace: PaceConfig
    source: dict[str, str]


# dotted key -> (section, field, coercion)
_KEYS: dict[str, tuple[str, str, Any]] = {
    "outliers.max_speed_kmh": ("outliers", "max_speed_kmh", _as_float),
    "pauses.min_duration_s": ("pauses", "min_duration_s", _as_float),
    "pauses.max_speed_kmh": ("pauses", "max_speed_kmh", _as_float),
    "elevation.hysteresis_threshold_m": ("elevation", "hysteresis_threshold_m", _as_float),
    "elevation.smoothing_window_s": ("elevation", "smoothing_window_s", _as_float),
    "power.weight_kg": ("power", "weight_kg", _as_float),
    "power.lookback": ("power", "lookback", _as_int),
    "power.min_energy_cost": ("power", "min_energy_cost", _as_float),
    "power.max_energy_cost": ("power", "max_energy_cost", _as_float),
    "power.mechanical_efficiency": ("power", "mechanical_efficiency", _as_float),
    "pace.lookback_m": ("pace", "lookback_m", _as_float),
}

ENV_MAP = {
    "RUNTRACK_OUTLIER_MAX_SPEED_KMH": "outliers.max_speed_kmh",
    "RUNTRACK_PAUSE_MIN_DURATION_S": "pauses.min_duration_s",
    "RUNTRACK_PAUSE_MAX_SPEED_KMH": "pauses.max_speed_kmh",
    "RUNTRACK_ELEVATION_THRESHOLD_M": "elevation.hysteresis_threshold_m",
    "RUNTRACK_WEIGHT_KG": "power.weight_kg",
}


# ---------------------------------------------------------------------------
# Main config loader
# ---------------------------------------------------------------------------
def load_config(
    repo_root: Optional[Path] = None,
    repo_config_path: Optional[Path] = None,
    user_config_path: Optional[Path] = None,
) -> RunTrackConfig:
    """
    Load, merge, and normalize all runtrack configuration.

    This function is the single authoritative entry point
    for configuration access.
    """

    # Locate repo and config files
    if repo_root is None:
        repo_root = find_repo_root(Path(__file__).resolve())
    if repo_config_path is None and repo_root is not None:
        repo_config_path = repo_root / "config" / "config.toml"
    if user_config_path is None:
        user_config_path = Path.home() / ".config" / "runtrack" / "config.toml"

    # Load raw TOML dicts
    repo_cfg = _load_toml(repo_config_path) if repo_config_path else {}
    user_cfg = _load_toml(user_config_path) if user_config_path else {}

    # Start from the dataclass defaults
    values: dict[str, dict[str, Any]] = {
        "outliers": {}, "pauses": {}, "elevation": {}, "power": {}, "pace": {},
    }
    src = {key: "default" for key in _KEYS}

    # Repo, then user (user wins)
    for cfg, label in ((repo_cfg, f"repo:{repo_config_path}"), (user_cfg, f"user:{user_config_path}")):
        for key, (section, field, coerce) in _KEYS.items():
            v = coerce(_deep_get(cfg, key))
            if v is None:
                continue
            values[section][field] = v
            src[key] = label

    # Environment variable overrides (highest non-CLI precedence)
    for env, key in ENV_MAP.items():
        section, field, coerce = _KEYS[key]
        v = coerce(os.environ.get(env))
        if v is None:
            continue
        values[section][field] = v
        src[key] = f"env:{env}"

    return RunTrackConfig(
        outliers=OutlierConfig(**values["outliers"]),
        pauses=PauseConfig(**values["pauses"]),
        elevation=ElevationConfig(**values["elevation"]),
        power=PowerConfig(**values["power"]),
        pace=PaceConfig(**values["pace"]),
        source=src,
    )
