import datetime as dt
import math
from pathlib import Path

import pytest

from runtrack.core.metrics import build_track
from runtrack.core.model import TrackPoint

# Degrees of latitude per km along a meridian (R = 6371 km), so
# synthetic tracks have exactly known distances.
KM_DEG = 180.0 / (math.pi * 6371.0)
T0 = dt.datetime(2026, 1, 2, 8, 0, 0, tzinfo=dt.timezone.utc)


def point(north_km, t_s, *, ele=100.0, hr=None, cad=None, power=None, lat0=45.0, lon=7.0):
    return TrackPoint(
        lat=lat0 + north_km * KM_DEG,
        lon=lon,
        ele=ele,
        time=T0 + dt.timedelta(seconds=t_s),
        hr=hr,
        cad=cad,
        power=power,
    )


def line_track(n=101, step_km=0.1, step_s=30.0, *, ele=None, hr=None, name="line", t_offset_s=0.0):
    """
    Straight run due north. Defaults: 10 km in 50 min (5:00 min/km).

    `ele` / `hr` may be callables taking the point index.
    """
    pts = [
        point(
            i * step_km,
            t_offset_s + i * step_s,
            ele=ele(i) if ele else 100.0,
            hr=hr(i) if hr else None,
        )
        for i in range(n)
    ]
    return build_track(pts, id=name, name=name, color="#123456")


@pytest.fixture
def make_line_track():
    return line_track


@pytest.fixture
def make_point():
    return point


@pytest.fixture
def ten_km_track():
    return line_track()


@pytest.fixture
def sample_gpx_text() -> str:
    return (Path(__file__).parent / "data" / "sample.gpx").read_text(encoding="utf-8")


@pytest.fixture
def sample_gpx_path() -> Path:
    return Path(__file__).parent / "data" / "sample.gpx"
