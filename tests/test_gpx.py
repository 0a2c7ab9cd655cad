import datetime as dt

import pytest

from runtrack.edit.operations import trim_to_range
from runtrack.errors import InvalidGpxError
from runtrack.formats.gpx import (
    extract_trackpoints,
    read_gpx,
    track_from_gpx,
    track_to_gpx,
    write_gpx,
)

STEP_KM = 0.001 * 3.141592653589793 / 180 * 6371.0


def test_extract_trackpoints(sample_gpx_path):
    pts = extract_trackpoints(read_gpx(sample_gpx_path))

    assert len(pts) == 5   # one point has no <time>
    first = pts[0]
    assert (first.lat, first.lon, first.ele) == (45.0, 7.0, 100.0)
    assert first.time == dt.datetime(2026, 1, 2, 8, 0, tzinfo=dt.timezone.utc)
    assert (first.hr, first.cad, first.power) == (140, 85, 250)

    assert pts[1].hr == 145 and pts[1].cad is None and pts[1].power is None
    assert pts[3].ele == 0.0            # missing <ele>
    assert pts[3].time.microsecond == 500_000


def test_track_from_gpx(sample_gpx_path):
    track = track_from_gpx(sample_gpx_path, color="#ff0000")

    assert track.name == "Morning Run"
    assert track.id == "sample"
    assert track.color == "#ff0000"
    assert track.distance == pytest.approx(4 * STEP_KM, rel=1e-9)
    assert track.duration == 120_000


def test_invalid_xml(tmp_path):
    bad = tmp_path / "bad.gpx"
    bad.write_text("<gpx><trk>", encoding="utf-8")
    with pytest.raises(InvalidGpxError):
        read_gpx(bad)


def test_no_points(tmp_path):
    empty = tmp_path / "empty.gpx"
    empty.write_text('<gpx xmlns="http://www.topografix.com/GPX/1/1" version="1.1"/>', encoding="utf-8")
    with pytest.raises(InvalidGpxError):
        track_from_gpx(empty)


def test_write_and_read_back(tmp_path, sample_gpx_path):
    track = track_from_gpx(sample_gpx_path)
    out = tmp_path / "nested" / "out.gpx"

    write_gpx(track_to_gpx(track), out)
    again = track_from_gpx(out)

    assert again.name == track.name
    assert len(again) == len(track)
    assert again.distance == pytest.approx(track.distance, rel=1e-6)
    assert again.duration == track.duration
    assert [p.hr for p in again.points] == [p.hr for p in track.points]
    assert again.points[0].power == 250


def test_write_keeps_subsecond_times(tmp_path, ten_km_track):
    trimmed = trim_to_range(ten_km_track, 0.05, 0.25)
    out = tmp_path / "trimmed.gpx"
    write_gpx(track_to_gpx(trimmed), out)

    again = track_from_gpx(out)
    times = [p.time for p in again.points]
    assert all(b > a for a, b in zip(times, times[1:]))
    assert again.duration == pytest.approx(trimmed.duration, abs=1)
