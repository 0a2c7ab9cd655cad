import pytest

from runtrack.analyze.pauses import find_pauses
from runtrack.core.metrics import build_track
from conftest import point

STEP_KM = 0.003   # 3 m per second, 10.8 km/h


def _track(stop_s, resume=True):
    """Move 10 s, stand still for `stop_s` seconds, optionally move 10 s more."""
    pts = [point(i * STEP_KM, i) for i in range(10)]
    here = 9 * STEP_KM
    t = 9
    for _ in range(stop_s):
        t += 1
        pts.append(point(here, t))
    if resume:
        for _ in range(10):
            t += 1
            here += STEP_KM
            pts.append(point(here, t))
    return build_track(pts)


def test_single_pause_detected():
    track = _track(15)
    pauses = find_pauses(track)

    assert len(pauses) == 1
    p = pauses[0]
    assert p.duration == pytest.approx(15.0)
    assert p.duration >= 10
    # views onto the track's own points
    assert p.start_point is track.points[9]
    assert p.end_point is track.points[24]


def test_short_stop_ignored():
    assert find_pauses(_track(5)) == []


def test_trailing_pause_not_reported():
    assert find_pauses(_track(30, resume=False)) == []


def test_thresholds_are_parameters():
    assert len(find_pauses(_track(5), min_duration_s=5)) == 1
    # at 11 km/h limit, the whole track is "slow" and never resumes
    assert find_pauses(_track(15), max_speed_kmh=11.0) == []


def test_simultaneous_fixes_are_not_pauses():
    pts = [point(0, 0), point(0, 0.05), point(0.01, 10)]
    assert find_pauses(build_track(pts), min_duration_s=0) == []


def test_too_short_track():
    assert find_pauses(build_track([point(0, 0)])) == []
