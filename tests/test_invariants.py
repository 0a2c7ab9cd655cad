"""
Randomised invariant checks: every Track coming out of recompute or an
editing operation must be internally consistent.
"""

import dataclasses
import random

import pytest

from runtrack.core.metrics import build_track
from runtrack.edit.operations import cut, merge, repair_gps_outliers, trim_to_range
from conftest import point

SEEDS = list(range(12))


def random_track(rng: random.Random, name: str, start_s: float = 0.0):
    n = rng.randint(5, 120)
    north = east = 0.0
    t = start_s
    pts = []
    for _ in range(n):
        p = point(north, t, ele=rng.uniform(80, 140), hr=rng.choice([None, rng.uniform(100, 180)]))
        # input cumulative distance is garbage on purpose
        pts.append(dataclasses.replace(p, lon=p.lon + east, cumulative_distance=rng.uniform(-5, 5)))
        north += rng.uniform(0.001, 0.05)
        east += rng.uniform(-0.0003, 0.0003)
        t += rng.uniform(1, 10)
    return build_track(pts, id=name, name=name)


def assert_consistent(track):
    pts = track.points
    if len(pts) < 2:
        assert track.distance == 0 and track.duration == 0
        return

    assert pts[0].cumulative_distance == 0
    cds = [p.cumulative_distance for p in pts]
    assert all(b >= a for a, b in zip(cds, cds[1:]))

    times = [p.time for p in pts]
    assert all(b > a for a, b in zip(times, times[1:]))

    assert track.distance == cds[-1]
    assert track.duration == pytest.approx((times[-1] - times[0]).total_seconds() * 1000)


@pytest.mark.parametrize("seed", SEEDS)
def test_recompute_invariants(seed):
    assert_consistent(random_track(random.Random(seed), "t"))


@pytest.mark.parametrize("seed", SEEDS)
def test_cut_invariants(seed):
    rng = random.Random(seed)
    t = random_track(rng, "t")
    a, b = sorted(rng.uniform(0, t.distance) for _ in range(2))
    out = cut(t, a, b)
    assert_consistent(out)
    assert out.distance <= t.distance + 1e-9


@pytest.mark.parametrize("seed", SEEDS)
def test_trim_invariants(seed):
    rng = random.Random(seed)
    t = random_track(rng, "t")
    a, b = sorted(rng.uniform(0, t.distance) for _ in range(2))
    out = trim_to_range(t, a, b)
    assert_consistent(out)
    if out.points:
        assert out.distance <= t.distance + 1e-9


@pytest.mark.parametrize("seed", SEEDS)
def test_merge_invariants(seed):
    rng = random.Random(seed)
    tracks = [random_track(rng, f"t{i}", start_s=rng.uniform(-7200, 7200)) for i in range(3)]
    out = merge(tracks)
    assert_consistent(out)
    assert len(out) == sum(len(t) for t in tracks)


@pytest.mark.parametrize("seed", SEEDS)
def test_repair_invariants(seed):
    rng = random.Random(seed)
    out, count = repair_gps_outliers(random_track(rng, "t"))
    assert_consistent(out)
    assert count >= 0


@pytest.mark.parametrize("seed", SEEDS)
def test_trim_full_range_round_trip(seed):
    t = random_track(random.Random(seed), "t")
    out = trim_to_range(t, 0, t.distance)
    assert len(out) == len(t)
    assert out.distance == pytest.approx(t.distance, rel=1e-9)
    assert out.points[0].cumulative_distance == 0
