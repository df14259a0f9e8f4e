"""
Tests for the placement engine and its mode-specific anchors.
"""

import itertools
import math

import pytest

from tilemap.config import GenerationParams, MapMode
from tilemap.engine import PlacementEngine, Point, RunningCentroid, build_ring_boundaries
from tilemap.procgen import RNG


def _engine(mode, width=40, height=30, seed=11, **overrides):
    params = GenerationParams(width=width, height=height, mode=mode, **overrides)
    return PlacementEngine(params, RNG(seed))


@pytest.mark.parametrize("mode", list(MapMode))
def test_positions_stay_in_bounds(mode):
    width, height = 37, 23
    engine = _engine(mode, width, height, seed=3)
    for tw, th in itertools.islice(itertools.cycle([(1, 1), (2, 1), (1, 2), (5, 3), (12, 7), (36, 1), (1, 22)]), 700):
        x, y = engine.position_for_tile(tw, th)
        assert 0 <= x <= width - tw
        assert 0 <= y <= height - th
        engine.record_placement(x, y, tw, th)


@pytest.mark.parametrize("mode", list(MapMode))
def test_oversized_tile_is_placed_at_origin(mode):
    engine = _engine(mode, 10, 8)
    assert engine.position_for_tile(10, 2) == Point(0, 0)
    assert engine.position_for_tile(3, 8) == Point(0, 0)
    assert engine.position_for_tile(25, 25) == Point(0, 0)


@pytest.mark.parametrize("mode", list(MapMode))
def test_placement_is_deterministic(mode):
    a = _engine(mode, seed=77)
    b = _engine(mode, seed=77)
    for _ in range(100):
        pa = a.position_for_tile(2, 1)
        pb = b.position_for_tile(2, 1)
        assert pa == pb
        a.record_placement(pa.x, pa.y, 2, 1)
        b.record_placement(pb.x, pb.y, 2, 1)


def test_unknown_mode_falls_back_to_weighted():
    fallback = _engine("spiral", seed=5)
    weighted = _engine(MapMode.WEIGHTED, seed=5)
    for _ in range(50):
        p = fallback.position_for_tile(3, 2)
        q = weighted.position_for_tile(3, 2)
        assert p == q
        fallback.record_placement(p.x, p.y, 3, 2)
        weighted.record_placement(q.x, q.y, 3, 2)


def test_running_centroid():
    centroid = RunningCentroid()
    assert centroid.center() is None
    assert centroid.distance_after(0, 0, 0, 0, 5, 5) == 0.0

    centroid.add(0, 0, 2, 2)   # center (1, 1), area 4
    centroid.add(8, 0, 1, 1)   # center (8.5, 0.5), area 1
    cx, cy = centroid.center()
    assert cx == pytest.approx((1 * 4 + 8.5) / 5)
    assert cy == pytest.approx((1 * 4 + 0.5) / 5)

    # Zero-area tiles do not move the centroid.
    centroid.add(3, 3, 0, 4)
    assert centroid.center() == (cx, cy)

    expected = math.hypot((1 * 4 + 8.5 + 5.5 * 4) / 9 - 5, (1 * 4 + 0.5 + 5.5 * 4) / 9 - 5)
    assert centroid.distance_after(4.5, 4.5, 2, 2, 5, 5) == pytest.approx(expected)


def test_weighted_mode_keeps_centroid_near_center():
    engine = _engine(MapMode.WEIGHTED, 60, 40, seed=9)
    for i in range(400):
        tw, th = [(1, 1), (3, 2), (2, 5)][i % 3]
        x, y = engine.position_for_tile(tw, th)
        engine.record_placement(x, y, tw, th)
    cx, cy = engine.centroid.center()
    assert math.hypot(cx - 30, cy - 20) < 2.0


def test_first_weighted_placement_is_canvas_center():
    engine = _engine(MapMode.WEIGHTED, 20, 20)
    assert engine.position_for_tile(2, 2) == Point(9, 9)


def test_center_mode_concentrates_tiles():
    engine = _engine(MapMode.CENTER, 100, 100, seed=21)
    near = 0
    total = 500
    for _ in range(total):
        x, y = engine.position_for_tile(2, 2)
        engine.record_placement(x, y, 2, 2)
        if math.hypot(x + 1 - 50, y + 1 - 50) <= 37:
            near += 1
    assert near / total >= 0.95


def test_island_centers_inside_margin():
    engine = _engine(MapMode.ISLANDS, 100, 50, islands=6)
    assert len(engine.island_centers) == 6
    margin = 5
    for center in engine.island_centers:
        assert margin <= center.x < 100 - margin
        assert margin <= center.y < 50 - margin


def test_island_count_has_floor_of_one():
    engine = _engine(MapMode.ISLANDS, islands=0)
    assert len(engine.island_centers) >= 1


def test_island_tiles_cluster_around_centers():
    engine = _engine(MapMode.ISLANDS, 200, 200, seed=4, islands=3, island_r_frac=0.1)
    max_radius = 0.1 * 200
    for _ in range(300):
        x, y = engine.position_for_tile(1, 1)
        nearest = min(math.hypot(x - c.x, y - c.y) for c in engine.island_centers)
        assert nearest <= max_radius + 1.5


def test_continent_centers_are_fixed():
    engine = _engine(MapMode.DUAL_CONTINENTS, 101, 51)
    assert engine.continent_centers == [Point(25, 25), Point(75, 25)]


def test_dual_continents_fill_both_halves():
    engine = _engine(MapMode.DUAL_CONTINENTS, 120, 60, seed=8)
    left = right = 0
    for _ in range(400):
        x, y = engine.position_for_tile(1, 1)
        if x < 60:
            left += 1
        else:
            right += 1
    assert left > 100
    assert right > 100


def test_ring_mode_places_tiles_in_annulus():
    engine = _engine(MapMode.RING, 100, 100, seed=13, rings=8, ring_start=0.3, ring_end=0.7)
    radius_max = 50
    for _ in range(500):
        x, y = engine.position_for_tile(2, 2)
        distance = math.hypot(x + 1 - 50, y + 1 - 50)
        assert 0.3 * radius_max - 2 <= distance <= 0.7 * radius_max + 2


@pytest.mark.parametrize(
    "rings,start,end",
    [
        (10, 0.1, 0.8),
        (1, 0.2, 0.6),
        (5, 0.6, 0.3),
        (4, 1.0, 1.0),
        (3, 0.0, 0.0),
        (7, 0.95, 0.95),
        (0, 0.4, 0.5),
        (12, -1.0, 2.0),
        (6, float("nan"), 0.5),
    ]
)
def test_ring_boundaries_monotonic(rings, start, end):
    boundaries, resolved_start, resolved_end = build_ring_boundaries(rings, start, end)
    assert len(boundaries) == max(1, rings) + 1
    assert boundaries[0] == 0.0
    assert all(0.0 <= b <= 1.0 for b in boundaries)
    assert all(a <= b for a, b in zip(boundaries, boundaries[1:]))
    assert resolved_end > resolved_start


def test_ring_boundary_adjustment():
    # End at the top edge shrinks the start instead.
    _, start, end = build_ring_boundaries(4, 1.0, 1.0)
    assert (start, end) == (pytest.approx(0.9), 1.0)
    _, start, end = build_ring_boundaries(4, 0.5, 0.2)
    assert (start, end) == (0.5, pytest.approx(0.6))
