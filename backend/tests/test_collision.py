import pytest
from shapely.geometry import box
from backend.footprint_engine.generators.collision import CollisionGuard, collides, ensure_corner_clearance
from backend.footprint_engine.utils.geometry_utils import rectangle_sides


def test_collides_above_epsilon():
    candidate = box(0, 0, 10, 10)
    assert collides(candidate, [box(9.5, 0, 20, 10)])       # 5 m2 overlap
    assert not collides(candidate, [box(9.95, 0, 20, 10)])  # 0.5 m2 overlap
    assert not collides(candidate, [box(10, 0, 20, 10)])    # touching
    assert not collides(candidate, [])


def test_collides_iff_any_obstacle_overlaps():
    candidate = box(0, 0, 10, 10)
    obstacles = [box(50, 50, 60, 60), box(-5, -5, 0.05, 20), box(8, 8, 30, 30)]
    expected = any(candidate.intersection(o).area > 1.0 for o in obstacles)
    assert collides(candidate, obstacles) == expected
    assert collides(candidate, obstacles[:2]) is False


def test_guard_reuses_index():
    guard = CollisionGuard([box(0, 0, 5, 5), box(20, 20, 25, 25)], epsilon=1.0)
    assert guard.collides(box(3, 3, 8, 8))
    assert not guard.collides(box(10, 10, 15, 15))
    assert not guard.collides(None)


def test_corner_clearance_shrinks_only_crowded_parts():
    a = box(0, 0, 20, 10)
    b = box(20.1, 0, 40, 10)
    far = box(100, 0, 120, 10)
    result = ensure_corner_clearance([a, b, far], clearance=1.5)
    assert len(result) == 3
    assert result[0].bounds == pytest.approx((0.75, 0.75, 19.25, 9.25))
    assert result[2] is far
    assert result[0].distance(result[1]) >= 1.5


def test_corner_clearance_drops_vanishing_parts():
    result = ensure_corner_clearance([box(0, 0, 3, 3), box(3.5, 0, 20, 10)], clearance=1.5)
    assert len(result) == 1
    assert result[0].area == pytest.approx(15 * 8.5)


def test_corner_clearance_keeps_minimum_block_dimensions():
    narrow = box(0, 0, 30, 10)
    wide = box(30.1, 0, 60, 12)
    result = ensure_corner_clearance([narrow, wide], clearance=1.5,
                                     min_width=10.0, min_length=15.0)
    # 10m loses 1.5m and falls under 10 - 1, 12m keeps 10.5m
    assert len(result) == 1
    assert result[0].bounds == pytest.approx((30.85, 0.75, 59.25, 11.25))
    short_side, long_side = rectangle_sides(result[0].area, result[0].length)
    assert short_side >= 9.0
    assert long_side >= 14.0
