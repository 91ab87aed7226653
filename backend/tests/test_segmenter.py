import math
import pytest
from shapely import affinity
from shapely.geometry import Polygon, box
from backend.footprint_engine.generators.seeding import rng_for
from backend.footprint_engine.generators.segmenter import segment_wing
from backend.footprint_engine.generators.shapes import build_wing, remove_wing_overlap
from backend.footprint_engine.utils.geometry_utils import rectangle_sides

# L-shaped buildable with its corner at the origin, 80m and 60m arms
L_PLOT = Polygon([(0, 0), (80, 0), (80, 14), (14, 14), (14, 60), (0, 60)])


def _l_wings(depth=14.0):
    long_wing = build_wing((0, 0), (80, 0), depth, L_PLOT)
    short_wing = remove_wing_overlap(build_wing((0, 60), (0, 0), depth, L_PLOT), long_wing, 0.1)
    return long_wing, short_wing


def test_l_scenario_segments_meet_minimum_dimensions():
    long_wing, _ = _l_wings()
    assert long_wing.area == pytest.approx(80 * 14)
    for seed in range(10):
        segments = segment_wing(long_wing, (0, 0), (80, 0), 14.0, 25.0, 55.0, 6.0,
                                rng_for(seed, "l-scenario"))
        # at least floor((80 - corner) / (55 + 6)) blocks
        assert len(segments) >= 1
        for seg in segments:
            short_side, long_side = rectangle_sides(seg.area, seg.length)
            assert short_side >= 14.0 - 1.0
            assert 25.0 - 1.0 <= long_side <= 55.0 + 1e-6


def test_segments_keep_the_gap():
    long_wing, _ = _l_wings()
    for seed in range(10):
        segments = segment_wing(long_wing, (0, 0), (80, 0), 14.0, 25.0, 55.0, 6.0,
                                rng_for(seed, "gap"))
        for a, b in zip(segments, segments[1:]):
            assert a.distance(b) >= 6.0 - 1e-6


def test_short_wing_scans_away_from_corner():
    _, short_wing = _l_wings()
    assert short_wing.bounds[1] == pytest.approx(14.1)
    segments = segment_wing(short_wing, (0, 0), (0, 60), 14.0, 25.0, 55.0, 6.0, rng_for(1, "short"))
    assert len(segments) >= 1
    assert segments[0].bounds[1] == pytest.approx(14.1)


def test_narrow_wing_is_rejected():
    wing = box(0, 0, 80, 5)
    assert segment_wing(wing, (0, 0), (80, 0), 14.0, 25.0, 55.0, 6.0, rng_for(0, "narrow")) == []


def test_rotated_wing():
    """Dimensions are measured from area and perimeter, not the bounding box."""
    wing = affinity.rotate(box(0, 0, 90, 12), 30, origin=(0, 0))
    toward = (90 * math.cos(math.radians(30)), 90 * math.sin(math.radians(30)))
    segments = segment_wing(wing, (0, 0), toward, 12.0, 20.0, 40.0, 5.0, rng_for(4, "rotated"))
    assert len(segments) >= 2
    for seg in segments:
        short_side, long_side = rectangle_sides(seg.area, seg.length)
        assert short_side == pytest.approx(12.0, abs=0.05)
        assert long_side >= 19.0


def test_segmentation_is_deterministic():
    long_wing, _ = _l_wings()
    first = segment_wing(long_wing, (0, 0), (80, 0), 14.0, 25.0, 55.0, 6.0, rng_for(3, "det"))
    second = segment_wing(long_wing, (0, 0), (80, 0), 14.0, 25.0, 55.0, 6.0, rng_for(3, "det"))
    assert [s.bounds for s in first] == [s.bounds for s in second]
