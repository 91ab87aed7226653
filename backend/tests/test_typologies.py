"""
Scenario tests for the typology orchestrators, run in the metric frame.
"""
import pytest
from shapely.geometry import Point, Polygon, box
from backend.footprint_engine.generators import FootprintPolicy, generate_footprints
from backend.footprint_engine.generators.shapes import target_anchor
from backend.footprint_engine.schemas import CompositeParams
from backend.footprint_engine.utils.geometry_utils import rectangle_sides

RECT_60x40 = box(0, 0, 60, 40)
RECT_100x70 = box(0, 0, 100, 70)
# L-shaped plot with its corner at the origin, 80m and 60m arms, 14m deep
L_PLOT = Polygon([(0, 0), (80, 0), (80, 14), (14, 14), (14, 60), (0, 60)])
# same corner and edges with 30m arms
L_WIDE = Polygon([(0, 0), (80, 0), (80, 30), (30, 30), (30, 60), (0, 60)])


def _generate(plot, params, setback=0.0):
    return generate_footprints(plot, params, setback=setback, geographic=False)


def test_tower_scenario():
    """60 x 40 plot, 6m setback, 20m towers at 8m spacing."""
    buildable = box(6, 6, 54, 34)
    for seed in range(4):
        towers = _generate(RECT_60x40, {'typology': 'tower', 'width': 20, 'spacing': 8, 'seed': seed},
                           setback=6.0)
        assert len(towers) >= 1
        for fp in towers:
            assert fp.subtype == 'tower'
            assert fp.area == pytest.approx(400.0, rel=0.01)
            assert buildable.buffer(1e-6).contains(fp.geometry)


def test_towers_do_not_overlap_and_avoid_obstacles():
    obstacle = box(40, 10, 54, 30)
    for seed in range(4):
        towers = _generate(RECT_60x40, {'typology': 'tower', 'width': 20, 'spacing': 8,
                                        'seed': seed, 'obstacles': [obstacle]}, setback=6.0)
        for i, fp in enumerate(towers):
            assert fp.geometry.intersection(obstacle).area <= 1.0
            for other in towers[i + 1:]:
                assert fp.geometry.intersection(other.geometry).area == pytest.approx(0.0, abs=1e-6)


def test_towers_avoid_center():
    centre = Point(30, 20)
    for seed in range(4):
        towers = _generate(RECT_60x40, {'typology': 'point', 'width': 20, 'spacing': 8,
                                        'seed': seed, 'avoid_center': True}, setback=6.0)
        assert all(fp.subtype == 'point' for fp in towers)
        assert not any(fp.geometry.covers(centre) for fp in towers)


def test_perimeter_ring():
    ring = _generate(RECT_60x40, {'typology': 'perimeter', 'depth': 8})
    assert len(ring) == 1
    assert ring[0].subtype == 'perimeter'
    assert ring[0].area == pytest.approx(60 * 40 - 44 * 24)
    assert not ring[0].geometry.covers(Point(30, 20))


def test_perimeter_block_fallback():
    block = _generate(box(0, 0, 20, 15), {'typology': 'perimeter', 'depth': 10,
                                          'min_building_length': 10})
    assert len(block) == 1
    assert block[0].subtype == 'block'
    assert block[0].area == pytest.approx(300.0)


def test_perimeter_capped():
    ring = _generate(RECT_60x40, {'typology': 'oshaped', 'depth': 8, 'max_footprint': 1000})
    assert len(ring) == 1
    assert ring[0].area <= 1000.0
    assert ring[0].subtype == 'oshaped'


def test_lamella_rows_are_segmented():
    plot = box(0, 0, 100, 60)
    for seed in range(3):
        rows = _generate(plot, {'typology': 'lamella', 'orientation': 90, 'width': 12,
                                'spacing': 15, 'max_building_length': 60, 'seed': seed})
        assert len(rows) >= 2
        for i, fp in enumerate(rows):
            minx, miny, maxx, maxy = fp.geometry.bounds
            assert maxx - minx <= 60.0 + 1e-3
            assert plot.buffer(1e-6).contains(fp.geometry)
            for other in rows[i + 1:]:
                assert fp.geometry.intersection(other.geometry).area == pytest.approx(0.0, abs=1e-6)


def test_lamella_short_rows_kept_whole():
    plot = box(0, 0, 100, 60)
    rows = _generate(plot, {'typology': 'slab', 'orientation': 90, 'width': 12,
                            'spacing': 15, 'max_building_length': 120})
    assert len(rows) >= 1
    for fp in rows:
        assert fp.subtype == 'slab'
        minx, miny, maxx, maxy = fp.geometry.bounds
        assert maxx - minx == pytest.approx(100.0, abs=1e-3)


@pytest.mark.parametrize('typology,min_parts', [
    ('lshaped', 2),
    ('ushaped', 3),
    ('tshaped', 2),
    ('hshaped', 3),
])
def test_composite_shapes(typology, min_parts):
    for seed in range(3):
        result = _generate(RECT_100x70, {'typology': typology, 'wing_depth': 12, 'seed': seed})
        assert len(result) == 1
        fp = result[0]
        assert fp.subtype == typology
        assert len(fp.parts) >= min_parts
        assert fp.area == pytest.approx(sum(p.area for p in fp.parts))
        for i, part in enumerate(fp.parts):
            assert part.subtype == typology
            assert RECT_100x70.buffer(1e-6).contains(part.geometry)
            for other in fp.parts[i + 1:]:
                assert part.geometry.distance(other.geometry) > 0.0


def test_composite_respects_footprint_cap():
    for seed in range(3):
        result = _generate(RECT_100x70, {'typology': 'L', 'wing_depth': 12, 'seed': seed,
                                         'max_footprint': 800})
        assert all(fp.area <= 800.0 + 1e-6 for fp in result)


def test_composite_blocked_by_obstacle():
    result = _generate(RECT_100x70, {'typology': 'U', 'obstacles': [box(-10, -10, 110, 80)]})
    assert result == []


def test_composite_avoid_center():
    centre = Point(50, 35)
    for seed in range(3):
        result = _generate(RECT_100x70, {'typology': 'H', 'wing_depth': 12, 'seed': seed,
                                         'avoid_center': True})
        assert not any(fp.geometry.covers(centre) for fp in result)


def test_target_template_fits_and_falls_back():
    policy = FootprintPolicy()
    params = CompositeParams(typology='lshaped', target_point=(50, 35),
                             wing_length_a=40, wing_length_b=30)
    anchor = target_anchor(RECT_100x70, params, policy)
    wings = anchor.build(12.0)
    assert len(wings) == 2
    assert all(not w.segment for w in wings)
    assert wings[0].geometry.distance(wings[1].geometry) > 0.0

    # too close to the edge even at the reduced scale
    edge_params = params.model_copy(update={'target_point': (5, 35)})
    assert target_anchor(RECT_100x70, edge_params, policy).build(12.0) == []

    outside = params.model_copy(update={'target_point': (500, 35)})
    assert target_anchor(RECT_100x70, outside, policy) is None


def test_tower_checks_clipped_geometry():
    """An obstacle touching only the trimmed-off edge does not block the tower."""
    plot = box(0, 0, 20, 19.84)
    obstacle = box(-5, 19.84, 25, 30)
    towers = _generate(plot, {'typology': 'tower', 'width': 20, 'spacing': 8,
                              'obstacles': [obstacle]})
    assert len(towers) == 1
    assert towers[0].geometry.bounds == pytest.approx((0, 0, 20, 19.84))
    assert towers[0].geometry.intersection(obstacle).area == pytest.approx(0.0, abs=1e-6)


def test_lamella_drops_edge_slivers():
    plot = box(0, 0, 55, 54)
    for seed in range(3):
        rows = _generate(plot, {'typology': 'lamella', 'width': 12, 'spacing': 15,
                                'min_building_width': 10, 'seed': seed})
        assert len(rows) >= 1
        for fp in rows:
            short_side, long_side = rectangle_sides(fp.area, fp.geometry.length)
            assert short_side >= 10.0 - 1.0
            assert long_side >= 15.0 - 1.0


@pytest.mark.parametrize('typology', ['lshaped', 'ushaped', 'tshaped', 'hshaped'])
def test_composite_parts_keep_minimum_dimensions(typology):
    results = []
    for seed in range(6):
        results.extend(_generate(RECT_100x70, {'typology': typology, 'wing_depth': 12, 'seed': seed}))
    assert results
    for fp in results:
        for part in fp.parts:
            short_side, long_side = rectangle_sides(part.area, part.geometry.length)
            assert short_side >= 10.0 - 1.0 - 1e-6
            assert long_side >= 15.0 - 1.0 - 1e-6


def test_l_scenario_end_to_end():
    """80m and 60m arms, 14m wings, 25-55m blocks at least 14m deep."""
    params = {'typology': 'L', 'wing_depth': 14, 'min_building_width': 14,
              'max_building_width': 18, 'min_building_length': 25,
              'max_building_length': 55}
    for seed in range(6):
        result = _generate(L_WIDE, dict(params, seed=seed))
        assert len(result) == 1
        fp = result[0]
        assert fp.subtype == 'lshaped'
        assert len(fp.parts) >= 2
        for i, part in enumerate(fp.parts):
            assert L_WIDE.buffer(1e-6).contains(part.geometry)
            short_side, long_side = rectangle_sides(part.area, part.geometry.length)
            assert short_side >= 14.0 - 1.0 - 1e-6
            assert long_side >= 25.0 - 1.0 - 1e-6
            for other in fp.parts[i + 1:]:
                assert part.geometry.distance(other.geometry) >= 1.5 - 1e-6


def test_l_scenario_default_sizes():
    results = []
    for seed in range(6):
        results.extend(_generate(L_PLOT, {'typology': 'lshaped', 'wing_depth': 14, 'seed': seed}))
    assert results
    for fp in results:
        assert fp.parts
        for part in fp.parts:
            short_side, long_side = rectangle_sides(part.area, part.geometry.length)
            assert short_side >= 10.0 - 1.0 - 1e-6
            assert long_side >= 15.0 - 1.0 - 1e-6
