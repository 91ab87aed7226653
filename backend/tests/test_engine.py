import pytest
from pydantic import ValidationError
from shapely.geometry import box, mapping
from backend.footprint_engine import generate_footprints, SetbackPolicy
from backend.footprint_engine.generators.benchmark import BenchmarkRunner
from backend.footprint_engine.generators.benchmark.test_cases import create_rectangular_case
from backend.footprint_engine.utils import ProjectionFrame


def _geographic_plot():
    """60 x 40 m plot around a lon/lat origin."""
    frame = ProjectionFrame(77.59, 12.97)
    return frame.to_geographic(box(-30, -20, 30, 20))


def test_geographic_tower_round_trip():
    plot = _geographic_plot()
    footprints = generate_footprints(plot, {'typology': 'tower', 'width': 20, 'spacing': 8}, setback=6.0)
    assert len(footprints) >= 1
    for fp in footprints:
        # area is reported in square metres, geometry back in lon/lat
        assert fp.area == pytest.approx(400.0, rel=0.01)
        assert plot.contains(fp.geometry)
        feature = fp.to_feature()
        assert feature['properties'] == {'type': 'generated', 'subtype': 'tower', 'area': fp.area}


def test_geographic_composite_parts():
    plot = ProjectionFrame(77.59, 12.97).to_geographic(box(-50, -35, 50, 35))
    footprints = generate_footprints(plot, {'typology': 'L', 'wing_depth': 12, 'seed': 2})
    assert len(footprints) == 1
    feature = footprints[0].to_feature()
    assert feature['properties']['subtype'] == 'lshaped'
    assert len(feature['properties']['parts']) >= 2
    for part in footprints[0].parts:
        assert plot.buffer(1e-9).contains(part.geometry)


def test_geojson_input_and_setback_mapping():
    plot = mapping(box(0, 0, 60, 40))
    footprints = generate_footprints(plot, {'typology': 'tower', 'width': 20, 'spacing': 8},
                                     setback={'uniform': 6}, geographic=False)
    assert len(footprints) >= 1


def test_same_seed_same_result():
    params = {'typology': 'U', 'wing_depth': 12, 'seed': 11}
    first = generate_footprints(box(0, 0, 100, 70), params, geographic=False)
    second = generate_footprints(box(0, 0, 100, 70), params, geographic=False)
    assert [fp.geometry.wkt for fp in first] == [fp.geometry.wkt for fp in second]


def test_infeasible_plot_returns_empty():
    assert generate_footprints(box(0, 0, 20, 20), {'typology': 'tower'}, setback=15.0,
                               geographic=False) == []
    peripheral = SetbackPolicy(peripheral={'parking_width': 5, 'road_width': 6})
    assert generate_footprints(box(0, 0, 30, 30), {'typology': 'lamella'}, setback=peripheral,
                               geographic=False) == []


def test_invalid_parameters_raise():
    with pytest.raises(ValidationError):
        generate_footprints(box(0, 0, 60, 40), {'typology': 'lamella', 'min_building_length': 80,
                                                'max_building_length': 40}, geographic=False)
    with pytest.raises(ValueError):
        generate_footprints(box(0, 0, 60, 40), {'typology': 'pyramid'}, geographic=False)
    with pytest.raises(ValueError):
        generate_footprints("plot", {'typology': 'tower'}, geographic=False)


def test_benchmark_runner_smoke():
    runner = BenchmarkRunner([create_rectangular_case()])
    results = runner.run_benchmark(typologies=['tower'], seeds_per_case=1)
    assert len(results) == 1
    result = results[0]
    assert result.footprint_count >= 1
    assert result.overlap_area == pytest.approx(0.0, abs=1e-6)
    assert 0.0 < result.coverage < 1.0
