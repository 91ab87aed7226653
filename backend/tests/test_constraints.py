import pytest
from shapely.geometry import box
from shapely.ops import unary_union
from backend.footprint_engine.generators.constraints import enforce_max_area, footprint_cap
from backend.footprint_engine.generators.policy import FootprintPolicy
from backend.footprint_engine.schemas import TowerParams

# 900 m2 L: 40 x 12 arm plus 12 x 47 arm sharing a 12 x 12 corner
L_900 = unary_union([box(0, 0, 40, 12), box(0, 0, 12, 47)])


def test_l_shape_area():
    assert L_900.area == pytest.approx(900.0)


def test_cap_shrinks_below_max():
    result = enforce_max_area(L_900, 500.0)
    assert result is not None
    assert result.area <= 500.0
    assert L_900.contains(result)


def test_cap_respects_min_area():
    """Cannot reach 500 m2 without dropping under 600 m2 first."""
    assert enforce_max_area(L_900, 500.0, min_area=600.0) is None


def test_cap_is_idempotent_when_within_budget():
    assert enforce_max_area(L_900, 1000.0) is L_900
    assert enforce_max_area(L_900, None) is L_900


def test_cap_gives_up_after_attempts():
    policy = FootprintPolicy(max_shrink_attempts=1)
    assert enforce_max_area(L_900, 500.0, policy=policy) is None


def test_cap_vanishing_shape():
    assert enforce_max_area(box(0, 0, 4, 100), 1.0) is None


def test_footprint_cap():
    assert footprint_cap(TowerParams()) is None
    assert footprint_cap(TowerParams(max_footprint=800)) == 800
    assert footprint_cap(TowerParams(target_gfa=3000, max_floors=5)) == pytest.approx(600)
    assert footprint_cap(TowerParams(max_footprint=500, target_gfa=3000, max_floors=5)) == 500
