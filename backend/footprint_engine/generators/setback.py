"""
Setback resolution: shrink a plot to the buildable polygon.

Uniform setbacks are a single inward buffer. Directional setbacks buffer
by the smallest of front/rear/side and then carve half-plane strips off
the cardinal sides that need more, located from the plot's bounding
extents.
"""
import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Union
from shapely.errors import GEOSException
from shapely.geometry import box
from shapely.geometry.base import BaseGeometry
from shapely.ops import unary_union
from ..schemas.plot import CardinalSide, SetbackPolicy
from ..utils.geometry_utils import clean_geometry
from .policy import FootprintPolicy

logger = logging.getLogger(__name__)


@dataclass
class PeripheralZones:
    """Perimeter parking ring, internal road ring and what is left to build on."""
    parking_zone: Optional[BaseGeometry]
    road_zone: Optional[BaseGeometry]
    buildable: BaseGeometry


def _inward(geom: BaseGeometry, distance: float) -> Optional[BaseGeometry]:
    if distance <= 0:
        return geom
    return clean_geometry(geom.buffer(-distance, join_style="mitre"))


def _half_plane(side: CardinalSide, bounds, distance: float, margin: float) -> BaseGeometry:
    """Region of the plot extent lying within `distance` of the given cardinal side."""
    minx, miny, maxx, maxy = bounds
    if side == CardinalSide.NORTH:
        return box(minx - margin, maxy - distance, maxx + margin, maxy + margin)
    if side == CardinalSide.SOUTH:
        return box(minx - margin, miny - margin, maxx + margin, miny + distance)
    if side == CardinalSide.EAST:
        return box(maxx - distance, miny - margin, maxx + margin, maxy + margin)
    return box(minx - margin, miny - margin, minx + distance, maxy + margin)


def _directional(plot: BaseGeometry, setback: SetbackPolicy) -> Optional[BaseGeometry]:
    """
    Baseline buffer, then half-plane cuts for road sides and their opposites.

    Cuts are placed at the full front/rear distance from the plot extent
    (extent - front), not at the excess over the baseline (extent - (front - baseline)).
    """
    front = setback.front_distance
    rear = setback.rear_distance
    side = setback.side_distance
    baseline = min(front, rear, side)

    result = _inward(plot, baseline)
    if result is None:
        return None

    bounds = plot.bounds
    margin = max(bounds[2] - bounds[0], bounds[3] - bounds[1]) + 1.0
    cutters = []
    for road_side in setback.road_access_sides:
        if front > baseline:
            cutters.append(_half_plane(road_side, bounds, front, margin))
        rear_side = road_side.opposite
        if rear_side not in setback.road_access_sides and rear > baseline:
            cutters.append(_half_plane(rear_side, bounds, rear, margin))
    if not cutters:
        return result
    return clean_geometry(result.difference(unary_union(cutters)))


def resolve_setbacks(plot: BaseGeometry,
                     setback: Union[SetbackPolicy, float, None],
                     policy: Optional[FootprintPolicy] = None) -> Optional[BaseGeometry]:
    """
    Shrink the plot by the setback policy.

    Args:
        plot: Plot polygon in the local metric frame
        setback: SetbackPolicy or a uniform distance in meters
        policy: Generation thresholds (min_buildable_area)

    Returns:
        Buildable geometry, the plot object itself for a zero uniform
        setback, or None when nothing buildable remains
    """
    policy = policy or FootprintPolicy()
    if setback is None:
        setback = SetbackPolicy()
    elif not isinstance(setback, SetbackPolicy):
        setback = SetbackPolicy(uniform=float(setback))

    try:
        if setback.is_directional:
            result = _directional(plot, setback)
        else:
            if setback.uniform == 0:
                return plot
            result = _inward(plot, setback.uniform)
    except GEOSException as e:
        logger.warning(f"Setback resolution failed on degenerate plot: {e}")
        return None

    if result is None or result.area < policy.min_buildable_area:
        logger.warning("Setbacks leave no buildable area")
        return None
    return result


def apply_peripheral_clearance(plot: BaseGeometry,
                               parking_width: float = 5.0,
                               road_width: float = 6.0,
                               policy: Optional[FootprintPolicy] = None) -> Optional[PeripheralZones]:
    """Deduct a parking strip and an internal road ring from the plot boundary."""
    policy = policy or FootprintPolicy()
    try:
        inside_parking = _inward(plot, parking_width)
        if inside_parking is None:
            logger.warning("Peripheral parking consumes the whole plot")
            return None
        buildable = _inward(inside_parking, road_width)
        if buildable is None or buildable.area < policy.peripheral_min_area:
            logger.warning("Peripheral clearance leaves less than %.0f m2", policy.peripheral_min_area)
            return None
        parking_zone = clean_geometry(plot.difference(inside_parking))
        road_zone = clean_geometry(inside_parking.difference(buildable))
    except GEOSException as e:
        logger.warning(f"Peripheral clearance failed: {e}")
        return None
    return PeripheralZones(parking_zone=parking_zone, road_zone=road_zone, buildable=buildable)


def deduct_obstacles(buildable: Optional[BaseGeometry],
                     obstacles: Iterable[BaseGeometry]) -> Optional[BaseGeometry]:
    """Remove obstacle footprints from the buildable area."""
    if buildable is None:
        return None
    obstacles = [o for o in obstacles if o is not None and not o.is_empty]
    if not obstacles:
        return buildable
    try:
        result = clean_geometry(buildable.difference(unary_union(obstacles)))
    except GEOSException as e:
        logger.warning(f"Obstacle deduction failed: {e}")
        return None
    if result is None:
        logger.debug("Obstacles consume the buildable area")
    return result


def buildable_area(plot: BaseGeometry,
                   setback: Union[SetbackPolicy, float, None],
                   policy: Optional[FootprintPolicy] = None) -> Optional[BaseGeometry]:
    """Peripheral clearance (when configured) followed by setbacks."""
    if isinstance(setback, SetbackPolicy) and setback.peripheral is not None:
        zones = apply_peripheral_clearance(plot, setback.peripheral.parking_width,
                                           setback.peripheral.road_width, policy)
        if zones is None:
            return None
        plot = zones.buildable
    return resolve_setbacks(plot, setback, policy)
