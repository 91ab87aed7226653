"""
Helpers shared by the typology orchestrators.
"""
from typing import List, Optional, Sequence
from shapely.geometry import MultiPolygon, Point
from shapely.geometry.base import BaseGeometry
from ...schemas.footprint import BuildingFootprint, FootprintPart
from ...schemas.typology import BaseTypologyParams
from ...utils.geometry_utils import polygon_parts
from ..constraints import enforce_max_area, footprint_cap
from ..policy import FootprintPolicy


def as_multi(parts: Sequence[BaseGeometry]) -> BaseGeometry:
    polys = [p for part in parts for p in polygon_parts(part)]
    return polys[0] if len(polys) == 1 else MultiPolygon(polys)


def covers_center(geom: BaseGeometry, buildable: BaseGeometry) -> bool:
    """True when geom covers the centroid of the buildable area."""
    return geom.covers(Point(buildable.centroid.coords[0]))


def apply_area_limits(geom: Optional[BaseGeometry],
                      params: BaseTypologyParams,
                      policy: FootprintPolicy) -> Optional[BaseGeometry]:
    """Footprint/GFA cap followed by the minimum footprint floor."""
    if geom is None:
        return None
    geom = enforce_max_area(geom, footprint_cap(params), params.min_footprint, policy)
    if geom is None:
        return None
    if params.min_footprint is not None and geom.area < params.min_footprint:
        return None
    return geom


def make_footprint(geom: BaseGeometry, subtype: str,
                   parts: Optional[List[BaseGeometry]] = None) -> BuildingFootprint:
    return BuildingFootprint(
        geometry=geom,
        subtype=subtype,
        area=float(geom.area),
        parts=[FootprintPart(geometry=p, subtype=subtype, area=float(p.area)) for p in (parts or [])],
    )
