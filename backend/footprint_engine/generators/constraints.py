"""
Footprint and GFA capping by iterative inward buffering.
"""
import logging
from typing import Optional
from shapely.errors import GEOSException
from shapely.geometry.base import BaseGeometry
from ..schemas.typology import BaseTypologyParams
from ..utils.geometry_utils import clean_geometry
from .policy import FootprintPolicy

logger = logging.getLogger(__name__)


def footprint_cap(params: BaseTypologyParams) -> Optional[float]:
    """Tightest of max_footprint and target_gfa / max_floors, None if neither applies."""
    caps = []
    if params.max_footprint is not None:
        caps.append(params.max_footprint)
    if params.target_gfa is not None and params.max_floors:
        caps.append(params.target_gfa / params.max_floors)
    return min(caps) if caps else None


def enforce_max_area(geometry: Optional[BaseGeometry],
                     max_area: Optional[float],
                     min_area: Optional[float] = None,
                     policy: Optional[FootprintPolicy] = None) -> Optional[BaseGeometry]:
    """
    Shrink geometry until its area is at most max_area.

    Returns the input object itself when it already fits. Each attempt
    buffers the original inward by a growing distance, with a step chosen
    from how far the current area is above the cap. Returns None when the
    shape vanishes, drops under min_area first, or the attempts run out.
    """
    if geometry is None or max_area is None or geometry.area <= max_area:
        return geometry
    policy = policy or FootprintPolicy()

    offset = 0.0
    current = geometry
    for attempt in range(policy.max_shrink_attempts):
        offset += policy.shrink_step(current.area, max_area)
        try:
            current = clean_geometry(geometry.buffer(-offset, join_style="mitre"))
        except GEOSException as e:
            logger.warning(f"Shrink buffer failed at {offset:.1f}m: {e}")
            return None
        if current is None:
            logger.debug(f"Shape vanished after shrinking {offset:.1f}m")
            return None
        if min_area is not None and current.area < min_area:
            logger.debug(f"Shape fell below min area {min_area:.0f} before reaching {max_area:.0f}")
            return None
        if current.area <= max_area:
            logger.debug(f"Capped to {current.area:.1f} m2 after {attempt + 1} attempts")
            return current

    logger.debug(f"Could not reach {max_area:.0f} m2 in {policy.max_shrink_attempts} attempts")
    return None
