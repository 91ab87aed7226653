"""
Obstacle collision checks and corner clearance between composite parts.
"""
import logging
from typing import List, Optional, Sequence
from shapely import STRtree
from shapely.errors import GEOSException
from shapely.geometry.base import BaseGeometry
from ..utils.geometry_utils import clean_geometry, rectangle_sides
from .policy import FootprintPolicy

logger = logging.getLogger(__name__)


class CollisionGuard:
    """Spatially indexed obstacle set. A candidate collides when any overlap exceeds epsilon."""

    def __init__(self, obstacles: Sequence[BaseGeometry], epsilon: float = 1.0):
        self.obstacles = [o for o in obstacles if o is not None and not o.is_empty]
        self.epsilon = epsilon
        self.tree = STRtree(self.obstacles) if self.obstacles else None

    def collides(self, candidate: Optional[BaseGeometry]) -> bool:
        if self.tree is None or candidate is None or candidate.is_empty:
            return False
        for idx in self.tree.query(candidate):
            obstacle = self.obstacles[int(idx)]
            try:
                overlap = candidate.intersection(obstacle).area
            except GEOSException as e:
                logger.warning(f"Intersection with obstacle {idx} failed: {e}")
                return True
            if overlap > self.epsilon:
                return True
        return False


def collides(candidate: Optional[BaseGeometry],
             obstacles: Sequence[BaseGeometry],
             epsilon: float = 1.0) -> bool:
    return CollisionGuard(obstacles, epsilon).collides(candidate)


def ensure_corner_clearance(parts: Sequence[BaseGeometry],
                            clearance: float = 1.5,
                            policy: Optional[FootprintPolicy] = None,
                            min_width: Optional[float] = None,
                            min_length: Optional[float] = None) -> List[BaseGeometry]:
    """
    Shrink every part that lies within 2 * clearance of another part.

    Each crowded part loses clearance / 2 on every side, so two adjoining
    parts end up at least `clearance` apart. Parts that vanish, fall below
    policy.min_part_area, or come out under min_width / min_length (less
    policy.dimension_tolerance) are dropped.
    """
    policy = policy or FootprintPolicy()
    result = []
    for i, part in enumerate(parts):
        crowded = any(part.distance(other) < 2 * clearance
                      for j, other in enumerate(parts) if j != i)
        if not crowded:
            result.append(part)
            continue
        try:
            shrunk = clean_geometry(part.buffer(-clearance / 2, join_style="mitre"))
        except GEOSException as e:
            logger.warning(f"Corner clearance failed on part {i}: {e}")
            continue
        if shrunk is None or shrunk.area < policy.min_part_area:
            logger.debug(f"Part {i} dropped by corner clearance")
            continue
        short_side, long_side = rectangle_sides(shrunk.area, shrunk.length)
        if min_width is not None and short_side < min_width - policy.dimension_tolerance:
            logger.debug(f"Part {i} too narrow after corner clearance ({short_side:.1f}m)")
            continue
        if min_length is not None and long_side < min_length - policy.dimension_tolerance:
            logger.debug(f"Part {i} too short after corner clearance ({long_side:.1f}m)")
            continue
        result.append(shrunk)
    return result
