"""
Perimeter (courtyard) typology.
"""
import logging
from typing import List, Optional
from shapely.geometry.base import BaseGeometry
from ...schemas.footprint import BuildingFootprint
from ...schemas.typology import PerimeterParams
from ...utils.geometry_utils import polygon_parts
from ..collision import CollisionGuard
from ..metrics import compute_score
from ..policy import FootprintPolicy
from ..selection import Candidate, CandidateOrigin, OriginKind, ShapeArena, select_candidate
from ..setback import deduct_obstacles
from ..shapes import perimeter_ring
from .base import apply_area_limits, covers_center, make_footprint

logger = logging.getLogger(__name__)


def generate_perimeter(buildable: BaseGeometry,
                       params: PerimeterParams,
                       policy: Optional[FootprintPolicy] = None) -> List[BuildingFootprint]:
    """One ring per buildable part; the seed picks which part is built."""
    policy = policy or FootprintPolicy()
    region = deduct_obstacles(buildable, params.obstacles)
    if region is None:
        return []
    guard = CollisionGuard(params.obstacles, policy.collision_epsilon)
    arena = ShapeArena()
    candidates: List[Candidate] = []
    kinds = {}

    for index, part in enumerate(polygon_parts(region, policy.min_part_area)):
        ring, kind = perimeter_ring(part, params.depth)
        ring = apply_area_limits(ring, params, policy)
        if ring is None:
            continue
        if guard.collides(ring):
            continue
        if params.avoid_center and covers_center(ring, buildable):
            logger.debug(f"Perimeter {kind} on part {index} covers the plot centre")
            continue
        ring_id = arena.add(ring)
        kinds[ring_id] = kind
        candidates.append(Candidate(
            geometry=ring,
            score=compute_score(ring),
            origin=CandidateOrigin(OriginKind.RING, index),
            part_ids=[ring_id],
        ))

    chosen = select_candidate(candidates, params.seed)
    if chosen is None:
        logger.info("Perimeter generation found no feasible ring")
        return []
    ring_id = chosen.part_ids[0]
    subtype = params.typology if kinds[ring_id] == "ring" else "block"
    logger.info(f"Perimeter generation complete: {subtype} of {chosen.geometry.area:.0f} m2")
    return [make_footprint(chosen.geometry, subtype)]
