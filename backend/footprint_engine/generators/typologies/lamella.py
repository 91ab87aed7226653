"""
Lamella / slab typology: parallel rows swept across the buildable area.

Rows longer than the maximum building length are cut into blocks by the
wing segmenter; shorter rows are kept whole when they meet the minimum
block dimensions.
"""
import logging
from typing import List, Optional
from shapely.geometry.base import BaseGeometry
from ...schemas.footprint import BuildingFootprint
from ...schemas.typology import LamellaParams
from ...utils.geometry_utils import bearing_vector
from ..collision import CollisionGuard
from ..metrics import compute_score
from ..policy import FootprintPolicy
from ..seeding import rng_for
from ..segmenter import accept_segment, axis_extent, segment_wing
from ..selection import Candidate, CandidateOrigin, OriginKind, ShapeArena, select_candidate
from ..setback import deduct_obstacles
from ..shapes import lamella_strips
from .base import apply_area_limits, as_multi, covers_center, make_footprint

logger = logging.getLogger(__name__)


def _sweep(region: BaseGeometry,
           buildable: BaseGeometry,
           phase_index: int,
           phase: float,
           params: LamellaParams,
           guard: CollisionGuard,
           policy: FootprintPolicy) -> List[BaseGeometry]:
    u = bearing_vector(params.orientation)
    min_area = params.width * params.min_building_length
    min_width = min(params.width, params.min_building_width)
    blocks = []
    for row_index, (row, start, end) in enumerate(
            lamella_strips(region, params.width, params.spacing, params.orientation, phase)):
        if row.area < min_area:
            continue
        t0, t1 = axis_extent(row, start, u)
        if t1 - t0 > params.max_building_length:
            rng = rng_for(params.seed, "lamella", phase_index, row_index)
            pieces = segment_wing(row, start, end, min_width, params.min_building_length,
                                  params.max_building_length, params.gap, rng, policy)
        elif accept_segment(row, min_width, params.min_building_length, policy.dimension_tolerance):
            pieces = [row]
        else:
            logger.debug(f"Lamella row {row_index} is a sliver")
            continue
        for piece in pieces:
            piece = apply_area_limits(piece, params, policy)
            if piece is None or guard.collides(piece):
                continue
            if params.avoid_center and covers_center(piece, buildable):
                logger.debug(f"Lamella row {row_index} covers the plot centre")
                continue
            blocks.append(piece)
    return blocks


def generate_lamellas(buildable: BaseGeometry,
                      params: LamellaParams,
                      policy: Optional[FootprintPolicy] = None) -> List[BuildingFootprint]:
    policy = policy or FootprintPolicy()
    region = deduct_obstacles(buildable, params.obstacles)
    if region is None:
        return []
    guard = CollisionGuard(params.obstacles, policy.collision_epsilon)
    arena = ShapeArena()
    candidates: List[Candidate] = []

    for index, phase in enumerate(policy.sweep_phases):
        blocks = _sweep(region, buildable, index, phase, params, guard, policy)
        if not blocks:
            continue
        geom = as_multi(blocks)
        candidates.append(Candidate(
            geometry=geom,
            score=compute_score(geom),
            origin=CandidateOrigin(OriginKind.SWEEP, index),
            part_ids=arena.extend(blocks),
        ))

    chosen = select_candidate(candidates, params.seed)
    if chosen is None:
        logger.info("Lamella generation found no feasible rows")
        return []
    rows = arena.geometries(chosen.part_ids)
    logger.info(f"Lamella generation complete: {len(rows)} blocks from {len(candidates)} sweeps")
    return [make_footprint(r, params.typology) for r in rows]
