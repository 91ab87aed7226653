"""
L/U/T/H composite typologies.

For every anchor and depth variant the wings are segmented into blocks,
capped, collision checked and scored by area times the compactness of the
continuous wing outline. The selected candidate's blocks get corner
clearance so adjoining parts never touch at a seam.
"""
import logging
from typing import List, Optional
from shapely.geometry.base import BaseGeometry
from shapely.ops import unary_union
from ...schemas.footprint import BuildingFootprint
from ...schemas.typology import CompositeParams
from ...utils.geometry_utils import polygon_parts
from ..collision import CollisionGuard, ensure_corner_clearance
from ..metrics import compute_score
from ..policy import FootprintPolicy
from ..seeding import rng_for
from ..segmenter import segment_wing
from ..selection import Candidate, CandidateOrigin, ShapeArena, SizeVariant, select_candidate
from ..shapes import Anchor, auto_wing_depth, composite_anchors, depth_variants
from .base import apply_area_limits, as_multi, covers_center, make_footprint

logger = logging.getLogger(__name__)


def _build_candidate(anchor: Anchor,
                     variant: SizeVariant,
                     depth: float,
                     buildable: BaseGeometry,
                     params: CompositeParams,
                     arena: ShapeArena,
                     guard: CollisionGuard,
                     policy: FootprintPolicy) -> Optional[Candidate]:
    wings = anchor.build(depth)
    if not wings:
        return None

    wing_ids = []
    segments = []
    for w, wing in enumerate(wings):
        wing_ids.append(arena.add(wing.geometry))
        if not wing.segment:
            segments.append(wing.geometry)
            continue
        rng = rng_for(params.seed, params.typology, anchor.kind.value, anchor.index, variant.value, w)
        pieces = segment_wing(wing.geometry, wing.start, wing.toward,
                              params.min_building_width, params.min_building_length,
                              params.max_building_length, params.gap, rng, policy)
        if not pieces:
            # every arm must yield at least one block
            return None
        segments.extend(pieces)

    geom = apply_area_limits(as_multi(segments), params, policy)
    if geom is None:
        return None
    if guard.collides(geom):
        logger.debug(f"{anchor.kind.value} {anchor.index} ({variant.value}) hits an obstacle")
        return None
    if params.avoid_center and covers_center(geom, buildable):
        logger.debug(f"{anchor.kind.value} {anchor.index} ({variant.value}) covers the plot centre")
        return None

    outline = unary_union(arena.geometries(wing_ids))
    return Candidate(
        geometry=geom,
        score=compute_score(geom, outline),
        origin=CandidateOrigin(anchor.kind, anchor.index, variant),
        part_ids=arena.extend(polygon_parts(geom)),
        wing_ids=wing_ids,
    )


def generate_composite(buildable: BaseGeometry,
                       params: CompositeParams,
                       policy: Optional[FootprintPolicy] = None) -> List[BuildingFootprint]:
    """Composite footprint for params.typology, one building made of several parts."""
    policy = policy or FootprintPolicy()
    # wings and blocks leave room for the corner clearance taken off crowded parts
    room = policy.corner_clearance
    sized = params.model_copy(update={
        'min_building_width': min(params.min_building_width + room, params.max_building_width),
        'min_building_length': min(params.min_building_length + room, params.max_building_length),
    })
    depth = params.wing_depth or auto_wing_depth(buildable, params.typology, policy)
    variants = depth_variants(depth, buildable, sized, policy)
    anchors = composite_anchors(buildable, params, policy)
    logger.debug(f"{params.typology}: {len(anchors)} anchors, depths "
                 f"{[round(d, 1) for _, d in variants]}")

    guard = CollisionGuard(params.obstacles, policy.collision_epsilon)
    arena = ShapeArena()
    candidates: List[Candidate] = []
    for anchor in anchors:
        for variant, variant_depth in variants:
            cand = _build_candidate(anchor, variant, variant_depth, buildable,
                                    sized, arena, guard, policy)
            if cand is not None:
                candidates.append(cand)

    chosen = select_candidate(candidates, params.seed)
    if chosen is None:
        logger.info(f"{params.typology} generation found no feasible candidate")
        return []

    parts = ensure_corner_clearance(arena.geometries(chosen.part_ids),
                                    policy.corner_clearance, policy,
                                    min_width=params.min_building_width,
                                    min_length=params.min_building_length)
    if not parts:
        logger.info(f"{params.typology} candidate vanished under corner clearance")
        return []
    geom = as_multi(parts)
    logger.info(f"{params.typology} generation complete: {len(parts)} parts, "
                f"{geom.area:.0f} m2 from {len(candidates)} candidates")
    return [make_footprint(geom, params.typology, parts)]
