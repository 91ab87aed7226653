"""
Tower / point-block typology: square towers on a rotated grid.

Every grid phase is one candidate; the selected phase yields one
footprint per tower.
"""
import logging
import math
from typing import List, Optional, Tuple
import numpy as np
from shapely.errors import GEOSException
from shapely.geometry import Point, Polygon
from shapely.geometry.base import BaseGeometry
from ...schemas.footprint import BuildingFootprint
from ...schemas.typology import TowerParams
from ...utils.geometry_utils import Coord, bearing_vector
from ..collision import CollisionGuard
from ..metrics import compute_score
from ..policy import FootprintPolicy
from ..selection import Candidate, CandidateOrigin, OriginKind, ShapeArena, select_candidate
from ..shapes import tower_template
from .base import apply_area_limits, as_multi, covers_center, make_footprint

logger = logging.getLogger(__name__)


def _grid_towers(buildable: BaseGeometry,
                 origin: Coord,
                 phase: Tuple[float, float],
                 params: TowerParams,
                 guard: CollisionGuard,
                 policy: FootprintPolicy) -> List[Polygon]:
    u = bearing_vector(params.orientation)
    n = np.array([u[1], -u[0]])
    stride = params.width + params.spacing
    minx, miny, maxx, maxy = buildable.bounds
    count = int(math.ceil(math.hypot(maxx - minx, maxy - miny) / stride)) + 1

    towers = []
    for i in range(-count, count + 1):
        for j in range(-count, count + 1):
            c = np.asarray(origin) + (i + phase[0]) * stride * u + (j + phase[1]) * stride * n
            center = (float(c[0]), float(c[1]))
            if not buildable.contains(Point(center)):
                continue
            tower = tower_template(center, params.width, params.orientation)
            try:
                clipped = tower.intersection(buildable)
            except GEOSException as e:
                logger.debug(f"Tower at {center} failed: {e}")
                continue
            if clipped.area < policy.tower_inside_ratio * tower.area:
                continue
            if guard.collides(clipped):
                logger.debug(f"Tower at {center} hits an obstacle")
                continue
            if params.avoid_center and covers_center(clipped, buildable):
                logger.debug(f"Tower at {center} covers the plot centre")
                continue
            tower = apply_area_limits(clipped, params, policy)
            if tower is not None:
                towers.append(tower)
    return towers


def generate_towers(buildable: BaseGeometry,
                    params: TowerParams,
                    policy: Optional[FootprintPolicy] = None) -> List[BuildingFootprint]:
    """Grid towers for every phase, then one phase picked by seed."""
    policy = policy or FootprintPolicy()
    guard = CollisionGuard(params.obstacles, policy.collision_epsilon)
    arena = ShapeArena()
    candidates: List[Candidate] = []

    origins = [(OriginKind.GRID, (buildable.centroid.x, buildable.centroid.y))]
    if params.target_point is not None and buildable.contains(Point(params.target_point)):
        origins.append((OriginKind.TARGET, tuple(params.target_point)))

    for kind, origin in origins:
        for index, phase in enumerate(policy.grid_phases):
            towers = _grid_towers(buildable, origin, phase, params, guard, policy)
            if not towers:
                continue
            geom = as_multi(towers)
            candidates.append(Candidate(
                geometry=geom,
                score=compute_score(geom),
                origin=CandidateOrigin(kind, index),
                part_ids=arena.extend(towers),
            ))

    chosen = select_candidate(candidates, params.seed)
    if chosen is None:
        logger.info("Tower generation found no feasible grid")
        return []
    towers = arena.geometries(chosen.part_ids)
    logger.info(f"Tower generation complete: {len(towers)} towers from {len(candidates)} candidates")
    return [make_footprint(t, params.typology) for t in towers]
