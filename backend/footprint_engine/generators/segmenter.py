"""
Wing segmentation: cut a continuous wing into discrete blocks.

Slices perpendicular to the travel axis are cut at seeded lengths and
separated by the mandatory gap. Slice dimensions come from area and
perimeter (x^2 - (P/2)x + A = 0) so rotated pieces are measured without
bounding-box distortion.
"""
import logging
from typing import List, Optional, Tuple
import numpy as np
from shapely.errors import GEOSException
from shapely.geometry import Polygon
from shapely.geometry.base import BaseGeometry
from ..utils.geometry_utils import Coord, clean_geometry, largest_part, polygon_parts, rectangle_sides, unit_vector
from .policy import FootprintPolicy

logger = logging.getLogger(__name__)


def axis_extent(geom: BaseGeometry, origin: Coord, axis: np.ndarray) -> Tuple[float, float]:
    """(min, max) of the exterior vertices projected on origin + t * axis."""
    coords = []
    for part in polygon_parts(geom):
        coords.extend(part.exterior.coords)
    if not coords:
        return (0.0, 0.0)
    pts = np.asarray(coords)[:, :2] - np.asarray(origin, dtype=float)
    t = pts @ axis
    return (float(t.min()), float(t.max()))


def _slice(origin: np.ndarray, u: np.ndarray, n: np.ndarray,
           t0: float, t1: float, s0: float, s1: float) -> Polygon:
    return Polygon([
        tuple(origin + t0 * u + s0 * n),
        tuple(origin + t1 * u + s0 * n),
        tuple(origin + t1 * u + s1 * n),
        tuple(origin + t0 * u + s1 * n),
    ])


def accept_segment(piece: Optional[BaseGeometry], min_width: float, min_length: float,
                   tolerance: float = 1.0) -> bool:
    if piece is None or piece.is_empty:
        return False
    short_side, long_side = rectangle_sides(piece.area, piece.length)
    return short_side >= min_width - tolerance and long_side >= min_length - tolerance


def segment_wing(wing: Optional[BaseGeometry],
                 start: Coord,
                 toward: Coord,
                 min_width: float,
                 min_length: float,
                 max_length: float,
                 gap: float,
                 rng: np.random.Generator,
                 policy: Optional[FootprintPolicy] = None) -> List[Polygon]:
    """
    Cut `wing` into blocks along the axis start -> toward.

    Args:
        wing: Wing polygon
        start: Point the scan starts from (usually the wing's corner end)
        toward: Point giving the travel direction
        min_width: Minimum block depth
        min_length, max_length: Block length bounds along the axis
        gap: Clear distance left between consecutive blocks
        rng: Seeded generator for block lengths
        policy: Tolerances and iteration cap

    Returns:
        Accepted blocks in travel order (possibly empty)
    """
    policy = policy or FootprintPolicy()
    if wing is None or wing.is_empty:
        return []
    u = unit_vector(start, toward)
    if not u.any():
        return []
    n = np.array([-u[1], u[0]])
    origin = np.asarray(start, dtype=float)

    t_min, t_max = axis_extent(wing, start, u)
    s_min, s_max = axis_extent(wing, start, n)
    s_min -= 1.0
    s_max += 1.0

    tol = policy.dimension_tolerance
    segments: List[Polygon] = []
    pos = t_min
    for _ in range(policy.max_iterations):
        remaining = t_max - pos
        if remaining < min_length - tol:
            break
        upper = min(max_length, remaining)
        lower = min(min_length, upper)
        length = float(rng.uniform(lower, upper)) if upper > lower else upper

        try:
            cut = _slice(origin, u, n, pos, pos + length, s_min, s_max)
            piece = largest_part(clean_geometry(wing.intersection(cut)))
        except GEOSException as e:
            logger.debug(f"Slice at t={pos:.1f} failed: {e}")
            piece = None

        if accept_segment(piece, min_width, min_length, tol):
            segments.append(piece)
        elif remaining < policy.segment_stop_length:
            logger.debug(f"Rejected slice with {remaining:.1f}m left, stopping")
            break
        pos += length + gap

    return segments
