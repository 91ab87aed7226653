"""
Shape construction for every typology.

Simple typologies get their template directly (tower square, perimeter
ring, lamella strip). Composite typologies enumerate anchors over the
buildable outline:

    L  convex corners            two wings along the incoming/outgoing edges
    U  three-edge windows        base wing plus two side wings
    T  long edges                bar along the edge plus a perpendicular stem
    H  opposite edge pairs       two bars plus a bridge between midpoints

and, when a target point is supplied, a parametric template centred on it.
Each anchor builds its wings lazily for a given depth so the orchestrator
can try several depth variants per anchor.
"""
import logging
import math
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple
from shapely import affinity
from shapely.errors import GEOSException
from shapely.geometry import Point, Polygon, box
from shapely.geometry.base import BaseGeometry
from shapely.ops import unary_union
import numpy as np
from ..schemas.typology import BaseTypologyParams, CompositeParams
from ..utils.geometry_utils import (
    Coord, Edge, bearing_vector, centered_strip, clean_geometry, edge_angle_difference,
    largest_part, minor_dimension, offset_point, oriented_box, outline_corners,
    outline_edges, polygon_parts, strip_along,
)
from .policy import FootprintPolicy
from .seeding import jitter, rng_for
from .selection import OriginKind, SizeVariant

logger = logging.getLogger(__name__)


@dataclass
class Wing:
    """One arm of a composite shape and the axis it is segmented along."""
    geometry: BaseGeometry
    start: Coord
    toward: Coord
    segment: bool = True


@dataclass
class Anchor:
    kind: OriginKind
    index: int
    build: Callable[[float], List[Wing]]


# ---------------------------------------------------------------------------
# simple templates

def tower_template(center: Coord, width: float, orientation: float) -> Polygon:
    return oriented_box(center, width, width, orientation)


def perimeter_ring(region: BaseGeometry, depth: float) -> Tuple[Optional[BaseGeometry], str]:
    """
    Courtyard ring of the given depth following the region outline.

    Returns (geometry, kind) where kind is "ring", or "block" when the
    courtyard would vanish and the solid region is used instead.
    """
    inner = clean_geometry(region.buffer(-depth, join_style="mitre"))
    if inner is None:
        return region, "block"
    return clean_geometry(region.difference(inner)), "ring"


def lamella_strips(region: BaseGeometry,
                   width: float,
                   spacing: float,
                   orientation: float,
                   phase: float = 0.0) -> List[Tuple[Polygon, Coord, Coord]]:
    """
    Parallel strips of `width` along `orientation`, one every width + spacing.

    Returns (row, start, toward) tuples; the axis endpoints lie on the row
    centre line well outside the region.
    """
    u = bearing_vector(orientation)
    n = np.array([u[1], -u[0]])
    c = region.centroid
    center = np.array([c.x, c.y])
    minx, miny, maxx, maxy = region.bounds
    reach = math.hypot(maxx - minx, maxy - miny)
    stride = width + spacing
    count = int(math.ceil(reach / stride)) + 1

    rows = []
    for k in range(-count, count + 1):
        offset = (k + phase) * stride
        mid = center + offset * n
        start = tuple(mid - reach * u)
        end = tuple(mid + reach * u)
        strip = centered_strip(start, end, width)
        try:
            clipped = region.intersection(strip)
        except GEOSException as e:
            logger.debug(f"Lamella strip {k} failed: {e}")
            continue
        for part in polygon_parts(clean_geometry(clipped)):
            rows.append((part, start, end))
    return rows


# ---------------------------------------------------------------------------
# wings and depths

def build_wing(start: Coord, end: Coord, depth: float, buildable: BaseGeometry) -> Optional[Polygon]:
    """Single-sided strip on the inner side of an outline edge, clipped to the buildable."""
    try:
        return largest_part(clean_geometry(strip_along(start, end, depth).intersection(buildable)))
    except GEOSException as e:
        logger.debug(f"Wing along {start}->{end} failed: {e}")
        return None


def remove_wing_overlap(wing: Optional[BaseGeometry], other: Optional[BaseGeometry],
                        exclusion: float) -> Optional[BaseGeometry]:
    """Wing minus the other wing grown by `exclusion`."""
    if wing is None or other is None:
        return wing
    try:
        return largest_part(clean_geometry(wing.difference(other.buffer(exclusion, join_style="mitre"))))
    except GEOSException as e:
        logger.debug(f"Overlap removal failed: {e}")
        return None


def auto_wing_depth(buildable: BaseGeometry, typology: str, policy: FootprintPolicy) -> float:
    lo, hi = policy.auto_depth_range
    ratio = policy.auto_depth_ratio_h if typology == "hshaped" else policy.auto_depth_ratio
    return min(hi, max(lo, minor_dimension(buildable) * ratio))


def depth_variants(base_depth: float,
                   buildable: BaseGeometry,
                   params: BaseTypologyParams,
                   policy: FootprintPolicy) -> List[Tuple[SizeVariant, float]]:
    """
    Compact/standard/deep depths around a seeded target depth.

    Each is capped at policy.max_depth_ratio of the plot minor dimension and
    clamped into the building width range; duplicates after clamping are
    dropped.
    """
    target = base_depth * jitter(params.seed, "depth", params.typology, spread=policy.depth_jitter)
    cap = policy.max_depth_ratio * minor_dimension(buildable)
    variants: List[Tuple[SizeVariant, float]] = []
    for variant, factor in zip(SizeVariant, policy.depth_multipliers):
        depth = min(target * factor, cap)
        depth = min(max(depth, params.min_building_width), params.max_building_width)
        if any(abs(depth - d) < 1e-6 for _, d in variants):
            continue
        variants.append((variant, depth))
    return variants


# ---------------------------------------------------------------------------
# composite anchors

def _outline(buildable: BaseGeometry) -> Optional[Polygon]:
    return largest_part(buildable)


def _cross(a: Edge, b: Edge) -> float:
    d1, d2 = a.direction, b.direction
    return float(d1[0] * d2[1] - d1[1] * d2[0])


def corner_anchors(buildable: BaseGeometry, policy: FootprintPolicy) -> List[Anchor]:
    """L anchors: one per convex corner of the simplified outline."""
    outline = _outline(buildable)
    if outline is None:
        return []
    anchors = []
    for corner in outline_corners(outline, policy.outline_tolerance, policy.min_corner_turn):
        if not corner.is_convex:
            continue

        def build(depth, corner=corner):
            incoming, outgoing = corner.incoming, corner.outgoing
            w_out = build_wing(outgoing.start, outgoing.end, depth, buildable)
            w_in = build_wing(incoming.start, incoming.end, depth, buildable)
            # the longer arm keeps the corner square
            if outgoing.length >= incoming.length:
                w_in = remove_wing_overlap(w_in, w_out, policy.wing_exclusion)
            else:
                w_out = remove_wing_overlap(w_out, w_in, policy.wing_exclusion)
            if w_in is None or w_out is None:
                return []
            return [Wing(w_out, corner.point, outgoing.end),
                    Wing(w_in, corner.point, incoming.start)]

        anchors.append(Anchor(OriginKind.CORNER, corner.index, build))
    return anchors


def window_anchors(buildable: BaseGeometry, policy: FootprintPolicy) -> List[Anchor]:
    """U anchors: base edge plus its two neighbours, both turns convex."""
    outline = _outline(buildable)
    if outline is None:
        return []
    edges = outline_edges(outline, policy.outline_tolerance)
    n = len(edges)
    if n < 3:
        return []
    anchors = []
    for i in range(n):
        prev, base, nxt = edges[i - 1], edges[i], edges[(i + 1) % n]
        if _cross(prev, base) <= 0 or _cross(base, nxt) <= 0:
            continue

        def build(depth, prev=prev, base=base, nxt=nxt):
            w_base = build_wing(base.start, base.end, depth, buildable)
            w_prev = remove_wing_overlap(build_wing(prev.start, prev.end, depth, buildable),
                                         w_base, policy.wing_exclusion)
            w_next = remove_wing_overlap(build_wing(nxt.start, nxt.end, depth, buildable),
                                         w_base, policy.wing_exclusion)
            w_next = remove_wing_overlap(w_next, w_prev, policy.wing_exclusion)
            if w_base is None or w_prev is None or w_next is None:
                return []
            return [Wing(w_base, base.start, base.end),
                    Wing(w_prev, prev.end, prev.start),
                    Wing(w_next, nxt.start, nxt.end)]

        anchors.append(Anchor(OriginKind.EDGE_WINDOW, i, build))
    return anchors


def edge_anchors(buildable: BaseGeometry, params: BaseTypologyParams,
                 policy: FootprintPolicy) -> List[Anchor]:
    """T anchors: long edges, with a stem from the edge midpoint into the plot."""
    outline = _outline(buildable)
    if outline is None:
        return []
    minx, miny, maxx, maxy = buildable.bounds
    reach = math.hypot(maxx - minx, maxy - miny)
    min_edge = policy.t_min_edge_factor * params.min_building_length
    anchors = []
    for edge in outline_edges(outline, policy.outline_tolerance):
        if edge.length < min_edge:
            continue

        def build(depth, edge=edge):
            bar = build_wing(edge.start, edge.end, depth, buildable)
            if bar is None:
                return []
            normal = edge.inward_normal
            stem_start = offset_point(edge.midpoint, normal, depth)
            stem_end = offset_point(edge.midpoint, normal, depth + reach)
            try:
                stem = clean_geometry(centered_strip(stem_start, stem_end, depth).intersection(buildable))
            except GEOSException as e:
                logger.debug(f"T stem on edge {edge.index} failed: {e}")
                return []
            stem = remove_wing_overlap(largest_part(stem), bar, policy.wing_exclusion)
            if stem is None:
                return []
            return [Wing(bar, edge.start, edge.end), Wing(stem, stem_start, stem_end)]

        anchors.append(Anchor(OriginKind.EDGE, edge.index, build))
    return anchors


def opposite_edge_pairs(buildable: BaseGeometry, policy: FootprintPolicy) -> List[Tuple[Edge, Edge]]:
    """Edge pairs facing each other: near-antiparallel and far enough apart."""
    outline = _outline(buildable)
    if outline is None:
        return []
    edges = outline_edges(outline, policy.outline_tolerance)
    min_sep = policy.opposite_min_separation * minor_dimension(buildable)
    pairs = []
    for i, a in enumerate(edges):
        for b in edges[i + 1:]:
            if edge_angle_difference(a, b) < 180.0 - policy.opposite_angle_tolerance:
                continue
            if math.dist(a.midpoint, b.midpoint) <= min_sep:
                continue
            pairs.append((a, b))
    return pairs


def edge_pair_anchors(buildable: BaseGeometry, policy: FootprintPolicy) -> List[Anchor]:
    """H anchors: two bars on opposite edges joined by a bridge."""
    anchors = []
    for k, (a, b) in enumerate(opposite_edge_pairs(buildable, policy)):

        def build(depth, a=a, b=b):
            bar_a = build_wing(a.start, a.end, depth, buildable)
            bar_b = remove_wing_overlap(build_wing(b.start, b.end, depth, buildable),
                                        bar_a, policy.wing_exclusion)
            if bar_a is None or bar_b is None:
                return []
            bridge_start = offset_point(a.midpoint, a.inward_normal, depth)
            bridge_end = offset_point(b.midpoint, b.inward_normal, depth)
            try:
                bridge = clean_geometry(centered_strip(bridge_start, bridge_end, depth).intersection(buildable))
            except GEOSException as e:
                logger.debug(f"H bridge failed: {e}")
                return []
            bridge = remove_wing_overlap(largest_part(bridge), bar_a, policy.wing_exclusion)
            bridge = remove_wing_overlap(bridge, bar_b, policy.wing_exclusion)
            if bridge is None:
                return []
            return [Wing(bar_a, a.start, a.end), Wing(bar_b, b.start, b.end),
                    Wing(bridge, bridge_start, bridge_end)]

        anchors.append(Anchor(OriginKind.EDGE_PAIR, k, build))
    return anchors


# ---------------------------------------------------------------------------
# target-anchored templates

def template_parts(typology: str, a: float, b: float, d: float) -> List[Polygon]:
    """
    Wings of a parametric shape centred on the origin, `a` across and `b`
    along the long (+y) axis with wing depth `d`. Empty when the lengths
    cannot fit the depth.
    """
    if typology in ("ushaped", "hshaped"):
        if a <= 2 * d or b <= d:
            return []
    elif a <= d or b <= d:
        return []
    if typology == "lshaped":
        return [box(-a / 2, -b / 2, a / 2, -b / 2 + d),
                box(-a / 2, -b / 2 + d, -a / 2 + d, b / 2)]
    if typology == "ushaped":
        return [box(-a / 2, -b / 2, a / 2, -b / 2 + d),
                box(-a / 2, -b / 2 + d, -a / 2 + d, b / 2),
                box(a / 2 - d, -b / 2 + d, a / 2, b / 2)]
    if typology == "tshaped":
        return [box(-a / 2, b / 2 - d, a / 2, b / 2),
                box(-d / 2, -b / 2, d / 2, b / 2 - d)]
    if typology == "hshaped":
        return [box(-a / 2, -b / 2, -a / 2 + d, b / 2),
                box(a / 2 - d, -b / 2, a / 2, b / 2),
                box(-a / 2 + d, -d / 2, a / 2 - d, d / 2)]
    raise ValueError(f"No template for typology {typology!r}")


def place_template(parts: List[Polygon], center: Coord, orientation: float) -> List[Polygon]:
    placed = []
    for part in parts:
        # shapely rotates counter-clockwise; bearings run clockwise
        rotated = affinity.rotate(part, -orientation, origin=(0, 0))
        placed.append(affinity.translate(rotated, center[0], center[1]))
    return placed


def default_wing_length(buildable: BaseGeometry, params: BaseTypologyParams) -> float:
    half_minor = 0.5 * minor_dimension(buildable)
    return min(max(half_minor, params.min_building_length), params.max_building_length)


def target_anchor(buildable: BaseGeometry, params: CompositeParams,
                  policy: FootprintPolicy) -> Optional[Anchor]:
    """Template centred on params.target_point, retried at a smaller scale if it does not fit."""
    if params.target_point is None:
        return None
    center = (float(params.target_point[0]), float(params.target_point[1]))
    if not buildable.contains(Point(center)):
        logger.debug("Target point outside buildable area, skipping template")
        return None
    base_a = params.wing_length_a or default_wing_length(buildable, params)
    base_b = params.wing_length_b or base_a

    def build(depth):
        rng = rng_for(params.seed, "target", params.typology, int(round(depth * 100)))
        for scale in (1.0, policy.template_fallback_scale):
            var = policy.template_variance
            a = base_a * scale * rng.uniform(1 - var, 1 + var)
            b = base_b * scale * rng.uniform(1 - var, 1 + var)
            parts = place_template(template_parts(params.typology, a, b, depth), center, params.orientation)
            if not parts:
                continue
            for i in range(1, len(parts)):
                for prior in parts[:i]:
                    parts[i] = remove_wing_overlap(parts[i], prior, policy.wing_exclusion)
            if any(p is None for p in parts):
                continue
            outline = unary_union(parts)
            if outline.intersection(buildable).area < policy.template_within_ratio * outline.area:
                logger.debug(f"Template at scale {scale} does not fit the buildable area")
                continue
            wings = []
            for p in parts:
                clipped = largest_part(clean_geometry(p.intersection(buildable)))
                if clipped is None:
                    return []
                wings.append(Wing(clipped, center, center, segment=False))
            return wings
        return []

    return Anchor(OriginKind.TARGET, 0, build)


def composite_anchors(buildable: BaseGeometry, params: CompositeParams,
                      policy: FootprintPolicy) -> List[Anchor]:
    """All anchors for the composite typology, in enumeration order."""
    if params.typology == "lshaped":
        anchors = corner_anchors(buildable, policy)
    elif params.typology == "ushaped":
        anchors = window_anchors(buildable, policy)
    elif params.typology == "tshaped":
        anchors = edge_anchors(buildable, params, policy)
    elif params.typology == "hshaped":
        anchors = edge_pair_anchors(buildable, policy)
    else:
        raise ValueError(f"Not a composite typology: {params.typology!r}")
    target = target_anchor(buildable, params, policy)
    if target is not None:
        anchors.insert(0, target)
    return anchors
