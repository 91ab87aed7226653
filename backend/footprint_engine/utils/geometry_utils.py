"""
Geometry utility helpers for polygon operations used by the generators.

Provides:
- polygon_parts(geom) / clean_geometry(geom) / largest_part(geom)
- rectangle_sides(area, perimeter)
- compactness(geom)
- minor_dimension(geom)
- outline_edges(polygon) / outline_corners(polygon)
- strip_along(start, end, depth) / centered_strip(start, end, width)
- oriented_box(center, length, width, bearing)

All coordinates are planar metres (x = east, y = north). Bearings are
compass degrees: 0 = north, 90 = east.
"""
from typing import List, Optional, Tuple
from dataclasses import dataclass
import math
import numpy as np
from shapely.geometry import LineString, MultiPolygon, Polygon, box
from shapely.geometry.base import BaseGeometry
from shapely.geometry.polygon import orient
from shapely.validation import make_valid
from shapely import affinity

AREA_EPSILON = 1e-6

Coord = Tuple[float, float]


def polygon_parts(geom: Optional[BaseGeometry], min_area: float = AREA_EPSILON) -> List[Polygon]:
    """Return the polygonal parts of any geometry, dropping slivers below min_area."""
    if geom is None or geom.is_empty:
        return []
    if geom.geom_type == "Polygon":
        return [geom] if geom.area > min_area else []
    if hasattr(geom, "geoms"):
        parts = []
        for g in geom.geoms:
            parts.extend(polygon_parts(g, min_area))
        return parts
    return []


def clean_geometry(geom: Optional[BaseGeometry], min_area: float = AREA_EPSILON) -> Optional[BaseGeometry]:
    """
    Repair and reduce a boolean-operation result to Polygon/MultiPolygon.

    Returns None for empty, non-areal or NaN results so call sites can treat
    them as infeasible.
    """
    if geom is None or geom.is_empty:
        return None
    if not geom.is_valid:
        geom = make_valid(geom)
    parts = polygon_parts(geom, min_area)
    if not parts:
        return None
    result = parts[0] if len(parts) == 1 else MultiPolygon(parts)
    if math.isnan(result.area) or result.area <= min_area:
        return None
    return result


def largest_part(geom: Optional[BaseGeometry]) -> Optional[Polygon]:
    parts = polygon_parts(geom)
    if not parts:
        return None
    return max(parts, key=lambda p: p.area)


def rectangle_sides(area: float, perimeter: float) -> Tuple[float, float]:
    """
    Recover (short, long) side lengths of a rectangle from its area and perimeter.

    Solves x^2 - (P/2)x + A = 0. A negative discriminant (shape more compact
    than any rectangle of that perimeter) is treated as a square.
    """
    if area <= 0 or perimeter <= 0:
        return (0.0, 0.0)
    half = perimeter / 2.0
    disc = half * half - 4.0 * area
    if disc < 0:
        side = math.sqrt(area)
        return (side, side)
    root = math.sqrt(disc)
    long_side = (half + root) / 2.0
    short_side = (half - root) / 2.0
    return (max(short_side, 0.0), long_side)


def compactness(geom: Optional[BaseGeometry]) -> float:
    """4*pi*area / perimeter^2 (1.0 for a circle, ~0.785 for a square)."""
    if geom is None or geom.is_empty or geom.length <= 0:
        return 0.0
    return float(4.0 * math.pi * geom.area / (geom.length ** 2))


def minor_dimension(geom: BaseGeometry) -> float:
    """Shorter side of the minimum rotated rectangle around geom."""
    rect = geom.minimum_rotated_rectangle
    if rect.geom_type != "Polygon":
        return 0.0
    coords = list(rect.exterior.coords)
    sides = [math.dist(coords[i], coords[i + 1]) for i in range(len(coords) - 1)]
    return float(min(sides)) if sides else 0.0


def bearing_vector(bearing: float) -> np.ndarray:
    """Unit vector pointing along a compass bearing."""
    rad = math.radians(bearing)
    return np.array([math.sin(rad), math.cos(rad)])


def unit_vector(a: Coord, b: Coord) -> np.ndarray:
    v = np.array(b, dtype=float) - np.array(a, dtype=float)
    n = np.linalg.norm(v)
    if n < 1e-12:
        return np.array([0.0, 0.0])
    return v / n


@dataclass
class Edge:
    """A straight edge of a simplified outline, oriented counter-clockwise."""
    index: int
    start: Coord
    end: Coord

    @property
    def length(self) -> float:
        return math.dist(self.start, self.end)

    @property
    def direction(self) -> np.ndarray:
        return unit_vector(self.start, self.end)

    @property
    def inward_normal(self) -> np.ndarray:
        # interior lies to the left of a CCW ring
        d = self.direction
        return np.array([-d[1], d[0]])

    @property
    def midpoint(self) -> Coord:
        return ((self.start[0] + self.end[0]) / 2.0, (self.start[1] + self.end[1]) / 2.0)

    @property
    def bearing(self) -> float:
        d = self.direction
        return math.degrees(math.atan2(d[0], d[1])) % 360.0


@dataclass
class Corner:
    """A vertex of a simplified outline with its adjacent edges."""
    index: int
    point: Coord
    incoming: Edge
    outgoing: Edge
    turn_angle: float  # signed, degrees; positive = left turn

    @property
    def is_convex(self) -> bool:
        return self.turn_angle > 0


def outline_edges(polygon: Polygon, tolerance: float = 0.5) -> List[Edge]:
    """Edges of the simplified exterior ring, counter-clockwise."""
    simple = polygon.simplify(tolerance, preserve_topology=True)
    if simple.is_empty or simple.geom_type != "Polygon":
        simple = polygon
    ring = orient(simple, sign=1.0).exterior
    coords = [tuple(c[:2]) for c in ring.coords[:-1]]
    edges: List[Edge] = []
    n = len(coords)
    for i in range(n):
        a, b = coords[i], coords[(i + 1) % n]
        if math.dist(a, b) < 1e-9:
            continue
        edges.append(Edge(index=len(edges), start=a, end=b))
    return edges


def edge_angle_difference(e1: Edge, e2: Edge) -> float:
    """Angle between two edge directions, 0..180 degrees."""
    cos_a = float(np.clip(np.dot(e1.direction, e2.direction), -1.0, 1.0))
    return math.degrees(math.acos(cos_a))


def outline_corners(polygon: Polygon, tolerance: float = 0.5, min_turn: float = 20.0) -> List[Corner]:
    """
    Corners of the simplified outline whose turning angle is at least min_turn.

    Corner i sits at the start of edge i; its incoming edge is edge i-1.
    """
    edges = outline_edges(polygon, tolerance)
    corners: List[Corner] = []
    n = len(edges)
    if n < 3:
        return corners
    for i in range(n):
        incoming = edges[i - 1]
        outgoing = edges[i]
        d1, d2 = incoming.direction, outgoing.direction
        cross = d1[0] * d2[1] - d1[1] * d2[0]
        dot = float(np.dot(d1, d2))
        turn = math.degrees(math.atan2(cross, dot))
        if abs(turn) < min_turn:
            continue
        corners.append(Corner(index=len(corners), point=outgoing.start,
                              incoming=incoming, outgoing=outgoing, turn_angle=turn))
    return corners


def strip_along(start: Coord, end: Coord, depth: float) -> Polygon:
    """Rectangle of the given depth on the left side of start->end."""
    if depth <= 0 or math.dist(start, end) < 1e-9:
        return Polygon()
    return LineString([start, end]).buffer(depth, cap_style="flat", join_style="mitre",
                                           single_sided=True)


def centered_strip(start: Coord, end: Coord, width: float) -> Polygon:
    """Rectangle of the given width centred on start->end, flat ends."""
    if width <= 0 or math.dist(start, end) < 1e-9:
        return Polygon()
    return LineString([start, end]).buffer(width / 2.0, cap_style="flat", join_style="mitre")


def oriented_box(center: Coord, length: float, width: float, bearing: float) -> Polygon:
    """Rectangle with its long axis (length) along bearing, centred on center."""
    rect = box(-width / 2.0, -length / 2.0, width / 2.0, length / 2.0)
    # shapely rotates counter-clockwise; bearings run clockwise from north
    rect = affinity.rotate(rect, -bearing, origin=(0, 0))
    return affinity.translate(rect, center[0], center[1])


def offset_point(point: Coord, direction: np.ndarray, distance: float) -> Coord:
    return (float(point[0] + direction[0] * distance), float(point[1] + direction[1] * distance))
