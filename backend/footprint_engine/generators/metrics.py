"""
Helper functions for computing footprint metrics and scores.
"""
from typing import Optional, Sequence
import math
import numpy as np
from shapely.geometry.base import BaseGeometry
from ..utils.geometry_utils import compactness, rectangle_sides


def compute_overlap_area(poly1: BaseGeometry, poly2: BaseGeometry) -> float:
    """Compute intersection area of two polygons."""
    if poly1 is None or poly2 is None or not poly1.intersects(poly2):
        return 0.0
    return poly1.intersection(poly2).area


def compute_total_overlap(geoms: Sequence[BaseGeometry]) -> float:
    """Compute total overlap area between all footprint pairs."""
    total = 0.0
    for i, g1 in enumerate(geoms):
        for g2 in geoms[i+1:]:
            total += compute_overlap_area(g1, g2)
    return total


def compute_coverage(geoms: Sequence[BaseGeometry], plot: BaseGeometry) -> float:
    """Built area as a fraction of the plot area."""
    if plot is None or plot.area <= 0:
        return 0.0
    return sum(g.area for g in geoms) / plot.area


def mean_compactness(geoms: Sequence[BaseGeometry]) -> float:
    if not geoms:
        return 0.0
    return float(np.mean([compactness(g) for g in geoms]))


def count_violations(parts: Sequence[BaseGeometry],
                     buildable: BaseGeometry,
                     min_width: float,
                     min_length: float,
                     tolerance: float = 1.0) -> int:
    """Count parts outside the buildable area or under the minimum block dimensions."""
    violations = 0
    for part in parts:
        if part.difference(buildable).area > 1.0:
            violations += 1
            continue
        short_side, long_side = rectangle_sides(part.area, part.length)
        if short_side < min_width - tolerance or long_side < min_length - tolerance:
            violations += 1
    return violations


def compute_score(geometry: BaseGeometry, outline: Optional[BaseGeometry] = None) -> float:
    """
    Candidate score: area, or area * compactness of the continuous outline
    for composite shapes. NaN collapses to 0 so it never wins selection.
    """
    if geometry is None or geometry.is_empty:
        return 0.0
    score = geometry.area
    if outline is not None:
        score *= compactness(outline)
    if math.isnan(score):
        return 0.0
    return float(score)
