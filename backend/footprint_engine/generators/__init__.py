"""
Footprint generators package.
"""
from .policy import FootprintPolicy
from .setback import resolve_setbacks, apply_peripheral_clearance, deduct_obstacles, buildable_area, PeripheralZones
from .segmenter import segment_wing
from .constraints import enforce_max_area, footprint_cap
from .collision import CollisionGuard, collides, ensure_corner_clearance
from .selection import Candidate, CandidateOrigin, OriginKind, SizeVariant, ShapeArena, select_candidate
from .typologies import generate_towers, generate_perimeter, generate_lamellas, generate_composite
from .engine import generate_footprints
from .benchmark import BenchmarkRunner, BenchmarkCase, BENCHMARK_CASES

__all__ = [
    'FootprintPolicy',
    'resolve_setbacks',
    'apply_peripheral_clearance',
    'deduct_obstacles',
    'buildable_area',
    'PeripheralZones',
    'segment_wing',
    'enforce_max_area',
    'footprint_cap',
    'CollisionGuard',
    'collides',
    'ensure_corner_clearance',
    'Candidate',
    'CandidateOrigin',
    'OriginKind',
    'SizeVariant',
    'ShapeArena',
    'select_candidate',
    'generate_towers',
    'generate_perimeter',
    'generate_lamellas',
    'generate_composite',
    'generate_footprints',
    'BenchmarkRunner',
    'BenchmarkCase',
    'BENCHMARK_CASES'
]
