"""
Procedural building footprint generation.
"""
from .generators import FootprintPolicy, generate_footprints
from .schemas import (
    SetbackPolicy,
    TowerParams,
    PerimeterParams,
    LamellaParams,
    CompositeParams,
    BuildingFootprint,
    FootprintPart,
    parse_typology_params,
)

__all__ = [
    'FootprintPolicy',
    'generate_footprints',
    'SetbackPolicy',
    'TowerParams',
    'PerimeterParams',
    'LamellaParams',
    'CompositeParams',
    'BuildingFootprint',
    'FootprintPart',
    'parse_typology_params'
]
