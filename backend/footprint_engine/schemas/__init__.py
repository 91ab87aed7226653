"""
Request and response models for footprint generation.
"""
from .plot import CardinalSide, PeripheralClearance, SetbackPolicy, coerce_geometry
from .typology import (
    BaseTypologyParams,
    TowerParams,
    PerimeterParams,
    LamellaParams,
    CompositeParams,
    TypologyParams,
    normalize_typology,
    parse_typology_params,
)
from .footprint import BuildingFootprint, FootprintPart

__all__ = [
    'CardinalSide',
    'PeripheralClearance',
    'SetbackPolicy',
    'coerce_geometry',
    'BaseTypologyParams',
    'TowerParams',
    'PerimeterParams',
    'LamellaParams',
    'CompositeParams',
    'TypologyParams',
    'normalize_typology',
    'parse_typology_params',
    'BuildingFootprint',
    'FootprintPart'
]
