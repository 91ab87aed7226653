"""
Typology orchestrators.
"""
from .tower import generate_towers
from .perimeter import generate_perimeter
from .lamella import generate_lamellas
from .composite import generate_composite

__all__ = [
    'generate_towers',
    'generate_perimeter',
    'generate_lamellas',
    'generate_composite'
]
