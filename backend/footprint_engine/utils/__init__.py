"""
Geometry and projection helpers.
"""
from .projection import ProjectionFrame, MetricFrame

__all__ = [
    'ProjectionFrame',
    'MetricFrame'
]
