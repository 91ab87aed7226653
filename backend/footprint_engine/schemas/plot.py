from enum import Enum
from typing import Any, List, Optional
from pydantic import BaseModel, Field, field_validator
from shapely.geometry import shape
from shapely.geometry.base import BaseGeometry


class CardinalSide(str, Enum):
    """Cardinal plot sides used to place road access and directional setbacks"""
    NORTH = "N"
    SOUTH = "S"
    EAST = "E"
    WEST = "W"

    @property
    def opposite(self) -> "CardinalSide":
        return {
            CardinalSide.NORTH: CardinalSide.SOUTH,
            CardinalSide.SOUTH: CardinalSide.NORTH,
            CardinalSide.EAST: CardinalSide.WEST,
            CardinalSide.WEST: CardinalSide.EAST,
        }[self]

    @classmethod
    def parse(cls, value: Any) -> "CardinalSide":
        """Accept 'N', 'north', 'North', CardinalSide.NORTH..."""
        if isinstance(value, CardinalSide):
            return value
        key = str(value).strip()[:1].upper()
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"Unknown plot side: {value!r} (expected N, S, E or W)")


class PeripheralClearance(BaseModel):
    """Reserved perimeter ring: parking strip along the boundary, then an access road"""
    parking_width: float = Field(5.0, ge=0, description="Parking strip width in metres")
    road_width: float = Field(6.0, ge=0, description="Internal road width in metres")

    @property
    def total(self) -> float:
        return self.parking_width + self.road_width


class SetbackPolicy(BaseModel):
    """Uniform or directional (front/rear/side) setback distances in metres"""
    uniform: float = Field(0.0, ge=0, description="Setback applied on every side")
    front: Optional[float] = Field(None, ge=0, description="Setback on road-access sides")
    rear: Optional[float] = Field(None, ge=0, description="Setback opposite the road")
    side: Optional[float] = Field(None, ge=0, description="Setback on the remaining sides")
    road_access_sides: List[CardinalSide] = Field(default_factory=list)
    peripheral: Optional[PeripheralClearance] = None

    @field_validator('road_access_sides', mode='before')
    @classmethod
    def parse_sides(cls, v):
        """Normalize 'north' / 'N' / enum values, dropping duplicates"""
        if v is None:
            return []
        if isinstance(v, (str, CardinalSide)):
            v = [v]
        sides = []
        for item in v:
            side = CardinalSide.parse(item)
            if side not in sides:
                sides.append(side)
        return sides

    @property
    def is_directional(self) -> bool:
        has_values = any(d is not None for d in (self.front, self.rear, self.side))
        return has_values and bool(self.road_access_sides)

    @property
    def front_distance(self) -> float:
        return self.front if self.front is not None else self.uniform

    @property
    def rear_distance(self) -> float:
        return self.rear if self.rear is not None else self.uniform

    @property
    def side_distance(self) -> float:
        return self.side if self.side is not None else self.uniform


def coerce_geometry(value: Any) -> BaseGeometry:
    """Accept shapely geometries, GeoJSON geometry mappings or GeoJSON Features."""
    if isinstance(value, BaseGeometry):
        return value
    if isinstance(value, dict):
        if value.get("type") == "Feature":
            value = value.get("geometry") or {}
        try:
            return shape(value)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise ValueError(f"Invalid GeoJSON geometry: {e}")
    raise ValueError(f"Unsupported geometry input: {type(value).__name__}")
