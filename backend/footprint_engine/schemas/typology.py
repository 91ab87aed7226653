from typing import Annotated, Any, Dict, List, Literal, Optional, Tuple, Union
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator, model_validator
from shapely.geometry.base import BaseGeometry
from .plot import coerce_geometry

# Free-form typology names accepted from callers -> canonical tag
TYPOLOGY_ALIASES: Dict[str, str] = {
    "tower": "tower",
    "point": "point",
    "pointblock": "point",
    "perimeter": "perimeter",
    "courtyard": "perimeter",
    "oshaped": "oshaped",
    "o": "oshaped",
    "lamella": "lamella",
    "linear": "lamella",
    "slab": "slab",
    "l": "lshaped",
    "lshape": "lshaped",
    "lshaped": "lshaped",
    "u": "ushaped",
    "ushape": "ushaped",
    "ushaped": "ushaped",
    "t": "tshaped",
    "tshape": "tshaped",
    "tshaped": "tshaped",
    "h": "hshaped",
    "hshape": "hshaped",
    "hshaped": "hshaped",
}


def normalize_typology(value: Any) -> str:
    key = str(value).lower().strip().replace('-', '').replace('_', '').replace(' ', '')
    if key not in TYPOLOGY_ALIASES:
        raise ValueError(f"Unknown typology: {value!r}")
    return TYPOLOGY_ALIASES[key]


class BaseTypologyParams(BaseModel):
    """Parameters shared by every typology. Distances are metres, areas m²."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    orientation: float = Field(0.0, description="Bearing of the building long axis (0=N, 90=E)")
    min_building_width: float = Field(10.0, gt=0)
    max_building_width: float = Field(18.0, gt=0)
    min_building_length: float = Field(15.0, gt=0)
    max_building_length: float = Field(60.0, gt=0)
    gap: float = Field(6.0, ge=0, description="Mandatory clear distance between blocks")
    obstacles: List[BaseGeometry] = Field(default_factory=list)
    target_point: Optional[Tuple[float, float]] = None
    avoid_center: bool = Field(False, description="Keep the plot centre (Brahmasthan) open")
    seed: int = 0
    max_footprint: Optional[float] = Field(None, gt=0)
    min_footprint: Optional[float] = Field(None, ge=0)
    max_floors: Optional[int] = Field(None, ge=1)
    target_gfa: Optional[float] = Field(None, gt=0)

    @field_validator('obstacles', mode='before')
    @classmethod
    def coerce_obstacles(cls, v):
        if v is None:
            return []
        return [coerce_geometry(o) for o in v]

    @field_validator('orientation')
    @classmethod
    def wrap_orientation(cls, v: float) -> float:
        return v % 360.0

    @model_validator(mode='after')
    def check_ranges(self):
        if self.min_building_width > self.max_building_width:
            raise ValueError("min_building_width must not exceed max_building_width")
        if self.min_building_length > self.max_building_length:
            raise ValueError("min_building_length must not exceed max_building_length")
        if (self.max_footprint is not None and self.min_footprint is not None
                and self.min_footprint > self.max_footprint):
            raise ValueError("min_footprint must not exceed max_footprint")
        return self


class TowerParams(BaseTypologyParams):
    """Grid of square point blocks"""
    typology: Literal["tower", "point"] = "tower"
    width: float = Field(20.0, gt=0, description="Tower side length")
    spacing: float = Field(8.0, ge=0, description="Clear distance between towers")


class PerimeterParams(BaseTypologyParams):
    """Courtyard block following the buildable outline"""
    typology: Literal["perimeter", "oshaped"] = "perimeter"
    depth: float = Field(12.0, gt=0, description="Ring depth")


class LamellaParams(BaseTypologyParams):
    """Parallel linear rows"""
    typology: Literal["lamella", "slab"] = "lamella"
    width: float = Field(12.0, gt=0, description="Row depth")
    spacing: float = Field(15.0, ge=0, description="Clear distance between rows")


class CompositeParams(BaseTypologyParams):
    """L/U/T/H shapes assembled from wings"""
    typology: Literal["lshaped", "ushaped", "tshaped", "hshaped"]
    wing_depth: Optional[float] = Field(None, gt=0, description="Auto 10-14m from plot size when omitted")
    wing_length_a: Optional[float] = Field(None, gt=0)
    wing_length_b: Optional[float] = Field(None, gt=0)


TypologyParams = Annotated[
    Union[TowerParams, PerimeterParams, LamellaParams, CompositeParams],
    Field(discriminator="typology"),
]

_adapter = TypeAdapter(TypologyParams)


def parse_typology_params(data: Union[BaseTypologyParams, Dict[str, Any]]) -> BaseTypologyParams:
    """Validate a raw parameter mapping into the matching typology model."""
    if isinstance(data, BaseTypologyParams):
        return data
    payload = dict(data)
    if "typology" not in payload:
        raise ValueError("Typology parameters require a 'typology' tag")
    payload["typology"] = normalize_typology(payload["typology"])
    return _adapter.validate_python(payload)
