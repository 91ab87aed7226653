from typing import Any, Dict, List
from pydantic import BaseModel, ConfigDict, Field
from shapely.geometry import mapping
from shapely.geometry.base import BaseGeometry


class FootprintPart(BaseModel):
    """One discrete block of a composite footprint"""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    geometry: BaseGeometry
    subtype: str
    area: float = Field(..., ge=0, description="Area in square metres")

    def to_feature(self) -> Dict[str, Any]:
        return {
            "type": "Feature",
            "geometry": mapping(self.geometry),
            "properties": {"type": "generated", "subtype": self.subtype, "area": self.area},
        }


class BuildingFootprint(BaseModel):
    """Selected footprint returned to the caller"""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    geometry: BaseGeometry
    subtype: str
    area: float = Field(..., ge=0, description="Area in square metres")
    parts: List[FootprintPart] = Field(default_factory=list)

    def to_feature(self) -> Dict[str, Any]:
        """GeoJSON Feature with {type: generated, subtype, area} properties"""
        properties: Dict[str, Any] = {
            "type": "generated",
            "subtype": self.subtype,
            "area": self.area,
        }
        if self.parts:
            properties["parts"] = [p.to_feature() for p in self.parts]
        return {
            "type": "Feature",
            "geometry": mapping(self.geometry),
            "properties": properties,
        }
