"""
Projection between geographic plot coordinates and the local metric frame.

Plots arrive as (longitude, latitude) rings. Setbacks, wing depths and
areas are metric, so every generation call works in an azimuthal
equidistant frame centred on the plot and projects the result back.
"""
import logging
from typing import Optional, Tuple
from pyproj import CRS, Transformer
from pyproj.exceptions import CRSError
from shapely.geometry.base import BaseGeometry
from shapely.ops import transform

logger = logging.getLogger(__name__)


class ProjectionFrame:
    """Local metric frame (metres, x = east, y = north) around a lon/lat origin."""

    def __init__(self, lon: float, lat: float):
        if not (-90 <= lat <= 90):
            raise ValueError(f"Invalid latitude: {lat} (must be -90 to 90)")
        if not (-180 <= lon <= 180):
            raise ValueError(f"Invalid longitude: {lon} (must be -180 to 180)")
        self.origin = (lon, lat)
        self.wgs84 = CRS.from_epsg(4326)
        try:
            self.local = CRS.from_proj4(
                f"+proj=aeqd +lat_0={lat} +lon_0={lon} +x_0=0 +y_0=0 +datum=WGS84 +units=m +no_defs"
            )
        except CRSError as e:
            raise ValueError(f"Could not build local frame at ({lon}, {lat}): {e}") from e
        self._to_local = Transformer.from_crs(self.wgs84, self.local, always_xy=True)
        self._to_geographic = Transformer.from_crs(self.local, self.wgs84, always_xy=True)
        logger.debug("Local frame created at lon=%.6f lat=%.6f", lon, lat)

    @classmethod
    def for_geometry(cls, geom: BaseGeometry) -> "ProjectionFrame":
        """Frame centred on the centroid of a lon/lat geometry."""
        c = geom.centroid
        return cls(c.x, c.y)

    def to_local(self, geom: Optional[BaseGeometry]) -> Optional[BaseGeometry]:
        if geom is None:
            return None
        return transform(self._to_local.transform, geom)

    def to_geographic(self, geom: Optional[BaseGeometry]) -> Optional[BaseGeometry]:
        if geom is None:
            return None
        return transform(self._to_geographic.transform, geom)

    def point_to_local(self, lon: float, lat: float) -> Tuple[float, float]:
        x, y = self._to_local.transform(lon, lat)
        return (float(x), float(y))


class MetricFrame:
    """Pass-through frame for inputs that are already in metres."""

    origin = (0.0, 0.0)

    def to_local(self, geom: Optional[BaseGeometry]) -> Optional[BaseGeometry]:
        return geom

    def to_geographic(self, geom: Optional[BaseGeometry]) -> Optional[BaseGeometry]:
        return geom

    def point_to_local(self, x: float, y: float) -> Tuple[float, float]:
        return (float(x), float(y))
