"""
Entry point: plot + typology parameters -> building footprints.

Inputs in (longitude, latitude) are projected into a local metric frame
centred on the plot, generated there, and projected back. Areas in the
output are always square metres.
"""
import logging
from typing import Any, Dict, List, Optional, Union
from shapely.errors import GEOSException
from shapely.geometry.base import BaseGeometry
from ..schemas.footprint import BuildingFootprint
from ..schemas.plot import SetbackPolicy, coerce_geometry
from ..schemas.typology import (
    BaseTypologyParams, CompositeParams, LamellaParams, PerimeterParams, TowerParams,
    parse_typology_params,
)
from ..utils.geometry_utils import clean_geometry
from ..utils.projection import MetricFrame, ProjectionFrame
from .policy import FootprintPolicy
from .setback import buildable_area
from .typologies import generate_composite, generate_lamellas, generate_perimeter, generate_towers

logger = logging.getLogger(__name__)

GENERATORS = [
    (TowerParams, generate_towers),
    (PerimeterParams, generate_perimeter),
    (LamellaParams, generate_lamellas),
    (CompositeParams, generate_composite),
]


def _parse_setback(setback: Union[SetbackPolicy, Dict[str, Any], float, None]) -> SetbackPolicy:
    if setback is None:
        return SetbackPolicy()
    if isinstance(setback, SetbackPolicy):
        return setback
    if isinstance(setback, dict):
        return SetbackPolicy(**setback)
    return SetbackPolicy(uniform=float(setback))


def _localize(params: BaseTypologyParams, frame) -> BaseTypologyParams:
    """Copy of params with obstacles and target point in the local frame."""
    update: Dict[str, Any] = {"obstacles": [frame.to_local(o) for o in params.obstacles]}
    if params.target_point is not None:
        update["target_point"] = frame.point_to_local(*params.target_point)
    return params.model_copy(update=update)


def _to_geographic(footprint: BuildingFootprint, frame) -> BuildingFootprint:
    parts = [p.model_copy(update={"geometry": frame.to_geographic(p.geometry)})
             for p in footprint.parts]
    return footprint.model_copy(update={
        "geometry": frame.to_geographic(footprint.geometry),
        "parts": parts,
    })


def generate_footprints(plot: Union[BaseGeometry, Dict[str, Any]],
                        params: Union[BaseTypologyParams, Dict[str, Any]],
                        setback: Union[SetbackPolicy, Dict[str, Any], float, None] = None,
                        policy: Optional[FootprintPolicy] = None,
                        geographic: bool = True) -> List[BuildingFootprint]:
    """
    Generate footprints for one plot and one typology.

    Args:
        plot: Plot polygon (shapely or GeoJSON), lon/lat unless geographic=False
        params: Typology parameters or a raw mapping with a 'typology' tag
        setback: SetbackPolicy, its mapping, or a uniform distance in meters
        policy: Generation thresholds
        geographic: Whether plot, obstacles and target point are lon/lat

    Returns:
        Possibly empty list of footprints in the input coordinate system

    Raises:
        pydantic.ValidationError / ValueError for invalid parameters. Geometric
        infeasibility never raises.
    """
    params = parse_typology_params(params)
    setback = _parse_setback(setback)
    policy = policy or FootprintPolicy()
    plot_geom = coerce_geometry(plot)

    try:
        frame = ProjectionFrame.for_geometry(plot_geom) if geographic else MetricFrame()
        local_plot = clean_geometry(frame.to_local(plot_geom))
        if local_plot is None:
            logger.warning("Plot geometry is empty or degenerate")
            return []
        local_params = _localize(params, frame)

        buildable = buildable_area(local_plot, setback, policy)
        if buildable is None:
            return []
        logger.info(f"Buildable area {buildable.area:.0f} m2 of {local_plot.area:.0f} m2 plot")

        generator = next(fn for cls, fn in GENERATORS if isinstance(local_params, cls))
        footprints = generator(buildable, local_params, policy)
        return [_to_geographic(fp, frame) for fp in footprints]
    except GEOSException as e:
        logger.warning(f"Footprint generation aborted on degenerate geometry: {e}")
        return []
