# gridmap_bridge/services/occupancy_service.py
from __future__ import annotations

import math

import numpy as np

from ..core.geometry import select_layers, to_corner_row_major, unwrapped_layer
from ..core.grid_map import GridMap
from ..errors import DegenerateRangeError
from ..models import Header, MapMetaData, OccupancyGrid, Point, Pose
from ..utils.logging import get_logger
from .. import config as C

logger = get_logger(__name__)


def quantize(values: np.ndarray, data_min: float, data_max: float) -> np.ndarray:
    """
    Map values linearly from [data_min, data_max] to [0, 100] (saturating),
    NaN -> unknown. Returns int8.
    """
    if not (math.isfinite(data_min) and math.isfinite(data_max)):
        raise DegenerateRangeError(f"normalization bounds must be finite, got [{data_min}, {data_max}]")
    if data_min == data_max:
        raise DegenerateRangeError(f"normalization bounds are equal ({data_min})")

    cell_min = getattr(C, "OCCUPANCY_MIN", 0)
    cell_max = getattr(C, "OCCUPANCY_MAX", 100)
    unknown = getattr(C, "OCCUPANCY_UNKNOWN", -1)

    values = np.asarray(values, dtype=np.float64)
    nan = np.isnan(values)
    with np.errstate(invalid="ignore"):
        scaled = (values - data_min) / (data_max - data_min)
        scaled = cell_min + np.clip(scaled, 0.0, 1.0) * (cell_max - cell_min)
    # truncate toward zero, like the int8 cast of the message field
    out = np.where(nan, unknown, np.trunc(np.where(nan, 0.0, scaled)))
    return out.astype(np.int8)


def to_occupancy_grid(grid_map: GridMap, layer: str, data_min: float, data_max: float) -> OccupancyGrid:
    """
    Single layer -> OccupancyGrid.

    The occupancy grid is row-major from its (-x, -y) origin corner, the grid
    map starts at its (+x, +y) corner, so both axes are reversed and x/y are
    swapped before flattening; data[yc * width + xc] is the same physical cell.
    """
    select_layers(grid_map, [layer])
    cells = quantize(unwrapped_layer(grid_map, layer), float(data_min), float(data_max))
    ordered = to_corner_row_major(cells)

    rows, cols = grid_map.size
    ox, oy = grid_map.origin
    grid = OccupancyGrid(
        header=Header(stamp=int(grid_map.timestamp), frame_id=grid_map.frame_id),
        info=MapMetaData(
            resolution=grid_map.resolution,
            width=rows,
            height=cols,
            origin=Pose(position=Point(x=ox, y=oy, z=0.0)),
        ),
        data=ordered.flatten(order="C").astype(np.int8).tolist(),
    )
    logger.debug(
        "to_occupancy_grid: layer '%s' %dx%d, range [%g, %g]",
        layer, rows, cols, data_min, data_max,
    )
    return grid
