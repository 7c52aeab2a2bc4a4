# gridmap_bridge/services/grid_cells_service.py
from __future__ import annotations

from typing import List

import numpy as np

from ..core.geometry import cell_centers, select_layers, unwrapped_layer
from ..core.grid_map import GridMap
from ..models import GridCells, Header, Point
from ..utils.logging import get_logger
from .. import config as C

logger = get_logger(__name__)


def to_grid_cells(
    grid_map: GridMap,
    layer: str,
    lower_threshold: float,
    upper_threshold: float,
) -> GridCells:
    """
    Centers of all cells whose finite value lies in [lower, upper], in
    unwrapped index order. lower > upper gives an empty list.
    """
    select_layers(grid_map, [layer])
    values = unwrapped_layer(grid_map, layer)
    with np.errstate(invalid="ignore"):
        mask = np.isfinite(values) & (values >= lower_threshold) & (values <= upper_threshold)

    xs, ys = cell_centers(grid_map)
    z = float(getattr(C, "GRID_CELLS_Z", 0.0))
    cells: List[Point] = [
        Point(x=float(x), y=float(y), z=z) for x, y in zip(xs[mask], ys[mask])
    ]

    out = GridCells(
        header=Header(stamp=int(grid_map.timestamp), frame_id=grid_map.frame_id),
        cell_width=grid_map.resolution,
        cell_height=grid_map.resolution,
        cells=cells,
    )
    logger.debug(
        "to_grid_cells: layer '%s' [%g, %g] -> %d cells",
        layer, lower_threshold, upper_threshold, len(cells),
    )
    return out
