# gridmap_bridge/services/grid_map_service.py
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

import numpy as np
from pydantic import ValidationError

from ..core.geometry import select_layers
from ..core.grid_map import GridMap
from ..errors import MessageDecodeError
from ..models import (
    Float64MultiArray, GridMapInfo, GridMapMsg, Header,
    MultiArrayDimension, MultiArrayLayout, Point, Pose,
)
from ..utils.logging import get_logger
from .. import config as C

logger = get_logger(__name__)


def _layout(rows: int, cols: int) -> MultiArrayLayout:
    """Row-major layout of a (rows, cols) buffer."""
    return MultiArrayLayout(
        dim=[
            MultiArrayDimension(label=getattr(C, "ROW_INDEX_LABEL", "row_index"), size=rows, stride=rows * cols),
            MultiArrayDimension(label=getattr(C, "COLUMN_INDEX_LABEL", "column_index"), size=cols, stride=cols),
        ],
        data_offset=0,
    )


def to_message(grid_map: GridMap, layers: Optional[Sequence[str]] = None) -> GridMapMsg:
    """
    Grid map -> GridMapMsg. Layers default to all layers in map order.
    Buffers are copied as stored (not unwrapped); the start index travels
    in outer/inner_start_index.
    """
    names = select_layers(grid_map, layers)
    rows, cols = grid_map.size

    data: List[Float64MultiArray] = []
    for name in names:
        flat = grid_map.get(name).astype(np.float64, copy=False).ravel(order="C")
        data.append(Float64MultiArray(layout=_layout(rows, cols), data=flat.tolist()))

    msg = GridMapMsg(
        header=Header(stamp=int(grid_map.timestamp), frame_id=grid_map.frame_id),
        info=GridMapInfo(
            resolution=grid_map.resolution,
            length_x=grid_map.length[0],
            length_y=grid_map.length[1],
            pose=Pose(position=Point(x=grid_map.position[0], y=grid_map.position[1], z=0.0)),
        ),
        layers=names,
        basic_layers=[b for b in grid_map.basic_layers if b in names],
        data=data,
        outer_start_index=int(grid_map.start_index[0]),
        inner_start_index=int(grid_map.start_index[1]),
    )
    logger.debug("to_message: %d layers, size %dx%d", len(names), rows, cols)
    return msg


def _fail(text: str):
    logger.warning("from_message: %s", text)
    raise MessageDecodeError(text)


def _block_to_matrix(name: str, block: Float64MultiArray, rows: int, cols: int) -> np.ndarray:
    values = np.asarray(block.data, dtype=np.float64)
    if values.size != rows * cols:
        _fail(f"layer '{name}' holds {values.size} values, geometry needs {rows}x{cols}={rows * cols}")
    if block.layout.data_offset != 0:
        _fail(f"layer '{name}' has unsupported data_offset {block.layout.data_offset}")

    dims = block.layout.dim
    column_major = False
    if dims:
        if len(dims) != 2:
            _fail(f"layer '{name}' layout has {len(dims)} dimensions, expected 2")
        # grid_map C++ producers store column-major with dim[0] = column_index
        column_major = dims[0].label == getattr(C, "COLUMN_INDEX_LABEL", "column_index")
        expected = (cols, rows) if column_major else (rows, cols)
        if (dims[0].size, dims[1].size) != expected:
            _fail(
                f"layer '{name}' layout declares {dims[0].size}x{dims[1].size}, "
                f"geometry needs {expected[0]}x{expected[1]}"
            )
    matrix = values.reshape((rows, cols), order="F" if column_major else "C")
    return np.ascontiguousarray(matrix)


def _validate(message: Union[GridMapMsg, Mapping[str, Any]]) -> GridMapMsg:
    if isinstance(message, GridMapMsg):
        return message
    try:
        return GridMapMsg.model_validate(message)
    except ValidationError as e:
        logger.warning("from_message: invalid message: %s", e)
        raise MessageDecodeError(f"invalid grid map message: {e}") from e


def from_message(
    message: Union[GridMapMsg, Mapping[str, Any]],
    grid_map: Optional[GridMap] = None,
) -> GridMap:
    """
    GridMapMsg (or a plain dict of one) -> grid map.

    Everything is decoded and checked before anything is assigned, so a
    failure leaves `grid_map` untouched. On success its previous geometry
    and layers are replaced, not merged.
    """
    msg = _validate(message)
    info = msg.info

    if not (np.isfinite(info.resolution) and info.resolution > 0.0):
        _fail(f"resolution must be positive, got {info.resolution}")
    if not (np.isfinite(info.length_x) and np.isfinite(info.length_y)) or info.length_x < 0 or info.length_y < 0:
        _fail(f"invalid length ({info.length_x}, {info.length_y})")
    if len(msg.layers) != len(msg.data):
        _fail(f"{len(msg.layers)} layer names but {len(msg.data)} data blocks")
    if len(set(msg.layers)) != len(msg.layers):
        _fail(f"duplicate layer names in {msg.layers}")

    rows = int(round(info.length_x / info.resolution))
    cols = int(round(info.length_y / info.resolution))

    decoded: Dict[str, np.ndarray] = {}
    for name, block in zip(msg.layers, msg.data):
        decoded[name] = _block_to_matrix(name, block, rows, cols)

    missing = [b for b in msg.basic_layers if b not in decoded]
    if missing:
        _fail(f"basic layers {missing} are not among the layers {msg.layers}")

    start = (int(msg.outer_start_index), int(msg.inner_start_index))
    in_range = (0 <= start[0] < rows and 0 <= start[1] < cols) if rows * cols > 0 else start == (0, 0)
    if not in_range:
        _fail(f"start index {start} outside map size ({rows}, {cols})")

    result = GridMap()
    result.set_geometry(
        (info.length_x, info.length_y),
        info.resolution,
        (info.pose.position.x, info.pose.position.y),
    )
    for name, matrix in decoded.items():
        result.add(name, matrix)
    result.basic_layers = list(msg.basic_layers)
    result.start_index = start
    result.frame_id = msg.header.frame_id
    result.timestamp = int(msg.header.stamp)

    logger.debug("from_message: %d layers, size %dx%d", len(decoded), rows, cols)
    if grid_map is None:
        return result
    grid_map.replace(result)
    return grid_map
