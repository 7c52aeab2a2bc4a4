# gridmap_bridge/services/point_cloud_service.py
from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..core.geometry import cell_centers, select_layers, unwrapped_layer, valid_mask
from ..core.grid_map import GridMap
from ..errors import ConversionError, LayerNotFoundError, MessageDecodeError
from ..models import Header, PointCloud2, PointField
from ..utils.logging import get_logger
from .. import config as C

logger = get_logger(__name__)

# PointField datatype tag -> numpy type code (byte order added separately)
_TAG_TO_CODE = {
    PointField.INT8: "i1",
    PointField.UINT8: "u1",
    PointField.INT16: "i2",
    PointField.UINT16: "u2",
    PointField.INT32: "i4",
    PointField.UINT32: "u4",
    PointField.FLOAT32: "f4",
    PointField.FLOAT64: "f8",
}


def field_name_for_layer(layer: str) -> str:
    if layer == getattr(C, "COLOR_LAYER", "color"):
        return getattr(C, "COLOR_FIELD", "rgb")
    return layer


def build_point_fields(names: Sequence[str], dtype=np.float64) -> Tuple[List[PointField], int]:
    """
    Field table for one cloud: every field has the same float type, one
    element each, packed back to back. Returns (fields, point_step).
    """
    dtype = np.dtype(dtype)
    tag = PointField.FLOAT32 if dtype == np.float32 else PointField.FLOAT64
    size = np.dtype(_TAG_TO_CODE[tag]).itemsize

    if len(set(names)) != len(names):
        raise ConversionError(f"duplicate point field names in {list(names)}")

    fields: List[PointField] = []
    offset = 0
    for name in names:
        fields.append(PointField(name=name, offset=offset, datatype=tag, count=1))
        offset += size
    point_step = -(-offset // size) * size
    return fields, point_step


def fields_to_dtype(fields: Sequence[PointField], point_step: int, is_bigendian: bool = False) -> np.dtype:
    """numpy record type matching a field table byte for byte."""
    endian = ">" if is_bigendian else "<"
    names, formats, offsets = [], [], []
    for f in fields:
        code = _TAG_TO_CODE.get(f.datatype)
        if code is None:
            raise MessageDecodeError(f"field '{f.name}' has unknown datatype {f.datatype}")
        base = np.dtype(endian + code)
        names.append(f.name)
        formats.append(base if f.count == 1 else (base, (f.count,)))
        offsets.append(f.offset)
    try:
        return np.dtype({"names": names, "formats": formats, "offsets": offsets, "itemsize": point_step})
    except ValueError as e:
        raise MessageDecodeError(f"inconsistent field table: {e}") from e


def _storage_dtype(grid_map: GridMap, layers: Sequence[str]) -> np.dtype:
    if layers and all(grid_map.get(name).dtype == np.float32 for name in layers):
        return np.dtype(np.float32)
    return np.dtype(np.float64)


def to_point_cloud(
    grid_map: GridMap,
    point_layer: str,
    layers: Optional[Sequence[str]] = None,
) -> PointCloud2:
    """
    Grid map -> PointCloud2.

    `point_layer` gives z of each point (x, y are the cell center); every
    other selected layer becomes an extra field. Without `layers` all layers
    are exported. Cells where the point layer is not finite (or, if the map
    has basic layers, where the cell is invalid) produce no point.
    """
    if layers is None:
        if not grid_map.exists(point_layer):
            raise LayerNotFoundError(point_layer, grid_map.layers)
        names = grid_map.layers
    else:
        names = select_layers(grid_map, layers)
        if point_layer not in names:
            raise ConversionError(f"point layer '{point_layer}' must be one of the exported layers {names}")

    attribute_layers = [name for name in names if name != point_layer]
    position_fields = list(getattr(C, "POSITION_FIELDS", ("x", "y", "z")))
    attribute_fields = [field_name_for_layer(name) for name in attribute_layers]

    # one layout for the whole cloud
    fields, point_step = build_point_fields(position_fields + attribute_fields, _storage_dtype(grid_map, names))
    record = fields_to_dtype(fields, point_step)

    z = unwrapped_layer(grid_map, point_layer)
    mask = np.isfinite(z)
    if grid_map.basic_layers:
        mask &= valid_mask(grid_map, grid_map.basic_layers)

    xs, ys = cell_centers(grid_map)
    points = np.zeros(int(mask.sum()), dtype=record)
    points[position_fields[0]] = xs[mask]
    points[position_fields[1]] = ys[mask]
    points[position_fields[2]] = z[mask]
    for layer, field in zip(attribute_layers, attribute_fields):
        points[field] = unwrapped_layer(grid_map, layer)[mask]

    is_dense = all(bool(np.isfinite(points[f.name]).all()) for f in fields)
    count = int(points.shape[0])
    cloud = PointCloud2(
        header=Header(stamp=int(grid_map.timestamp), frame_id=grid_map.frame_id),
        height=1,
        width=count,
        fields=fields,
        is_bigendian=False,
        point_step=point_step,
        row_step=count * point_step,
        data=points.tobytes(),
        is_dense=is_dense,
    )
    logger.debug(
        "to_point_cloud: %d of %d cells -> points, %d fields, step %d",
        count, grid_map.size[0] * grid_map.size[1], len(fields), point_step,
    )
    return cloud


def point_cloud_to_array(cloud: PointCloud2) -> np.ndarray:
    """Decode a PointCloud2 into a numpy structured array (one record per point)."""
    record = fields_to_dtype(cloud.fields, cloud.point_step, cloud.is_bigendian)
    count = int(cloud.width) * int(cloud.height)
    if cloud.row_step != cloud.width * cloud.point_step:
        raise MessageDecodeError(f"row_step {cloud.row_step} != width {cloud.width} * point_step {cloud.point_step}")
    if len(cloud.data) != count * cloud.point_step:
        raise MessageDecodeError(f"payload has {len(cloud.data)} bytes, expected {count * cloud.point_step}")
    if count == 0:
        return np.zeros(0, dtype=record)
    return np.frombuffer(cloud.data, dtype=record, count=count)
