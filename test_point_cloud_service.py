import numpy as np
import pytest

from gridmap_bridge import (
    ConversionError, GridMap, LayerNotFoundError, MessageDecodeError,
    point_cloud_to_array, to_point_cloud,
)
from gridmap_bridge.core.geometry import cell_centers, unwrap
from gridmap_bridge.models import PointCloud2, PointField
from gridmap_bridge.services import build_point_fields


def test_nan_cell_is_dropped(small_map):
    cloud = to_point_cloud(small_map, "elevation")
    assert cloud.width == 3
    assert cloud.height == 1
    assert [f.name for f in cloud.fields] == ["x", "y", "z"]
    assert cloud.point_step == 24
    assert cloud.row_step == 3 * 24
    assert len(cloud.data) == cloud.row_step
    assert not cloud.is_bigendian
    pts = point_cloud_to_array(cloud)
    np.testing.assert_allclose(pts["x"], [1.5, 1.5, 0.5])
    np.testing.assert_allclose(pts["y"], [1.5, 0.5, 0.5])
    np.testing.assert_allclose(pts["z"], [0.0, 50.0, 100.0])


def test_all_layers_become_fields(multi_map):
    cloud = to_point_cloud(multi_map, "elevation")
    names = [f.name for f in cloud.fields]
    assert names == ["x", "y", "z", "variance", "rgb"]
    assert [f.offset for f in cloud.fields] == [0, 8, 16, 24, 32]
    assert all(f.datatype == PointField.FLOAT64 and f.count == 1 for f in cloud.fields)
    assert cloud.point_step == 40
    assert cloud.width == 11
    assert cloud.header.frame_id == "odom"
    assert cloud.is_dense


def test_points_follow_unwrapped_order(multi_map):
    pts = point_cloud_to_array(to_point_cloud(multi_map, "elevation"))
    xs, ys = cell_centers(multi_map)
    z = unwrap(multi_map, multi_map["elevation"])
    color = unwrap(multi_map, multi_map["color"])
    mask = np.isfinite(z)
    np.testing.assert_array_equal(pts["x"], xs[mask])
    np.testing.assert_array_equal(pts["y"], ys[mask])
    np.testing.assert_array_equal(pts["z"], z[mask])
    np.testing.assert_array_equal(pts["rgb"], color[mask])


def test_explicit_layer_list(multi_map):
    cloud = to_point_cloud(multi_map, "variance", ["variance", "elevation"])
    assert [f.name for f in cloud.fields] == ["x", "y", "z", "elevation"]
    # the point layer is finite everywhere; the attribute layer has a NaN
    assert cloud.width == 12
    assert not cloud.is_dense


def test_point_layer_must_be_selected(multi_map):
    with pytest.raises(ConversionError):
        to_point_cloud(multi_map, "elevation", ["variance"])


def test_missing_layers(multi_map):
    with pytest.raises(LayerNotFoundError):
        to_point_cloud(multi_map, "height")
    with pytest.raises(LayerNotFoundError):
        to_point_cloud(multi_map, "elevation", ["elevation", "height"])


def test_basic_layers_filter_points(multi_map):
    multi_map["variance"][0, 0] = np.nan
    multi_map.basic_layers = ["variance"]
    cloud = to_point_cloud(multi_map, "elevation")
    assert cloud.width == 10


def test_all_invalid_gives_empty_cloud(small_map):
    small_map.add("empty", np.nan)
    cloud = to_point_cloud(small_map, "empty")
    assert cloud.width == 0
    assert cloud.row_step == 0
    assert cloud.data == b""
    assert cloud.point_step == 32
    assert len(point_cloud_to_array(cloud)) == 0


def test_empty_map_gives_empty_cloud():
    gm = GridMap(["elevation"])
    gm.set_geometry((0.0, 0.0), 0.5)
    cloud = to_point_cloud(gm, "elevation")
    assert cloud.width == 0
    assert cloud.data == b""


def test_float32_layers_use_float32_fields():
    gm = GridMap()
    gm.set_geometry((1.0, 1.0), 0.5)
    gm.add("elevation", np.ones((2, 2), dtype=np.float32))
    gm.add("intensity", np.full((2, 2), 7.0, dtype=np.float32))
    cloud = to_point_cloud(gm, "elevation")
    assert all(f.datatype == PointField.FLOAT32 for f in cloud.fields)
    assert cloud.point_step == 16
    pts = point_cloud_to_array(cloud)
    assert pts.dtype["intensity"] == np.dtype("<f4")
    assert (pts["intensity"] == 7.0).all()


def test_build_point_fields_rejects_duplicates():
    with pytest.raises(ConversionError):
        build_point_fields(["x", "y", "z", "x"])


def test_decode_rejects_truncated_payload(small_map):
    cloud = to_point_cloud(small_map, "elevation")
    cloud.data = cloud.data[:-1]
    with pytest.raises(MessageDecodeError):
        point_cloud_to_array(cloud)


def test_decode_respects_big_endian():
    fields, step = build_point_fields(["x", "y", "z"])
    raw = np.array([(1.0, 2.0, 3.0)], dtype=[("x", ">f8"), ("y", ">f8"), ("z", ">f8")]).tobytes()
    cloud = PointCloud2(width=1, fields=fields, is_bigendian=True, point_step=step, row_step=step, data=raw)
    pts = point_cloud_to_array(cloud)
    assert (pts["x"][0], pts["y"][0], pts["z"][0]) == (1.0, 2.0, 3.0)
