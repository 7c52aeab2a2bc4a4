import numpy as np
import pytest

from gridmap_bridge import DegenerateRangeError, LayerNotFoundError, to_occupancy_grid
from gridmap_bridge.core.geometry import cell_centers
from gridmap_bridge.services import quantize


def test_small_map_is_flipped(small_map):
    grid = to_occupancy_grid(small_map, "elevation", 0.0, 100.0)
    assert grid.info.width == 2
    assert grid.info.height == 2
    assert grid.info.resolution == 1.0
    assert (grid.info.origin.position.x, grid.info.origin.position.y) == (0.0, 0.0)
    # data[0] is the (-x, -y) cell, grid map cell (1, 1)
    assert grid.data == [100, 50, -1, 0]
    assert sorted(grid.data) == [-1, 0, 50, 100]


def test_each_byte_is_the_same_physical_cell(multi_map):
    grid = to_occupancy_grid(multi_map, "color", 0.0, 1.0)
    width, height = grid.info.width, grid.info.height
    assert (width, height) == multi_map.size
    ox, oy = grid.info.origin.position.x, grid.info.origin.position.y
    res = grid.info.resolution
    for i in range(multi_map.size[0]):
        for j in range(multi_map.size[1]):
            x, y = multi_map.get_position((i, j))
            xc = int(np.floor((x - ox) / res))
            yc = int(np.floor((y - oy) / res))
            expected = int(np.trunc(multi_map["color"][i, j] * 100.0))
            assert grid.data[yc * width + xc] == expected


def test_origin_is_lower_left_corner(multi_map):
    grid = to_occupancy_grid(multi_map, "variance", 0.0, 1.0)
    xs, ys = cell_centers(multi_map)
    res = multi_map.resolution
    assert grid.info.origin.position.x == pytest.approx(xs.min() - 0.5 * res)
    assert grid.info.origin.position.y == pytest.approx(ys.min() - 0.5 * res)
    assert grid.header.frame_id == "odom"


def test_quantize_bounds_and_saturation():
    values = np.array([0.0, 10.0, -5.0, 15.0, np.nan, 5.0, np.inf, -np.inf])
    out = quantize(values, 0.0, 10.0)
    assert out.dtype == np.int8
    assert out.tolist() == [0, 100, 0, 100, -1, 50, 100, 0]


def test_inverted_bounds_invert_the_mapping():
    out = quantize(np.array([0.0, 10.0, 2.5]), 10.0, 0.0)
    assert out.tolist() == [100, 0, 75]


@pytest.mark.parametrize("bounds", [(1.0, 1.0), (0.0, np.nan), (-np.inf, 1.0)])
def test_degenerate_bounds_fail(small_map, bounds):
    with pytest.raises(DegenerateRangeError):
        to_occupancy_grid(small_map, "elevation", *bounds)


def test_missing_layer(small_map):
    with pytest.raises(LayerNotFoundError):
        to_occupancy_grid(small_map, "occupancy", 0.0, 1.0)


def test_all_nan_is_all_unknown(small_map):
    small_map.add("empty", np.nan)
    grid = to_occupancy_grid(small_map, "empty", 0.0, 1.0)
    assert grid.data == [-1, -1, -1, -1]
