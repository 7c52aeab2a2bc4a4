import numpy as np
import pytest

from gridmap_bridge import GridMap


@pytest.fixture
def small_map():
    """2x2 map, resolution 1, lower-left corner at (0, 0)."""
    gm = GridMap()
    gm.set_geometry((2.0, 2.0), 1.0, (1.0, 1.0))
    gm.add("elevation", np.array([[0.0, 50.0], [np.nan, 100.0]]))
    return gm


@pytest.fixture
def multi_map():
    """4x3 map with three layers, off-center position and a wrapped buffer."""
    gm = GridMap()
    gm.frame_id = "odom"
    gm.timestamp = 1_700_000_000_123_456_789
    gm.set_geometry((2.0, 1.5), 0.5, (3.0, -2.0))
    elevation = np.arange(12, dtype=np.float64).reshape(4, 3) * 0.25
    elevation[2, 1] = np.nan
    gm.add("elevation", elevation)
    gm.add("variance", np.full((4, 3), 0.01))
    gm.add("color", np.linspace(0.0, 1.0, 12).reshape(4, 3))
    gm.start_index = (1, 2)
    return gm
