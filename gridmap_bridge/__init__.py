"""
Conversions between a multi-layer grid map and robot perception messages:
grid map message, point cloud, occupancy grid and grid cells.
"""
from .core import GridMap
from .errors import ConversionError, LayerNotFoundError, MessageDecodeError, DegenerateRangeError
from .services import (
    to_message, from_message,
    to_point_cloud, point_cloud_to_array,
    to_occupancy_grid,
    to_grid_cells,
)

__version__ = "0.1.0"
