from .common import Header, Point, Quaternion, Pose
from .grid_map import GridMapInfo, MultiArrayDimension, MultiArrayLayout, Float64MultiArray, GridMapMsg
from .point_cloud import PointField, PointCloud2
from .occupancy import MapMetaData, OccupancyGrid
from .grid_cells import GridCells
