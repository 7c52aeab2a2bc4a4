from .grid_map_service import to_message, from_message
from .point_cloud_service import to_point_cloud, point_cloud_to_array, build_point_fields, fields_to_dtype
from .occupancy_service import to_occupancy_grid, quantize
from .grid_cells_service import to_grid_cells
