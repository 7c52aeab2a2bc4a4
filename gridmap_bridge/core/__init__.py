from .grid_map import GridMap
