DEFAULT_FRAME_ID = "map"

# ---- Occupancy grid ----
OCCUPANCY_MIN = 0
OCCUPANCY_MAX = 100
OCCUPANCY_UNKNOWN = -1

# ---- Grid map message layout ----
ROW_INDEX_LABEL    = "row_index"
COLUMN_INDEX_LABEL = "column_index"

# ---- Point cloud ----
# grid map layer "color" is exported under the conventional PCL field name
COLOR_LAYER = "color"
COLOR_FIELD = "rgb"
POSITION_FIELDS = ("x", "y", "z")

# ---- Grid cells ----
GRID_CELLS_Z = 0.0

# ---- Logging ----
LOG_LEVEL_ENV = "GRIDMAP_BRIDGE_LOG_LEVEL"
