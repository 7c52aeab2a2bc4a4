"""
Minimal multi-layer grid map.

Only what the converters need: geometry, named float layers stored as
numpy arrays of shape (rows, cols), basic layers, frame/stamp and the
circular buffer start index. Rows run along x, columns along y; the
unwrapped index (0, 0) is the cell at the (+x, +y) corner.
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from .. import config as C
from ..errors import LayerNotFoundError


class GridMap:
    def __init__(self, layers: Iterable[str] = ()):
        self.frame_id: str = getattr(C, "DEFAULT_FRAME_ID", "map")
        self.timestamp: int = 0
        self.resolution: float = 0.0
        self.length: Tuple[float, float] = (0.0, 0.0)
        self.position: Tuple[float, float] = (0.0, 0.0)
        self.size: Tuple[int, int] = (0, 0)
        self.start_index: Tuple[int, int] = (0, 0)
        self.basic_layers: List[str] = []
        self._data: Dict[str, np.ndarray] = {}
        self._pending: List[str] = list(layers)

    # ---- geometry ----
    def set_geometry(
        self,
        length: Sequence[float],
        resolution: float,
        position: Sequence[float] = (0.0, 0.0),
    ):
        """
        Set length [m], resolution [m/cell] and center position, and reset all
        layers to NaN. The length is snapped to a whole number of cells.
        """
        if not resolution > 0.0:
            raise ValueError(f"resolution must be positive, got {resolution}")
        rows = int(round(float(length[0]) / resolution))
        cols = int(round(float(length[1]) / resolution))
        self.resolution = float(resolution)
        self.size = (rows, cols)
        self.length = (rows * self.resolution, cols * self.resolution)
        self.position = (float(position[0]), float(position[1]))
        self.start_index = (0, 0)
        names = self.layers or self._pending
        self._data = {name: np.full(self.size, np.nan) for name in names}
        self._pending = []

    @property
    def origin(self) -> Tuple[float, float]:
        """World position of the (-x, -y) corner."""
        return (
            self.position[0] - 0.5 * self.length[0],
            self.position[1] - 0.5 * self.length[1],
        )

    # ---- layers ----
    @property
    def layers(self) -> List[str]:
        return list(self._data.keys())

    def exists(self, layer: str) -> bool:
        return layer in self._data

    def add(self, layer: str, value=np.nan):
        """Add (or overwrite) a layer from a scalar or a (rows, cols) array."""
        if np.isscalar(value):
            self._data[layer] = np.full(self.size, float(value))
            return
        arr = np.array(value, copy=True)
        if arr.shape != self.size:
            raise ValueError(f"layer '{layer}' has shape {arr.shape}, map size is {self.size}")
        if not np.issubdtype(arr.dtype, np.floating):
            arr = arr.astype(np.float64)
        self._data[layer] = arr

    def get(self, layer: str) -> np.ndarray:
        """Raw buffer of a layer (not unwrapped)."""
        try:
            return self._data[layer]
        except KeyError:
            raise LayerNotFoundError(layer, self.layers) from None

    def __getitem__(self, layer: str) -> np.ndarray:
        return self.get(layer)

    def erase(self, layer: str):
        self.get(layer)
        del self._data[layer]
        if layer in self.basic_layers:
            self.basic_layers.remove(layer)

    def replace(self, other: "GridMap"):
        """Take over every attribute of `other` (geometry, layers, frame, stamp)."""
        self.frame_id = other.frame_id
        self.timestamp = other.timestamp
        self.resolution = other.resolution
        self.length = other.length
        self.position = other.position
        self.size = other.size
        self.start_index = other.start_index
        self.basic_layers = list(other.basic_layers)
        self._data = dict(other._data)
        self._pending = []

    # ---- cell access ----
    def get_position(self, index: Sequence[int]) -> Tuple[float, float]:
        """Cell center of a buffer index."""
        rows, cols = self.size
        i = (int(index[0]) - self.start_index[0]) % rows
        j = (int(index[1]) - self.start_index[1]) % cols
        return (
            self.position[0] + 0.5 * self.length[0] - (i + 0.5) * self.resolution,
            self.position[1] + 0.5 * self.length[1] - (j + 0.5) * self.resolution,
        )

    def at(self, layer: str, index: Sequence[int]) -> float:
        return float(self.get(layer)[int(index[0]), int(index[1])])

    def is_valid(self, index: Sequence[int], layers: Optional[Sequence[str]] = None) -> bool:
        """
        True if every given layer (default: basic layers, or all layers if
        there are none) is finite at the buffer index.
        """
        names = list(layers) if layers is not None else (self.basic_layers or self.layers)
        return all(np.isfinite(self.at(name, index)) for name in names)

    def __repr__(self) -> str:
        return (
            f"GridMap(frame_id={self.frame_id!r}, size={self.size}, "
            f"resolution={self.resolution}, position={self.position}, layers={self.layers})"
        )
