"""
Index <-> world helpers shared by every converter.

All converters read a grid map through these functions so the circular
buffer unwrapping, the cell-center formula and the flip toward
corner-anchored row-major formats live in exactly one place.
"""
from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..errors import LayerNotFoundError
from .grid_map import GridMap


def select_layers(grid_map: GridMap, layers: Optional[Sequence[str]] = None) -> List[str]:
    """Resolve a layer selection (None = all, map order), failing on unknown names."""
    if layers is None:
        return grid_map.layers
    selected = list(layers)
    for name in selected:
        if not grid_map.exists(name):
            raise LayerNotFoundError(name, grid_map.layers)
    return selected


def unwrap(grid_map: GridMap, buffer: np.ndarray) -> np.ndarray:
    """Reorder a layer buffer so the circular buffer start index comes first."""
    r0, c0 = grid_map.start_index
    if r0 == 0 and c0 == 0:
        return buffer
    return np.roll(buffer, shift=(-r0, -c0), axis=(0, 1))


def unwrapped_layer(grid_map: GridMap, layer: str) -> np.ndarray:
    return unwrap(grid_map, grid_map.get(layer))


def cell_centers(grid_map: GridMap) -> Tuple[np.ndarray, np.ndarray]:
    """
    World x and y of every cell center, as (rows, cols) arrays in unwrapped
    index order:
        x = px + Lx/2 - (i + 0.5) * res
        y = py + Ly/2 - (j + 0.5) * res
    """
    rows, cols = grid_map.size
    res = grid_map.resolution
    px, py = grid_map.position
    lx, ly = grid_map.length
    xs = px + 0.5 * lx - (np.arange(rows, dtype=np.float64) + 0.5) * res
    ys = py + 0.5 * ly - (np.arange(cols, dtype=np.float64) + 0.5) * res
    return np.meshgrid(xs, ys, indexing="ij")


def valid_mask(grid_map: GridMap, layers: Sequence[str]) -> np.ndarray:
    """Unwrapped boolean mask, True where every given layer is finite."""
    mask = np.ones(grid_map.size, dtype=bool)
    for name in layers:
        mask &= np.isfinite(unwrapped_layer(grid_map, name))
    return mask


def to_corner_row_major(unwrapped: np.ndarray) -> np.ndarray:
    """
    Re-index an unwrapped layer for formats anchored at the (-x, -y) corner
    with x along columns: out[yc, xc] is the grid map cell at
    i = rows-1-xc, j = cols-1-yc.
    """
    return unwrapped[::-1, ::-1].T
