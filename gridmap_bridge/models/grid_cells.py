"""
Pydantic model for the sparse grid cell list.
"""
from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field

from .common import Header, Point


class GridCells(BaseModel):
    header: Header = Field(default_factory=Header)
    cell_width: float
    cell_height: float
    cells: List[Point] = Field(default_factory=list)
