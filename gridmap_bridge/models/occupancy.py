"""
Pydantic models for the occupancy grid message.
"""
from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field

from .common import Header, Pose


class MapMetaData(BaseModel):
    """Occupancy grid geometry; origin is the pose of cell (0, 0)'s outer corner."""
    resolution: float
    width: int
    height: int
    origin: Pose = Field(default_factory=Pose)


class OccupancyGrid(BaseModel):
    """
    - data: row-major int8 cells, 0..100 occupancy, -1 unknown
    """
    header: Header = Field(default_factory=Header)
    info: MapMetaData
    data: List[int] = Field(default_factory=list)
