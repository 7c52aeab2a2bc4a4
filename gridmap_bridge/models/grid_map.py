"""
Pydantic models for the generic multi-layer grid map message.
"""
from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field

from .common import Header, Pose


class GridMapInfo(BaseModel):
    """
    Geometry of the grid map:
    - resolution: cell edge length [m]
    - length_x, length_y: side lengths [m]
    - pose: position of the map center, orientation of the map frame
    """
    model_config = ConfigDict(extra="forbid")

    resolution: float
    length_x: float
    length_y: float
    pose: Pose = Field(default_factory=Pose)


class MultiArrayDimension(BaseModel):
    label: str = ""
    size: int = 0
    stride: int = 0


class MultiArrayLayout(BaseModel):
    """
    Layout of a flattened 2D block. dim[0] is the outer (slowest) dimension.
    """
    dim: List[MultiArrayDimension] = Field(default_factory=list)
    data_offset: int = 0


class Float64MultiArray(BaseModel):
    layout: MultiArrayLayout = Field(default_factory=MultiArrayLayout)
    data: List[float] = Field(default_factory=list)


class GridMapMsg(BaseModel):
    """
    Grid map message:
    - layers[k] names the block data[k]
    - outer_start_index / inner_start_index: circular buffer start (row, col)
    """
    header: Header = Field(default_factory=Header)
    info: GridMapInfo
    layers: List[str] = Field(default_factory=list)
    basic_layers: List[str] = Field(default_factory=list)
    data: List[Float64MultiArray] = Field(default_factory=list)
    outer_start_index: int = 0
    inner_start_index: int = 0
