"""
Pydantic models for the PointCloud2 message.
"""
from __future__ import annotations

from typing import ClassVar, List

from pydantic import BaseModel, Field

from .common import Header


class PointField(BaseModel):
    """One entry of the per-point field table."""
    INT8: ClassVar[int] = 1
    UINT8: ClassVar[int] = 2
    INT16: ClassVar[int] = 3
    UINT16: ClassVar[int] = 4
    INT32: ClassVar[int] = 5
    UINT32: ClassVar[int] = 6
    FLOAT32: ClassVar[int] = 7
    FLOAT64: ClassVar[int] = 8

    name: str
    offset: int
    datatype: int
    count: int = 1


class PointCloud2(BaseModel):
    """
    Unordered cloud (height == 1):
    - width: number of points
    - point_step: bytes per point, row_step: bytes per row
    - data: width * point_step bytes
    """
    header: Header = Field(default_factory=Header)
    height: int = 1
    width: int = 0
    fields: List[PointField] = Field(default_factory=list)
    is_bigendian: bool = False
    point_step: int = 0
    row_step: int = 0
    data: bytes = b""
    is_dense: bool = False
