"""
Pydantic models shared by the wire messages.
"""
from __future__ import annotations

from pydantic import BaseModel, Field


class Header(BaseModel):
    """Message header: stamp in integer nanoseconds and frame id."""
    stamp: int = 0
    frame_id: str = ""


class Point(BaseModel):
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


class Quaternion(BaseModel):
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 1.0


class Pose(BaseModel):
    """Position + orientation in the header frame."""
    position: Point = Field(default_factory=Point)
    orientation: Quaternion = Field(default_factory=Quaternion)
