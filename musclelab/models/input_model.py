from enum import Enum
from typing import List

from pydantic import BaseModel, Field, field_validator

from musclelab.models.pose_model import FrameInput


class TargetArea(str, Enum):
    UPPER = "UPPER"
    LOWER = "LOWER"
    FULL = "FULL"


class MotionType(str, Enum):
    ISOTONIC = "isotonic"
    ISOMETRIC = "isometric"
    ISOKINETIC = "isokinetic"


class SessionInput(BaseModel):
    target_area: TargetArea = TargetArea.FULL
    motion_type: MotionType = MotionType.ISOTONIC
    frames: List[FrameInput] = Field(default_factory=list)

    @field_validator("target_area", mode="before")
    @classmethod
    def _upper_target(cls, v):
        return v.upper() if isinstance(v, str) else v

    @field_validator("motion_type", mode="before")
    @classmethod
    def _lower_motion(cls, v):
        return v.lower() if isinstance(v, str) else v
