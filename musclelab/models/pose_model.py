from typing import Dict, List, Optional

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, field_validator


class Point3D(BaseModel):
    """
    Immutable landmark / vector value.

    Coordinates come from the pose estimator (x, y image-normalized, z depth);
    visibility is the estimator confidence and is carried through vector ops
    unchanged.
    """

    model_config = ConfigDict(frozen=True)

    x: float
    y: float
    z: float = 0.0
    visibility: float = 0.0

    @field_validator("visibility")
    @classmethod
    def _clamp_visibility(cls, v: float) -> float:
        # Estimators occasionally report 1.0000001 or tiny negatives
        if v != v:
            return 0.0
        return max(0.0, min(1.0, float(v)))

    # -----------------------------------------------------
    # numpy bridge
    # -----------------------------------------------------
    def vec(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], float)

    @classmethod
    def from_vec(cls, v, visibility: float = 0.0) -> "Point3D":
        return cls(x=float(v[0]), y=float(v[1]), z=float(v[2]), visibility=visibility)

    # -----------------------------------------------------
    # Vector ops
    # -----------------------------------------------------
    def subtract(self, other: "Point3D") -> "Point3D":
        return Point3D.from_vec(self.vec() - other.vec(), self.visibility)

    def add(self, other: "Point3D") -> "Point3D":
        return Point3D.from_vec(self.vec() + other.vec(), self.visibility)

    def scale(self, factor: float) -> "Point3D":
        return Point3D.from_vec(self.vec() * factor, self.visibility)

    def dot(self, other: "Point3D") -> float:
        return float(np.dot(self.vec(), other.vec()))

    def length(self) -> float:
        return float(np.linalg.norm(self.vec()))

    def distance_to(self, other: "Point3D") -> float:
        return float(np.linalg.norm(self.vec() - other.vec()))

    def planar_distance_to(self, other: "Point3D") -> float:
        """Distance in the image plane (x, y only)."""
        return float(np.hypot(self.x - other.x, self.y - other.y))

    def midpoint(self, other: "Point3D") -> "Point3D":
        return Point3D.from_vec(
            (self.vec() + other.vec()) / 2.0,
            (self.visibility + other.visibility) / 2.0,
        )

    @staticmethod
    def lerp(a: "Point3D", b: "Point3D", t: float) -> "Point3D":
        t = max(0.0, min(1.0, t))
        return Point3D.from_vec(
            a.vec() + (b.vec() - a.vec()) * t,
            a.visibility + (b.visibility - a.visibility) * t,
        )


# A frame maps joint names ("left_shoulder", ...) to landmarks.
Frame = Dict[str, Point3D]


class FrameInput(BaseModel):
    timestamp_ms: int
    landmarks: Dict[str, Point3D] = Field(default_factory=dict)


class PoseModel(BaseModel):
    """
    Normalized session data produced by pose_stage.

    frames and timestamps_ms are parallel lists and keep input order.
    """
    frames: List[Frame] = Field(default_factory=list)
    timestamps_ms: List[int] = Field(default_factory=list)
    total_frames: int = 0
    duration_sec: Optional[float] = None
    error: Optional[str] = None
