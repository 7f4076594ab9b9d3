# musclelab/utils/vectors.py

import math

import numpy as np

from musclelab.models.pose_model import Frame, Point3D
from musclelab.utils.landmarks import get

MIN_SCALE = 0.01


# -----------------------------------------------------------
# SCALE NORMALIZATION
# -----------------------------------------------------------

def get_scale_factor(frame: Frame) -> float:
    """
    Body scale used to normalize a frame.

    max(spine length, shoulder width): spine length keeps side views usable
    (shoulder width collapses towards 0 there), shoulder width covers squat
    bottoms where the trunk folds. Returns 1.0 when a shoulder or hip is
    missing.
    """
    ls = get(frame, "left_shoulder")
    rs = get(frame, "right_shoulder")
    lh = get(frame, "left_hip")
    rh = get(frame, "right_hip")

    if ls is None or rs is None or lh is None or rh is None:
        return 1.0

    spine_length = ls.midpoint(rs).distance_to(lh.midpoint(rh))
    shoulder_width = ls.distance_to(rs)
    return max(spine_length, shoulder_width)


def normalize_landmarks(frame: Frame) -> Frame:
    """
    Divide every coordinate by the body scale. Visibility is kept as-is.
    Degenerate scales (< 0.01) return an unscaled copy.
    """
    scale = get_scale_factor(frame)
    if scale < MIN_SCALE:
        return dict(frame)

    return {
        name: Point3D(
            x=p.x / scale,
            y=p.y / scale,
            z=p.z / scale,
            visibility=p.visibility,
        )
        for name, p in frame.items()
    }


# -----------------------------------------------------------
# THREE-POINT ANGLE
# -----------------------------------------------------------

def calculate_angle(a: Point3D, b: Point3D, c: Point3D) -> float:
    """
    Angle ABC (vertex b) in radians, 0..pi.
    Zero-length arms return 0.0 instead of NaN.
    """
    ba = a.vec() - b.vec()
    bc = c.vec() - b.vec()
    len_ba = float(np.linalg.norm(ba))
    len_bc = float(np.linalg.norm(bc))

    if len_ba == 0.0 or len_bc == 0.0:
        return 0.0

    cos_angle = float(np.dot(ba, bc)) / (len_ba * len_bc)
    cos_angle = max(-1.0, min(1.0, cos_angle))
    return math.acos(cos_angle)


def calculate_angle_deg(a: Point3D, b: Point3D, c: Point3D) -> float:
    return math.degrees(calculate_angle(a, b, c))


def vertical_inclination_deg(top: Point3D, bottom: Point3D) -> float:
    """
    Angle between bottom->top and image "up" (-y), degrees.
    Used for trunk lean; 0 = upright.
    """
    up = Point3D(x=bottom.x, y=bottom.y - 1.0, z=bottom.z)
    return calculate_angle_deg(top, bottom, up)
