"""
Posture stability metrics for a single (normalized) frame.

Upper body:
    elevation  -> shoulder shrug (neck shortens relative to clavicle)
    retraction -> scapular retraction vs. rounded shoulders (monocular z, advisory)
Lower body:
    valgus     -> knees collapsing inward relative to the ankles / hips
    pelvic tilt-> hip height asymmetry, frontal views only

Every metric falls back to 0.0 when its landmarks are missing; nothing here
raises.
"""

from typing import Optional

from musclelab.models.biomech_model import StabilityMetrics
from musclelab.models.pose_model import Frame, Point3D
from musclelab.utils.landmarks import get
from musclelab.utils.safe_math import clamp

# Frontal-view heuristic: shoulders must span at least 30% of the spine
FRONT_VIEW_RATIO = 0.3

# Valgus is only flagged once the knees are clearly inside the base
VALGUS_ANKLE_RATIO = 0.8
VALGUS_HIP_RATIO = 0.7


def calculate_stability(frame: Frame) -> StabilityMetrics:
    ls = get(frame, "left_shoulder")
    rs = get(frame, "right_shoulder")
    lh = get(frame, "left_hip")
    rh = get(frame, "right_hip")

    retraction = 0.0
    pelvic_tilt = 0.0
    if ls is not None and rs is not None and lh is not None and rh is not None:
        spine_top = ls.midpoint(rs)
        spine_bottom = lh.midpoint(rh)
        retraction = _retraction(spine_top, spine_bottom, ls, rs)
        pelvic_tilt = _pelvic_tilt(spine_top, spine_bottom, ls, rs, lh, rh)

    return StabilityMetrics(
        elevation_factor=_elevation(frame),
        retraction_factor=retraction,
        valgus_factor=_valgus(frame),
        pelvic_tilt_factor=pelvic_tilt,
    )


def is_side_view(frame: Frame) -> bool:
    """
    True when the camera sees the subject side-on.
    Unknown geometry (missing trunk) counts as frontal.
    """
    ratio = core_width_ratio(frame)
    return ratio is not None and ratio < FRONT_VIEW_RATIO


# -----------------------------------------------------
# Upper body
# -----------------------------------------------------

def _elevation(frame: Frame) -> float:
    ls = get(frame, "left_shoulder")
    rs = get(frame, "right_shoulder")
    le = get(frame, "left_ear")
    re = get(frame, "right_ear")
    if ls is None or rs is None or le is None or re is None:
        return 0.0

    clavicle = ls.distance_to(rs)
    if clavicle <= 0.0:
        return 0.0

    neck = (le.distance_to(ls) + re.distance_to(rs)) / 2.0
    return clamp(1.0 - neck / (clavicle * 0.5), 0.0, 1.0)


def _retraction(spine_top: Point3D, spine_bottom: Point3D,
                ls: Point3D, rs: Point3D) -> float:
    shoulder_depth = (ls.z + rs.z) / 2.0
    spine_depth = (spine_top.z + spine_bottom.z) / 2.0
    return shoulder_depth - spine_depth


# -----------------------------------------------------
# Lower body
# -----------------------------------------------------

def _valgus(frame: Frame) -> float:
    names = ("left_hip", "right_hip", "left_knee", "right_knee",
             "left_ankle", "right_ankle")
    pts = [get(frame, n) for n in names]
    if any(p is None for p in pts):
        return 0.0
    lh, rh, lk, rk, la, ra = pts

    hip_width = lh.distance_to(rh)
    knee_width = lk.planar_distance_to(rk)
    ankle_width = la.planar_distance_to(ra)

    if ankle_width <= 0.0:
        return 0.0

    if knee_width < ankle_width * VALGUS_ANKLE_RATIO or knee_width < hip_width * VALGUS_HIP_RATIO:
        return clamp((ankle_width - knee_width) / ankle_width, 0.0, 1.0)
    return 0.0


def _pelvic_tilt(spine_top: Point3D, spine_bottom: Point3D,
                 ls: Point3D, rs: Point3D,
                 lh: Point3D, rh: Point3D) -> float:
    spine_length = spine_top.distance_to(spine_bottom)
    shoulder_width = ls.distance_to(rs)

    # Side views: hip heights overlap in projection, skip to avoid false positives
    if spine_length <= 0.0 or shoulder_width < spine_length * FRONT_VIEW_RATIO:
        return 0.0

    return abs(lh.y - rh.y)


def core_width_ratio(frame: Frame) -> Optional[float]:
    """shoulder width / spine length, None when the trunk is missing."""
    ls = get(frame, "left_shoulder")
    rs = get(frame, "right_shoulder")
    lh = get(frame, "left_hip")
    rh = get(frame, "right_hip")
    if ls is None or rs is None or lh is None or rh is None:
        return None
    spine_length = ls.midpoint(rs).distance_to(lh.midpoint(rh))
    if spine_length <= 0.0:
        return None
    return ls.distance_to(rs) / spine_length
