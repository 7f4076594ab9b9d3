"""
Frame-by-frame movement classifier.

Stateful: each session owns one MotionAnalyzer, which keeps the
previous frame and a warm-up counter. Frames must arrive in temporal order.

Protocol per frame:
    1. Re-entry guard  -> trunk missing / low visibility resets the analyzer
    2. Warm-up         -> first frames are only buffered (STABILIZING)
    3. Steady state    -> MovementState from spine-center vertical velocity,
                          MotionPattern from lower body, then upper body
"""

from typing import Optional

from musclelab.models.biomech_model import (
    MotionAnalysisResult,
    MotionPattern,
    MovementState,
)
from musclelab.models.pose_model import Frame, Point3D
from musclelab.utils.landmarks import core_visible, get, pair_mid
from musclelab.utils.vectors import calculate_angle

# ~0.3 s at 30 fps before any classification
WARMUP_THRESHOLD = 10

# Spine-center displacement (normalized units) treated as standing still
ISOMETRIC_THRESHOLD = 0.005

# Hip vertical travel separating squat-like from hinge-like motion
HIP_TRAVEL_THRESHOLD = 0.1

STABILIZING_RESULT = MotionAnalysisResult(
    pattern=MotionPattern.STABILIZING,
    state=MovementState.ISOMETRIC,
)


class MotionAnalyzer:

    def __init__(self):
        self._frame_count = 0
        self._previous_landmarks: Optional[Frame] = None

    @property
    def frame_count(self) -> int:
        return self._frame_count

    @property
    def previous_landmarks(self) -> Optional[Frame]:
        return self._previous_landmarks

    def reset(self):
        self._frame_count = 0
        self._previous_landmarks = None

    # -----------------------------------------------------
    # Main entry
    # -----------------------------------------------------
    def analyze(self, current: Frame) -> MotionAnalysisResult:
        # Re-entry: trunk lost, the buffered frame is stale
        if not current or not core_visible(current):
            self.reset()
            return STABILIZING_RESULT

        self._frame_count += 1

        if self._frame_count < WARMUP_THRESHOLD:
            self._previous_landmarks = dict(current)
            return STABILIZING_RESULT

        previous = self._previous_landmarks
        self._previous_landmarks = dict(current)

        if previous is None:
            return MotionAnalysisResult(
                pattern=MotionPattern.VERTICAL,
                state=MovementState.ISOMETRIC,
            )

        return MotionAnalysisResult(
            pattern=self._detect_pattern(current, previous),
            state=detect_movement_state(current, previous),
        )

    # -----------------------------------------------------
    # Pattern
    # -----------------------------------------------------
    def _detect_pattern(self, current: Frame, previous: Frame) -> MotionPattern:
        lower = detect_lower_body_pattern(current, previous)
        if lower is not None:
            return lower

        upper = detect_upper_body_pattern(current, previous)
        if upper is not None:
            return upper

        return MotionPattern.VERTICAL


# ---------------------------------------------------------
# Stateless helpers (exposed for tests)
# ---------------------------------------------------------

def detect_movement_state(current: Frame, previous: Optional[Frame]) -> MovementState:
    """
    Contraction phase from the spine center's vertical velocity.
    Image y grows downwards: moving up (dy < 0) works against gravity.
    """
    if previous is None:
        return MovementState.ISOMETRIC

    center = _spine_center(current)
    prev_center = _spine_center(previous)
    if center is None or prev_center is None:
        return MovementState.ISOMETRIC

    dy = center.y - prev_center.y
    if abs(dy) < ISOMETRIC_THRESHOLD:
        return MovementState.ISOMETRIC
    if dy < 0:
        return MovementState.CONCENTRIC
    return MovementState.ECCENTRIC


def detect_plane(start: Point3D, end: Point3D) -> MotionPattern:
    delta = end.subtract(start)
    if abs(delta.y) > abs(delta.x) + abs(delta.z):
        return MotionPattern.VERTICAL
    return MotionPattern.HORIZONTAL


def detect_push_pull(shoulder: Point3D, wrist: Point3D, prev_wrist: Point3D,
                     plane: MotionPattern) -> MotionPattern:
    is_push = shoulder.distance_to(wrist) > shoulder.distance_to(prev_wrist)
    vertical = plane == MotionPattern.VERTICAL
    if is_push:
        return MotionPattern.VERTICAL_PUSH if vertical else MotionPattern.HORIZONTAL_PUSH
    return MotionPattern.VERTICAL_PULL if vertical else MotionPattern.HORIZONTAL_PULL


def classify_knee_hip(hip_delta_y: float, knee_angle_delta: float,
                      hip_angle_delta: float) -> Optional[MotionPattern]:
    if hip_delta_y > HIP_TRAVEL_THRESHOLD and knee_angle_delta > hip_angle_delta:
        return MotionPattern.KNEE_DOMINANT
    if hip_delta_y < HIP_TRAVEL_THRESHOLD and hip_angle_delta > knee_angle_delta:
        return MotionPattern.HIP_DOMINANT
    return None


def detect_lower_body_pattern(current: Frame, previous: Frame) -> Optional[MotionPattern]:
    needed = ("left_hip", "right_hip", "left_knee", "right_knee",
              "left_ankle", "right_ankle", "left_shoulder", "right_shoulder")
    cur = {n: get(current, n) for n in needed}
    prev = {n: get(previous, n) for n in needed}
    if any(p is None for p in cur.values()) or any(p is None for p in prev.values()):
        return None

    hip_delta_y = (
        abs(cur["left_hip"].y - prev["left_hip"].y)
        + abs(cur["right_hip"].y - prev["right_hip"].y)
    ) / 2.0

    spine_mid = cur["left_shoulder"].midpoint(cur["right_shoulder"])
    prev_spine_mid = prev["left_shoulder"].midpoint(prev["right_shoulder"])

    knee_deltas = []
    hip_deltas = []
    for side in ("left", "right"):
        hip, knee, ankle = cur[f"{side}_hip"], cur[f"{side}_knee"], cur[f"{side}_ankle"]
        p_hip, p_knee, p_ankle = prev[f"{side}_hip"], prev[f"{side}_knee"], prev[f"{side}_ankle"]

        knee_deltas.append(abs(
            calculate_angle(hip, knee, ankle) - calculate_angle(p_hip, p_knee, p_ankle)
        ))
        hip_deltas.append(abs(
            calculate_angle(spine_mid, hip, knee) - calculate_angle(prev_spine_mid, p_hip, p_knee)
        ))

    return classify_knee_hip(
        hip_delta_y=hip_delta_y,
        knee_angle_delta=sum(knee_deltas) / 2.0,
        hip_angle_delta=sum(hip_deltas) / 2.0,
    )


def detect_upper_body_pattern(current: Frame, previous: Frame) -> Optional[MotionPattern]:
    shoulder_mid = pair_mid(current, "left_shoulder", "right_shoulder")
    wrist_mid = pair_mid(current, "left_wrist", "right_wrist")
    prev_wrist_mid = pair_mid(previous, "left_wrist", "right_wrist")
    if shoulder_mid is None or wrist_mid is None or prev_wrist_mid is None:
        return None

    plane = detect_plane(shoulder_mid, wrist_mid)
    return detect_push_pull(shoulder_mid, wrist_mid, prev_wrist_mid, plane)


def _spine_center(frame: Frame) -> Optional[Point3D]:
    mid_shoulder = pair_mid(frame, "left_shoulder", "right_shoulder")
    mid_hip = pair_mid(frame, "left_hip", "right_hip")
    if mid_shoulder is None or mid_hip is None:
        return None
    return mid_shoulder.midpoint(mid_hip)
