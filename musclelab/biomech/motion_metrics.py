"""
Per motion-type session summaries.

isotonic   -> share of steady frames in each contraction phase
isometric  -> trunk drift from the first trusted frame (mean / jitter) and hold time
isokinetic -> joint angular speed, its spread and coefficient of variation
"""

from typing import Dict, List, Optional, Sequence

import numpy as np

from musclelab.models.biomech_model import MotionPattern, MovementState
from musclelab.models.input_model import MotionType
from musclelab.models.pose_model import Frame
from musclelab.utils.landmarks import core_visible, pair_mid
from musclelab.utils.safe_math import safe_divide
from musclelab.utils.vectors import calculate_angle_deg


def isotonic_metrics(patterns: Sequence[MotionPattern],
                     states: Sequence[MovementState]) -> Dict[str, float]:
    steady = [s for p, s in zip(patterns, states) if p != MotionPattern.STABILIZING]
    n = len(steady)
    return {
        "eccentric_ratio": safe_divide(steady.count(MovementState.ECCENTRIC), n),
        "concentric_ratio": safe_divide(steady.count(MovementState.CONCENTRIC), n),
        "isometric_ratio": safe_divide(steady.count(MovementState.ISOMETRIC), n),
    }


def isometric_metrics(frames: Sequence[Frame],
                      timestamps_ms: Sequence[int]) -> Dict[str, float]:
    deviations: List[float] = []
    reference = None
    first_ts: Optional[int] = None
    last_ts: Optional[int] = None

    for idx, frame in enumerate(frames):
        if not core_visible(frame):
            continue
        top = pair_mid(frame, "left_shoulder", "right_shoulder")
        bottom = pair_mid(frame, "left_hip", "right_hip")
        trunk = top.subtract(bottom)

        if reference is None:
            reference = trunk
            first_ts = timestamps_ms[idx] if idx < len(timestamps_ms) else None

        origin = trunk.scale(0.0)
        deviations.append(calculate_angle_deg(reference, origin, trunk))
        last_ts = timestamps_ms[idx] if idx < len(timestamps_ms) else last_ts

    if not deviations:
        return {"angle_deviation_deg": 0.0, "jitter_deg": 0.0, "hold_duration_sec": 0.0}

    hold = 0.0
    if first_ts is not None and last_ts is not None and last_ts > first_ts:
        hold = (last_ts - first_ts) / 1000.0

    arr = np.asarray(deviations, float)
    return {
        "angle_deviation_deg": float(arr.mean()),
        "jitter_deg": float(arr.std()),
        "hold_duration_sec": hold,
    }


def isokinetic_metrics(angle_series: Dict[str, Sequence[Optional[float]]],
                       timestamps_ms: Sequence[int],
                       joints: Sequence[str]) -> Dict[str, float]:
    speeds: List[float] = []

    for joint in joints:
        series = angle_series.get(joint) or []
        for i in range(1, min(len(series), len(timestamps_ms))):
            cur, prev = series[i], series[i - 1]
            if cur is None or prev is None:
                continue
            dt = (timestamps_ms[i] - timestamps_ms[i - 1]) / 1000.0
            if dt <= 0.0:
                continue
            speeds.append(abs(cur - prev) / dt)

    if not speeds:
        return {"avg_velocity_dps": 0.0, "velocity_std_dps": 0.0, "velocity_cv": 0.0}

    arr = np.asarray(speeds, float)
    avg = float(arr.mean())
    std = float(arr.std())
    return {
        "avg_velocity_dps": avg,
        "velocity_std_dps": std,
        "velocity_cv": safe_divide(std, avg),
    }


def motion_metrics(
    motion_type: MotionType,
    patterns: Sequence[MotionPattern],
    states: Sequence[MovementState],
    frames: Sequence[Frame],
    timestamps_ms: Sequence[int],
    angle_series: Dict[str, Sequence[Optional[float]]],
    joints: Sequence[str],
) -> Dict[str, float]:
    if motion_type == MotionType.ISOMETRIC:
        return isometric_metrics(frames, timestamps_ms)
    if motion_type == MotionType.ISOKINETIC:
        return isokinetic_metrics(angle_series, timestamps_ms, joints)
    return isotonic_metrics(patterns, states)
