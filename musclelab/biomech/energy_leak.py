"""
Energy leak model.

Splits the session's total joint work into what reaches the prime movers
(effective) and what poor stability diverts elsewhere (compensation).

    stability penalty = elevation*0.2 + valgus*0.3 + clamp(pelvic*0.1, 0, 0.2)
    efficiency        = clamp(1 - stability penalty - pattern penalty, 0, 1)
    effective force   = total * efficiency
    leaked energy     = total * (1 - efficiency)

Leak channels (region gated):
    upper -> shrug feeds trapezius; rounded shoulders feed the arms
    lower -> knee valgus feeds adductors + knee stress; hinge feeds quads
"""

import math
from typing import Dict

from musclelab.biomech.muscle_weights import weights_for
from musclelab.models.biomech_model import (
    EnergyLeakResult,
    MotionPattern,
    MovementState,
    StabilityMetrics,
)
from musclelab.models.input_model import TargetArea
from musclelab.utils.safe_math import clamp

# Upper body
TRAPEZIUS_LEAK_GAIN = 1.5
ROUNDED_SHOULDER_LEAK = 0.4
ROUNDED_BICEPS_SHARE = 0.3
ROUNDED_TRICEPS_SHARE = 0.2
ROUNDED_PRIME_MOVER_FACTOR = 0.6

# Lower body
VALGUS_LEAK_GAIN = 2.0
WEAK_GLUTES_THRESHOLD = 0.3
WEAK_GLUTES_ADDUCTOR_GAIN = 1.5
HINGE_QUAD_SHARE = 0.3


def stability_penalty(stability: StabilityMetrics) -> float:
    return (
        stability.elevation_factor * 0.2
        + stability.valgus_factor * 0.3
        + clamp(stability.pelvic_tilt_factor * 0.1, 0.0, 0.2)
    )


def pattern_penalty(pattern: MotionPattern, movement_state: MovementState) -> float:
    # Extension point for per-pattern form penalties; none are defined yet
    return 0.0


def calculate_energy_leak(
    total_force: float,
    stability: StabilityMetrics,
    pattern: MotionPattern,
    movement_state: MovementState,
    target_area: TargetArea,
    is_side_view: bool = False,
) -> EnergyLeakResult:
    """
    total_force is split as given, so effective + leaked == total_force for
    any finite input; negative forces end up as zero muscle and joint
    scores after flooring. Non-finite forces count as 0.
    """
    if not math.isfinite(total_force):
        total_force = 0.0

    s_penalty = stability_penalty(stability)
    p_penalty = pattern_penalty(pattern, movement_state)
    efficiency = clamp(1.0 - s_penalty - p_penalty, 0.0, 1.0)

    effective_force = total_force * efficiency
    leaked_energy = total_force - effective_force

    effective = _distribute(effective_force, pattern, target_area)
    compensation: Dict[str, float] = {}
    joint_stress: Dict[str, float] = {}

    if target_area in (TargetArea.UPPER, TargetArea.FULL):
        _upper_body_leaks(total_force, stability, effective, compensation)

    if target_area in (TargetArea.LOWER, TargetArea.FULL):
        _lower_body_leaks(
            total_force, leaked_energy, stability, pattern, is_side_view,
            effective, compensation, joint_stress,
        )

    return EnergyLeakResult(
        effective_muscle_scores=_floor(effective),
        compensation_muscle_scores=_floor(compensation),
        joint_stress_scores=_floor(joint_stress),
        efficiency=efficiency,
        effective_force=effective_force,
        leaked_energy=leaked_energy,
        stability_penalty=s_penalty,
        pattern_penalty=p_penalty,
    )


# -----------------------------------------------------
# Distribution
# -----------------------------------------------------

def _distribute(effective_force: float, pattern: MotionPattern,
                target_area: TargetArea) -> Dict[str, float]:
    weights = weights_for(pattern, target_area)
    total_weight = sum(weights.values())
    if total_weight <= 0.0:
        return {}
    return {m: effective_force * w / total_weight for m, w in weights.items()}


# -----------------------------------------------------
# Upper body
# -----------------------------------------------------

def _upper_body_leaks(total_force: float, stability: StabilityMetrics,
                      effective: Dict[str, float], compensation: Dict[str, float]):
    # Shrugging: independent pool, not taken from the effective split
    trapezius_leak = total_force * stability.elevation_factor * TRAPEZIUS_LEAK_GAIN
    if trapezius_leak > 0.0:
        compensation["trapezius"] = compensation.get("trapezius", 0.0) + trapezius_leak

    # Rounded shoulders (retraction < 0, low-confidence depth)
    if stability.retraction_factor < 0.0:
        arm_leak = total_force * ROUNDED_SHOULDER_LEAK
        compensation["biceps"] = compensation.get("biceps", 0.0) + arm_leak * ROUNDED_BICEPS_SHARE
        compensation["triceps"] = compensation.get("triceps", 0.0) + arm_leak * ROUNDED_TRICEPS_SHARE
        for muscle in ("latissimus", "pectorals"):
            if muscle in effective:
                effective[muscle] *= ROUNDED_PRIME_MOVER_FACTOR


# -----------------------------------------------------
# Lower body
# -----------------------------------------------------

def _lower_body_leaks(total_force: float, leaked_energy: float,
                      stability: StabilityMetrics, pattern: MotionPattern,
                      is_side_view: bool,
                      effective: Dict[str, float], compensation: Dict[str, float],
                      joint_stress: Dict[str, float]):
    valgus = stability.valgus_factor

    # Side views cannot see knee collapse; the valgus channel is skipped entirely
    if not is_side_view:
        if valgus > 0.0:
            valgus_leak = total_force * valgus * VALGUS_LEAK_GAIN

            joint_stress["left_knee"] = joint_stress.get("left_knee", 0.0) + valgus_leak * 0.5
            joint_stress["right_knee"] = joint_stress.get("right_knee", 0.0) + valgus_leak * 0.5

            # Patterns without a glutes weight keep their row as-is
            if "glutes" in effective:
                effective["glutes"] = max(0.0, effective["glutes"] - valgus_leak * 0.5)

            glutes = effective.get("glutes", 0.0)
            gain = WEAK_GLUTES_ADDUCTOR_GAIN if glutes < WEAK_GLUTES_THRESHOLD else 1.0
            compensation["adductors"] = valgus_leak * gain
        else:
            compensation["adductors"] = 0.0

    if pattern == MotionPattern.HIP_DOMINANT:
        diverted = leaked_energy * HINGE_QUAD_SHARE
        compensation["quadriceps"] = compensation.get("quadriceps", 0.0) + diverted
        if "glutes" in effective:
            effective["glutes"] = max(0.0, effective["glutes"] - diverted)


def _floor(scores: Dict[str, float]) -> Dict[str, float]:
    return {k: max(0.0, v) for k, v in scores.items()}
