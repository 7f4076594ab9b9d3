"""
Trunk compensation.

The lumbar spine should stay still while the prime movers work. Trunk
movement is read as a stability fault:

    isotonic      penalty = clamp((spine ROM - 10) * 4, 0, 100)
    isometric /   penalty = clamp((spine sway - 5) * 10, 0, 100)
    isokinetic

    erector_spinae score = 100 - penalty
    efficiency factor    = 1 - penalty / 250  (prime movers of the region)

spine ROM is the raw peak-to-peak trunk lean, spine sway its standard
deviation, both in degrees.
"""

from typing import Dict, Mapping, Optional, Sequence

import numpy as np

from musclelab.models.input_model import MotionType, TargetArea
from musclelab.utils.safe_math import clamp

ROM_ALLOWANCE_DEG = 10.0
ROM_PENALTY_GAIN = 4.0
SWAY_ALLOWANCE_DEG = 5.0
SWAY_PENALTY_GAIN = 10.0
EFFICIENCY_DIVISOR = 250.0

ERECTOR_SPINAE = "erector_spinae"

# FULL sessions have no single prime-mover group to discount
TRUNK_DEPENDENT_MUSCLES: Mapping[TargetArea, tuple] = {
    TargetArea.UPPER: ("latissimus", "pectorals"),
    TargetArea.LOWER: ("glutes", "hamstrings"),
    TargetArea.FULL: (),
}


def spine_sway(series: Sequence[Optional[float]]) -> float:
    values = [a for a in series if a is not None]
    if len(values) < 2:
        return 0.0
    return float(np.std(np.asarray(values, float)))


def instability_penalty(spine_rom: float, sway: float, motion_type: MotionType) -> float:
    if motion_type == MotionType.ISOTONIC:
        excess = spine_rom - ROM_ALLOWANCE_DEG
        return clamp(excess * ROM_PENALTY_GAIN, 0.0, 100.0) if excess > 0.0 else 0.0

    excess = sway - SWAY_ALLOWANCE_DEG
    return clamp(excess * SWAY_PENALTY_GAIN, 0.0, 100.0) if excess > 0.0 else 0.0


def erector_spinae_score(penalty: float) -> float:
    return clamp(100.0 - penalty, 0.0, 100.0)


def efficiency_factor(penalty: float) -> float:
    return 1.0 - penalty / EFFICIENCY_DIVISOR


def apply_trunk_compensation(usage: Mapping[str, float], penalty: float,
                             target_area: TargetArea) -> Dict[str, float]:
    """
    Usage with the region's trunk-dependent prime movers discounted and
    the erector_spinae stability score added.
    """
    factor = efficiency_factor(penalty)
    out = dict(usage)
    for muscle in TRUNK_DEPENDENT_MUSCLES[target_area]:
        if muscle in out:
            out[muscle] *= factor
    out[ERECTOR_SPINAE] = erector_spinae_score(penalty)
    return out
