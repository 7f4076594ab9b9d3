"""
Prime-mover weights per movement pattern.

effective force is split across the muscles of one row proportionally to
weight / sum(weights). Patterns without a row (STABILIZING, plain VERTICAL /
HORIZONTAL) fall back to the target region's default row.
"""

from types import MappingProxyType
from typing import Mapping

from musclelab.models.biomech_model import MotionPattern
from musclelab.models.input_model import TargetArea


def _row(**weights: float) -> Mapping[str, float]:
    return MappingProxyType(dict(weights))


PATTERN_WEIGHTS: Mapping[MotionPattern, Mapping[str, float]] = MappingProxyType({
    MotionPattern.KNEE_DOMINANT: _row(quadriceps=1.2, glutes=0.8, hamstrings=0.3),
    MotionPattern.HIP_DOMINANT: _row(hamstrings=1.2, glutes=1.2, quadriceps=0.2),
    MotionPattern.VERTICAL_PUSH: _row(deltoids=2.5, triceps=1.5, pectorals=0.4, trapezius=0.6),
    MotionPattern.HORIZONTAL_PUSH: _row(pectorals=2.5, triceps=1.2, deltoids=0.8, serratus=0.6),
    MotionPattern.VERTICAL_PULL: _row(latissimus=2.5, biceps=1.0, trapezius=0.8, rhomboids=0.7),
    MotionPattern.HORIZONTAL_PULL: _row(
        trapezius=2.0, rhomboids=2.0, latissimus=1.5, biceps=1.2, deltoids=0.5,
    ),
})

REGION_DEFAULT_WEIGHTS: Mapping[TargetArea, Mapping[str, float]] = MappingProxyType({
    TargetArea.UPPER: _row(deltoids=1.0, triceps=1.0, pectorals=0.8, latissimus=0.8, biceps=0.8),
    TargetArea.LOWER: _row(quadriceps=1.0, glutes=1.0, hamstrings=0.8),
    TargetArea.FULL: _row(
        quadriceps=1.0, glutes=1.0, hamstrings=1.0,
        deltoids=1.0, triceps=1.0, pectorals=1.0, latissimus=1.0, biceps=1.0,
    ),
})


def weights_for(pattern: MotionPattern, target_area: TargetArea) -> Mapping[str, float]:
    row = PATTERN_WEIGHTS.get(pattern)
    if row is not None:
        return row
    return REGION_DEFAULT_WEIGHTS[target_area]
