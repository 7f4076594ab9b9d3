"""
Range-of-motion helpers.

Peak-to-peak excursion per joint, with a noise floor and a repetition check:
    ROM < 15 deg              -> 0 (pose jitter, joint not moving)
    reciprocating (>= 2 reversals of > 2 deg steps) -> full ROM
    single excursion          -> 50% credit
"""

from typing import Optional, Sequence

ROM_NOISE_FLOOR_DEG = 15.0
REVERSAL_HYSTERESIS_DEG = 2.0
MIN_REVERSALS = 2
SINGLE_EXCURSION_CREDIT = 0.5


def _valid(angles: Sequence[Optional[float]]):
    return [a for a in angles if a is not None]


def peak_to_peak(angles: Sequence[Optional[float]]) -> float:
    values = _valid(angles)
    if not values:
        return 0.0
    return max(values) - min(values)


def count_direction_changes(angles: Sequence[Optional[float]],
                            hysteresis: float = REVERSAL_HYSTERESIS_DEG) -> int:
    values = _valid(angles)
    changes = 0
    prev_rising = None

    for a, b in zip(values, values[1:]):
        diff = b - a
        if abs(diff) < hysteresis:
            continue
        rising = diff > 0
        if prev_rising is not None and rising != prev_rising:
            changes += 1
        prev_rising = rising

    return changes


def is_reciprocating(angles: Sequence[Optional[float]]) -> bool:
    return count_direction_changes(angles) >= MIN_REVERSALS


def credited_rom(angles: Sequence[Optional[float]]) -> float:
    rom = peak_to_peak(angles)
    if rom < ROM_NOISE_FLOOR_DEG:
        return 0.0
    if is_reciprocating(angles):
        return rom
    return rom * SINGLE_EXCURSION_CREDIT
