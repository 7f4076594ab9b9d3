import pytest

from musclelab.biomech.rom import (
    count_direction_changes,
    credited_rom,
    is_reciprocating,
    peak_to_peak,
)


def test_peak_to_peak_skips_gaps():
    assert peak_to_peak([10.0, None, 70.0, 40.0]) == 60.0
    assert peak_to_peak([]) == 0.0
    assert peak_to_peak([None, None]) == 0.0


def test_direction_changes():
    assert count_direction_changes([0, 20, 0, 20]) == 2
    assert count_direction_changes([0, 10, 20, 30]) == 0


def test_small_steps_are_ignored():
    # 1 deg wobble never counts as a reversal
    assert count_direction_changes([0, 1, 0, 1, 0, 1]) == 0
    assert count_direction_changes([0, 10, 9, 20, 0]) == 1


def test_noise_floor():
    assert credited_rom([90, 100, 90, 100, 90]) == 0.0


def test_reciprocating_gets_full_credit():
    angles = [180, 120, 90, 120, 180, 120, 90]
    assert is_reciprocating(angles)
    assert credited_rom(angles) == 90.0


def test_single_excursion_gets_half_credit():
    angles = [0, 10, 20, 30, 40]
    assert not is_reciprocating(angles)
    assert credited_rom(angles) == pytest.approx(20.0)
