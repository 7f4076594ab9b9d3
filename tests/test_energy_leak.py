import itertools

import pytest

from musclelab.biomech.energy_leak import calculate_energy_leak
from musclelab.biomech.muscle_weights import PATTERN_WEIGHTS, REGION_DEFAULT_WEIGHTS, weights_for
from musclelab.models.biomech_model import MotionPattern, MovementState, StabilityMetrics
from musclelab.models.input_model import TargetArea

CONCENTRIC = MovementState.CONCENTRIC


def leak(total=100.0, pattern=MotionPattern.VERTICAL_PUSH, area=TargetArea.FULL,
         side_view=False, **stability):
    return calculate_energy_leak(
        total_force=total,
        stability=StabilityMetrics(**stability),
        pattern=pattern,
        movement_state=CONCENTRIC,
        target_area=area,
        is_side_view=side_view,
    )


def test_vertical_push_distribution():
    r = leak()
    assert r.efficiency == 1.0
    eff = r.effective_muscle_scores
    assert eff["deltoids"] == pytest.approx(50.0)
    assert eff["triceps"] == pytest.approx(30.0)
    assert eff["pectorals"] == pytest.approx(8.0)
    assert eff["trapezius"] == pytest.approx(12.0)


def test_shrug_leaks_into_trapezius():
    r = leak(area=TargetArea.UPPER, elevation_factor=1.0)
    assert r.stability_penalty == pytest.approx(0.2)
    assert r.efficiency == pytest.approx(0.8)
    assert r.compensation_muscle_scores["trapezius"] == pytest.approx(150.0)
    # Independent pool: the effective split still sums to the effective force
    assert sum(r.effective_muscle_scores.values()) == pytest.approx(80.0)


def test_knee_valgus_leak():
    r = leak(pattern=MotionPattern.KNEE_DOMINANT, area=TargetArea.LOWER, valgus_factor=0.5)
    assert r.joint_stress_scores["left_knee"] == pytest.approx(50.0)
    assert r.joint_stress_scores["right_knee"] == pytest.approx(50.0)

    effective_force = 100.0 * (1.0 - 0.15)
    glutes_before = effective_force * 0.8 / 2.3
    assert r.effective_muscle_scores["glutes"] == max(0.0, glutes_before - 50.0)
    # Glutes gave out completely: adductors take the heavier share
    assert r.compensation_muscle_scores["adductors"] == pytest.approx(150.0)


def test_valgus_reduction_without_flooring():
    r = leak(total=100.0, pattern=MotionPattern.HIP_DOMINANT, area=TargetArea.LOWER,
             valgus_factor=0.05)
    # valgus leak 10 -> glutes lose 5, then the hinge diverts 30% of the leak
    leaked = 100.0 * 0.015
    glutes = 100.0 * 0.985 * 1.2 / 2.6 - 5.0 - leaked * 0.3
    assert r.effective_muscle_scores["glutes"] == pytest.approx(glutes)
    assert r.compensation_muscle_scores["adductors"] == pytest.approx(10.0)


def test_side_view_skips_valgus_logic():
    r = leak(pattern=MotionPattern.KNEE_DOMINANT, area=TargetArea.LOWER,
             side_view=True, valgus_factor=0.6)
    assert r.compensation_muscle_scores.get("adductors", 0.0) == 0.0
    assert r.joint_stress_scores.get("left_knee", 0.0) == 0.0
    assert r.joint_stress_scores.get("right_knee", 0.0) == 0.0
    assert r.effective_muscle_scores["glutes"] == pytest.approx(r.effective_force * 0.8 / 2.3)


def test_no_valgus_means_no_adductors():
    r = leak(pattern=MotionPattern.KNEE_DOMINANT, area=TargetArea.LOWER)
    assert r.compensation_muscle_scores["adductors"] == 0.0
    assert r.joint_stress_scores == {}


def test_rounded_shoulders():
    r = leak(pattern=MotionPattern.HORIZONTAL_PULL, area=TargetArea.UPPER, retraction_factor=-0.05)
    plain = leak(pattern=MotionPattern.HORIZONTAL_PULL, area=TargetArea.UPPER)
    comp = r.compensation_muscle_scores
    assert comp["biceps"] == pytest.approx(12.0)
    assert comp["triceps"] == pytest.approx(8.0)
    assert r.effective_muscle_scores["latissimus"] == pytest.approx(
        plain.effective_muscle_scores["latissimus"] * 0.6
    )
    assert r.effective_muscle_scores["biceps"] == plain.effective_muscle_scores["biceps"]


def test_hip_hinge_diverts_to_quads():
    r = leak(pattern=MotionPattern.HIP_DOMINANT, area=TargetArea.LOWER, elevation_factor=0.5)
    assert r.leaked_energy == pytest.approx(10.0)
    assert r.compensation_muscle_scores["quadriceps"] == pytest.approx(3.0)
    assert r.effective_muscle_scores["glutes"] == pytest.approx(90.0 * 1.2 / 2.6 - 3.0)


def test_region_gating():
    lower = leak(area=TargetArea.LOWER, elevation_factor=1.0, retraction_factor=-0.5)
    assert "trapezius" not in lower.compensation_muscle_scores
    assert "biceps" not in lower.compensation_muscle_scores

    upper = leak(pattern=MotionPattern.KNEE_DOMINANT, area=TargetArea.UPPER, valgus_factor=0.5)
    assert upper.joint_stress_scores == {}
    assert "adductors" not in upper.compensation_muscle_scores


def test_pelvic_tilt_penalty_is_capped():
    r = leak(pelvic_tilt_factor=50.0)
    assert r.stability_penalty == pytest.approx(0.2)
    assert r.pattern_penalty == 0.0


def test_unknown_force_is_zero():
    r = leak(total=float("nan"))
    assert r.effective_force == 0.0
    assert all(v == 0.0 for v in r.effective_muscle_scores.values())


@pytest.mark.parametrize(
    "total,elevation,valgus,pelvic",
    list(itertools.product([0.0, 37.5, 100.0], [0.0, 0.6, 1.0], [0.0, 1.0], [0.0, 3.0])),
)
def test_energy_is_conserved(total, elevation, valgus, pelvic):
    r = leak(total=total, elevation_factor=elevation, valgus_factor=valgus,
             pelvic_tilt_factor=pelvic)
    assert 0.0 <= r.efficiency <= 1.0
    assert r.effective_force + r.leaked_energy == pytest.approx(total)
    for scores in (r.effective_muscle_scores, r.compensation_muscle_scores, r.joint_stress_scores):
        assert all(v >= 0.0 for v in scores.values())


# -----------------------------------------------------
# Weight table
# -----------------------------------------------------

def test_weight_table_is_read_only():
    with pytest.raises(TypeError):
        PATTERN_WEIGHTS[MotionPattern.VERTICAL] = {}
    with pytest.raises(TypeError):
        PATTERN_WEIGHTS[MotionPattern.KNEE_DOMINANT]["glutes"] = 5.0


def test_unmatched_pattern_uses_region_defaults():
    for area in TargetArea:
        assert weights_for(MotionPattern.VERTICAL, area) is REGION_DEFAULT_WEIGHTS[area]
        assert weights_for(MotionPattern.STABILIZING, area) is REGION_DEFAULT_WEIGHTS[area]


def test_every_row_has_positive_weights():
    for row in list(PATTERN_WEIGHTS.values()) + list(REGION_DEFAULT_WEIGHTS.values()):
        assert row
        assert all(w > 0 for w in row.values())


@pytest.mark.parametrize("total", [-10.0, -0.5])
def test_negative_force_is_split_as_given(total):
    r = leak(total=total, elevation_factor=0.5, valgus_factor=0.5, retraction_factor=-0.2)
    assert r.effective_force + r.leaked_energy == pytest.approx(total)
    for scores in (r.effective_muscle_scores, r.compensation_muscle_scores, r.joint_stress_scores):
        assert all(v == 0.0 for v in scores.values())


def test_valgus_leaves_rows_without_glutes_alone():
    r = leak(pattern=MotionPattern.VERTICAL_PUSH, area=TargetArea.FULL, valgus_factor=0.2)
    assert "glutes" not in r.effective_muscle_scores
    # No glutes to absorb the leak: adductors take the weak-glutes gain
    assert r.compensation_muscle_scores["adductors"] == pytest.approx(100.0 * 0.2 * 2.0 * 1.5)
