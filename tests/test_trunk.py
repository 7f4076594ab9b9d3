import pytest

from builders import rocking_frames, session, squat_frames
from musclelab.biomech.trunk import (
    apply_trunk_compensation,
    efficiency_factor,
    erector_spinae_score,
    instability_penalty,
    spine_sway,
)
from musclelab.models.input_model import MotionType, TargetArea
from musclelab.pipeline.orchestrator import run_pipeline


@pytest.mark.parametrize("rom,expected", [
    (0.0, 0.0),
    (10.0, 0.0),
    (15.0, 20.0),
    (30.0, 80.0),
    (60.0, 100.0),
])
def test_isotonic_penalty_from_spine_rom(rom, expected):
    assert instability_penalty(rom, 50.0, MotionType.ISOTONIC) == pytest.approx(expected)


@pytest.mark.parametrize("motion_type", [MotionType.ISOMETRIC, MotionType.ISOKINETIC])
def test_static_holds_penalise_sway(motion_type):
    assert instability_penalty(90.0, 5.0, motion_type) == 0.0
    assert instability_penalty(90.0, 8.0, motion_type) == pytest.approx(30.0)
    assert instability_penalty(0.0, 20.0, motion_type) == 100.0


def test_spine_sway_skips_missing_angles():
    assert spine_sway([]) == 0.0
    assert spine_sway([None, 12.0, None]) == 0.0
    assert spine_sway([0.0, None, 10.0]) == pytest.approx(5.0)


def test_scores_from_penalty():
    assert erector_spinae_score(0.0) == 100.0
    assert erector_spinae_score(80.0) == pytest.approx(20.0)
    assert efficiency_factor(0.0) == 1.0
    assert efficiency_factor(100.0) == pytest.approx(0.6)


def test_compensation_discounts_region_prime_movers():
    usage = {"glutes": 50.0, "hamstrings": 20.0, "quadriceps": 40.0, "latissimus": 10.0}

    lower = apply_trunk_compensation(usage, 50.0, TargetArea.LOWER)
    assert lower["glutes"] == pytest.approx(40.0)
    assert lower["hamstrings"] == pytest.approx(16.0)
    assert lower["quadriceps"] == 40.0
    assert lower["latissimus"] == 10.0
    assert lower["erector_spinae"] == pytest.approx(50.0)

    upper = apply_trunk_compensation(usage, 50.0, TargetArea.UPPER)
    assert upper["latissimus"] == pytest.approx(8.0)
    assert "pectorals" not in upper
    assert upper["glutes"] == 50.0

    full = apply_trunk_compensation(usage, 50.0, TargetArea.FULL)
    assert {k: full[k] for k in usage} == usage
    assert usage == {"glutes": 50.0, "hamstrings": 20.0, "quadriceps": 40.0, "latissimus": 10.0}


# -----------------------------------------------------
# Full sessions
# -----------------------------------------------------

def test_rocking_trunk_session():
    ctx = run_pipeline(session(rocking_frames(30.0), target_area="LOWER"))
    report = ctx.report

    assert report.rom_data["spine"] == pytest.approx(30.0, abs=0.5)
    assert ctx.biomech.trunk_penalty == pytest.approx(80.0, abs=2.0)
    assert report.detailed_muscle_usage["erector_spinae"] == pytest.approx(20.0, abs=0.5)
    assert "lower back is moving" in report.stability_warning


def test_still_trunk_scores_full_erector_stability():
    ctx = run_pipeline(session(squat_frames(), target_area="LOWER"))
    assert ctx.biomech.trunk_penalty == 0.0
    assert ctx.report.detailed_muscle_usage["erector_spinae"] == 100.0
    assert "lower back" not in ctx.report.stability_warning


def test_trunk_rule_is_isotonic_only():
    report = run_pipeline(session(rocking_frames(30.0), motion_type="isokinetic")).report
    assert "lower back is moving" not in report.stability_warning
