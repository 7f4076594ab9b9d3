from typing import Dict, List, Mapping, Optional

from musclelab.biomech.energy_leak import calculate_energy_leak
from musclelab.biomech.joint_bank import JointControllerBank, get_default_bank
from musclelab.biomech.motion_metrics import motion_metrics
from musclelab.biomech.trunk import apply_trunk_compensation, instability_penalty, spine_sway
from musclelab.models.context import Context
from musclelab.models.input_model import TargetArea
from musclelab.pipeline.rom_stage import SPINE
from musclelab.utils.logger import log
from musclelab.utils.safe_math import clamp

# -----------------------------
# Tunables
# -----------------------------
# Credited ROM that maps to a full-effort force of 100
REFERENCE_ROM_DEG = 130.0

UPPER_JOINTS = ("left_shoulder", "right_shoulder", "left_elbow", "right_elbow")
LOWER_JOINTS = ("left_hip", "right_hip", "left_knee", "right_knee")

REGION_JOINTS: Mapping[TargetArea, tuple] = {
    TargetArea.UPPER: UPPER_JOINTS,
    TargetArea.LOWER: LOWER_JOINTS,
    TargetArea.FULL: UPPER_JOINTS + LOWER_JOINTS,
}


def total_force(joint_deltas: Mapping[str, float], target_area: TargetArea) -> float:
    """
    Gross work signal 0..100 from the prime-mover joints of the region.
    Only moving joints (credited ROM > 0) are averaged; the spine never counts.
    """
    moving = [joint_deltas.get(j, 0.0) for j in REGION_JOINTS[target_area]]
    moving = [d for d in moving if d > 0.0]
    if not moving:
        return 0.0
    mean_rom = sum(moving) / len(moving)
    return clamp(mean_rom / REFERENCE_ROM_DEG * 100.0, 0.0, 100.0)


def merge_usage(effective: Mapping[str, float],
                compensation: Mapping[str, float]) -> Dict[str, float]:
    merged: Dict[str, float] = {}
    for scores in (effective, compensation):
        for muscle, value in scores.items():
            merged[muscle] = merged.get(muscle, 0.0) + value
    return {m: clamp(v, 0.0, 100.0) for m, v in merged.items()}


def run(ctx: Context, bank: Optional[JointControllerBank] = None) -> Context:
    """
    Energy stage:
    - Total force from credited ROM of the target region.
    - Energy leak split with the dominant pattern / state and representative stability.
    - Trunk compensation: spine movement discounts the region's prime movers
      and scores erector_spinae.
    - Joint stress from the controller bank, plus valgus knee stress from the leak split.
    """
    try:
        log("[INFO] EnergyStage: Starting")

        if ctx.rom.error or not ctx.rom.angle_series:
            ctx.biomech.error = "Missing ROM data"
            return ctx

        bank = bank or get_default_bank()
        area = ctx.input.target_area
        motion = ctx.motion

        force = total_force(ctx.rom.joint_deltas, area)
        ctx.biomech.total_force = force

        leak = calculate_energy_leak(
            total_force=force,
            stability=motion.stability,
            pattern=motion.dominant_pattern,
            movement_state=motion.dominant_state,
            target_area=area,
            is_side_view=motion.is_side_view,
        )
        ctx.biomech.leak = leak

        usage = merge_usage(leak.effective_muscle_scores, leak.compensation_muscle_scores)

        spine_rom = ctx.rom.peak_to_peak.get(SPINE, 0.0)
        sway = spine_sway(ctx.rom.angle_series.get(SPINE) or [])
        penalty = instability_penalty(spine_rom, sway, ctx.input.motion_type)
        ctx.biomech.spine_rom = spine_rom
        ctx.biomech.spine_sway = sway
        ctx.biomech.trunk_penalty = penalty

        # A still session with a still trunk has nothing to score
        if force > 0.0 or penalty > 0.0:
            usage = apply_trunk_compensation(usage, penalty, area)
        ctx.biomech.muscle_usage = usage

        stress = bank.evaluate(ctx.rom.angle_series, ctx.pose.timestamps_ms, usage)
        for joint, extra in leak.joint_stress_scores.items():
            stress[joint] = stress.get(joint, 0.0) + extra
        ctx.biomech.joint_stress = {j: clamp(v, 0.0, 100.0) for j, v in stress.items()}

        region: List[str] = list(REGION_JOINTS[area])
        ctx.biomech.motion_metrics = motion_metrics(
            ctx.input.motion_type,
            motion.patterns,
            motion.states,
            ctx.pose.frames,
            ctx.pose.timestamps_ms,
            ctx.rom.angle_series,
            region,
        )

        ctx.biomech.error = None

        log(
            f"[INFO] EnergyStage: Completed force={force:.1f} "
            f"efficiency={leak.efficiency:.2f} leaked={leak.leaked_energy:.1f}"
        )

    except Exception as e:
        ctx.biomech.error = str(e)
        log(f"[ERROR] EnergyStage: {e}")

    return ctx
