# musclelab/pipeline/report_stage.py

from typing import Any, Dict

from musclelab.explainability.warnings_engine import build_warnings, stability_warning
from musclelab.models.context import Context
from musclelab.models.report_model import SessionReport
from musclelab.utils.logger import log
from musclelab.utils.safe_math import clamp, percent, sanitize, sanitize_map


# ---------------------------------------------------------
# Helpers
# ---------------------------------------------------------
def warning_metrics(ctx: Context) -> Dict[str, Any]:
    stability = ctx.motion.stability
    leak = ctx.biomech.leak

    metrics: Dict[str, Any] = stability.model_dump()
    metrics["stability_penalty"] = leak.stability_penalty
    metrics["efficiency"] = leak.efficiency
    metrics["spine_rom_deg"] = ctx.biomech.spine_rom
    metrics["spine_sway_deg"] = ctx.biomech.spine_sway
    metrics.update(ctx.biomech.motion_metrics)

    # Nothing moved: efficiency is trivially 1.0 and the leak split is empty
    if ctx.biomech.total_force <= 0.0:
        metrics.pop("efficiency", None)
    return metrics


# ---------------------------------------------------------
# Main Report Builder
# ---------------------------------------------------------
def run(ctx: Context) -> Context:
    try:
        log("[INFO] ReportStage: Starting")

        motion = ctx.motion
        biomech = ctx.biomech

        messages = build_warnings(
            warning_metrics(ctx),
            motion_type=ctx.input.motion_type,
            is_side_view=motion.is_side_view,
        )

        ctx.report = SessionReport(
            biomech_pattern=motion.dominant_pattern.value,
            detailed_muscle_usage={m: percent(v) for m, v in biomech.muscle_usage.items()},
            rom_data={j: max(0.0, sanitize(v)) for j, v in ctx.rom.joint_deltas.items()},
            stability_warning=stability_warning(messages),
            movement_state=motion.dominant_state.value,
            efficiency=clamp(sanitize(biomech.leak.efficiency, 2), 0.0, 1.0),
            joint_stress={j: percent(v) for j, v in biomech.joint_stress.items()},
            motion_metrics=sanitize_map(biomech.motion_metrics, 2),
            frames_analyzed=ctx.pose.total_frames,
            frames_skipped=motion.frames_skipped,
        )

        log(f"[INFO] ReportStage: Completed warnings={len(messages)}")

    except Exception as e:
        log(f"[ERROR] ReportStage: {e}")

    return ctx
