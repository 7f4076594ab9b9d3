from typing import Dict, List, Optional

from musclelab.biomech.rom import credited_rom, is_reciprocating, peak_to_peak
from musclelab.models.context import Context
from musclelab.models.pose_model import Frame
from musclelab.utils.landmarks import LandmarkMapper, core_visible, pair_mid
from musclelab.utils.logger import log
from musclelab.utils.vectors import calculate_angle_deg, vertical_inclination_deg

# -----------------------------
# Joints of interest
# -----------------------------
SIDE_JOINTS = ("shoulder", "elbow", "hip", "knee")
MAPPERS = (LandmarkMapper("L"), LandmarkMapper("R"))

SPINE = "spine"


def joint_keys() -> List[str]:
    keys = [m.name(j) for m in MAPPERS for j in SIDE_JOINTS]
    keys.append(SPINE)
    return keys


def frame_angles(frame: Frame) -> Dict[str, Optional[float]]:
    """Degrees per joint for one frame; None when a landmark is missing or untrusted."""
    out: Dict[str, Optional[float]] = {}

    for mapper in MAPPERS:
        for joint in SIDE_JOINTS:
            pts = mapper.triplet(frame, joint)
            out[mapper.name(joint)] = calculate_angle_deg(*pts) if pts else None

    # Trunk lean from vertical
    out[SPINE] = None
    if core_visible(frame):
        top = pair_mid(frame, "left_shoulder", "right_shoulder")
        bottom = pair_mid(frame, "left_hip", "right_hip")
        out[SPINE] = vertical_inclination_deg(top, bottom)

    return out


def run(ctx: Context) -> Context:
    try:
        log("[INFO] RomStage: Starting")

        frames = ctx.pose.frames
        if not frames:
            ctx.rom.error = "No pose frames"
            return ctx

        keys = joint_keys()
        series: Dict[str, List[Optional[float]]] = {k: [] for k in keys}

        for frame in frames:
            angles = frame_angles(frame)
            for k in keys:
                series[k].append(angles.get(k))

        ctx.rom.angle_series = series
        ctx.rom.peak_to_peak = {k: peak_to_peak(v) for k, v in series.items()}
        ctx.rom.joint_deltas = {k: credited_rom(v) for k, v in series.items()}
        ctx.rom.reciprocating = {k: is_reciprocating(v) for k, v in series.items()}
        ctx.rom.error = None

        moving = [k for k, v in ctx.rom.joint_deltas.items() if v > 0.0]
        log(f"[INFO] RomStage: Completed moving={moving}")

    except Exception as e:
        ctx.rom.error = str(e)
        log(f"[ERROR] RomStage: {e}")

    return ctx
