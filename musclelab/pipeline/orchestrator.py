from typing import Optional

from musclelab.biomech.joint_bank import JointControllerBank, get_default_bank
from musclelab.models.context import Context
from musclelab.models.input_model import SessionInput
from musclelab.models.report_model import SessionReport
from musclelab.utils.config import load_warning_rules
from musclelab.utils.logger import log

from musclelab.pipeline.pose_stage import run as pose_stage
from musclelab.pipeline.motion_stage import run as motion_stage
from musclelab.pipeline.rom_stage import run as rom_stage
from musclelab.pipeline.energy_stage import run as energy_stage
from musclelab.pipeline.report_stage import run as report_stage


def run_pipeline(session: SessionInput,
                 bank: Optional[JointControllerBank] = None) -> Context:
    """
    Full analysis of one session.

    Configuration is resolved before any frame is touched, so a broken
    joints.yaml / warnings.yaml raises ConfigurationError here instead of
    degrading into an empty report.
    """
    bank = bank or get_default_bank()
    load_warning_rules()

    log(f"[INFO] Orchestrator: session frames={len(session.frames)} "
        f"area={session.target_area.value} type={session.motion_type.value}")

    ctx = Context(input=session)

    ctx = pose_stage(ctx)
    ctx = motion_stage(ctx)
    ctx = rom_stage(ctx)
    ctx = energy_stage(ctx, bank=bank)
    ctx = report_stage(ctx)

    return ctx


def analyze_session(session: SessionInput,
                    bank: Optional[JointControllerBank] = None) -> SessionReport:
    return run_pipeline(session, bank).report
