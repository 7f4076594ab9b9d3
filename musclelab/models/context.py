from pydantic import BaseModel, Field

from musclelab.models.input_model import SessionInput
from musclelab.models.pose_model import PoseModel
from musclelab.models.biomech_model import MotionModel, RomModel, BiomechModel
from musclelab.models.report_model import SessionReport


class Context(BaseModel):
    """
    Analysis context for one session, passed through the pipeline.

    NOTE:
    - Every stage reads earlier blocks and writes only its own.
    - A fresh Context is created per session; nothing is shared between calls.
    """

    # -------------------------
    # Inputs & normalized data
    # -------------------------
    input: SessionInput
    pose: PoseModel = Field(default_factory=PoseModel)

    # -------------------------
    # Derived stages
    # -------------------------
    motion: MotionModel = Field(default_factory=MotionModel)
    rom: RomModel = Field(default_factory=RomModel)
    biomech: BiomechModel = Field(default_factory=BiomechModel)

    # -------------------------
    # Reporting
    # -------------------------
    report: SessionReport = Field(default_factory=SessionReport)
