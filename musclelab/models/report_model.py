from pydantic import BaseModel, Field
from typing import Dict


class SessionReport(BaseModel):
    """
    Final output handed to persistence / LLM scoring.

    The first four fields are the contract consumed downstream; the rest are
    supplemental diagnostics.
    """
    biomech_pattern: str = "STABILIZING"
    detailed_muscle_usage: Dict[str, float] = Field(default_factory=dict)
    rom_data: Dict[str, float] = Field(default_factory=dict)
    stability_warning: str = ""

    movement_state: str = "ISOMETRIC"
    efficiency: float = 1.0
    joint_stress: Dict[str, float] = Field(default_factory=dict)
    motion_metrics: Dict[str, float] = Field(default_factory=dict)
    frames_analyzed: int = 0
    frames_skipped: int = 0
