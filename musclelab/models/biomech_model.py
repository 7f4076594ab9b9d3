from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


# ----------------------------
# Classifier tags
# ----------------------------
class MotionPattern(str, Enum):
    STABILIZING = "STABILIZING"
    VERTICAL = "VERTICAL"
    HORIZONTAL = "HORIZONTAL"
    VERTICAL_PUSH = "VERTICAL_PUSH"
    HORIZONTAL_PUSH = "HORIZONTAL_PUSH"
    VERTICAL_PULL = "VERTICAL_PULL"
    HORIZONTAL_PULL = "HORIZONTAL_PULL"
    KNEE_DOMINANT = "KNEE_DOMINANT"
    HIP_DOMINANT = "HIP_DOMINANT"


class MovementState(str, Enum):
    ECCENTRIC = "ECCENTRIC"
    CONCENTRIC = "CONCENTRIC"
    ISOMETRIC = "ISOMETRIC"


class MotionAnalysisResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    pattern: MotionPattern
    state: MovementState


# ----------------------------
# Posture stability
# ----------------------------
class StabilityMetrics(BaseModel):
    """
    elevation_factor   0..1, 1 = full shrug (neck collapsed)
    retraction_factor  signed, + retracted / - rounded shoulders (low-confidence z)
    valgus_factor      0..1, inward knee collapse
    pelvic_tilt_factor >= 0, always 0 on side views
    """
    model_config = ConfigDict(frozen=True)

    elevation_factor: float = 0.0
    retraction_factor: float = 0.0
    valgus_factor: float = 0.0
    pelvic_tilt_factor: float = 0.0


# ----------------------------
# Energy redistribution output
# ----------------------------
class EnergyLeakResult(BaseModel):
    effective_muscle_scores: Dict[str, float] = Field(default_factory=dict)
    compensation_muscle_scores: Dict[str, float] = Field(default_factory=dict)
    joint_stress_scores: Dict[str, float] = Field(default_factory=dict)
    efficiency: float = 1.0

    # Breakdown kept for warnings / diagnostics
    effective_force: float = 0.0
    leaked_energy: float = 0.0
    stability_penalty: float = 0.0
    pattern_penalty: float = 0.0


# ----------------------------
# Per-session aggregates
# NOTE: JSON-first, mirrors what the stages write
# ----------------------------
class MotionModel(BaseModel):
    patterns: List[MotionPattern] = Field(default_factory=list)
    states: List[MovementState] = Field(default_factory=list)
    dominant_pattern: MotionPattern = MotionPattern.STABILIZING
    dominant_state: MovementState = MovementState.ISOMETRIC
    stability: StabilityMetrics = Field(default_factory=StabilityMetrics)
    is_side_view: bool = False
    representative_frame: Optional[int] = None
    frames_skipped: int = 0
    error: Optional[str] = None


class RomModel(BaseModel):
    # degrees per frame, None where the joint was not measurable
    angle_series: Dict[str, List[Optional[float]]] = Field(default_factory=dict)
    peak_to_peak: Dict[str, float] = Field(default_factory=dict)
    joint_deltas: Dict[str, float] = Field(default_factory=dict)
    reciprocating: Dict[str, bool] = Field(default_factory=dict)
    error: Optional[str] = None


class BiomechModel(BaseModel):
    total_force: float = 0.0
    leak: EnergyLeakResult = Field(default_factory=EnergyLeakResult)
    muscle_usage: Dict[str, float] = Field(default_factory=dict)
    joint_stress: Dict[str, float] = Field(default_factory=dict)
    motion_metrics: Dict[str, float] = Field(default_factory=dict)

    # Trunk compensation, degrees / 0..100 penalty
    spine_rom: float = 0.0
    spine_sway: float = 0.0
    trunk_penalty: float = 0.0

    error: Optional[str] = None
