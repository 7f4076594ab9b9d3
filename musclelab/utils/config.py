from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import yaml
from pydantic import BaseModel, ValidationError, model_validator

from musclelab.biomech.joint_controller import JointControllerConfig
from musclelab.models.input_model import MotionType
from musclelab.utils.errors import ConfigurationError

CONFIG_DIR = Path(__file__).resolve().parent.parent / "config"
JOINTS_PATH = CONFIG_DIR / "joints.yaml"
WARNINGS_PATH = CONFIG_DIR / "warnings.yaml"


# -----------------------------------------------------
# Schemas
# -----------------------------------------------------

class JointSpec(BaseModel):
    angle_min_deg: float
    angle_max_deg: float
    stiffness: float
    damping_coefficient: float
    static_friction: float
    kinetic_friction: float
    moment_arm_table: Optional[List[Tuple[float, float]]] = None
    big_muscle_threshold: float = 0.3
    safety_damping: float = 8.0
    max_torque_limit: float = 20.0
    muscles: List[str]
    proximal: Optional[str] = None

    def to_controller_config(self) -> JointControllerConfig:
        return JointControllerConfig.from_degrees(
            self.angle_min_deg,
            self.angle_max_deg,
            self.moment_arm_table,
            stiffness=self.stiffness,
            damping_coefficient=self.damping_coefficient,
            static_friction=self.static_friction,
            kinetic_friction=self.kinetic_friction,
            big_muscle_threshold=self.big_muscle_threshold,
            safety_damping=self.safety_damping,
            max_torque_limit=self.max_torque_limit,
        )


class WarningRule(BaseModel):
    id: str
    metric: str
    message: str
    gte: Optional[float] = None
    lte: Optional[float] = None
    motion_types: Optional[List[MotionType]] = None
    require_front_view: bool = False

    @model_validator(mode="after")
    def _one_threshold(self):
        if (self.gte is None) == (self.lte is None):
            raise ValueError(f"rule {self.id}: exactly one of gte / lte is required")
        return self

    def triggered(self, value: float) -> bool:
        if self.gte is not None:
            return value >= self.gte
        return value <= self.lte


class _JointsFile(BaseModel):
    joints: Dict[str, JointSpec]


class _WarningsFile(BaseModel):
    warnings: List[WarningRule]


# -----------------------------------------------------
# Loaders
# -----------------------------------------------------

def _read_yaml(path: Path) -> dict:
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"cannot read {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path}: expected a mapping at top level")
    return data


@lru_cache(maxsize=None)
def load_joint_specs(path: Path = JOINTS_PATH) -> Dict[str, JointSpec]:
    try:
        parsed = _JointsFile.model_validate(_read_yaml(path))
    except ValidationError as e:
        raise ConfigurationError(f"{path}: {e}") from e

    for name, spec in parsed.joints.items():
        if spec.proximal is not None and spec.proximal not in parsed.joints:
            raise ConfigurationError(f"{path}: joint {name} references unknown proximal {spec.proximal}")
        if spec.proximal == name:
            raise ConfigurationError(f"{path}: joint {name} cannot be its own proximal")
    return parsed.joints


@lru_cache(maxsize=None)
def load_warning_rules(path: Path = WARNINGS_PATH) -> Tuple[WarningRule, ...]:
    try:
        parsed = _WarningsFile.model_validate(_read_yaml(path))
    except ValidationError as e:
        raise ConfigurationError(f"{path}: {e}") from e
    return tuple(parsed.warnings)
