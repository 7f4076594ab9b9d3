"""
Per-joint physical stress model.

Torque balance at one joint for one frame step:
    muscle torque    = muscle force x moment arm(angle)
    friction torque  = -(kinetic friction + damping x |w|) x sign(w)
    soft-limit torque= stiffness x overshoot, pushing back into range
    total            = clamp(sum, +-max_torque_limit)
    stress           = |total| / (|total| + 60)

Damping stiffens (safety damping) when the proximal "big muscle" joint is
heavily loaded. The controller itself holds no per-frame state.
"""

import math
from bisect import bisect_right
from typing import Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict

from musclelab.utils.errors import ConfigurationError
from musclelab.utils.logger import debug

MomentArmTable = Tuple[Tuple[float, float], ...]

# Sigmoid-style normalization reference; downstream scores depend on this value
REFERENCE_MAX_TORQUE = 60.0

# Below this angular velocity the joint is treated as static
VELOCITY_EPSILON = 1e-6

# Dropped or duplicated frames fall back to ~30 fps
DEFAULT_DT = 0.033
MAX_DT = 0.1


class JointControllerConfig(BaseModel):
    """Immutable joint parameters. Angles in radians."""
    model_config = ConfigDict(frozen=True)

    angle_min: float
    angle_max: float
    stiffness: float
    damping_coefficient: float
    static_friction: float
    kinetic_friction: float
    moment_arm_table: Optional[MomentArmTable] = None
    big_muscle_threshold: float = 0.3
    safety_damping: float = 8.0
    max_torque_limit: float = 20.0

    @classmethod
    def from_degrees(
        cls,
        angle_min_deg: float,
        angle_max_deg: float,
        moment_arm_table_deg: Optional[Sequence[Tuple[float, float]]] = None,
        **kwargs,
    ) -> "JointControllerConfig":
        table = None
        if moment_arm_table_deg:
            table = tuple((math.radians(a), float(v)) for a, v in moment_arm_table_deg)
        return cls(
            angle_min=math.radians(angle_min_deg),
            angle_max=math.radians(angle_max_deg),
            moment_arm_table=table,
            **kwargs,
        )


def validate_config(config: JointControllerConfig, name: str = "joint") -> None:
    if config.angle_min > config.angle_max:
        raise ConfigurationError(
            f"{name}: angle_min ({config.angle_min:.3f}) > angle_max ({config.angle_max:.3f})"
        )
    for field in ("stiffness", "damping_coefficient", "static_friction",
                  "kinetic_friction", "safety_damping", "max_torque_limit"):
        value = getattr(config, field)
        if not math.isfinite(value) or value < 0:
            raise ConfigurationError(f"{name}: {field} must be a finite value >= 0, got {value}")
    if not config.big_muscle_threshold > 0:
        raise ConfigurationError(f"{name}: big_muscle_threshold must be > 0")

    table = config.moment_arm_table
    if table is not None:
        if not table:
            raise ConfigurationError(f"{name}: moment_arm_table must not be empty")
        keys = [a for a, _ in table]
        if any(b <= a for a, b in zip(keys, keys[1:])):
            raise ConfigurationError(f"{name}: moment_arm_table angles must be strictly increasing")


class JointController:

    def __init__(self, config: JointControllerConfig, name: str = "joint"):
        validate_config(config, name)
        self.config = config
        self.name = name
        if config.moment_arm_table:
            self._table_angles = [a for a, _ in config.moment_arm_table]
            self._table_values = [v for _, v in config.moment_arm_table]
        else:
            self._table_angles = []
            self._table_values = []

    # -----------------------------------------------------
    # Main entry
    # -----------------------------------------------------
    def calculate_joint_stress(
        self,
        current_angle: float,
        prev_angle: float,
        dt: float,
        muscle_force: float,
        big_muscle_force: Optional[float] = None,
        debug_name: Optional[str] = None,
    ) -> float:
        cfg = self.config

        # 1. Damping selection
        effective_damping = cfg.damping_coefficient
        if big_muscle_force is not None and abs(big_muscle_force) > cfg.big_muscle_threshold:
            ratio = abs(big_muscle_force) / cfg.big_muscle_threshold
            effective_damping = max(cfg.damping_coefficient, cfg.safety_damping * ratio)
            if debug_name:
                debug(
                    f"[JointController] safety damping joint={debug_name} "
                    f"force={big_muscle_force:.2f} "
                    f"damping={cfg.damping_coefficient:.2f}->{effective_damping:.2f}"
                )

        # 2. dt guard
        safe_dt = DEFAULT_DT if (not dt > 0.0 or dt > MAX_DT) else dt

        # 3. Angular velocity
        angular_velocity = (current_angle - prev_angle) / safe_dt

        # 4-5. Muscle torque
        muscle_torque = muscle_force * self.moment_arm(current_angle)

        # 6. Friction
        friction_torque = self.friction_torque(angular_velocity, effective_damping)

        # 7. Soft limit
        limit_torque = self.soft_limit_torque(current_angle)

        # 8. Hard safety clamp
        total_torque = muscle_torque + friction_torque + limit_torque
        if math.isnan(total_torque):
            total_torque = 0.0
        if abs(total_torque) > cfg.max_torque_limit:
            if debug_name:
                debug(
                    f"[JointController] torque clamp joint={debug_name} "
                    f"calculated={total_torque:.2f} limit={cfg.max_torque_limit:.2f}"
                )
            total_torque = max(-cfg.max_torque_limit, min(cfg.max_torque_limit, total_torque))

        # 9. Saturating normalization
        abs_torque = abs(total_torque)
        stress = abs_torque / (abs_torque + REFERENCE_MAX_TORQUE)
        return max(0.0, min(1.0, stress))

    # -----------------------------------------------------
    # Components
    # -----------------------------------------------------
    def moment_arm(self, angle: float) -> float:
        if self._table_angles:
            return self._interpolate_moment_arm(angle)

        span = self.config.angle_max - self.config.angle_min
        if span <= 0.0:
            return 1.0
        normalized = (angle - self.config.angle_min) / span
        # Peak lever efficiency mid-range
        return math.sin(normalized * math.pi)

    def _interpolate_moment_arm(self, angle: float) -> float:
        angles = self._table_angles
        values = self._table_values

        if angle <= angles[0]:
            return values[0]
        if angle >= angles[-1]:
            return values[-1]

        i = bisect_right(angles, angle)
        a1, a2 = angles[i - 1], angles[i]
        v1, v2 = values[i - 1], values[i]
        t = (angle - a1) / (a2 - a1)
        return v1 + (v2 - v1) * t

    def friction_torque(self, angular_velocity: float, damping: float) -> float:
        abs_w = abs(angular_velocity)
        if abs_w < VELOCITY_EPSILON:
            return 0.0
        magnitude = self.config.kinetic_friction + damping * abs_w
        return -magnitude * math.copysign(1.0, angular_velocity)

    def soft_limit_torque(self, angle: float) -> float:
        cfg = self.config
        if angle < cfg.angle_min:
            return cfg.stiffness * (cfg.angle_min - angle)
        if angle > cfg.angle_max:
            return -cfg.stiffness * (angle - cfg.angle_max)
        return 0.0
