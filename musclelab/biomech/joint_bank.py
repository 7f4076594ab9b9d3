"""
Joint controllers for a whole body side, built once from joints.yaml.

Distal joints (knee, elbow) name a proximal joint (hip, shoulder). The
proximal joint's muscle force is the "big muscle" load that switches on
safety damping in the distal controller.
"""

import math
from functools import lru_cache
from typing import Dict, List, Mapping, Optional, Sequence

import numpy as np

from musclelab.biomech.joint_controller import JointController
from musclelab.utils.config import JointSpec, load_joint_specs
from musclelab.utils.errors import ConfigurationError

SIDES = ("left", "right")

# Peak stress is read at this percentile to ignore single-frame spikes
STRESS_PERCENTILE = 95


class JointControllerBank:

    def __init__(self, specs: Mapping[str, JointSpec]):
        self.specs = dict(specs)
        self.controllers: Dict[str, JointController] = {
            name: JointController(spec.to_controller_config(), name=name)
            for name, spec in self.specs.items()
        }
        self.order = _proximal_first(self.specs)

    @classmethod
    def from_config(cls, path=None) -> "JointControllerBank":
        specs = load_joint_specs(path) if path is not None else load_joint_specs()
        return cls(specs)

    def muscle_force(self, joint: str, muscle_usage: Mapping[str, float]) -> float:
        total = sum(muscle_usage.get(m, 0.0) for m in self.specs[joint].muscles)
        return max(0.0, min(1.0, total / 100.0))

    # -----------------------------------------------------
    # Session evaluation
    # -----------------------------------------------------
    def evaluate(
        self,
        angle_series: Mapping[str, Sequence[Optional[float]]],
        timestamps_ms: Sequence[int],
        muscle_usage: Mapping[str, float],
    ) -> Dict[str, float]:
        """
        Peak stress per side joint ("left_knee", ...), 0..100.

        angle_series holds degrees per frame (None where unmeasured);
        a step is evaluated only when both of its frames have an angle.
        Joints without a series are left out.
        """
        out: Dict[str, float] = {}

        for side in SIDES:
            for joint in self.order:
                key = f"{side}_{joint}"
                series = angle_series.get(key)
                if not series:
                    continue

                spec = self.specs[joint]
                big = self.muscle_force(spec.proximal, muscle_usage) if spec.proximal else None

                stresses = self._joint_series(
                    self.controllers[joint], key, series, timestamps_ms,
                    self.muscle_force(joint, muscle_usage), big,
                )
                out[key] = float(np.percentile(stresses, STRESS_PERCENTILE)) * 100.0 if stresses else 0.0

        return out

    @staticmethod
    def _joint_series(
        controller: JointController,
        key: str,
        series: Sequence[Optional[float]],
        timestamps_ms: Sequence[int],
        muscle_force: float,
        big_muscle_force: Optional[float],
    ) -> List[float]:
        stresses: List[float] = []

        for i in range(1, len(series)):
            cur, prev = series[i], series[i - 1]
            if cur is None or prev is None:
                continue

            dt = 0.0
            if i < len(timestamps_ms):
                dt = (timestamps_ms[i] - timestamps_ms[i - 1]) / 1000.0

            stresses.append(controller.calculate_joint_stress(
                math.radians(cur),
                math.radians(prev),
                dt,
                muscle_force,
                big_muscle_force=big_muscle_force,
                debug_name=key,
            ))

        return stresses


def _proximal_first(specs: Mapping[str, JointSpec]) -> List[str]:
    order: List[str] = []
    visiting = set()

    def visit(name: str):
        if name in order:
            return
        if name in visiting:
            raise ConfigurationError(f"proximal chain loops through joint {name}")
        visiting.add(name)
        proximal = specs[name].proximal
        if proximal is not None:
            if proximal not in specs:
                raise ConfigurationError(f"joint {name} references unknown proximal {proximal}")
            visit(proximal)
        visiting.discard(name)
        order.append(name)

    for name in specs:
        visit(name)
    return order


@lru_cache(maxsize=1)
def get_default_bank() -> JointControllerBank:
    return JointControllerBank.from_config()
