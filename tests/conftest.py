import pytest

from builders import squat_frames, standing_frame
from musclelab.biomech.joint_controller import JointControllerConfig


@pytest.fixture
def standing():
    return standing_frame()


@pytest.fixture
def squat_sequence():
    return squat_frames()


@pytest.fixture
def simple_config():
    return JointControllerConfig.from_degrees(
        0.0,
        180.0,
        stiffness=10.0,
        damping_coefficient=1.0,
        static_friction=0.1,
        kinetic_friction=0.2,
    )
