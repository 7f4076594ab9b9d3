import math

import pytest

from builders import standing_frame
from musclelab.models.pose_model import Point3D
from musclelab.utils.vectors import (
    calculate_angle,
    calculate_angle_deg,
    get_scale_factor,
    normalize_landmarks,
    vertical_inclination_deg,
)


def p(x, y, z=0.0, vis=1.0):
    return Point3D(x=x, y=y, z=z, visibility=vis)


# -----------------------------------------------------
# Point3D
# -----------------------------------------------------

def test_visibility_is_clamped():
    assert p(0, 0, vis=1.5).visibility == 1.0
    assert p(0, 0, vis=-0.2).visibility == 0.0
    assert p(0, 0, vis=float("nan")).visibility == 0.0


def test_point_is_immutable():
    a = p(1, 2)
    with pytest.raises(Exception):
        a.x = 5.0


def test_vector_ops():
    a = p(1, 2, 3)
    b = p(4, 6, 3)
    assert b.subtract(a) == p(3, 4, 0)
    assert a.add(b).x == 5
    assert a.scale(2).z == 6
    assert a.distance_to(b) == pytest.approx(5.0)
    assert a.dot(b) == pytest.approx(4 + 12 + 9)
    assert p(3, 4).length() == pytest.approx(5.0)


def test_midpoint_and_lerp():
    a = p(0, 0, vis=0.2)
    b = p(2, 4, vis=0.8)
    mid = a.midpoint(b)
    assert (mid.x, mid.y) == (1.0, 2.0)
    assert mid.visibility == pytest.approx(0.5)
    assert Point3D.lerp(a, b, 0.25).y == pytest.approx(1.0)
    assert Point3D.lerp(a, b, 3.0).x == pytest.approx(2.0)


def test_planar_distance_ignores_depth():
    assert p(0, 0, 5).planar_distance_to(p(3, 4, -5)) == pytest.approx(5.0)


# -----------------------------------------------------
# Scale / normalization
# -----------------------------------------------------

def test_scale_factor_is_larger_of_spine_and_shoulders():
    assert get_scale_factor(standing_frame()) == pytest.approx(0.3)


def test_scale_factor_defaults_without_trunk():
    frame = standing_frame(left_hip=None)
    assert get_scale_factor(frame) == 1.0


def test_normalize_divides_coordinates_and_keeps_visibility():
    frame = standing_frame()
    norm = normalize_landmarks(frame)
    assert norm["left_shoulder"].x == pytest.approx(0.40 / 0.3)
    assert norm["left_ankle"].y == pytest.approx(1.0 / 0.3)
    assert norm["left_shoulder"].visibility == frame["left_shoulder"].visibility
    assert get_scale_factor(norm) == pytest.approx(1.0)


def test_normalize_skips_degenerate_scale():
    frame = {name: p(0.5, 0.5) for name in ("left_shoulder", "right_shoulder",
                                            "left_hip", "right_hip")}
    out = normalize_landmarks(frame)
    assert out == frame
    assert out is not frame


# -----------------------------------------------------
# Angles
# -----------------------------------------------------

def test_right_and_straight_angles():
    assert calculate_angle(p(1, 0), p(0, 0), p(0, 1)) == pytest.approx(math.pi / 2)
    assert calculate_angle(p(-1, 0), p(0, 0), p(1, 0)) == pytest.approx(math.pi)
    assert calculate_angle_deg(p(1, 0), p(0, 0), p(1, 1)) == pytest.approx(45.0)


def test_zero_length_arm_returns_zero():
    assert calculate_angle(p(0, 0), p(0, 0), p(1, 1)) == 0.0
    assert not math.isnan(calculate_angle(p(1, 1), p(1, 1), p(1, 1)))


def test_vertical_inclination():
    assert vertical_inclination_deg(p(0, 0), p(0, 1)) == pytest.approx(0.0)
    assert vertical_inclination_deg(p(1, 1), p(0, 1)) == pytest.approx(90.0)
