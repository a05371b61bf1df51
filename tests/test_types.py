import math

import numpy as np
import pytest

from nullspace_nav.types import (
    ControllerParams,
    Marker,
    MarkerType,
    NavigationParams,
    Params,
    TargetSystemParams,
    Twist,
    VehicleCommand8D,
    VxVyOmega,
    XYYaw,
    quaternion_from_yaw,
    yaw_from_quaternion,
)


def test_unwrap_negative_yaw_adds_one_turn():
    pose = XYYaw(1.0, 2.0, -0.5)
    pose.unwrap()
    assert pose.yaw == pytest.approx(2 * math.pi - 0.5)


def test_unwrap_large_yaw_subtracts_one_turn_only():
    pose = XYYaw(0.0, 0.0, 14.0)
    pose.unwrap()
    assert pose.yaw == pytest.approx(14.0 - 2 * math.pi)
    assert pose.yaw > 2 * math.pi


def test_unwrap_leaves_inrange_yaw():
    pose = XYYaw(0.0, 0.0, 1.0)
    pose.unwrap()
    assert pose.yaw == 1.0


def test_xyyaw_array_round_trip():
    pose = XYYaw(1.5, -2.5, 0.25)
    other = XYYaw()
    other.update(pose.as_array())
    assert other == pose
    assert list(other) == [1.5, -2.5, 0.25]


def test_xyyaw_indexing():
    pose = XYYaw(1.0, 2.0, 3.0)
    pose[2] = 4.0
    assert [pose[0], pose[1], pose[2]] == [1.0, 2.0, 4.0]
    with pytest.raises(IndexError):
        pose[3]
    with pytest.raises(IndexError):
        pose[3] = 1.0


def test_update_rejects_wrong_length():
    with pytest.raises(ValueError):
        XYYaw().update([1.0, 2.0])


def test_clamp_to_limits():
    cmd = VxVyOmega(vx=5.0, vy=-7.0, omega=-3.0)
    cmd.clamp()
    assert cmd.vx == cmd.vx_max
    assert cmd.vy == cmd.vy_min
    assert cmd.omega == cmd.omega_min


def test_clamp_keeps_values_within_limits():
    cmd = VxVyOmega(vx=0.3, vy=-0.4, omega=0.1)
    cmd.clamp()
    assert (cmd.vx, cmd.vy, cmd.omega) == (0.3, -0.4, 0.1)


def test_default_limits_match_source():
    cmd = VxVyOmega()
    assert (cmd.vx_min, cmd.vx_max, cmd.omega_min, cmd.omega_max) == (-2.0, 2.0, -1.57, 1.57)


def test_vxvyomega_round_trip_and_zero():
    cmd = VxVyOmega()
    cmd.update(np.array([0.1, 0.2, 0.3]))
    assert np.allclose(cmd.as_array(), [0.1, 0.2, 0.3])
    cmd.set_zero()
    assert list(cmd) == [0.0, 0.0, 0.0]
    with pytest.raises(IndexError):
        cmd[-5]


def test_vehicle_command_array_order():
    cmd = VehicleCommand8D(1, 2, 3, 4, 5, 6, 7, 8)
    assert cmd.as_array().tolist() == [1, 2, 3, 4, 5, 6, 7, 8]


def test_quaternion_of_zero_yaw_is_identity():
    assert quaternion_from_yaw(0.0) == (0.0, 0.0, 0.0, 1.0)


@pytest.mark.parametrize("yaw", [-3.0, -1.2, 0.0, 0.4, math.pi / 2, 3.0])
def test_quaternion_yaw_round_trip(yaw):
    q = quaternion_from_yaw(yaw)
    assert sum(c * c for c in q) == pytest.approx(1.0)
    assert yaw_from_quaternion(*q) == pytest.approx(yaw)


def test_params_defaults_and_independence():
    params = Params()
    assert params.controller.num_samples == 3000
    assert params.controller.idx_via_states == [5, 10, 15, 20, 25]
    assert params.navigation == NavigationParams()
    assert params.target_system == TargetSystemParams()
    other = ControllerParams()
    other.sigma.append(9.0)
    assert params.controller.sigma == [1.0, 1.0, 0.78]


def test_twist_and_marker_defaults():
    assert Twist().angular_z == 0.0
    marker = Marker()
    assert marker.frame_id == "map"
    assert marker.type is MarkerType.ARROW
    assert marker.points == []