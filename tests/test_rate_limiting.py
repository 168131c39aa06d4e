import math

import numpy as np
import pytest

from pandactl.rate_limiting import (
    DELTA_T,
    FACTOR_CARTESIAN_ROTATION_POSE_INTERFACE,
    is_homogeneous_transformation,
    limit_rate,
    limit_rate_cartesian_pose,
    limit_rate_cartesian_velocity,
    limit_rate_joint_positions,
    limit_rate_joint_velocities,
    limit_rate_position,
    limit_rate_velocity,
)

IDENTITY = (1, 0, 0, 0, 0, 1, 0, 0, 0, 0, 1, 0, 0, 0, 0, 1)
MAX_V, MAX_A, MAX_J = 2.0, 15.0, 7500.0
TOL = 1e-9


def _pose(angle_z, translation=(0.0, 0.0, 0.0)):
    c, s = math.cos(angle_z), math.sin(angle_z)
    m = np.eye(4)
    m[:3, :3] = [[c, -s, 0], [s, c, 0], [0, 0, 1]]
    m[:3, 3] = translation
    return tuple(m.flatten(order="F"))


def test_step_uses_one_millisecond_time_step():
    result = limit_rate([2.0] * 7, [10.0] * 7, [0.0] * 7)
    assert result == pytest.approx([2.0e-3] * 7)
    assert DELTA_T == 1e-3
    assert FACTOR_CARTESIAN_ROTATION_POSE_INTERFACE == 0.99


def test_is_homogeneous_transformation():
    assert is_homogeneous_transformation(IDENTITY)
    assert is_homogeneous_transformation(_pose(0.7, (1.0, 2.0, 3.0)))
    assert not is_homogeneous_transformation((0.0,) * 16)
    row_major = np.eye(4)
    row_major[3, :3] = (1.0, 2.0, 3.0)
    assert not is_homogeneous_transformation(tuple(row_major.flatten(order="F")))
    scaled = list(IDENTITY)
    scaled[0] = 2.0
    assert not is_homogeneous_transformation(scaled)


def test_limit_rate_within_limits_passes_through():
    last = [0.0] * 7
    commanded = [1e-4 * i for i in range(7)]
    assert limit_rate([1.0] * 7, commanded, last) == pytest.approx(commanded)


def test_limit_rate_clamps_derivative():
    last = [0.5] * 7
    result = limit_rate([2.0] * 7, [10.0] * 7, last)
    for value, previous in zip(result, last):
        assert (value - previous) / DELTA_T == pytest.approx(2.0)
    result = limit_rate([2.0] * 7, [-10.0] * 7, last)
    for value, previous in zip(result, last):
        assert (value - previous) / DELTA_T == pytest.approx(-2.0)


def test_limit_rate_rejects_non_finite():
    with pytest.raises(ValueError, match="Commanding value"):
        limit_rate([1.0] * 7, [0, 0, math.nan, 0, 0, 0, 0], [0.0] * 7)


def test_velocity_steady_state_unchanged():
    assert limit_rate_velocity(MAX_V, MAX_A, MAX_J, 0.7, 0.7, 0.0) == pytest.approx(0.7)


@pytest.mark.parametrize("commanded", [5.0, -5.0, 0.01, -0.3])
def test_velocity_respects_jerk_and_acceleration(commanded):
    last_v, last_a = 0.2, 0.0
    result = limit_rate_velocity(MAX_V, MAX_A, MAX_J, commanded, last_v, last_a)
    acceleration = (result - last_v) / DELTA_T
    assert abs(acceleration) <= MAX_A + TOL
    assert abs(acceleration - last_a) <= MAX_J * DELTA_T + 1e-6
    assert min(last_v, commanded) - TOL <= result <= max(last_v, commanded) + TOL


def test_velocity_rejects_non_finite():
    with pytest.raises(ValueError, match="commanded_velocity"):
        limit_rate_velocity(MAX_V, MAX_A, MAX_J, math.inf, 0.0, 0.0)


def test_position_steady_state_unchanged():
    result = limit_rate_position(MAX_V, MAX_A, MAX_J, 1.0, 1.0, 0.0, 0.0)
    assert result == pytest.approx(1.0)


def test_position_step_is_bounded():
    result = limit_rate_position(MAX_V, MAX_A, MAX_J, 3.0, 1.0, 0.0, 0.0)
    velocity = (result - 1.0) / DELTA_T
    assert 0.0 < velocity <= MAX_A * DELTA_T + TOL


def test_position_rejects_non_finite():
    with pytest.raises(ValueError, match="commanded_position"):
        limit_rate_position(MAX_V, MAX_A, MAX_J, math.nan, 0.0, 0.0, 0.0)


def test_joint_velocities_match_scalar():
    commanded = [0.0, 1.0, 2.0, 3.0, 4.0, 5.0, 6.0]
    result = limit_rate_joint_velocities(
        [MAX_V] * 7, [MAX_A] * 7, [MAX_J] * 7, commanded, [0.0] * 7, [0.0] * 7
    )
    assert len(result) == 7
    for value, cmd in zip(result, commanded):
        assert value == limit_rate_velocity(MAX_V, MAX_A, MAX_J, cmd, 0.0, 0.0)
    assert result[0] == 0.0
    assert all(value < cmd for value, cmd in zip(result[1:], commanded[1:]))


def test_joint_velocities_reject_non_finite():
    with pytest.raises(ValueError, match="commanded_velocities"):
        limit_rate_joint_velocities(
            [MAX_V] * 7, [MAX_A] * 7, [MAX_J] * 7,
            [0, 1, math.nan, 3, 4, 5, 6], [0.0] * 7, [0.0] * 7,
        )


def test_joint_positions_match_scalar():
    commanded = [0.0, 1.0, 2.0, 3.0, 4.0, 5.0, 6.0]
    result = limit_rate_joint_positions(
        [MAX_V] * 7, [MAX_A] * 7, [MAX_J] * 7, commanded, [0.0] * 7, [0.0] * 7, [0.0] * 7
    )
    for value, cmd in zip(result, commanded):
        assert value == limit_rate_position(MAX_V, MAX_A, MAX_J, cmd, 0.0, 0.0, 0.0)
    assert all(value < cmd for value, cmd in zip(result[1:], commanded[1:]))


def test_joint_positions_reject_non_finite():
    with pytest.raises(ValueError, match="commanded_positions"):
        limit_rate_joint_positions(
            [MAX_V] * 7, [MAX_A] * 7, [MAX_J] * 7,
            [0, 1, math.inf, 3, 4, 5, 6], [0.0] * 7, [0.0] * 7, [0.0] * 7,
        )


def test_cartesian_velocity_steady_state_unchanged():
    twist = (0.1, -0.2, 0.05, 0.3, 0.0, -0.1)
    result = limit_rate_cartesian_velocity(
        1.7, 13.0, 6500.0, 2.5, 25.0, 12500.0, twist, twist, (0.0,) * 6
    )
    assert result == pytest.approx(twist)


def test_cartesian_velocity_is_limited():
    twist = (0.0, 1.0, 2.0, 3.0, 4.0, 5.0)
    result = limit_rate_cartesian_velocity(
        1.7, 13.0, 6500.0, 2.5, 25.0, 12500.0, twist, (0.0,) * 6, (0.0,) * 6
    )
    translational = np.linalg.norm(result[:3]) / DELTA_T
    rotational = np.linalg.norm(result[3:]) / DELTA_T
    assert 0.0 < translational <= 13.0 + TOL
    assert 0.0 < rotational <= 25.0 + TOL
    assert all(abs(r) < abs(t) for r, t in zip(result[1:], twist[1:]))


def test_cartesian_velocity_rejects_non_finite():
    with pytest.raises(ValueError, match="O_dP_EE_c"):
        limit_rate_cartesian_velocity(
            1.7, 13.0, 6500.0, 2.5, 25.0, 12500.0,
            (0, 1, math.nan, 3, 4, 5), (0.0,) * 6, (0.0,) * 6,
        )


def test_cartesian_pose_unchanged_when_at_rest():
    pose = _pose(0.4, (0.3, 0.0, 0.5))
    result = limit_rate_cartesian_pose(
        1.7, 13.0, 6500.0, 2.5, 25.0, 12500.0, pose, pose, (0.0,) * 6, (0.0,) * 6
    )
    assert result == pytest.approx(pose)


def test_cartesian_pose_step_is_limited():
    last = _pose(0.0, (0.3, 0.0, 0.5))
    commanded = _pose(0.5, (0.8, 0.0, 0.5))
    result = limit_rate_cartesian_pose(
        1.7, 13.0, 6500.0, 2.5, 25.0, 12500.0, commanded, last, (0.0,) * 6, (0.0,) * 6
    )
    assert is_homogeneous_transformation(result)
    step = np.array(result[12:15]) - np.array(last[12:15])
    assert 0.0 < np.linalg.norm(step) / DELTA_T <= 13.0 * DELTA_T + TOL
    angle = math.atan2(result[1], result[0])
    assert 0.0 < angle < 0.5


def test_cartesian_pose_rejects_invalid_input():
    nan_pose = list(IDENTITY)
    nan_pose[3] = math.nan
    with pytest.raises(ValueError, match="infinite or NaN"):
        limit_rate_cartesian_pose(
            1.7, 13.0, 6500.0, 2.5, 25.0, 12500.0, nan_pose, IDENTITY, (0.0,) * 6, (0.0,) * 6
        )
    with pytest.raises(ValueError, match="column major"):
        limit_rate_cartesian_pose(
            1.7, 13.0, 6500.0, 2.5, 25.0, 12500.0, (0.0,) * 16, IDENTITY, (0.0,) * 6, (0.0,) * 6
        )