"""Rate limiting of commanded joint and Cartesian values."""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

DELTA_T = 1e-3
"""Sample time of the control loop in seconds."""

NORM_EPS = float(np.finfo(float).eps)
"""Norms below this value are treated as zero."""

FACTOR_CARTESIAN_ROTATION_POSE_INTERFACE = 0.99
"""Scale of the rotational limits when limiting Cartesian poses."""

_ORTHONORMAL_THRESHOLD = 1e-5


def _cpp_min(a: float, b: float) -> float:
    return b if b < a else a


def _cpp_max(a: float, b: float) -> float:
    return b if a < b else a


def _clamp(value: float, limit: float) -> float:
    return _cpp_max(_cpp_min(value, limit), -limit)


def _array(values: Sequence[float]) -> np.ndarray:
    return np.asarray(values, dtype=float)


def _require_finite(values: Sequence[float], message: str) -> np.ndarray:
    array = _array(values)
    if not np.all(np.isfinite(array)):
        raise ValueError(message)
    return array


def _to_tuple(array: np.ndarray) -> tuple[float, ...]:
    return tuple(float(v) for v in array)


def is_homogeneous_transformation(transform: Sequence[float]) -> bool:
    """True if the 16 values form a column-major homogeneous transformation."""
    values = _array(transform)
    if values.size != 16:
        return False
    if values[3] != 0.0 or values[7] != 0.0 or values[11] != 0.0 or values[15] != 1.0:
        return False
    rotation = values.reshape(4, 4, order="F")[:3, :3]
    column_norms = np.sqrt(np.sum(rotation**2, axis=0))
    row_norms = np.sqrt(np.sum(rotation**2, axis=1))
    return bool(
        np.all(np.abs(column_norms - 1.0) <= _ORTHONORMAL_THRESHOLD)
        and np.all(np.abs(row_norms - 1.0) <= _ORTHONORMAL_THRESHOLD)
    )


def _quaternion_from_matrix(rotation: np.ndarray) -> np.ndarray:
    """Quaternion (w, x, y, z) of a 3x3 rotation matrix."""
    m = rotation
    trace = m[0, 0] + m[1, 1] + m[2, 2]
    if trace > 0:
        t = math.sqrt(trace + 1.0)
        w = 0.5 * t
        t = 0.5 / t
        return np.array(
            [
                w,
                (m[2, 1] - m[1, 2]) * t,
                (m[0, 2] - m[2, 0]) * t,
                (m[1, 0] - m[0, 1]) * t,
            ]
        )
    i = 0
    if m[1, 1] > m[0, 0]:
        i = 1
    if m[2, 2] > m[i, i]:
        i = 2
    j = (i + 1) % 3
    k = (j + 1) % 3
    t = math.sqrt(m[i, i] - m[j, j] - m[k, k] + 1.0)
    vector = np.zeros(3)
    vector[i] = 0.5 * t
    t = 0.5 / t
    w = (m[k, j] - m[j, k]) * t
    vector[j] = (m[j, i] + m[i, j]) * t
    vector[k] = (m[k, i] + m[i, k]) * t
    return np.array([w, *vector])


def _rotation_vector(rotation: np.ndarray) -> np.ndarray:
    """Axis times angle of a rotation matrix, with the angle in [0, pi]."""
    quaternion = _quaternion_from_matrix(rotation)
    w = quaternion[0]
    vector = quaternion[1:]
    norm = float(np.linalg.norm(vector))
    if norm == 0.0:
        return np.zeros(3)
    angle = 2.0 * math.atan2(norm, abs(w))
    axis = (-1.0 if w < 0 else 1.0) * vector / norm
    return axis * angle


def _limit_vector_rate(
    max_velocity: float,
    max_acceleration: float,
    max_jerk: float,
    commanded_velocity: np.ndarray,
    last_commanded_velocity: np.ndarray,
    last_commanded_acceleration: np.ndarray,
) -> np.ndarray:
    commanded_jerk = (
        (commanded_velocity - last_commanded_velocity) / DELTA_T
        - last_commanded_acceleration
    ) / DELTA_T

    commanded_acceleration = last_commanded_acceleration.copy()
    jerk_norm = float(np.linalg.norm(commanded_jerk))
    if jerk_norm > NORM_EPS:
        commanded_acceleration = commanded_acceleration + (
            commanded_jerk / jerk_norm * _clamp(jerk_norm, max_jerk) * DELTA_T
        )

    acceleration_norm = float(np.linalg.norm(commanded_acceleration))
    if acceleration_norm <= NORM_EPS:
        return last_commanded_velocity.copy()

    unit_acceleration = commanded_acceleration / acceleration_norm
    dot_product = float(unit_acceleration @ last_commanded_velocity)
    radicand = (
        dot_product**2
        - float(last_commanded_velocity @ last_commanded_velocity)
        + max_velocity**2
    )
    root = math.sqrt(radicand) if radicand >= 0 else math.nan
    distance_to_max_velocity = -dot_product + root

    safe_max_acceleration = _cpp_min(
        (max_jerk / max_acceleration) * distance_to_max_velocity, max_acceleration
    )
    return last_commanded_velocity + unit_acceleration * _cpp_min(
        acceleration_norm, safe_max_acceleration
    ) * DELTA_T


def limit_rate(
    max_derivatives: Sequence[float],
    commanded_values: Sequence[float],
    last_commanded_values: Sequence[float],
) -> tuple[float, ...]:
    """Limit the first derivative of each commanded value."""
    commanded = _require_finite(commanded_values, "Commanding value is infinite or NaN.")
    last = _array(last_commanded_values)
    limits = _array(max_derivatives)
    derivative = (commanded - last) / DELTA_T
    return _to_tuple(
        last + np.array([_clamp(d, m) for d, m in zip(derivative, limits)]) * DELTA_T
    )


def limit_rate_velocity(
    max_velocity: float,
    max_acceleration: float,
    max_jerk: float,
    commanded_velocity: float,
    last_commanded_velocity: float,
    last_commanded_acceleration: float,
) -> float:
    """Limit a commanded velocity by velocity, acceleration and jerk bounds."""
    if not math.isfinite(commanded_velocity):
        raise ValueError("commanded_velocity is infinite or NaN.")
    commanded_jerk = (
        (commanded_velocity - last_commanded_velocity) / DELTA_T
        - last_commanded_acceleration
    ) / DELTA_T
    commanded_acceleration = (
        last_commanded_acceleration + _clamp(commanded_jerk, max_jerk) * DELTA_T
    )
    ratio = max_jerk / max_acceleration
    safe_max_acceleration = _cpp_min(
        ratio * (max_velocity - last_commanded_velocity), max_acceleration
    )
    safe_min_acceleration = _cpp_max(
        ratio * (-max_velocity - last_commanded_velocity), -max_acceleration
    )
    return last_commanded_velocity + _cpp_max(
        _cpp_min(commanded_acceleration, safe_max_acceleration), safe_min_acceleration
    ) * DELTA_T


def limit_rate_position(
    max_velocity: float,
    max_acceleration: float,
    max_jerk: float,
    commanded_position: float,
    last_commanded_position: float,
    last_commanded_velocity: float,
    last_commanded_acceleration: float,
) -> float:
    """Limit a commanded position by velocity, acceleration and jerk bounds."""
    if not math.isfinite(commanded_position):
        raise ValueError("commanded_position is infinite or NaN.")
    velocity = limit_rate_velocity(
        max_velocity,
        max_acceleration,
        max_jerk,
        (commanded_position - last_commanded_position) / DELTA_T,
        last_commanded_velocity,
        last_commanded_acceleration,
    )
    return last_commanded_position + velocity * DELTA_T


def limit_rate_joint_velocities(
    max_velocity: Sequence[float],
    max_acceleration: Sequence[float],
    max_jerk: Sequence[float],
    commanded_velocities: Sequence[float],
    last_commanded_velocities: Sequence[float],
    last_commanded_accelerations: Sequence[float],
) -> tuple[float, ...]:
    """Limit commanded joint velocities joint by joint."""
    _require_finite(commanded_velocities, "commanded_velocities is infinite or NaN.")
    return tuple(
        limit_rate_velocity(*values)
        for values in zip(
            max_velocity,
            max_acceleration,
            max_jerk,
            commanded_velocities,
            last_commanded_velocities,
            last_commanded_accelerations,
        )
    )


def limit_rate_joint_positions(
    max_velocity: Sequence[float],
    max_acceleration: Sequence[float],
    max_jerk: Sequence[float],
    commanded_positions: Sequence[float],
    last_commanded_positions: Sequence[float],
    last_commanded_velocities: Sequence[float],
    last_commanded_accelerations: Sequence[float],
) -> tuple[float, ...]:
    """Limit commanded joint positions joint by joint."""
    _require_finite(commanded_positions, "commanded_positions is infinite or NaN.")
    return tuple(
        limit_rate_position(*values)
        for values in zip(
            max_velocity,
            max_acceleration,
            max_jerk,
            commanded_positions,
            last_commanded_positions,
            last_commanded_velocities,
            last_commanded_accelerations,
        )
    )


def limit_rate_cartesian_velocity(
    max_translational_velocity: float,
    max_translational_acceleration: float,
    max_translational_jerk: float,
    max_rotational_velocity: float,
    max_rotational_acceleration: float,
    max_rotational_jerk: float,
    o_dp_ee_c: Sequence[float],
    last_o_dp_ee_c: Sequence[float],
    last_o_ddp_ee_c: Sequence[float],
) -> tuple[float, ...]:
    """Limit a commanded end effector twist (translation and rotation separately)."""
    dx = _require_finite(o_dp_ee_c, "O_dP_EE_c is infinite or NaN.").copy()
    last_dx = _array(last_o_dp_ee_c)
    last_ddx = _array(last_o_ddp_ee_c)
    dx[:3] = _limit_vector_rate(
        max_translational_velocity,
        max_translational_acceleration,
        max_translational_jerk,
        dx[:3],
        last_dx[:3],
        last_ddx[:3],
    )
    dx[3:] = _limit_vector_rate(
        max_rotational_velocity,
        max_rotational_acceleration,
        max_rotational_jerk,
        dx[3:],
        last_dx[3:],
        last_ddx[3:],
    )
    return _to_tuple(dx)


def limit_rate_cartesian_pose(
    max_translational_velocity: float,
    max_translational_acceleration: float,
    max_translational_jerk: float,
    max_rotational_velocity: float,
    max_rotational_acceleration: float,
    max_rotational_jerk: float,
    o_t_ee_c: Sequence[float],
    last_o_t_ee_c: Sequence[float],
    last_o_dp_ee_c: Sequence[float],
    last_o_ddp_ee_c: Sequence[float],
) -> tuple[float, ...]:
    """Limit a commanded column-major 4x4 end effector pose."""
    commanded = _require_finite(o_t_ee_c, "O_T_EE_c is infinite or NaN.")
    if not is_homogeneous_transformation(commanded):
        raise ValueError(
            "O_T_EE_c is invalid transformation matrix. Has to be column major!"
        )
    pose = commanded.reshape(4, 4, order="F")
    last_pose = _array(last_o_t_ee_c).reshape(4, 4, order="F")
    last_rotation = last_pose[:3, :3]

    dx = np.empty(6)
    dx[:3] = (pose[:3, 3] - last_pose[:3, 3]) / DELTA_T
    dx[3:] = _rotation_vector(pose[:3, :3] @ last_rotation.T) / DELTA_T

    factor = FACTOR_CARTESIAN_ROTATION_POSE_INTERFACE
    dx = _array(
        limit_rate_cartesian_velocity(
            max_translational_velocity,
            max_translational_acceleration,
            max_translational_jerk,
            factor * max_rotational_velocity,
            factor * max_rotational_acceleration,
            factor * max_rotational_jerk,
            dx,
            last_o_dp_ee_c,
            last_o_ddp_ee_c,
        )
    )

    limited = np.eye(4)
    limited[:3, 3] = last_pose[:3, 3] + dx[:3] * DELTA_T
    rotation = last_rotation.copy()
    omega = dx[3:]
    omega_norm = float(np.linalg.norm(omega))
    if omega_norm > NORM_EPS:
        wx, wy, wz = omega / omega_norm
        theta = DELTA_T * omega_norm
        skew = np.array([[0.0, -wz, wy], [wz, 0.0, -wx], [-wy, wx, 0.0]])
        step = np.eye(3) + math.sin(theta) * skew + (1.0 - math.cos(theta)) * (skew @ skew)
        rotation = step @ last_rotation
    limited[:3, :3] = rotation
    return _to_tuple(limited.flatten(order="F"))