"""Error flags reported by the robot while it is being controlled."""

from __future__ import annotations

import json
from typing import Iterable, Optional

ERROR_NAMES: tuple[str, ...] = (
    "joint_position_limits_violation",
    "cartesian_position_limits_violation",
    "self_collision_avoidance_violation",
    "joint_velocity_violation",
    "cartesian_velocity_violation",
    "force_control_safety_violation",
    "joint_reflex",
    "cartesian_reflex",
    "max_goal_pose_deviation_violation",
    "max_path_pose_deviation_violation",
    "cartesian_velocity_profile_safety_violation",
    "joint_position_motion_generator_start_pose_invalid",
    "joint_motion_generator_position_limits_violation",
    "joint_motion_generator_velocity_limits_violation",
    "joint_motion_generator_velocity_discontinuity",
    "joint_motion_generator_acceleration_discontinuity",
    "cartesian_position_motion_generator_start_pose_invalid",
    "cartesian_motion_generator_elbow_limit_violation",
    "cartesian_motion_generator_velocity_limits_violation",
    "cartesian_motion_generator_velocity_discontinuity",
    "cartesian_motion_generator_acceleration_discontinuity",
    "cartesian_motion_generator_elbow_sign_inconsistent",
    "cartesian_motion_generator_start_elbow_invalid",
    "cartesian_motion_generator_joint_position_limits_violation",
    "cartesian_motion_generator_joint_velocity_limits_violation",
    "cartesian_motion_generator_joint_velocity_discontinuity",
    "cartesian_motion_generator_joint_acceleration_discontinuity",
    "cartesian_position_motion_generator_invalid_frame",
    "force_controller_desired_force_tolerance_violation",
    "controller_torque_discontinuity",
    "start_elbow_sign_inconsistent",
    "communication_constraints_violation",
    "power_limit_violation",
    "joint_p2p_insufficient_torque_for_planning",
    "tau_j_range_violation",
    "instability_detected",
    "joint_move_in_wrong_direction",
    "cartesian_spline_motion_generator_violation",
    "joint_via_motion_generator_planning_joint_limit_violation",
    "base_acceleration_initialization_timeout",
    "base_acceleration_invalid_reading",
)


class Errors:
    """Set of the robot's error flags, one per name in ERROR_NAMES.

    Every flag can be read as a read-only attribute of the same name.
    """

    __slots__ = ("_flags",)

    def __init__(self, flags: Optional[Iterable[bool]] = None) -> None:
        if flags is None:
            values = (False,) * len(ERROR_NAMES)
        else:
            values = tuple(bool(flag) for flag in flags)
            if len(values) != len(ERROR_NAMES):
                raise ValueError(
                    f"expected {len(ERROR_NAMES)} error flags, got {len(values)}"
                )
        self._flags: tuple[bool, ...] = values

    def __bool__(self) -> bool:
        return any(self._flags)

    def __str__(self) -> str:
        """Return the names of the active errors as a JSON array."""
        return json.dumps(list(self.active()))

    def __repr__(self) -> str:
        return f"Errors({list(self.active())!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Errors):
            return NotImplemented
        return self._flags == other._flags

    def __hash__(self) -> int:
        return hash(self._flags)

    def active(self) -> tuple[str, ...]:
        """Names of the flags that are set, in declaration order."""
        return tuple(name for name, flag in zip(ERROR_NAMES, self._flags) if flag)

    def as_tuple(self) -> tuple[bool, ...]:
        """All flags, in declaration order."""
        return self._flags


def _flag_property(index: int, name: str) -> property:
    return property(lambda self: self._flags[index], doc=f"True if {name} is set.")


for _index, _name in enumerate(ERROR_NAMES):
    setattr(Errors, _name, _flag_property(_index, _name))
del _index, _name