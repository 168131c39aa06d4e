"""The robot's state as reported on every control cycle."""

from __future__ import annotations

import dataclasses
import enum
import json
from dataclasses import dataclass, field
from typing import Any

from pandactl.errors import Errors


class RobotMode(enum.Enum):
    """The robot's current mode."""

    OTHER = 0
    IDLE = 1
    MOVE = 2
    GUIDING = 3
    REFLEX = 4
    USER_STOPPED = 5
    AUTOMATIC_ERROR_RECOVERY = 6

    def __str__(self) -> str:
        return _MODE_NAMES[self]


_MODE_NAMES = {
    RobotMode.OTHER: "Other",
    RobotMode.IDLE: "Idle",
    RobotMode.MOVE: "Move",
    RobotMode.GUIDING: "Guiding",
    RobotMode.REFLEX: "Reflex",
    RobotMode.USER_STOPPED: "User stopped",
    RobotMode.AUTOMATIC_ERROR_RECOVERY: "Automatic error recovery",
}


def _zeros(n: int) -> Any:
    return field(default=(0.0,) * n, metadata={"length": n})


@dataclass
class RobotState:
    """Snapshot of the robot state.

    Poses are 4x4 matrices in column-major order. ``time`` is the timestamp
    since robot start in milliseconds.
    """

    O_T_EE: tuple[float, ...] = _zeros(16)
    O_T_EE_d: tuple[float, ...] = _zeros(16)
    F_T_EE: tuple[float, ...] = _zeros(16)
    F_T_NE: tuple[float, ...] = _zeros(16)
    NE_T_EE: tuple[float, ...] = _zeros(16)
    EE_T_K: tuple[float, ...] = _zeros(16)
    m_ee: float = 0.0
    I_ee: tuple[float, ...] = _zeros(9)
    F_x_Cee: tuple[float, ...] = _zeros(3)
    m_load: float = 0.0
    I_load: tuple[float, ...] = _zeros(9)
    F_x_Cload: tuple[float, ...] = _zeros(3)
    m_total: float = 0.0
    I_total: tuple[float, ...] = _zeros(9)
    F_x_Ctotal: tuple[float, ...] = _zeros(3)
    elbow: tuple[float, ...] = _zeros(2)
    elbow_d: tuple[float, ...] = _zeros(2)
    elbow_c: tuple[float, ...] = _zeros(2)
    delbow_c: tuple[float, ...] = _zeros(2)
    ddelbow_c: tuple[float, ...] = _zeros(2)
    tau_J: tuple[float, ...] = _zeros(7)
    tau_J_d: tuple[float, ...] = _zeros(7)
    dtau_J: tuple[float, ...] = _zeros(7)
    q: tuple[float, ...] = _zeros(7)
    q_d: tuple[float, ...] = _zeros(7)
    dq: tuple[float, ...] = _zeros(7)
    dq_d: tuple[float, ...] = _zeros(7)
    ddq_d: tuple[float, ...] = _zeros(7)
    joint_contact: tuple[float, ...] = _zeros(7)
    cartesian_contact: tuple[float, ...] = _zeros(6)
    joint_collision: tuple[float, ...] = _zeros(7)
    cartesian_collision: tuple[float, ...] = _zeros(6)
    tau_ext_hat_filtered: tuple[float, ...] = _zeros(7)
    O_F_ext_hat_K: tuple[float, ...] = _zeros(6)
    K_F_ext_hat_K: tuple[float, ...] = _zeros(6)
    O_dP_EE_d: tuple[float, ...] = _zeros(6)
    O_ddP_O: tuple[float, ...] = _zeros(3)
    O_T_EE_c: tuple[float, ...] = _zeros(16)
    O_dP_EE_c: tuple[float, ...] = _zeros(6)
    O_ddP_EE_c: tuple[float, ...] = _zeros(6)
    theta: tuple[float, ...] = _zeros(7)
    dtheta: tuple[float, ...] = _zeros(7)
    current_errors: Errors = field(default_factory=Errors)
    last_motion_errors: Errors = field(default_factory=Errors)
    control_command_success_rate: float = 0.0
    robot_mode: RobotMode = RobotMode.USER_STOPPED
    time: int = 0

    def __post_init__(self) -> None:
        for f in dataclasses.fields(self):
            length = f.metadata.get("length")
            if length is None:
                continue
            values = tuple(float(v) for v in getattr(self, f.name))
            if len(values) != length:
                raise ValueError(
                    f"{f.name} needs {length} values, got {len(values)}"
                )
            setattr(self, f.name, values)
        for name in ("current_errors", "last_motion_errors"):
            value = getattr(self, name)
            if not isinstance(value, Errors):
                setattr(self, name, Errors(value))
        for name in ("m_ee", "m_load", "m_total", "control_command_success_rate"):
            setattr(self, name, float(getattr(self, name)))
        self.robot_mode = RobotMode(self.robot_mode)
        self.time = int(self.time)

    def to_dict(self) -> dict[str, Any]:
        """Plain mapping of every field, in declaration order."""
        result: dict[str, Any] = {}
        for f in dataclasses.fields(self):
            value = getattr(self, f.name)
            if isinstance(value, tuple):
                value = list(value)
            elif isinstance(value, Errors):
                value = list(value.active())
            elif isinstance(value, RobotMode):
                value = str(value)
            result[f.name] = value
        return result

    def to_json(self) -> str:
        """The state as a JSON object."""
        return json.dumps(self.to_dict())

    def __str__(self) -> str:
        return self.to_json()

    def copy(self) -> RobotState:
        """An independent copy of this state."""
        return dataclasses.replace(self)