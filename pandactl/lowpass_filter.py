"""First-order low-pass filters for scalar signals and Cartesian poses."""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from pandactl.rate_limiting import _quaternion_from_matrix

MAX_CUTOFF_FREQUENCY = 1000.0
"""Maximum cutoff frequency."""

DEFAULT_CUTOFF_FREQUENCY = 100.0
"""Default cutoff frequency."""


def _check_parameters(sample_time: float, cutoff_frequency: float) -> None:
    if sample_time < 0 or not math.isfinite(sample_time):
        raise ValueError("lowpass-filter: sample_time is negative, infinite or NaN.")
    if cutoff_frequency <= 0 or not math.isfinite(cutoff_frequency):
        raise ValueError(
            "lowpass-filter: cutoff_frequency is zero, negative, infinite or NaN."
        )


def _gain(sample_time: float, cutoff_frequency: float) -> float:
    return sample_time / (sample_time + 1.0 / (2.0 * math.pi * cutoff_frequency))


def lowpass_filter(
    sample_time: float, y: float, y_last: float, cutoff_frequency: float
) -> float:
    """Apply a first-order low-pass filter to one sample of a signal.

    Raises ValueError if a value is infinite or NaN, if the cutoff frequency
    is not positive or if the sample time is negative.
    """
    _check_parameters(sample_time, cutoff_frequency)
    if not math.isfinite(y) or not math.isfinite(y_last):
        raise ValueError(
            "lowpass-filter: current or past input value of the signal to be filtered "
            "is infinite or NaN."
        )
    gain = _gain(sample_time, cutoff_frequency)
    return gain * y + (1.0 - gain) * y_last


def _slerp(start: np.ndarray, end: np.ndarray, t: float) -> np.ndarray:
    one = 1.0 - float(np.finfo(float).eps)
    d = float(start @ end)
    abs_d = abs(d)
    if abs_d >= one:
        scale0 = 1.0 - t
        scale1 = t
    else:
        theta = math.acos(abs_d)
        sin_theta = math.sin(theta)
        scale0 = math.sin((1.0 - t) * theta) / sin_theta
        scale1 = math.sin(t * theta) / sin_theta
    if d < 0:
        scale1 = -scale1
    return scale0 * start + scale1 * end


def _quaternion_to_matrix(quaternion: np.ndarray) -> np.ndarray:
    w, x, y, z = quaternion / np.linalg.norm(quaternion)
    return np.array(
        [
            [1 - 2 * (y * y + z * z), 2 * (x * y - z * w), 2 * (x * z + y * w)],
            [2 * (x * y + z * w), 1 - 2 * (x * x + z * z), 2 * (y * z - x * w)],
            [2 * (x * z - y * w), 2 * (y * z + x * w), 1 - 2 * (x * x + y * y)],
        ]
    )


def cartesian_lowpass_filter(
    sample_time: float,
    y: Sequence[float],
    y_last: Sequence[float],
    cutoff_frequency: float,
) -> tuple[float, ...]:
    """Filter a column-major 4x4 pose.

    The translation is low-pass filtered and the rotation is interpolated
    spherically with the same gain.
    """
    _check_parameters(sample_time, cutoff_frequency)
    current = np.asarray(y, dtype=float)
    last = np.asarray(y_last, dtype=float)
    if current.size != 16 or last.size != 16:
        raise ValueError("lowpass-filter: poses need 16 values.")
    if not np.all(np.isfinite(current)):
        raise ValueError("lowpass-filter: y is infinite or NaN.")
    if not np.all(np.isfinite(last)):
        raise ValueError("lowpass-filter: y_last is infinite or NaN.")

    transform = current.reshape(4, 4, order="F").copy()
    transform_last = last.reshape(4, 4, order="F")
    gain = _gain(sample_time, cutoff_frequency)

    transform[:3, 3] = gain * transform[:3, 3] + (1.0 - gain) * transform_last[:3, 3]
    orientation = _quaternion_from_matrix(transform[:3, :3])
    orientation_last = _quaternion_from_matrix(transform_last[:3, :3])
    transform[:3, :3] = _quaternion_to_matrix(_slerp(orientation_last, orientation, gain))
    return tuple(float(v) for v in transform.flatten(order="F"))