# pandactl

Building blocks for commanding a seven-joint research robot arm: its state and
error types, signal filters, and rate limiters for commanded motions.

## What it provides

- `pandactl.errors`:
  - `ERROR_NAMES` lists the 41 error flags the robot reports, in order.
  - `Errors` holds one boolean per flag, and each flag can be read as an
    attribute of the same name, such as `errors.joint_reflex`.
  - An `Errors` value is truthy when any flag is set.
  - `active()` returns the names of the set flags.
  - `as_tuple()` returns all the flags.
  - `str()` gives the active names as a JSON array, for example
    `["joint_reflex", "power_limit_violation"]`.
- `pandactl.robot_state`:
  - `RobotState` is a dataclass with the full measured and commanded robot state. Poses are
    16-value column-major 4x4 matrices, and `time` is in milliseconds.
  - Each array field is checked for its length when the state is built. A wrong
    length raises `ValueError`.
  - `to_dict()`, `to_json()` and `str()` give a JSON dump of the state.
  - `copy()` returns an independent copy.
  - `RobotMode` is an enum whose `str()` is a readable name such as
    `User stopped`.
- `pandactl.lowpass_filter`:
  - `lowpass_filter` is a first-order low-pass filter for scalar signals.
  - `cartesian_lowpass_filter` filters a column-major 4x4 pose. It low-passes
    the translation and applies spherical interpolation to the rotation with
    the same gain.
  - `MAX_CUTOFF_FREQUENCY` (1000.0) and `DEFAULT_CUTOFF_FREQUENCY` (100.0) are
    the cutoff frequency constants.
- `pandactl.rate_limiting`: limits on velocity, acceleration and jerk, all
  assuming a control period of `DELTA_T` = 1 ms.
  - `limit_rate` limits only the first derivative of each value.
  - `limit_rate_velocity` and `limit_rate_position` work on a single value.
  - `limit_rate_joint_velocities` and `limit_rate_joint_positions` work joint
    by joint.
  - `limit_rate_cartesian_velocity` limits a six-value twist. The
    translational and rotational parts are limited separately.
  - `limit_rate_cartesian_pose` limits a 16-value pose.
  - `is_homogeneous_transformation` checks a column-major 4x4 transform.

## Installation

```
pip install .
```

To run the tests, install the `test` extra:

```
pip install .[test]
pytest
```

## Example

```python
from pandactl.lowpass_filter import lowpass_filter
from pandactl.rate_limiting import limit_rate_joint_velocities

smoothed = lowpass_filter(0.001, 1.0, 0.0, 100.0)

limited = limit_rate_joint_velocities(
    max_velocity=[2.0] * 7,
    max_acceleration=[10.0] * 7,
    max_jerk=[5000.0] * 7,
    commanded_velocities=[1.0] * 7,
    last_commanded_velocities=[0.0] * 7,
    last_commanded_accelerations=[0.0] * 7,
)
```

## Errors raised

Invalid input raises `ValueError`. This includes:

- values that are NaN or infinite;
- non-positive cutoff frequencies;
- negative sample times;
- poses that are not valid homogeneous transforms.

## What it does not do

The package does not talk to a robot. It has no:

- network connection or message transport;
- control loop;
- command-line tool;
- kinematic or dynamic model.

It only provides the data types, filters and limiters that such a controller
would use.