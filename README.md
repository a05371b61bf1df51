# nullspace_nav

Building blocks for a sampling-based model predictive controller of a
four-wheel independent steering (4WIDS) vehicle. Trajectories are produced by a
hierarchical quadratic program (HQP) in which every task is solved in the
nullspace of the higher-priority tasks. Alongside the solver the package holds
the value types, sampling and smoothing helpers, visualisation markers and a
joystick-to-twist mapper.

## Modules

| Module | Purpose |
| --- | --- |
| `nullspace_nav.types` | Pose (`XYYaw`), velocity with box limits (`VxVyOmega`), 8-DoF wheel command (`VehicleCommand8D`), `Twist`, `Marker` / `MarkerType`, `quaternion_from_yaw`, `yaw_from_quaternion`, and the parameter dataclasses `Params`, `NavigationParams`, `TargetSystemParams`, `ControllerParams`. |
| `nullspace_nav.tasks` | HQP tasks over the stacked vector `[x_0, u_0, ..., x_{T-1}, u_{T-1}, x_T]`: the base `Task`, `SatisfyStateEquation` (initial pose, integration and `VelocityLimits`), `TrackTargetState` (poses and velocities at chosen steps) and `MinimizeVelocityAndAcceleration`. Asking a task for its dump before `construct()` raises `TaskNotConstructedError`. |
| `nullspace_nav.hqp` | `nullspace` (orthonormal basis), `solve_qp` (box- and inequality-constrained QP via SciPy's SLSQP) and the `HQP` solver that stacks tasks by priority. |
| `nullspace_nav.sampling` | `wrap_angle`, Savitzky–Golay smoothing (`savitzky_golay_coeffs`, `SavitzkyGolayFilter`), Gaussian noise (`generate_noise`), exponential sample weights (`sample_weights`) and `cost_ranking`. |
| `nullspace_nav.markers` | Marker lists for via states, the optimal trajectory and sampled trajectories, and an `OverlayText` label built by `overlay_text`. |
| `nullspace_nav.joy` | `JoyController` mapping joystick axes and buttons to a `Twist`, configured by `JoyConfig`. |

## Examples

Solving a small task hierarchy:

```python
from nullspace_nav.hqp import HQP
from nullspace_nav.tasks import (
    MinimizeVelocityAndAcceleration,
    SatisfyStateEquation,
    TrackTargetState,
)

horizon = 3
sse = SatisfyStateEquation(horizon=horizon, dt=0.1, initial_state=(0.0, 0.0, 0.0)).construct()

tts = TrackTargetState(horizon=horizon)
tts.add_tracking_pose(3, 0.3, 0.0, 0.0)
tts.construct()

smooth = MinimizeVelocityAndAcceleration(horizon=horizon, previous_command=(0.0, 0.0, 0.0)).construct()

solver = HQP()
for task in (sse, tts, smooth):      # first added = highest priority
    solver.add_task(task)
x = solver.solve()                   # length 6 * horizon + 3 = 21
print(solver.describe())
```

Smaller helpers:

```python
import numpy as np

from nullspace_nav.hqp import nullspace
from nullspace_nav.sampling import sample_weights, savitzky_golay_coeffs, wrap_angle

wrap_angle(7.0, 0.0)                          # about 0.717, within pi of 0
nullspace(np.array([[1.0, 1.0, 0.0]])).shape  # (3, 2)
savitzky_golay_coeffs(3, 2)                   # 7 smoothing weights
sample_weights([1.0, 2.0, 3.0], 0.1)          # normalised, lowest cost weighs most
```

Joystick teleoperation:

```python
from nullspace_nav.joy import JoyController

joy = JoyController()
cmd = joy.on_joy(axes=[0.0, 1.0, 0.0, 0.0, 0.0], buttons=[0, 0, 0, 0, 0, 0])
cmd.linear_x    # 3.0 with the default JoyConfig
```

Holding the top-left button halves the command and the top-right button
doubles it.

## What the package does not do

It provides the pieces of the controller, not the whole of it. There is no
grid-map type, no stage or terminal cost functions over costmaps, no wheel
kinematics conversion, no reference costmap generation from a path, and no
controller object that runs the full sample–solve–weight loop or selects via
states along a path. Nothing here talks to a robot, a simulator or a message
bus: inputs are passed in as plain values and results are returned, and there
is no command-line program.

## Requirements

Python 3.10 or later, with NumPy and SciPy. Tests use pytest
(`pip install .[test]`, then `pytest`).