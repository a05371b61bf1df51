import numpy as np
import pytest

from nullspace_nav.tasks import (
    MinimizeVelocityAndAcceleration,
    SatisfyStateEquation,
    Task,
    TaskNotConstructedError,
    TrackTargetState,
    VelocityLimits,
)


def _stack(states, controls):
    parts = []
    for state, control in zip(states, controls):
        parts.extend(state)
        parts.extend(control)
    parts.extend(states[-1])
    return np.array(parts, dtype=float)


def _rollout(initial, controls, dt):
    states = [np.asarray(initial, dtype=float)]
    for control in controls:
        states.append(states[-1] + dt * np.asarray(control, dtype=float))
    return states


def test_describe_requires_construction():
    task = SatisfyStateEquation(horizon=3)
    with pytest.raises(TaskNotConstructedError):
        task.describe()


def test_describe_contains_name_after_construction():
    task = SatisfyStateEquation(horizon=2).construct()
    text = task.describe()
    assert text.startswith("### Task Name: Satisfy State Equation")
    assert "A: (9, 15)" in text


def test_plain_task_from_matrices_is_constructed():
    task = Task("custom", a=np.eye(2), b=[1.0, 2.0], d=np.zeros((1, 2)), f=[0.0])
    assert task.constructed
    np.testing.assert_array_equal(task.b, [1.0, 2.0])
    assert Task("empty").constructed is False


@pytest.mark.parametrize("horizon", [1, 3, 6])
def test_state_equation_shapes(horizon):
    task = SatisfyStateEquation(horizon=horizon, dt=0.05).construct()
    n = 6 * horizon + 3
    assert task.a.shape == (3 * (horizon + 1), n)
    assert task.b.shape == (3 * (horizon + 1),)
    assert task.d.shape == (6 * horizon, n)
    assert task.f.shape == (6 * horizon,)


def test_state_equation_satisfied_by_rollout():
    dt = 0.1
    initial = (1.0, -2.0, 0.3)
    controls = [(0.5, 0.1, 0.2), (1.0, -0.5, -0.1), (0.0, 0.0, 1.0), (-1.0, 0.2, 0.0)]
    task = SatisfyStateEquation(horizon=len(controls), dt=dt, initial_state=initial).construct()
    x = _stack(_rollout(initial, controls, dt), controls)
    np.testing.assert_allclose(task.a @ x, task.b, atol=1e-12)


def test_state_equation_rejects_wrong_initial_state():
    dt = 0.1
    controls = [(0.5, 0.0, 0.0), (0.5, 0.0, 0.0)]
    task = SatisfyStateEquation(horizon=2, dt=dt, initial_state=(0.0, 0.0, 0.0)).construct()
    x = _stack(_rollout((1.0, 0.0, 0.0), controls, dt), controls)
    assert not np.allclose(task.a @ x, task.b)


def test_velocity_limits_inequalities():
    limits = VelocityLimits()
    task = SatisfyStateEquation(horizon=2, limits=limits).construct()
    np.testing.assert_array_equal(task.f[:6], limits.bounds())
    inside = _stack([(0, 0, 0)] * 3, [(1.0, -1.0, 0.5), (-1.5, 1.5, -1.0)])
    assert np.all(task.d @ inside <= task.f)
    outside = _stack([(0, 0, 0)] * 3, [(3.0, 0.0, 0.0), (0.0, 0.0, 0.0)])
    assert np.any(task.d @ outside > task.f)


def test_state_equation_negative_horizon():
    with pytest.raises(ValueError):
        SatisfyStateEquation(horizon=-1).construct()


def test_tracking_pose_and_velocity_satisfied():
    horizon = 4
    task = TrackTargetState(horizon=horizon)
    task.add_tracking_pose(2, 1.0, 2.0, 0.5)
    task.add_tracking_pose(4, 3.0, -1.0, 1.0)
    task.add_tracking_velocity(1, 0.3, 0.2, 0.1)
    task.construct()
    assert task.a.shape == (9, 6 * horizon + 3)
    states = [(0.0, 0.0, 0.0)] * (horizon + 1)
    states[2] = (1.0, 2.0, 0.5)
    states[4] = (3.0, -1.0, 1.0)
    controls = [(0.0, 0.0, 0.0)] * horizon
    controls[1] = (0.3, 0.2, 0.1)
    x = _stack(states, controls)
    np.testing.assert_allclose(task.a @ x, task.b)
    assert task.d.shape == (1, 6 * horizon + 3)
    np.testing.assert_array_equal(task.f, [0.0])


def test_tracking_step_out_of_range():
    task = TrackTargetState(horizon=3)
    task.add_tracking_pose(4, 0.0, 0.0, 0.0)
    with pytest.raises(ValueError):
        task.construct()
    vel_task = TrackTargetState(horizon=3)
    vel_task.add_tracking_velocity(3, 0.0, 0.0, 0.0)
    with pytest.raises(ValueError):
        vel_task.construct()


def test_min_vel_acc_previous_command_row():
    task = MinimizeVelocityAndAcceleration(horizon=3, previous_command=(1.0, -0.5, 0.2)).construct()
    penalty = MinimizeVelocityAndAcceleration.cmd_change_penalty
    np.testing.assert_allclose(task.b[:3], penalty * np.array([1.0, -0.5, 0.2]))
    np.testing.assert_allclose(task.b[3:], 0.0)
    assert task.a.shape == (9, 21)
    np.testing.assert_allclose(task.a[:3, 9:12], penalty * np.eye(3))


def test_min_vel_acc_smoothing_rows():
    task = MinimizeVelocityAndAcceleration(horizon=3).construct()
    acc = MinimizeVelocityAndAcceleration.acc_penalty
    vel = MinimizeVelocityAndAcceleration.vel_penalty
    np.testing.assert_allclose(task.a[3:6, 3:6], -acc * np.eye(3))
    np.testing.assert_allclose(task.a[3:6, 9:12], (acc + vel) * np.eye(3))
    np.testing.assert_allclose(task.a[6:9, 9:12], -acc * np.eye(3))
    np.testing.assert_allclose(task.a[6:9, 15:18], (acc + vel) * np.eye(3))
    # states are untouched by this task
    for t in range(4):
        np.testing.assert_array_equal(task.a[:, 6 * t : 6 * t + 3], 0.0)


def test_min_vel_acc_zero_motion_is_optimal_without_previous_command():
    task = MinimizeVelocityAndAcceleration(horizon=4).construct()
    x = np.zeros(6 * 4 + 3)
    np.testing.assert_allclose(task.a @ x - task.b, 0.0)


def test_min_vel_acc_short_horizon_rejected():
    with pytest.raises(ValueError):
        MinimizeVelocityAndAcceleration(horizon=1).construct()