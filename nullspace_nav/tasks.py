"""Prioritised least-squares tasks over a stacked state/control trajectory.

The decision vector is laid out as
``[x_0, u_0, x_1, u_1, ..., x_{T-1}, u_{T-1}, x_T]`` where every state
``x_t = (px, py, theta)`` and every control ``u_t = (vx, vy, omega)``.
Each task holds an equality part ``A x = b`` and an inequality part
``D x <= f``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

import numpy as np

NX = 3
NU = 3
NXNU = NX + NU


class TaskNotConstructedError(RuntimeError):
    """Raised when a task's matrices are requested before they exist."""


def _num_variables(horizon: int) -> int:
    return NXNU * horizon + NX


def _check_horizon(horizon: int, minimum: int = 0) -> int:
    horizon = int(horizon)
    if horizon < minimum:
        raise ValueError(f"prediction horizon must be at least {minimum}, got {horizon}")
    return horizon


class Task:
    """Equality constraint ``a @ x = b`` and inequality constraint ``d @ x <= f``."""

    def __init__(
        self,
        name: str = "undefined",
        a: np.ndarray | None = None,
        b: Iterable[float] | None = None,
        d: np.ndarray | None = None,
        f: Iterable[float] | None = None,
    ) -> None:
        self.name = name
        self.a = None if a is None else np.atleast_2d(np.asarray(a, dtype=float))
        self.b = None if b is None else np.asarray(b, dtype=float).ravel()
        self.d = None if d is None else np.atleast_2d(np.asarray(d, dtype=float))
        self.f = None if f is None else np.asarray(f, dtype=float).ravel()

    @property
    def constructed(self) -> bool:
        return all(m is not None for m in (self.a, self.b, self.d, self.f))

    def describe(self) -> str:
        """Human-readable dump of the task's name and matrices."""
        if not self.constructed:
            raise TaskNotConstructedError(f"task {self.name!r} is not constructed yet")
        lines = [f"### Task Name: {self.name}"]
        for label, value in (("A", self.a), ("b", self.b), ("D", self.d), ("f", self.f)):
            column = value if value.ndim == 2 else value.reshape(-1, 1)
            lines.append(f"{label}: ({column.shape[0]}, {column.shape[1]})")
            lines.append(np.array2string(column))
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.describe()


@dataclass
class VelocityLimits:
    vx_min: float = -2.0
    vx_max: float = 2.0
    vy_min: float = -2.0
    vy_max: float = 2.0
    omega_min: float = -1.57
    omega_max: float = 1.57

    def bounds(self) -> np.ndarray:
        """Right-hand sides of the six per-step inequality rows."""
        return np.array(
            [
                self.vx_max,
                -self.vx_min,
                self.vy_max,
                -self.vy_min,
                self.omega_max,
                -self.omega_min,
            ],
            dtype=float,
        )


class SatisfyStateEquation(Task):
    """Fix the initial pose, enforce ``x_t = x_{t-1} + dt * u_{t-1}`` and velocity limits."""

    def __init__(
        self,
        horizon: int = 0,
        dt: float = 0.1,
        initial_state: Iterable[float] = (0.0, 0.0, 0.0),
        limits: VelocityLimits | None = None,
    ) -> None:
        super().__init__("Satisfy State Equation")
        self.horizon = horizon
        self.dt = dt
        self.initial_state = tuple(float(v) for v in initial_state)
        self.limits = limits if limits is not None else VelocityLimits()

    def construct(self) -> "SatisfyStateEquation":
        horizon = _check_horizon(self.horizon)
        if len(self.initial_state) != NX:
            raise ValueError(f"initial state needs {NX} values")
        n = _num_variables(horizon)
        eye = np.eye(NX)

        a = np.zeros((NX * (horizon + 1), n))
        b = np.zeros(NX * (horizon + 1))
        a[:NX, :NX] = eye
        b[:NX] = self.initial_state
        for t in range(1, horizon + 1):
            row, col = NX * t, NXNU * (t - 1)
            a[row : row + NX, col : col + NX] = -eye
            a[row : row + NX, col + NX : col + NXNU] = -self.dt * eye
            a[row : row + NX, col + NXNU : col + NXNU + NX] = eye

        d = np.zeros((2 * NU * horizon, n))
        for t in range(horizon):
            row, col = 2 * NU * t, NXNU * t + NX
            for k in range(NU):
                d[row + 2 * k, col + k] = 1.0
                d[row + 2 * k + 1, col + k] = -1.0
        f = np.tile(self.limits.bounds(), horizon)

        self.a, self.b, self.d, self.f = a, b, d, f
        return self


class TrackTargetState(Task):
    """Track poses and velocities at chosen time steps."""

    err_x_penalty = 1.0
    err_y_penalty = 1.0
    err_theta_penalty = 1.0
    err_vx_penalty = 1.0
    err_vy_penalty = 1.0
    err_omega_penalty = 1.0

    def __init__(self, horizon: int = 0) -> None:
        super().__init__("Track Target State")
        self.horizon = horizon
        self.tracking_poses: list[tuple[int, np.ndarray]] = []
        self.tracking_velocities: list[tuple[int, np.ndarray]] = []

    def add_tracking_pose(self, step: int, x: float, y: float, theta: float) -> None:
        """Track a pose at ``step``; ``theta`` should lie within pi of the current yaw."""
        self.tracking_poses.append((int(step), np.array([x, y, theta], dtype=float)))

    def add_tracking_velocity(self, step: int, vx: float, vy: float, omega: float) -> None:
        self.tracking_velocities.append((int(step), np.array([vx, vy, omega], dtype=float)))

    def construct(self) -> "TrackTargetState":
        horizon = _check_horizon(self.horizon)
        n = _num_variables(horizon)
        rows = NX * (len(self.tracking_poses) + len(self.tracking_velocities))
        a = np.zeros((rows, n))
        b = np.zeros(rows)

        pose_weights = np.diag(
            [self.err_x_penalty, self.err_y_penalty, self.err_theta_penalty]
        )
        for i, (step, pose) in enumerate(self.tracking_poses):
            if not 0 <= step <= horizon:
                raise ValueError(f"pose step {step} is outside the horizon 0..{horizon}")
            col = NXNU * step
            a[NX * i : NX * (i + 1), col : col + NX] = pose_weights
            b[NX * i : NX * (i + 1)] = pose

        bias = NX * len(self.tracking_poses)
        vel_weights = np.diag(
            [self.err_vx_penalty, self.err_vy_penalty, self.err_omega_penalty]
        )
        for i, (step, vel) in enumerate(self.tracking_velocities):
            if not 0 <= step < horizon:
                raise ValueError(
                    f"velocity step {step} is outside the horizon 0..{horizon - 1}"
                )
            col = NX + NXNU * step
            row = bias + NX * i
            a[row : row + NU, col : col + NU] = vel_weights
            b[row : row + NX] = vel

        self.a, self.b = a, b
        self.d = np.zeros((1, n))
        self.f = np.zeros(1)
        return self


class MinimizeVelocityAndAcceleration(Task):
    """Keep the command close to the previous one and smooth the velocity profile."""

    cmd_change_penalty = 5.0
    acc_penalty = 0.6
    vel_penalty = 0.4

    def __init__(
        self,
        horizon: int = 0,
        previous_command: Iterable[float] = (0.0, 0.0, 0.0),
    ) -> None:
        super().__init__("Minimize Velocity and Acceleration")
        self.horizon = horizon
        self.previous_command = tuple(float(v) for v in previous_command)

    def construct(self) -> "MinimizeVelocityAndAcceleration":
        horizon = _check_horizon(self.horizon, minimum=2)
        if len(self.previous_command) != NU:
            raise ValueError(f"previous command needs {NU} values")
        n = _num_variables(horizon)
        eye = np.eye(NU)

        a = np.zeros((NU * horizon, n))
        b = np.zeros(NU * horizon)
        a[:NU, NXNU + NX : 2 * NXNU] = self.cmd_change_penalty * eye
        b[:NU] = self.cmd_change_penalty * np.asarray(self.previous_command)

        for t in range(1, horizon):
            row, col = NU * t, NX + NXNU * (t - 1)
            a[row : row + NU, col : col + NU] = -self.acc_penalty * eye
            a[row : row + NU, col + NXNU : col + NXNU + NU] = (
                self.acc_penalty + self.vel_penalty
            ) * eye

        self.a, self.b = a, b
        self.d = np.zeros((1, n))
        self.f = np.zeros(1)
        return self