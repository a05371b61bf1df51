"""Hierarchical quadratic programming over prioritised tasks.

Each task is solved in the nullspace of all higher-priority equality
constraints. Inequality constraints of higher-priority tasks stay hard,
while those of the current task are relaxed by non-negative slack
variables.
"""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np
from scipy.optimize import minimize

from .tasks import Task, TaskNotConstructedError

logger = logging.getLogger(__name__)

QP_VARIABLE_BOUND = 100.0


def nullspace(a: np.ndarray) -> np.ndarray:
    """Orthonormal basis of the nullspace of ``a``, one basis vector per column."""
    a = np.atleast_2d(np.asarray(a, dtype=float))
    rows, cols = a.shape
    if cols == 0:
        return np.zeros((0, 0))
    if rows == 0:
        return np.eye(cols)
    _, s, vh = np.linalg.svd(a, full_matrices=True)
    tol = max(rows, cols) * np.finfo(float).eps * (s.max() if s.size else 0.0)
    rank = int(np.sum(s > tol))
    return vh[rank:].T.copy()


def _bound_array(value: float | Sequence[float], n: int) -> np.ndarray:
    arr = np.asarray(value, dtype=float)
    if arr.ndim == 0:
        return np.full(n, float(arr))
    arr = arr.ravel()
    if arr.size != n:
        raise ValueError(f"bound holds {arr.size} values, expected {n}")
    return arr


def solve_qp(
    h: np.ndarray,
    c: Sequence[float],
    d: np.ndarray,
    f: Sequence[float],
    lower: float | Sequence[float] = -QP_VARIABLE_BOUND,
    upper: float | Sequence[float] = QP_VARIABLE_BOUND,
) -> np.ndarray:
    """Minimise ``0.5 x'Hx + c'x`` subject to ``Dx <= f`` and ``lower <= x <= upper``."""
    c = np.asarray(c, dtype=float).ravel()
    n = c.size
    h = np.asarray(h, dtype=float).reshape(n, n)
    f = np.asarray(f, dtype=float).ravel()
    d = np.asarray(d, dtype=float).reshape(f.size, n)
    lo = _bound_array(lower, n)
    hi = _bound_array(upper, n)
    if np.any(lo > hi):
        raise ValueError("lower bound exceeds upper bound")
    if n == 0:
        return np.zeros(0)

    sym = 0.5 * (h + h.T)

    def objective(x: np.ndarray) -> float:
        return float(0.5 * x @ sym @ x + c @ x)

    def gradient(x: np.ndarray) -> np.ndarray:
        return sym @ x + c

    constraints = []
    if f.size:
        constraints.append(
            {"type": "ineq", "fun": lambda x: f - d @ x, "jac": lambda x: -d}
        )

    x0 = np.clip(np.zeros(n), lo, hi)
    result = minimize(
        objective,
        x0,
        jac=gradient,
        method="SLSQP",
        bounds=list(zip(lo, hi)),
        constraints=constraints,
        options={"maxiter": 500, "ftol": 1e-12},
    )
    if not result.success:
        logger.warning("QP solver did not converge: %s", result.message)
    return np.asarray(result.x, dtype=float)


class HQP:
    """Solves a stack of tasks in order of priority, the first added being highest."""

    def __init__(self) -> None:
        self.tasks: list[Task] = []
        self._reset()

    def _reset(self) -> None:
        self.x_star = np.zeros(0)
        self.x_star_list: list[np.ndarray] = []
        self.z_prev = np.zeros((0, 0))
        self.z_list: list[np.ndarray] = []
        self.d_list: list[np.ndarray] = []
        self.f_list: list[np.ndarray] = []
        self.v_list: list[np.ndarray] = []

    def add_task(self, task: Task) -> None:
        self.tasks.append(task)

    def describe(self) -> str:
        """Dump of every task in priority order."""
        return "\n".join(
            f"*** [Task {i}] ***\n{task.describe()}"
            for i, task in enumerate(self.tasks, start=1)
        )

    def solve(self) -> np.ndarray:
        """Return the decision vector that best satisfies the task hierarchy."""
        if not self.tasks:
            raise ValueError("no tasks to solve")
        for task in self.tasks:
            if not task.constructed:
                raise TaskNotConstructedError(f"task {task.name!r} is not constructed yet")
        self._reset()

        first = self.tasks[0]
        a1 = first.a
        self.x_star = a1.T @ np.linalg.solve(a1 @ a1.T, first.b)
        self.z_prev = nullspace(a1)
        self._record(first, np.zeros(first.d.shape[0]))

        for task in self.tasks[1:]:
            n_z = self.z_prev.shape[1]
            solution = solve_qp(
                self._hessian(task),
                self._gradient(task),
                self._ineq_matrix(task),
                self._ineq_vector(task),
            )
            z, v = solution[:n_z], solution[n_z:]
            self.x_star = self.x_star + self.z_prev @ z
            self.z_prev = self.z_prev @ nullspace(task.a @ self.z_prev)
            self._record(task, v)
        return self.x_star

    def _record(self, task: Task, v: np.ndarray) -> None:
        self.x_star_list.append(self.x_star.copy())
        self.z_list.append(self.z_prev)
        self.d_list.append(task.d)
        self.f_list.append(task.f)
        self.v_list.append(np.asarray(v, dtype=float))

    def _hessian(self, task: Task) -> np.ndarray:
        az = task.a @ self.z_prev
        n_z = az.shape[1]
        m = task.d.shape[0]
        h = np.zeros((n_z + m, n_z + m))
        h[:n_z, :n_z] = az.T @ az
        h[n_z:, n_z:] = np.eye(m)
        return h

    def _gradient(self, task: Task) -> np.ndarray:
        residual = task.a @ self.x_star - task.b
        head = self.z_prev.T @ task.a.T @ residual
        return np.concatenate([head, np.zeros(task.d.shape[0])])

    def _ineq_matrix(self, task: Task) -> np.ndarray:
        m = task.d.shape[0]
        blocks = [np.hstack([task.d @ self.z_prev, -np.eye(m)])]
        for d_p in reversed(self.d_list):
            blocks.append(np.hstack([d_p @ self.z_prev, np.zeros((d_p.shape[0], m))]))
        bottom = np.zeros((m, self.z_prev.shape[1] + m))
        bottom[:, self.z_prev.shape[1]:] = -np.eye(m)
        blocks.append(bottom)
        return np.vstack(blocks)

    def _ineq_vector(self, task: Task) -> np.ndarray:
        parts = [task.f - task.d @ self.x_star]
        for d_p, f_p, v_p in zip(
            reversed(self.d_list), reversed(self.f_list), reversed(self.v_list)
        ):
            parts.append(f_p - d_p @ self.x_star + v_p)
        parts.append(np.zeros(task.d.shape[0]))
        return np.concatenate(parts)