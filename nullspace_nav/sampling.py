"""Sampling helpers: angle wrapping, noise, sample weights and input smoothing."""

from __future__ import annotations

import math
from typing import Iterable, Sequence

import numpy as np

from .types import VxVyOmega


def wrap_angle(yaw: float, center_yaw: float) -> float:
    """Wrap ``yaw`` into ``[center_yaw - pi, center_yaw + pi)``."""
    return yaw - 2.0 * math.pi * math.floor((yaw - center_yaw + math.pi) / (2.0 * math.pi))


def savitzky_golay_coeffs(half_window_size: int, poly_order: int) -> np.ndarray:
    """Smoothing coefficients for the centre sample of a window of ``2n+1`` points."""
    n = int(half_window_size)
    if n < 0:
        raise ValueError("half window size must not be negative")
    if poly_order < 0:
        raise ValueError("polynomial order must not be negative")
    window = np.linspace(-n, n, 2 * n + 1)
    x = np.vander(window, int(poly_order) + 1, increasing=True)
    coeff_mat = np.linalg.inv(x.T @ x) @ x.T
    return coeff_mat[0].copy()


def _vector(item: VxVyOmega | Iterable[float]) -> np.ndarray:
    if isinstance(item, VxVyOmega):
        return item.as_array()
    vec = np.asarray(item, dtype=float).ravel()
    if vec.size != 3:
        raise ValueError(f"expected 3 values, got {vec.size}")
    return vec


class SavitzkyGolayFilter:
    """Smooths the first input of a sequence using the past filtered inputs."""

    def __init__(
        self, half_window_size: int, poly_order: int, horizon: int | None = None
    ) -> None:
        if horizon is not None and half_window_size > horizon - 1:
            raise ValueError(
                "half window size must be less than or equal to (prediction_horizon)-1"
            )
        self.half_window_size = int(half_window_size)
        self.poly_order = int(poly_order)
        self.coeffs = savitzky_golay_coeffs(self.half_window_size, self.poly_order)
        self.history: list[np.ndarray] = [np.zeros(3) for _ in range(self.half_window_size)]

    def apply(self, input_seq: Sequence[VxVyOmega | Iterable[float]]) -> VxVyOmega:
        """Return the smoothed first input and record it in the history."""
        n = self.half_window_size
        if len(input_seq) < n + 1:
            raise ValueError(f"input sequence needs at least {n + 1} entries")
        window = self.history + [_vector(item) for item in input_seq[: n + 1]]
        filtered = self.coeffs @ np.vstack(window)
        if n > 0:
            self.history = self.history[1:] + [filtered.copy()]
        result = VxVyOmega()
        result.update(filtered)
        return result


def generate_noise(
    rng: np.random.Generator, sigma: Sequence[Iterable[float]], num_samples: int
) -> np.ndarray:
    """Gaussian noise of shape ``(num_samples, len(sigma), 3)`` with per-entry std ``sigma``."""
    scale = np.array([_vector(row) for row in sigma], dtype=float).reshape(-1, 3)
    if num_samples < 0:
        raise ValueError("number of samples must not be negative")
    return rng.normal(0.0, scale, size=(int(num_samples),) + scale.shape)


def sample_weights(costs: Sequence[float], param_lambda: float) -> np.ndarray:
    """Normalised exponential weights, favouring low costs."""
    values = np.asarray(costs, dtype=float)
    if values.size == 0:
        raise ValueError("costs must not be empty")
    with np.errstate(invalid="ignore", over="ignore"):
        shifted = np.exp((-1.0 / param_lambda) * (values - values.min()))
        return shifted / shifted.sum()


def cost_ranking(costs: Sequence[float]) -> np.ndarray:
    """Sample indices ordered from the lowest to the highest cost."""
    return np.argsort(np.asarray(costs, dtype=float), kind="stable")