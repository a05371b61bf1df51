"""Plain value types and parameter sets shared across the navigation stack."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterable, Iterator

import numpy as np

_TAU = 2.0 * math.pi


def _three(vec: Iterable[float]) -> tuple[float, float, float]:
    values = [float(v) for v in np.asarray(vec, dtype=float).ravel()]
    if len(values) != 3:
        raise ValueError(f"expected 3 values, got {len(values)}")
    return values[0], values[1], values[2]


@dataclass
class XYYaw:
    """Planar pose in the global frame; yaw is counter-clockwise positive."""

    x: float = 0.0
    y: float = 0.0
    yaw: float = 0.0

    dim = 3
    _fields = ("x", "y", "yaw")

    def unwrap(self) -> None:
        """Shift yaw by one turn towards [0, 2*pi] if it lies outside."""
        if self.yaw > _TAU:
            self.yaw -= _TAU
        elif self.yaw < 0.0:
            self.yaw += _TAU

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.yaw], dtype=float)

    def update(self, vec: Iterable[float]) -> None:
        self.x, self.y, self.yaw = _three(vec)

    def __getitem__(self, idx: int) -> float:
        try:
            return getattr(self, self._fields[idx])
        except (IndexError, TypeError):
            raise IndexError("Index out of range") from None

    def __setitem__(self, idx: int, value: float) -> None:
        if not isinstance(idx, int) or not 0 <= idx < 3:
            raise IndexError("Index out of range")
        setattr(self, self._fields[idx], float(value))

    def __iter__(self) -> Iterator[float]:
        return iter((self.x, self.y, self.yaw))


@dataclass
class VxVyOmega:
    """Twist command in the vehicle frame with box limits."""

    vx: float = 0.0
    vy: float = 0.0
    omega: float = 0.0
    vx_min: float = -2.0
    vx_max: float = 2.0
    vy_min: float = -2.0
    vy_max: float = 2.0
    omega_min: float = -1.57
    omega_max: float = 1.57

    dim = 3
    _fields = ("vx", "vy", "omega")

    def clamp(self) -> None:
        self.vx = max(self.vx_min, min(self.vx_max, self.vx))
        self.vy = max(self.vy_min, min(self.vy_max, self.vy))
        self.omega = max(self.omega_min, min(self.omega_max, self.omega))

    def as_array(self) -> np.ndarray:
        return np.array([self.vx, self.vy, self.omega], dtype=float)

    def update(self, vec: Iterable[float]) -> None:
        self.vx, self.vy, self.omega = _three(vec)

    def set_zero(self) -> None:
        self.vx = self.vy = self.omega = 0.0

    def __getitem__(self, idx: int) -> float:
        try:
            return getattr(self, self._fields[idx])
        except (IndexError, TypeError):
            raise IndexError("Index out of range") from None

    def __setitem__(self, idx: int, value: float) -> None:
        if not isinstance(idx, int) or not 0 <= idx < 3:
            raise IndexError("Index out of range")
        setattr(self, self._fields[idx], float(value))

    def __iter__(self) -> Iterator[float]:
        return iter((self.vx, self.vy, self.omega))


@dataclass
class VehicleCommand8D:
    """Steer angles [rad] and rotor speeds [rad/s] of a four-wheel vehicle."""

    steer_fl: float = 0.0
    steer_fr: float = 0.0
    steer_rl: float = 0.0
    steer_rr: float = 0.0
    rotor_fl: float = 0.0
    rotor_fr: float = 0.0
    rotor_rl: float = 0.0
    rotor_rr: float = 0.0

    dim = 8

    def as_array(self) -> np.ndarray:
        return np.array(
            [
                self.steer_fl,
                self.steer_fr,
                self.steer_rl,
                self.steer_rr,
                self.rotor_fl,
                self.rotor_fr,
                self.rotor_rl,
                self.rotor_rr,
            ],
            dtype=float,
        )


@dataclass
class Twist:
    """Linear and angular velocity command."""

    linear_x: float = 0.0
    linear_y: float = 0.0
    linear_z: float = 0.0
    angular_x: float = 0.0
    angular_y: float = 0.0
    angular_z: float = 0.0


class MarkerType(IntEnum):
    ARROW = 0
    CUBE = 1
    SPHERE = 2
    CYLINDER = 3
    LINE_STRIP = 4


@dataclass
class Marker:
    """A visualization marker."""

    frame_id: str = "map"
    stamp: float = 0.0
    ns: str = ""
    id: int = 0
    type: MarkerType = MarkerType.ARROW
    position: tuple[float, float, float] = (0.0, 0.0, 0.0)
    orientation: tuple[float, float, float, float] = (0.0, 0.0, 0.0, 1.0)
    scale: tuple[float, float, float] = (0.0, 0.0, 0.0)
    color: tuple[float, float, float, float] = (0.0, 0.0, 0.0, 0.0)
    lifetime: float = 0.0
    points: list[tuple[float, float, float]] = field(default_factory=list)


def quaternion_from_yaw(yaw: float) -> tuple[float, float, float, float]:
    """Quaternion (x, y, z, w) for a rotation about z, roll and pitch zero."""
    half = 0.5 * yaw
    return (0.0, 0.0, math.sin(half), math.cos(half))


def yaw_from_quaternion(x: float, y: float, z: float, w: float) -> float:
    """Yaw angle of a quaternion, handling the gimbal-lock cases."""
    sqx, sqy, sqz, sqw = x * x, y * y, z * z, w * w
    norm = sqx + sqy + sqz + sqw
    sarg = -2.0 * (x * z - w * y) / norm
    if sarg <= -0.99999:
        return -2.0 * math.atan2(y, x)
    if sarg >= 0.99999:
        return 2.0 * math.atan2(y, x)
    return math.atan2(2.0 * (x * y + w * z), sqw + sqx - sqy - sqz)


@dataclass
class NavigationParams:
    xy_goal_tolerance: float = 0.5
    yaw_goal_tolerance: float = 0.5


@dataclass
class TargetSystemParams:
    l_f: float = 0.5
    l_r: float = 0.5
    d_l: float = 0.5
    d_r: float = 0.5
    tire_radius: float = 0.2


@dataclass
class ControllerParams:
    name: str = "nullspace_mpc"
    control_interval: float = 0.05
    num_samples: int = 3000
    prediction_horizon: int = 30
    step_len_sec: float = 0.033
    param_exploration: float = 0.1
    param_lambda: float = 0.1
    param_alpha: float = 0.1
    sigma: list[float] = field(default_factory=lambda: [1.0, 1.0, 0.78])
    idx_via_states: list[int] = field(default_factory=lambda: [5, 10, 15, 20, 25])
    reduce_computation: bool = False
    weight_cmd_change: list[float] = field(default_factory=lambda: [0.0, 0.0, 0.0])
    weight_vehicle_cmd_change: list[float] = field(
        default_factory=lambda: [1.4, 1.4, 1.4, 1.4, 0.1, 0.1, 0.1, 0.1]
    )
    ref_velocity: float = 2.0
    weight_velocity_error: float = 10.0
    weight_angular_error: float = 30.0
    weight_collision_penalty: float = 50.0
    weight_distance_error_penalty: float = 40.0
    weight_terminal_state_penalty: float = 50.0
    use_sg_filter: bool = True
    sg_filter_half_window_size: int = 10
    sg_filter_poly_order: int = 3


@dataclass
class Params:
    navigation: NavigationParams = field(default_factory=NavigationParams)
    target_system: TargetSystemParams = field(default_factory=TargetSystemParams)
    controller: ControllerParams = field(default_factory=ControllerParams)