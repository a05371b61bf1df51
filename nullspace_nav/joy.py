"""Turn joystick readings into twist commands."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from .types import Twist

logger = logging.getLogger(__name__)


@dataclass
class JoyConfig:
    """Joystick button/axis indices and the command magnitudes at full stick."""

    top_left_button_idx: int = 4
    top_right_button_idx: int = 5
    left_stick_x_idx: int = 0
    left_stick_y_idx: int = 1
    right_stick_x_idx: int = 3
    right_stick_y_idx: int = 4
    abs_max_linear_vel_x: float = 3.0
    abs_max_linear_vel_y: float = 3.0
    abs_max_angular_vel_z: float = 1.0


class JoyController:
    """Maps sticks to velocities; the top-left button halves and the top-right doubles them."""

    def __init__(self, config: JoyConfig | None = None) -> None:
        self.config = config if config is not None else JoyConfig()

    def on_joy(self, axes: Sequence[float], buttons: Sequence[int]) -> Twist:
        cfg = self.config
        scale = 1.0
        if buttons[cfg.top_left_button_idx]:
            scale *= 0.5
        if buttons[cfg.top_right_button_idx]:
            scale *= 2.0
        left_x = scale * axes[cfg.left_stick_x_idx] * -1.0
        left_y = scale * axes[cfg.left_stick_y_idx]
        right_x = scale * axes[cfg.right_stick_x_idx]
        right_y = scale * axes[cfg.right_stick_y_idx]
        logger.debug(
            "Received Joy Command: Lstick_x = %+5.1f, Lstick_y = %+5.1f, "
            "Rstick_x = %+5.1f, Rstick_y = %+5.1f",
            left_x,
            left_y,
            right_x,
            right_y,
        )

        cmd = Twist(
            linear_x=cfg.abs_max_linear_vel_x * left_y,
            linear_y=-cfg.abs_max_linear_vel_y * left_x,
            angular_z=cfg.abs_max_angular_vel_z * right_x,
        )
        logger.debug(
            "Send Twist Command: linear_x = %+5.1f, linear_y = %+5.1f, angular_z = %+5.1f",
            cmd.linear_x,
            cmd.linear_y,
            cmd.angular_z,
        )
        return cmd