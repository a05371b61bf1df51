"""Visualization markers and overlay text for the controller's output."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Sequence

from .types import Marker, MarkerType, XYYaw, quaternion_from_yaw

_ARROW_SCALE = (0.225, 0.045, 0.045)
_VIA_COLOR = (0.0, 1.0, 0.0, 1.0)
_VIA_Z = 0.4
_VIA_LIFETIME = 1.5
_OPTIMAL_COLOR = (1.0, 0.0, 0.0, 1.0)
_OPTIMAL_Z = 0.41
_SAMPLED_Z = 0.39
_SAMPLED_LIFETIME = 1.5
_SAMPLED_WIDTH = 0.01
_SAMPLED_COLOR = (0.0, 0.35, 1.0, 0.5)


def _now(stamp: float | None) -> float:
    return time.time() if stamp is None else stamp


@dataclass
class OverlayText:
    """Text drawn over the visualization view."""

    text: str = ""
    action: int = 0
    width: int = 500
    height: int = 50
    left: int = 0
    top: int = 50
    bg_color: tuple[float, float, float, float] = (0.0, 0.0, 0.0, 0.4)
    fg_color: tuple[float, float, float, float] = (25.0 / 255, 255.0 / 255, 240.0 / 255, 0.8)
    line_width: int = 1
    text_size: float = 22.0
    font: str = "Ubuntu Mono"


def _arrows(
    states: Sequence[XYYaw],
    stamp: float,
    ns: str,
    z: float,
    color: tuple[float, float, float, float],
    lifetime: float,
) -> list[Marker]:
    return [
        Marker(
            stamp=stamp,
            ns=ns,
            id=i,
            type=MarkerType.ARROW,
            position=(state.x, state.y, z),
            orientation=quaternion_from_yaw(state.yaw),
            scale=_ARROW_SCALE,
            color=color,
            lifetime=lifetime,
        )
        for i, state in enumerate(states)
    ]


def via_state_markers(states: Sequence[XYYaw], stamp: float | None = None) -> list[Marker]:
    """Green arrows for the via states."""
    return _arrows(states, _now(stamp), "via_states", _VIA_Z, _VIA_COLOR, _VIA_LIFETIME)


def optimal_trajectory_markers(
    states: Sequence[XYYaw], stamp: float | None = None
) -> list[Marker]:
    """Red arrows along the optimal trajectory."""
    return _arrows(states, _now(stamp), "optimal_trajectory", _OPTIMAL_Z, _OPTIMAL_COLOR, 0.0)


def sampled_trajectory_markers(
    sequences: Sequence[Sequence[XYYaw]], stamp: float | None = None
) -> list[Marker]:
    """One blue line strip per sampled trajectory."""
    when = _now(stamp)
    return [
        Marker(
            stamp=when,
            ns="sampled_trajectories",
            id=k,
            type=MarkerType.LINE_STRIP,
            orientation=(0.0, 0.0, 0.0, 1.0),
            scale=(_SAMPLED_WIDTH, 0.0, 0.0),
            color=_SAMPLED_COLOR,
            lifetime=_SAMPLED_LIFETIME,
            points=[(state.x, state.y, _SAMPLED_Z) for state in sequence],
        )
        for k, sequence in enumerate(sequences)
    ]


def overlay_text(text: str) -> OverlayText:
    """Overlay showing ``text`` with the controller's standard styling."""
    return OverlayText(text=text)