"""HQP tasks and solver, sampling helpers, markers and joystick mapping for 4WIDS nullspace MPC."""

__version__ = "0.1.1"

__all__ = [
    "hqp",
    "joy",
    "markers",
    "sampling",
    "tasks",
    "types",
]