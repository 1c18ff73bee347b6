"""Command state, surface mixing and actuation."""

from airctl.control.command_state import CommandState, SensitivityConfig
from airctl.control.mixer import ActuatorRole, ControlSurface, SurfaceMixer

__all__ = [
    "CommandState",
    "SensitivityConfig",
    "ActuatorRole",
    "ControlSurface",
    "SurfaceMixer",
]
