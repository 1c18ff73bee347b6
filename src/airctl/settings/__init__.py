"""User settings management for airctl.

This package provides persistent user settings storage for control
preferences that should be saved across sessions.
"""

from airctl.settings.control_settings import (
    ControlSettings,
    get_control_settings,
    reset_control_settings,
)

__all__ = [
    "ControlSettings",
    "get_control_settings",
    "reset_control_settings",
]
