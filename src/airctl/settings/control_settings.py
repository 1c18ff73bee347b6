"""Control settings management.

This module manages user control preferences: axis sensitivities, thrust step,
flap and brake magnitudes, and the key and controller button assigned to each
logical command.

Settings are stored in ~/.airctl/controls.yaml.

Typical usage:
    from airctl.settings import get_control_settings

    settings = get_control_settings()
    settings.set_sensitivity("pitch", 0.3)
    settings.bind_key("thrust_increase", ["period", "page up"])
    settings.save()
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pygame
import yaml

from airctl.control.command_state import (
    BRAKE_TORQUE,
    DEFAULT_SENSITIVITY,
    FLAP_DEPLOYED,
    SensitivityConfig,
)
from airctl.core.input import InputConfig, LogicalCommand

logger = logging.getLogger(__name__)

SENSITIVITY_AXES = ["pitch", "roll", "yaw", "thrust_step"]

DEFAULT_KEYS: dict[str, list[str]] = {
    LogicalCommand.THRUST_DECREASE.value: [","],
    LogicalCommand.THRUST_INCREASE.value: ["."],
    LogicalCommand.FLAP_TOGGLE.value: ["f"],
    LogicalCommand.BRAKE_TOGGLE.value: ["space"],
}

DEFAULT_BUTTONS: dict[str, list[int]] = {
    LogicalCommand.THRUST_DECREASE.value: [2],
    LogicalCommand.THRUST_INCREASE.value: [3],
    LogicalCommand.BRAKE_TOGGLE.value: [0],
}


def _default_sensitivity() -> dict[str, float]:
    return {axis: DEFAULT_SENSITIVITY for axis in SENSITIVITY_AXES}


@dataclass
class ControlSettings:
    """Control settings manager with persistence.

    Attributes:
        sensitivity: Axis name -> gain ("pitch", "roll", "yaw", "thrust_step").
        flap_deployed: Flap position when deployed (0.0 to 1.0).
        brake_torque: Wheel brake torque while braking.
        axis_deadzone: Joystick deadzone (0.0 to 0.95).
        enable_joystick: Whether to use a joystick when one is connected.
        keys: Command name -> pygame key names.
        buttons: Command name -> joystick button indices.
    """

    sensitivity: dict[str, float] = field(default_factory=_default_sensitivity)
    flap_deployed: float = FLAP_DEPLOYED
    brake_torque: float = BRAKE_TORQUE
    axis_deadzone: float = 0.1
    enable_joystick: bool = True
    keys: dict[str, list[str]] = field(
        default_factory=lambda: {k: list(v) for k, v in DEFAULT_KEYS.items()}
    )
    buttons: dict[str, list[int]] = field(
        default_factory=lambda: {k: list(v) for k, v in DEFAULT_BUTTONS.items()}
    )
    _settings_path: Path = field(
        default_factory=lambda: Path.home() / ".airctl" / "controls.yaml"
    )
    _dirty: bool = field(default=False, repr=False)

    def get_sensitivity(self, axis: str) -> float:
        """Get the gain for an axis.

        Args:
            axis: One of "pitch", "roll", "yaw", "thrust_step".

        Returns:
            Configured gain, or the default for unknown axes.
        """
        return self.sensitivity.get(axis, DEFAULT_SENSITIVITY)

    def set_sensitivity(self, axis: str, value: float) -> None:
        """Set the gain for an axis.

        Args:
            axis: One of "pitch", "roll", "yaw", "thrust_step".
            value: New gain. Thrust step is clamped to [0, 1].

        Raises:
            KeyError: If the axis name is unknown.
        """
        if axis not in SENSITIVITY_AXES:
            raise KeyError(f"Unknown sensitivity axis: {axis}")
        if axis == "thrust_step":
            value = max(0.0, min(1.0, value))
        self.sensitivity[axis] = float(value)
        self._dirty = True

    def bind_key(self, command: str, key_names: list[str]) -> None:
        """Assign keys to a command (replaces existing keys)."""
        self.keys[LogicalCommand(command).value] = list(key_names)
        self._dirty = True

    def bind_buttons(self, command: str, buttons: list[int]) -> None:
        """Assign joystick buttons to a command (replaces existing buttons)."""
        self.buttons[LogicalCommand(command).value] = [int(b) for b in buttons]
        self._dirty = True

    def load(self, path: Path | str | None = None) -> bool:
        """Load settings from file.

        Args:
            path: Optional path to settings file.
                 Defaults to ~/.airctl/controls.yaml.

        Returns:
            True if loaded successfully, False otherwise.
        """
        if path is not None:
            self._settings_path = Path(path)

        if not self._settings_path.exists():
            logger.info("No control settings file found, using defaults")
            return False

        try:
            with open(self._settings_path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}

            for axis, value in data.get("sensitivity", {}).items():
                if axis in SENSITIVITY_AXES and isinstance(value, (int, float)):
                    if axis == "thrust_step":
                        value = max(0.0, min(1.0, value))
                    self.sensitivity[axis] = float(value)

            self.flap_deployed = max(0.0, min(1.0, float(data.get("flap_deployed", FLAP_DEPLOYED))))
            brake_torque = float(data.get("brake_torque", BRAKE_TORQUE))
            if brake_torque <= 0:
                logger.warning(
                    "Ignoring non-positive brake torque %.1f, using %.1f",
                    brake_torque,
                    BRAKE_TORQUE,
                )
                brake_torque = BRAKE_TORQUE
            self.brake_torque = brake_torque
            self.axis_deadzone = max(0.0, min(0.95, float(data.get("axis_deadzone", 0.1))))
            self.enable_joystick = bool(data.get("enable_joystick", True))

            if "keys" in data:
                self.keys = {
                    str(command): [str(k) for k in names]
                    for command, names in (data["keys"] or {}).items()
                }
            if "buttons" in data:
                self.buttons = {
                    str(command): [int(b) for b in indices]
                    for command, indices in (data["buttons"] or {}).items()
                }

            self._dirty = False
            logger.info("Loaded control settings from %s", self._settings_path)
            return True

        except Exception as e:
            logger.error("Failed to load control settings: %s", e)
            return False

    def save(self, path: Path | str | None = None) -> bool:
        """Save settings to file.

        Args:
            path: Optional path to settings file.
                 Defaults to ~/.airctl/controls.yaml.

        Returns:
            True if saved successfully, False otherwise.
        """
        if path is not None:
            self._settings_path = Path(path)

        try:
            self._settings_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._settings_path, "w", encoding="utf-8") as f:
                yaml.safe_dump(self.to_dict(), f, default_flow_style=False, allow_unicode=True)

            self._dirty = False
            logger.info("Saved control settings to %s", self._settings_path)
            return True

        except Exception as e:
            logger.error("Failed to save control settings: %s", e)
            return False

    @property
    def is_dirty(self) -> bool:
        """Check if settings have unsaved changes."""
        return self._dirty

    def reset_to_defaults(self) -> None:
        """Reset all settings to defaults."""
        self.sensitivity = _default_sensitivity()
        self.flap_deployed = FLAP_DEPLOYED
        self.brake_torque = BRAKE_TORQUE
        self.axis_deadzone = 0.1
        self.enable_joystick = True
        self.keys = {k: list(v) for k, v in DEFAULT_KEYS.items()}
        self.buttons = {k: list(v) for k, v in DEFAULT_BUTTONS.items()}
        self._dirty = True

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization.

        Returns:
            Dictionary representation of settings.
        """
        return {
            "sensitivity": dict(self.sensitivity),
            "flap_deployed": self.flap_deployed,
            "brake_torque": self.brake_torque,
            "axis_deadzone": self.axis_deadzone,
            "enable_joystick": self.enable_joystick,
            "keys": {k: list(v) for k, v in self.keys.items()},
            "buttons": {k: list(v) for k, v in self.buttons.items()},
        }

    def apply_sensitivity(self, config: SensitivityConfig | None = None) -> SensitivityConfig:
        """Copy the gains into a sensitivity config.

        Updating an existing config in place lets a running controller pick
        up the new values on its next tick.

        Args:
            config: Config to update, or None to create one.

        Returns:
            The updated config.
        """
        if config is None:
            config = SensitivityConfig()
        config.pitch_sensitivity = self.get_sensitivity("pitch")
        config.roll_sensitivity = self.get_sensitivity("roll")
        config.yaw_sensitivity = self.get_sensitivity("yaw")
        config.thrust_step = self.get_sensitivity("thrust_step")
        return config

    def to_input_config(self) -> InputConfig:
        """Build the input configuration from the stored bindings.

        Unknown command or key names are logged and skipped.

        Returns:
            Input configuration using pygame key codes.
        """
        keyboard_bindings: dict[int, LogicalCommand] = {}
        button_bindings: dict[int, LogicalCommand] = {}

        for command_name, key_names in self.keys.items():
            command = _parse_command(command_name)
            if command is None:
                continue
            for key_name in key_names:
                try:
                    keyboard_bindings[pygame.key.key_code(key_name)] = command
                except ValueError:
                    logger.warning("Unknown key name '%s' for %s", key_name, command_name)

        for command_name, indices in self.buttons.items():
            command = _parse_command(command_name)
            if command is None:
                continue
            for index in indices:
                button_bindings[index] = command

        config = InputConfig(
            keyboard_bindings=keyboard_bindings,
            button_bindings=button_bindings,
            axis_deadzone=self.axis_deadzone,
            enable_joystick=self.enable_joystick,
        )
        logger.debug(
            "Built input config: %d keys, %d buttons",
            len(config.keyboard_bindings),
            len(config.button_bindings),
        )
        return config


def _parse_command(name: str) -> LogicalCommand | None:
    try:
        return LogicalCommand(name)
    except ValueError:
        logger.warning("Unknown command '%s' in control settings", name)
        return None


# Global singleton instance
_global_settings: ControlSettings | None = None


def get_control_settings() -> ControlSettings:
    """Get the global control settings singleton.

    Loads settings from disk on first access.

    Returns:
        ControlSettings instance.
    """
    global _global_settings
    if _global_settings is None:
        _global_settings = ControlSettings()
        _global_settings.load()
    return _global_settings


def reset_control_settings() -> None:
    """Reset the global control settings singleton.

    Forces reload on next access.
    """
    global _global_settings
    _global_settings = None
