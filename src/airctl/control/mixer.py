"""Control surface mixer.

Maps the pitch/roll/yaw/flap commands onto every registered actuator
according to the actuator's role and gain. Actuators that are missing, not
flagged as control actuators, or have no control role are skipped without
being commanded.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from airctl.control.command_state import CommandState, SensitivityConfig
from airctl.core.logging_system import get_logger

logger = get_logger(__name__)


class ActuatorRole(str, Enum):
    """Which command axis drives an actuator."""

    PITCH = "pitch"
    ROLL = "roll"
    YAW = "yaw"
    FLAP = "flap"
    NONE = "none"


class Actuator(Protocol):
    """An actuator the mixer can command.

    The mixer only reads ``role``, ``gain`` and ``is_control_actuator`` and
    only ever calls ``set_deflection``.
    """

    role: ActuatorRole
    gain: float
    is_control_actuator: bool

    def set_deflection(self, value: float) -> None: ...


@dataclass
class ControlSurface:
    """A movable control surface (elevator, aileron, rudder, flap).

    Attributes:
        name: Display name.
        role: Command axis driving this surface.
        gain: Per-surface multiplier (negative to reverse direction).
        is_control_actuator: Whether the mixer commands this surface at all.
        deflection: Last deflection command received.
    """

    name: str
    role: ActuatorRole = ActuatorRole.NONE
    gain: float = 1.0
    is_control_actuator: bool = True
    deflection: float = 0.0

    def set_deflection(self, value: float) -> None:
        """Receive a deflection command from the mixer."""
        self.deflection = value


class SurfaceMixer:
    """Computes per-actuator deflection commands from a command state.

    Mixing holds no state: the same inputs always produce the same commands,
    so it can run every actuation tick or on demand to preview a
    configuration.

    Examples:
        >>> mixer = SurfaceMixer(SensitivityConfig(pitch_sensitivity=0.2))
        >>> elevator = ControlSurface("elevator", ActuatorRole.PITCH)
        >>> mixer.compute_deflection(elevator, CommandState(pitch=0.5))
        0.1
    """

    def __init__(self, sensitivity: SensitivityConfig) -> None:
        """Initialize the mixer.

        Args:
            sensitivity: Shared gains, re-read on every call.
        """
        self.sensitivity = sensitivity

    def axis_value(self, role: ActuatorRole, state: CommandState) -> float | None:
        """Get the sensitivity-scaled command for a role.

        Args:
            role: Actuator role.
            state: Current command state.

        Returns:
            Scaled axis value, or None if the role takes no command.
        """
        if role == ActuatorRole.PITCH:
            return state.pitch * self.sensitivity.pitch_sensitivity
        if role == ActuatorRole.ROLL:
            return state.roll * self.sensitivity.roll_sensitivity
        if role == ActuatorRole.YAW:
            return state.yaw * self.sensitivity.yaw_sensitivity
        if role == ActuatorRole.FLAP:
            # Flap position is absolute, no sensitivity
            return state.flap
        return None

    def compute_deflection(self, actuator: Actuator | None, state: CommandState) -> float | None:
        """Compute one actuator's command without issuing it.

        Args:
            actuator: Actuator to evaluate (may be None).
            state: Current command state.

        Returns:
            Deflection command, or None if the actuator is skipped.
        """
        if actuator is None or not actuator.is_control_actuator:
            return None

        value = self.axis_value(actuator.role, state)
        if value is None:
            return None
        return value * actuator.gain

    def mix(
        self, actuators: Iterable[Actuator | None], state: CommandState
    ) -> list[tuple[Actuator, float]]:
        """Command every participating actuator.

        Args:
            actuators: Registered actuators; order does not matter.
            state: Command state to mix.

        Returns:
            The (actuator, command) pairs that were issued.
        """
        issued: list[tuple[Actuator, float]] = []
        for actuator in actuators:
            command = self.compute_deflection(actuator, state)
            if command is None:
                logger.debug("Skipping actuator %r", actuator)
                continue
            actuator.set_deflection(command)
            issued.append((actuator, command))
        return issued
