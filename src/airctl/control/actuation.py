"""Throttle and wheel brake actuation.

Forwards the thrust level to the engine and converts the brake toggle into a
wheel brake torque once per actuation tick.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

from airctl.control.command_state import BRAKE_TORQUE, CommandState
from airctl.core.logging_system import get_logger

logger = get_logger(__name__)

# Keeps wheel colliders from going to sleep while parked.
WHEEL_WAKE_TORQUE = 0.01


class ThrustReceiver(Protocol):
    """Anything that accepts a thrust level (0.0 to 1.0)."""

    def set_thrust_percent(self, percent: float) -> None: ...


@dataclass
class Engine:
    """Minimal engine collaborator recording the commanded thrust."""

    thrust_percent: float = 0.0

    def set_thrust_percent(self, percent: float) -> None:
        self.thrust_percent = percent


@dataclass
class Wheel:
    """Wheel collaborator with brake and motor torque inputs.

    Attributes:
        name: Display name.
        brake_torque: Brake torque currently applied.
        motor_torque: Motor torque currently applied.
    """

    name: str
    brake_torque: float = 0.0
    motor_torque: float = 0.0


def brake_torque(brake_active: bool, magnitude: float = BRAKE_TORQUE) -> float:
    """Map the brake toggle to a torque.

    Args:
        brake_active: Brake state from the command state.
        magnitude: Torque applied while braking.

    Returns:
        ``magnitude`` when active, otherwise 0.0.
    """
    return magnitude if brake_active else 0.0


class Actuation:
    """Applies thrust and brake commands to the engine and wheels."""

    def __init__(
        self,
        engine: ThrustReceiver | None = None,
        wheels: Iterable[Wheel] = (),
        brake_magnitude: float = BRAKE_TORQUE,
    ) -> None:
        """Initialize actuation.

        Args:
            engine: Thrust receiver (None to skip thrust).
            wheels: Wheels receiving brake torque.
            brake_magnitude: Torque applied while the brake is active.
        """
        self.engine = engine
        self.wheels = list(wheels)
        self.brake_magnitude = brake_magnitude
        self._last_brake_torque = 0.0

    def apply(self, state: CommandState) -> None:
        """Send the thrust and brake commands for this actuation tick.

        Args:
            state: Latest command state snapshot.
        """
        if self.engine is not None:
            self.engine.set_thrust_percent(state.thrust)

        torque = brake_torque(state.brake_active, self.brake_magnitude)
        if torque != self._last_brake_torque:
            logger.debug("Brake torque %.1f -> %.1f", self._last_brake_torque, torque)
            self._last_brake_torque = torque

        for wheel in self.wheels:
            wheel.brake_torque = torque
            wheel.motor_torque = WHEEL_WAKE_TORQUE

    @property
    def current_brake_torque(self) -> float:
        """Brake torque sent on the last actuation tick."""
        return self._last_brake_torque
