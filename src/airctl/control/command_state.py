"""Command state shared between the input dispatcher and the surface mixer.

``CommandState`` is an immutable snapshot: the dispatcher produces a new one
every input tick and the mixer reads the latest one every actuation tick.
Thrust and flap only ever change through ``step_thrust`` and ``toggle_flap``.
"""

from dataclasses import dataclass, replace

# Flap position when deployed (two-position toggle).
FLAP_DEPLOYED = 0.3

# Wheel brake torque applied while the brake is active.
BRAKE_TORQUE = 100.0

DEFAULT_SENSITIVITY = 0.2


def clamp(value: float, low: float, high: float) -> float:
    """Clamp value to [low, high]."""
    return max(low, min(high, value))


@dataclass
class SensitivityConfig:
    """Control gains applied by the dispatcher and the mixer.

    Shared by reference: the core reads the current values on every call, so
    a collaborator may change them between ticks.

    Attributes:
        pitch_sensitivity: Gain applied to the pitch axis.
        roll_sensitivity: Gain applied to the roll axis.
        yaw_sensitivity: Gain applied to the yaw axis.
        thrust_step: Thrust change per increase/decrease command (0.0-1.0).
    """

    pitch_sensitivity: float = DEFAULT_SENSITIVITY
    roll_sensitivity: float = DEFAULT_SENSITIVITY
    yaw_sensitivity: float = DEFAULT_SENSITIVITY
    thrust_step: float = DEFAULT_SENSITIVITY


@dataclass(frozen=True)
class CommandState:
    """Normalized control commands for one tick.

    Attributes:
        pitch: Pitch command (-1.0 to 1.0), sampled each tick.
        roll: Roll command (-1.0 to 1.0), sampled each tick.
        yaw: Yaw command (-1.0 to 1.0), sampled each tick.
        flap: Flap position (0.0 or the deployed value).
        thrust: Thrust level (0.0 to 1.0).
        brake_active: Whether the wheel brake is engaged.
    """

    pitch: float = 0.0
    roll: float = 0.0
    yaw: float = 0.0
    flap: float = 0.0
    thrust: float = 0.0
    brake_active: bool = False

    def with_axes(self, pitch: float, roll: float, yaw: float) -> "CommandState":
        """Return a copy with new axis values.

        Axis values are passed through as given; range checking is the
        input layer's job.
        """
        return replace(self, pitch=pitch, roll=roll, yaw=yaw)

    def step_thrust(self, delta: float) -> "CommandState":
        """Return a copy with thrust changed by delta, saturating at [0, 1]."""
        return replace(self, thrust=clamp(self.thrust + delta, 0.0, 1.0))

    def toggle_flap(self, deployed: float = FLAP_DEPLOYED) -> "CommandState":
        """Return a copy with flaps switched between retracted and deployed."""
        return replace(self, flap=0.0 if self.flap > 0 else clamp(deployed, 0.0, 1.0))

    def toggle_brake(self) -> "CommandState":
        """Return a copy with the brake flipped."""
        return replace(self, brake_active=not self.brake_active)

    @property
    def thrust_percent(self) -> int:
        """Thrust as a whole percentage (truncated)."""
        return int(self.thrust * 100)
