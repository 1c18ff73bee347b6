"""Vehicle controller tying input dispatch, mixing and actuation together.

The controller runs two ticks that may have different rates:

- ``update()`` at the input-sampling rate: polls the sources and runs the
  edge dispatcher, producing a new ``CommandState``.
- ``fixed_update()`` at the actuation rate: mixes the latest state onto the
  control surfaces and forwards thrust and brake torque.

Typical usage example:
    controller = VehicleController(SensitivityConfig(), airframe.surfaces,
                                   keyboard=keyboard, event_bus=bus)

    # Every frame
    keyboard.process_events(events)
    controller.update()

    # Every physics step
    controller.fixed_update()
"""

from collections.abc import Iterable
from dataclasses import dataclass

from airctl.control.actuation import Actuation, ThrustReceiver, Wheel
from airctl.control.command_state import (
    BRAKE_TORQUE,
    FLAP_DEPLOYED,
    CommandState,
    SensitivityConfig,
)
from airctl.control.mixer import Actuator, SurfaceMixer
from airctl.core.event_bus import Event, EventBus
from airctl.core.input import (
    InputSample,
    JoystickSource,
    KeyboardSource,
    LogicalCommand,
    read_sample,
)
from airctl.core.input_edge import ButtonEdgeState, InputEdgeDispatcher
from airctl.core.logging_system import get_logger

logger = get_logger(__name__)


@dataclass
class CommandStateEvent(Event):
    """Event published after every input tick.

    Attributes:
        pitch: Pitch command (-1.0 to 1.0).
        roll: Roll command (-1.0 to 1.0).
        yaw: Yaw command (-1.0 to 1.0).
        flap: Flap position (0.0 to 1.0).
        thrust: Thrust level (0.0 to 1.0).
        brake_active: Whether the brake is engaged.
    """

    pitch: float = 0.0
    roll: float = 0.0
    yaw: float = 0.0
    flap: float = 0.0
    thrust: float = 0.0
    brake_active: bool = False


class VehicleController:  # pylint: disable=too-many-instance-attributes
    """Owns the command state and drives the control path each tick.

    Examples:
        >>> from airctl.control.mixer import ActuatorRole, ControlSurface
        >>> surfaces = [ControlSurface("elevator", ActuatorRole.PITCH)]
        >>> controller = VehicleController(SensitivityConfig(), surfaces)
        >>> controller.update(InputSample(pitch=0.5))
        ()
        >>> controller.fixed_update()
        >>> controller.get_state().pitch
        0.5
    """

    def __init__(
        self,
        sensitivity: SensitivityConfig,
        surfaces: Iterable[Actuator | None] = (),
        wheels: Iterable[Wheel] = (),
        engine: ThrustReceiver | None = None,
        keyboard: KeyboardSource | None = None,
        joystick: JoystickSource | None = None,
        event_bus: EventBus | None = None,
        flap_deployed: float = FLAP_DEPLOYED,
        brake_magnitude: float = BRAKE_TORQUE,
    ) -> None:
        """Initialize the controller.

        Args:
            sensitivity: Shared gains (re-read every tick).
            surfaces: Actuators commanded by the mixer.
            wheels: Wheels receiving brake torque.
            engine: Thrust receiver.
            keyboard: Keyboard source (key edges, and axes when no joystick).
            joystick: Joystick source (axes and button levels).
            event_bus: Optional bus for state and command events.
            flap_deployed: Flap position when toggled down.
            brake_magnitude: Brake torque while the brake is active.
        """
        self.sensitivity = sensitivity
        self.keyboard = keyboard
        self.joystick = joystick
        self.event_bus = event_bus

        self.dispatcher = InputEdgeDispatcher(sensitivity, flap_deployed, event_bus)
        self.mixer = SurfaceMixer(sensitivity)
        self.actuation = Actuation(engine, wheels, brake_magnitude)

        self._surfaces: list[Actuator | None] = list(surfaces)
        self._state = CommandState()
        self._edges = ButtonEdgeState()
        self._tick_count = 0

        logger.info(
            "Vehicle controller initialized (%d surfaces, %d wheels, joystick=%s)",
            len(self._surfaces),
            len(self.actuation.wheels),
            "yes" if joystick else "no",
        )

    @property
    def surfaces(self) -> list[Actuator | None]:
        """Actuators currently registered with the mixer."""
        return list(self._surfaces)

    def set_surfaces(self, surfaces: Iterable[Actuator | None]) -> None:
        """Replace the registered actuators.

        Args:
            surfaces: New actuator collection.
        """
        self._surfaces = list(surfaces)
        logger.debug("Registered %d surfaces", len(self._surfaces))

    def sample_inputs(self) -> InputSample:
        """Poll the configured sources for this tick.

        The joystick provides the axes when present, otherwise the keyboard.
        """
        axis_source = self.joystick if self.joystick else self.keyboard
        return read_sample(axis_source, self.keyboard, self.joystick)

    def update(self, sample: InputSample | None = None) -> tuple[LogicalCommand, ...]:
        """Run one input-sampling tick.

        Args:
            sample: Inputs to use instead of polling the sources.

        Returns:
            Commands that fired this tick.
        """
        if sample is None:
            sample = self.sample_inputs()

        result = self.dispatcher.dispatch(self._state, self._edges, sample)
        self._state = result.state
        self._edges = result.edges
        self._tick_count += 1

        if self.event_bus:
            state = self._state
            self.event_bus.publish(
                CommandStateEvent(
                    pitch=state.pitch,
                    roll=state.roll,
                    yaw=state.yaw,
                    flap=state.flap,
                    thrust=state.thrust,
                    brake_active=state.brake_active,
                )
            )
        return result.fired

    def fixed_update(self) -> None:
        """Run one actuation tick on the latest state snapshot."""
        self.mixer.mix(self._surfaces, self._state)
        self.actuation.apply(self._state)

    def preview(self) -> list[tuple[Actuator, float]]:
        """Recompute surface commands without polling input.

        Used after editing the airframe while the loop is stopped. Calling it
        repeatedly issues the same commands.

        Returns:
            The (actuator, command) pairs that were issued.
        """
        return self.mixer.mix(self._surfaces, self._state)

    def get_state(self) -> CommandState:
        """Get the current command state (immutable snapshot)."""
        return self._state

    @property
    def edges(self) -> ButtonEdgeState:
        """Button latches after the last input tick."""
        return self._edges

    @property
    def tick_count(self) -> int:
        """Number of input ticks run."""
        return self._tick_count
