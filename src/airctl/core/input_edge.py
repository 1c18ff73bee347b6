"""One-shot command dispatch from keyboard edges and controller levels.

A logical command can be triggered from two channels at once:

- the keyboard, which already reports a single key-down per press
- a controller button, which only reports whether it is held

``ButtonEdgeState`` turns the controller level into an edge with one latch per
command, and ``InputEdgeDispatcher`` ORs both channels so every command fires
at most once per tick and once per physical press. The dispatcher takes the
current ``CommandState`` and latches and returns new ones; it keeps no state of
its own between ticks.

Typical usage example:
    dispatcher = InputEdgeDispatcher(SensitivityConfig())
    state, edges = CommandState(), ButtonEdgeState()

    # Every input tick
    result = dispatcher.dispatch(state, edges, sample)
    state, edges = result.state, result.edges
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from airctl.control.command_state import FLAP_DEPLOYED, CommandState, SensitivityConfig
from airctl.core.event_bus import Event, EventBus
from airctl.core.input import InputSample, LogicalCommand
from airctl.core.logging_system import get_logger

logger = get_logger(__name__)


@dataclass
class CommandFiredEvent(Event):
    """Event published when a logical command fires.

    Attributes:
        command: Value of the LogicalCommand that fired.
        thrust: Thrust after the command was applied.
        flap: Flap position after the command was applied.
        brake_active: Brake state after the command was applied.
    """

    command: str = ""
    thrust: float = 0.0
    flap: float = 0.0
    brake_active: bool = False


@dataclass(frozen=True)
class ButtonEdgeState:
    """Per-command latches for level-triggered buttons.

    A latch is True from the tick its button was first seen held until the
    first tick it is seen released. Commands never seen are unlatched.
    """

    latches: Mapping[LogicalCommand, bool] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def is_latched(self, command: LogicalCommand) -> bool:
        """Check whether a command's button is latched."""
        return self.latches.get(command, False)

    def update(self, command: LogicalCommand, held: bool) -> tuple[bool, "ButtonEdgeState"]:
        """Feed one tick of button level for a command.

        Args:
            command: Logical command the button is bound to.
            held: Whether the button is held this tick.

        Returns:
            Tuple of (fired, new_state). ``fired`` is True only on the tick
            the button goes from released to held.
        """
        latched = self.is_latched(command)
        fired = held and not latched
        if latched == held:
            return fired, self

        latches = dict(self.latches)
        latches[command] = held
        return fired, ButtonEdgeState(MappingProxyType(latches))


@dataclass(frozen=True)
class DispatchResult:
    """Outcome of one dispatch tick.

    Attributes:
        state: Command state after applying this tick's inputs.
        edges: Button latches after this tick.
        fired: Commands that fired this tick, in dispatch order.
    """

    state: CommandState
    edges: ButtonEdgeState
    fired: tuple[LogicalCommand, ...] = ()


class InputEdgeDispatcher:
    """Reconciles edge and level inputs into one-shot command firings.

    Examples:
        >>> dispatcher = InputEdgeDispatcher(SensitivityConfig(thrust_step=0.2))
        >>> sample = InputSample(key_presses=frozenset({LogicalCommand.THRUST_INCREASE}))
        >>> dispatcher.dispatch(CommandState(), ButtonEdgeState(), sample).state.thrust
        0.2
    """

    def __init__(
        self,
        sensitivity: SensitivityConfig,
        flap_deployed: float = FLAP_DEPLOYED,
        event_bus: EventBus | None = None,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            sensitivity: Shared gains; ``thrust_step`` is read on every firing.
            flap_deployed: Flap position used when flaps are toggled down.
            event_bus: Optional bus for ``CommandFiredEvent`` notifications.
        """
        self.sensitivity = sensitivity
        self.flap_deployed = flap_deployed
        self.event_bus = event_bus

    def fired_commands(
        self, edges: ButtonEdgeState, sample: InputSample
    ) -> tuple[tuple[LogicalCommand, ...], ButtonEdgeState]:
        """Work out which commands fire this tick.

        Every command's latch is updated whether or not its keyboard channel
        also fired, so a key press during a held button does not leave the
        latch stale.

        Args:
            edges: Button latches from the previous tick.
            sample: This tick's raw inputs.

        Returns:
            Tuple of (fired commands, updated latches).
        """
        fired: list[LogicalCommand] = []
        for command in LogicalCommand:
            button_fired, edges = edges.update(command, command in sample.held_buttons)
            if button_fired or command in sample.key_presses:
                fired.append(command)
        return tuple(fired), edges

    def apply(self, state: CommandState, command: LogicalCommand) -> CommandState:
        """Apply a single command firing to the state.

        Args:
            state: Current command state.
            command: Command that fired.

        Returns:
            New command state.
        """
        if command is LogicalCommand.THRUST_INCREASE:
            state = state.step_thrust(self.sensitivity.thrust_step)
            logger.info("Changing thrust to: %.2f", state.thrust)
        elif command is LogicalCommand.THRUST_DECREASE:
            state = state.step_thrust(-self.sensitivity.thrust_step)
            logger.info("Changing thrust to: %.2f", state.thrust)
        elif command is LogicalCommand.BRAKE_TOGGLE:
            state = state.toggle_brake()
            logger.info("Changing brake to: %s", "ON" if state.brake_active else "OFF")
        elif command is LogicalCommand.FLAP_TOGGLE:
            state = state.toggle_flap(self.flap_deployed)
            logger.info("Changing flap to: %.2f", state.flap)
        return state

    def dispatch(
        self, state: CommandState, edges: ButtonEdgeState, sample: InputSample
    ) -> DispatchResult:
        """Run one input tick.

        Axes are copied from the sample unchanged. Each fired command is
        applied once.

        Args:
            state: Command state from the previous tick.
            edges: Button latches from the previous tick.
            sample: This tick's raw inputs.

        Returns:
            New state, new latches and the commands that fired.
        """
        state = state.with_axes(sample.pitch, sample.roll, sample.yaw)
        fired, edges = self.fired_commands(edges, sample)

        for command in fired:
            state = self.apply(state, command)
            if self.event_bus:
                self.event_bus.publish(
                    CommandFiredEvent(
                        command=command.value,
                        thrust=state.thrust,
                        flap=state.flap,
                        brake_active=state.brake_active,
                    )
                )

        return DispatchResult(state=state, edges=edges, fired=fired)
