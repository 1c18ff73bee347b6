"""Raw input sources for keyboard and joystick.

This module turns pygame keyboard events and joystick polling into the three
raw signals the control core consumes each tick:

- analog axes (pitch, roll, yaw), already clamped to [-1, 1]
- key-down edges per logical command (fire once per press)
- controller button levels per logical command (held / not held)

Typical usage example:
    config = InputConfig()
    keyboard = KeyboardSource(config)
    joystick = JoystickSource.detect(config)

    # In game loop
    keyboard.process_events(pygame.event.get())
    sample = read_sample(joystick or keyboard, keyboard, joystick)
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

import pygame  # pylint: disable=no-member

from airctl.core.logging_system import get_logger

logger = get_logger(__name__)


class LogicalCommand(Enum):
    """Discrete commands that can be bound to keys and controller buttons."""

    THRUST_DECREASE = "thrust_decrease"
    THRUST_INCREASE = "thrust_increase"
    FLAP_TOGGLE = "flap_toggle"
    BRAKE_TOGGLE = "brake_toggle"


class Axis(Enum):
    """Continuous control axes."""

    PITCH = "pitch"
    ROLL = "roll"
    YAW = "yaw"


@dataclass(frozen=True)
class InputSample:
    """Raw inputs polled during one input tick.

    Attributes:
        pitch: Pitch axis (-1.0 to 1.0).
        roll: Roll axis (-1.0 to 1.0).
        yaw: Yaw axis (-1.0 to 1.0).
        key_presses: Commands whose key went down this tick (edge channel).
        held_buttons: Commands whose controller button is held (level channel).
    """

    pitch: float = 0.0
    roll: float = 0.0
    yaw: float = 0.0
    key_presses: frozenset[LogicalCommand] = frozenset()
    held_buttons: frozenset[LogicalCommand] = frozenset()


class AxisSource(Protocol):
    """Anything that yields pitch/roll/yaw once per tick."""

    def read_axes(self) -> tuple[float, float, float]: ...


class KeyEventSource(Protocol):
    """Yields the commands that transitioned to pressed this tick."""

    def pressed_commands(self) -> frozenset[LogicalCommand]: ...


class ButtonSource(Protocol):
    """Yields the commands whose button is currently held."""

    def held_commands(self) -> frozenset[LogicalCommand]: ...


@dataclass
class InputConfig:
    """Configuration for keyboard and joystick input.

    Attributes:
        keyboard_bindings: Map of pygame key constants to commands.
        axis_keys: Map of pygame key constants to (axis, direction).
        button_bindings: Map of joystick button index to commands.
        roll_axis: Joystick axis index for roll.
        pitch_axis: Joystick axis index for pitch (inverted).
        yaw_axis: Joystick axis index for yaw.
        axis_deadzone: Deadzone for analog axes (0.0-1.0).
        enable_joystick: Whether to look for a joystick.
    """

    keyboard_bindings: dict[int, LogicalCommand] = field(default_factory=dict)
    axis_keys: dict[int, tuple[Axis, float]] = field(default_factory=dict)
    button_bindings: dict[int, LogicalCommand] = field(default_factory=dict)
    roll_axis: int = 0
    pitch_axis: int = 1
    yaw_axis: int = 3
    axis_deadzone: float = 0.1
    enable_joystick: bool = True

    def __post_init__(self) -> None:
        """Fill in default bindings where none were given."""
        if not self.keyboard_bindings:
            self.keyboard_bindings = self._get_default_bindings()
        if not self.axis_keys:
            self.axis_keys = self._get_default_axis_keys()
        if not self.button_bindings:
            self.button_bindings = self._get_default_button_bindings()

    @staticmethod
    def _get_default_bindings() -> dict[int, LogicalCommand]:
        return {
            pygame.K_COMMA: LogicalCommand.THRUST_DECREASE,  # <
            pygame.K_PERIOD: LogicalCommand.THRUST_INCREASE,  # >
            pygame.K_f: LogicalCommand.FLAP_TOGGLE,
            pygame.K_SPACE: LogicalCommand.BRAKE_TOGGLE,
        }

    @staticmethod
    def _get_default_axis_keys() -> dict[int, tuple[Axis, float]]:
        return {
            pygame.K_UP: (Axis.PITCH, 1.0),
            pygame.K_DOWN: (Axis.PITCH, -1.0),
            pygame.K_w: (Axis.PITCH, 1.0),
            pygame.K_s: (Axis.PITCH, -1.0),
            pygame.K_RIGHT: (Axis.ROLL, 1.0),
            pygame.K_LEFT: (Axis.ROLL, -1.0),
            pygame.K_d: (Axis.ROLL, 1.0),
            pygame.K_a: (Axis.ROLL, -1.0),
            pygame.K_e: (Axis.YAW, 1.0),
            pygame.K_q: (Axis.YAW, -1.0),
        }

    @staticmethod
    def _get_default_button_bindings() -> dict[int, LogicalCommand]:
        # Xbox-style layout: A=0, X=2, Y=3
        return {
            2: LogicalCommand.THRUST_DECREASE,
            3: LogicalCommand.THRUST_INCREASE,
            0: LogicalCommand.BRAKE_TOGGLE,
        }


class KeyboardSource:
    """Keyboard input fed from the pygame event queue.

    Acts as both a ``KeyEventSource`` (bound keys that went down this frame)
    and an ``AxisSource`` (held axis keys as digital -1/0/+1 deflection).
    """

    def __init__(self, config: InputConfig | None = None) -> None:
        """Initialize keyboard source.

        Args:
            config: Input configuration (uses defaults if None).
        """
        self.config = config if config is not None else InputConfig()
        self._keys_pressed: set[int] = set()
        self._keys_just_pressed: set[int] = set()

    def process_events(self, events: list[Any]) -> None:
        """Process this frame's pygame events.

        Args:
            events: Events from ``pygame.event.get()``.
        """
        self._keys_just_pressed.clear()

        for event in events:
            if event.type == pygame.KEYDOWN:
                if event.key not in self._keys_pressed:
                    self._keys_just_pressed.add(event.key)
                self._keys_pressed.add(event.key)
            elif event.type == pygame.KEYUP:
                self._keys_pressed.discard(event.key)

    def pressed_commands(self) -> frozenset[LogicalCommand]:
        """Get commands whose key went down this frame."""
        bindings = self.config.keyboard_bindings
        return frozenset(bindings[key] for key in self._keys_just_pressed if key in bindings)

    def read_axes(self) -> tuple[float, float, float]:
        """Get axis deflection from held keys."""
        values = {Axis.PITCH: 0.0, Axis.ROLL: 0.0, Axis.YAW: 0.0}
        for key in self._keys_pressed:
            binding = self.config.axis_keys.get(key)
            if binding:
                axis, direction = binding
                values[axis] += direction
        return (
            max(-1.0, min(1.0, values[Axis.PITCH])),
            max(-1.0, min(1.0, values[Axis.ROLL])),
            max(-1.0, min(1.0, values[Axis.YAW])),
        )

    def reset(self) -> None:
        """Forget all held keys (e.g. after the window loses focus)."""
        self._keys_pressed.clear()
        self._keys_just_pressed.clear()


class JoystickSource:
    """Joystick or gamepad polled once per frame.

    Acts as both an ``AxisSource`` and a ``ButtonSource``. Buttons report
    their level only; edge detection happens in the dispatcher.
    """

    def __init__(self, joystick: Any, config: InputConfig | None = None) -> None:
        """Initialize joystick source.

        Args:
            joystick: Initialized ``pygame.joystick.Joystick`` (or compatible).
            config: Input configuration (uses defaults if None).
        """
        self.joystick = joystick
        self.config = config if config is not None else InputConfig()

    @classmethod
    def detect(cls, config: InputConfig | None = None) -> "JoystickSource | None":
        """Open the first connected joystick, if any.

        Args:
            config: Input configuration (uses defaults if None).

        Returns:
            A source for joystick 0, or None when disabled or not connected.
        """
        config = config if config is not None else InputConfig()
        if not config.enable_joystick:
            return None

        pygame.joystick.init()
        if pygame.joystick.get_count() == 0:
            logger.debug("No joystick detected")
            return None

        joystick = pygame.joystick.Joystick(0)
        joystick.init()
        logger.info(
            "Joystick initialized: %s (%d axes, %d buttons)",
            joystick.get_name(),
            joystick.get_numaxes(),
            joystick.get_numbuttons(),
        )
        return cls(joystick, config)

    def read_axes(self) -> tuple[float, float, float]:
        """Get deadzone-corrected axes clamped to [-1, 1]."""
        return (
            -self._read_axis(self.config.pitch_axis),
            self._read_axis(self.config.roll_axis),
            self._read_axis(self.config.yaw_axis),
        )

    def held_commands(self) -> frozenset[LogicalCommand]:
        """Get commands whose bound button is held right now."""
        count = self.joystick.get_numbuttons()
        return frozenset(
            command
            for button, command in self.config.button_bindings.items()
            if button < count and self.joystick.get_button(button)
        )

    def _read_axis(self, index: int) -> float:
        if index >= self.joystick.get_numaxes():
            return 0.0
        return self._apply_deadzone(self.joystick.get_axis(index))

    def _apply_deadzone(self, value: float) -> float:
        """Apply deadzone and clamp an axis value.

        Args:
            value: Raw axis value (-1.0 to 1.0).

        Returns:
            Processed value remapped to the full range outside the deadzone.
        """
        deadzone = self.config.axis_deadzone
        if abs(value) < deadzone:
            return 0.0

        sign = 1.0 if value > 0 else -1.0
        magnitude = (abs(value) - deadzone) / (1.0 - deadzone)
        return sign * min(1.0, magnitude)


def read_sample(
    axis_source: AxisSource | None,
    key_source: KeyEventSource | None,
    button_source: ButtonSource | None,
) -> InputSample:
    """Poll every source once and build this tick's sample.

    Missing sources contribute centered axes and no commands.
    """
    pitch, roll, yaw = axis_source.read_axes() if axis_source else (0.0, 0.0, 0.0)
    return InputSample(
        pitch=pitch,
        roll=roll,
        yaw=yaw,
        key_presses=key_source.pressed_commands() if key_source else frozenset(),
        held_buttons=button_source.held_commands() if button_source else frozenset(),
    )
