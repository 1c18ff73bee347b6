"""Tests for keyboard and joystick input sources."""

from unittest.mock import Mock, patch

import pygame
import pytest

from airctl.core.input import (
    Axis,
    InputConfig,
    InputSample,
    JoystickSource,
    KeyboardSource,
    LogicalCommand,
    read_sample,
)

PATCH_JOYSTICK = "airctl.core.input.pygame.joystick"


def key_event(event_type: int, key: int) -> Mock:
    """Create a mock pygame key event."""
    event = Mock()
    event.type = event_type
    event.key = key
    return event


def make_joystick(axes: list[float], buttons: list[bool]) -> Mock:
    """Create a mock pygame joystick."""
    joystick = Mock()
    joystick.get_numaxes.return_value = len(axes)
    joystick.get_axis.side_effect = lambda i: axes[i]
    joystick.get_numbuttons.return_value = len(buttons)
    joystick.get_button.side_effect = lambda i: buttons[i]
    return joystick


class TestInputConfig:
    """Test default bindings."""

    def test_default_keyboard_bindings(self) -> None:
        """Test default keys match the classic layout."""
        config = InputConfig()

        assert config.keyboard_bindings[pygame.K_COMMA] == LogicalCommand.THRUST_DECREASE
        assert config.keyboard_bindings[pygame.K_PERIOD] == LogicalCommand.THRUST_INCREASE
        assert config.keyboard_bindings[pygame.K_f] == LogicalCommand.FLAP_TOGGLE
        assert config.keyboard_bindings[pygame.K_SPACE] == LogicalCommand.BRAKE_TOGGLE

    def test_default_button_bindings(self) -> None:
        """Test flap has no default controller button."""
        config = InputConfig()

        assert LogicalCommand.FLAP_TOGGLE not in config.button_bindings.values()
        assert config.button_bindings[0] == LogicalCommand.BRAKE_TOGGLE

    def test_custom_bindings_kept(self) -> None:
        """Test explicit bindings replace the defaults."""
        config = InputConfig(keyboard_bindings={pygame.K_b: LogicalCommand.BRAKE_TOGGLE})

        assert config.keyboard_bindings == {pygame.K_b: LogicalCommand.BRAKE_TOGGLE}


class TestKeyboardSource:
    """Test keyboard event processing."""

    @pytest.fixture
    def keyboard(self) -> KeyboardSource:
        """Create keyboard source with default bindings."""
        return KeyboardSource(InputConfig())

    def test_default_config(self) -> None:
        """Test a keyboard source without a config uses the default bindings."""
        keyboard = KeyboardSource()

        assert keyboard.config.keyboard_bindings == InputConfig().keyboard_bindings
        assert KeyboardSource.__init__.__doc__

    def test_key_down_reports_command(self, keyboard: KeyboardSource) -> None:
        """Test a bound key going down reports its command."""
        keyboard.process_events([key_event(pygame.KEYDOWN, pygame.K_PERIOD)])

        assert keyboard.pressed_commands() == frozenset({LogicalCommand.THRUST_INCREASE})

    def test_press_reported_only_one_frame(self, keyboard: KeyboardSource) -> None:
        """Test a held key is only reported on the frame it went down."""
        keyboard.process_events([key_event(pygame.KEYDOWN, pygame.K_SPACE)])
        keyboard.process_events([])

        assert keyboard.pressed_commands() == frozenset()

    def test_key_repeat_ignored(self, keyboard: KeyboardSource) -> None:
        """Test repeated KEYDOWN without KEYUP does not report again."""
        keyboard.process_events([key_event(pygame.KEYDOWN, pygame.K_SPACE)])
        keyboard.process_events([key_event(pygame.KEYDOWN, pygame.K_SPACE)])

        assert keyboard.pressed_commands() == frozenset()

    def test_release_and_press_reports_again(self, keyboard: KeyboardSource) -> None:
        """Test a new press after release reports again."""
        keyboard.process_events([key_event(pygame.KEYDOWN, pygame.K_SPACE)])
        keyboard.process_events([key_event(pygame.KEYUP, pygame.K_SPACE)])
        keyboard.process_events([key_event(pygame.KEYDOWN, pygame.K_SPACE)])

        assert keyboard.pressed_commands() == frozenset({LogicalCommand.BRAKE_TOGGLE})

    def test_unbound_key_ignored(self, keyboard: KeyboardSource) -> None:
        """Test unbound keys report nothing."""
        keyboard.process_events([key_event(pygame.KEYDOWN, pygame.K_z)])

        assert keyboard.pressed_commands() == frozenset()

    def test_held_axis_keys(self, keyboard: KeyboardSource) -> None:
        """Test held axis keys give full deflection."""
        keyboard.process_events(
            [
                key_event(pygame.KEYDOWN, pygame.K_UP),
                key_event(pygame.KEYDOWN, pygame.K_LEFT),
            ]
        )

        assert keyboard.read_axes() == (1.0, -1.0, 0.0)

    def test_axis_keys_clamped(self, keyboard: KeyboardSource) -> None:
        """Test two keys on the same axis do not exceed 1.0."""
        keyboard.process_events(
            [key_event(pygame.KEYDOWN, pygame.K_UP), key_event(pygame.KEYDOWN, pygame.K_w)]
        )

        assert keyboard.read_axes()[0] == 1.0

    def test_opposite_axis_keys_cancel(self, keyboard: KeyboardSource) -> None:
        """Test opposite keys cancel out."""
        keyboard.process_events(
            [key_event(pygame.KEYDOWN, pygame.K_e), key_event(pygame.KEYDOWN, pygame.K_q)]
        )

        assert keyboard.read_axes()[2] == 0.0

    def test_axis_released(self, keyboard: KeyboardSource) -> None:
        """Test releasing an axis key centers the axis."""
        keyboard.process_events([key_event(pygame.KEYDOWN, pygame.K_RIGHT)])
        keyboard.process_events([key_event(pygame.KEYUP, pygame.K_RIGHT)])

        assert keyboard.read_axes() == (0.0, 0.0, 0.0)

    def test_reset_forgets_keys(self, keyboard: KeyboardSource) -> None:
        """Test reset clears held keys."""
        keyboard.process_events([key_event(pygame.KEYDOWN, pygame.K_UP)])
        keyboard.reset()

        assert keyboard.read_axes() == (0.0, 0.0, 0.0)
        assert keyboard.pressed_commands() == frozenset()

    def test_custom_axis_keys(self) -> None:
        """Test custom axis key bindings."""
        config = InputConfig(axis_keys={pygame.K_j: (Axis.YAW, -1.0)})
        keyboard = KeyboardSource(config)
        keyboard.process_events([key_event(pygame.KEYDOWN, pygame.K_j)])

        assert keyboard.read_axes() == (0.0, 0.0, -1.0)


class TestJoystickSource:
    """Test joystick polling."""

    def test_axes_with_deadzone(self) -> None:
        """Test axes are deadzone-corrected and pitch is inverted."""
        joystick = make_joystick([0.55, -0.55, 0.0, 0.05], [False] * 4)
        source = JoystickSource(joystick, InputConfig(axis_deadzone=0.1))

        pitch, roll, yaw = source.read_axes()

        assert pitch == pytest.approx(0.5)
        assert roll == pytest.approx(0.5)
        assert yaw == 0.0

    def test_full_deflection(self) -> None:
        """Test full stick deflection maps to 1.0."""
        joystick = make_joystick([1.0, -1.0, 0.0, -1.0], [])
        source = JoystickSource(joystick)

        assert source.read_axes() == (1.0, 1.0, -1.0)

    def test_missing_yaw_axis(self) -> None:
        """Test a two-axis stick reports zero yaw."""
        joystick = make_joystick([0.0, 0.0], [])
        source = JoystickSource(joystick)

        assert source.read_axes()[2] == 0.0

    def test_held_buttons(self) -> None:
        """Test held bound buttons report their commands."""
        joystick = make_joystick([0.0, 0.0], [True, False, False, True])
        source = JoystickSource(joystick)

        assert source.held_commands() == frozenset(
            {LogicalCommand.BRAKE_TOGGLE, LogicalCommand.THRUST_INCREASE}
        )

    def test_button_beyond_count_ignored(self) -> None:
        """Test bindings to buttons the device lacks are ignored."""
        joystick = make_joystick([0.0, 0.0], [False])
        source = JoystickSource(joystick)

        assert source.held_commands() == frozenset()
        joystick.get_button.assert_called_once_with(0)

    def test_detect_no_joystick(self) -> None:
        """Test detect returns None without a device."""
        with patch(PATCH_JOYSTICK) as joystick_module:
            joystick_module.get_count.return_value = 0
            assert JoystickSource.detect(InputConfig()) is None

    def test_detect_disabled(self) -> None:
        """Test detect returns None when joysticks are disabled."""
        with patch(PATCH_JOYSTICK) as joystick_module:
            assert JoystickSource.detect(InputConfig(enable_joystick=False)) is None
            joystick_module.init.assert_not_called()

    def test_detect_opens_first_joystick(self) -> None:
        """Test detect opens joystick 0."""
        with patch(PATCH_JOYSTICK) as joystick_module:
            joystick_module.get_count.return_value = 2
            device = joystick_module.Joystick.return_value
            device.get_name.return_value = "Test Stick"
            device.get_numaxes.return_value = 4
            device.get_numbuttons.return_value = 8
            source = JoystickSource.detect(InputConfig())

        assert source is not None
        joystick_module.Joystick.assert_called_once_with(0)
        source.joystick.init.assert_called_once()


class TestReadSample:
    """Test sample composition."""

    def test_no_sources(self) -> None:
        """Test missing sources give a neutral sample."""
        assert read_sample(None, None, None) == InputSample()

    def test_combines_sources(self) -> None:
        """Test one sample is built from all three sources."""
        keyboard = KeyboardSource(InputConfig())
        keyboard.process_events([key_event(pygame.KEYDOWN, pygame.K_f)])
        joystick = JoystickSource(make_joystick([0.0, -1.0, 0.0, 0.0], [False, False, True]))

        sample = read_sample(joystick, keyboard, joystick)

        assert sample.pitch == 1.0
        assert sample.key_presses == frozenset({LogicalCommand.FLAP_TOGGLE})
        assert sample.held_buttons == frozenset({LogicalCommand.THRUST_DECREASE})
