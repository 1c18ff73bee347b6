"""Tests for command line parsing."""

from airctl.main import DEFAULT_AIRFRAME, FIXED_STEP, parse_args


class TestParseArgs:
    """Test argument defaults and overrides."""

    def test_defaults(self) -> None:
        """Test defaults point at the bundled configuration."""
        args = parse_args([])

        assert args.airframe == str(DEFAULT_AIRFRAME)
        assert args.settings is None
        assert args.log_config.endswith("logging.yaml")
        assert args.no_joystick is False

    def test_overrides(self) -> None:
        """Test every option can be overridden."""
        args = parse_args(
            ["--airframe", "glider.yaml", "--settings", "mine.yaml", "--no-joystick"]
        )

        assert args.airframe == "glider.yaml"
        assert args.settings == "mine.yaml"
        assert args.no_joystick is True


def test_fixed_step_is_50_hz() -> None:
    """Test actuation runs at 50 Hz."""
    assert FIXED_STEP == 1.0 / 50.0
