"""airctl - interactive control bench.

Opens a pygame window, reads keyboard and joystick input, and shows the
command state and every control surface deflection as they update. Input is
sampled once per frame; surfaces are actuated on a fixed 50 Hz step.

Typical usage:
    airctl --airframe config/airframes/trainer.yaml
    python -m airctl.main --no-joystick
"""

import argparse
import sys
from pathlib import Path

import pygame

from airctl.control.actuation import Engine
from airctl.control.airframe import Airframe, load_airframe
from airctl.control.controller import VehicleController
from airctl.core.event_bus import EventBus
from airctl.core.input import JoystickSource, KeyboardSource
from airctl.core.input_edge import CommandFiredEvent
from airctl.core.logging_system import get_logger, initialize_logging
from airctl.settings.control_settings import ControlSettings
from airctl.telemetry.status_display import format_status
from airctl.version import get_version

logger = get_logger(__name__)

CONFIG_DIR = Path("config")
DEFAULT_AIRFRAME = CONFIG_DIR / "airframes" / "trainer.yaml"
FIXED_STEP = 1.0 / 50.0


class ControlBench:  # pylint: disable=too-many-instance-attributes
    """Main application window driving a VehicleController."""

    def __init__(self, args: argparse.Namespace) -> None:
        """Initialize the application.

        Args:
            args: Parsed command line arguments.
        """
        self.args = args

        self.settings = ControlSettings()
        self.settings.load(args.settings)
        if args.no_joystick:
            self.settings.enable_joystick = False

        self.airframe: Airframe = load_airframe(args.airframe)

        pygame.init()
        pygame.display.set_caption(f"airctl {get_version()}")
        self.screen = pygame.display.set_mode((640, 480), pygame.RESIZABLE)
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("monospace", 16)
        self.running = True

        self.event_bus = EventBus()
        self.event_bus.subscribe(CommandFiredEvent, self._on_command_fired)

        input_config = self.settings.to_input_config()
        self.keyboard = KeyboardSource(input_config)
        self.joystick = JoystickSource.detect(input_config)
        self.engine = Engine()
        self.sensitivity = self.settings.apply_sensitivity()

        self.controller = VehicleController(
            self.sensitivity,
            surfaces=self.airframe.surfaces,
            wheels=self.airframe.wheels,
            engine=self.engine,
            keyboard=self.keyboard,
            joystick=self.joystick,
            event_bus=self.event_bus,
            flap_deployed=self.settings.flap_deployed,
            brake_magnitude=self.settings.brake_torque,
        )
        self._accumulator = 0.0
        self._last_fired = ""

    def _on_command_fired(self, event: CommandFiredEvent) -> None:
        self._last_fired = event.command

    def run(self) -> None:
        """Run the main loop until the window is closed."""
        logger.info("Starting control loop")
        self.controller.preview()

        while self.running:
            dt = self.clock.tick(120) / 1000.0

            self._process_events()
            self.controller.update()

            self._accumulator += dt
            while self._accumulator >= FIXED_STEP:
                self.controller.fixed_update()
                self._accumulator -= FIXED_STEP

            self._render()
            pygame.display.flip()

        self._shutdown()

    def _process_events(self) -> None:
        events = pygame.event.get()
        for event in events:
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                self.running = False
            elif event.type == pygame.VIDEORESIZE:
                self.screen = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)
            elif event.type == pygame.WINDOWFOCUSLOST:
                self.keyboard.reset()
        self.keyboard.process_events(events)

    def _render(self) -> None:
        self.screen.fill((0, 0, 0))
        state = self.controller.get_state()

        lines = format_status(state).splitlines()
        lines += [
            "",
            f"Pitch: {state.pitch:+.2f}  Roll: {state.roll:+.2f}  Yaw: {state.yaw:+.2f}",
            f"Flap: {state.flap:.2f}  Last command: {self._last_fired or '-'}",
            "",
            f"{self.airframe.name} surfaces:",
        ]
        for surface in self.airframe.surfaces:
            marker = " " if surface.is_control_actuator else "x"
            lines.append(f" {marker} {surface.name:<16} {surface.deflection:+.3f}")

        y_offset = 10
        for line in lines:
            text = self.font.render(line, True, (0, 255, 0))
            self.screen.blit(text, (10, y_offset))
            y_offset += 18

    def _shutdown(self) -> None:
        logger.info("Shutting down")
        pygame.quit()


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(description="airctl - vehicle control input bench")
    parser.add_argument(
        "--airframe",
        type=str,
        default=str(DEFAULT_AIRFRAME),
        help="Airframe YAML file listing control surfaces and wheels",
    )
    parser.add_argument(
        "--settings",
        type=str,
        default=None,
        help="Control settings YAML file (default: ~/.airctl/controls.yaml)",
    )
    parser.add_argument(
        "--log-config",
        type=str,
        default=str(CONFIG_DIR / "logging.yaml"),
        help="Logging configuration YAML file",
    )
    parser.add_argument(
        "--no-joystick",
        action="store_true",
        help="Ignore connected joysticks and use the keyboard only",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Returns:
        Exit code (0 for success).
    """
    args = parse_args(argv)
    initialize_logging(args.log_config, use_platform_dir=True)
    logger.info("airctl %s starting up...", get_version())

    try:
        ControlBench(args).run()
    except KeyboardInterrupt:
        logger.info("Interrupted")
    except pygame.error as e:
        logger.error("Display error: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
