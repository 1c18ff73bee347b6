"""Tests for the logging bootstrap."""

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from airctl.core import logging_system
from airctl.core.logging_system import (
    APP_NAME,
    get_log_dir,
    get_logger,
    initialize_logging,
    reset_logging,
)


@pytest.fixture
def clean_logging(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Run in a temp directory and restore the root logger afterwards."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("AIRCTL_LOG_LEVEL", raising=False)
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    reset_logging()
    yield tmp_path
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)
    reset_logging()


class TestGetLogDir:
    """Test log directory selection."""

    def test_local_logs_dir(self) -> None:
        """Test the default is ./logs."""
        assert get_log_dir() == Path("logs")

    def test_linux_platform_dir(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test XDG_STATE_HOME is honored on Linux."""
        monkeypatch.setattr(logging_system.platform, "system", lambda: "Linux")
        monkeypatch.setenv("XDG_STATE_HOME", "/tmp/state")

        assert get_log_dir(use_platform_dir=True) == Path("/tmp/state") / APP_NAME / "logs"

    def test_macos_platform_dir(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test macOS uses ~/Library/Logs."""
        monkeypatch.setattr(logging_system.platform, "system", lambda: "Darwin")

        assert get_log_dir(use_platform_dir=True) == Path.home() / "Library" / "Logs" / APP_NAME


class TestInitializeLogging:
    """Test logging configuration."""

    def test_default_config_writes_file(self, clean_logging: Path) -> None:
        """Test the built-in config logs to logs/airctl.log."""
        initialize_logging()
        get_logger("airctl.test").info("hello")

        log_file = clean_logging / "logs" / f"{APP_NAME}.log"
        assert log_file.exists()
        assert "hello" in log_file.read_text(encoding="utf-8")

    def test_yaml_config_relative_filename(self, clean_logging: Path) -> None:
        """Test relative handler filenames are placed in the log directory."""
        config = clean_logging / "logging.yaml"
        config.write_text(
            "version: 1\n"
            "disable_existing_loggers: false\n"
            "handlers:\n"
            "  file:\n"
            "    class: logging.FileHandler\n"
            "    filename: custom.log\n"
            "root:\n"
            "  level: INFO\n"
            "  handlers: [file]\n",
            encoding="utf-8",
        )

        initialize_logging(str(config))
        get_logger("airctl.test").warning("from yaml")

        log_file = clean_logging / "logs" / "custom.log"
        assert "from yaml" in log_file.read_text(encoding="utf-8")

    def test_invalid_yaml_falls_back(self, clean_logging: Path) -> None:
        """Test a broken config file falls back to the defaults."""
        config = clean_logging / "logging.yaml"
        config.write_text("version: [unclosed\n", encoding="utf-8")

        initialize_logging(str(config))

        assert (clean_logging / "logs" / f"{APP_NAME}.log").exists()

    def test_initialize_is_idempotent(self, clean_logging: Path) -> None:
        """Test repeated calls do not add handlers."""
        initialize_logging()
        count = len(logging.getLogger().handlers)
        initialize_logging()

        assert len(logging.getLogger().handlers) == count

    def test_level_from_environment(
        self, clean_logging: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test AIRCTL_LOG_LEVEL sets the console level."""
        monkeypatch.setenv("AIRCTL_LOG_LEVEL", "warning")
        initialize_logging()

        console = [
            h
            for h in logging.getLogger().handlers
            if type(h) is logging.StreamHandler  # pylint: disable=unidiomatic-typecheck
        ]
        assert console[0].level == logging.WARNING


def test_get_logger_uses_name() -> None:
    """Test loggers are named after the module."""
    assert get_logger("airctl.control.mixer").name == "airctl.control.mixer"
