"""Logging bootstrap for airctl.

Every module obtains its logger through ``get_logger(__name__)``. The
application calls ``initialize_logging`` once at startup, either with a YAML
``dictConfig`` file or with the built-in defaults (console + rotating file).

Typical usage example:
    from airctl.core.logging_system import get_logger, initialize_logging

    initialize_logging("config/logging.yaml", use_platform_dir=True)
    logger = get_logger(__name__)
    logger.info("Controller ready")
"""

import logging
import logging.config
import logging.handlers
import os
import platform
from pathlib import Path
from typing import Any

import yaml

APP_NAME = "airctl"
DEFAULT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

_initialized = False


def get_log_dir(use_platform_dir: bool = False) -> Path:
    """Get the directory log files are written to.

    Args:
        use_platform_dir: Use the OS-specific per-user log location instead
            of ./logs.

    Returns:
        Path to the log directory (not created).
    """
    if not use_platform_dir:
        return Path("logs")

    system = platform.system()
    if system == "Darwin":
        return Path.home() / "Library" / "Logs" / APP_NAME
    if system == "Windows":
        base = os.environ.get("LOCALAPPDATA", str(Path.home() / "AppData" / "Local"))
        return Path(base) / APP_NAME / "logs"
    base = os.environ.get("XDG_STATE_HOME", str(Path.home() / ".local" / "state"))
    return Path(base) / APP_NAME / "logs"


def _default_config(log_dir: Path, level: str) -> dict[str, Any]:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"standard": {"format": DEFAULT_FORMAT}},
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "standard",
                "level": level,
            },
            "file": {
                "class": "logging.handlers.RotatingFileHandler",
                "formatter": "standard",
                "level": "DEBUG",
                "filename": str(log_dir / f"{APP_NAME}.log"),
                "maxBytes": 5 * 1024 * 1024,
                "backupCount": 3,
                "encoding": "utf-8",
            },
        },
        "root": {"level": "DEBUG", "handlers": ["console", "file"]},
    }


def initialize_logging(
    config_path: str | None = None,
    use_platform_dir: bool = False,
    level: str | None = None,
) -> None:
    """Configure logging for the whole process.

    Loads a YAML dictConfig when ``config_path`` points to an existing file.
    File handler paths in the YAML that are relative are placed inside the log
    directory. Falls back to the built-in configuration if the file is missing
    or invalid. Calling this more than once has no effect.

    Args:
        config_path: Optional path to a logging YAML file.
        use_platform_dir: Write log files to the platform log directory.
        level: Console level override (defaults to $AIRCTL_LOG_LEVEL or INFO).
    """
    global _initialized
    if _initialized:
        return

    level = (level or os.environ.get("AIRCTL_LOG_LEVEL", "INFO")).upper()
    log_dir = get_log_dir(use_platform_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    config: dict[str, Any] | None = None
    if config_path and Path(config_path).exists():
        try:
            with open(config_path, encoding="utf-8") as f:
                config = yaml.safe_load(f)
            for handler in config.get("handlers", {}).values():
                filename = handler.get("filename")
                if filename and not Path(filename).is_absolute():
                    handler["filename"] = str(log_dir / filename)
        except (OSError, yaml.YAMLError, AttributeError) as e:
            logging.getLogger(__name__).warning(
                "Invalid logging config %s (%s), using defaults", config_path, e
            )
            config = None

    if config is None:
        config = _default_config(log_dir, level)

    try:
        logging.config.dictConfig(config)
    except (ValueError, TypeError) as e:
        logging.basicConfig(level=level, format=DEFAULT_FORMAT)
        logging.getLogger(__name__).warning("Failed to apply logging config: %s", e)

    _initialized = True
    logging.getLogger(__name__).debug("Logging initialized (log dir: %s)", log_dir)


def reset_logging() -> None:
    """Allow ``initialize_logging`` to run again (used by tests)."""
    global _initialized
    _initialized = False


def get_logger(name: str) -> logging.Logger:
    """Get a module logger.

    Args:
        name: Logger name, normally ``__name__``.

    Returns:
        Standard library logger.
    """
    return logging.getLogger(name)
