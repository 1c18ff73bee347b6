"""airctl - input-to-actuation control layer for simulated vehicles."""

from airctl.version import __version__, get_version

__all__ = ["__version__", "get_version"]
