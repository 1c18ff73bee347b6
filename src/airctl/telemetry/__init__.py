"""Telemetry readouts derived from the command state."""

from airctl.telemetry.status_display import format_status, meters_to_feet, mps_to_knots

__all__ = ["format_status", "meters_to_feet", "mps_to_knots"]
