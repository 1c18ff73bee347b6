"""Status readout for the heads-up text display.

Formats speed, altitude, thrust and brake status from the controller's read
accessor. Speed is shown in knots and altitude in feet.
"""

from airctl.control.command_state import CommandState

KNOTS_PER_MPS = 1.9438444924
FEET_PER_METER = 3.28084


def mps_to_knots(mps: float) -> float:
    """Convert speed from m/s to knots."""
    return mps * KNOTS_PER_MPS


def meters_to_feet(meters: float) -> float:
    """Convert length from meters to feet."""
    return meters * FEET_PER_METER


def format_status(state: CommandState, speed_mps: float = 0.0, altitude_m: float = 0.0) -> str:
    """Build the four-line status text.

    Args:
        state: Current command state.
        speed_mps: Vehicle speed in m/s.
        altitude_m: Height in meters.

    Returns:
        Text such as ``"V: 042 knots\\nA: 0123 feet\\nT: 40%\\nB: OFF"``.
    """
    speed = int(mps_to_knots(speed_mps))
    altitude = int(meters_to_feet(altitude_m))
    lines = [
        f"V: {speed:03d} knots",
        f"A: {altitude:04d} feet",
        f"T: {state.thrust_percent}%",
        "B: ON" if state.brake_active else "B: OFF",
    ]
    return "\n".join(lines)
