"""Airframe definitions loaded from YAML.

An airframe file lists the control surfaces and wheels of a vehicle:

    name: Trainer
    surfaces:
      - name: elevator
        role: pitch
        gain: 1.0
      - name: left_aileron
        role: roll
        gain: -1.0
      - name: pitot_fairing
        role: none
        control_surface: false
    wheels: [nose, left_main, right_main]
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from airctl.control.actuation import Wheel
from airctl.control.mixer import ActuatorRole, ControlSurface
from airctl.core.logging_system import get_logger

logger = get_logger(__name__)


class AirframeError(ValueError):
    """Raised for a malformed airframe entry."""


@dataclass
class Airframe:
    """Actuators making up one vehicle.

    Attributes:
        name: Airframe name.
        surfaces: Control surfaces in file order.
        wheels: Braked wheels.
    """

    name: str = "unnamed"
    surfaces: list[ControlSurface] = field(default_factory=list)
    wheels: list[Wheel] = field(default_factory=list)

    def surface(self, name: str) -> ControlSurface | None:
        """Find a surface by name."""
        for surface in self.surfaces:
            if surface.name == name:
                return surface
        return None


def surface_from_dict(data: Any) -> ControlSurface:
    """Build a control surface from a YAML mapping.

    Args:
        data: Mapping with ``name`` and optional ``role``, ``gain`` and
            ``control_surface`` keys.

    Returns:
        The control surface.

    Raises:
        AirframeError: If the entry is not a mapping, the name is missing,
            the role is unknown or the gain is not a number.
    """
    if not isinstance(data, dict):
        raise AirframeError(f"Surface entry is not a mapping: {data!r}")

    name = data.get("name")
    if not name:
        raise AirframeError(f"Surface entry without a name: {data!r}")

    role_name = str(data.get("role", "none")).lower()
    try:
        role = ActuatorRole(role_name)
    except ValueError as e:
        raise AirframeError(f"Unknown role '{role_name}' for surface '{name}'") from e

    try:
        gain = float(data.get("gain", 1.0))
    except (TypeError, ValueError) as e:
        raise AirframeError(f"Invalid gain {data.get('gain')!r} for surface '{name}'") from e

    return ControlSurface(
        name=str(name),
        role=role,
        gain=gain,
        is_control_actuator=bool(data.get("control_surface", True)),
    )


def surface_to_dict(surface: ControlSurface) -> dict[str, Any]:
    """Convert a control surface to a YAML mapping."""
    return {
        "name": surface.name,
        "role": surface.role.value,
        "gain": surface.gain,
        "control_surface": surface.is_control_actuator,
    }


def load_airframe(path: Path | str) -> Airframe:
    """Load an airframe file.

    Invalid surface entries are logged and left out. A missing or unreadable
    file gives an empty airframe.

    Args:
        path: Path to the airframe YAML file.

    Returns:
        The loaded airframe.
    """
    path = Path(path)
    if not path.exists():
        logger.warning("Airframe file not found: %s", path)
        return Airframe()

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.error("Failed to load airframe %s: %s", path, e)
        return Airframe()

    if not isinstance(data, dict):
        logger.error("Airframe %s is not a mapping, ignoring it", path)
        return Airframe()

    surfaces = data.get("surfaces") or []
    wheels = data.get("wheels") or []
    if not isinstance(surfaces, list) or not isinstance(wheels, list):
        logger.error("Airframe %s: surfaces and wheels must be lists", path)
        return Airframe()

    airframe = Airframe(name=str(data.get("name", path.stem)))
    for entry in surfaces:
        try:
            airframe.surfaces.append(surface_from_dict(entry))
        except AirframeError as e:
            logger.error("Skipping surface in %s: %s", path, e)

    airframe.wheels = [Wheel(name=str(name)) for name in wheels]

    logger.info(
        "Loaded airframe '%s': %d surfaces, %d wheels",
        airframe.name,
        len(airframe.surfaces),
        len(airframe.wheels),
    )
    return airframe


def save_airframe(airframe: Airframe, path: Path | str) -> bool:
    """Write an airframe to a YAML file.

    Returns:
        True if saved successfully, False on error.
    """
    path = Path(path)
    data = {
        "name": airframe.name,
        "surfaces": [surface_to_dict(s) for s in airframe.surfaces],
        "wheels": [w.name for w in airframe.wheels],
    }
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
    except OSError as e:
        logger.error("Failed to save airframe %s: %s", path, e)
        return False
    logger.info("Saved airframe '%s' to %s", airframe.name, path)
    return True
