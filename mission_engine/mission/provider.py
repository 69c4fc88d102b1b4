"""Mission and vehicle configuration providers.

Providers turn raw configuration into validated models. Raw documents use
the mission file layout:

    {
        "mission": {"name": ..., "drone_model": ..., "safety_parameters": {...}, ...},
        "commands": [{"id": 1, "type": "takeoff", "parameters": {...}, ...}],
        "telemetry_config": {"update_rate_hz": 10, ...}
    }

and the vehicle file layout ``{"drone": {"model": ..., ...}}``.
"""

import json
import logging
from pathlib import Path
from typing import Any, Protocol

from pydantic import ValidationError

from mission_engine.exceptions.configuration_errors import (
    ConfigInvalidError,
    UnsupportedCommandKindError,
)
from mission_engine.mission.models import MissionDefinition, resolve_command_kind
from mission_engine.vehicle.models import VehicleProfile

logger = logging.getLogger(__name__)

_JSON_SUFFIX = ".json"


class ConfigProvider(Protocol):
    """Source of mission definitions and vehicle profiles."""

    def load_mission(self, mission_id: str) -> MissionDefinition:
        """Load and validate a mission.

        Raises:
            ConfigInvalidError: If the mission is missing or malformed.
            UnsupportedCommandKindError: If a command kind is unknown.
        """
        ...

    def load_vehicle(self, vehicle_id: str) -> VehicleProfile:
        """Load and validate a vehicle profile.

        Raises:
            ConfigInvalidError: If the profile is missing or malformed.
        """
        ...


def _require_mapping(value: Any, *, source: str, field: str) -> dict[str, Any]:
    """Return value if it is a JSON object, else raise ConfigInvalidError."""
    if not isinstance(value, dict):
        raise ConfigInvalidError(
            f"Expected an object for '{field}', got {type(value).__name__}",
            source=source,
            field=field,
        )
    return value


def _raise_from_validation_error(error: ValidationError, *, source: str) -> None:
    """Translate a pydantic ValidationError into ConfigInvalidError."""
    first_error = error.errors()[0]
    location = ".".join(str(part) for part in first_error["loc"])
    raise ConfigInvalidError(
        f"Invalid configuration at '{location}': {first_error['msg']}",
        source=source,
        field=location or None,
        context={"error_count": error.error_count()},
    ) from error


def _normalize_command(raw_command: Any, *, index: int, source: str) -> dict[str, Any]:
    """Map one raw command onto CommandSpec fields, resolving its kind."""
    command = _require_mapping(raw_command, source=source, field=f"commands.{index}")
    raw_kind = command.get("kind", command.get("type"))
    command_id = command.get("id")

    if not isinstance(raw_kind, str) or not raw_kind.strip():
        raise ConfigInvalidError(
            "Command is missing its type",
            source=source,
            field=f"commands.{index}.type",
        )

    kind = resolve_command_kind(raw_kind)
    if kind is None:
        raise UnsupportedCommandKindError(
            f"Unsupported command type: {raw_kind}",
            kind=raw_kind,
            command_id=command_id if isinstance(command_id, int) else None,
            context={"source": source},
        )

    return {
        "id": command_id,
        "kind": kind,
        "description": command.get("description", ""),
        "parameters": command.get("parameters", {}),
        "expected_duration_seconds": command.get("expected_duration_seconds", 0),
        "safety_checks": command.get("safety_checks", []),
    }


def parse_mission(data: Any, *, source: str = "<memory>") -> MissionDefinition:
    """Validate a raw mission document.

    Args:
        data: Decoded mission document.
        source: Origin of the document, for error context.

    Returns:
        The validated mission.

    Raises:
        ConfigInvalidError: If required fields are absent or of the wrong shape.
        UnsupportedCommandKindError: If a command type is not recognized.
    """
    document = _require_mapping(data, source=source, field="<root>")
    details = _require_mapping(document.get("mission"), source=source, field="mission")
    raw_commands = document.get("commands", [])
    if not isinstance(raw_commands, list):
        raise ConfigInvalidError(
            f"Expected a list for 'commands', got {type(raw_commands).__name__}",
            source=source,
            field="commands",
        )

    commands = [
        _normalize_command(raw_command, index=index, source=source)
        for index, raw_command in enumerate(raw_commands)
    ]

    try:
        mission = MissionDefinition.model_validate(
            {
                "name": details.get("name"),
                "description": details.get("description", ""),
                "vehicle_model": details.get("drone_model", details.get("vehicle_model", "")),
                "duration_estimate_seconds": details.get("duration_estimate_seconds", 0),
                "safety_parameters": details.get("safety_parameters"),
                "environment": details.get("environment", {}),
                "commands": commands,
                "telemetry": document.get("telemetry_config"),
            }
        )
    except ValidationError as error:
        _raise_from_validation_error(error, source=source)

    logger.info(
        "Loaded mission %r (%d commands, %s Hz telemetry)",
        mission.name,
        len(mission.commands),
        mission.telemetry.update_rate_hz,
        extra={"source": source},
    )
    return mission


def parse_vehicle(data: Any, *, source: str = "<memory>") -> VehicleProfile:
    """Validate a raw vehicle document.

    Args:
        data: Decoded vehicle document.
        source: Origin of the document, for error context.

    Returns:
        The validated vehicle profile.

    Raises:
        ConfigInvalidError: If required fields are absent or of the wrong shape.
    """
    document = _require_mapping(data, source=source, field="<root>")
    details = _require_mapping(document.get("drone"), source=source, field="drone")

    try:
        vehicle = VehicleProfile.model_validate(details)
    except ValidationError as error:
        _raise_from_validation_error(error, source=source)

    logger.info(
        "Loaded vehicle %r by %s",
        vehicle.model,
        vehicle.manufacturer or "unknown manufacturer",
        extra={"source": source},
    )
    return vehicle


class JsonFileConfigProvider:
    """Reads missions/<id>.json and drones/<id>.json under a directory."""

    def __init__(self, directory: str | Path) -> None:
        """Initialize the provider.

        Args:
            directory: Root directory containing missions/ and drones/.
        """
        self._directory = Path(directory)

    def load_mission(self, mission_id: str) -> MissionDefinition:
        """Load a mission file by id."""
        path = self._resolve_path("missions", mission_id)
        return parse_mission(self._read_json(path), source=str(path))

    def load_vehicle(self, vehicle_id: str) -> VehicleProfile:
        """Load a vehicle file by id."""
        path = self._resolve_path("drones", vehicle_id)
        return parse_vehicle(self._read_json(path), source=str(path))

    def _resolve_path(self, subdirectory: str, identifier: str) -> Path:
        """Return the file path for an id, with or without a .json suffix."""
        if not identifier:
            raise ConfigInvalidError(
                f"No {subdirectory} id given",
                source=str(self._directory / subdirectory),
            )
        file_name = identifier if identifier.endswith(_JSON_SUFFIX) else identifier + _JSON_SUFFIX
        return self._directory / subdirectory / file_name

    def _read_json(self, path: Path) -> Any:
        """Read and decode a JSON file.

        Raises:
            ConfigInvalidError: If the file is missing, unreadable, not UTF-8
                or not JSON.
        """
        if not path.is_file():
            raise ConfigInvalidError(f"Configuration file not found: {path}", source=str(path))
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as error:
            raise ConfigInvalidError(
                f"Configuration file is not valid JSON: {error.msg} (line {error.lineno})",
                source=str(path),
            ) from error
        except UnicodeDecodeError as error:
            raise ConfigInvalidError(
                f"Configuration file is not valid UTF-8 (byte {error.start})",
                source=str(path),
            ) from error
        except OSError as error:
            raise ConfigInvalidError(
                f"Configuration file could not be read: {error}",
                source=str(path),
            ) from error


class InMemoryConfigProvider:
    """Serves raw mission and vehicle documents held in dictionaries."""

    def __init__(
        self,
        missions: dict[str, Any] | None = None,
        vehicles: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the provider.

        Args:
            missions: Raw mission documents by id.
            vehicles: Raw vehicle documents by id.
        """
        self._missions = missions or {}
        self._vehicles = vehicles or {}

    def load_mission(self, mission_id: str) -> MissionDefinition:
        """Load a mission document by id."""
        if mission_id not in self._missions:
            raise ConfigInvalidError(f"Mission {mission_id!r} not found", source="memory")
        return parse_mission(self._missions[mission_id], source=f"memory:{mission_id}")

    def load_vehicle(self, vehicle_id: str) -> VehicleProfile:
        """Load a vehicle document by id."""
        if vehicle_id not in self._vehicles:
            raise ConfigInvalidError(f"Vehicle {vehicle_id!r} not found", source="memory")
        return parse_vehicle(self._vehicles[vehicle_id], source=f"memory:{vehicle_id}")
