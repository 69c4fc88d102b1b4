"""Mission domain models."""

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class CommandKind(StrEnum):
    """Closed set of flight commands the engine can execute."""

    ASCEND = "ascend"
    HOLD = "hold"
    CIRCULAR_PATH = "circular_path"
    DESCEND_AND_LAND = "descend_and_land"


# Mission files written for earlier simulators use these names.
COMMAND_KIND_ALIASES: dict[str, CommandKind] = {
    "ascend": CommandKind.ASCEND,
    "takeoff": CommandKind.ASCEND,
    "climb": CommandKind.ASCEND,
    "hold": CommandKind.HOLD,
    "hover": CommandKind.HOLD,
    "pause": CommandKind.HOLD,
    "circular_path": CommandKind.CIRCULAR_PATH,
    "circle": CommandKind.CIRCULAR_PATH,
    "descend_and_land": CommandKind.DESCEND_AND_LAND,
    "land": CommandKind.DESCEND_AND_LAND,
}


def resolve_command_kind(raw_kind: str) -> CommandKind | None:
    """Map a command type as written in a mission file to a CommandKind.

    Args:
        raw_kind: Command type string, any case.

    Returns:
        The matching kind, or None if the name is not recognized.
    """
    return COMMAND_KIND_ALIASES.get(raw_kind.strip().lower())


class CircleDirection(StrEnum):
    """Direction of travel around a circular path."""

    CLOCKWISE = "clockwise"
    COUNTERCLOCKWISE = "counterclockwise"


_DIRECTION_ALIASES: dict[str, CircleDirection] = {
    "cw": CircleDirection.CLOCKWISE,
    "ccw": CircleDirection.COUNTERCLOCKWISE,
    "counter_clockwise": CircleDirection.COUNTERCLOCKWISE,
    "anticlockwise": CircleDirection.COUNTERCLOCKWISE,
}


class SafetyParameters(BaseModel):
    """Safety thresholds every phase of a mission consults."""

    model_config = ConfigDict(frozen=True)

    max_altitude_feet: float = Field(gt=0)
    max_speed_fps: float = Field(gt=0)
    emergency_land_battery_percent: int = Field(ge=0, le=100)
    geofence_radius_feet: float = Field(gt=0)
    max_wind_speed_mph: float = Field(ge=0)


class EnvironmentRequirements(BaseModel):
    """Where a mission may be flown."""

    model_config = ConfigDict(frozen=True)

    indoor_safe: bool = Field(default=False)
    outdoor_capable: bool = Field(default=True)
    recommended_space: str = Field(default="")


class TelemetryConfig(BaseModel):
    """Telemetry rate and display options."""

    model_config = ConfigDict(frozen=True)

    update_rate_hz: int = Field(gt=0, le=1000)
    data_points: list[str] = Field(default_factory=list)
    logging_enabled: bool = Field(default=True)
    real_time_display: bool = Field(default=True)


class CommandSpec(BaseModel):
    """One step of a mission."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(ge=0)
    kind: CommandKind
    description: str = Field(default="")
    parameters: dict[str, Any] = Field(default_factory=dict)
    expected_duration_seconds: float = Field(default=0.0, ge=0)
    safety_checks: list[str] = Field(default_factory=list)

    def typed_parameters(self) -> "CommandParameters":
        """Validate the raw parameter map against the model for this kind.

        Returns:
            The typed parameters.

        Raises:
            pydantic.ValidationError: If the parameters do not fit the kind.
        """
        return PARAMETER_MODELS[self.kind].model_validate(self.parameters)


class AscendParameters(BaseModel):
    """Parameters of an Ascend command."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    target_altitude_feet: float = Field(gt=0)
    climb_rate_fps: float = Field(gt=0)
    stabilization_time_seconds: float = Field(default=0.0, ge=0)


class HoldParameters(BaseModel):
    """Parameters of a Hold command."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    duration_seconds: float = Field(ge=0)
    position_hold: bool = Field(default=True)
    altitude_tolerance_feet: float = Field(default=0.5, ge=0)


class CircularPathParameters(BaseModel):
    """Parameters of a CircularPath command."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    radius_feet: float = Field(gt=0)
    speed_fps: float = Field(gt=0)
    altitude_feet: float = Field(ge=0)
    direction: CircleDirection = Field(default=CircleDirection.CLOCKWISE)
    num_revolutions: float = Field(default=1.0, gt=0)
    smooth_entry: bool = Field(default=True)

    @field_validator("direction", mode="before")
    @classmethod
    def normalize_direction(cls, value: Any) -> Any:
        """Accept short and alternative spellings of a direction."""
        if isinstance(value, str):
            lowered = value.strip().lower()
            return _DIRECTION_ALIASES.get(lowered, lowered)
        return value


class DescendAndLandParameters(BaseModel):
    """Parameters of a DescendAndLand command."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    descent_rate_fps: float = Field(gt=0)
    precision_landing: bool = Field(default=False)
    final_approach_height_feet: float = Field(default=1.0, ge=0)
    touchdown_speed_fps: float = Field(default=0.2, gt=0)


CommandParameters = (
    AscendParameters | HoldParameters | CircularPathParameters | DescendAndLandParameters
)

PARAMETER_MODELS: dict[CommandKind, type[CommandParameters]] = {
    CommandKind.ASCEND: AscendParameters,
    CommandKind.HOLD: HoldParameters,
    CommandKind.CIRCULAR_PATH: CircularPathParameters,
    CommandKind.DESCEND_AND_LAND: DescendAndLandParameters,
}


class MissionDefinition(BaseModel):
    """A complete, immutable mission: metadata, safety limits and commands."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    description: str = Field(default="")
    vehicle_model: str = Field(default="")
    duration_estimate_seconds: float = Field(default=0.0, ge=0)
    safety_parameters: SafetyParameters
    environment: EnvironmentRequirements = Field(default_factory=EnvironmentRequirements)
    commands: list[CommandSpec] = Field(default_factory=list)
    telemetry: TelemetryConfig

    @model_validator(mode="after")
    def validate_command_order(self) -> "MissionDefinition":
        """Require command ids to run in ascending order without gaps."""
        for previous, current in zip(self.commands, self.commands[1:], strict=False):
            if current.id != previous.id + 1:
                error_message = (
                    f"command ids must ascend without gaps: "
                    f"id {current.id} follows id {previous.id}"
                )
                raise ValueError(error_message)
        return self
