"""Safety check data models."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from mission_engine.vehicle.models import DroneState


class SafetyCheckId(StrEnum):
    """Built-in named safety checks."""

    BATTERY_LEVEL = "battery_level"
    ALTITUDE_HOLD = "altitude_hold"
    POSITION_STABILITY = "position_stability"
    PATH_CLEAR = "path_clear"
    LANDING_ZONE_CLEAR = "landing_zone_clear"


class SafetyViolation(BaseModel):
    """A failed safety check together with the state that failed it."""

    model_config = ConfigDict(frozen=True)

    check_name: str
    reason: str
    command_id: int | None = None
    state_snapshot: DroneState


class PreflightReport(BaseModel):
    """Result of the pre-flight check."""

    failures: list[str] = Field(default_factory=list)
    unsupported_command_ids: list[int] = Field(default_factory=list)

    @property
    def passed(self) -> bool:
        """Return whether every pre-flight check passed."""
        return not self.failures and not self.unsupported_command_ids
