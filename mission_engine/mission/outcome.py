"""Terminal result of a mission run."""

from enum import StrEnum

from pydantic import BaseModel, Field

from mission_engine.exceptions.base import MissionEngineError
from mission_engine.exceptions.configuration_errors import ConfigInvalidError, ConfigurationError
from mission_engine.exceptions.mission_errors import PreflightFailedError, SafetyAbortError
from mission_engine.safety.models import SafetyViolation
from mission_engine.vehicle.models import DroneState


class OutcomeStatus(StrEnum):
    """How a mission run ended."""

    SUCCESS = "success"
    ABORTED = "aborted"
    PREFLIGHT_FAILED = "preflight_failed"
    CONFIG_INVALID = "config_invalid"


class MissionOutcome(BaseModel):
    """Result returned by MissionController for every run.

    Failures are values, not exceptions: callers inspect the status or call
    raise_for_status() to turn a failed outcome into the matching
    MissionEngineError.
    """

    status: OutcomeStatus
    mission_name: str = Field(default="")
    reason: str = Field(default="")
    error_code: str | None = Field(default=None)
    violation: SafetyViolation | None = Field(default=None)
    preflight_failures: list[str] = Field(default_factory=list)
    final_state: DroneState | None = Field(default=None)
    snapshots_emitted: int = Field(default=0, ge=0)
    flight_time_seconds: float = Field(default=0.0, ge=0)
    distance_flown_feet: float = Field(default=0.0, ge=0)

    @classmethod
    def from_configuration_error(
        cls,
        error: ConfigurationError,
        *,
        mission_name: str = "",
        final_state: DroneState | None = None,
    ) -> "MissionOutcome":
        """Build a CONFIG_INVALID outcome from a loading or validation error."""
        return cls(
            status=OutcomeStatus.CONFIG_INVALID,
            mission_name=mission_name,
            reason=error.message,
            error_code=error.error_code,
            final_state=final_state,
        )

    @property
    def succeeded(self) -> bool:
        """Return whether the mission completed."""
        return self.status == OutcomeStatus.SUCCESS

    def raise_for_status(self) -> None:
        """Raise the MissionEngineError matching a failed outcome.

        Raises:
            SafetyAbortError: If a safety check aborted the mission.
            PreflightFailedError: If pre-flight rejected the mission.
            ConfigurationError: The subclass named by error_code, if the
                configuration was invalid.
        """
        match self.status:
            case OutcomeStatus.SUCCESS:
                return
            case OutcomeStatus.ABORTED:
                message = self.violation.reason if self.violation else self.reason
                raise SafetyAbortError(
                    f"Mission {self.mission_name!r} aborted: {message}",
                    check_name=self.reason or None,
                    command_id=self.violation.command_id if self.violation else None,
                )
            case OutcomeStatus.PREFLIGHT_FAILED:
                raise PreflightFailedError(
                    f"Mission {self.mission_name!r} failed pre-flight: {self.reason}",
                    failures=self.preflight_failures,
                )
            case OutcomeStatus.CONFIG_INVALID:
                error_class = MissionEngineError.get_by_error_code(self.error_code or "")
                if error_class is None or not issubclass(error_class, ConfigurationError):
                    error_class = ConfigInvalidError
                raise error_class(self.reason)

    def format_report(self) -> str:
        """Render a multi-line status report."""
        lines = [
            "=" * 60,
            f"MISSION {self.status.upper()}: {self.mission_name or '<unknown>'}",
            "=" * 60,
        ]
        if self.reason:
            lines.append(f"Reason: {self.reason}")
        if self.error_code:
            lines.append(f"Error code: {self.error_code}")
        if self.violation is not None:
            lines.append(
                f"Violation: {self.violation.check_name} on command "
                f"{self.violation.command_id}: {self.violation.reason}"
            )
        lines.extend(f"  - {failure}" for failure in self.preflight_failures)

        state = self.final_state
        if state is not None:
            lines.extend(
                [
                    f"Flight time: {self.flight_time_seconds:.1f}s",
                    f"Distance flown: {self.distance_flown_feet:.1f}ft",
                    f"Telemetry snapshots: {self.snapshots_emitted}",
                    f"Final mode: {state.mode}",
                    f"Final position: ({state.position.x:.2f}, {state.position.y:.2f}, "
                    f"{state.position.z:.2f})",
                    f"Battery: {state.battery_percent}% ({state.battery_voltage:.2f}V)",
                    f"Motor temperature: {state.average_motor_temperature():.1f}C",
                    f"Progress: {state.mission_progress_percent}%",
                ]
            )
        return "\n".join(lines)
