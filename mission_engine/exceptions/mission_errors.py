"""Mission failure exceptions.

The engine reports these through MissionOutcome; they are only raised when a
caller asks for it with MissionOutcome.raise_for_status().
"""

from typing import Any, ClassVar

from mission_engine.exceptions.base import MissionEngineError


class MissionFailedError(MissionEngineError):
    """Base class for missions that started loading but did not succeed."""

    error_code: ClassVar[str] = "MISSION_FAILED"


class PreflightFailedError(MissionFailedError):
    """Pre-flight checks rejected the mission before arming."""

    error_code: ClassVar[str] = "PREFLIGHT_FAILED"

    def __init__(
        self,
        message: str,
        *,
        failures: list[str] | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize preflight error.

        Args:
            message: Description of the failure.
            failures: Individual pre-flight failure descriptions.
            context: Additional context information.
        """
        context_dict = context or {}
        if failures:
            context_dict["failures"] = list(failures)
        super().__init__(message, context=context_dict)


class SafetyAbortError(MissionFailedError):
    """A safety check aborted the mission."""

    error_code: ClassVar[str] = "SAFETY_VIOLATION"

    def __init__(
        self,
        message: str,
        *,
        check_name: str | None = None,
        command_id: int | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize safety abort error.

        Args:
            message: Description of the violation.
            check_name: Name of the failing safety check.
            command_id: Command that was running or about to run.
            context: Additional context information.
        """
        context_dict = context or {}
        if check_name is not None:
            context_dict["check_name"] = check_name
        if command_id is not None:
            context_dict["command_id"] = command_id
        super().__init__(message, context=context_dict)
