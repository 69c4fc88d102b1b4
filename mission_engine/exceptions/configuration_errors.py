"""Configuration error exceptions.

Raised at the loading boundary, before any mission state exists.
"""

from typing import Any, ClassVar

from mission_engine.exceptions.base import MissionEngineError


class ConfigurationError(MissionEngineError):
    """Base class for all configuration errors."""

    error_code: ClassVar[str] = "CONFIGURATION_ERROR"


class ConfigInvalidError(ConfigurationError):
    """Mission or vehicle data is missing or malformed."""

    error_code: ClassVar[str] = "CONFIG_INVALID"

    def __init__(
        self,
        message: str,
        *,
        source: str | None = None,
        field: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize config error with optional source and field info.

        Args:
            message: Description of the configuration problem.
            source: Where the configuration came from (file path, provider key).
            field: Dotted location of the offending field.
            context: Additional context information.
        """
        context_dict = context or {}
        if source is not None:
            context_dict["source"] = source
        if field is not None:
            context_dict["field"] = field
        super().__init__(message, context=context_dict)


class UnsupportedCommandKindError(ConfigurationError):
    """A command names a kind the engine cannot execute."""

    error_code: ClassVar[str] = "UNSUPPORTED_COMMAND_KIND"

    def __init__(
        self,
        message: str,
        *,
        kind: str | None = None,
        command_id: int | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize unsupported kind error.

        Args:
            message: Description of the failure.
            kind: The command kind as written in the configuration.
            command_id: Id of the offending command.
            context: Additional context information.
        """
        context_dict = context or {}
        if kind is not None:
            context_dict["kind"] = kind
        if command_id is not None:
            context_dict["command_id"] = command_id
        super().__init__(message, context=context_dict)
