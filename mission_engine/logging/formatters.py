"""Log formatters for machine and terminal output."""

import json
import logging
import traceback
from datetime import UTC, datetime
from typing import Any, ClassVar

from mission_engine.logging.context import get_extra_context, get_run_id

_STANDARD_LOG_ATTRS: frozenset[str] = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "exc_info",
        "exc_text",
        "thread",
        "threadName",
        "taskName",
        "message",
    }
)

_MAX_LOGGER_NAME_LENGTH = 30


def _collect_record_fields(record: logging.LogRecord) -> dict[str, Any]:
    """Return the fields passed through ``extra=`` on a log call."""
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _STANDARD_LOG_ATTRS and not key.startswith("_")
    }


class JSONFormatter(logging.Formatter):
    """Format log records as one JSON object per line."""

    def __init__(
        self,
        *,
        service_name: str = "mission-engine",
        include_timestamp: bool = True,
        include_location: bool = True,
    ) -> None:
        """Initialize the JSON formatter.

        Args:
            service_name: Service identifier stamped on every record.
            include_timestamp: Whether to include timestamp field.
            include_location: Whether to include module/function/line fields.
        """
        super().__init__()
        self._service_name = service_name
        self._include_timestamp = include_timestamp
        self._include_location = include_location

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record as a JSON string."""
        log_entry: dict[str, Any] = {}

        if self._include_timestamp:
            log_entry["timestamp"] = datetime.now(UTC).isoformat(timespec="milliseconds")

        log_entry["level"] = record.levelname
        log_entry["logger"] = record.name
        log_entry["message"] = record.getMessage()
        log_entry["service"] = self._service_name

        current_run_id = get_run_id()
        if current_run_id:
            log_entry["run_id"] = current_run_id

        if self._include_location:
            log_entry["module"] = record.module
            log_entry["function"] = record.funcName
            log_entry["line"] = record.lineno

        log_entry.update(get_extra_context())
        log_entry.update(_collect_record_fields(record))

        if record.exc_info:
            exception_type, exception_value, _ = record.exc_info
            log_entry["exception"] = {
                "type": exception_type.__name__ if exception_type else "Unknown",
                "message": str(exception_value) if exception_value else "",
                "traceback": traceback.format_exception(*record.exc_info),
            }

        return json.dumps(log_entry, default=str)


class HumanFormatter(logging.Formatter):
    """Format log records as aligned, optionally colored, terminal lines."""

    COLORS: ClassVar[dict[str, str]] = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET: ClassVar[str] = "\033[0m"

    def __init__(self, *, use_colors: bool = True) -> None:
        """Initialize the human formatter.

        Args:
            use_colors: Whether to use ANSI colors in output.
        """
        super().__init__()
        self._use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record for a terminal."""
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")

        level_string = f"{record.levelname:<8}"
        if self._use_colors:
            color = self.COLORS.get(record.levelname, "")
            level_string = f"{color}{level_string}{self.RESET}"

        logger_name = record.name
        if len(logger_name) > _MAX_LOGGER_NAME_LENGTH:
            logger_name = "..." + logger_name[-(_MAX_LOGGER_NAME_LENGTH - 3) :]

        context_fields: dict[str, Any] = {}
        current_run_id = get_run_id()
        if current_run_id:
            context_fields["run_id"] = current_run_id
        context_fields.update(get_extra_context())
        context_fields.update(_collect_record_fields(record))

        parts = [
            timestamp,
            "|",
            level_string,
            "|",
            f"{logger_name:<{_MAX_LOGGER_NAME_LENGTH}}",
            "|",
            record.getMessage(),
        ]
        if context_fields:
            parts.extend(["|", " ".join(f"{key}={value}" for key, value in context_fields.items())])

        result = " ".join(parts)

        if record.exc_info:
            result += "\n" + "".join(traceback.format_exception(*record.exc_info))

        return result
