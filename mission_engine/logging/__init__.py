"""Structured logging for the mission engine.

Usage:
    import logging

    from mission_engine.logging import setup_logging

    setup_logging()
    logger = logging.getLogger(__name__)
    logger.info("Executing command", extra={"command_id": 3})
"""

from mission_engine.logging.config import LogFormat, LoggingConfig, LogLevel
from mission_engine.logging.context import (
    clear_context,
    generate_run_id,
    get_extra_context,
    get_run_id,
    set_extra_context,
)
from mission_engine.logging.formatters import HumanFormatter, JSONFormatter
from mission_engine.logging.logger import setup_logging

__all__ = [
    "HumanFormatter",
    "JSONFormatter",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "clear_context",
    "generate_run_id",
    "get_extra_context",
    "get_run_id",
    "set_extra_context",
    "setup_logging",
]
