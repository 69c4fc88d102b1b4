"""Root logger setup for the engine entry point."""

import logging
import sys
from typing import TextIO

from mission_engine.logging.config import LogFormat, LoggingConfig, get_logging_config
from mission_engine.logging.formatters import HumanFormatter, JSONFormatter


def setup_logging(config: LoggingConfig | None = None, stream: TextIO | None = None) -> None:
    """Install a single handler on the root logger.

    Calling it again replaces the previous handler, so the last call wins.

    Args:
        config: Logging configuration. Loads from environment if not provided.
        stream: Output stream for logs. Defaults to sys.stderr so telemetry
            written to stdout stays readable.
    """
    if config is None:
        config = get_logging_config()

    root_logger = logging.getLogger()
    root_logger.setLevel(config.log_level.value)
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)

    formatter: logging.Formatter
    if config.log_format == LogFormat.JSON:
        formatter = JSONFormatter(
            service_name=config.service_name,
            include_timestamp=config.include_timestamp,
            include_location=config.include_location,
        )
    else:
        # Colors only when writing straight to a terminal
        formatter = HumanFormatter(use_colors=stream is None and sys.stderr.isatty())

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)


def reset_logging() -> None:
    """Remove root handlers and drop the cached config. Primarily for testing."""
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    root_logger.setLevel(logging.WARNING)

    get_logging_config.cache_clear()
