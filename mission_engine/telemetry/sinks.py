"""Telemetry sinks: consumers of emitted snapshots."""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Protocol, TextIO

if TYPE_CHECKING:
    from mission_engine.telemetry.models import TelemetrySnapshot

logger = logging.getLogger(__name__)


class TelemetrySink(Protocol):
    """Side-effecting consumer of telemetry snapshots.

    Snapshots arrive in non-decreasing elapsed-time order, at most
    update_rate_hz per simulated second.
    """

    def accept(self, snapshot: TelemetrySnapshot) -> None:
        """Consume one snapshot."""
        ...


class ConsoleTelemetrySink:
    """Writes one display line per snapshot to a text stream."""

    def __init__(self, stream: TextIO | None = None) -> None:
        """Initialize the console sink.

        Args:
            stream: Output stream. Defaults to sys.stdout.
        """
        self._stream = stream or sys.stdout

    def accept(self, snapshot: TelemetrySnapshot) -> None:
        """Write the snapshot's display line."""
        self._stream.write(snapshot.format_line() + "\n")
        self._stream.flush()


class LoggingTelemetrySink:
    """Publishes snapshots as structured log records."""

    def __init__(
        self,
        *,
        data_points: list[str] | None = None,
        level: int = logging.INFO,
    ) -> None:
        """Initialize the logging sink.

        Args:
            data_points: Data point filter applied to each record's fields.
            level: Log level of the telemetry records.
        """
        self._data_points = data_points or []
        self._level = level

    def accept(self, snapshot: TelemetrySnapshot) -> None:
        """Log the snapshot with its fields attached as extra context."""
        logger.log(
            self._level,
            "Telemetry %s",
            snapshot.phase_label,
            extra=snapshot.select(self._data_points),
        )


class RecordingTelemetrySink:
    """Keeps every snapshot in memory, in arrival order."""

    def __init__(self) -> None:
        self.snapshots: list[TelemetrySnapshot] = []

    def accept(self, snapshot: TelemetrySnapshot) -> None:
        """Append the snapshot."""
        self.snapshots.append(snapshot)

    def clear(self) -> None:
        """Drop all recorded snapshots."""
        self.snapshots.clear()
