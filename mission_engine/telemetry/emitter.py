"""Telemetry emitter: snapshot formatting and dispatch to the sink.

The emitter has no timer of its own. Phase executors call emit() once per
tick, so the tick loop alone sets the telemetry rate.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from mission_engine.telemetry.models import TelemetrySnapshot

if TYPE_CHECKING:
    from mission_engine.mission.models import TelemetryConfig
    from mission_engine.telemetry.sinks import TelemetrySink
    from mission_engine.vehicle.models import DroneState

logger = logging.getLogger(__name__)


class TelemetryEmitter:
    """Builds snapshots from the drone state and forwards them to a sink.

    Every emitted snapshot is tracked (count and last snapshot) whether or
    not it is displayed; forwarding to the sink only happens when the
    mission's telemetry config enables real-time display.
    """

    def __init__(self, config: TelemetryConfig, sink: TelemetrySink) -> None:
        """Initialize the emitter.

        Args:
            config: Telemetry configuration of the running mission.
            sink: External consumer of displayed snapshots.
        """
        self._config = config
        self._sink = sink
        self._emitted_count = 0
        self._forwarded_count = 0
        self._last_snapshot: TelemetrySnapshot | None = None
        self._distance_feet = 0.0

    @property
    def emitted_count(self) -> int:
        """Return the number of snapshots emitted so far."""
        return self._emitted_count

    @property
    def forwarded_count(self) -> int:
        """Return the number of snapshots handed to the sink."""
        return self._forwarded_count

    @property
    def last_snapshot(self) -> TelemetrySnapshot | None:
        """Return the most recent snapshot, if any."""
        return self._last_snapshot

    @property
    def distance_flown_feet(self) -> float:
        """Return the path length between consecutive snapshots."""
        return self._distance_feet

    def emit(self, state: DroneState, phase_label: str) -> TelemetrySnapshot:
        """Capture the state and dispatch the snapshot.

        Args:
            state: Current drone state.
            phase_label: Label of the running phase (e.g. "CLIMB").

        Returns:
            The snapshot that was emitted.
        """
        snapshot = TelemetrySnapshot.from_state(state, phase_label)

        previous = self._last_snapshot
        if previous is not None:
            if snapshot.elapsed_seconds < previous.elapsed_seconds:
                logger.warning(
                    "Snapshot time went backwards (%.3f < %.3f)",
                    snapshot.elapsed_seconds,
                    previous.elapsed_seconds,
                )
            self._distance_feet += math.dist(
                (previous.x, previous.y, previous.z),
                (snapshot.x, snapshot.y, snapshot.z),
            )

        self._last_snapshot = snapshot
        self._emitted_count += 1

        if self._config.logging_enabled:
            logger.debug(
                "Telemetry tick %d: %s",
                self._emitted_count,
                snapshot.format_line(),
            )

        if self._config.real_time_display:
            self._sink.accept(snapshot)
            self._forwarded_count += 1

        return snapshot
