"""Mission engine entry point.

Runs one mission from the configuration directory against the simulated
vehicle and prints the status report. Everything is configured through
``MISSION_ENGINE_*`` environment variables, for example:

    MISSION_ENGINE_MISSION_ID=takeoff_circle_land \
    MISSION_ENGINE_VEHICLE_ID=sim_quad \
    MISSION_ENGINE_TIME_SCALE=0 mission-engine
"""

from __future__ import annotations

import logging
import sys

from mission_engine.config import get_engine_settings
from mission_engine.logging.config import LoggingConfig, LogLevel
from mission_engine.logging.logger import setup_logging
from mission_engine.mission.controller import MissionController
from mission_engine.mission.provider import JsonFileConfigProvider
from mission_engine.telemetry.sinks import ConsoleTelemetrySink

logger = logging.getLogger(__name__)


def main() -> None:
    """CLI entry point: load settings, run the mission and exit with its status."""
    settings = get_engine_settings()
    setup_logging(LoggingConfig(log_level=LogLevel(settings.log_level)))

    logger.info(
        "Starting mission engine (mission=%s, vehicle=%s, config=%s, time_scale=%.2f)",
        settings.mission_id or "<unset>",
        settings.vehicle_id or "<unset>",
        settings.config_directory,
        settings.time_scale,
    )

    controller = MissionController(
        JsonFileConfigProvider(settings.config_directory),
        ConsoleTelemetrySink(),
        settings,
    )
    outcome = controller.run(settings.mission_id, settings.vehicle_id)

    print(outcome.format_report())  # noqa: T201
    sys.exit(0 if outcome.succeeded else 1)


if __name__ == "__main__":
    main()
