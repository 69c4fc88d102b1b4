"""Mission controller: pre-flight, command sequencing and outcome reporting.

The controller owns one DroneState per run. It arms the vehicle, walks the
commands in id order, guards each with its declared safety checks and hands
it to the executor for its kind. Any violation ends the run in the ABORTED
mode; finishing every command ends it in MISSION_COMPLETE.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from mission_engine.exceptions.configuration_errors import (
    ConfigurationError,
    UnsupportedCommandKindError,
)
from mission_engine.exceptions.mission_errors import PreflightFailedError, SafetyAbortError
from mission_engine.logging.context import clear_context, generate_run_id, set_extra_context
from mission_engine.mission.outcome import MissionOutcome, OutcomeStatus
from mission_engine.phases import create_default_executors
from mission_engine.phases.base import PhaseContext
from mission_engine.safety.gate import SafetyGate
from mission_engine.simulation.clock import SimulationClock
from mission_engine.simulation.signal import SignalModel
from mission_engine.telemetry.emitter import TelemetryEmitter
from mission_engine.vehicle.models import DroneState, FlightMode

if TYPE_CHECKING:
    from collections.abc import Mapping

    from mission_engine.config import EngineSettings
    from mission_engine.mission.models import CommandKind, MissionDefinition
    from mission_engine.mission.provider import ConfigProvider
    from mission_engine.phases.base import PhaseExecutor
    from mission_engine.safety.models import SafetyViolation
    from mission_engine.telemetry.sinks import TelemetrySink
    from mission_engine.vehicle.models import VehicleProfile

logger = logging.getLogger(__name__)


class MissionController:
    """Runs missions against a simulated vehicle.

    A controller can run any number of missions one after another; every
    run starts from a fresh DroneState and a fresh clock.
    """

    def __init__(
        self,
        provider: ConfigProvider | None,
        sink: TelemetrySink,
        settings: EngineSettings,
        *,
        gate: SafetyGate | None = None,
        executors: Mapping[CommandKind, PhaseExecutor] | None = None,
    ) -> None:
        """Initialize the controller.

        Args:
            provider: Source of missions and vehicles for run(). May be None
                when only execute() is used.
            sink: Consumer of displayed telemetry snapshots.
            settings: Engine settings for every run.
            gate: Safety gate; a default gate is created when omitted.
            executors: Executor per command kind; defaults to all kinds.
        """
        self._provider = provider
        self._sink = sink
        self._settings = settings
        self._gate = gate or SafetyGate()
        self._executors = dict(executors) if executors is not None else create_default_executors()

    @property
    def gate(self) -> SafetyGate:
        """Return the safety gate used for every run."""
        return self._gate

    def run(self, mission_id: str, vehicle_id: str) -> MissionOutcome:
        """Load a mission and a vehicle through the provider, then execute.

        Args:
            mission_id: Mission identifier understood by the provider.
            vehicle_id: Vehicle identifier understood by the provider.

        Returns:
            The mission outcome; configuration errors become CONFIG_INVALID.

        Raises:
            RuntimeError: If the controller was created without a provider.
        """
        if self._provider is None:
            raise RuntimeError("MissionController.run() requires a config provider")

        try:
            mission = self._provider.load_mission(mission_id)
            vehicle = self._provider.load_vehicle(vehicle_id)
        except ConfigurationError as error:
            logger.error(
                "Could not load mission %r for vehicle %r: %s",
                mission_id,
                vehicle_id,
                error.message,
                extra=error.to_log_dict(),
            )
            return MissionOutcome.from_configuration_error(error, mission_name=mission_id)

        return self.execute(mission, vehicle)

    def execute(self, mission: MissionDefinition, vehicle: VehicleProfile) -> MissionOutcome:
        """Execute a validated mission.

        Args:
            mission: Mission to fly.
            vehicle: Vehicle profile for the run.

        Returns:
            The mission outcome, carrying a copy of the final state.
        """
        run_identifier = generate_run_id()
        set_extra_context(mission_name=mission.name, vehicle_model=vehicle.model)
        try:
            logger.info(
                "Starting mission %r on %s (run %s)",
                mission.name,
                vehicle.model,
                run_identifier,
            )
            return self._execute(mission, vehicle)
        finally:
            clear_context()

    def _execute(self, mission: MissionDefinition, vehicle: VehicleProfile) -> MissionOutcome:
        settings = self._settings
        state = DroneState.create(
            motor_count=settings.motor_count,
            ambient_temperature_celsius=settings.ambient_temperature_celsius,
        )
        state.gps_satellites = settings.gps_satellite_count if vehicle.has_gps else 0

        report = self._gate.preflight(mission, vehicle, state, self._executors.keys())
        if report.unsupported_command_ids:
            error_code = UnsupportedCommandKindError.error_code
            reason = (
                "No executor for command(s) "
                f"{', '.join(str(command_id) for command_id in report.unsupported_command_ids)}"
            )
            logger.error(reason, extra={"error_code": error_code})
            return MissionOutcome(
                status=OutcomeStatus.CONFIG_INVALID,
                mission_name=mission.name,
                reason=reason,
                error_code=error_code,
                preflight_failures=report.failures,
                final_state=state.model_copy(deep=True),
            )
        if not report.passed:
            return MissionOutcome(
                status=OutcomeStatus.PREFLIGHT_FAILED,
                mission_name=mission.name,
                reason="; ".join(report.failures),
                error_code=PreflightFailedError.error_code,
                preflight_failures=report.failures,
                final_state=state.model_copy(deep=True),
            )

        clock = SimulationClock(time_scale=settings.time_scale)
        emitter = TelemetryEmitter(mission.telemetry, self._sink)
        signal = SignalModel(
            geofence_radius_feet=mission.safety_parameters.geofence_radius_feet,
            floor_percent=settings.signal_floor_percent,
            jitter_percent=settings.signal_jitter_percent,
            seed=settings.random_seed,
        )

        state.transition_to(FlightMode.ARMED)
        state.armed = True
        logger.info("Vehicle armed, executing %d commands", len(mission.commands))

        commands = sorted(mission.commands, key=lambda command: command.id)
        total = len(commands)
        for index, command in enumerate(commands):
            state.current_command_id = command.id
            state.advance_progress(index * 100 // total)
            logger.info(
                "Command %d/%d: %s (%s)",
                index + 1,
                total,
                command.kind,
                command.description or "no description",
                extra={"command_id": command.id},
            )

            violation = self._gate.check(
                command.safety_checks,
                state,
                mission.safety_parameters,
                command_id=command.id,
            )
            if violation is None:
                context = PhaseContext(
                    state=state,
                    command_id=command.id,
                    safety_parameters=mission.safety_parameters,
                    telemetry_config=mission.telemetry,
                    safety_checks=command.safety_checks,
                    gate=self._gate,
                    emitter=emitter,
                    clock=clock,
                    signal=signal,
                    settings=settings,
                )
                violation = self._executors[command.kind].execute(command, context).violation

            if violation is not None:
                return self._abort(mission, state, violation, emitter, clock)

            if index < total - 1:
                clock.advance(settings.inter_command_settle_seconds)

        state.transition_to(FlightMode.MISSION_COMPLETE)
        state.armed = False
        state.flying = False
        state.advance_progress(100)
        state.flight_time_seconds = clock.elapsed_seconds
        logger.info(
            "Mission %r complete in %.1fs, battery %d%%",
            mission.name,
            clock.elapsed_seconds,
            state.battery_percent,
        )
        return self._build_outcome(
            OutcomeStatus.SUCCESS,
            mission,
            state,
            emitter,
            clock,
        )

    def _abort(
        self,
        mission: MissionDefinition,
        state: DroneState,
        violation: SafetyViolation,
        emitter: TelemetryEmitter,
        clock: SimulationClock,
    ) -> MissionOutcome:
        """Move the state to ABORTED and build the outcome."""
        state.transition_to(FlightMode.ABORTED)
        state.armed = False
        state.flight_time_seconds = clock.elapsed_seconds
        logger.error(
            "Mission %r aborted on command %s: %s",
            mission.name,
            violation.command_id,
            violation.reason,
            extra={"check_name": violation.check_name, "error_code": SafetyAbortError.error_code},
        )
        return self._build_outcome(
            OutcomeStatus.ABORTED,
            mission,
            state,
            emitter,
            clock,
            violation=violation,
        )

    @staticmethod
    def _build_outcome(
        status: OutcomeStatus,
        mission: MissionDefinition,
        state: DroneState,
        emitter: TelemetryEmitter,
        clock: SimulationClock,
        *,
        violation: SafetyViolation | None = None,
    ) -> MissionOutcome:
        return MissionOutcome(
            status=status,
            mission_name=mission.name,
            reason=violation.check_name if violation else "",
            error_code=SafetyAbortError.error_code if violation else None,
            violation=violation,
            final_state=state.model_copy(deep=True),
            snapshots_emitted=emitter.emitted_count,
            flight_time_seconds=clock.elapsed_seconds,
            distance_flown_feet=emitter.distance_flown_feet,
        )
