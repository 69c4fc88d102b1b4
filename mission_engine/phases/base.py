"""Phase executor base class and per-phase context.

Every executor runs a fixed-timestep loop. One tick is: mutate the drone
state, stamp flight time and signal, emit telemetry, run the in-flight
safety monitor, then advance the clock. A violation ends the loop before
the clock advances, so no further tick runs after an abort.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar, Generic, TypeVar

from pydantic import BaseModel

from mission_engine.safety.gate import is_outside_geofence

if TYPE_CHECKING:
    from mission_engine.config import EngineSettings
    from mission_engine.mission.models import (
        CommandKind,
        CommandSpec,
        SafetyParameters,
        TelemetryConfig,
    )
    from mission_engine.safety.gate import SafetyGate
    from mission_engine.safety.models import SafetyViolation
    from mission_engine.simulation.clock import SimulationClock
    from mission_engine.simulation.signal import SignalModel
    from mission_engine.telemetry.emitter import TelemetryEmitter
    from mission_engine.vehicle.models import DroneState

logger = logging.getLogger(__name__)


@dataclass
class PhaseContext:
    """Everything an executor needs to run one command.

    Created by the controller for each command; the drone state inside is
    shared by reference with the controller.
    """

    state: DroneState
    command_id: int
    safety_parameters: SafetyParameters
    telemetry_config: TelemetryConfig
    safety_checks: list[str]
    gate: SafetyGate
    emitter: TelemetryEmitter
    clock: SimulationClock
    signal: SignalModel
    settings: EngineSettings
    geofence_warned: bool = field(default=False)

    @property
    def update_rate_hz(self) -> int:
        """Return the telemetry tick rate."""
        return self.telemetry_config.update_rate_hz

    @property
    def tick_seconds(self) -> float:
        """Return the duration of one tick."""
        return 1.0 / self.telemetry_config.update_rate_hz

    def ticks_for(self, seconds: float) -> int:
        """Return the whole number of ticks that fit in a duration."""
        return int(seconds * self.telemetry_config.update_rate_hz)


@dataclass(frozen=True)
class PhaseResult:
    """Outcome of one phase: completed, or aborted by a safety violation."""

    ticks: int
    violation: SafetyViolation | None = None

    @property
    def completed(self) -> bool:
        """Return whether the phase ran to completion."""
        return self.violation is None


ParametersT = TypeVar("ParametersT", bound=BaseModel)


class PhaseExecutor(ABC, Generic[ParametersT]):
    """Base class for the executor of one command kind."""

    kind: ClassVar[CommandKind]
    parameters_model: ClassVar[type[BaseModel]]

    def __init__(self) -> None:
        self._ticks = 0

    def execute(self, command: CommandSpec, context: PhaseContext) -> PhaseResult:
        """Run the command against the shared drone state.

        Args:
            command: Command to execute; its kind must match this executor.
            context: Per-command execution context.

        Returns:
            Phase result with the tick count and any safety violation.

        Raises:
            pydantic.ValidationError: If the parameters do not fit the kind.
                Pre-flight validates parameters, so a controller run never
                hits this.
        """
        parameters = self.parameters_model.model_validate(command.parameters)
        self._ticks = 0
        logger.info(
            "Starting %s phase for command %d",
            self.kind,
            command.id,
            extra={"command_id": command.id, "parameters": parameters.model_dump()},
        )
        violation = self.run(parameters, context)  # type: ignore[arg-type]
        result = PhaseResult(ticks=self._ticks, violation=violation)
        if result.completed:
            logger.info(
                "Completed %s phase for command %d in %d ticks",
                self.kind,
                command.id,
                result.ticks,
            )
        return result

    @abstractmethod
    def run(self, parameters: ParametersT, context: PhaseContext) -> SafetyViolation | None:
        """Run the phase loop.

        Args:
            parameters: Typed command parameters.
            context: Per-command execution context.

        Returns:
            The violation that stopped the loop, or None on completion.
        """

    def finish_tick(
        self,
        context: PhaseContext,
        phase_label: str,
        *,
        monitor: bool = True,
    ) -> SafetyViolation | None:
        """Complete a tick after the executor has updated the state.

        Args:
            context: Per-command execution context.
            phase_label: Label attached to the emitted snapshot.
            monitor: Whether to run the in-flight safety monitor.

        Returns:
            A safety violation if the monitor failed, otherwise None.
        """
        state = context.state
        state.flight_time_seconds = context.clock.elapsed_seconds
        state.signal_strength_percent = context.signal.strength_percent(
            state.position.horizontal_magnitude()
        )
        self._warn_outside_geofence(context)

        context.emitter.emit(state, phase_label)
        self._ticks += 1

        if monitor and context.settings.continuous_safety_monitoring:
            violation = context.gate.check(
                context.safety_checks,
                state,
                context.safety_parameters,
                command_id=context.command_id,
            )
            if violation is not None:
                return violation

        context.clock.advance(context.tick_seconds)
        return None

    def hold_for(
        self,
        context: PhaseContext,
        seconds: float,
        phase_label: str,
    ) -> SafetyViolation | None:
        """Tick without moving for a duration, e.g. to settle or stabilize.

        Args:
            context: Per-command execution context.
            seconds: Time to wait; rounded down to whole ticks, at least one
                tick for any positive duration.
            phase_label: Label attached to each snapshot.

        Returns:
            A safety violation if one stopped the wait, otherwise None.
        """
        if seconds <= 0:
            return None
        for _ in range(max(1, context.ticks_for(seconds))):
            violation = self.finish_tick(context, phase_label)
            if violation is not None:
                return violation
        return None

    def _warn_outside_geofence(self, context: PhaseContext) -> None:
        """Log once per phase when the vehicle leaves the advisory geofence."""
        if context.geofence_warned:
            return
        if is_outside_geofence(context.state, context.safety_parameters):
            context.geofence_warned = True
            logger.warning(
                "Vehicle is outside the %.1fft geofence (%.1fft from launch)",
                context.safety_parameters.geofence_radius_feet,
                context.state.position.horizontal_magnitude(),
                extra={"command_id": context.command_id},
            )
