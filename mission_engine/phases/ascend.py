"""Ascend phase: linear climb to a target altitude, then stabilization."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, ClassVar

from mission_engine.mission.models import AscendParameters, CommandKind
from mission_engine.phases.base import PhaseExecutor
from mission_engine.vehicle.models import FlightMode

if TYPE_CHECKING:
    from mission_engine.phases.base import PhaseContext
    from mission_engine.safety.models import SafetyViolation

logger = logging.getLogger(__name__)


class AscendExecutor(PhaseExecutor[AscendParameters]):
    """Climbs from the current altitude to the target at the climb rate.

    The climb takes (target - start) / climb_rate seconds split into whole
    ticks; the final climb tick lands exactly on the target. Battery drains
    and motors heat on every climb tick. A stabilization sub-phase with zero
    vertical speed follows, then the vehicle is left hovering.
    """

    kind: ClassVar[CommandKind] = CommandKind.ASCEND
    parameters_model: ClassVar[type[AscendParameters]] = AscendParameters

    def run(self, parameters: AscendParameters, context: PhaseContext) -> SafetyViolation | None:
        state = context.state
        settings = context.settings
        target = parameters.target_altitude_feet
        start_altitude = state.position.z
        climb_feet = target - start_altitude

        state.flying = True
        state.velocity.x = 0.0
        state.velocity.y = 0.0
        state.transition_to(FlightMode.ASCEND)

        if climb_feet <= 0:
            logger.warning(
                "Already at %.2fft, at or above the %.2fft target; skipping climb",
                start_altitude,
                target,
            )
            steps = 0
        else:
            steps = max(1, int(climb_feet / parameters.climb_rate_fps * context.update_rate_hz))

        logger.info(
            "Climbing from %.2fft to %.2fft at %.2ffps (%d ticks)",
            start_altitude,
            target,
            parameters.climb_rate_fps,
            steps,
        )

        for step in range(steps):
            if step == steps - 1:
                state.set_altitude(target)
            else:
                state.set_altitude(start_altitude + climb_feet * (step + 1) / steps)
            state.velocity.z = parameters.climb_rate_fps
            state.drain_battery(settings.climb_drain_percent_per_tick)
            state.heat_motors(
                settings.climb_heating_celsius_per_tick,
                settings.max_motor_temperature_celsius,
            )

            violation = self.finish_tick(context, "CLIMB")
            if violation is not None:
                return violation

        state.velocity.z = 0.0

        if parameters.stabilization_time_seconds > 0:
            state.transition_to(FlightMode.STABILIZING)
            violation = self.hold_for(
                context,
                parameters.stabilization_time_seconds,
                "STABILIZING",
            )
            if violation is not None:
                return violation

        state.transition_to(FlightMode.HOVER)
        logger.info("Ascend complete, stable hover at %.1fft", state.position.z)
        return None
