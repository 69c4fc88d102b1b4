"""DescendAndLand phase: optional centering, descent, final approach, touchdown."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, ClassVar

from mission_engine.mission.models import CommandKind, DescendAndLandParameters
from mission_engine.phases.base import PhaseExecutor
from mission_engine.vehicle.models import FlightMode

if TYPE_CHECKING:
    from mission_engine.phases.base import PhaseContext
    from mission_engine.safety.models import SafetyViolation

logger = logging.getLogger(__name__)

_TOUCHDOWN_HEIGHT_FEET: float = 0.1
_CENTERING_FACTOR: float = 0.7


class DescendAndLandExecutor(PhaseExecutor[DescendAndLandParameters]):
    """Brings the vehicle down and shuts the motors off.

    Descends at descent_rate down to the final approach height, then at
    touchdown_speed until the ground. Touchdown zeroes all velocity, clears
    the flying flag and starts motor cooldown.
    """

    kind: ClassVar[CommandKind] = CommandKind.DESCEND_AND_LAND
    parameters_model: ClassVar[type[DescendAndLandParameters]] = DescendAndLandParameters

    def run(
        self,
        parameters: DescendAndLandParameters,
        context: PhaseContext,
    ) -> SafetyViolation | None:
        state = context.state
        settings = context.settings
        final_approach_height = parameters.final_approach_height_feet

        state.transition_to(FlightMode.DESCENDING)
        state.velocity.x = 0.0
        state.velocity.y = 0.0

        if parameters.precision_landing:
            violation = self._center_over_landing_zone(context)
            if violation is not None:
                return violation

        logger.info(
            "Descending from %.2fft at %.2ffps to final approach at %.2fft",
            state.position.z,
            parameters.descent_rate_fps,
            final_approach_height,
        )

        descent_step = parameters.descent_rate_fps / context.update_rate_hz
        tick = 0
        while state.position.z > final_approach_height:
            state.set_altitude(max(final_approach_height, state.position.z - descent_step))
            state.velocity.z = -parameters.descent_rate_fps
            tick += 1
            if tick % settings.descent_drain_interval_ticks == 0:
                state.drain_battery()

            violation = self.finish_tick(context, "DESCENT")
            if violation is not None:
                return violation

        state.transition_to(FlightMode.FINAL_APPROACH)
        touchdown_step = parameters.touchdown_speed_fps / context.update_rate_hz
        while state.position.z > _TOUCHDOWN_HEIGHT_FEET:
            state.set_altitude(state.position.z - touchdown_step)
            state.velocity.z = -parameters.touchdown_speed_fps

            violation = self.finish_tick(context, "FINAL")
            if violation is not None:
                return violation

        state.set_altitude(0.0)
        state.velocity.x = 0.0
        state.velocity.y = 0.0
        state.velocity.z = 0.0
        state.flying = False
        state.transition_to(FlightMode.LANDED)
        state.cool_motors(settings.cooldown_celsius, settings.ambient_temperature_celsius)

        self.finish_tick(context, "TOUCHDOWN", monitor=False)
        logger.info("Touchdown at (%.2f, %.2f), motors disarmed", state.position.x, state.position.y)
        return None

    def _center_over_landing_zone(self, context: PhaseContext) -> SafetyViolation | None:
        """Move toward the landing zone center in a few settling steps."""
        state = context.state
        settings = context.settings
        count = settings.precision_adjustment_count

        logger.info("Precision landing: %d centering adjustments", count)
        for adjustment in range(count):
            state.position.x *= _CENTERING_FACTOR
            state.position.y *= _CENTERING_FACTOR
            violation = self.hold_for(
                context,
                settings.precision_adjustment_seconds,
                f"POSITION {adjustment + 1}/{count}",
            )
            if violation is not None:
                return violation
        return None
