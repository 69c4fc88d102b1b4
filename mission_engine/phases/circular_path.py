"""CircularPath phase: constant-speed orbit around the current position."""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, ClassVar

from mission_engine.mission.models import CircleDirection, CircularPathParameters, CommandKind
from mission_engine.phases.base import PhaseExecutor
from mission_engine.vehicle.models import FlightMode

if TYPE_CHECKING:
    from mission_engine.phases.base import PhaseContext
    from mission_engine.safety.models import SafetyViolation

logger = logging.getLogger(__name__)


class CircularPathExecutor(PhaseExecutor[CircularPathParameters]):
    """Flies circles of the given radius centered on the starting position.

    circumference = 2*pi*r*revolutions, total_time = circumference/speed and
    the angle advances by 2*pi*revolutions/total_steps per tick, negative for
    clockwise. Velocity is the angular derivative of position. After the
    last tick the vehicle is snapped back to the center so the path always
    closes on its starting x/y.
    """

    kind: ClassVar[CommandKind] = CommandKind.CIRCULAR_PATH
    parameters_model: ClassVar[type[CircularPathParameters]] = CircularPathParameters

    def run(
        self,
        parameters: CircularPathParameters,
        context: PhaseContext,
    ) -> SafetyViolation | None:
        state = context.state
        settings = context.settings
        radius = parameters.radius_feet

        if parameters.speed_fps > context.safety_parameters.max_speed_fps:
            logger.warning(
                "Circle speed %.2ffps exceeds the %.2ffps mission limit",
                parameters.speed_fps,
                context.safety_parameters.max_speed_fps,
            )

        state.transition_to(FlightMode.CIRCLE)
        state.set_altitude(parameters.altitude_feet)
        state.flying = state.flying or state.position.z > 0
        state.velocity.z = 0.0

        circumference = 2 * math.pi * radius * parameters.num_revolutions
        total_time = circumference / parameters.speed_fps
        total_steps = max(1, int(total_time * context.update_rate_hz))
        angle_step = 2 * math.pi * parameters.num_revolutions / total_steps
        if parameters.direction == CircleDirection.CLOCKWISE:
            angle_step = -angle_step
        angular_velocity = angle_step * context.update_rate_hz

        logger.info(
            "Flying %.1fft diameter circle %s at %.2ffps "
            "(circumference %.1fft, %.1fs, %d ticks)",
            radius * 2,
            parameters.direction,
            parameters.speed_fps,
            circumference,
            total_time,
            total_steps,
        )

        if parameters.smooth_entry:
            violation = self.hold_for(context, settings.smooth_entry_seconds, "CIRCLE ENTRY")
            if violation is not None:
                return violation

        center_x = state.position.x
        center_y = state.position.y

        for step in range(total_steps):
            angle = step * angle_step
            state.position.x = center_x + radius * math.cos(angle)
            state.position.y = center_y + radius * math.sin(angle)
            state.velocity.x = -radius * math.sin(angle) * angular_velocity
            state.velocity.y = radius * math.cos(angle) * angular_velocity

            if step % settings.circle_drain_interval_ticks == 0:
                state.drain_battery()
            state.heat_motors(
                settings.circle_heating_celsius_per_tick,
                settings.max_motor_temperature_celsius,
            )

            progress = int((step + 1) / total_steps * 100)
            violation = self.finish_tick(context, f"CIRCLE ({progress}%)")
            if violation is not None:
                return violation

        state.position.x = center_x
        state.position.y = center_y
        state.velocity.x = 0.0
        state.velocity.y = 0.0
        state.transition_to(FlightMode.HOVER)
        logger.info("Circular path complete, returned to center (%.2f, %.2f)", center_x, center_y)
        return None
