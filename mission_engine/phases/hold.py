"""Hold phase: station keeping with simulated drift."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, ClassVar

from mission_engine.mission.models import CommandKind, HoldParameters
from mission_engine.phases.base import PhaseExecutor
from mission_engine.vehicle.models import FlightMode

if TYPE_CHECKING:
    from mission_engine.phases.base import PhaseContext
    from mission_engine.safety.models import SafetyViolation

# Drift amplitudes around the anchor point, in feet.
_FREE_DRIFT_FEET: float = 1.0
_HELD_DRIFT_FEET: float = 0.1
_FREE_ALTITUDE_FACTOR: float = 1.0
_HELD_ALTITUDE_FACTOR: float = 0.2


class HoldExecutor(PhaseExecutor[HoldParameters]):
    """Holds position for a duration while air currents push the vehicle.

    While airborne, position is perturbed sinusoidally around the point
    where the hold started. With position hold enabled the autopilot is
    correcting, so the drift amplitude shrinks but does not vanish. Altitude
    wanders within half the configured tolerance. Battery drains on a coarse
    interval.
    """

    kind: ClassVar[CommandKind] = CommandKind.HOLD
    parameters_model: ClassVar[type[HoldParameters]] = HoldParameters

    def run(self, parameters: HoldParameters, context: PhaseContext) -> SafetyViolation | None:
        state = context.state
        settings = context.settings
        anchor_x = state.position.x
        anchor_y = state.position.y
        anchor_z = state.position.z

        if parameters.position_hold:
            horizontal_amplitude = _HELD_DRIFT_FEET
            altitude_factor = _HELD_ALTITUDE_FACTOR
        else:
            horizontal_amplitude = _FREE_DRIFT_FEET
            altitude_factor = _FREE_ALTITUDE_FACTOR
        altitude_amplitude = parameters.altitude_tolerance_feet * 0.5 * altitude_factor

        state.velocity.z = 0.0
        state.transition_to(FlightMode.HOVER)

        steps = context.ticks_for(parameters.duration_seconds)
        for step in range(steps):
            previous_x = state.position.x
            previous_y = state.position.y
            previous_z = state.position.z

            # A vehicle on the ground does not drift
            if state.flying:
                state.position.x = anchor_x + horizontal_amplitude * math.sin(step * 0.1)
                state.position.y = anchor_y + horizontal_amplitude * 0.5 * math.sin(step * 0.07)
                state.set_altitude(anchor_z + altitude_amplitude * math.sin(step * 0.05))

            state.velocity.x = (state.position.x - previous_x) * context.update_rate_hz
            state.velocity.y = (state.position.y - previous_y) * context.update_rate_hz
            state.velocity.z = (state.position.z - previous_z) * context.update_rate_hz

            if step % settings.hold_drain_interval_ticks == 0:
                state.drain_battery()

            violation = self.finish_tick(context, "HOVER")
            if violation is not None:
                return violation

        state.velocity.x = 0.0
        state.velocity.y = 0.0
        state.velocity.z = 0.0
        return None
