"""Safety gate: named precondition checks and the pre-flight check.

Checks return a SafetyViolation instead of raising, so callers decide how an
abort propagates. The advisory checks always pass in simulation; they are
registered like any other check so a sensor-backed implementation can
replace them with register_check().
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Collection, Iterable
from typing import TYPE_CHECKING

from pydantic import ValidationError

from mission_engine.safety.models import PreflightReport, SafetyCheckId, SafetyViolation

if TYPE_CHECKING:
    from mission_engine.mission.models import CommandKind, MissionDefinition, SafetyParameters
    from mission_engine.vehicle.models import DroneState, VehicleProfile

logger = logging.getLogger(__name__)

# A check returns a failure reason, or None when it passes.
SafetyCheck = Callable[["DroneState", "SafetyParameters"], "str | None"]


def check_battery_level(state: DroneState, params: SafetyParameters) -> str | None:
    """Fail when the battery is below the emergency landing threshold."""
    if state.battery_percent < params.emergency_land_battery_percent:
        return (
            f"Battery too low ({state.battery_percent}% < "
            f"{params.emergency_land_battery_percent}%)"
        )
    return None


def check_altitude_hold(state: DroneState, params: SafetyParameters) -> str | None:
    """Fail when the vehicle is above the maximum altitude."""
    if state.position.z > params.max_altitude_feet:
        return (
            f"Altitude limit exceeded ({state.position.z:.2f}ft > "
            f"{params.max_altitude_feet:.2f}ft)"
        )
    return None


def check_advisory(state: DroneState, params: SafetyParameters) -> str | None:  # noqa: ARG001
    """Environmental check with no simulated sensor behind it; always passes."""
    return None


def is_outside_geofence(state: DroneState, params: SafetyParameters) -> bool:
    """Return whether the vehicle is beyond the geofence radius from launch.

    The geofence is advisory: callers log it, nothing aborts on it.
    """
    return state.position.horizontal_magnitude() > params.geofence_radius_feet


class SafetyGate:
    """Evaluates named safety checks against the drone state."""

    def __init__(self) -> None:
        self._checks: dict[str, SafetyCheck] = {
            SafetyCheckId.BATTERY_LEVEL: check_battery_level,
            SafetyCheckId.ALTITUDE_HOLD: check_altitude_hold,
            SafetyCheckId.POSITION_STABILITY: check_advisory,
            SafetyCheckId.PATH_CLEAR: check_advisory,
            SafetyCheckId.LANDING_ZONE_CLEAR: check_advisory,
        }

    @property
    def known_checks(self) -> frozenset[str]:
        """Return the names of all registered checks."""
        return frozenset(self._checks)

    def register_check(self, name: str, check: SafetyCheck) -> None:
        """Register or replace a named check.

        Args:
            name: Check identifier as used in mission files.
            check: Callable returning a failure reason or None.
        """
        if name in self._checks:
            logger.info("Replacing safety check %s", name)
        self._checks[name] = check

    def check(
        self,
        names: Iterable[str],
        state: DroneState,
        params: SafetyParameters,
        *,
        command_id: int | None = None,
    ) -> SafetyViolation | None:
        """Run the named checks in order and stop at the first failure.

        Args:
            names: Check identifiers to evaluate.
            state: Current drone state.
            params: Mission safety parameters.
            command_id: Command the checks guard, recorded on a violation.

        Returns:
            The first violation, or None if every check passed.

        Raises:
            KeyError: If a check name is not registered. Pre-flight rejects
                such missions, so this only happens on direct misuse.
        """
        for name in names:
            reason = self._checks[name](state, params)
            if reason is not None:
                logger.warning(
                    "Safety check %s failed: %s",
                    name,
                    reason,
                    extra={"check_name": name, "command_id": command_id},
                )
                return SafetyViolation(
                    check_name=name,
                    reason=reason,
                    command_id=command_id,
                    state_snapshot=state.model_copy(deep=True),
                )
        return None

    def preflight(
        self,
        mission: MissionDefinition,
        vehicle: VehicleProfile,
        state: DroneState,
        supported_kinds: Collection[CommandKind],
    ) -> PreflightReport:
        """Check that a mission may start. Does not modify the state.

        Verifies battery presence, a non-empty command list, typed command
        parameters, known safety check names, the vehicle model and that
        an executor exists for every command kind.

        Args:
            mission: Mission about to run.
            vehicle: Vehicle profile for the run.
            state: Fresh drone state.
            supported_kinds: Command kinds with a registered executor.

        Returns:
            Report listing every failure found.
        """
        report = PreflightReport()
        params = mission.safety_parameters

        if state.battery_percent <= 0:
            report.failures.append("Battery not present or fully discharged")
        elif state.battery_percent < params.emergency_land_battery_percent:
            report.failures.append(
                f"Battery {state.battery_percent}% is below the emergency "
                f"threshold {params.emergency_land_battery_percent}%"
            )

        if not mission.commands:
            report.failures.append("Mission has no commands")

        if (
            mission.vehicle_model
            and mission.vehicle_model.strip().lower() != vehicle.model.strip().lower()
        ):
            report.failures.append(
                f"Mission targets {mission.vehicle_model!r} but vehicle is {vehicle.model!r}"
            )

        for command in mission.commands:
            if command.kind not in supported_kinds:
                report.unsupported_command_ids.append(command.id)
                continue

            try:
                command.typed_parameters()
            except ValidationError as error:
                report.failures.append(
                    f"Command {command.id} ({command.kind}) has invalid parameters: "
                    f"{error.error_count()} error(s), first: {error.errors()[0]['msg']}"
                )

            unknown_checks = [name for name in command.safety_checks if name not in self._checks]
            if unknown_checks:
                report.failures.append(
                    f"Command {command.id} declares unknown safety checks: "
                    f"{', '.join(unknown_checks)}"
                )

        if report.passed:
            logger.info(
                "Pre-flight checks passed (%d commands, battery %d%%)",
                len(mission.commands),
                state.battery_percent,
            )
        else:
            logger.warning(
                "Pre-flight checks failed",
                extra={
                    "failures": report.failures,
                    "unsupported_command_ids": report.unsupported_command_ids,
                },
            )

        return report
