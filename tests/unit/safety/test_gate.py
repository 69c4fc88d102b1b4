"""Tests for the safety gate."""

import logging

import pytest

from mission_engine.mission.models import (
    CommandKind,
    CommandSpec,
    MissionDefinition,
    SafetyParameters,
    TelemetryConfig,
)
from mission_engine.safety.gate import (
    SafetyGate,
    check_altitude_hold,
    check_battery_level,
    is_outside_geofence,
)
from mission_engine.safety.models import PreflightReport, SafetyCheckId
from mission_engine.vehicle.models import DroneState, Vector3, VehicleProfile


def _make_params(**overrides):
    defaults = {
        "max_altitude_feet": 20.0,
        "max_speed_fps": 5.0,
        "emergency_land_battery_percent": 20,
        "geofence_radius_feet": 25.0,
        "max_wind_speed_mph": 10.0,
    }
    defaults.update(overrides)
    return SafetyParameters(**defaults)


def _make_mission(commands=None, vehicle_model="SimQuad X4", **param_overrides):
    if commands is None:
        commands = [
            CommandSpec(
                id=1,
                kind=CommandKind.ASCEND,
                parameters={"target_altitude_feet": 10, "climb_rate_fps": 2},
                safety_checks=["battery_level"],
            )
        ]
    return MissionDefinition(
        name="Gate Test",
        vehicle_model=vehicle_model,
        safety_parameters=_make_params(**param_overrides),
        commands=commands,
        telemetry=TelemetryConfig(update_rate_hz=10),
    )


_ALL_KINDS = frozenset(CommandKind)
_VEHICLE = VehicleProfile(model="SimQuad X4")


class TestBuiltInChecks:
    def test_battery_passes_at_threshold(self):
        state = DroneState(battery_percent=20)
        assert check_battery_level(state, _make_params()) is None

    def test_battery_fails_below_threshold(self):
        state = DroneState(battery_percent=19)
        reason = check_battery_level(state, _make_params())
        assert reason is not None
        assert "19%" in reason

    def test_altitude_passes_at_limit(self):
        state = DroneState(position=Vector3(z=20.0))
        assert check_altitude_hold(state, _make_params()) is None

    def test_altitude_fails_above_limit(self):
        state = DroneState(position=Vector3(z=20.5))
        assert "Altitude limit exceeded" in check_altitude_hold(state, _make_params())

    def test_geofence(self):
        params = _make_params(geofence_radius_feet=10.0)
        assert is_outside_geofence(DroneState(position=Vector3(x=6.0, y=8.0)), params) is False
        assert is_outside_geofence(DroneState(position=Vector3(x=6.0, y=8.1)), params) is True


class TestCheck:
    def test_all_builtins_registered(self):
        assert SafetyGate().known_checks == frozenset(SafetyCheckId)

    def test_passes(self):
        gate = SafetyGate()
        names = [check.value for check in SafetyCheckId]
        assert gate.check(names, DroneState(), _make_params()) is None

    def test_no_checks(self):
        assert SafetyGate().check([], DroneState(battery_percent=0), _make_params()) is None

    def test_returns_first_failure_in_order(self):
        gate = SafetyGate()
        state = DroneState(battery_percent=10, position=Vector3(z=30.0))
        violation = gate.check(
            ["path_clear", "altitude_hold", "battery_level"],
            state,
            _make_params(),
            command_id=4,
        )
        assert violation is not None
        assert violation.check_name == "altitude_hold"
        assert violation.command_id == 4

    def test_violation_snapshot_is_a_copy(self):
        gate = SafetyGate()
        state = DroneState(battery_percent=15)
        violation = gate.check(["battery_level"], state, _make_params())
        state.drain_battery(5)
        assert violation.state_snapshot.battery_percent == 15

    def test_logs_failure(self, caplog):
        with caplog.at_level(logging.WARNING, logger="mission_engine.safety.gate"):
            SafetyGate().check(["battery_level"], DroneState(battery_percent=5), _make_params())
        assert "battery_level" in caplog.text

    def test_unknown_check_raises(self):
        with pytest.raises(KeyError):
            SafetyGate().check(["wind_check"], DroneState(), _make_params())

    def test_register_replaces_advisory_check(self):
        gate = SafetyGate()
        gate.register_check("path_clear", lambda state, params: "obstacle ahead")
        violation = gate.check(["path_clear"], DroneState(), _make_params())
        assert violation.reason == "obstacle ahead"

    def test_register_new_check(self):
        gate = SafetyGate()
        gate.register_check("gps_lock", lambda state, params: None)
        assert "gps_lock" in gate.known_checks


class TestPreflight:
    def test_passes(self):
        report = SafetyGate().preflight(_make_mission(), _VEHICLE, DroneState(), _ALL_KINDS)
        assert report == PreflightReport()
        assert report.passed is True

    def test_empty_battery(self):
        report = SafetyGate().preflight(
            _make_mission(), _VEHICLE, DroneState(battery_percent=0), _ALL_KINDS
        )
        assert report.passed is False
        assert any("Battery" in failure for failure in report.failures)

    def test_battery_below_threshold(self):
        report = SafetyGate().preflight(
            _make_mission(), _VEHICLE, DroneState(battery_percent=15), _ALL_KINDS
        )
        assert any("below the emergency threshold" in failure for failure in report.failures)

    def test_no_commands(self):
        report = SafetyGate().preflight(
            _make_mission(commands=[]), _VEHICLE, DroneState(), _ALL_KINDS
        )
        assert report.failures == ["Mission has no commands"]

    def test_vehicle_model_mismatch(self):
        report = SafetyGate().preflight(
            _make_mission(vehicle_model="Other Drone"), _VEHICLE, DroneState(), _ALL_KINDS
        )
        assert any("Other Drone" in failure for failure in report.failures)

    def test_vehicle_model_case_insensitive(self):
        report = SafetyGate().preflight(
            _make_mission(vehicle_model="simquad x4"), _VEHICLE, DroneState(), _ALL_KINDS
        )
        assert report.passed is True

    def test_blank_vehicle_model_matches_any(self):
        report = SafetyGate().preflight(
            _make_mission(vehicle_model=""), _VEHICLE, DroneState(), _ALL_KINDS
        )
        assert report.passed is True

    def test_invalid_parameters(self):
        commands = [
            CommandSpec(id=1, kind=CommandKind.CIRCULAR_PATH, parameters={"radius_feet": 5})
        ]
        report = SafetyGate().preflight(
            _make_mission(commands=commands), _VEHICLE, DroneState(), _ALL_KINDS
        )
        assert len(report.failures) == 1
        assert "invalid parameters" in report.failures[0]

    def test_unknown_safety_check(self):
        commands = [
            CommandSpec(
                id=1,
                kind=CommandKind.HOLD,
                parameters={"duration_seconds": 1},
                safety_checks=["battery_level", "wind_check"],
            )
        ]
        report = SafetyGate().preflight(
            _make_mission(commands=commands), _VEHICLE, DroneState(), _ALL_KINDS
        )
        assert report.failures == ["Command 1 declares unknown safety checks: wind_check"]

    def test_missing_executor(self):
        report = SafetyGate().preflight(
            _make_mission(), _VEHICLE, DroneState(), {CommandKind.HOLD}
        )
        assert report.unsupported_command_ids == [1]
        assert report.failures == []
        assert report.passed is False

    def test_collects_every_failure(self):
        report = SafetyGate().preflight(
            _make_mission(commands=[], vehicle_model="Other"),
            _VEHICLE,
            DroneState(battery_percent=0),
            _ALL_KINDS,
        )
        assert len(report.failures) == 3

    def test_does_not_modify_state(self):
        state = DroneState()
        before = state.model_copy(deep=True)
        SafetyGate().preflight(_make_mission(), _VEHICLE, state, _ALL_KINDS)
        assert state == before
