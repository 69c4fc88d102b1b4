"""Tests for vehicle profile, flight modes and the drone state."""

import pytest
from pydantic import ValidationError

from mission_engine.exceptions.base import StateTransitionError
from mission_engine.vehicle.models import (
    TERMINAL_MODES,
    VALID_TRANSITIONS,
    DroneState,
    FlightMode,
    Vector3,
    VehicleProfile,
    validate_transition,
)


def _make_state(mode=FlightMode.HOVER, **overrides):
    """Create a DroneState in a given mode."""
    state = DroneState(**overrides)
    state.mode = mode
    return state


class TestFlightModeTransitions:
    def test_every_mode_has_an_entry(self):
        assert set(VALID_TRANSITIONS) == set(FlightMode)

    def test_disarmed_only_arms(self):
        assert VALID_TRANSITIONS[FlightMode.DISARMED] == {FlightMode.ARMED}

    def test_terminal_modes_have_no_exits(self):
        assert TERMINAL_MODES == {FlightMode.MISSION_COMPLETE, FlightMode.ABORTED}
        for mode in TERMINAL_MODES:
            assert VALID_TRANSITIONS[mode] == set()

    @pytest.mark.parametrize(
        ("current", "target"),
        [
            (FlightMode.ARMED, FlightMode.ASCEND),
            (FlightMode.ASCEND, FlightMode.STABILIZING),
            (FlightMode.STABILIZING, FlightMode.HOVER),
            (FlightMode.HOVER, FlightMode.CIRCLE),
            (FlightMode.CIRCLE, FlightMode.HOVER),
            (FlightMode.HOVER, FlightMode.DESCENDING),
            (FlightMode.DESCENDING, FlightMode.FINAL_APPROACH),
            (FlightMode.FINAL_APPROACH, FlightMode.LANDED),
            (FlightMode.LANDED, FlightMode.MISSION_COMPLETE),
            (FlightMode.LANDED, FlightMode.ASCEND),
        ],
    )
    def test_allowed(self, current, target):
        assert validate_transition(current, target) is True

    @pytest.mark.parametrize(
        ("current", "target"),
        [
            (FlightMode.DISARMED, FlightMode.ASCEND),
            (FlightMode.ASCEND, FlightMode.CIRCLE),
            (FlightMode.CIRCLE, FlightMode.DESCENDING),
            (FlightMode.FINAL_APPROACH, FlightMode.HOVER),
            (FlightMode.MISSION_COMPLETE, FlightMode.ARMED),
            (FlightMode.ABORTED, FlightMode.HOVER),
        ],
    )
    def test_rejected(self, current, target):
        assert validate_transition(current, target) is False

    def test_every_non_terminal_armed_mode_can_abort(self):
        for mode in set(FlightMode) - TERMINAL_MODES - {FlightMode.DISARMED}:
            assert validate_transition(mode, FlightMode.ABORTED), mode


class TestVehicleProfile:
    def test_minimal(self):
        profile = VehicleProfile(model="SimQuad X4")
        assert profile.capabilities == {}
        assert profile.has_gps is False

    def test_has_gps(self):
        assert VehicleProfile(model="X", capabilities={"gps": True}).has_gps is True

    def test_requires_model(self):
        with pytest.raises(ValidationError):
            VehicleProfile(model="")

    def test_frozen(self):
        profile = VehicleProfile(model="X")
        with pytest.raises(ValidationError):
            profile.model = "Y"


class TestVector3:
    def test_magnitude(self):
        assert Vector3(x=3.0, y=4.0, z=12.0).magnitude() == pytest.approx(13.0)

    def test_horizontal_magnitude_ignores_z(self):
        assert Vector3(x=3.0, y=4.0, z=100.0).horizontal_magnitude() == pytest.approx(5.0)


class TestDroneStateDefaults:
    def test_fresh_state(self):
        state = DroneState()
        assert state.mode == FlightMode.DISARMED
        assert state.battery_percent == 100
        assert state.battery_voltage == pytest.approx(4.2)
        assert state.armed is False
        assert state.flying is False
        assert state.motor_temperatures_celsius == [25.0, 25.0, 25.0, 25.0]
        assert state.position == Vector3()

    def test_create_uses_motor_settings(self):
        state = DroneState.create(motor_count=6, ambient_temperature_celsius=18.0)
        assert state.motor_temperatures_celsius == [18.0] * 6

    def test_states_do_not_share_vectors(self):
        first = DroneState()
        second = DroneState()
        first.position.z = 5.0
        assert second.position.z == 0.0


class TestTransitionTo:
    def test_valid_transition(self):
        state = DroneState()
        state.transition_to(FlightMode.ARMED)
        assert state.mode == FlightMode.ARMED

    def test_same_mode_is_noop(self):
        state = _make_state(FlightMode.HOVER)
        state.transition_to(FlightMode.HOVER)
        assert state.mode == FlightMode.HOVER

    def test_invalid_transition_raises(self):
        state = _make_state(FlightMode.CIRCLE)
        with pytest.raises(StateTransitionError) as exc_info:
            state.transition_to(FlightMode.LANDED)
        assert exc_info.value.context == {"current": "circle", "target": "landed"}
        assert state.mode == FlightMode.CIRCLE

    def test_is_terminal(self):
        assert _make_state(FlightMode.ABORTED).is_terminal is True
        assert _make_state(FlightMode.LANDED).is_terminal is False


class TestDrainBattery:
    def test_drains_and_updates_voltage(self):
        state = DroneState()
        state.drain_battery(50)
        assert state.battery_percent == 50
        assert state.battery_voltage == pytest.approx(3.6)

    def test_default_one_percent(self):
        state = DroneState()
        state.drain_battery()
        assert state.battery_percent == 99

    def test_never_below_zero(self):
        state = DroneState(battery_percent=2)
        state.drain_battery(5)
        assert state.battery_percent == 0
        assert state.battery_voltage == pytest.approx(3.0)

    def test_negative_drain_does_not_charge(self):
        state = DroneState(battery_percent=40)
        state.drain_battery(-10)
        assert state.battery_percent == 40


class TestMotorTemperatures:
    def test_heat_clamped_to_cap(self):
        state = DroneState(motor_temperatures_celsius=[64.8, 30.0])
        state.heat_motors(0.5, 65.0)
        assert state.motor_temperatures_celsius == [65.0, pytest.approx(30.5)]

    def test_cool_toward_ambient(self):
        state = DroneState(motor_temperatures_celsius=[40.0, 27.0])
        state.cool_motors(5.0, 25.0)
        assert state.motor_temperatures_celsius == [35.0, 25.0]

    def test_cannot_cool_while_flying(self):
        state = DroneState(flying=True, motor_temperatures_celsius=[40.0])
        with pytest.raises(StateTransitionError):
            state.cool_motors(5.0, 25.0)
        assert state.motor_temperatures_celsius == [40.0]

    def test_average(self):
        state = DroneState(motor_temperatures_celsius=[20.0, 30.0])
        assert state.average_motor_temperature() == pytest.approx(25.0)

    def test_average_without_motors(self):
        assert DroneState(motor_temperatures_celsius=[]).average_motor_temperature() == 0.0


class TestAdvanceProgress:
    def test_monotonic(self):
        state = _make_state(FlightMode.HOVER)
        state.advance_progress(50)
        state.advance_progress(25)
        assert state.mission_progress_percent == 50

    def test_capped_below_100_until_terminal(self):
        state = _make_state(FlightMode.HOVER)
        state.advance_progress(100)
        assert state.mission_progress_percent == 99

    def test_reaches_100_in_terminal_mode(self):
        state = _make_state(FlightMode.MISSION_COMPLETE)
        state.advance_progress(100)
        assert state.mission_progress_percent == 100


class TestAltitudeAndSpeed:
    def test_set_altitude_clamps_at_ground(self):
        state = DroneState()
        state.set_altitude(-0.3)
        assert state.position.z == 0.0

    def test_speed(self):
        state = DroneState(velocity=Vector3(x=0.0, y=3.0, z=4.0))
        assert state.speed_fps() == pytest.approx(5.0)
