"""Tests for the telemetry snapshot model."""

import pytest
from pydantic import ValidationError

from mission_engine.telemetry.models import TelemetrySnapshot
from mission_engine.vehicle.models import DroneState, FlightMode, Vector3


def _make_state():
    state = DroneState(
        position=Vector3(x=1.234, y=-2.0, z=10.0),
        velocity=Vector3(x=0.0, y=3.0, z=4.0),
        battery_percent=72,
        battery_voltage=3.864,
        current_command_id=3,
        mission_progress_percent=50,
        flight_time_seconds=12.5,
        motor_temperatures_celsius=[30.0, 32.0, 34.0, 36.0],
        signal_strength_percent=88,
        gps_satellites=10,
    )
    state.mode = FlightMode.CIRCLE
    return state


class TestFromState:
    def test_captures_fields(self):
        snapshot = TelemetrySnapshot.from_state(_make_state(), "CIRCLE (40%)")
        assert snapshot.phase_label == "CIRCLE (40%)"
        assert snapshot.elapsed_seconds == 12.5
        assert snapshot.command_id == 3
        assert snapshot.mode == FlightMode.CIRCLE
        assert (snapshot.x, snapshot.y, snapshot.z) == (1.234, -2.0, 10.0)
        assert snapshot.speed_fps == pytest.approx(5.0)
        assert snapshot.average_motor_temperature_celsius == pytest.approx(33.0)
        assert snapshot.gps_satellites == 10

    def test_is_independent_of_later_mutation(self):
        state = _make_state()
        snapshot = TelemetrySnapshot.from_state(state, "HOVER")
        state.position.x = 99.0
        state.drain_battery(10)
        assert snapshot.x == 1.234
        assert snapshot.battery_percent == 72

    def test_frozen(self):
        snapshot = TelemetrySnapshot.from_state(_make_state(), "HOVER")
        with pytest.raises(ValidationError):
            snapshot.z = 0.0


class TestSelect:
    def test_empty_selects_everything(self):
        snapshot = TelemetrySnapshot.from_state(_make_state(), "HOVER")
        assert snapshot.select([]) == snapshot.model_dump(mode="json")

    def test_named_data_points(self):
        snapshot = TelemetrySnapshot.from_state(_make_state(), "HOVER")
        selected = snapshot.select(["position", "battery"])
        assert set(selected) == {
            "elapsed_seconds",
            "phase_label",
            "command_id",
            "x",
            "y",
            "z",
            "battery_percent",
            "battery_voltage",
        }
        assert selected["battery_percent"] == 72

    def test_unknown_data_points_ignored(self):
        snapshot = TelemetrySnapshot.from_state(_make_state(), "HOVER")
        selected = snapshot.select(["wind", "signal_strength"])
        assert set(selected) == {
            "elapsed_seconds",
            "phase_label",
            "command_id",
            "signal_strength_percent",
        }

    def test_mode_serialized_as_string(self):
        snapshot = TelemetrySnapshot.from_state(_make_state(), "HOVER")
        assert snapshot.select(["flight_mode"])["mode"] == "circle"


class TestFormatLine:
    def test_display_line(self):
        line = TelemetrySnapshot.from_state(_make_state(), "CIRCLE (40%)").format_line()
        assert line == (
            "[CIRCLE (40%)] T:12.5s | Pos:(1.23, -2.00, 10.00) | Vel:5.0fps"
            " | Bat:72% (3.86V) | Sig:88% | Temp:33.0C"
        )
