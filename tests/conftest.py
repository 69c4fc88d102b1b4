"""Shared test fixtures."""

import pytest

from mission_engine.config import EngineSettings, get_engine_settings
from mission_engine.logging.config import get_logging_config
from mission_engine.mission.models import SafetyParameters, TelemetryConfig
from mission_engine.phases.base import PhaseContext
from mission_engine.safety.gate import SafetyGate
from mission_engine.simulation.clock import SimulationClock
from mission_engine.simulation.signal import SignalModel
from mission_engine.telemetry.emitter import TelemetryEmitter
from mission_engine.telemetry.sinks import RecordingTelemetrySink
from mission_engine.vehicle.models import DroneState, FlightMode


@pytest.fixture(autouse=True)
def _clear_environment(monkeypatch):
    """Clear environment variables that affect settings."""
    env_vars_to_clear = [
        "LOG_LEVEL",
        "LOG_FORMAT",
        "SERVICE_NAME",
        "INCLUDE_TIMESTAMP",
        "INCLUDE_LOCATION",
        "MISSION_ENGINE_CONFIG_DIRECTORY",
        "MISSION_ENGINE_MISSION_ID",
        "MISSION_ENGINE_VEHICLE_ID",
        "MISSION_ENGINE_TIME_SCALE",
        "MISSION_ENGINE_INTER_COMMAND_SETTLE_SECONDS",
        "MISSION_ENGINE_CONTINUOUS_SAFETY_MONITORING",
        "MISSION_ENGINE_RANDOM_SEED",
        "MISSION_ENGINE_SIGNAL_JITTER_PERCENT",
        "MISSION_ENGINE_LOG_LEVEL",
    ]
    for var in env_vars_to_clear:
        monkeypatch.delenv(var, raising=False)
    get_engine_settings.cache_clear()
    get_logging_config.cache_clear()
    yield
    get_engine_settings.cache_clear()
    get_logging_config.cache_clear()


@pytest.fixture
def mission_document():
    """Raw mission document in the mission file layout."""
    return {
        "mission": {
            "name": "Test Circuit",
            "description": "Climb, hold, circle and land",
            "drone_model": "SimQuad X4",
            "duration_estimate_seconds": 90,
            "safety_parameters": {
                "max_altitude_feet": 20.0,
                "max_speed_fps": 5.0,
                "emergency_land_battery_percent": 15,
                "geofence_radius_feet": 25.0,
                "max_wind_speed_mph": 10.0,
            },
            "environment": {
                "indoor_safe": False,
                "outdoor_capable": True,
                "recommended_space": "open field",
            },
        },
        "commands": [
            {
                "id": 1,
                "type": "TAKEOFF",
                "description": "Climb to 10 feet",
                "parameters": {
                    "target_altitude_feet": 10.0,
                    "climb_rate_fps": 2.0,
                    "stabilization_time_seconds": 1.0,
                },
                "safety_checks": ["battery_level", "altitude_hold"],
            },
            {
                "id": 2,
                "type": "HOVER",
                "parameters": {"duration_seconds": 5.0, "position_hold": True},
                "safety_checks": ["battery_level", "position_stability"],
            },
            {
                "id": 3,
                "type": "CIRCLE",
                "parameters": {
                    "radius_feet": 6.0,
                    "speed_fps": 1.0,
                    "altitude_feet": 10.0,
                    "direction": "clockwise",
                    "num_revolutions": 1,
                },
                "safety_checks": ["battery_level", "path_clear"],
            },
            {
                "id": 4,
                "type": "LAND",
                "parameters": {"descent_rate_fps": 1.0, "precision_landing": False},
                "safety_checks": ["battery_level", "landing_zone_clear"],
            },
        ],
        "telemetry_config": {
            "update_rate_hz": 10,
            "data_points": ["position", "battery"],
            "logging_enabled": True,
            "real_time_display": True,
        },
    }


@pytest.fixture
def vehicle_document():
    """Raw vehicle document in the vehicle file layout."""
    return {
        "drone": {
            "model": "SimQuad X4",
            "manufacturer": "Generic",
            "type": "quadcopter",
            "category": "training",
            "capabilities": {"gps": True, "altitude_hold": True},
        }
    }


@pytest.fixture
def make_phase_context():
    """Factory for a PhaseContext around a fresh armed state at 10 Hz."""

    def _make(
        *,
        mode=FlightMode.ARMED,
        safety_checks=None,
        update_rate_hz=10,
        settings_overrides=None,
        **safety_overrides,
    ):
        settings = EngineSettings(time_scale=0.0, **(settings_overrides or {}))
        safety_values = {
            "max_altitude_feet": 20.0,
            "max_speed_fps": 5.0,
            "emergency_land_battery_percent": 15,
            "geofence_radius_feet": 25.0,
            "max_wind_speed_mph": 10.0,
        }
        safety_values.update(safety_overrides)
        telemetry = TelemetryConfig(update_rate_hz=update_rate_hz)
        state = DroneState.create(
            motor_count=settings.motor_count,
            ambient_temperature_celsius=settings.ambient_temperature_celsius,
        )
        state.mode = mode
        state.armed = True
        sink = RecordingTelemetrySink()
        context = PhaseContext(
            state=state,
            command_id=1,
            safety_parameters=SafetyParameters(**safety_values),
            telemetry_config=telemetry,
            safety_checks=safety_checks or [],
            gate=SafetyGate(),
            emitter=TelemetryEmitter(telemetry, sink),
            clock=SimulationClock(time_scale=0.0),
            signal=SignalModel(geofence_radius_feet=safety_values["geofence_radius_feet"]),
            settings=settings,
        )
        return context, sink

    return _make
