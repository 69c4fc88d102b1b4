"""Engine configuration using Pydantic BaseSettings.

Settings are loaded from environment variables prefixed with
``MISSION_ENGINE_``. The controller receives an EngineSettings value at
construction; nothing in the engine reads process-wide configuration.

Usage:
    from mission_engine.config import EngineSettings

    settings = EngineSettings(time_scale=0.0)
    controller = MissionController(provider, sink, settings=settings)
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineSettings(BaseSettings):
    """Mission engine settings loaded from environment variables.

    Attributes:
        config_directory: Root directory holding missions/ and drones/.
        mission_id: Mission file to run from the entry point.
        vehicle_id: Vehicle file to run from the entry point.
        time_scale: Wall-clock seconds slept per simulated second (0 = no sleeping).
        inter_command_settle_seconds: Pause between consecutive commands.
        continuous_safety_monitoring: Re-run a command's checks on every tick.
        ambient_temperature_celsius: Motor temperature at rest.
        max_motor_temperature_celsius: Cap applied to motor heating.
        motor_count: Number of motors in a fresh DroneState.
        climb_drain_percent_per_tick: Battery used per climb tick.
        climb_heating_celsius_per_tick: Motor heating per climb tick.
        hold_drain_interval_ticks: Ticks per battery percent while holding.
        circle_drain_interval_ticks: Ticks per battery percent while circling.
        circle_heating_celsius_per_tick: Motor heating per circle tick.
        descent_drain_interval_ticks: Ticks per battery percent while descending.
        cooldown_celsius: Motor cooling applied at touchdown.
        smooth_entry_seconds: Settling time before a smooth circle entry.
        precision_adjustment_count: Centering adjustments before a precision landing.
        precision_adjustment_seconds: Pause after each centering adjustment.
        gps_satellite_count: Satellites reported by GPS-capable vehicles.
        signal_floor_percent: Signal strength at the geofence edge and beyond.
        signal_jitter_percent: Amplitude of seeded random signal jitter.
        random_seed: Seed for the jitter generator.
        log_level: Logging level.
    """

    model_config = SettingsConfigDict(
        env_prefix="MISSION_ENGINE_",
        case_sensitive=False,
        extra="ignore",
        str_strip_whitespace=True,
    )

    # Entry point inputs
    config_directory: str = Field(default="config", min_length=1)
    mission_id: str = Field(default="", description="Mission file stem under missions/")
    vehicle_id: str = Field(default="", description="Vehicle file stem under drones/")

    # Timing
    time_scale: float = Field(default=1.0, ge=0.0, le=100.0)
    inter_command_settle_seconds: float = Field(default=0.5, ge=0.0, le=60.0)

    # Safety
    continuous_safety_monitoring: bool = Field(default=True)

    # Motors
    ambient_temperature_celsius: float = Field(default=25.0, ge=-40.0, le=60.0)
    max_motor_temperature_celsius: float = Field(default=65.0, ge=0.0, le=150.0)
    motor_count: int = Field(default=4, ge=1, le=16)
    climb_heating_celsius_per_tick: float = Field(default=0.5, ge=0.0)
    circle_heating_celsius_per_tick: float = Field(default=0.1, ge=0.0)
    cooldown_celsius: float = Field(default=5.0, ge=0.0)

    # Battery drain model
    climb_drain_percent_per_tick: int = Field(default=1, ge=0, le=100)
    hold_drain_interval_ticks: int = Field(default=20, ge=1)
    circle_drain_interval_ticks: int = Field(default=15, ge=1)
    descent_drain_interval_ticks: int = Field(default=30, ge=1)

    # Phase sub-steps
    smooth_entry_seconds: float = Field(default=1.0, ge=0.0, le=60.0)
    precision_adjustment_count: int = Field(default=3, ge=0, le=20)
    precision_adjustment_seconds: float = Field(default=1.0, ge=0.0, le=60.0)

    # Sensors
    gps_satellite_count: int = Field(default=10, ge=0, le=64)
    signal_floor_percent: int = Field(default=40, ge=0, le=100)
    signal_jitter_percent: int = Field(default=0, ge=0, le=50)
    random_seed: int | None = Field(default=None)

    # Logging
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate log level is one of the allowed values."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_value = value.upper()
        if upper_value not in allowed:
            error_message = f"log_level must be one of {allowed}, got '{value}'"
            raise ValueError(error_message)
        return upper_value


@lru_cache
def get_engine_settings() -> EngineSettings:
    """Get cached engine settings instance.

    Returns:
        Cached EngineSettings instance.
    """
    return EngineSettings()
