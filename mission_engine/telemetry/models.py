"""Telemetry snapshot model."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from mission_engine.vehicle.models import DroneState, FlightMode

# Data point names accepted by TelemetrySnapshot.select, mapped to fields.
DATA_POINT_FIELDS: dict[str, tuple[str, ...]] = {
    "position": ("x", "y", "z"),
    "altitude": ("z",),
    "velocity": ("speed_fps",),
    "speed": ("speed_fps",),
    "battery": ("battery_percent", "battery_voltage"),
    "battery_status": ("battery_percent", "battery_voltage"),
    "signal_strength": ("signal_strength_percent",),
    "motor_temperatures": ("average_motor_temperature_celsius",),
    "flight_mode": ("mode",),
    "mission_progress": ("mission_progress_percent",),
    "gps": ("gps_satellites",),
}

_ALWAYS_SELECTED: tuple[str, ...] = ("elapsed_seconds", "phase_label", "command_id")


class TelemetrySnapshot(BaseModel):
    """Point-in-time view of the drone state emitted once per tick."""

    model_config = ConfigDict(frozen=True)

    elapsed_seconds: float = Field(ge=0)
    phase_label: str
    command_id: int
    mode: FlightMode
    x: float
    y: float
    z: float = Field(ge=0)
    speed_fps: float = Field(ge=0)
    battery_percent: int = Field(ge=0, le=100)
    battery_voltage: float
    signal_strength_percent: int = Field(ge=0, le=100)
    average_motor_temperature_celsius: float
    mission_progress_percent: int = Field(ge=0, le=100)
    gps_satellites: int = Field(default=0, ge=0)

    @classmethod
    def from_state(cls, state: DroneState, phase_label: str) -> "TelemetrySnapshot":
        """Capture a snapshot of the given state.

        Args:
            state: Drone state to capture.
            phase_label: Human-readable label of the current phase.

        Returns:
            An immutable snapshot.
        """
        return cls(
            elapsed_seconds=state.flight_time_seconds,
            phase_label=phase_label,
            command_id=state.current_command_id,
            mode=state.mode,
            x=state.position.x,
            y=state.position.y,
            z=state.position.z,
            speed_fps=state.speed_fps(),
            battery_percent=state.battery_percent,
            battery_voltage=state.battery_voltage,
            signal_strength_percent=state.signal_strength_percent,
            average_motor_temperature_celsius=state.average_motor_temperature(),
            mission_progress_percent=state.mission_progress_percent,
            gps_satellites=state.gps_satellites,
        )

    def select(self, data_points: list[str]) -> dict[str, Any]:
        """Return the snapshot fields named by telemetry data points.

        Unknown data point names are ignored; an empty list selects every field.

        Args:
            data_points: Data point names from the mission telemetry config.

        Returns:
            Mapping of field name to value.
        """
        full = self.model_dump(mode="json")
        if not data_points:
            return full

        selected_fields: list[str] = list(_ALWAYS_SELECTED)
        for data_point in data_points:
            selected_fields.extend(DATA_POINT_FIELDS.get(data_point, ()))
        return {name: full[name] for name in dict.fromkeys(selected_fields)}

    def format_line(self) -> str:
        """Render the snapshot as a single display line."""
        return (
            f"[{self.phase_label}] T:{self.elapsed_seconds:.1f}s"
            f" | Pos:({self.x:.2f}, {self.y:.2f}, {self.z:.2f})"
            f" | Vel:{self.speed_fps:.1f}fps"
            f" | Bat:{self.battery_percent}% ({self.battery_voltage:.2f}V)"
            f" | Sig:{self.signal_strength_percent}%"
            f" | Temp:{self.average_motor_temperature_celsius:.1f}C"
        )
