"""Vehicle profile and simulated drone state models."""

import math
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from mission_engine.exceptions.base import StateTransitionError

_VOLTAGE_FLOOR: float = 3.0
_VOLTAGE_SPAN: float = 1.2


class FlightMode(StrEnum):
    """Flight mode of the simulated vehicle."""

    DISARMED = "disarmed"
    ARMED = "armed"
    ASCEND = "ascend"
    STABILIZING = "stabilizing"
    HOVER = "hover"
    CIRCLE = "circle"
    DESCENDING = "descending"
    FINAL_APPROACH = "final_approach"
    LANDED = "landed"
    MISSION_COMPLETE = "mission_complete"
    ABORTED = "aborted"


_PHASE_ENTRY_MODES: set[FlightMode] = {
    FlightMode.ASCEND,
    FlightMode.HOVER,
    FlightMode.CIRCLE,
    FlightMode.DESCENDING,
    FlightMode.MISSION_COMPLETE,
    FlightMode.ABORTED,
}

# Valid mode transitions
VALID_TRANSITIONS: dict[FlightMode, set[FlightMode]] = {
    FlightMode.DISARMED: {FlightMode.ARMED},
    FlightMode.ARMED: _PHASE_ENTRY_MODES,
    FlightMode.ASCEND: {FlightMode.STABILIZING, FlightMode.HOVER, FlightMode.ABORTED},
    FlightMode.STABILIZING: {FlightMode.HOVER, FlightMode.ABORTED},
    FlightMode.HOVER: _PHASE_ENTRY_MODES,
    FlightMode.CIRCLE: {FlightMode.HOVER, FlightMode.ABORTED},
    FlightMode.DESCENDING: {FlightMode.FINAL_APPROACH, FlightMode.LANDED, FlightMode.ABORTED},
    FlightMode.FINAL_APPROACH: {FlightMode.LANDED, FlightMode.ABORTED},
    FlightMode.LANDED: _PHASE_ENTRY_MODES,
    FlightMode.MISSION_COMPLETE: set(),
    FlightMode.ABORTED: set(),
}

TERMINAL_MODES: frozenset[FlightMode] = frozenset(
    {FlightMode.MISSION_COMPLETE, FlightMode.ABORTED}
)


def validate_transition(current: FlightMode, target: FlightMode) -> bool:
    """Check if a flight mode transition is valid.

    Args:
        current: Current flight mode.
        target: Desired flight mode.

    Returns:
        True if the transition is allowed.
    """
    return target in VALID_TRANSITIONS.get(current, set())


class VehicleProfile(BaseModel):
    """Static description of an aircraft, used for context and display."""

    model_config = ConfigDict(frozen=True)

    model: str = Field(min_length=1)
    manufacturer: str = Field(default="")
    type: str = Field(default="")
    category: str = Field(default="")
    specifications: dict[str, Any] = Field(default_factory=dict)
    capabilities: dict[str, bool] = Field(default_factory=dict)
    video_system: dict[str, Any] = Field(default_factory=dict)
    telemetry: dict[str, bool] = Field(default_factory=dict)
    control_characteristics: dict[str, str] = Field(default_factory=dict)
    flight_modes: list[dict[str, Any]] = Field(default_factory=list)
    performance_limits: dict[str, Any] = Field(default_factory=dict)
    recommended_use: dict[str, str] = Field(default_factory=dict)

    @property
    def has_gps(self) -> bool:
        """Return whether the vehicle carries a satellite receiver."""
        return bool(self.capabilities.get("gps", False))


class Vector3(BaseModel):
    """Cartesian vector in feet (position) or feet per second (velocity)."""

    x: float = Field(default=0.0)
    y: float = Field(default=0.0)
    z: float = Field(default=0.0)

    def magnitude(self) -> float:
        """Return the Euclidean length of the vector."""
        return math.sqrt(self.x**2 + self.y**2 + self.z**2)

    def horizontal_magnitude(self) -> float:
        """Return the length of the vector projected onto the x/y plane."""
        return math.hypot(self.x, self.y)


class DroneState(BaseModel):
    """Mutable state of the simulated vehicle during one mission run.

    Owned by a single MissionController run and passed by reference to each
    phase executor. Mutators keep the state invariants: battery within
    0..100 and never rising, motor temperatures bounded by the configured
    cap, mode changes following VALID_TRANSITIONS.
    """

    model_config = ConfigDict(validate_assignment=False)

    position: Vector3 = Field(default_factory=Vector3)
    velocity: Vector3 = Field(default_factory=Vector3)
    battery_percent: int = Field(default=100, ge=0, le=100)
    battery_voltage: float = Field(default=_VOLTAGE_FLOOR + _VOLTAGE_SPAN)
    armed: bool = Field(default=False)
    flying: bool = Field(default=False)
    mode: FlightMode = Field(default=FlightMode.DISARMED)
    current_command_id: int = Field(default=0)
    mission_progress_percent: int = Field(default=0, ge=0, le=100)
    flight_time_seconds: float = Field(default=0.0, ge=0)
    motor_temperatures_celsius: list[float] = Field(default_factory=lambda: [25.0] * 4)
    signal_strength_percent: int = Field(default=100, ge=0, le=100)
    gps_satellites: int = Field(default=0, ge=0)

    @classmethod
    def create(cls, *, motor_count: int, ambient_temperature_celsius: float) -> "DroneState":
        """Create a fresh, disarmed state with motors at ambient temperature."""
        return cls(motor_temperatures_celsius=[ambient_temperature_celsius] * motor_count)

    @property
    def is_terminal(self) -> bool:
        """Return whether the state has reached a terminal mode."""
        return self.mode in TERMINAL_MODES

    def speed_fps(self) -> float:
        """Return the magnitude of the velocity vector."""
        return self.velocity.magnitude()

    def average_motor_temperature(self) -> float:
        """Return the mean motor temperature in Celsius."""
        if not self.motor_temperatures_celsius:
            return 0.0
        return sum(self.motor_temperatures_celsius) / len(self.motor_temperatures_celsius)

    def transition_to(self, target: FlightMode) -> None:
        """Change flight mode, enforcing the mode state machine.

        Re-entering the current mode is a no-op.

        Args:
            target: Desired flight mode.

        Raises:
            StateTransitionError: If the transition is not allowed.
        """
        if target == self.mode:
            return
        if not validate_transition(self.mode, target):
            raise StateTransitionError(
                f"Cannot transition from {self.mode} to {target}",
                context={"current": str(self.mode), "target": str(target)},
            )
        self.mode = target

    def drain_battery(self, percent: int = 1) -> None:
        """Reduce battery charge and refresh the derived voltage.

        Args:
            percent: Charge to remove; never drives the battery below zero.
        """
        self.battery_percent = max(0, self.battery_percent - max(0, percent))
        self.battery_voltage = _VOLTAGE_FLOOR + (self.battery_percent / 100.0) * _VOLTAGE_SPAN

    def heat_motors(self, increment_celsius: float, max_celsius: float) -> None:
        """Warm every motor, clamped to the cap."""
        self.motor_temperatures_celsius = [
            min(max_celsius, temperature + increment_celsius)
            for temperature in self.motor_temperatures_celsius
        ]

    def cool_motors(self, decrement_celsius: float, ambient_celsius: float) -> None:
        """Cool every motor toward ambient.

        Raises:
            StateTransitionError: If the vehicle is still flying.
        """
        if self.flying:
            raise StateTransitionError("Motors cannot cool down while flying")
        self.motor_temperatures_celsius = [
            max(ambient_celsius, temperature - decrement_celsius)
            for temperature in self.motor_temperatures_celsius
        ]

    def advance_progress(self, percent: int) -> None:
        """Raise mission progress; progress never moves backwards.

        Progress of 100 is reserved for terminal modes.

        Args:
            percent: New progress value.
        """
        ceiling = 100 if self.is_terminal else 99
        self.mission_progress_percent = max(
            self.mission_progress_percent,
            min(ceiling, max(0, percent)),
        )

    def set_altitude(self, altitude_feet: float) -> None:
        """Set z, never below ground level."""
        self.position.z = max(0.0, altitude_feet)
