"""Signal strength model.

Signal strength is a deterministic function of horizontal distance from
the launch point relative to the geofence radius. Random jitter is only
added when explicitly configured, from a generator owned by the model and
seeded from the settings, so tests stay reproducible.
"""

import random

_FULL_SIGNAL_PERCENT: int = 100


class SignalModel:
    """Computes link signal strength for the simulated vehicle."""

    def __init__(
        self,
        *,
        geofence_radius_feet: float,
        floor_percent: int = 40,
        jitter_percent: int = 0,
        seed: int | None = None,
    ) -> None:
        """Initialize the signal model.

        Args:
            geofence_radius_feet: Distance at which the signal reaches the floor.
            floor_percent: Signal strength at and beyond the geofence edge.
            jitter_percent: Maximum random deviation added to each reading.
            seed: Seed of the jitter generator.

        Raises:
            ValueError: If the geofence radius is not positive.
        """
        if geofence_radius_feet <= 0:
            raise ValueError(f"geofence_radius_feet must be > 0, got {geofence_radius_feet}")
        self._geofence_radius_feet = geofence_radius_feet
        self._floor_percent = max(0, min(_FULL_SIGNAL_PERCENT, floor_percent))
        self._jitter_percent = max(0, jitter_percent)
        self._random = random.Random(seed)

    def strength_percent(self, horizontal_distance_feet: float) -> int:
        """Return the signal strength at a distance from the launch point.

        Args:
            horizontal_distance_feet: Distance from the launch point in feet.

        Returns:
            Signal strength in percent, within 0..100.
        """
        ratio = min(1.0, max(0.0, horizontal_distance_feet) / self._geofence_radius_feet)
        span = _FULL_SIGNAL_PERCENT - self._floor_percent
        strength = _FULL_SIGNAL_PERCENT - round(span * ratio)

        if self._jitter_percent:
            strength += self._random.randint(-self._jitter_percent, self._jitter_percent)

        return max(0, min(_FULL_SIGNAL_PERCENT, strength))
