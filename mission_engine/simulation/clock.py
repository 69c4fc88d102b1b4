"""Simulated mission clock.

Elapsed flight time is tracked in simulated seconds so runs are
reproducible. Each advance optionally sleeps a scaled amount of wall time,
which is the only place the engine ever blocks.
"""

import time


class SimulationClock:
    """Monotonic simulated clock with optional real-time pacing."""

    def __init__(self, *, time_scale: float = 1.0) -> None:
        """Initialize the clock at zero.

        Args:
            time_scale: Wall seconds slept per simulated second. Zero disables sleeping.

        Raises:
            ValueError: If time_scale is negative.
        """
        if time_scale < 0:
            raise ValueError(f"time_scale must be >= 0, got {time_scale}")
        self._time_scale = time_scale
        self._elapsed_seconds = 0.0

    @property
    def elapsed_seconds(self) -> float:
        """Return simulated seconds since the clock was started."""
        return self._elapsed_seconds

    def reset(self) -> None:
        """Restart the clock at zero."""
        self._elapsed_seconds = 0.0

    def advance(self, seconds: float) -> None:
        """Move simulated time forward, sleeping the scaled wall time.

        Args:
            seconds: Simulated seconds to advance. Non-positive values are ignored.
        """
        if seconds <= 0:
            return
        self._elapsed_seconds += seconds
        if self._time_scale > 0:
            time.sleep(seconds * self._time_scale)
