"""Mission engine exception hierarchy.

Architecture:
    MissionEngineError (base)
    ├── StateTransitionError
    ├── ConfigurationError
    │   ├── ConfigInvalidError
    │   └── UnsupportedCommandKindError
    └── MissionFailedError
        ├── PreflightFailedError
        └── SafetyAbortError

Usage:
    from mission_engine.exceptions import ConfigInvalidError

    def load_mission(mission_id: str) -> MissionDefinition:
        path = directory / "missions" / f"{mission_id}.json"
        if not path.exists():
            raise ConfigInvalidError(
                f"Mission file not found: {path}",
                source=str(path),
            )
        ...
"""

from mission_engine.exceptions.base import MissionEngineError, StateTransitionError
from mission_engine.exceptions.configuration_errors import (
    ConfigInvalidError,
    ConfigurationError,
    UnsupportedCommandKindError,
)
from mission_engine.exceptions.mission_errors import (
    MissionFailedError,
    PreflightFailedError,
    SafetyAbortError,
)

__all__ = [
    "ConfigInvalidError",
    "ConfigurationError",
    "MissionEngineError",
    "MissionFailedError",
    "PreflightFailedError",
    "SafetyAbortError",
    "StateTransitionError",
    "UnsupportedCommandKindError",
]
