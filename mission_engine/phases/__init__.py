"""Phase executors, one per command kind.

Usage:
    from mission_engine.phases import create_executor

    executor = create_executor(command.kind)
    result = executor.execute(command, context)
"""

from typing import assert_never

from mission_engine.mission.models import CommandKind
from mission_engine.phases.ascend import AscendExecutor
from mission_engine.phases.base import PhaseContext, PhaseExecutor, PhaseResult
from mission_engine.phases.circular_path import CircularPathExecutor
from mission_engine.phases.descend_and_land import DescendAndLandExecutor
from mission_engine.phases.hold import HoldExecutor


def create_executor(kind: CommandKind) -> PhaseExecutor:
    """Create the executor for a command kind.

    Args:
        kind: Command kind.

    Returns:
        A new executor instance.
    """
    match kind:
        case CommandKind.ASCEND:
            return AscendExecutor()
        case CommandKind.HOLD:
            return HoldExecutor()
        case CommandKind.CIRCULAR_PATH:
            return CircularPathExecutor()
        case CommandKind.DESCEND_AND_LAND:
            return DescendAndLandExecutor()
        case _:
            assert_never(kind)


def create_default_executors() -> dict[CommandKind, PhaseExecutor]:
    """Create one executor for every command kind."""
    return {kind: create_executor(kind) for kind in CommandKind}


__all__ = [
    "AscendExecutor",
    "CircularPathExecutor",
    "DescendAndLandExecutor",
    "HoldExecutor",
    "PhaseContext",
    "PhaseExecutor",
    "PhaseResult",
    "create_default_executors",
    "create_executor",
]
