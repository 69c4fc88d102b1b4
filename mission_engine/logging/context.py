"""Context variables for run-scoped logging data.

Every mission run gets its own run id so interleaved log lines from
successive runs can be told apart.
"""

from contextvars import ContextVar
from typing import Any
from uuid import uuid4

run_id: ContextVar[str] = ContextVar("run_id", default="")

_extra_context: ContextVar[dict[str, Any] | None] = ContextVar("extra_context", default=None)


def get_run_id() -> str:
    """Get the current mission run ID.

    Returns:
        The run ID for the current context, or an empty string.
    """
    return run_id.get()


def generate_run_id() -> str:
    """Generate and set a new mission run ID.

    Returns:
        The generated run ID.
    """
    new_id = str(uuid4())
    run_id.set(new_id)
    return new_id


def get_extra_context() -> dict[str, Any]:
    """Get the current extra context.

    Returns:
        Copy of the extra context fields.
    """
    context = _extra_context.get()
    if context is None:
        return {}
    return context.copy()


def set_extra_context(**kwargs: Any) -> None:
    """Add fields to include in every log message of the current context.

    Args:
        **kwargs: Key-value pairs to include in log messages.
    """
    current = _extra_context.get()
    current = {} if current is None else current.copy()
    current.update(kwargs)
    _extra_context.set(current)


def clear_context() -> None:
    """Clear the run ID and all extra context."""
    run_id.set("")
    _extra_context.set(None)
