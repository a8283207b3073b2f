"""
Logging context for ormysql.

Fields set here (model, operation, ...) are attached to every record
emitted within the scope, including records from concurrently running
schema-sync tasks, since each asyncio task gets its own context copy.
"""

from __future__ import annotations

import contextvars
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

_log_context: contextvars.ContextVar[dict[str, Any] | None] = contextvars.ContextVar(
    "ormysql_log_context",
    default=None,
)


@dataclass
class LogContext:
    """Structured fields describing the adapter operation in progress."""

    model: str | None = None
    operation: str | None = None
    table: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a dictionary of non-None values."""
        result = {
            key: value
            for key, value in (
                ("model", self.model),
                ("operation", self.operation),
                ("table", self.table),
            )
            if value is not None
        }
        result.update(self.extra)
        return result


def get_log_context() -> dict[str, Any]:
    """Get a copy of the current log context."""
    ctx = _log_context.get()
    return ctx.copy() if ctx else {}


@contextmanager
def with_log_context(
    context: LogContext | dict[str, Any] | None = None,
    **kwargs: Any,
) -> Iterator[None]:
    """
    Add fields to the log context for the duration of a block.

    Example:
        with with_log_context(model="User", operation="autoupdate"):
            logger.info("Altering table")  # carries model and operation
    """
    previous = _log_context.get()

    new_context = previous.copy() if previous else {}
    if context is not None:
        new_context.update(context.to_dict() if isinstance(context, LogContext) else context)
    new_context.update(kwargs)

    token = _log_context.set(new_context)
    try:
        yield
    finally:
        _log_context.reset(token)


class ContextFilter(logging.Filter):
    """Injects the current log context into each record it sees."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in get_log_context().items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True
