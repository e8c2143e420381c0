# src/logging/context.py — v2
"""Contextual logging support — attach provider, model, operation, request_id to log records.

Context variables are task-local under asyncio, so concurrent calls through
the same bound client each log with their own request_id.
"""

from __future__ import annotations

import contextvars
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

_provider: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "provider", default=None
)
_model: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "model", default=None
)
_operation: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "operation", default=None
)
_request_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)


@dataclass(frozen=True)
class LogContext:
    """Immutable snapshot of current logging context."""

    provider: str | None = None
    model: str | None = None
    operation: str | None = None
    request_id: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        provider=_provider.get(),
        model=_model.get(),
        operation=_operation.get(),
        request_id=_request_id.get(),
    )


@contextmanager
def call_context(
    provider: str,
    model: str,
    operation: str,
    request_id: str | None = None,
) -> Iterator[LogContext]:
    """Scope the logging context to one chat/embedding invocation."""
    tokens = (
        (_provider, _provider.set(provider)),
        (_model, _model.set(model)),
        (_operation, _operation.set(operation)),
        (_request_id, _request_id.set(request_id or uuid.uuid4().hex[:12])),
    )
    try:
        yield get_context()
    finally:
        for var, token in reversed(tokens):
            var.reset(token)
