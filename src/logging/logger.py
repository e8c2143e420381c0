# src/logging/logger.py — v2
"""Logger factory with JSON and text formatters.

Both formatters read the per-call context (provider, model, operation,
request_id) so a single chat or embedding call can be followed across the
adapter, the HTTP plumbing and the caller's own log lines. Failures raised
as LLMError subclasses are tagged with their ``kind`` (and HTTP status for
ProviderError).
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from llmapi.logging.context import get_context

if TYPE_CHECKING:
    from llmapi.config.settings import Settings

ROOT_LOGGER = "llmapi"


def _error_fields(record: logging.LogRecord) -> dict[str, Any]:
    if not record.exc_info or record.exc_info[1] is None:
        return {}
    exc = record.exc_info[1]
    fields: dict[str, Any] = {"type": type(exc).__name__}
    kind = getattr(exc, "kind", None)
    if kind is not None:
        fields["kind"] = kind
    status_code = getattr(exc, "status_code", None)
    if status_code is not None:
        fields["status_code"] = status_code
    return fields


class JsonFormatter(logging.Formatter):
    """One JSON object per line, context and error metadata inlined."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        context = get_context().as_dict()
        if context:
            entry["context"] = context

        data = getattr(record, "data", None)
        if data:
            entry["data"] = data

        error = _error_fields(record)
        if error:
            entry["error"] = error
            entry["exception"] = self.formatException(record.exc_info)  # type: ignore[arg-type]

        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    """Single-line human-readable output for development."""

    def format(self, record: logging.LogRecord) -> str:
        ctx = get_context()
        stamp = datetime.fromtimestamp(record.created, tz=timezone.utc)
        line = f"{stamp:%Y-%m-%d %H:%M:%S} [{record.levelname:8s}] {record.name}"
        if ctx.provider:
            line += f" [{ctx.provider}:{ctx.operation or '-'}]"
        if ctx.request_id:
            line += f" ({ctx.request_id})"
        line += f" - {record.getMessage()}"

        error = _error_fields(record)
        if error.get("kind"):
            line += f" <{error['kind']}>"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def get_logger(name: str) -> logging.Logger:
    """Get a named logger under the llmapi root."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def setup_logging(level: str = "INFO", log_format: str = "json") -> None:
    """Attach a single stdout handler to the llmapi root logger.

    The library never calls this itself; applications opt in. Calling it
    again replaces the previous handler.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
        log_format: Output format ("json" or "text").
    """
    root_logger = logging.getLogger(ROOT_LOGGER)
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter() if log_format == "json" else TextFormatter())
    root_logger.addHandler(handler)


def setup_logging_from_settings(settings: Settings) -> None:
    """setup_logging driven by LLMAPI_LOG_LEVEL / LLMAPI_LOG_FORMAT."""
    setup_logging(level=settings.log_level, log_format=settings.log_format)
