# src/tracking/models.py — v2
"""Request sink types: RequestRecord and the RequestHook callback signature."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Callable, Literal

from pydantic import BaseModel


class RequestRecord(BaseModel):
    """Serialized outbound vendor request, handed to a caller hook before sending.

    Headers are not captured, so credentials never reach a sink.
    """

    timestamp: datetime
    provider: str
    operation: Literal["chat", "embedding"]
    url: str
    body: dict[str, Any]


RequestHook = Callable[[RequestRecord], None]
