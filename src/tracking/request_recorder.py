# src/tracking/request_recorder.py — v2
"""In-memory request sink usable as a RequestHook.

Pass an instance as ``request_hook`` to the client factory to keep every
outbound payload, then dump them for debugging.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from llmapi.tracking.models import RequestRecord

logger = logging.getLogger(__name__)


class RequestRecorder:
    """Accumulates RequestRecord entries in call order."""

    def __init__(self, max_records: int | None = None) -> None:
        self._records: list[RequestRecord] = []
        self._max_records = max_records

    def __call__(self, record: RequestRecord) -> None:
        self._records.append(record)
        if self._max_records is not None and len(self._records) > self._max_records:
            del self._records[: len(self._records) - self._max_records]

    @property
    def records(self) -> list[RequestRecord]:
        """All recorded requests."""
        return list(self._records)

    @property
    def last(self) -> RequestRecord | None:
        """Most recent request, if any."""
        return self._records[-1] if self._records else None

    def clear(self) -> None:
        self._records.clear()

    def save(self, path: Path) -> None:
        """Save all records to a JSON Lines file."""
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            for record in self._records:
                f.write(json.dumps(record.model_dump(mode="json")) + "\n")

    def save_last(self, path: Path) -> bool:
        """Pretty-print the most recent request as {"url", "body"}.

        Returns:
            False when nothing has been recorded yet.
        """
        record = self.last
        if record is None:
            return False
        path.parent.mkdir(parents=True, exist_ok=True)
        payload = {"url": record.url, "body": record.body}
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        logger.debug("Wrote last %s request to %s", record.provider, path)
        return True
