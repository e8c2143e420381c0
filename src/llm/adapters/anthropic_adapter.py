# src/llm/adapters/anthropic_adapter.py — v4
"""Anthropic Messages API adapter.

The API has exactly one system slot: every system-role message is merged
into the top-level ``system`` string (original order, newline separated).
Remaining messages become alternating user/assistant turns.

Anthropic has no embedding endpoint. ``embed`` always returns an empty
list without touching the network; ``supports_embeddings`` is False so
callers can branch on the gap up front.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict

from llmapi.llm.base_client import BaseLLMAdapter, decode_image_payload
from llmapi.llm.errors import DecodeError, InvalidInputError
from llmapi.llm.models import (
    LLMClient,
    LLMMessage,
    LLMMessageType,
    LLMProvider,
    TextPart,
)

logger = logging.getLogger(__name__)


# --- Wire schemas ---


class _ImageSource(BaseModel):
    type: str | None = None
    media_type: str | None = None
    data: str | None = None


class _ContentBlock(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: str
    text: str | None = None
    source: _ImageSource | None = None


class _MessageResponse(BaseModel):
    id: str | None = None
    role: str | None = None
    model: str | None = None
    content: list[_ContentBlock]
    stop_reason: str | None = None


class AnthropicAdapter(BaseLLMAdapter):
    """Adapter for Anthropic Claude models."""

    provider = LLMProvider.ANTHROPIC
    supports_embeddings = False

    async def chat(
        self, client: LLMClient, messages: Sequence[LLMMessage],
    ) -> list[LLMMessageType]:
        """Send a conversation via the Messages API."""
        self._validate_messages(messages)
        turns, system = self._convert_messages(messages)

        payload: dict[str, Any] = {
            "model": client.model,
            "max_tokens": self._settings.max_output_tokens,
            "messages": turns,
        }
        if system:
            payload["system"] = system

        data = await self._post_json(
            f"{client.base_url}/messages", payload, self._headers(client), "chat",
        )
        response = self._parse(_MessageResponse, data)
        logger.debug(
            "Anthropic chat completed: id=%s, stop_reason=%s", response.id, response.stop_reason,
        )
        parts = [self._convert_block(b) for b in response.content]
        return parts or [TextPart(text="")]

    async def embed(self, client: LLMClient, inputs: Sequence[str]) -> list[list[float]]:
        """Capability gap: always an empty list, never an error."""
        logger.debug("Anthropic has no embeddings endpoint; returning no vectors")
        return []

    # --- Internal helpers ---

    def _headers(self, client: LLMClient) -> dict[str, str]:
        return {
            "x-api-key": client.api_key.get_secret_value(),
            "anthropic-version": self._settings.anthropic_version,
            "accept": "application/json",
        }

    def _convert_messages(
        self, messages: Sequence[LLMMessage],
    ) -> tuple[list[dict[str, Any]], str | None]:
        """Split into (turns, merged system prompt)."""
        system_segments: list[str] = []
        turns: list[dict[str, Any]] = []

        for m in messages:
            role = self._role(m)
            if role == "system":
                if m.text:
                    system_segments.append(m.text)
                continue

            blocks = [self._to_block(p) for p in m.parts]
            # Consecutive same-role messages share one turn
            if turns and turns[-1]["role"] == role:
                turns[-1]["content"].extend(blocks)
            else:
                turns.append({"role": role, "content": blocks})

        if not turns:
            raise InvalidInputError("Anthropic requires at least one user or assistant message")

        return turns, "\n".join(system_segments) or None

    @staticmethod
    def _to_block(part: LLMMessageType) -> dict[str, Any]:
        if isinstance(part, TextPart):
            return {"type": "text", "text": part.text}
        return {
            "type": "image",
            "source": {
                "type": "base64",
                "media_type": part.mime_type,
                "data": part.base64,
            },
        }

    @staticmethod
    def _convert_block(block: _ContentBlock) -> LLMMessageType:
        if block.type == "text":
            if block.text is None:
                raise DecodeError("Anthropic text block without text")
            return TextPart(text=block.text)
        if block.type == "image":
            if block.source is None or not block.source.data:
                raise DecodeError("Anthropic image block without base64 source")
            return decode_image_payload(block.source.data, block.source.media_type)
        raise DecodeError(f"Unsupported Anthropic content block type: {block.type!r}")
