# src/llm/adapters/openai_adapter.py — v2
"""OpenAI-style REST adapter (chat completions + embeddings).

Talks to ``{endpoint}/chat/completions`` and ``{endpoint}/embeddings`` with
bearer authentication, so any OpenAI-compatible gateway works as endpoint.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from llmapi.llm.base_client import BaseLLMAdapter, decode_image_payload
from llmapi.llm.errors import DecodeError
from llmapi.llm.models import (
    LLMClient,
    LLMMessage,
    LLMMessageType,
    LLMProvider,
    TextPart,
)
from llmapi.media.encoding import split_data_uri

logger = logging.getLogger(__name__)

_TEXT_TYPES = {"text", "output_text"}
_IMAGE_TYPES = {"image_url", "output_image", "input_image"}


# --- Wire schemas ---


class _ImageUrl(BaseModel):
    url: str


class _ContentPart(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: str
    text: str | None = None
    image_url: _ImageUrl | str | None = None
    image_base64: str | None = None


class _ChatMessage(BaseModel):
    role: str | None = None
    content: str | list[_ContentPart] | None = None
    refusal: str | None = None


class _Choice(BaseModel):
    message: _ChatMessage


class _ChatCompletion(BaseModel):
    id: str | None = None
    model: str | None = None
    choices: list[_Choice] = Field(min_length=1)


class _EmbeddingItem(BaseModel):
    embedding: list[float]
    index: int | None = None


class _EmbeddingResponse(BaseModel):
    data: list[_EmbeddingItem]


class OpenAIAdapter(BaseLLMAdapter):
    """Adapter for OpenAI chat completions and embeddings."""

    provider = LLMProvider.OPENAI

    async def chat(
        self, client: LLMClient, messages: Sequence[LLMMessage],
    ) -> list[LLMMessageType]:
        """Chat completion; reply parts come from the first choice."""
        self._validate_messages(messages)
        payload = {
            "model": client.model,
            "messages": [self._to_api_message(m) for m in messages],
            "max_tokens": self._settings.max_output_tokens,
        }
        data = await self._post_json(
            f"{client.base_url}/chat/completions", payload, self._headers(client), "chat",
        )
        response = self._parse(_ChatCompletion, data)
        logger.debug("OpenAI chat completed: id=%s, model=%s", response.id, response.model)
        return self._convert_response(response)

    async def embed(self, client: LLMClient, inputs: Sequence[str]) -> list[list[float]]:
        """Embed the whole batch in one call; vendor order is trusted."""
        if not inputs:
            return []
        payload = {"model": client.model, "input": list(inputs)}
        data = await self._post_json(
            f"{client.base_url}/embeddings", payload, self._headers(client), "embedding",
        )
        response = self._parse(_EmbeddingResponse, data)
        return self._check_alignment([item.embedding for item in response.data], inputs)

    # --- Internal helpers ---

    @staticmethod
    def _headers(client: LLMClient) -> dict[str, str]:
        return {"Authorization": f"Bearer {client.api_key.get_secret_value()}"}

    def _to_api_message(self, m: LLMMessage) -> dict[str, Any]:
        role = self._role(m)
        if all(isinstance(p, TextPart) for p in m.parts):
            return {"role": role, "content": m.text}

        content: list[dict[str, Any]] = []
        for part in m.parts:
            if isinstance(part, TextPart):
                content.append({"type": "text", "text": part.text})
            else:
                content.append({"type": "image_url", "image_url": {"url": part.data_uri}})
        return {"role": role, "content": content}

    @classmethod
    def _convert_response(cls, response: _ChatCompletion) -> list[LLMMessageType]:
        message = response.choices[0].message
        content = message.content

        parts: list[LLMMessageType]
        if isinstance(content, str):
            parts = [TextPart(text=content)]
        elif content is None:
            parts = [TextPart(text=message.refusal)] if message.refusal else []
        else:
            parts = [cls._convert_part(p) for p in content]

        return parts or [TextPart(text="")]

    @staticmethod
    def _convert_part(part: _ContentPart) -> LLMMessageType:
        if part.type in _TEXT_TYPES:
            if part.text is None:
                raise DecodeError(f"OpenAI {part.type} part without text")
            return TextPart(text=part.text)

        if part.type in _IMAGE_TYPES:
            if part.image_base64:
                return decode_image_payload(part.image_base64)
            url = part.image_url.url if isinstance(part.image_url, _ImageUrl) else part.image_url
            if not url:
                raise DecodeError(f"OpenAI {part.type} part without image data")
            mime, payload = split_data_uri(url)
            if mime is None and payload == url:
                # Hosted image: hand the URL back rather than fetching it
                return TextPart(text=url)
            return decode_image_payload(payload, mime)

        raise DecodeError(f"Unsupported OpenAI content part type: {part.type!r}")
