# src/llm/adapters/gemini_adapter.py — v2
"""Google Gemini (Generative Language API) adapter.

Chat goes to ``models/{model}:generateContent``. Embeddings pick the
endpoint by input count: one input uses ``:embedContent``, two or more use
``:batchEmbedContents``. Both paths return one vector per input.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from llmapi.llm.adapters.gemini_models import (
    GeminiBatchEmbedResponse,
    GeminiEmbedResponse,
    GeminiResponse,
    response_to_image_parts,
    response_to_text_data,
)
from llmapi.llm.base_client import BaseLLMAdapter
from llmapi.llm.errors import DecodeError
from llmapi.llm.models import (
    LLMClient,
    LLMMessage,
    LLMMessageType,
    LLMProvider,
    TextPart,
)

logger = logging.getLogger(__name__)

_ROLE_MAP = {"user": "user", "assistant": "model"}


class GeminiAdapter(BaseLLMAdapter):
    """Adapter for Gemini generateContent and embeddings."""

    provider = LLMProvider.GEMINI

    async def generate(self, client: LLMClient, messages: Sequence[LLMMessage]) -> GeminiResponse:
        """Call generateContent and return the parsed response.

        Useful when the caller wants the image/text projections directly
        (e.g. image generation models).
        """
        self._validate_messages(messages)
        contents, system_instruction = self._convert_messages(messages)

        body: dict[str, Any] = {"contents": contents}
        if system_instruction is not None:
            body["systemInstruction"] = system_instruction

        data = await self._post_json(
            self._model_url(client, "generateContent"), body, self._headers(client), "chat",
        )
        response = self._parse(GeminiResponse, data)
        logger.debug(
            "Gemini chat completed: response_id=%s, candidates=%d",
            response.response_id, len(response.candidates),
        )
        return response

    async def chat(
        self, client: LLMClient, messages: Sequence[LLMMessage],
    ) -> list[LLMMessageType]:
        """Reply as inline images (response order) followed by the text."""
        response = await self.generate(client, messages)
        text = response_to_text_data(response)
        parts: list[LLMMessageType] = list(response_to_image_parts(response))
        if text or not parts:
            parts.append(TextPart(text=text))
        return parts

    async def embed(self, client: LLMClient, inputs: Sequence[str]) -> list[list[float]]:
        """Single input -> embedContent; two or more -> batchEmbedContents."""
        if not inputs:
            return []

        request_model = self._request_model(client)
        headers = self._headers(client)

        if len(inputs) == 1:
            body = {"model": request_model, "content": {"parts": [{"text": inputs[0]}]}}
            data = await self._post_json(
                self._model_url(client, "embedContent"), body, headers, "embedding",
            )
            single = self._parse(GeminiEmbedResponse, data)
            if single.embedding is None:
                raise DecodeError("Gemini embedContent returned usage metadata only, no embedding")
            return [single.embedding.values]

        body = {
            "requests": [
                {"model": request_model, "content": {"parts": [{"text": text}]}}
                for text in inputs
            ]
        }
        data = await self._post_json(
            self._model_url(client, "batchEmbedContents"), body, headers, "embedding",
        )
        batch = self._parse(GeminiBatchEmbedResponse, data)
        if batch.embeddings is None:
            raise DecodeError(
                "Gemini batchEmbedContents returned usage metadata only, no embeddings"
            )
        return self._check_alignment([e.values for e in batch.embeddings], inputs)

    # --- Internal helpers ---

    @staticmethod
    def _headers(client: LLMClient) -> dict[str, str]:
        return {"x-goog-api-key": client.api_key.get_secret_value()}

    @staticmethod
    def _model_id(client: LLMClient) -> str:
        return client.model.removeprefix("models/")

    @classmethod
    def _request_model(cls, client: LLMClient) -> str:
        return f"models/{cls._model_id(client)}"

    @classmethod
    def _model_url(cls, client: LLMClient, method: str) -> str:
        base = client.base_url
        if not base.endswith("/models"):
            base = f"{base}/models"
        return f"{base}/{cls._model_id(client)}:{method}"

    def _convert_messages(
        self, messages: Sequence[LLMMessage],
    ) -> tuple[list[dict[str, Any]], dict[str, Any] | None]:
        """Split into (contents, systemInstruction)."""
        contents: list[dict[str, Any]] = []
        system_parts: list[dict[str, Any]] = []

        for m in messages:
            role = self._role(m)
            parts = [self._to_part(p) for p in m.parts]
            if role == "system":
                system_parts.extend(parts)
            else:
                contents.append({"role": _ROLE_MAP[role], "parts": parts})

        if not contents:
            # The API needs at least one turn; promote the instruction to a user turn
            return [{"role": "user", "parts": system_parts}], None

        system_instruction = {"parts": system_parts} if system_parts else None
        return contents, system_instruction

    @staticmethod
    def _to_part(part: LLMMessageType) -> dict[str, Any]:
        if isinstance(part, TextPart):
            return {"text": part.text}
        return {"inlineData": {"mimeType": part.mime_type, "data": part.base64}}
