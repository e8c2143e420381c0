# src/llm/adapters/gemini_models.py — v1
"""Gemini generateContent / embedContent response schemas and projections.

A single generateContent reply may interleave inline image data and text.
The projection helpers below are pure functions over a parsed
GeminiResponse, so callers can ask for images (base64 or bytes) and text in
any order, any number of times, without re-parsing.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from llmapi.llm.errors import DecodeError
from llmapi.llm.models import ImagePart
from llmapi.media.encoding import decode_base64, resolve_mime


class _GeminiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class InlineData(_GeminiModel):
    mime_type: str
    data: str

    @field_validator("data")
    @classmethod
    def validate_base64(cls, v: str) -> str:
        decode_base64(v)
        return v


class Part(_GeminiModel):
    text: str | None = None
    inline_data: InlineData | None = None
    thought: bool | None = None


class Content(_GeminiModel):
    parts: list[Part] = []
    role: str | None = None


class Candidate(_GeminiModel):
    content: Content | None = None
    finish_reason: str | None = None
    index: int | None = None


class TokenDetail(_GeminiModel):
    modality: str | None = None
    token_count: int | None = None


class UsageMetadata(_GeminiModel):
    prompt_token_count: int | None = None
    candidates_token_count: int | None = None
    total_token_count: int | None = None
    prompt_tokens_details: list[TokenDetail] | None = None
    candidates_tokens_details: list[TokenDetail] | None = None


class GeminiResponse(_GeminiModel):
    """Parsed generateContent reply."""

    candidates: list[Candidate] = []
    prompt_feedback: dict[str, Any] | None = None
    usage_metadata: UsageMetadata | None = None
    model_version: str | None = None
    response_id: str | None = None


# --- Embedding responses ---


class Embedding(_GeminiModel):
    values: list[float]


class GeminiEmbedResponse(_GeminiModel):
    # Optional: a usage-only reply must not fail parsing
    embedding: Embedding | None = None
    usage_metadata: UsageMetadata | None = None


class GeminiBatchEmbedResponse(_GeminiModel):
    embeddings: list[Embedding] | None = None
    usage_metadata: UsageMetadata | None = None


# --- Projections ---


def _inline_parts(response: GeminiResponse) -> list[InlineData]:
    return [
        part.inline_data
        for candidate in response.candidates
        if candidate.content is not None
        for part in candidate.content.parts
        if part.inline_data is not None and part.inline_data.data
    ]


def response_to_base64_images(response: GeminiResponse) -> list[str]:
    """Inline images of every candidate, as base64 strings, in response order."""
    return [inline.data for inline in _inline_parts(response)]


def response_to_image_data(response: GeminiResponse) -> list[bytes]:
    """Inline images of every candidate, decoded to bytes."""
    return [decode_base64(inline.data) for inline in _inline_parts(response)]


def response_to_image_parts(response: GeminiResponse) -> list[ImagePart]:
    """Inline images as neutral ImageParts (MIME sniffed, declared type as fallback)."""
    parts: list[ImagePart] = []
    for inline in _inline_parts(response):
        data = decode_base64(inline.data)
        parts.append(ImagePart(data=data, mime_type=resolve_mime(data, declared=inline.mime_type)))
    return parts


def response_to_text_data(response: GeminiResponse) -> str:
    """Concatenated text of the first candidate (thought summaries excluded).

    Raises:
        DecodeError: The response has no candidates (e.g. a blocked prompt).
    """
    if not response.candidates:
        reason = (response.prompt_feedback or {}).get("blockReason")
        detail = f" (blockReason={reason})" if reason else ""
        raise DecodeError(f"No candidates found in Gemini response{detail}")
    content = response.candidates[0].content
    if content is None:
        return ""
    return "".join(p.text for p in content.parts if p.text is not None and not p.thought)
