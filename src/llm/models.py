# src/llm/models.py — v3
"""Provider-neutral types: LLMProvider, LLMType, LLMClient, message parts, LLMMessage.

Image parts are built through one factory (image_part) that resolves the
source in a fixed order:
  1. ``http://`` / ``https://`` prefix  -> HTTP GET
  2. existing filesystem path          -> file read
  3. anything else                     -> base64 text (``data:`` URIs allowed)
A string that is both an existing relative path and valid base64 is read
from disk.
"""

from __future__ import annotations

import os
import time
from enum import Enum
from pathlib import Path
from typing import Annotated, Literal, Union

import httpx
from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

from llmapi.config.settings import Settings
from llmapi.llm.errors import DecodeError, InvalidInputError
from llmapi.media.encoding import (
    decode_base64,
    encode_base64,
    fetch_image_bytes,
    fetch_image_bytes_async,
    is_http_url,
    read_image_file,
    resolve_mime,
    split_data_uri,
)


class LLMProvider(str, Enum):
    """Vendors the facade can bind to."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GEMINI = "gemini"


class LLMType(str, Enum):
    """Operation family a client value is configured for."""

    CHAT = "chat"
    EMBEDDING = "embedding"


class LLMClient(BaseModel):
    """Immutable connection configuration. Holds no network resources."""

    model_config = ConfigDict(frozen=True)

    provider: LLMProvider
    api_key: SecretStr
    endpoint: str
    model: str
    llm_type: LLMType = LLMType.CHAT

    @field_validator("endpoint")
    @classmethod
    def validate_endpoint(cls, v: str) -> str:
        v = v.strip()
        if not is_http_url(v):
            raise ValueError("endpoint must be an http(s) URL")
        return v

    @field_validator("model")
    @classmethod
    def validate_model(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("model must not be empty")
        return v

    @property
    def base_url(self) -> str:
        """Endpoint without trailing slash."""
        return self.endpoint.rstrip("/")


# --- Message parts ---


class TextPart(BaseModel):
    """Literal text content."""

    model_config = ConfigDict(frozen=True)

    type: Literal["text"] = "text"
    text: str


class ImagePart(BaseModel):
    """Decoded image payload plus its MIME type."""

    model_config = ConfigDict(frozen=True)

    type: Literal["image"] = "image"
    data: bytes = Field(repr=False)
    mime_type: str

    @property
    def base64(self) -> str:
        return encode_base64(self.data)

    @property
    def data_uri(self) -> str:
        return f"data:{self.mime_type};base64,{self.base64}"


LLMMessageType = Annotated[Union[TextPart, ImagePart], Field(discriminator="type")]


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


def _timestamp_id() -> str:
    return str(_now_ms())


class LLMMessage(BaseModel):
    """One conversation message: role + ordered parts."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=_timestamp_id)
    role: str
    parts: tuple[LLMMessageType, ...]
    created_at: int = Field(default_factory=_now_ms)

    @classmethod
    def create(
        cls,
        role: str,
        parts: list[TextPart | ImagePart] | tuple[TextPart | ImagePart, ...],
        id: str | None = None,  # noqa: A002
    ) -> LLMMessage:
        """Build a message; ``id`` defaults to the current timestamp (ms)."""
        if id is None:
            return cls(role=role, parts=tuple(parts))
        return cls(id=id, role=role, parts=tuple(parts))

    @property
    def text(self) -> str:
        """Newline-joined text of all text parts."""
        return "\n".join(p.text for p in self.parts if isinstance(p, TextPart))

    @property
    def images(self) -> list[ImagePart]:
        return [p for p in self.parts if isinstance(p, ImagePart)]


_ROLE_ALIASES: dict[str, str] = {
    "user": "user",
    "human": "user",
    "assistant": "assistant",
    "ai": "assistant",
    "model": "assistant",
    "system": "system",
}


def normalize_role(role: str) -> str | None:
    """Map a free-form role onto user/assistant/system; None if unknown."""
    return _ROLE_ALIASES.get(role.strip().lower())


# --- Part factories ---


def text_part(text: str) -> TextPart:
    """Text part factory."""
    return TextPart(text=text)


def image_from_bytes(data: bytes, mime_type: str | None = None) -> ImagePart:
    """Wrap raw bytes; MIME type is sniffed, ``mime_type`` is the fallback."""
    if not data:
        raise InvalidInputError("Image payload is empty")
    return ImagePart(data=data, mime_type=resolve_mime(data, declared=mime_type))


def image_from_base64(data_b64: str, mime_type: str | None = None) -> ImagePart:
    """Decode base64 text (or a ``data:`` URI) into an image part."""
    declared, payload = split_data_uri(data_b64.strip())
    try:
        data = decode_base64(payload)
    except DecodeError as e:
        raise InvalidInputError(
            "Image source is neither an http(s) URL, an existing file, nor base64"
        ) from e
    return image_from_bytes(data, mime_type=declared or mime_type)


def image_part(
    source: str | Path | bytes,
    timeout: float | None = None,
    transport: httpx.BaseTransport | None = None,
    settings: Settings | None = None,
) -> ImagePart:
    """Build an image part from a URL, a local path, base64 text or bytes.

    Blocks on disk or network I/O. URL fetches use ``timeout`` when given,
    otherwise ``settings.image_fetch_timeout_s`` (LLMAPI_IMAGE_FETCH_TIMEOUT_S).

    Raises:
        IOFailureError: File read or URL fetch failed.
        InvalidInputError: Empty source or undecodable base64.
    """
    if isinstance(source, (bytes, bytearray)):
        return image_from_bytes(bytes(source))
    if isinstance(source, Path):
        return _image_from_file(source)

    source = source.strip()
    if not source:
        raise InvalidInputError("Image source is empty")
    if is_http_url(source):
        data, content_type = fetch_image_bytes(
            source, timeout=_fetch_timeout(timeout, settings), transport=transport,
        )
        return _image_from_download(source, data, content_type)
    if _is_existing_path(source):
        return _image_from_file(source)
    return image_from_base64(source)


async def image_part_async(
    source: str | Path | bytes,
    timeout: float | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    settings: Settings | None = None,
) -> ImagePart:
    """Same resolution rules as image_part, fetching URLs without blocking the loop."""
    if isinstance(source, str) and is_http_url(source.strip()):
        url = source.strip()
        data, content_type = await fetch_image_bytes_async(
            url, timeout=_fetch_timeout(timeout, settings), transport=transport,
        )
        return _image_from_download(url, data, content_type)
    return image_part(source, timeout=timeout, settings=settings)


def _fetch_timeout(timeout: float | None, settings: Settings | None) -> float:
    if timeout is not None:
        return timeout
    return (settings or Settings()).image_fetch_timeout_s


def _is_existing_path(source: str) -> bool:
    # os.path.exists swallows ENAMETOOLONG raised by long base64 strings
    return os.path.exists(os.path.expanduser(source))


def _image_from_file(path: str | Path) -> ImagePart:
    data = read_image_file(path)
    if not data:
        raise InvalidInputError(f"Image file is empty: {path}")
    return ImagePart(data=data, mime_type=resolve_mime(data, name=str(path)))


def _image_from_download(url: str, data: bytes, content_type: str | None) -> ImagePart:
    if not data:
        raise InvalidInputError(f"Image download is empty: {url}")
    return ImagePart(data=data, mime_type=resolve_mime(data, name=url, declared=content_type))
