# tests/conftest.py — v2
"""Shared test fixtures for all unit and integration tests.

Provides sample images, client values, settings isolated from .env, and a
recording mock vendor built on httpx.MockTransport. No network access.
"""

from __future__ import annotations

import io
import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest
from PIL import Image

from llmapi.config.settings import Settings
from llmapi.llm.models import LLMClient, LLMProvider, LLMType


# === HELPERS ===


def make_image_bytes(fmt: str = "PNG", size: tuple[int, int] = (1, 1)) -> bytes:
    """Encode a tiny solid image with Pillow."""
    buf = io.BytesIO()
    Image.new("RGB", size, color=(200, 30, 30)).save(buf, format=fmt)
    return buf.getvalue()


class MockVendor:
    """Records every request and answers with canned replies.

    Each reply is ``(status, payload)`` (dict/list sent as JSON, str sent
    as raw text) or a callable taking the request. The last reply repeats
    once the list is exhausted.
    """

    def __init__(self, *replies: Any) -> None:
        self.requests: list[httpx.Request] = []
        self._replies = list(replies) or [(200, {})]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        reply = self._replies[min(len(self.requests), len(self._replies)) - 1]
        if callable(reply):
            return reply(request)
        status, payload = reply
        if isinstance(payload, str):
            return httpx.Response(status, text=payload)
        return httpx.Response(status, json=payload)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def body(self, index: int = -1) -> dict[str, Any]:
        return json.loads(self.requests[index].content)


# === FIXTURES: Images ===


@pytest.fixture
def png_bytes() -> bytes:
    return make_image_bytes("PNG")


@pytest.fixture
def jpeg_bytes() -> bytes:
    return make_image_bytes("JPEG", (4, 4))


@pytest.fixture
def image_factory() -> Callable[..., bytes]:
    return make_image_bytes


@pytest.fixture
def png_file(tmp_path, png_bytes):
    path = tmp_path / "pixel.png"
    path.write_bytes(png_bytes)
    return path


# === FIXTURES: Configuration ===


@pytest.fixture
def settings() -> Settings:
    """Default settings, ignoring any .env file in the working directory."""
    return Settings(_env_file=None)


@pytest.fixture
def openai_client() -> LLMClient:
    return LLMClient(
        provider=LLMProvider.OPENAI,
        api_key="sk-test",
        endpoint="https://api.openai.test/v1",
        model="gpt-4o",
    )


@pytest.fixture
def anthropic_client() -> LLMClient:
    return LLMClient(
        provider=LLMProvider.ANTHROPIC,
        api_key="ak-test",
        endpoint="https://api.anthropic.test/v1/",
        model="claude-sonnet-4-20250514",
    )


@pytest.fixture
def gemini_client() -> LLMClient:
    return LLMClient(
        provider=LLMProvider.GEMINI,
        api_key="gk-test",
        endpoint="https://gemini.test/v1beta",
        model="gemini-2.5-flash",
    )


@pytest.fixture
def openai_embedding_client(openai_client) -> LLMClient:
    return openai_client.model_copy(
        update={"model": "text-embedding-3-small", "llm_type": LLMType.EMBEDDING}
    )


@pytest.fixture
def gemini_embedding_client(gemini_client) -> LLMClient:
    return gemini_client.model_copy(
        update={"model": "text-embedding-004", "llm_type": LLMType.EMBEDDING}
    )


@pytest.fixture
def anthropic_embedding_client(anthropic_client) -> LLMClient:
    return anthropic_client.model_copy(update={"llm_type": LLMType.EMBEDDING})


# === FIXTURES: Mock vendor ===


@pytest.fixture
def mock_vendor() -> Callable[..., MockVendor]:
    """Factory: ``mock_vendor((200, {...}), ...)``."""
    return MockVendor
