# src/llm/base_client.py — v3
"""Abstract provider adapter plus the HTTP plumbing all adapters share.

Each call opens its own httpx.AsyncClient, so adapters hold configuration
only and concurrent calls never share connection state. Nothing is retried.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Any, ClassVar, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from llmapi.config.settings import Settings
from llmapi.llm.errors import DecodeError, InvalidInputError, NetworkError, ProviderError
from llmapi.llm.models import (
    ImagePart,
    LLMClient,
    LLMMessage,
    LLMMessageType,
    LLMProvider,
    normalize_role,
)
from llmapi.media.encoding import decode_base64, resolve_mime
from llmapi.tracking.models import RequestHook, RequestRecord

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)


class BaseLLMAdapter(ABC):
    """Unified chat/embedding interface over one vendor wire protocol."""

    provider: ClassVar[LLMProvider]
    supports_embeddings: ClassVar[bool] = True

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        request_hook: RequestHook | None = None,
    ) -> None:
        self._settings = settings or Settings()
        self._transport = transport
        self._request_hook = request_hook

    @abstractmethod
    async def chat(
        self, client: LLMClient, messages: Sequence[LLMMessage],
    ) -> list[LLMMessageType]:
        """Send a conversation, return the reply parts."""

    @abstractmethod
    async def embed(self, client: LLMClient, inputs: Sequence[str]) -> list[list[float]]:
        """One vector per input, aligned by index."""

    @property
    def provider_name(self) -> str:
        return self.provider.value

    # --- Shared helpers ---

    @staticmethod
    def _validate_messages(messages: Sequence[LLMMessage]) -> None:
        if not messages:
            raise InvalidInputError("At least one message is required")
        for m in messages:
            if not m.parts:
                raise InvalidInputError(f"Message {m.id} has no parts")
            if m.images and normalize_role(m.role) == "system":
                raise InvalidInputError(f"System message {m.id} contains an image; text only")

    @staticmethod
    def _role(message: LLMMessage) -> str:
        """Normalized role (user/assistant/system) or InvalidInputError."""
        role = normalize_role(message.role)
        if role is None:
            raise InvalidInputError(f"Unsupported role {message.role!r} in message {message.id}")
        return role

    async def _post_json(
        self,
        url: str,
        body: dict[str, Any],
        headers: dict[str, str],
        operation: str,
    ) -> Any:
        """POST a JSON body and return the decoded JSON response.

        Raises:
            NetworkError: The request produced no response (any httpx.RequestError).
            ProviderError: Non-2xx status; vendor body kept verbatim.
            DecodeError: Body is not JSON.
        """
        if self._request_hook is not None:
            self._request_hook(
                RequestRecord(
                    timestamp=datetime.now(timezone.utc),
                    provider=self.provider_name,
                    operation=operation,
                    url=url,
                    body=body,
                )
            )

        logger.debug("POST %s (%s)", url, operation)
        try:
            async with httpx.AsyncClient(
                transport=self._transport, timeout=self._settings.request_timeout_s,
            ) as http:
                response = await http.post(
                    url, json=body, headers={"Content-Type": "application/json", **headers},
                )
        except httpx.RequestError as e:
            raise NetworkError(f"{self.provider_name} request to {url} failed: {e}") from e

        if not response.is_success:
            logger.warning(
                "%s %s failed: status=%d", self.provider_name, operation, response.status_code,
            )
            raise ProviderError(self.provider_name, response.status_code, response.text)

        try:
            return response.json()
        except ValueError as e:
            raise DecodeError(
                f"{self.provider_name} returned a non-JSON body: {response.text[:200]}"
            ) from e

    def _parse(self, schema: type[SchemaT], payload: Any) -> SchemaT:
        """Schema-checked deserialization of a vendor response."""
        try:
            return schema.model_validate(payload)
        except ValidationError as e:
            raise DecodeError(
                f"Unexpected {self.provider_name} response shape for {schema.__name__}: {e}"
            ) from e

    def _check_alignment(
        self, vectors: list[list[float]], inputs: Sequence[str],
    ) -> list[list[float]]:
        if len(vectors) != len(inputs):
            raise DecodeError(
                f"{self.provider_name} returned {len(vectors)} embeddings for {len(inputs)} inputs"
            )
        return vectors


def decode_image_payload(data_b64: str, mime_type: str | None = None) -> ImagePart:
    """Decode base64 image data found in a vendor response.

    Raises:
        DecodeError: Invalid base64 or empty payload.
    """
    data = decode_base64(data_b64)
    if not data:
        raise DecodeError("Response carried an empty image payload")
    return ImagePart(data=data, mime_type=resolve_mime(data, declared=mime_type))
