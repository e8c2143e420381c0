# src/llm/client_factory.py — v3
"""Dispatcher: bind an LLMClient to its provider adapter and hand back a callable.

Usage:
    chat = get_llm_chat(client)
    reply_parts = await chat([LLMMessage.create("user", [text_part("Hello")])])

The returned closures hold immutable configuration only; every invocation
builds its own request and HTTP client, so concurrent calls through one
closure are independent.
"""

from __future__ import annotations

import importlib
import logging
from collections.abc import Awaitable, Callable, Sequence

import httpx

from llmapi.config.settings import Settings
from llmapi.llm.base_client import BaseLLMAdapter
from llmapi.llm.errors import InvalidInputError, LLMError, UnsupportedOperationError
from llmapi.llm.models import LLMClient, LLMMessage, LLMMessageType, LLMProvider, LLMType
from llmapi.logging.context import call_context
from llmapi.tracking.models import RequestHook

logger = logging.getLogger(__name__)

ChatFn = Callable[[Sequence[LLMMessage]], Awaitable[list[LLMMessageType]]]
EmbeddingFn = Callable[[Sequence[str]], Awaitable[list[list[float]]]]

# Registry of provider → adapter class path (lazy import).
_PROVIDER_REGISTRY: dict[LLMProvider, str] = {
    LLMProvider.OPENAI: "llmapi.llm.adapters.openai_adapter.OpenAIAdapter",
    LLMProvider.ANTHROPIC: "llmapi.llm.adapters.anthropic_adapter.AnthropicAdapter",
    LLMProvider.GEMINI: "llmapi.llm.adapters.gemini_adapter.GeminiAdapter",
}


def create_adapter(
    provider: LLMProvider | str,
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    request_hook: RequestHook | None = None,
) -> BaseLLMAdapter:
    """Instantiate the adapter registered for a provider.

    Args:
        provider: openai, anthropic or gemini.
        settings: Request settings (timeouts, token limit, endpoints).
        transport: httpx transport override (mock servers, proxies).
        request_hook: Optional sink called with every outbound request.
    """
    adapter_cls = _adapter_class(LLMProvider(provider))
    logger.debug("Creating LLM adapter: provider=%s", adapter_cls.provider.value)
    return adapter_cls(settings=settings, transport=transport, request_hook=request_hook)


def supports_embeddings(provider: LLMProvider | str) -> bool:
    """False for providers whose embedding call is a documented empty stub."""
    return _adapter_class(LLMProvider(provider)).supports_embeddings


def get_llm_chat(
    client: LLMClient,
    *,
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    request_hook: RequestHook | None = None,
) -> ChatFn:
    """Bind a chat client to its adapter.

    Returns:
        ``async (messages) -> list[LLMMessageType]``.

    Raises:
        InvalidInputError: If the client is configured for embeddings.
    """
    if client.llm_type is not LLMType.CHAT:
        raise InvalidInputError(
            f"Client for model {client.model!r} is an {client.llm_type.value} client, not chat"
        )
    adapter = create_adapter(
        client.provider, settings=settings, transport=transport, request_hook=request_hook,
    )

    async def chat(messages: Sequence[LLMMessage]) -> list[LLMMessageType]:
        with call_context(client.provider.value, client.model, "chat"):
            logger.debug("Chat call: messages=%d", len(messages))
            parts = await adapter.chat(client, messages)
            logger.debug("Chat reply: parts=%d", len(parts))
            return parts

    return chat


def get_llm_embedding(
    client: LLMClient,
    *,
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    request_hook: RequestHook | None = None,
    strict: bool = False,
) -> EmbeddingFn:
    """Bind an embedding client to its adapter.

    Args:
        strict: Raise UnsupportedOperationError now instead of returning a
            closure that always yields an empty list (Anthropic).

    Returns:
        ``async (inputs) -> list[list[float]]``. Vendor, network and decode
        failures are logged and yield an empty list, so a length different
        from the input count is the failure signal.

    Raises:
        InvalidInputError: If the client is configured for chat.
        UnsupportedOperationError: strict mode and provider has no embeddings.
    """
    if client.llm_type is not LLMType.EMBEDDING:
        raise InvalidInputError(
            f"Client for model {client.model!r} is a {client.llm_type.value} client, not embedding"
        )
    adapter = create_adapter(
        client.provider, settings=settings, transport=transport, request_hook=request_hook,
    )
    if strict and not adapter.supports_embeddings:
        raise UnsupportedOperationError(
            f"{adapter.provider_name} does not provide an embeddings endpoint"
        )

    async def embed(inputs: Sequence[str]) -> list[list[float]]:
        with call_context(client.provider.value, client.model, "embedding"):
            logger.debug("Embedding call: inputs=%d", len(inputs))
            try:
                return await adapter.embed(client, inputs)
            except LLMError:
                logger.warning("Embedding call failed, returning no vectors", exc_info=True)
                return []

    return embed


def _adapter_class(provider: LLMProvider) -> type[BaseLLMAdapter]:
    return _import_class(_PROVIDER_REGISTRY[provider])


def _import_class(class_path: str) -> type:
    """Dynamically import a class from its fully qualified path."""
    module_path, class_name = class_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    return getattr(module, class_name)
