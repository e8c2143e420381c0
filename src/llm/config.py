# src/llm/config.py — v2
"""Documented vendor endpoints and LLMClient construction.

Resolution order for the endpoint:
  1. Explicit ``endpoint`` argument
  2. Settings (LLMAPI_OPENAI_ENDPOINT, LLMAPI_ANTHROPIC_ENDPOINT, LLMAPI_GEMINI_ENDPOINT)
  3. Documented vendor convention (the Settings defaults)
"""

from __future__ import annotations

from llmapi.config.settings import Settings
from llmapi.llm.models import LLMClient, LLMProvider, LLMType

_ENDPOINT_SETTINGS: dict[LLMProvider, str] = {
    LLMProvider.OPENAI: "openai_endpoint",
    LLMProvider.ANTHROPIC: "anthropic_endpoint",
    LLMProvider.GEMINI: "gemini_endpoint",
}


def default_endpoint(provider: LLMProvider | str, settings: Settings | None = None) -> str:
    """Base URL for a provider, from settings or the vendor convention."""
    settings = settings or Settings()
    return getattr(settings, _ENDPOINT_SETTINGS[LLMProvider(provider)])


def build_client(
    provider: LLMProvider | str,
    api_key: str,
    model: str,
    llm_type: LLMType | str = LLMType.CHAT,
    endpoint: str | None = None,
    settings: Settings | None = None,
) -> LLMClient:
    """Create an LLMClient, filling in the default endpoint when omitted.

    Args:
        provider: openai, anthropic or gemini.
        api_key: Vendor key; kept on the returned value only.
        model: Model identifier (e.g. gpt-4o, claude-sonnet-4-20250514, gemini-2.5-flash).
        llm_type: chat or embedding.
        endpoint: Base URL override.
        settings: Settings used for the endpoint default.
    """
    provider = LLMProvider(provider)
    return LLMClient(
        provider=provider,
        api_key=api_key,
        endpoint=endpoint or default_endpoint(provider, settings),
        model=model,
        llm_type=LLMType(llm_type),
    )
