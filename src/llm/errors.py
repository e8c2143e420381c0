# src/llm/errors.py — v1
"""Typed failures raised by the provider abstraction layer.

Every adapter failure surfaces as a subclass of LLMError; callers can branch
on the class or on the ``kind`` string (handy for UI layers that render
ProviderError messages verbatim and everything else generically).
"""

from __future__ import annotations


class LLMError(Exception):
    """Base class for all llmapi failures."""

    kind = "llm_error"


class InvalidInputError(LLMError, ValueError):
    """Empty messages/parts, unknown role, or unsupported role/part combination."""

    kind = "invalid_input"


class IOFailureError(LLMError, OSError):
    """Local file read or remote fetch failed while building an image part."""

    kind = "io_failure"


class NetworkError(LLMError):
    """Connection or transport failure talking to a vendor endpoint."""

    kind = "network_failure"


class ProviderError(LLMError):
    """Vendor answered with a non-2xx status.

    The vendor body is preserved verbatim in ``body`` for diagnostics.
    """

    kind = "provider_error"

    def __init__(self, provider: str, status_code: int, body: str) -> None:
        self.provider = provider
        self.status_code = status_code
        self.body = body
        super().__init__(f"{provider} returned HTTP {status_code}: {body}")


class UnsupportedOperationError(LLMError):
    """Provider lacks the requested call family (e.g. Anthropic embeddings)."""

    kind = "unsupported_operation"


class DecodeError(LLMError, ValueError):
    """Response (or inline payload) does not match the expected schema."""

    kind = "decode_failure"
