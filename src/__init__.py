# src/__init__.py — v1
"""llmapi: provider-neutral chat and embedding calls for OpenAI, Anthropic and Gemini."""

__version__ = "0.1.0"
