# src/config/settings.py — v2
"""Typed configuration loaded from the environment / .env via pydantic-settings.

Every variable carries the LLMAPI_ prefix (e.g. LLMAPI_REQUEST_TIMEOUT_S=60).
API keys are deliberately absent: they travel on each LLMClient value.
"""

from __future__ import annotations

from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Library settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_prefix="LLMAPI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Vendor endpoints (documented conventions) ===
    openai_endpoint: str = "https://api.openai.com/v1"
    anthropic_endpoint: str = "https://api.anthropic.com/v1"
    gemini_endpoint: str = "https://generativelanguage.googleapis.com/v1beta"

    # === Requests ===
    request_timeout_s: float = 120.0
    image_fetch_timeout_s: float = 30.0
    max_output_tokens: int = 1024
    anthropic_version: str = "2023-06-01"

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "json"

    # --- Validators ---

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, v: object) -> object:
        return v.upper() if isinstance(v, str) else v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate value ranges and endpoint URLs."""
        errors: list[str] = []

        for name in ("openai_endpoint", "anthropic_endpoint", "gemini_endpoint"):
            value = getattr(self, name)
            if not value.startswith(("http://", "https://")):
                errors.append(f"{name.upper()} must be an http(s) URL, got {value!r}")

        if self.request_timeout_s <= 0:
            errors.append("REQUEST_TIMEOUT_S must be > 0")
        if self.image_fetch_timeout_s <= 0:
            errors.append("IMAGE_FETCH_TIMEOUT_S must be > 0")
        if self.max_output_tokens <= 0:
            errors.append("MAX_OUTPUT_TOKENS must be > 0")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
