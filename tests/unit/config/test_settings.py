# tests/unit/config/test_settings.py — v2
"""Tests for config/settings.py — typed Settings and validation rules."""

from __future__ import annotations

import pytest

from llmapi.config.settings import ConfigurationError, Settings, load_settings


class TestSettingsDefaults:
    def test_default_endpoints(self):
        s = Settings(_env_file=None)
        assert s.openai_endpoint == "https://api.openai.com/v1"
        assert s.anthropic_endpoint == "https://api.anthropic.com/v1"
        assert s.gemini_endpoint == "https://generativelanguage.googleapis.com/v1beta"

    def test_default_requests(self):
        s = Settings(_env_file=None)
        assert s.max_output_tokens == 1024
        assert s.anthropic_version == "2023-06-01"
        assert s.request_timeout_s == 120.0
        assert s.image_fetch_timeout_s == 30.0

    def test_default_logging(self):
        s = Settings(_env_file=None)
        assert s.log_level == "INFO"
        assert s.log_format == "json"


class TestSettingsEnvironment:
    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("LLMAPI_REQUEST_TIMEOUT_S", "15")
        monkeypatch.setenv("LLMAPI_GEMINI_ENDPOINT", "http://localhost:9000/v1beta")
        s = Settings(_env_file=None)
        assert s.request_timeout_s == 15.0
        assert s.gemini_endpoint == "http://localhost:9000/v1beta"

    def test_env_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("LLMAPI_MAX_OUTPUT_TOKENS=256\nUNRELATED=1\n")
        s = Settings(_env_file=env_file)
        assert s.max_output_tokens == 256

    def test_log_level_case_insensitive(self):
        assert Settings(_env_file=None, log_level="debug").log_level == "DEBUG"


class TestSettingsValidation:
    def test_non_http_endpoint(self):
        with pytest.raises(ConfigurationError, match="OPENAI_ENDPOINT"):
            Settings(_env_file=None, openai_endpoint="api.openai.com/v1")

    def test_non_positive_timeout(self):
        with pytest.raises(ConfigurationError, match="REQUEST_TIMEOUT_S"):
            Settings(_env_file=None, request_timeout_s=0)

    def test_errors_are_collected(self):
        with pytest.raises(ConfigurationError) as exc_info:
            Settings(_env_file=None, max_output_tokens=0, image_fetch_timeout_s=-1)
        message = str(exc_info.value)
        assert "MAX_OUTPUT_TOKENS" in message
        assert "IMAGE_FETCH_TIMEOUT_S" in message


class TestLoadSettings:
    def test_overrides(self):
        s = load_settings(_env_file=None, max_output_tokens=2048)
        assert s.max_output_tokens == 2048

    def test_invalid_override_raises(self):
        with pytest.raises(ConfigurationError):
            load_settings(_env_file=None, anthropic_endpoint="ftp://x")
