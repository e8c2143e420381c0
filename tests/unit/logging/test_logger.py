# tests/unit/logging/test_logger.py — v2
"""Tests for logging/logger.py — logger factory and formatters."""

from __future__ import annotations

import json
import logging
import sys

from llmapi.config.settings import Settings
from llmapi.llm.errors import DecodeError, ProviderError
from llmapi.logging.context import call_context
from llmapi.logging.logger import (
    ROOT_LOGGER,
    JsonFormatter,
    TextFormatter,
    get_logger,
    setup_logging,
    setup_logging_from_settings,
)


def _record(msg: str = "Hello", level: int = logging.INFO) -> logging.LogRecord:
    return logging.LogRecord(
        name="test", level=level, pathname="", lineno=0,
        msg=msg, args=(), exc_info=None,
    )


class TestJsonFormatter:
    def test_format_basic(self):
        parsed = json.loads(JsonFormatter().format(_record()))
        assert parsed["level"] == "INFO"
        assert parsed["message"] == "Hello"
        assert "timestamp" in parsed
        assert "context" not in parsed

    def test_format_with_context(self):
        with call_context("gemini", "gemini-2.5-flash", "embedding", request_id="req42"):
            parsed = json.loads(JsonFormatter().format(_record("test msg")))
        assert parsed["context"] == {
            "provider": "gemini",
            "model": "gemini-2.5-flash",
            "operation": "embedding",
            "request_id": "req42",
        }

    def test_format_with_data(self):
        record = _record()
        record.data = {"status": 500}
        parsed = json.loads(JsonFormatter().format(record))
        assert parsed["data"] == {"status": 500}

    def test_llm_error_tagged(self):
        try:
            raise ProviderError("openai", 503, "unavailable")
        except ProviderError:
            record = logging.LogRecord(
                name="test", level=logging.ERROR, pathname="", lineno=0,
                msg="call failed", args=(), exc_info=sys.exc_info(),
            )
        parsed = json.loads(JsonFormatter().format(record))
        assert parsed["error"] == {
            "type": "ProviderError", "kind": "provider_error", "status_code": 503,
        }
        assert "unavailable" in parsed["exception"]


class TestTextFormatter:
    def test_format_basic(self):
        output = TextFormatter().format(_record("Hello text"))
        assert "Hello text" in output
        assert "INFO" in output

    def test_format_with_context(self):
        with call_context("openai", "gpt-4o", "chat", request_id="abc123"):
            output = TextFormatter().format(_record())
        assert "[openai:chat]" in output
        assert "(abc123)" in output

    def test_error_kind_suffix(self):
        try:
            raise DecodeError("bad shape")
        except DecodeError:
            record = logging.LogRecord(
                name="test", level=logging.ERROR, pathname="", lineno=0,
                msg="parse failed", args=(), exc_info=sys.exc_info(),
            )
        output = TextFormatter().format(record)
        assert "<decode_failure>" in output
        assert "bad shape" in output


class TestGetLogger:
    def test_returns_logger(self):
        logger = get_logger("test_module")
        assert logger.name == "llmapi.test_module"


class TestSetupLogging:
    def teardown_method(self):
        root = logging.getLogger(ROOT_LOGGER)
        root.handlers.clear()
        root.setLevel(logging.NOTSET)

    def test_json_handler(self):
        setup_logging(level="DEBUG", log_format="json")
        root = logging.getLogger(ROOT_LOGGER)
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JsonFormatter)

    def test_reinit_does_not_duplicate(self):
        setup_logging(log_format="text")
        setup_logging(log_format="text")
        root = logging.getLogger(ROOT_LOGGER)
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, TextFormatter)

    def test_from_settings(self):
        setup_logging_from_settings(Settings(_env_file=None, log_level="warning", log_format="text"))
        root = logging.getLogger(ROOT_LOGGER)
        assert root.level == logging.WARNING
        assert isinstance(root.handlers[0].formatter, TextFormatter)
