"""Tests for structured logging helpers."""
import json
import logging

import pytest

from transcript_tags.core.logger import (
    StructuredFormatter,
    get_correlation_id,
    get_logger,
    set_correlation_id,
    setup_logging,
)


class TestStructuredFormatter:
    def _record(self, **extra) -> logging.LogRecord:
        record = logging.LogRecord("transcript_tags.openai", logging.DEBUG, __file__, 1, "fallback", (), None)
        for key, value in extra.items():
            setattr(record, key, value)
        return record

    def test_basic_fields(self):
        data = json.loads(StructuredFormatter().format(self._record()))

        assert data["level"] == "DEBUG"
        assert data["logger"] == "transcript_tags.openai"
        assert data["message"] == "fallback"

    def test_extra_fields_and_correlation_id(self):
        cid = set_correlation_id("abc123")
        data = json.loads(StructuredFormatter().format(self._record(model="gpt-3.5-turbo", error="API error: 500")))

        assert cid == "abc123"
        assert data["correlation_id"] == "abc123"
        assert data["model"] == "gpt-3.5-turbo"
        assert data["error"] == "API error: 500"


def test_generated_correlation_id():
    cid = set_correlation_id()

    assert len(cid) == 8
    assert get_correlation_id() == cid


def test_get_logger_namespaced():
    assert get_logger("keyword").name == "transcript_tags.keyword"


class TestSetupLogging:
    """Tests for handler wiring."""

    def teardown_method(self):
        setup_logging("WARNING")

    def test_console_format_shows_correlation_id(self):
        """Test records from child loggers are stamped before formatting."""
        setup_logging("DEBUG")
        handler = logging.getLogger().handlers[0]
        set_correlation_id("req42")

        record = get_logger("openai").makeRecord(
            "transcript_tags.openai", logging.INFO, __file__, 1, "tagged", (), None
        )
        assert handler.filter(record)
        assert handler.format(record) == "[req42] tagged"

    def test_log_file_handler(self, tmp_path):
        log_path = tmp_path / "run.log"
        setup_logging("INFO", log_file=str(log_path))
        set_correlation_id("file01")

        get_logger("keyword").info("hello", extra={"strategy": "keyword"})
        for handler in logging.getLogger().handlers:
            handler.flush()

        data = json.loads(log_path.read_text(encoding="utf-8").splitlines()[-1])
        assert data["message"] == "hello"
        assert data["correlation_id"] == "file01"
        assert data["strategy"] == "keyword"

    def test_invalid_level_raises(self):
        with pytest.raises(ValueError):
            setup_logging("VERBOSE")
