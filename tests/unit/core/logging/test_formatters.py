"""
Tests for log formatters.
"""

import json
import logging

import pytest

from fluent_http.core.logging.formatters import JSONFormatter, TextFormatter, get_formatter


def make_record(msg="Test message", level=logging.INFO, **extra):
    record = logging.LogRecord(
        name="test",
        level=level,
        pathname="test.py",
        lineno=10,
        msg=msg,
        args=(),
        exc_info=None
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:

    def test_basic_format(self):
        data = json.loads(JSONFormatter().format(make_record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "test"
        assert data["message"] == "Test message"
        assert "timestamp" in data

    def test_extra_fields(self):
        record = make_record("Request completed", method="GET", url="https://api.com", status_code=200)
        data = json.loads(JSONFormatter().format(record))

        assert data["method"] == "GET"
        assert data["url"] == "https://api.com"
        assert data["status_code"] == 200

    def test_non_serializable_extra(self):
        record = make_record(error=ValueError("bad"))
        data = json.loads(JSONFormatter().format(record))

        assert data["error"] == "bad"


class TestTextFormatter:

    def test_format_with_extras(self):
        output = TextFormatter().format(make_record("Request completed", method="GET", status_code=200))

        assert "[INFO] [test] Request completed" in output
        assert output.endswith("method=GET status_code=200")

    def test_format_without_extras(self):
        assert TextFormatter().format(make_record("plain")).endswith("plain")


def test_get_formatter():
    assert isinstance(get_formatter("json"), JSONFormatter)
    assert isinstance(get_formatter("TEXT"), TextFormatter)
    with pytest.raises(ValueError):
        get_formatter("xml")
