"""
Tests for HttpClientLogger.
"""

import json
import logging
from logging.handlers import RotatingFileHandler

from fluent_http.core.logging.config import LogFormat, LoggingConfig, LogLevel
from fluent_http.core.logging.filters import clear_correlation_id, set_correlation_id
from fluent_http.core.logging.logger import HttpClientLogger


class TestHttpClientLogger:
    """Tests for HttpClientLogger class."""

    def setup_method(self):
        clear_correlation_id()

    def test_logger_creation_with_defaults(self):
        logger = HttpClientLogger()

        assert logger.name == "fluent_http"
        assert logger.config.level == LogLevel.INFO
        assert logger.config.format == LogFormat.TEXT
        logger.close()

    def test_logger_propagate_is_false(self):
        logger = HttpClientLogger(name="fluent_http.test.propagate")

        assert logger._logger.propagate is False
        logger.close()

    def test_logger_level_is_set(self):
        logger = HttpClientLogger(LoggingConfig.create(level="WARNING"), name="fluent_http.test.level")

        assert logger._logger.level == logging.WARNING
        logger.close()

    def test_console_handler(self):
        logger = HttpClientLogger(LoggingConfig.create(enable_console=True), name="fluent_http.test.console")

        assert any(isinstance(h, logging.StreamHandler) for h in logger.handlers)
        logger.close()

    def test_no_handlers_when_disabled(self):
        config = LoggingConfig.create(enable_console=False, enable_file=False)
        logger = HttpClientLogger(config, name="fluent_http.test.none")

        assert [type(h) for h in logger.handlers] == [logging.NullHandler]
        logger.close()

    def test_file_handler_writes_json_with_extras(self, tmp_path):
        log_file = tmp_path / "logs" / "client.log"
        config = LoggingConfig.create(
            level="DEBUG",
            format="json",
            enable_console=False,
            enable_file=True,
            file_path=str(log_file),
            extra_fields={"service": "billing"},
        )

        with HttpClientLogger(config, name="fluent_http.test.file") as logger:
            assert isinstance(logger.handlers[0], RotatingFileHandler)
            set_correlation_id("corr-1")
            logger.info("Request completed", method="GET", status_code=200)

        record = json.loads(log_file.read_text().strip())
        assert record["message"] == "Request completed"
        assert record["method"] == "GET"
        assert record["status_code"] == 200
        assert record["service"] == "billing"
        assert record["correlation_id"] == "corr-1"

    def test_sensitive_extras_masked(self, tmp_path):
        log_file = tmp_path / "client.log"
        config = LoggingConfig.create(
            format="json", enable_console=False, enable_file=True, file_path=str(log_file)
        )

        with HttpClientLogger(config, name="fluent_http.test.mask") as logger:
            logger.warning("Auth failed", authorization="Bearer secret", url="https://h/x?token=abc")

        record = json.loads(log_file.read_text().strip())
        assert "secret" not in log_file.read_text()
        assert record["authorization"] == "***REDACTED***"
        assert record["url"] == "https://h/x?token=***REDACTED***"

    def test_level_filtering(self, tmp_path):
        log_file = tmp_path / "client.log"
        config = LoggingConfig.create(
            level="ERROR", enable_console=False, enable_file=True, file_path=str(log_file)
        )

        with HttpClientLogger(config, name="fluent_http.test.filtering") as logger:
            logger.info("hidden")
            logger.error("shown")

        content = log_file.read_text()
        assert "hidden" not in content
        assert "shown" in content

    def test_exception_includes_traceback(self, tmp_path):
        log_file = tmp_path / "client.log"
        config = LoggingConfig.create(
            format="json", enable_console=False, enable_file=True, file_path=str(log_file)
        )

        with HttpClientLogger(config, name="fluent_http.test.exc") as logger:
            try:
                raise ValueError("boom")
            except ValueError:
                logger.exception("Failed")

        record = json.loads(log_file.read_text().strip())
        assert "ValueError: boom" in record["exception"]

    def test_close_is_idempotent(self):
        logger = HttpClientLogger(name="fluent_http.test.close")
        logger.close()
        logger.close()

        assert logger.handlers == []
