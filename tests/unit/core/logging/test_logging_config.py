"""
Tests for LoggingConfig.
"""

import pytest

from fluent_http.core.logging.config import LogFormat, LoggingConfig, LogLevel


class TestLoggingConfig:

    def test_defaults(self):
        config = LoggingConfig()

        assert config.level == LogLevel.INFO
        assert config.format == LogFormat.TEXT
        assert config.enable_console is True
        assert config.enable_file is False
        assert config.enable_correlation_id is True

    def test_create_from_strings(self):
        config = LoggingConfig.create(level="debug", format="JSON")

        assert config.level == LogLevel.DEBUG
        assert config.format == LogFormat.JSON

    def test_invalid_level(self):
        with pytest.raises(ValueError):
            LoggingConfig.create(level="LOUD")

    def test_file_path_required(self):
        with pytest.raises(ValueError, match="file_path"):
            LoggingConfig.create(enable_file=True)

    def test_frozen(self):
        config = LoggingConfig()
        with pytest.raises(AttributeError):
            config.level = LogLevel.DEBUG

    def test_create_passes_options(self, tmp_path):
        config = LoggingConfig.create(
            enable_file=True,
            file_path=str(tmp_path / "http.log"),
            backup_count=2,
            correlation_header="X-Request-ID",
            extra_fields={"service": "billing"},
        )

        assert config.file_path.endswith("http.log")
        assert config.backup_count == 2
        assert config.correlation_header == "X-Request-ID"
        assert config.extra_fields == {"service": "billing"}

    def test_negative_backup_count(self):
        with pytest.raises(ValueError, match="backup_count"):
            LoggingConfig(backup_count=-1)

    def test_has_handlers(self):
        assert LoggingConfig().has_handlers
        assert not LoggingConfig(enable_console=False).has_handlers
