"""
Logging configuration for fluent-http-client.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    JSON = "json"
    TEXT = "text"


DEFAULT_CORRELATION_HEADER = "X-Correlation-ID"


@dataclass(frozen=True)
class LoggingConfig:
    """
    Как контекст логирует запросы.

    Each exchange is logged as "started" (DEBUG) and "completed" (INFO) or
    "failed" (ERROR). With ``enable_correlation_id`` every request carries
    ``correlation_header``; a value set by the caller is kept, otherwise a
    UUID is generated. The same value is attached to every log record
    emitted during the exchange.

    Example:
        >>> config = LoggingConfig.create(level="DEBUG", format="json")
    """

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.TEXT
    enable_console: bool = True
    enable_file: bool = False
    file_path: Optional[str] = None
    max_bytes: int = 10 * 1024 * 1024
    backup_count: int = 5
    enable_correlation_id: bool = True
    correlation_header: str = DEFAULT_CORRELATION_HEADER
    extra_fields: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.enable_file and not self.file_path:
            raise ValueError("file_path is required when enable_file=True")
        if self.backup_count < 0:
            raise ValueError("backup_count must be >= 0")
        if not self.correlation_header:
            raise ValueError("correlation_header must not be empty")

    @property
    def has_handlers(self) -> bool:
        return self.enable_console or self.enable_file

    @classmethod
    def create(
        cls,
        level: str = "INFO",
        format: str = "text",
        extra_fields: Optional[Dict[str, Any]] = None,
        **options: Any,
    ) -> "LoggingConfig":
        """
        Build a config from plain strings (env vars, YAML).

        ``options`` are the remaining dataclass fields, e.g.
        ``enable_file=True, file_path="/tmp/http.log"``.
        """
        return cls(
            level=LogLevel(level.upper()),
            format=LogFormat(format.lower()),
            extra_fields=dict(extra_fields or {}),
            **options,
        )
