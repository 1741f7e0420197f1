"""
Structured logger used by HttpClientContext.

Wraps a stdlib logger with console/rotating-file handlers, keyword
"extra" fields and masking of sensitive values.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, List, Optional

from ...utils.sanitizer import mask_sensitive_data
from .config import LoggingConfig
from .filters import CorrelationIdFilter, ExtraFieldsFilter
from .formatters import get_formatter


class HttpClientLogger:
    """
    Logger with keyword extras.

    Example:
        >>> logger = HttpClientLogger(LoggingConfig.create(level="DEBUG"))
        >>> logger.info("Request started", method="GET", url="https://api.com")
    """

    def __init__(self, config: Optional[LoggingConfig] = None, name: str = "fluent_http"):
        self.config = config or LoggingConfig()
        self.name = name
        self._closed = False

        self._logger = logging.getLogger(name)
        self._logger.setLevel(self.config.level.value)
        self._logger.propagate = False
        self._logger.handlers.clear()

        filters: List[logging.Filter] = []
        if self.config.enable_correlation_id:
            filters.append(CorrelationIdFilter())
        if self.config.extra_fields:
            filters.append(ExtraFieldsFilter(self.config.extra_fields))

        formatter = get_formatter(self.config.format.value)

        if self.config.enable_console:
            self._add_handler(logging.StreamHandler(sys.stdout), formatter, filters)

        if self.config.enable_file and self.config.file_path:
            Path(self.config.file_path).parent.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                filename=self.config.file_path,
                maxBytes=self.config.max_bytes,
                backupCount=self.config.backup_count,
                encoding="utf-8"
            )
            self._add_handler(file_handler, formatter, filters)

        if not self.config.has_handlers:
            self._logger.addHandler(logging.NullHandler())

    def _add_handler(self, handler: logging.Handler, formatter: logging.Formatter,
                     filters: List[logging.Filter]) -> None:
        handler.setLevel(self.config.level.value)
        handler.setFormatter(formatter)
        for f in filters:
            handler.addFilter(f)
        self._logger.addHandler(handler)

    @property
    def handlers(self) -> List[logging.Handler]:
        return list(self._logger.handlers)

    def _log(self, level: int, message: str, kwargs: Any, exc_info: bool = False) -> None:
        if self._logger.isEnabledFor(level):
            self._logger.log(level, message, extra=mask_sensitive_data(kwargs), exc_info=exc_info)

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        """
        Log info message.

        Example:
            >>> logger.info("Request completed", status_code=200, duration_ms=150)
        """
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._log(logging.ERROR, message, kwargs)

    def exception(self, message: str, **kwargs: Any) -> None:
        """Log with traceback; call from an exception handler."""
        self._log(logging.ERROR, message, kwargs, exc_info=True)

    def close(self) -> None:
        """
        Flush and close all handlers. Idempotent.

        Example:
            >>> with HttpClientLogger(config) as logger:
            ...     logger.info("Processing...")
        """
        if self._closed:
            return
        for handler in self._logger.handlers[:]:
            handler.flush()
            handler.close()
            self._logger.removeHandler(handler)
        self._closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
