"""
Structured logger used by RestClient.

Wraps a stdlib ``logging.Logger``: keyword arguments become record extras,
and every extra is masked with ``mask_sensitive_data`` first.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, List, Optional

from ...utils.sanitizer import mask_sensitive_data
from .config import LoggingConfig, LogLevel
from .filters import CorrelationIdFilter, ExtraFieldsFilter
from .formatters import get_formatter


def _get_level(level: LogLevel) -> int:
    return getattr(logging, level.value)


def _create_handlers(config: LoggingConfig) -> List[logging.Handler]:
    """Build console/file handlers with formatter and filters attached."""
    handlers: List[logging.Handler] = []

    if config.enable_console:
        handlers.append(logging.StreamHandler(sys.stderr))

    if config.file_path:
        # Create directory if it doesn't exist
        Path(config.file_path).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(RotatingFileHandler(
            filename=config.file_path,
            maxBytes=config.max_bytes,
            backupCount=config.backup_count,
            encoding='utf-8'
        ))

    formatter = get_formatter(config.format.value)
    filters: List[logging.Filter] = []
    if config.enable_correlation_id:
        filters.append(CorrelationIdFilter())
    if config.extra_fields:
        filters.append(ExtraFieldsFilter(config.extra_fields))

    for handler in handlers:
        handler.setLevel(_get_level(config.level))
        handler.setFormatter(formatter)
        for f in filters:
            handler.addFilter(f)

    return handlers


class RestClientLogger:
    """
    Logger with console/file handlers and masked structured fields.

    Example:
        >>> logger = RestClientLogger(LoggingConfig.create(level="DEBUG"))
        >>> logger.info("Request started", method="GET", url="https://api.com")
        >>> logger.close()
    """

    def __init__(self, config: Optional[LoggingConfig] = None, name: str = "rest_client"):
        self.config = config or LoggingConfig()
        self.name = name
        self._closed = False

        self._logger = logging.getLogger(name)
        self._logger.setLevel(_get_level(self.config.level))
        self._logger.propagate = False

        # Remove handlers left by a previous logger with the same name
        for handler in self._logger.handlers[:]:
            self._logger.removeHandler(handler)
            handler.close()

        for handler in _create_handlers(self.config):
            self._logger.addHandler(handler)

    @property
    def handlers(self) -> List[logging.Handler]:
        return list(self._logger.handlers)

    def _log(self, level: int, message: str, fields: dict, exc_info: bool = False) -> None:
        self._logger.log(level, message, extra=mask_sensitive_data(fields), exc_info=exc_info)

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._log(logging.ERROR, message, kwargs)

    def exception(self, message: str, **kwargs: Any) -> None:
        """Log at ERROR with the current traceback; call from an except block."""
        self._log(logging.ERROR, message, kwargs, exc_info=True)

    def close(self) -> None:
        """
        Flush and close all handlers. Idempotent.
        """
        if self._closed:
            return

        for handler in self._logger.handlers[:]:
            try:
                handler.flush()
                handler.close()
            finally:
                self._logger.removeHandler(handler)

        self._closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
