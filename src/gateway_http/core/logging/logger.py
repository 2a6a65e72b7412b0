"""
Structured per-client logger.
"""

import logging
from typing import Optional, Any

from .config import LoggingConfig
from .filters import CorrelationIdFilter, ExtraFieldsFilter
from .handlers import handlers_for
from ...utils.sanitizer import mask_sensitive_data


class GatewayLogger:
    """
    Logger owned by a single client instance.

    Keyword arguments passed to the logging methods become structured fields
    (``extra``) after sensitive values are masked.

    Example:
        >>> logger = GatewayLogger(LoggingConfig.create(level="DEBUG"), name="gateway_http.client")
        >>> logger.info("Request completed", method="GET", status_code=200)
        >>> logger.close()
    """

    def __init__(self, config: Optional[LoggingConfig] = None, name: str = "gateway_http.client"):
        self.config = config or LoggingConfig()
        self.name = name
        self._closed = False

        self._logger = logging.getLogger(name)
        self._logger.setLevel(self.config.level.number)
        self._logger.propagate = False

        # Re-creating a logger with the same name replaces its handlers
        self._logger.handlers.clear()

        filters = []
        if self.config.enable_correlation_id:
            filters.append(CorrelationIdFilter())
        if self.config.extra_fields:
            filters.append(ExtraFieldsFilter(self.config.extra_fields))

        for handler in handlers_for(self.config, filters):
            self._logger.addHandler(handler)

    def _log(self, level: int, message: str, exc_info: bool = False, **kwargs: Any) -> None:
        if self._closed:
            return
        self._logger.log(level, message, exc_info=exc_info, extra=mask_sensitive_data(kwargs))

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self._log(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._log(logging.ERROR, message, **kwargs)

    def exception(self, message: str, **kwargs: Any) -> None:
        """Log at ERROR level with the current exception's traceback."""
        self._log(logging.ERROR, message, exc_info=True, **kwargs)

    def close(self) -> None:
        """
        Flush and close all handlers. Idempotent.

        Messages logged after close are dropped.
        """
        if self._closed:
            return

        for handler in self._logger.handlers[:]:
            try:
                handler.flush()
                handler.close()
            except (OSError, ValueError):
                # Stream already closed by the interpreter or the caller
                pass
            self._logger.removeHandler(handler)

        self._closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
