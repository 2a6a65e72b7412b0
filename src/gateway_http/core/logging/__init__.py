"""
Per-client structured logging.

Disabled unless ``ClientConfig.logging`` is set:

    >>> config = ClientConfig.create(
    ...     base_url="https://api.sandbox.example.com",
    ...     logging=LoggingConfig.create(level="DEBUG", format="json"),
    ... )
    >>> client = HTTPClient(config)

Everything a client logs passes through ``mask_sensitive_data`` first, so
``Client-Key`` values and authorization fingerprints never reach a handler.
"""

from .config import LoggingConfig, LogLevel, LogFormat
from .logger import GatewayLogger
from .formatters import JSONFormatter, TextFormatter, ColoredFormatter, get_formatter
from .filters import (
    CorrelationIdFilter,
    ExtraFieldsFilter,
    correlation_scope,
    get_correlation_id,
)
from .handlers import handlers_for

__all__ = [
    "LoggingConfig",
    "LogLevel",
    "LogFormat",
    "GatewayLogger",
    "JSONFormatter",
    "TextFormatter",
    "ColoredFormatter",
    "get_formatter",
    "CorrelationIdFilter",
    "ExtraFieldsFilter",
    "correlation_scope",
    "get_correlation_id",
    "handlers_for",
]
