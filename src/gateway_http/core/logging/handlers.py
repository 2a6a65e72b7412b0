"""
Console and rotating file handlers.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import IO, List, Optional, Sequence

from .config import LoggingConfig
from .formatters import get_formatter


def _configure(
    handler: logging.Handler,
    level: int,
    formatter: logging.Formatter,
    filters: Optional[Sequence[logging.Filter]]
) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    for f in filters or ():
        handler.addFilter(f)
    return handler


def create_console_handler(
    level: int,
    formatter: logging.Formatter,
    filters: Optional[Sequence[logging.Filter]] = None,
    stream: Optional[IO] = None
) -> logging.StreamHandler:
    """Stream handler, stdout by default."""
    return _configure(logging.StreamHandler(stream or sys.stdout), level, formatter, filters)


def create_file_handler(
    file_path: str,
    level: int,
    formatter: logging.Formatter,
    max_bytes: int,
    backup_count: int,
    filters: Optional[Sequence[logging.Filter]] = None
) -> RotatingFileHandler:
    """
    Rotating file handler (client.log, client.log.1, ...).

    Parent directories are created on demand.
    """
    Path(file_path).parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        filename=file_path,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding='utf-8'
    )
    return _configure(handler, level, formatter, filters)


def handlers_for(config: LoggingConfig, filters: Sequence[logging.Filter] = ()) -> List[logging.Handler]:
    """Every handler a client logger needs for ``config``, sharing one formatter."""
    formatter = get_formatter(config.format)
    level = config.level.number

    handlers: List[logging.Handler] = []
    if config.enable_console:
        handlers.append(create_console_handler(level, formatter, filters))
    if config.enable_file:
        handlers.append(create_file_handler(
            config.file_path, level, formatter, config.max_bytes, config.backup_count, filters
        ))
    return handlers
