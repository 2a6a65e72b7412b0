"""
Logging configuration for Gateway HTTP.

Logging is opt-in per client: ``ClientConfig.logging=None`` keeps the client silent.
"""

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Optional, Union

from .formatters import RESERVED_RECORD_FIELDS

DEFAULT_MAX_BYTES = 10 * 1024 * 1024


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

    @property
    def number(self) -> int:
        """Numeric level understood by the ``logging`` module."""
        return getattr(logging, self.value)


class LogFormat(str, Enum):
    JSON = "json"
    TEXT = "text"
    COLORED = "colored"


@dataclass(frozen=True)
class LoggingConfig:
    """
    Настройки логгера клиента.

    Attributes:
        level: Минимальный уровень записей
        format: json / text / colored
        enable_console: Вывод в stdout
        enable_file: Вывод в файл с ротацией
        file_path: Путь к файлу (обязателен при enable_file=True)
        max_bytes: Размер файла до ротации
        backup_count: Сколько старых файлов хранить
        enable_correlation_id: Добавлять request id к каждой записи запроса
        extra_fields: Статические поля каждой записи (service, environment, ...)

    Example:
        >>> LoggingConfig.create(level="debug", format="json").level
        <LogLevel.DEBUG: 'DEBUG'>
    """

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.TEXT
    enable_console: bool = True
    enable_file: bool = False
    file_path: Optional[str] = None
    max_bytes: int = DEFAULT_MAX_BYTES
    backup_count: int = 5
    enable_correlation_id: bool = True
    extra_fields: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.enable_file and not self.file_path:
            raise ValueError("file_path is required when enable_file=True")
        if self.max_bytes <= 0:
            raise ValueError("max_bytes must be positive")
        if self.backup_count < 0:
            raise ValueError("backup_count must be non-negative")

        clashes = sorted(RESERVED_RECORD_FIELDS.intersection(self.extra_fields))
        if clashes:
            raise ValueError(f"extra_fields cannot override log record attributes: {', '.join(clashes)}")

    @classmethod
    def create(
        cls,
        level: Union[str, LogLevel] = LogLevel.INFO,
        format: Union[str, LogFormat] = LogFormat.TEXT,
        extra_fields: Optional[Dict[str, Any]] = None,
        **options: Any
    ) -> "LoggingConfig":
        """
        Конструктор из строк (``"debug"``, ``"JSON"``).

        Остальные поля передаются через ``options`` как есть.

        Raises:
            ValueError: Неизвестный уровень или формат
        """
        return cls(
            level=level if isinstance(level, LogLevel) else LogLevel(level.upper()),
            format=format if isinstance(format, LogFormat) else LogFormat(format.lower()),
            extra_fields=dict(extra_fields or {}),
            **options
        )

    @property
    def has_output(self) -> bool:
        return self.enable_console or self.enable_file

    def with_level(self, level: Union[str, LogLevel]) -> "LoggingConfig":
        """Копия с другим уровнем."""
        return replace(self, level=level if isinstance(level, LogLevel) else LogLevel(level.upper()))
