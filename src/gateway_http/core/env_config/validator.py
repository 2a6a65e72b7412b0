"""
Pydantic models for environment configuration.
"""

from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..config import DEFAULT_TIMEOUT
from ..logging.config import DEFAULT_MAX_BYTES

LevelName = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
FormatName = Literal["json", "text", "colored"]


class LoggingSettings(BaseModel):
    """Field names match ``LoggingConfig.create`` keyword arguments."""

    level: LevelName = "INFO"
    format: FormatName = "text"
    enable_console: bool = True
    enable_file: bool = False
    file_path: Optional[str] = None
    max_bytes: int = Field(default=DEFAULT_MAX_BYTES, gt=0)
    backup_count: int = Field(default=5, ge=0)
    enable_correlation_id: bool = True


class GatewayClientSettings(BaseSettings):
    """
    Настройки транспортного клиента из окружения.

    Источники по убыванию приоритета:
    1. Аргументы конструктора (overrides из ``load_from_env``)
    2. Переменные окружения GATEWAY_HTTP_*
    3. .env файл
    4. Значения по умолчанию

    Example .env:
        GATEWAY_HTTP_BASE_URL=https://api.sandbox.example.com/merchants/abc/client_api
        GATEWAY_HTTP_TIMEOUT_CONNECT=90
        GATEWAY_HTTP_LOG_ENABLED=true
        GATEWAY_HTTP_LOG_LEVEL=DEBUG

    Trust provider из окружения не читается никогда.
    """

    model_config = SettingsConfigDict(
        env_prefix='GATEWAY_HTTP_',
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore',
    )

    base_url: str = Field(default="", description="Base URL for relative paths")
    user_agent: Optional[str] = Field(default=None, description="User-Agent override")
    accept_language: Optional[str] = Field(default=None, description="Accept-Language override")

    timeout_connect: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    timeout_read: float = Field(default=DEFAULT_TIMEOUT, gt=0)

    # Logging (opt-in)
    log_enabled: bool = False
    log_level: LevelName = "INFO"
    log_format: FormatName = "text"
    log_enable_console: bool = True
    log_enable_file: bool = False
    log_file_path: Optional[str] = None
    log_max_bytes: int = Field(default=DEFAULT_MAX_BYTES, gt=0)
    log_backup_count: int = Field(default=5, ge=0)
    log_enable_correlation_id: bool = True

    @field_validator('base_url')
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Only http(s) URLs or an empty string."""
        v = v.strip()
        if v and not v.lower().startswith(("http://", "https://")):
            raise ValueError("base_url must start with http:// or https://")
        return v

    @field_validator('user_agent', 'accept_language')
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        """Empty values fall back to the client defaults."""
        if v is None or not v.strip():
            return None
        return v.strip()

    @field_validator('log_level', mode='before')
    @classmethod
    def upper_level(cls, v):
        return v.upper() if isinstance(v, str) else v

    @field_validator('log_format', mode='before')
    @classmethod
    def lower_format(cls, v):
        return v.lower() if isinstance(v, str) else v

    @model_validator(mode='after')
    def validate_log_outputs(self) -> 'GatewayClientSettings':
        if not self.log_enabled:
            return self
        if not (self.log_enable_console or self.log_enable_file):
            raise ValueError("log_enabled requires console or file output")
        if self.log_enable_file and not self.log_file_path:
            raise ValueError("log_file_path is required when log_enable_file=true")
        return self

    def to_logging_settings(self) -> Optional[LoggingSettings]:
        """None unless logging is enabled."""
        if not self.log_enabled:
            return None

        prefix = "log_"
        return LoggingSettings(**{
            name: getattr(self, prefix + name)
            for name in LoggingSettings.model_fields
        })
