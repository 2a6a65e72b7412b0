"""
Build ``ClientConfig`` from environment variables and .env files.
"""

from typing import Any, Optional

from ..config import ClientConfig, TimeoutConfig
from ..logging.config import LoggingConfig
from .profiles import ProfileType, get_env_file_path
from .validator import GatewayClientSettings


def load_from_env(
    profile: Optional[ProfileType] = None,
    env_file: Optional[str] = None,
    **overrides: Any
) -> ClientConfig:
    """
    Load ClientConfig from the environment.

    Priority (highest to lowest):
    1. **overrides - поля ``GatewayClientSettings`` (``base_url``, ``timeout_connect``, ``log_enabled``, ...)
    2. Environment variables (GATEWAY_HTTP_*)
    3. .env file (``env_file`` или файл профиля)
    4. Defaults

    The returned config has no trust provider: pass it to ``HTTPClient`` and
    call ``set_trust_provider`` (or let ``GatewayHTTPClient`` pin) before
    making HTTPS requests.

    Raises:
        TypeError: Неизвестное имя в overrides
        pydantic.ValidationError: Невалидное значение
        ValueError: Неизвестный профиль

    Example:
        >>> config = load_from_env(profile="sandbox", timeout_connect=90)
        >>> client = HTTPClient(config).set_trust_provider(TLSTrustProvider.system())
    """
    unknown = sorted(set(overrides) - set(GatewayClientSettings.model_fields))
    if unknown:
        raise TypeError(f"Unknown configuration overrides: {', '.join(unknown)}")

    if env_file is None:
        env_file = get_env_file_path(profile)

    settings = GatewayClientSettings(_env_file=env_file, **overrides)
    logging_settings = settings.to_logging_settings()

    return ClientConfig.create(
        base_url=settings.base_url,
        user_agent=settings.user_agent,
        accept_language=settings.accept_language,
        timeout=TimeoutConfig(connect=settings.timeout_connect, read=settings.timeout_read),
        logging=LoggingConfig.create(**logging_settings.model_dump()) if logging_settings else None,
    )


def config_summary(config: ClientConfig) -> str:
    """
    Human-readable configuration summary.

    Example:
        >>> print(config_summary(load_from_env()))
        ClientConfig:
          base_url: https://api.sandbox.example.com
          timeout: connect=30.0s, read=30.0s
          ...
    """
    lines = [
        "ClientConfig:",
        f"  base_url: {config.base_url or '<empty>'}",
        f"  user_agent: {config.user_agent}",
        f"  accept_language: {config.accept_language}",
        f"  timeout: connect={config.timeout.connect}s, read={config.timeout.read}s",
        f"  trust_provider: {config.trust_provider!r}",
    ]
    if config.logging:
        lines.append(f"  logging: level={config.logging.level.value}, format={config.logging.format.value}")
        if config.logging.enable_file:
            lines.append(f"    file: {config.logging.file_path}")
    return "\n".join(lines)
