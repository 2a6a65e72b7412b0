"""
Система конфигурации для Gateway HTTP.

Все конфиги immutable (frozen dataclasses): "сеттеры" клиента создают новый
снапшот, а запрос захватывает снапшот в момент отправки.
"""

from dataclasses import dataclass, field, replace
from typing import Optional, Tuple, Union, TYPE_CHECKING

from ..utils.user_agents import core_user_agent
from .utils import default_language

if TYPE_CHECKING:
    from .logging import LoggingConfig
    from .tls import TLSTrustProvider

DEFAULT_TIMEOUT = 30.0

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# TIMEOUT CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class TimeoutConfig:
    """
    Конфигурация таймаутов.

    Args:
        connect: Таймаут подключения (сек)
        read: Таймаут чтения данных (сек)

    Examples:
        >>> TimeoutConfig()
        TimeoutConfig(connect=30.0, read=30.0)
        >>> TimeoutConfig(connect=90, read=30)
    """
    connect: float = DEFAULT_TIMEOUT
    read: float = DEFAULT_TIMEOUT

    def __post_init__(self):
        """Валидация."""
        if self.connect <= 0:
            raise ValueError("connect timeout must be positive")
        if self.read <= 0:
            raise ValueError("read timeout must be positive")

    def as_tuple(self) -> Tuple[float, float]:
        """Вернуть как (connect, read) для requests."""
        return (self.connect, self.read)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# MAIN CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class ClientConfig:
    """
    Главная конфигурация HTTPClient.

    Args:
        base_url: Базовый URL (может быть пустым)
        user_agent: Значение заголовка User-Agent
        timeout: Конфигурация таймаутов
        trust_provider: TLS trust provider (None - HTTPS запросы запрещены)
        accept_language: Значение Accept-Language (по умолчанию язык локали)
        logging: Конфигурация логирования (None = без логирования)

    Examples:
        >>> config = ClientConfig(base_url="https://api.sandbox.example.com")
        >>> config = ClientConfig.create(connect_timeout=90)
        >>> config = config.with_base_url("https://api.example.com")
    """
    base_url: str = ""
    user_agent: str = field(default_factory=core_user_agent)
    timeout: TimeoutConfig = field(default_factory=TimeoutConfig)
    trust_provider: Optional['TLSTrustProvider'] = None
    accept_language: str = field(default_factory=default_language)
    logging: Optional['LoggingConfig'] = None

    def __post_init__(self):
        """None base_url нормализуется в пустую строку."""
        if self.base_url is None:
            object.__setattr__(self, 'base_url', "")

    @classmethod
    def create(
        cls,
        base_url: Optional[str] = None,
        user_agent: Optional[str] = None,
        timeout: Union[float, Tuple[float, float], TimeoutConfig, None] = None,
        connect_timeout: Optional[float] = None,
        read_timeout: Optional[float] = None,
        trust_provider: Optional['TLSTrustProvider'] = None,
        accept_language: Optional[str] = None,
        logging: Optional['LoggingConfig'] = None,
    ) -> 'ClientConfig':
        """
        Удобный конструктор конфигурации.

        Args:
            base_url: Базовый URL
            user_agent: User-Agent (по умолчанию gateway-http/core/<version>)
            timeout: Таймаут (число для обоих, (connect, read) или TimeoutConfig)
            connect_timeout: Таймаут подключения (переопределяет timeout)
            read_timeout: Таймаут чтения (переопределяет timeout)
            trust_provider: TLS trust provider
            accept_language: Accept-Language
            logging: Конфигурация логирования

        Examples:
            >>> ClientConfig.create(timeout=60).timeout
            TimeoutConfig(connect=60, read=60)
            >>> ClientConfig.create(timeout=(5, 60), read_timeout=10).timeout
            TimeoutConfig(connect=5, read=10)
        """
        timeout_cfg = _timeout_from(timeout)
        if connect_timeout is not None or read_timeout is not None:
            timeout_cfg = TimeoutConfig(
                connect=timeout_cfg.connect if connect_timeout is None else connect_timeout,
                read=timeout_cfg.read if read_timeout is None else read_timeout,
            )

        kwargs = {}
        if user_agent is not None:
            kwargs['user_agent'] = user_agent
        if accept_language is not None:
            kwargs['accept_language'] = accept_language

        return cls(
            base_url=base_url or "",
            timeout=timeout_cfg,
            trust_provider=trust_provider,
            logging=logging,
            **kwargs
        )

    # ==================== Снапшоты ====================

    def with_base_url(self, base_url: Optional[str]) -> 'ClientConfig':
        """Новый конфиг с другим base_url (None превращается в "")."""
        return replace(self, base_url=base_url or "")

    def with_user_agent(self, user_agent: str) -> 'ClientConfig':
        """Новый конфиг с другим User-Agent."""
        return replace(self, user_agent=user_agent)

    def with_timeout(self, timeout: Union[float, Tuple[float, float], TimeoutConfig]) -> 'ClientConfig':
        """Новый конфиг с другими таймаутами."""
        return replace(self, timeout=_timeout_from(timeout))

    def with_connect_timeout(self, seconds: float) -> 'ClientConfig':
        """Новый конфиг с другим таймаутом подключения."""
        return replace(self, timeout=TimeoutConfig(connect=seconds, read=self.timeout.read))

    def with_read_timeout(self, seconds: float) -> 'ClientConfig':
        """Новый конфиг с другим таймаутом чтения."""
        return replace(self, timeout=TimeoutConfig(connect=self.timeout.connect, read=seconds))

    def with_trust_provider(self, trust_provider: Optional['TLSTrustProvider']) -> 'ClientConfig':
        """Новый конфиг с другим trust provider (None отключает HTTPS)."""
        return replace(self, trust_provider=trust_provider)

    def with_logging(self, logging: Optional['LoggingConfig']) -> 'ClientConfig':
        """Новый конфиг с другой конфигурацией логирования."""
        return replace(self, logging=logging)


def _timeout_from(timeout: Union[float, Tuple[float, float], TimeoutConfig, None]) -> TimeoutConfig:
    if timeout is None:
        return TimeoutConfig()
    if isinstance(timeout, TimeoutConfig):
        return timeout
    if isinstance(timeout, tuple):
        return TimeoutConfig(connect=timeout[0], read=timeout[1])
    return TimeoutConfig(connect=timeout, read=timeout)
