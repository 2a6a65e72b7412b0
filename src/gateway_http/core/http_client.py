# src/gateway_http/core/http_client.py
from concurrent.futures import Executor, Future, ThreadPoolExecutor, wait
from typing import Any, Callable, Optional, Set, TYPE_CHECKING
import logging
import threading
import time

import requests

from .config import ClientConfig, TimeoutConfig
from .context import PendingRequest
from .dispatcher import CallbackDispatcher, HttpResponseCallback, Result, SerialDispatcher
from .error_handler import ErrorHandler
from .exceptions import ClientClosedError, InvalidArgumentError, TLSNotConfiguredError
from .session_manager import ThreadSafeSessionManager, create_session
from .tls import TLSTrustProvider
from .utils import build_url, is_https, sanitize_url

# Delayed import to avoid circular dependency
if TYPE_CHECKING:
    from .logging import GatewayLogger

# (status_code, body) -> body, поднимает исключение для ошибочных статусов
Interpreter = Callable[[int, Optional[str]], Optional[str]]

PATH_NULL_MESSAGE = "Path cannot be null"
CLIENT_CLOSED_MESSAGE = "Client is closed"
TLS_NOT_CONFIGURED_MESSAGE = "Trust provider was not set or failed to initialize"

_UNSET: Any = object()

# Пул растёт по требованию, простаивающие потоки переиспользуются
MAX_WORKERS = 256

logger = logging.getLogger(__name__)


def running_future() -> Future:
    """Future already in the running state: it cannot be cancelled."""
    future: Future = Future()
    future.set_running_or_notify_cancel()
    return future


def _elapsed_ms(start: float) -> float:
    return round((time.monotonic() - start) * 1000, 2)


class HTTPClient:
    """
    Транспортный HTTP клиент с асинхронной доставкой результатов.

    Features:
        - Запросы выполняются в пуле потоков, вызывающий поток не блокируется
        - Результат доставляется через CallbackDispatcher ровно один раз
        - Immutable конфигурация: запрос захватывает снапшот при отправке
        - HTTPS только при настроенном TLS trust provider
        - Thread-safe: каждый поток пула получает собственную сессию

    Example:
        >>> with HTTPClient() as client:
        ...     client.set_base_url("https://api.sandbox.example.com")
        ...     future = client.get("/v1/configuration", FunctionCallback(print, print))
        ...     body = future.result(timeout=30)
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        *,
        dispatcher: Optional[CallbackDispatcher] = None,
        executor: Optional[Executor] = None
    ):
        """
        Initialize HTTP client.

        Args:
            config: ClientConfig (по умолчанию пустой base URL, таймауты 30с
                и системный trust provider, если его удалось создать)
            dispatcher: Контекст доставки результатов (по умолчанию SerialDispatcher)
            executor: Пул потоков для запросов (внешний пул клиент не закрывает)
        """
        if config is None:
            config = ClientConfig(trust_provider=TLSTrustProvider.system_or_none())

        self._config = config
        self._config_lock = threading.Lock()

        self._owns_dispatcher = dispatcher is None
        self._dispatcher = dispatcher if dispatcher is not None else SerialDispatcher()

        self._owns_executor = executor is None
        self._executor = executor if executor is not None else ThreadPoolExecutor(
            max_workers=MAX_WORKERS,
            thread_name_prefix="gateway-http"
        )

        self._error_handler = ErrorHandler()
        self._session_manager = ThreadSafeSessionManager(session_factory=create_session)

        self._logger: Optional['GatewayLogger'] = None
        if config.logging:
            from .logging import GatewayLogger
            self._logger = GatewayLogger(config=config.logging, name="gateway_http.client")

        self._closed = False
        self._lifecycle_lock = threading.RLock()
        self._in_flight: Set[Future] = set()

    def __enter__(self):
        """Поддержка контекстного менеджера"""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    # ==================== Конфигурация ====================

    @property
    def config(self) -> ClientConfig:
        """Текущий снапшот конфигурации."""
        with self._config_lock:
            return self._config

    def _update_config(self, update: Callable[[ClientConfig], ClientConfig]) -> 'HTTPClient':
        with self._config_lock:
            self._config = update(self._config)
        return self

    def configure(
        self,
        base_url: Optional[str] = _UNSET,
        user_agent: str = _UNSET,
        connect_timeout: float = _UNSET,
        read_timeout: float = _UNSET,
        trust_provider: Optional[TLSTrustProvider] = _UNSET
    ) -> 'HTTPClient':
        """
        Заменяет переданные поля конфигурации. Без I/O.

        Пропущенные аргументы сохраняют текущие значения. Уже отправленные
        запросы продолжают работать со своим снапшотом.

        Returns:
            self для chaining
        """
        def update(config: ClientConfig) -> ClientConfig:
            if base_url is not _UNSET:
                config = config.with_base_url(base_url)
            if user_agent is not _UNSET:
                config = config.with_user_agent(user_agent)
            if connect_timeout is not _UNSET or read_timeout is not _UNSET:
                config = config.with_timeout(TimeoutConfig(
                    connect=config.timeout.connect if connect_timeout is _UNSET else connect_timeout,
                    read=config.timeout.read if read_timeout is _UNSET else read_timeout,
                ))
            if trust_provider is not _UNSET:
                config = config.with_trust_provider(trust_provider)
            return config

        return self._update_config(update)

    def set_base_url(self, base_url: Optional[str]) -> 'HTTPClient':
        return self._update_config(lambda config: config.with_base_url(base_url))

    def set_user_agent(self, user_agent: str) -> 'HTTPClient':
        return self._update_config(lambda config: config.with_user_agent(user_agent))

    def set_connect_timeout(self, seconds: float) -> 'HTTPClient':
        return self._update_config(lambda config: config.with_connect_timeout(seconds))

    def set_read_timeout(self, seconds: float) -> 'HTTPClient':
        return self._update_config(lambda config: config.with_read_timeout(seconds))

    def set_trust_provider(self, trust_provider: Optional[TLSTrustProvider]) -> 'HTTPClient':
        return self._update_config(lambda config: config.with_trust_provider(trust_provider))

    # ==================== Публичный API ====================

    def get(self, path: Optional[str], callback: Optional[HttpResponseCallback] = None) -> Future:
        """
        Асинхронный GET.

        Args:
            path: Путь относительно base URL или абсолютный URL
            callback: Получатель результата (None - fire-and-forget)

        Returns:
            Future с телом ответа или исключением
        """
        if path is None:
            return self.reject(callback, InvalidArgumentError(PATH_NULL_MESSAGE))
        return self.submit(PendingRequest("GET", path), callback)

    def post(
        self,
        path: Optional[str],
        data: Optional[str],
        callback: Optional[HttpResponseCallback] = None
    ) -> Future:
        """
        Асинхронный POST с JSON телом.

        Args:
            path: Путь относительно base URL или абсолютный URL
            data: Тело запроса (JSON строка)
            callback: Получатель результата (None - fire-and-forget)
        """
        if path is None:
            return self.reject(callback, InvalidArgumentError(PATH_NULL_MESSAGE))
        return self.submit(PendingRequest("POST", path, body=data), callback)

    def post_sync(self, path: Optional[str], data: Optional[str]) -> Optional[str]:
        """
        Синхронный POST в потоке вызывающего.

        Returns:
            Тело ответа (200/201/202)

        Raises:
            InvalidArgumentError: path is None
            HTTPStatusError: Ошибочный статус ответа
            TLSNotConfiguredError: HTTPS без trust provider
            requests.RequestException: Сетевые ошибки
        """
        if path is None:
            raise InvalidArgumentError(PATH_NULL_MESSAGE)
        return self.execute(PendingRequest("POST", path, body=data))

    # ==================== Seams для специализаций ====================

    def reject(self, callback: Optional[HttpResponseCallback], error: BaseException) -> Future:
        """
        Доставить ошибку без обращения к сети.

        Raises:
            ClientClosedError: Клиент уже закрыт
        """
        with self._lifecycle_lock:
            if self._closed:
                raise ClientClosedError(CLIENT_CLOSED_MESSAGE)
            future = running_future()
            self._dispatcher.deliver(callback, Result.failure(error), future)
        return future

    def submit(
        self,
        request: PendingRequest,
        callback: Optional[HttpResponseCallback] = None,
        *,
        config: Optional[ClientConfig] = None,
        interpreter: Optional[Interpreter] = None
    ) -> Future:
        """
        Отправить запрос в пул потоков.

        Снапшот конфигурации берётся здесь, в момент отправки.

        Args:
            request: Запрос
            callback: Получатель результата
            config: Снапшот конфигурации (по умолчанию текущий)
            interpreter: Замена стандартного сопоставления статусов

        Raises:
            ClientClosedError: Клиент закрыт или внешний пул уже остановлен
        """
        config = config or self.config
        future = running_future()

        with self._lifecycle_lock:
            if self._closed:
                raise ClientClosedError(CLIENT_CLOSED_MESSAGE)
            try:
                work = self._executor.submit(self._run, request, callback, config, interpreter, future)
            except RuntimeError as e:
                raise ClientClosedError(f"Executor rejected the request: {e}") from e
            self._in_flight.add(work)

        work.add_done_callback(self._forget)
        return future

    def _forget(self, work: Future) -> None:
        with self._lifecycle_lock:
            self._in_flight.discard(work)

    def _run(
        self,
        request: PendingRequest,
        callback: Optional[HttpResponseCallback],
        config: ClientConfig,
        interpreter: Optional[Interpreter],
        future: Future
    ) -> None:
        try:
            result = Result.success(self.execute(request, config=config, interpreter=interpreter))
        except Exception as e:
            result = Result.failure(e)

        try:
            self._dispatcher.deliver(callback, result, future)
        except Exception as e:
            # Dispatcher не принял результат: future всё равно завершается
            logger.exception(
                "Result delivery failed for %s %s", request.method, request.url
            )
            if not future.done():
                future.set_exception(e)

    def init_request(self, request: PendingRequest, config: Optional[ClientConfig] = None) -> requests.Request:
        """
        Построить requests.Request с базовыми заголовками.

        Raises:
            TLSNotConfiguredError: HTTPS URL без trust provider
        """
        config = config or self.config
        url = build_url(config.base_url, request.url)

        if is_https(url) and config.trust_provider is None:
            raise TLSNotConfiguredError(TLS_NOT_CONFIGURED_MESSAGE)

        headers = {
            "User-Agent": config.user_agent,
            "Accept-Language": config.accept_language,
        }
        if request.method == "POST":
            headers["Content-Type"] = "application/json"
        headers.update(request.headers)

        data = request.body.encode("utf-8") if request.body is not None else None
        return requests.Request(request.method, url, headers=headers, data=data)

    def execute(
        self,
        request: PendingRequest,
        *,
        config: Optional[ClientConfig] = None,
        interpreter: Optional[Interpreter] = None
    ) -> Optional[str]:
        """
        Выполнить запрос синхронно в текущем потоке.

        Returns:
            Тело ответа после interpreter (по умолчанию ErrorHandler.parse_response)
        """
        config = config or self.config
        interpreter = interpreter or self._error_handler.parse_response

        if self._logger is None:
            return self._send(request, config, interpreter)

        from .logging.filters import correlation_scope

        start_time = time.monotonic()
        url = request.url
        with correlation_scope(request.request_id):
            try:
                prepared = self.init_request(request, config)
                url = prepared.url
                self._logger.debug(
                    "Request started",
                    method=request.method,
                    url=sanitize_url(url),
                    request_id=request.request_id,
                    timeout=config.timeout.as_tuple()
                )

                response = self._transmit(prepared, config)
                self._logger.info(
                    "Request completed",
                    method=request.method,
                    url=sanitize_url(url),
                    status_code=response.status_code,
                    duration_ms=_elapsed_ms(start_time),
                    request_id=request.request_id
                )

                return interpreter(response.status_code, response.text)

            except Exception as e:
                self._logger.warning(
                    "Request failed",
                    method=request.method,
                    url=sanitize_url(url),
                    error=str(e),
                    error_type=type(e).__name__,
                    duration_ms=_elapsed_ms(start_time),
                    request_id=request.request_id
                )
                raise

    def _send(self, request: PendingRequest, config: ClientConfig, interpreter: Interpreter) -> Optional[str]:
        response = self._transmit(self.init_request(request, config), config)
        return interpreter(response.status_code, response.text)

    def _transmit(self, prepared: requests.Request, config: ClientConfig) -> requests.Response:
        session = self._session_manager.get_session(config.trust_provider)
        return session.send(
            session.prepare_request(prepared),
            timeout=config.timeout.as_tuple()
        )

    # ==================== Управление жизненным циклом ====================

    def close(self):
        """
        Освобождает ресурсы клиента. Идемпотентно.

        После close() get/post/submit поднимают ClientClosedError.

        Cleanup order:
            1. Запросы в полёте (свой пул останавливается, во внешнем
               ожидаются только запросы этого клиента)
            2. Dispatcher (доставляет оставшиеся результаты)
            3. Logger handlers
            4. Сессии всех потоков
        """
        with self._lifecycle_lock:
            if self._closed:
                return
            self._closed = True
            in_flight = list(self._in_flight)

        if self._owns_executor:
            self._executor.shutdown(wait=True)
        else:
            wait(in_flight)
        if self._owns_dispatcher:
            self._dispatcher.close()
        if self._logger is not None:
            self._logger.close()
        self._session_manager.close_all()

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def dispatcher(self) -> CallbackDispatcher:
        return self._dispatcher

    @property
    def base_url(self) -> str:
        return self.config.base_url

    @property
    def user_agent(self) -> str:
        return self.config.user_agent

    @property
    def trust_provider(self) -> Optional[TLSTrustProvider]:
        return self.config.trust_provider
