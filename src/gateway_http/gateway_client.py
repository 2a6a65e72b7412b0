"""
Authenticated client for the payment gateway API.

Composition over the transport: ``GatewayHTTPClient`` holds an ``HTTPClient``
and one ``Authorization``, injects credential material into outgoing requests
and remaps 403/422 responses to messages taken from the gateway error body.
"""

import json
import logging
from concurrent.futures import Future
from typing import Callable, IO, Optional

from .authorization import AUTHORIZATION_FINGERPRINT_KEY, Authorization, ClientToken, TokenizationKey
from .certificates import gateway_certificate_stream
from .core.config import ClientConfig
from .core.context import PendingRequest
from .core.dispatcher import CallbackDispatcher, HttpResponseCallback
from .core.error_handler import ErrorHandler
from .core.exceptions import (
    AuthorizationError,
    ErrorWithResponse,
    InvalidArgumentError,
    TLSSetupError,
    UnprocessableEntityError,
)
from .core.http_client import HTTPClient, PATH_NULL_MESSAGE
from .core.tls import TLSTrustProvider
from .core.utils import append_query_parameter, build_url
from .utils.user_agents import gateway_user_agent

logger = logging.getLogger(__name__)

TOKENIZATION_KEY_HEADER_KEY = "Client-Key"


class GatewayHTTPClient:
    """
    HTTP клиент с авторизацией gateway.

    - ClientToken: fingerprint добавляется в query (GET) или в JSON тело (POST)
    - TokenizationKey: заголовок ``Client-Key``
    - 403 -> AuthorizationError с сообщением из ``error.message``
    - 422 -> ErrorWithResponse с тем же сообщением

    Example:
        >>> client = GatewayHTTPClient(Authorization.from_string("sandbox_abc_merchant"))
        >>> client.set_base_url("https://api.sandbox.example.com/merchants/abc/client_api")
        >>> future = client.post("/v1/payment_methods/credit_cards", '{"creditCard": {}}', callback)
    """

    def __init__(
        self,
        authorization: Authorization,
        transport: Optional[HTTPClient] = None,
        *,
        dispatcher: Optional[CallbackDispatcher] = None,
        certificate_source: Callable[[], IO] = gateway_certificate_stream
    ):
        """
        Args:
            authorization: Авторизация, неизменна для клиента
            transport: Транспорт (по умолчанию создаётся новый HTTPClient)
            dispatcher: Контекст доставки для создаваемого транспорта
            certificate_source: Фабрика потока сертификатов для pinning
        """
        if authorization is None:
            raise InvalidArgumentError("Authorization cannot be null")

        self._authorization = authorization
        self._owns_transport = transport is None
        self._transport = transport if transport is not None else HTTPClient(dispatcher=dispatcher)
        self._transport.set_user_agent(self.user_agent())

        # Pinning best effort: без него HTTPS упадёт позже, на запросе
        try:
            self._transport.set_trust_provider(TLSTrustProvider.pinned(certificate_source()))
        except (TLSSetupError, OSError) as e:
            logger.warning("Certificate pinning unavailable, keeping current trust provider: %s", e)

    @staticmethod
    def user_agent() -> str:
        """``gateway-http/python/<version>``."""
        return gateway_user_agent()

    @property
    def authorization(self) -> Authorization:
        return self._authorization

    @property
    def transport(self) -> HTTPClient:
        return self._transport

    @property
    def config(self) -> ClientConfig:
        return self._transport.config

    # ==================== Конфигурация ====================

    def configure(self, **kwargs) -> 'GatewayHTTPClient':
        """См. ``HTTPClient.configure``."""
        self._transport.configure(**kwargs)
        return self

    def set_base_url(self, base_url: Optional[str]) -> 'GatewayHTTPClient':
        self._transport.set_base_url(base_url)
        return self

    def set_connect_timeout(self, seconds: float) -> 'GatewayHTTPClient':
        self._transport.set_connect_timeout(seconds)
        return self

    def set_read_timeout(self, seconds: float) -> 'GatewayHTTPClient':
        self._transport.set_read_timeout(seconds)
        return self

    # ==================== Публичный API ====================

    def get(self, path: Optional[str], callback: Optional[HttpResponseCallback] = None) -> Future:
        """
        GET с авторизацией. Абсолютный path используется как есть.
        """
        if path is None:
            return self._transport.reject(callback, InvalidArgumentError(PATH_NULL_MESSAGE))

        config = self._transport.config
        url = build_url(config.base_url, path)
        if isinstance(self._authorization, ClientToken):
            url = append_query_parameter(
                url, AUTHORIZATION_FINGERPRINT_KEY, self._authorization.authorization_fingerprint
            )

        return self._transport.submit(
            self._pending("GET", url), callback, config=config, interpreter=self.parse_response
        )

    def post(
        self,
        path: Optional[str],
        data: Optional[str],
        callback: Optional[HttpResponseCallback] = None
    ) -> Future:
        """
        POST с авторизацией.

        Ошибка разбора JSON тела доставляется через callback, а не бросается.
        """
        if path is None:
            return self._transport.reject(callback, InvalidArgumentError(PATH_NULL_MESSAGE))

        try:
            data = self._inject_fingerprint(data)
        except ValueError as e:
            return self._transport.reject(callback, e)

        return self._transport.submit(
            self._pending("POST", path, data), callback, interpreter=self.parse_response
        )

    def post_sync(self, path: Optional[str], data: Optional[str]) -> Optional[str]:
        """
        Синхронный POST с авторизацией.

        Raises:
            ValueError: Тело не JSON объект (json.JSONDecodeError для битого JSON)
            плюс всё, что поднимает HTTPClient.post_sync
        """
        if path is None:
            raise InvalidArgumentError(PATH_NULL_MESSAGE)

        data = self._inject_fingerprint(data)
        return self._transport.execute(self._pending("POST", path, data), interpreter=self.parse_response)

    # ==================== Авторизация ====================

    def _pending(self, method: str, url: str, body: Optional[str] = None) -> PendingRequest:
        return self._with_credentials(
            PendingRequest(method, url, body=body, authorization=self._authorization)
        )

    def _inject_fingerprint(self, data: Optional[str]) -> Optional[str]:
        if not isinstance(self._authorization, ClientToken):
            return data

        payload = json.loads(data if data is not None else "{}")
        if not isinstance(payload, dict):
            raise ValueError("Request body must be a JSON object")

        payload[AUTHORIZATION_FINGERPRINT_KEY] = self._authorization.authorization_fingerprint
        return json.dumps(payload, separators=(",", ":"))

    def init_request(self, request: PendingRequest, config: Optional[ClientConfig] = None):
        """Запрос, который будет отправлен (с заголовком Client-Key для TokenizationKey)."""
        return self._transport.init_request(self._with_credentials(request), config)

    def _with_credentials(self, request: PendingRequest) -> PendingRequest:
        if isinstance(self._authorization, TokenizationKey):
            return request.with_header(TOKENIZATION_KEY_HEADER_KEY, str(self._authorization))
        return request

    @staticmethod
    def parse_response(status_code: int, body: Optional[str]) -> Optional[str]:
        """
        Стандартное сопоставление статусов с переупаковкой 403 и 422.

        Examples:
            >>> GatewayHTTPClient.parse_response(422, '{"error": {"message": "There was an error"}}')
            Traceback (most recent call last):
            ...
            ErrorWithResponse: There was an error
        """
        try:
            return ErrorHandler.parse_response(status_code, body)
        except AuthorizationError as e:
            raise AuthorizationError(
                ErrorWithResponse(403, e.message).message, response_body=e.response_body
            ) from e
        except UnprocessableEntityError as e:
            raise ErrorWithResponse(422, e.message) from e

    # ==================== Управление жизненным циклом ====================

    def close(self):
        """Закрывает транспорт, если клиент его создал."""
        if self._owns_transport:
            self._transport.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
