"""
Transport preset for PayPal endpoints.
"""

import logging
from concurrent.futures import Future
from typing import Callable, IO, Optional

import requests

from .certificates import paypal_certificate_stream
from .core.config import ClientConfig
from .core.context import PendingRequest
from .core.dispatcher import CallbackDispatcher, HttpResponseCallback
from .core.exceptions import TLSSetupError
from .core.http_client import HTTPClient
from .core.tls import TLSTrustProvider
from .utils.user_agents import paypal_user_agent

logger = logging.getLogger(__name__)

PAYPAL_CONNECT_TIMEOUT = 90.0


class PayPalHTTPClient:
    """
    HTTPClient с User-Agent PayPal SDK, таймаутом подключения 90с и
    pinning на сертификаты PayPal (best effort).

    Статусы ответа сопоставляются стандартно, credentials не добавляются.

    Example:
        >>> with PayPalHTTPClient() as client:
        ...     client.post("https://api-m.sandbox.paypal.com/v1/tracking", '{}', callback)
    """

    def __init__(
        self,
        transport: Optional[HTTPClient] = None,
        *,
        dispatcher: Optional[CallbackDispatcher] = None,
        debug: bool = False,
        certificate_source: Callable[[], IO] = paypal_certificate_stream
    ):
        self._owns_transport = transport is None
        self._transport = transport if transport is not None else HTTPClient(dispatcher=dispatcher)
        self._transport.set_user_agent(paypal_user_agent(debug=debug))
        self._transport.set_connect_timeout(PAYPAL_CONNECT_TIMEOUT)

        try:
            self._transport.set_trust_provider(TLSTrustProvider.pinned(certificate_source()))
        except (TLSSetupError, OSError) as e:
            logger.warning("PayPal certificate pinning unavailable, keeping current trust provider: %s", e)

    @property
    def transport(self) -> HTTPClient:
        return self._transport

    @property
    def config(self) -> ClientConfig:
        return self._transport.config

    def set_base_url(self, base_url: Optional[str]) -> 'PayPalHTTPClient':
        self._transport.set_base_url(base_url)
        return self

    def get(self, path: Optional[str], callback: Optional[HttpResponseCallback] = None) -> Future:
        return self._transport.get(path, callback)

    def post(
        self,
        path: Optional[str],
        data: Optional[str],
        callback: Optional[HttpResponseCallback] = None
    ) -> Future:
        return self._transport.post(path, data, callback)

    def post_sync(self, path: Optional[str], data: Optional[str]) -> Optional[str]:
        return self._transport.post_sync(path, data)

    def init_request(self, request: PendingRequest) -> requests.Request:
        return self._transport.init_request(request)

    def close(self):
        if self._owns_transport:
            self._transport.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
