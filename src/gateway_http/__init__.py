"""Gateway HTTP - transport and authenticated clients for a payment gateway API."""

import logging
from importlib.metadata import version, PackageNotFoundError

from .core.http_client import HTTPClient
from .core.config import ClientConfig, TimeoutConfig
from .core.tls import TLSTrustProvider
from .core.context import PendingRequest
from .core.dispatcher import (
    Result,
    HttpResponseCallback,
    FunctionCallback,
    CallbackDispatcher,
    SerialDispatcher,
    QueueDispatcher,
    AsyncioDispatcher,
    InlineDispatcher,
)
from .core.exceptions import (
    GatewayHTTPError,
    InvalidArgumentError,
    TLSSetupError,
    TLSNotConfiguredError,
    ClientClosedError,
    HTTPStatusError,
    AuthenticationError,
    AuthorizationError,
    UnprocessableEntityError,
    UpgradeRequiredError,
    RateLimitError,
    ServerError,
    DownForMaintenanceError,
    UnexpectedError,
    ErrorWithResponse,
)
from .core.logging import LoggingConfig
from .core.env_config import load_from_env
from .authorization import Authorization, TokenizationKey, ClientToken
from .gateway_client import GatewayHTTPClient
from .paypal_client import PayPalHTTPClient
from .certificates import gateway_certificate_stream, paypal_certificate_stream

# Set up logging - add NullHandler to prevent "No handler found" warnings
# Users can configure logging themselves using logging.getLogger('gateway_http')
logging.getLogger('gateway_http').addHandler(logging.NullHandler())

try:
    __version__ = version("gateway-http-core")
except PackageNotFoundError:
    # Package is not installed (development mode)
    __version__ = "0.0.0-dev"

__all__ = [
    # Clients
    "HTTPClient",
    "GatewayHTTPClient",
    "PayPalHTTPClient",
    # Config
    "ClientConfig",
    "TimeoutConfig",
    "LoggingConfig",
    "load_from_env",
    # TLS
    "TLSTrustProvider",
    "gateway_certificate_stream",
    "paypal_certificate_stream",
    # Authorization
    "Authorization",
    "TokenizationKey",
    "ClientToken",
    # Dispatch
    "PendingRequest",
    "Result",
    "HttpResponseCallback",
    "FunctionCallback",
    "CallbackDispatcher",
    "SerialDispatcher",
    "QueueDispatcher",
    "AsyncioDispatcher",
    "InlineDispatcher",
    # Exceptions
    "GatewayHTTPError",
    "InvalidArgumentError",
    "TLSSetupError",
    "TLSNotConfiguredError",
    "ClientClosedError",
    "HTTPStatusError",
    "AuthenticationError",
    "AuthorizationError",
    "UnprocessableEntityError",
    "UpgradeRequiredError",
    "RateLimitError",
    "ServerError",
    "DownForMaintenanceError",
    "UnexpectedError",
    "ErrorWithResponse",
]
