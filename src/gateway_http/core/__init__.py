"""Core Gateway HTTP модули."""

from .config import TimeoutConfig, ClientConfig
from .exceptions import (
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
from .tls import TLSTrustProvider, TLSAdapter, enabled_protocols, supported_protocols
from .dispatcher import (
    Result,
    HttpResponseCallback,
    FunctionCallback,
    CallbackDispatcher,
    SerialDispatcher,
    QueueDispatcher,
    AsyncioDispatcher,
    InlineDispatcher,
)
from .http_client import HTTPClient
from .error_handler import ErrorHandler
from .context import PendingRequest

__all__ = [
    # Config
    "TimeoutConfig",
    "ClientConfig",
    # TLS
    "TLSTrustProvider",
    "TLSAdapter",
    "enabled_protocols",
    "supported_protocols",
    # Dispatch
    "Result",
    "HttpResponseCallback",
    "FunctionCallback",
    "CallbackDispatcher",
    "SerialDispatcher",
    "QueueDispatcher",
    "AsyncioDispatcher",
    "InlineDispatcher",
    # Core
    "HTTPClient",
    "ErrorHandler",
    "PendingRequest",
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
