"""Pending request value passed from the caller to the worker pool."""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional
import uuid


@dataclass(frozen=True)
class PendingRequest:
    """One in-flight call.

    Attributes:
        method: HTTP method (GET или POST)
        url: Target URL, either absolute or relative to the base URL
        body: Serialized request body (POST only)
        headers: Request-specific headers on top of the base headers
        authorization: Authorization the request was issued under, if any
        request_id: Unique identifier, used in log records

    Example:
        >>> request = PendingRequest('POST', '/v1/payment_methods', body='{}')
        >>> request.with_header('Client-Key', 'sandbox_abc_merchant').headers
        {'Client-Key': 'sandbox_abc_merchant'}
    """

    method: str
    url: str
    body: Optional[str] = None
    headers: Dict[str, str] = field(default_factory=dict)
    authorization: Optional[Any] = None
    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def with_url(self, url: str) -> 'PendingRequest':
        return replace(self, url=url)

    def with_body(self, body: Optional[str]) -> 'PendingRequest':
        return replace(self, body=body)

    def with_header(self, name: str, value: str) -> 'PendingRequest':
        headers = dict(self.headers)
        headers[name] = value
        return replace(self, headers=headers)
