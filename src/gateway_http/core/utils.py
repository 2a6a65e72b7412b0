"""
URL helpers for the transport.

Includes:
- base URL / path resolution
- query parameter appending
- URL sanitization for safe logging
"""

import locale
from typing import Optional
from urllib.parse import urlparse, urlencode, urlunparse

from ..utils.sanitizer import MASK, is_sensitive_key


def is_absolute_url(path: str) -> bool:
    """True if ``path`` already carries an http(s) scheme."""
    return path.lower().startswith(("http://", "https://"))


def is_https(url: str) -> bool:
    """True if ``url`` uses the https scheme."""
    return urlparse(url).scheme.lower() == "https"


def build_url(base_url: Optional[str], path: str) -> str:
    """
    Resolve ``path`` against ``base_url``.

    Absolute URLs are returned verbatim. An empty base URL leaves the bare path,
    which the transport rejects as a malformed URL.

    Examples:
        >>> build_url("https://api.example.com/", "/v1/configuration")
        'https://api.example.com/v1/configuration'
        >>> build_url("https://api.example.com", "https://other.example.com/x")
        'https://other.example.com/x'
        >>> build_url("", "/v1")
        'v1'
    """
    if is_absolute_url(path):
        return path

    endpoint = path.lstrip("/")
    if base_url:
        return f"{base_url.rstrip('/')}/{endpoint}"
    return endpoint


def append_query_parameter(url: str, name: str, value: str) -> str:
    """
    Append ``name=value`` to the query string.

    The existing query is kept byte for byte: only the new pair is encoded.

    Example:
        >>> append_query_parameter("https://api.example.com/v1?a=1", "authorizationFingerprint", "abc")
        'https://api.example.com/v1?a=1&authorizationFingerprint=abc'
    """
    parsed = urlparse(url)
    pair = urlencode([(name, value)])
    query = f"{parsed.query}&{pair}" if parsed.query else pair
    return urlunparse(parsed._replace(query=query))


def sanitize_url(url: str, mask: str = MASK) -> str:
    """
    Mask credential query parameters in URL for safe logging.

    Examples:
        >>> sanitize_url('https://api.example.com/v1?authorizationFingerprint=abc&page=1')
        'https://api.example.com/v1?authorizationFingerprint=***REDACTED***&page=1'
    """
    if not url:
        return url

    try:
        parsed = urlparse(url)
    except ValueError:
        return '<URL sanitization failed>'

    if not parsed.query:
        return url

    pairs = []
    for pair in parsed.query.split('&'):
        name, sep, _ = pair.partition('=')
        pairs.append(f"{name}={mask}" if sep and is_sensitive_key(name) else pair)
    return urlunparse(parsed._replace(query='&'.join(pairs)))


def default_language() -> str:
    """
    Language part of the process locale ("en" for "en_US"), "en" if unknown.

    Sent as ``Accept-Language``.
    """
    try:
        name = locale.getlocale()[0]
    except ValueError:
        name = None
    if not name or name in ("C", "POSIX"):
        return "en"
    return name.split("_")[0].split("-")[0].lower()
