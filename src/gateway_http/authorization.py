"""
Authorization variants bound to an authenticated client.

- ``TokenizationKey`` - long-lived opaque key, sent as the ``Client-Key`` header
- ``ClientToken`` - token carrying a short-lived authorization fingerprint,
  injected into the query string (GET) or JSON body (POST)
"""

import base64
import binascii
import json
import re
from dataclasses import dataclass, field
from typing import Optional

from .core.exceptions import InvalidArgumentError

# <environment>_<random>_<merchant id>
TOKENIZATION_KEY_PATTERN = re.compile(r"^[a-zA-Z0-9]+_[a-zA-Z0-9]+_[a-zA-Z0-9_]+$")

AUTHORIZATION_FINGERPRINT_KEY = "authorizationFingerprint"
CONFIG_URL_KEY = "configUrl"


class Authorization:
    """
    Базовый тип авторизации.

    Example:
        >>> Authorization.from_string("sandbox_k2y8w4hs_3t3qwz9fh8kn5t3b")
        TokenizationKey(key='sandbox_k2y8w4hs_3t3qwz9fh8kn5t3b')
    """

    @staticmethod
    def from_string(value: Optional[str]) -> 'Authorization':
        """
        Определить вариант авторизации по строке.

        Raises:
            InvalidArgumentError: Пустая строка или ни ключ, ни client token
        """
        if not value or not value.strip():
            raise InvalidArgumentError("Authorization provided is invalid: empty value")

        value = value.strip()
        if is_tokenization_key(value):
            return TokenizationKey(value)
        return ClientToken.from_string(value)


def is_tokenization_key(value: Optional[str]) -> bool:
    return bool(value) and TOKENIZATION_KEY_PATTERN.match(value) is not None


@dataclass(frozen=True)
class TokenizationKey(Authorization):
    """Opaque key sent verbatim as the ``Client-Key`` header."""

    key: str

    def __post_init__(self):
        if not self.key:
            raise InvalidArgumentError("Tokenization key cannot be empty")

    @property
    def environment(self) -> str:
        """``sandbox`` for ``sandbox_abc_merchant``."""
        return self.key.split("_", 1)[0]

    def __str__(self) -> str:
        return self.key


@dataclass(frozen=True)
class ClientToken(Authorization):
    """
    Token with an authorization fingerprint.

    Example:
        >>> token = ClientToken.from_string('{"authorizationFingerprint": "abc"}')
        >>> token.authorization_fingerprint
        'abc'
    """

    authorization_fingerprint: str
    config_url: Optional[str] = None
    raw: Optional[str] = field(default=None, repr=False, compare=False)

    def __post_init__(self):
        if not self.authorization_fingerprint:
            raise InvalidArgumentError("Authorization fingerprint cannot be empty")

    @classmethod
    def from_string(cls, value: str) -> 'ClientToken':
        """
        Разобрать client token: base64 или сырой JSON.

        Raises:
            InvalidArgumentError: Не JSON объект или нет authorizationFingerprint
        """
        payload = _decode_client_token(value)

        fingerprint = payload.get(AUTHORIZATION_FINGERPRINT_KEY)
        if not isinstance(fingerprint, str) or not fingerprint:
            raise InvalidArgumentError(
                f"Authorization provided is invalid: missing {AUTHORIZATION_FINGERPRINT_KEY}"
            )

        config_url = payload.get(CONFIG_URL_KEY)
        return cls(
            authorization_fingerprint=fingerprint,
            config_url=config_url if isinstance(config_url, str) else None,
            raw=value,
        )

    def __str__(self) -> str:
        return self.raw or self.authorization_fingerprint


def _decode_client_token(value: str) -> dict:
    text = value
    if not value.lstrip().startswith("{"):
        try:
            text = base64.b64decode(value, validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError, ValueError) as e:
            raise InvalidArgumentError("Authorization provided is invalid: not a client token") from e

    try:
        payload = json.loads(text)
    except ValueError as e:
        raise InvalidArgumentError("Authorization provided is invalid: malformed client token") from e

    if not isinstance(payload, dict):
        raise InvalidArgumentError("Authorization provided is invalid: client token is not a JSON object")
    return payload
