# src/gateway_http/utils/sanitizer.py
"""
Маскирование чувствительных данных перед логированием.

Защищает credential material (Client-Key, authorizationFingerprint, токены)
от попадания в логи.
"""

import re
from typing import Any, Dict

MASK = "***REDACTED***"

# Чувствительные поля (case-insensitive, частичное совпадение)
SENSITIVE_KEYS = {
    # Credentials gateway
    'client-key', 'client_key', 'tokenization_key', 'tokenizationkey',
    'authorizationfingerprint', 'authorization_fingerprint', 'fingerprint',
    # Токены
    'token', 'access_token', 'refresh_token', 'client_token',
    # Аутентификация
    'authorization', 'password', 'secret', 'api_key', 'apikey',
    # Сессии и куки
    'cookie', 'session_id',
    # Платежи
    'card_number', 'cvv', 'cvc',
}

# Регулярные выражения для строк (URL, тела запросов, сообщения)
SENSITIVE_PATTERNS = [
    # Query параметр: ?authorizationFingerprint=... или &authorizationFingerprint=...
    (re.compile(r'([?&]authorization_?fingerprint=)([^&#\s]+)', re.IGNORECASE), r'\1' + MASK),
    # JSON поле: "authorizationFingerprint": "..."
    (re.compile(r'("authorization_?fingerprint"\s*:\s*")([^"]*)(")', re.IGNORECASE), r'\1' + MASK + r'\3'),
    # Заголовок Client-Key: ...
    (re.compile(r'(Client-Key[\s:=]+)([^\s,;]+)', re.IGNORECASE), r'\1' + MASK),
    # Bearer tokens
    (re.compile(r'(Bearer\s+)([A-Za-z0-9\-._~+/]+=*)', re.IGNORECASE), r'\1' + MASK),
]


def mask_sensitive_data(data: Any, mask: str = MASK) -> Any:
    """
    Рекурсивно маскирует чувствительные данные в словарях, списках, строках.

    Args:
        data: Данные для маскирования
        mask: Строка-заменитель

    Returns:
        Копия данных с замаскированными чувствительными полями

    Examples:
        >>> mask_sensitive_data({"Client-Key": "sandbox_abc_merchant", "method": "GET"})
        {'Client-Key': '***REDACTED***', 'method': 'GET'}

        >>> mask_sensitive_data("https://api.example.com/v1?authorizationFingerprint=abc")
        'https://api.example.com/v1?authorizationFingerprint=***REDACTED***'
    """
    if data is None or isinstance(data, (bool, int, float)):
        return data

    if isinstance(data, str):
        return _mask_string(data, mask)

    if isinstance(data, dict):
        return _mask_dict(data, mask)

    if isinstance(data, (list, tuple)):
        return type(data)(mask_sensitive_data(item, mask) for item in data)

    return data


def _mask_dict(data: Dict[Any, Any], mask: str) -> Dict[Any, Any]:
    result = {}
    for key, value in data.items():
        if is_sensitive_key(str(key)):
            result[key] = mask
        else:
            result[key] = mask_sensitive_data(value, mask)
    return result


def _mask_string(text: str, mask: str) -> str:
    result = text
    for pattern, replacement in SENSITIVE_PATTERNS:
        if mask != MASK:
            replacement = replacement.replace(MASK, mask)
        result = pattern.sub(replacement, result)
    return result


def is_sensitive_key(key: str) -> bool:
    """Проверяет, является ли ключ чувствительным (case-insensitive)."""
    key_lower = key.lower()
    return any(sensitive in key_lower for sensitive in SENSITIVE_KEYS)


def mask_headers(headers: Dict[str, str], mask: str = MASK) -> Dict[str, str]:
    """
    Маскирует чувствительные HTTP заголовки.

    Examples:
        >>> mask_headers({"Client-Key": "sandbox_abc_merchant", "User-Agent": "gateway-http/core/1.0"})
        {'Client-Key': '***REDACTED***', 'User-Agent': 'gateway-http/core/1.0'}
    """
    return _mask_dict(dict(headers), mask)
