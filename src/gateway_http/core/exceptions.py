"""
Иерархия исключений Gateway HTTP.

Классификация:
- GatewayHTTPError - базовое исключение
- InvalidArgumentError, TLSSetupError, TLSNotConfiguredError, ClientClosedError - ошибки до отправки запроса
- HTTPStatusError - ответ сервера с не-2xx статусом

Сетевые ошибки (DNS, таймауты, TLS handshake, битый URL) НЕ оборачиваются:
они доходят до вызывающего кода как родные исключения requests.
"""

import json
from typing import Any, List, Optional

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# BASE
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class GatewayHTTPError(Exception):
    """Базовое исключение Gateway HTTP."""

    def __init__(self, message: str = ""):
        self.message = message
        super().__init__(message)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ОШИБКИ ДО ОТПРАВКИ ЗАПРОСА
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class InvalidArgumentError(GatewayHTTPError, ValueError):
    """Невалидный аргумент (например, path=None)."""
    pass

class TLSSetupError(GatewayHTTPError):
    """
    Не удалось подготовить TLS trust material.

    Примеры:
    - Пустой или битый поток сертификатов
    - Ни одного X.509 сертификата в потоке
    - Платформа не поддерживает нужную версию TLS
    """
    pass

class TLSNotConfiguredError(GatewayHTTPError):
    """HTTPS запрос без настроенного trust provider."""
    pass

class ClientClosedError(GatewayHTTPError):
    """Асинхронный запрос к клиенту после close()."""
    pass

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# HTTP СТАТУСЫ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class HTTPStatusError(GatewayHTTPError):
    """
    Базовая ошибка для не-2xx ответа.

    Args:
        message: Сообщение (обычно тело ответа)
        status_code: HTTP статус
        response_body: Сырое тело ответа
    """

    status_code: int = 0

    def __init__(
        self,
        message: str = "",
        status_code: Optional[int] = None,
        response_body: Optional[str] = None
    ):
        if status_code is not None:
            self.status_code = status_code
        self.response_body = message if response_body is None else response_body
        super().__init__(message)

class AuthenticationError(HTTPStatusError):
    """401 Unauthorized."""
    status_code = 401

class AuthorizationError(HTTPStatusError):
    """403 Forbidden."""
    status_code = 403

class UnprocessableEntityError(HTTPStatusError):
    """422 Unprocessable Entity."""
    status_code = 422

class UpgradeRequiredError(HTTPStatusError):
    """426 Upgrade Required."""
    status_code = 426

class RateLimitError(HTTPStatusError):
    """
    429 Too Many Requests.

    Сообщение всегда фиксированное, тело ответа доступно в response_body.
    """
    status_code = 429
    MESSAGE = "You are being rate-limited. Please try again in a few minutes."

    def __init__(self, response_body: Optional[str] = None):
        super().__init__(self.MESSAGE, response_body=response_body or "")

class ServerError(HTTPStatusError):
    """500 Internal Server Error."""
    status_code = 500

class DownForMaintenanceError(HTTPStatusError):
    """503 Service Unavailable."""
    status_code = 503

class UnexpectedError(HTTPStatusError):
    """Любой другой статус код."""
    pass

class ErrorWithResponse(HTTPStatusError):
    """
    Структурированная ошибка gateway.

    Сообщение берётся из поля ``error.message`` JSON тела ответа.

    Args:
        status_code: HTTP статус
        error_response: Сырое JSON тело ответа

    Examples:
        >>> error = ErrorWithResponse(422, '{"error": {"message": "There was an error"}}')
        >>> error.message
        'There was an error'
    """

    PARSE_FAILED_MESSAGE = "Parsing error response failed"

    def __init__(self, status_code: int, error_response: Optional[str]):
        self.error_response = error_response
        self.field_errors: List[Any] = []

        try:
            payload = json.loads(error_response or "")
            message = payload["error"]["message"]
            if not isinstance(message, str):
                raise TypeError("error.message is not a string")
            self.field_errors = list(payload.get("fieldErrors") or [])
        except (ValueError, TypeError, KeyError, AttributeError):
            message = self.PARSE_FAILED_MESSAGE

        super().__init__(message, status_code=status_code, response_body=error_response)

    def __repr__(self) -> str:
        return f"ErrorWithResponse({self.status_code}, {self.message!r})"
