# src/gateway_http/core/error_handler.py

from typing import Optional

from .exceptions import (
    AuthenticationError,
    AuthorizationError,
    DownForMaintenanceError,
    RateLimitError,
    ServerError,
    UnexpectedError,
    UnprocessableEntityError,
    UpgradeRequiredError,
)

SUCCESS_STATUSES = frozenset({200, 201, 202})


class ErrorHandler:
    """Класс для сопоставления HTTP статусов с исключениями"""

    @staticmethod
    def parse_response(status_code: int, body: Optional[str]) -> Optional[str]:
        """
        Возвращает тело ответа для 200/201/202, иначе поднимает исключение.

        Examples:
            >>> ErrorHandler.parse_response(201, '{"id": 1}')
            '{"id": 1}'
            >>> ErrorHandler.parse_response(429, 'slow down')
            Traceback (most recent call last):
            ...
            RateLimitError: You are being rate-limited. Please try again in a few minutes.
        """
        if status_code in SUCCESS_STATUSES:
            return body

        ErrorHandler.handle_http_error(status_code, body)

    @staticmethod
    def handle_http_error(status_code: int, body: Optional[str]) -> None:
        """Обрабатывает HTTP ошибки по статус коду"""

        message = body or ""

        if status_code == 401:
            raise AuthenticationError(message)

        elif status_code == 403:
            raise AuthorizationError(message)

        elif status_code == 422:
            raise UnprocessableEntityError(message)

        elif status_code == 426:
            raise UpgradeRequiredError(message)

        elif status_code == 429:
            raise RateLimitError(body)

        elif status_code == 500:
            raise ServerError(message)

        elif status_code == 503:
            raise DownForMaintenanceError(message)

        else:
            raise UnexpectedError(message, status_code=status_code)
