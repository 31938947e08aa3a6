"""
Исключения клиента admin API.
"""

from typing import Optional


class ApiError(Exception):
    """Базовая ошибка запроса к API. Текст ошибки показывается пользователю как есть."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class RequestFailedError(ApiError):
    """Backend ответил статусом, отличным от 2xx."""


class MalformedResponseError(ApiError):
    """Успешный ответ не соответствует ожидаемой модели."""
