"""
Общие модели ответов API: пагинация и служебные ответы.
"""

import math
from typing import Generic, List, Optional, TypeVar
from pydantic import BaseModel, Field, field_validator

from .user import User


T = TypeVar("T")


class Page(BaseModel, Generic[T]):
    """Конверт пагинации `{data, total}` списочных эндпоинтов."""
    data: List[T] = Field(default_factory=list)
    total: int = 0

    @field_validator("data", mode="before")
    @classmethod
    def null_data_to_empty(cls, value):
        # Backend отдаёт null вместо пустого списка
        return [] if value is None else value

    def page_count(self, per_page: int) -> int:
        """Количество страниц при заданном размере страницы."""
        if per_page <= 0:
            return 0
        return math.ceil(self.total / per_page)


class MessageResponse(BaseModel):
    """Ответ вида `{message}` (удаление, смена пароля)."""
    message: Optional[str] = None

    class Config:
        extra = "allow"


class LoginResponse(BaseModel):
    """Ответ на вход администратора."""
    token: str
    user: User


class RegisterResponse(BaseModel):
    """Ответ на регистрацию администратора."""
    message: Optional[str] = None
    user: User
