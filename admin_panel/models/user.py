"""
Модели пользователя.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel


class UserRole(str, Enum):
    """Роли пользователей маркетплейса."""
    ADMIN = "admin"
    MARKETPLACE = "marketplace"


class User(BaseModel):
    """Пользователь (администратор или покупатель маркетплейса)."""
    id: str
    email: str
    name: str = ""
    role: str = UserRole.MARKETPLACE.value  # информационное поле, ничего не ограничивает
    is_active: bool = True
    is_verified: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        extra = "allow"


class UserUpdate(BaseModel):
    """Частичное обновление пользователя: отправляются только заданные поля."""
    email: Optional[str] = None
    name: Optional[str] = None
    role: Optional[str] = None
    is_active: Optional[bool] = None
    is_verified: Optional[bool] = None

    class Config:
        extra = "forbid"
