"""
Модели категорий и платформ.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class Category(BaseModel):
    """Категория товаров (плоский список, без вложенности)."""
    id: str
    name: str
    slug: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        extra = "allow"


class Platform(BaseModel):
    """Платформа приложения (ios, android, web, windows, macos...)."""
    id: str
    name: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        extra = "allow"
