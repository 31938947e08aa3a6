"""
Модели товара и формы товара для multipart-загрузки.
"""

import json
import mimetypes
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union
import aiofiles
from pydantic import BaseModel, Field, field_validator

from .category import Category, Platform


class Product(BaseModel):
    """Товар маркетплейса (приложение с файлом для скачивания)."""
    id: str
    name: str
    description: str = ""  # HTML из rich-text редактора
    price: Decimal = Field(Decimal("0"), ge=0)
    discount_percentage: Optional[float] = None
    platforms: List[Platform] = []
    categories: List[Category] = []
    main_image_url: str = ""
    additional_image_urls: List[str] = []
    file_url: str = ""
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        extra = "allow"

    @field_validator("platforms", "categories", "additional_image_urls", mode="before")
    @classmethod
    def null_to_empty(cls, value):
        return [] if value is None else value


# (имя файла, содержимое, content-type)
FilePart = Tuple[str, bytes, str]


def _number_to_text(value: Union[Decimal, int, float]) -> str:
    """Число в текст для формы: целые значения без дробной части."""
    number = Decimal(str(value))
    if number == number.to_integral_value():
        return str(int(number))
    return format(number.normalize(), "f")


async def _read_file_part(path: Path) -> FilePart:
    """Читает файл с диска и готовит бинарную часть multipart."""
    async with aiofiles.open(path, "rb") as f:
        content = await f.read()
    content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    return path.name, content, content_type


class ProductForm(BaseModel):
    """
    Форма создания/редактирования товара.
    
    Превращается в multipart-тело: текстовые поля, списки ID платформ и
    категорий в виде JSON-строк и бинарные части для изображений и файла.
    """
    name: str = Field(..., min_length=1)
    description: str = ""
    price: Decimal = Field(..., ge=0)
    platform_ids: List[str] = []
    category_ids: List[str] = []
    is_active: bool = True
    main_image: Optional[Path] = None
    additional_images: List[Path] = []
    file: Optional[Path] = None

    def text_fields(self) -> Dict[str, str]:
        """Текстовые части формы (списки ID отправляются всегда, даже пустые)."""
        return {
            "name": self.name,
            "description": self.description,
            "price": _number_to_text(self.price),
            "platform_ids": json.dumps(self.platform_ids),
            "category_ids": json.dumps(self.category_ids),
            "is_active": "true" if self.is_active else "false",
        }

    async def file_parts(self) -> List[Tuple[str, FilePart]]:
        """
        Бинарные части формы.
        
        Returns:
            List[Tuple[str, FilePart]]: пары (имя поля, файл) в формате httpx
        """
        parts: List[Tuple[str, FilePart]] = []
        if self.main_image:
            parts.append(("main_image", await _read_file_part(self.main_image)))
        for image in self.additional_images:
            parts.append(("additional_images", await _read_file_part(image)))
        if self.file:
            parts.append(("file", await _read_file_part(self.file)))
        return parts

    async def to_multipart(self) -> List[Tuple[str, tuple]]:
        """
        Все части формы в порядке отправки.

        Текстовые поля передаются как части без имени файла, поэтому тело
        остаётся multipart/form-data даже без вложений.
        """
        parts: List[Tuple[str, tuple]] = [
            (key, (None, value.encode("utf-8")))
            for key, value in self.text_fields().items()
        ]
        parts.extend(await self.file_parts())
        return parts
