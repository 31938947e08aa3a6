"""
Модели оплаты ручным переводом.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel

from .order import Order


class PaymentStatus(str, Enum):
    """Статусы проверки перевода."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Payment(BaseModel):
    """Оплата заказа с подтверждением перевода (изображение или PDF)."""
    id: str
    order_id: str
    order: Optional[Order] = None  # может отсутствовать, если backend его не вложил
    transfer_proof: str = ""
    status: str = PaymentStatus.PENDING.value
    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        extra = "allow"

    @property
    def is_pdf_proof(self) -> bool:
        return self.transfer_proof.lower().endswith(".pdf")
