"""
Модели заказа и лицензии.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional, Union
from pydantic import BaseModel

from .product import Product
from .user import User


class OrderStatus(str, Enum):
    """Известные статусы заказа. Неизвестные значения сохраняются как есть."""
    PENDING = "pending"
    WAITING_PAYMENT = "waiting_payment"
    PAID = "paid"
    CANCELLED = "cancelled"
    FAILED = "failed"
    EXPIRED = "expired"


class Order(BaseModel):
    """Заказ товара; после оплаты к нему привязывается лицензия."""
    id: str
    user_id: str
    user: Optional[User] = None
    product_id: str
    product: Optional[Product] = None
    status: str = OrderStatus.PENDING.value
    total: Decimal = Decimal("0")
    duitku_reference: Optional[str] = None
    merchant_order_id: Optional[str] = None
    license_id: Optional[str] = None
    license_redeemed: Optional[bool] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        extra = "allow"

    @property
    def has_license(self) -> bool:
        """Выдана ли лицензия (license_redeemed имеет смысл только тогда)."""
        return bool(self.license_id)

    @property
    def is_redeemed(self) -> bool:
        return self.has_license and bool(self.license_redeemed)


class LicenseCreate(BaseModel):
    """Тело запроса на выдачу лицензии администратором."""
    product_id: str
    user_id: str
    total: Optional[Union[int, float]] = None
