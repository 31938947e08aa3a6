"""
Вспомогательные функции отображения: цены, статусы, пагинация.
"""

import math
from decimal import Decimal, ROUND_HALF_UP
from typing import Union

from ..models.order import OrderStatus


ORDER_STATUS_LABELS = {
    OrderStatus.PAID.value: "Paid",
    OrderStatus.WAITING_PAYMENT.value: "Waiting Payment",
    OrderStatus.PENDING.value: "Pending",
    OrderStatus.CANCELLED.value: "Cancelled",
    OrderStatus.FAILED.value: "Failed",
    OrderStatus.EXPIRED.value: "Expired",
}


def format_price(amount: Union[Decimal, int, float]) -> str:
    """
    Форматирует сумму в рупиях без дробной части с группировкой id-ID.

    Example:
        format_price(150000) -> "Rp 150.000"
    """
    number = Decimal(str(amount))
    if number.is_nan():
        return "Rp NaN"
    if number.is_infinite():
        return "Rp -∞" if number.is_signed() else "Rp ∞"

    rounded = number.quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    grouped = f"{abs(int(rounded)):,}".replace(",", ".")
    # -0.4 округляется до "-0", как в Intl.NumberFormat
    sign = "-" if rounded.is_signed() else ""
    return f"Rp {sign}{grouped}"


def order_status_label(status: str) -> str:
    """Подпись статуса заказа; неизвестный статус возвращается как есть."""
    return ORDER_STATUS_LABELS.get(status, status)


def page_offset(page: int, per_page: int) -> int:
    """Смещение для страницы с нулевым индексом."""
    return max(0, page) * per_page


def page_count(total: int, per_page: int) -> int:
    if per_page <= 0:
        return 0
    return math.ceil(total / per_page)
