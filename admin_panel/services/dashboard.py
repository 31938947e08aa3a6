"""
Сценарии страниц админ-панели поверх клиента API.

Каждая страница работает одинаково: загрузить страницу записей, при
необходимости отфильтровать её на клиенте, выполнить изменение и заново
загрузить текущий список. Кэша и оптимистичных изменений нет.
"""

import asyncio
import logging
import math
import re
from typing import Generic, List, Optional, Tuple, TypeVar, Union
from pydantic import BaseModel

from ..config import settings
from ..models import (
    Category,
    LoginResponse,
    Order,
    Page,
    Payment,
    PaymentStatus,
    Product,
    ProductForm,
    User,
)
from .api_client import AdminApiClient
from .formatting import page_count, page_offset


logger = logging.getLogger(__name__)

T = TypeVar("T")

# Сколько записей подгружается в выпадающие списки формы выдачи лицензии
LICENSE_FORM_OPTIONS_LIMIT = 200
MIN_PASSWORD_LENGTH = 6

LEADING_NUMBER = re.compile(r"\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


class ListView(BaseModel, Generic[T]):
    """Текущая страница списка, как её видит администратор."""
    items: List[T] = []
    total: int = 0
    page: int = 0
    per_page: int = 10

    @property
    def page_count(self) -> int:
        return page_count(self.total, self.per_page)

    @property
    def has_previous(self) -> bool:
        return self.page > 0

    @property
    def has_next(self) -> bool:
        return self.page + 1 < self.page_count


# ==================== Фильтры ====================

def filter_users(users: List[User], query: str) -> List[User]:
    """Поиск по имени и email без учёта регистра."""
    if not query.strip():
        return list(users)
    query = query.lower()
    return [
        user for user in users
        if query in user.name.lower() or query in user.email.lower()
    ]


def filter_orders_by_status(orders: List[Order], status: str = "all") -> List[Order]:
    if status == "all":
        return list(orders)
    return [order for order in orders if order.status == status]


def filter_licenses(orders: List[Order], redeemed: str = "all", search: str = "") -> List[Order]:
    """
    Фильтр списка лицензий.

    Args:
        orders: Оплаченные заказы
        redeemed: "all", "redeemed" или "not_redeemed"
        search: Подстрока для поиска по ключу лицензии, товару и покупателю
    """
    result = list(orders)

    if redeemed == "redeemed":
        result = [order for order in result if order.license_redeemed is True]
    elif redeemed == "not_redeemed":
        result = [order for order in result if order.license_redeemed is False]

    if search:
        needle = search.lower()

        def matches(order: Order) -> bool:
            haystack = [order.license_id or ""]
            if order.product:
                haystack.append(order.product.name)
            if order.user:
                haystack.extend([order.user.name, order.user.email])
            return any(needle in value.lower() for value in haystack)

        result = [order for order in result if matches(order)]

    return result


def parse_license_total(text: Optional[str]) -> Optional[Union[int, float]]:
    """
    Сумма из поля формы выдачи лицензии.

    Пустое или нечисловое значение - None (цена товара по умолчанию),
    "0" - бесплатная лицензия, "150000 IDR" - 150000.
    """
    if text is None:
        return None
    # Как parseFloat: берётся число в начале строки, хвост отбрасывается
    match = LEADING_NUMBER.match(text)
    if not match:
        return None
    value = float(match.group(0))
    if not math.isfinite(value):
        return None
    return int(value) if value.is_integer() else value


# ==================== Сценарии ====================

class AdminDashboard:
    """Сценарии страниц админ-панели."""

    def __init__(self, client: AdminApiClient, per_page: int = settings.ITEMS_PER_PAGE):
        self.client = client
        self.per_page = per_page

    def _view(self, page: Page, items: List, number: int) -> ListView:
        return ListView(
            items=items,
            total=page.total,
            page=number,
            per_page=self.per_page,
        )

    # ---------- Сессия ----------

    @property
    def is_authenticated(self) -> bool:
        return self.client.session.is_authenticated

    async def login(self, email: str, password: str) -> LoginResponse:
        return await self.client.admin_login(email, password)

    def logout(self) -> None:
        self.client.clear_token()

    # ---------- Пользователи ----------

    async def load_users(self, page: int = 0, search: str = "") -> ListView[User]:
        result = await self.client.get_users(self.per_page, page_offset(page, self.per_page))
        return self._view(result, filter_users(result.data, search), page)

    async def save_user(self, user_id: str, page: int = 0, **fields) -> ListView[User]:
        await self.client.update_user(user_id, **fields)
        return await self.load_users(page)

    async def set_user_password(self, user_id: str, password: str, confirmation: str) -> None:
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        if password != confirmation:
            raise ValueError("Passwords do not match")
        await self.client.update_user_password(user_id, password)

    async def remove_user(self, user_id: str, page: int = 0) -> ListView[User]:
        await self.client.delete_user(user_id)
        return await self.load_users(page)

    # ---------- Категории ----------

    async def load_categories(self) -> List[Category]:
        return await self.client.get_categories()

    async def save_category(self, name: str, category_id: Optional[str] = None) -> List[Category]:
        if category_id:
            await self.client.update_category(category_id, name)
        else:
            await self.client.create_category(name)
        return await self.load_categories()

    async def remove_category(self, category_id: str) -> List[Category]:
        await self.client.delete_category(category_id)
        return await self.load_categories()

    # ---------- Товары ----------

    async def load_products(
        self,
        page: int = 0,
        platform: str = "",
        category: str = "",
        search: str = ""
    ) -> ListView[Product]:
        result = await self.client.get_products(
            self.per_page,
            page_offset(page, self.per_page),
            platform,
            category,
            search,
        )
        return self._view(result, result.data, page)

    async def save_product(
        self,
        form: ProductForm,
        product_id: Optional[str] = None,
        page: int = 0
    ) -> ListView[Product]:
        if product_id:
            await self.client.update_product(product_id, form)
        else:
            await self.client.create_product(form)
        return await self.load_products(page)

    async def remove_product(self, product_id: str, page: int = 0) -> ListView[Product]:
        await self.client.delete_product(product_id)
        return await self.load_products(page)

    # ---------- Оплаты ----------

    async def load_pending_payments(self, page: int = 0) -> ListView[Payment]:
        result = await self.client.get_pending_payments(self.per_page, page_offset(page, self.per_page))
        return self._view(result, result.data, page)

    async def review_payment(self, payment_id: str, approve: bool, page: int = 0) -> ListView[Payment]:
        """Подтверждает или отклоняет перевод и перезагружает очередь проверки."""
        status = PaymentStatus.APPROVED if approve else PaymentStatus.REJECTED
        await self.client.approve_payment(payment_id, status.value)
        return await self.load_pending_payments(page)

    # ---------- Транзакции ----------

    async def load_transactions(self, page: int = 0, status: str = "all") -> ListView[Order]:
        result = await self.client.get_all_orders(self.per_page, page_offset(page, self.per_page))
        return self._view(result, filter_orders_by_status(result.data, status), page)

    # ---------- Лицензии ----------

    async def load_licenses(self, page: int = 0, redeemed: str = "all", search: str = "") -> ListView[Order]:
        result = await self.client.get_paid_orders(self.per_page, page_offset(page, self.per_page))
        return self._view(result, filter_licenses(result.data, redeemed, search), page)

    async def toggle_license_redeemed(self, order: Order, page: int = 0) -> ListView[Order]:
        await self.client.update_license_redeemed(order.id, not bool(order.license_redeemed))
        return await self.load_licenses(page)

    async def load_license_form_options(self) -> Tuple[List[Product], List[User]]:
        """Товары и пользователи для формы выдачи лицензии (запрашиваются параллельно)."""
        products, users = await asyncio.gather(
            self.client.get_products(LICENSE_FORM_OPTIONS_LIMIT, 0, "", "", ""),
            self.client.get_users(LICENSE_FORM_OPTIONS_LIMIT, 0),
        )
        return products.data, users.data

    async def issue_license(self, product_id: str, user_id: str, total_text: Optional[str] = None) -> Order:
        """Выдаёт лицензию; сумма берётся из текстового поля формы."""
        if not product_id or not user_id:
            raise ValueError("Please select a product and a user")
        order = await self.client.create_license(product_id, user_id, parse_license_total(total_text))
        logger.info(f"[DASHBOARD] License {order.license_id} issued for user {user_id}")
        return order
