"""
Клиент admin API маркетплейса.

Единая точка, через которую админ-панель общается с backend: формирует
HTTP-запросы, подставляет Bearer-токен, разбирает JSON-ответы в модели и
приводит ошибки к одному виду.
"""

import logging
from typing import Any, Dict, List, Optional, Type, Union
import httpx
from pydantic import TypeAdapter, ValidationError

from ..config import settings
from ..models import (
    Category,
    LicenseCreate,
    LoginResponse,
    MessageResponse,
    Order,
    Page,
    Payment,
    PaymentStatus,
    Product,
    ProductForm,
    RegisterResponse,
    User,
    UserUpdate,
)
from .exceptions import MalformedResponseError, RequestFailedError
from .session import AdminSession, TokenStore


logger = logging.getLogger(__name__)

UNKNOWN_ERROR = "Unknown error"
REQUEST_FAILED = "Request failed"


def _error_message(response: httpx.Response) -> str:
    """Достаёт текст ошибки из тела ответа backend."""
    try:
        payload = response.json()
    except ValueError:
        return UNKNOWN_ERROR

    message = payload.get("error") if isinstance(payload, dict) else None
    if not message:
        return REQUEST_FAILED
    return str(message)


class AdminApiClient:
    """
    Асинхронный клиент admin API.

    Базовый URL фиксируется при создании. Токен хранится в сессии, которую
    можно передать явно; по умолчанию используется сессия поверх хранилища
    из настроек. Каждый запрос открывает собственный httpx.AsyncClient без
    таймаута, повторов и отмены.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        session: Optional[AdminSession] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self._base_url = (base_url or settings.API_URL).rstrip("/")
        self.session = session if session is not None else AdminSession(TokenStore(settings.TOKEN_DB_PATH))
        self._transport = transport

    @property
    def base_url(self) -> str:
        return self._base_url

    # ==================== Токен ====================

    def set_token(self, token: str) -> None:
        self.session.set_token(token)

    def clear_token(self) -> None:
        self.session.clear_token()

    # ==================== Транспорт ====================

    def _http(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self._transport, timeout=None)

    def _url(self, endpoint: str) -> str:
        return f"{self._base_url}{endpoint}"

    @staticmethod
    def _raise_for_status(method: str, endpoint: str, response: httpx.Response) -> None:
        if response.is_success:
            return

        message = _error_message(response)
        logger.warning(f"[API] {method} {endpoint} failed: {response.status_code} {message}")
        raise RequestFailedError(message, status_code=response.status_code)

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise MalformedResponseError(
                f"Malformed response: {e}",
                status_code=response.status_code
            ) from e

    async def _request(
        self,
        endpoint: str,
        method: str = "GET",
        body: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None
    ) -> Any:
        """
        JSON-запрос к API.

        Args:
            endpoint: Путь относительно базового URL
            method: HTTP метод
            body: JSON-тело запроса
            params: Параметры строки запроса

        Returns:
            Any: Разобранное JSON-тело ответа

        Raises:
            RequestFailedError: Если backend вернул статус не 2xx
            MalformedResponseError: Если тело успешного ответа не JSON
        """
        headers = {"Content-Type": "application/json"}
        headers.update(self.session.authorization_header())

        logger.debug(f"[API] {method} {endpoint} params={params}")

        async with self._http() as client:
            response = await client.request(
                method,
                self._url(endpoint),
                headers=headers,
                params=params,
                json=body,
            )

        self._raise_for_status(method, endpoint, response)
        return self._json(response)

    async def _upload(self, endpoint: str, method: str, form: ProductForm) -> Any:
        """
        Multipart-запрос для записи товара.

        Content-Type не задаётся: границу multipart выставляет httpx.
        Ошибочные статусы обрабатываются так же, как в JSON-запросах.
        """
        parts = await form.to_multipart()

        logger.debug(f"[API] {method} {endpoint} multipart parts={[name for name, _ in parts]}")

        async with self._http() as client:
            response = await client.request(
                method,
                self._url(endpoint),
                headers=self.session.authorization_header(),
                files=parts,
            )

        self._raise_for_status(method, endpoint, response)
        return self._json(response)

    @staticmethod
    def _validate(schema: Union[Type, Any], payload: Any) -> Any:
        """Проверяет ответ по модели; несовпадение - MalformedResponseError."""
        try:
            return TypeAdapter(schema).validate_python(payload)
        except ValidationError as e:
            logger.warning(f"[API] Response does not match {schema}: {e.error_count()} errors")
            raise MalformedResponseError(f"Malformed response: {e.error_count()} validation errors") from e

    @staticmethod
    def _paging(limit: int, offset: int) -> Dict[str, int]:
        return {"limit": int(limit), "offset": int(offset)}

    # ==================== Авторизация ====================

    async def admin_register(self, email: str, password: str, name: str) -> RegisterResponse:
        payload = await self._request(
            "/admin/register",
            method="POST",
            body={"email": email, "password": password, "name": name},
        )
        return self._validate(RegisterResponse, payload)

    async def admin_login(self, email: str, password: str) -> LoginResponse:
        """Вход администратора; полученный токен сохраняется в сессии."""
        payload = await self._request(
            "/admin/login",
            method="POST",
            body={"email": email, "password": password},
        )
        result = self._validate(LoginResponse, payload)
        if result.token:
            self.set_token(result.token)
        logger.info(f"[API] Admin logged in: {result.user.email}")
        return result

    # ==================== Пользователи ====================

    async def get_users(self, limit: int = 10, offset: int = 0) -> Page[User]:
        payload = await self._request("/admin/users", params=self._paging(limit, offset))
        return self._validate(Page[User], payload)

    async def get_user(self, user_id: str) -> User:
        payload = await self._request(f"/admin/users/{user_id}")
        return self._validate(User, payload)

    async def update_user(self, user_id: str, **fields: Any) -> User:
        """Частичное обновление: отправляются только переданные поля."""
        data = UserUpdate(**fields).model_dump(exclude_unset=True)
        payload = await self._request(f"/admin/users/{user_id}", method="PUT", body=data)
        return self._validate(User, payload)

    async def update_user_password(self, user_id: str, password: str) -> MessageResponse:
        payload = await self._request(
            f"/admin/users/{user_id}/password",
            method="PUT",
            body={"password": password},
        )
        return self._validate(MessageResponse, payload)

    async def delete_user(self, user_id: str) -> MessageResponse:
        payload = await self._request(f"/admin/users/{user_id}", method="DELETE")
        return self._validate(MessageResponse, payload)

    # ==================== Категории ====================

    async def get_categories(self) -> List[Category]:
        payload = await self._request("/admin/categories")
        return self._validate(List[Category], payload or [])

    async def get_category(self, category_id: str) -> Category:
        payload = await self._request(f"/admin/categories/{category_id}")
        return self._validate(Category, payload)

    async def create_category(self, name: str) -> Category:
        payload = await self._request("/admin/categories", method="POST", body={"name": name})
        return self._validate(Category, payload)

    async def update_category(self, category_id: str, name: str) -> Category:
        payload = await self._request(
            f"/admin/categories/{category_id}",
            method="PUT",
            body={"name": name},
        )
        return self._validate(Category, payload)

    async def delete_category(self, category_id: str) -> MessageResponse:
        payload = await self._request(f"/admin/categories/{category_id}", method="DELETE")
        return self._validate(MessageResponse, payload)

    # ==================== Товары ====================

    async def get_products(
        self,
        limit: int = 10,
        offset: int = 0,
        platform: str = "",
        category: str = "",
        search: str = ""
    ) -> Page[Product]:
        """Список товаров. Пустые фильтры не попадают в строку запроса."""
        params: Dict[str, Any] = self._paging(limit, offset)
        if platform:
            params["platform"] = platform
        if category:
            params["category"] = category
        if search:
            params["search"] = search

        payload = await self._request("/admin/products", params=params)
        return self._validate(Page[Product], payload)

    async def get_product(self, product_id: str) -> Product:
        payload = await self._request(f"/admin/products/{product_id}")
        return self._validate(Product, payload)

    async def create_product(self, form: ProductForm) -> Any:
        return await self._upload("/admin/products", "POST", form)

    async def update_product(self, product_id: str, form: ProductForm) -> Any:
        return await self._upload(f"/admin/products/{product_id}", "PUT", form)

    async def delete_product(self, product_id: str) -> MessageResponse:
        payload = await self._request(f"/admin/products/{product_id}", method="DELETE")
        return self._validate(MessageResponse, payload)

    # ==================== Оплаты ====================

    async def get_pending_payments(self, limit: int = 10, offset: int = 0) -> Page[Payment]:
        payload = await self._request("/admin/payments/pending", params=self._paging(limit, offset))
        return self._validate(Page[Payment], payload)

    async def get_payment(self, payment_id: str) -> Payment:
        payload = await self._request(f"/admin/payments/{payment_id}")
        return self._validate(Payment, payload)

    async def approve_payment(self, payment_id: str, status: str) -> Payment:
        """Подтверждает или отклоняет перевод (status: approved | rejected)."""
        status = PaymentStatus(status).value
        if status == PaymentStatus.PENDING.value:
            raise ValueError("status must be 'approved' or 'rejected'")

        payload = await self._request(
            f"/admin/payments/{payment_id}/approve",
            method="PATCH",
            body={"status": status},
        )
        logger.info(f"[API] Payment {payment_id} {status}")
        return self._validate(Payment, payload)

    # ==================== Заказы и лицензии ====================

    async def get_all_orders(self, limit: int = 10, offset: int = 0) -> Page[Order]:
        payload = await self._request("/admin/orders", params=self._paging(limit, offset))
        return self._validate(Page[Order], payload)

    async def get_paid_orders(self, limit: int = 10, offset: int = 0) -> Page[Order]:
        payload = await self._request("/admin/orders/paid", params=self._paging(limit, offset))
        return self._validate(Page[Order], payload)

    async def update_license_redeemed(self, order_id: str, redeemed: bool) -> Order:
        payload = await self._request(
            f"/admin/orders/{order_id}/license",
            method="PATCH",
            body={"redeemed": bool(redeemed)},
        )
        return self._validate(Order, payload)

    async def create_license(
        self,
        product_id: str,
        user_id: str,
        total: Optional[Union[int, float]] = None
    ) -> Order:
        """
        Выдаёт лицензию пользователю напрямую.

        Без total ключ не отправляется вовсе (backend берёт цену товара);
        total=0 отправляется явно и означает бесплатную лицензию.
        """
        body = LicenseCreate(product_id=product_id, user_id=user_id, total=total)
        payload = await self._request(
            "/admin/licenses",
            method="POST",
            body=body.model_dump(exclude_none=True),
        )
        order = self._validate(Order, payload)
        logger.info(f"[API] License issued: order={order.id} license={order.license_id}")
        return order
