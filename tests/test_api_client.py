"""
Контракт запросов и ответов AdminApiClient.
"""

import json
from decimal import Decimal
from unittest.mock import Mock
import httpx
import pytest

from admin_panel.models import Category, Order, Page, Payment, Product, User
from admin_panel.services import (
    AdminApiClient,
    AdminSession,
    ApiError,
    MalformedResponseError,
    RequestFailedError,
    TokenStore,
)
from conftest import BASE_URL
from payloads import order_payload, payment_payload, product_payload, user_payload


# ==================== Авторизация и заголовки ====================

async def test_no_authorization_header_without_token(client, recorder):
    recorder.reply(json_body=[])

    await client.get_categories()

    assert "authorization" not in recorder.last.headers
    assert recorder.last.headers["content-type"] == "application/json"


async def test_authorization_header_after_set_token(client, recorder):
    client.set_token("tok-123")
    recorder.reply(json_body=[])

    await client.get_categories()

    assert recorder.last.headers["authorization"] == "Bearer tok-123"


async def test_clear_token_removes_authorization_header(client, recorder):
    client.set_token("tok-123")
    client.clear_token()
    recorder.reply(json_body=[])

    await client.get_categories()

    assert "authorization" not in recorder.last.headers


async def test_login_stores_token_for_following_requests(make_client, recorder):
    store = Mock(spec=TokenStore)
    store.load.return_value = None
    client = make_client(AdminSession(store))
    recorder.reply(json_body={"token": "fresh-token", "user": user_payload(role="admin")})
    recorder.reply(json_body={"data": [], "total": 0})

    result = await client.admin_login("admin@example.com", "secret123")
    await client.get_users()

    assert result.token == "fresh-token"
    assert result.user.role == "admin"
    assert recorder.requests[0].url == f"{BASE_URL}/admin/login"
    assert recorder.requests[0].method == "POST"
    assert recorder.last.headers["authorization"] == "Bearer fresh-token"
    store.save.assert_called_once_with("fresh-token")
    store.load.assert_called_once()


async def test_login_failure_uses_backend_error_message(client, recorder):
    recorder.reply(401, json_body={"error": "invalid credentials"})

    with pytest.raises(RequestFailedError) as exc_info:
        await client.admin_login("admin@example.com", "wrong")

    assert str(exc_info.value) == "invalid credentials"
    assert exc_info.value.status_code == 401
    assert client.session.token is None


async def test_unparseable_error_body_falls_back_to_unknown_error(client, recorder):
    recorder.reply(502, text="<html>Bad gateway</html>")

    with pytest.raises(RequestFailedError) as exc_info:
        await client.admin_login("admin@example.com", "secret123")

    assert str(exc_info.value) == "Unknown error"


async def test_error_body_without_error_field(client, recorder):
    recorder.reply(500, json_body={"detail": "boom"})

    with pytest.raises(ApiError) as exc_info:
        await client.get_users()

    assert exc_info.value.message == "Request failed"


async def test_register_sends_credentials(client, recorder):
    recorder.reply(json_body={"message": "registered", "user": user_payload(role="admin")})

    result = await client.admin_register("new@example.com", "secret123", "New Admin")

    assert recorder.last_json() == {"email": "new@example.com", "password": "secret123", "name": "New Admin"}
    assert result.message == "registered"


async def test_transport_errors_are_not_wrapped(session):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = AdminApiClient(base_url=BASE_URL, session=session, transport=httpx.MockTransport(handler))

    with pytest.raises(httpx.ConnectError):
        await client.get_categories()


def test_base_url_is_fixed_at_construction(session):
    client = AdminApiClient(base_url="http://example.test/api/", session=session)

    assert client.base_url == "http://example.test/api"
    with pytest.raises(AttributeError):
        client.base_url = "http://other.test"


# ==================== Ответы ====================

async def test_malformed_success_payload(client, recorder):
    recorder.reply(json_body={"data": [{"name": "no id"}], "total": 1})

    with pytest.raises(MalformedResponseError):
        await client.get_users()


async def test_non_json_success_body(client, recorder):
    recorder.reply(200, text="OK")

    with pytest.raises(MalformedResponseError):
        await client.get_user("u-1")


async def test_null_page_data_becomes_empty_list(client, recorder):
    recorder.reply(json_body={"data": None, "total": 0})

    page = await client.get_all_orders()

    assert page.data == []
    assert page.total == 0


async def test_unknown_order_status_is_kept(client, recorder):
    recorder.reply(json_body={"data": [order_payload(status="refunded")], "total": 1})

    page = await client.get_all_orders()

    assert page.data[0].status == "refunded"


async def test_payment_without_embedded_order(client, recorder):
    recorder.reply(json_body={"data": [payment_payload()], "total": 1})

    page = await client.get_pending_payments()

    assert isinstance(page.data[0], Payment)
    assert page.data[0].order is None


# ==================== Пользователи ====================

async def test_get_users_pagination(client, recorder):
    recorder.reply(json_body={"data": [user_payload()], "total": 25})

    page = await client.get_users(10, 20)

    assert recorder.last.url.path == "/api/admin/users"
    assert dict(recorder.last.url.params) == {"limit": "10", "offset": "20"}
    assert isinstance(page, Page)
    assert isinstance(page.data[0], User)
    assert page.total == 25
    assert page.page_count(10) == 3


async def test_update_user_sends_only_given_fields(client, recorder):
    recorder.reply(json_body=user_payload(is_active=False))

    user = await client.update_user("u-1", is_active=False)

    assert recorder.last.method == "PUT"
    assert recorder.last.url == f"{BASE_URL}/admin/users/u-1"
    assert recorder.last_json() == {"is_active": False}
    assert user.is_active is False


async def test_update_user_rejects_unknown_fields(client, recorder):
    with pytest.raises(ValueError):
        await client.update_user("u-1", nickname="budi")

    assert recorder.requests == []


async def test_update_user_password(client, recorder):
    recorder.reply(json_body={"message": "password updated"})

    await client.update_user_password("u-1", "newsecret")

    assert recorder.last.method == "PUT"
    assert recorder.last.url == f"{BASE_URL}/admin/users/u-1/password"
    assert recorder.last_json() == {"password": "newsecret"}


async def test_delete_user(client, recorder):
    recorder.reply(json_body={"message": "user deleted"})

    result = await client.delete_user("u-1")

    assert recorder.last.method == "DELETE"
    assert recorder.last.url == f"{BASE_URL}/admin/users/u-1"
    assert result.message == "user deleted"


# ==================== Категории ====================

async def test_category_crud_paths(client, recorder):
    category = {"id": "c-1", "name": "Games", "slug": "games"}
    recorder.reply(json_body=[category])
    recorder.reply(json_body=category)
    recorder.reply(json_body=category)
    recorder.reply(json_body=category)
    recorder.reply(json_body={"message": "category deleted"})

    categories = await client.get_categories()
    await client.get_category("c-1")
    await client.create_category("Games")
    await client.update_category("c-1", "Games")
    await client.delete_category("c-1")

    calls = [(r.method, r.url.path) for r in recorder.requests]
    assert calls == [
        ("GET", "/api/admin/categories"),
        ("GET", "/api/admin/categories/c-1"),
        ("POST", "/api/admin/categories"),
        ("PUT", "/api/admin/categories/c-1"),
        ("DELETE", "/api/admin/categories/c-1"),
    ]
    assert isinstance(categories[0], Category)
    assert json.loads(recorder.requests[2].content) == {"name": "Games"}


async def test_get_categories_null_body(client, recorder):
    recorder.reply(json_body=None)

    assert await client.get_categories() == []


# ==================== Товары ====================

async def test_get_products_omits_empty_filters(client, recorder):
    recorder.reply(json_body={"data": [product_payload()], "total": 1})

    page = await client.get_products(10, 0, "", "", "")

    assert dict(recorder.last.url.params) == {"limit": "10", "offset": "0"}
    assert isinstance(page.data[0], Product)
    assert page.data[0].price == Decimal("150000")


async def test_get_products_passes_filters_verbatim(client, recorder):
    recorder.reply(json_body={"data": [], "total": 0})

    await client.get_products(5, 10, "android", "c-1", "kasir pro")

    params = recorder.last.url.params
    assert params["limit"] == "5"
    assert params["offset"] == "10"
    assert params["platform"] == "android"
    assert params["category"] == "c-1"
    assert params["search"] == "kasir pro"


async def test_get_and_delete_product(client, recorder):
    recorder.reply(json_body=product_payload(platforms=None, categories=None))
    recorder.reply(json_body={"message": "product deleted"})

    product = await client.get_product("p-1")
    await client.delete_product("p-1")

    assert product.platforms == []
    assert recorder.requests[0].url.path == "/api/admin/products/p-1"
    assert recorder.last.method == "DELETE"


# ==================== Оплаты ====================

async def test_get_pending_payments(client, recorder):
    recorder.reply(json_body={"data": [payment_payload(order=order_payload())], "total": 1})

    page = await client.get_pending_payments(10, 10)

    assert recorder.last.url.path == "/api/admin/payments/pending"
    assert dict(recorder.last.url.params) == {"limit": "10", "offset": "10"}
    assert isinstance(page.data[0].order, Order)


async def test_get_payment(client, recorder):
    recorder.reply(json_body=payment_payload())

    payment = await client.get_payment("pay-1")

    assert recorder.last.url.path == "/api/admin/payments/pay-1"
    assert payment.status == "pending"


@pytest.mark.parametrize("status", ["approved", "rejected"])
async def test_approve_payment(client, recorder, status):
    recorder.reply(json_body=payment_payload(status=status, approved_by="admin-1"))

    payment = await client.approve_payment("pay-1", status)

    assert recorder.last.method == "PATCH"
    assert recorder.last.url.path == "/api/admin/payments/pay-1/approve"
    assert recorder.last_json() == {"status": status}
    assert payment.status == status


@pytest.mark.parametrize("status", ["pending", "paid"])
async def test_approve_payment_rejects_other_statuses(client, recorder, status):
    with pytest.raises(ValueError):
        await client.approve_payment("pay-1", status)

    assert recorder.requests == []


# ==================== Заказы и лицензии ====================

async def test_order_list_paths(client, recorder):
    recorder.reply(json_body={"data": [order_payload()], "total": 1})
    recorder.reply(json_body={"data": [order_payload()], "total": 1})

    await client.get_all_orders(10, 0)
    await client.get_paid_orders(10, 30)

    assert recorder.requests[0].url.path == "/api/admin/orders"
    assert recorder.requests[1].url.path == "/api/admin/orders/paid"
    assert dict(recorder.requests[1].url.params) == {"limit": "10", "offset": "30"}


async def test_update_license_redeemed(client, recorder):
    recorder.reply(json_body=order_payload(license_redeemed=True))

    order = await client.update_license_redeemed("o-1", True)

    assert recorder.last.method == "PATCH"
    assert recorder.last.url.path == "/api/admin/orders/o-1/license"
    assert recorder.last_json() == {"redeemed": True}
    assert order.is_redeemed


async def test_create_license_without_total_omits_key(client, recorder):
    recorder.reply(json_body=order_payload())

    await client.create_license("p-1", "u-1")

    assert recorder.last.url.path == "/api/admin/licenses"
    assert recorder.last_json() == {"product_id": "p-1", "user_id": "u-1"}


async def test_create_license_with_zero_total_sends_zero(client, recorder):
    recorder.reply(json_body=order_payload(total=0))

    order = await client.create_license("p-1", "u-1", 0)

    body = recorder.last_json()
    assert "total" in body
    assert body["total"] == 0
    assert order.total == 0


async def test_create_license_with_custom_total(client, recorder):
    recorder.reply(json_body=order_payload(total=99000))

    await client.create_license("p-1", "u-1", 99000)

    assert recorder.last_json()["total"] == 99000
