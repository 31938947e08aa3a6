"""
Консольный запуск клиента админ-панели.

Примеры:
    python run_admin.py login admin@example.com secret
    python run_admin.py payments --page 0
    python run_admin.py approve <payment_id>
    python run_admin.py issue-license <product_id> <user_id> --total 0
"""

import argparse
import asyncio
import logging
import os
import sys
from dotenv import load_dotenv

# Загружаем переменные окружения
load_dotenv()

from admin_panel.config import settings
from admin_panel.services import (
    AdminApiClient,
    AdminDashboard,
    AdminSession,
    ApiError,
    TokenStore,
    format_price,
    order_status_label,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=f"{settings.APP_NAME} CLI")
    parser.add_argument("--api-url", default=None, help="Базовый URL backend API")
    sub = parser.add_subparsers(dest="command", required=True)

    login = sub.add_parser("login", help="Войти как администратор")
    login.add_argument("email")
    login.add_argument("password")

    sub.add_parser("logout", help="Выйти и удалить сохранённый токен")

    users = sub.add_parser("users", help="Список пользователей")
    users.add_argument("--page", type=int, default=0)
    users.add_argument("--search", default="")

    products = sub.add_parser("products", help="Список товаров")
    products.add_argument("--page", type=int, default=0)
    products.add_argument("--platform", default="")
    products.add_argument("--category", default="")
    products.add_argument("--search", default="")

    payments = sub.add_parser("payments", help="Переводы на проверке")
    payments.add_argument("--page", type=int, default=0)

    for name in ("approve", "reject"):
        review = sub.add_parser(name, help=f"{name.capitalize()} перевод")
        review.add_argument("payment_id")

    orders = sub.add_parser("orders", help="История заказов")
    orders.add_argument("--page", type=int, default=0)
    orders.add_argument("--status", default="all")

    licenses = sub.add_parser("licenses", help="Выданные лицензии")
    licenses.add_argument("--page", type=int, default=0)
    licenses.add_argument("--redeemed", choices=["all", "redeemed", "not_redeemed"], default="all")
    licenses.add_argument("--search", default="")

    issue = sub.add_parser("issue-license", help="Выдать лицензию")
    issue.add_argument("product_id")
    issue.add_argument("user_id")
    issue.add_argument("--total", default=None, help="Сумма; пусто - цена товара, 0 - бесплатно")

    redeem = sub.add_parser("redeem", help="Переключить отметку активации лицензии")
    redeem.add_argument("order_id")
    redeem.add_argument("--undo", action="store_true")

    return parser


def print_footer(view) -> None:
    print(f"Page {view.page + 1} of {max(view.page_count, 1)} (total: {view.total})")


async def run(args: argparse.Namespace) -> int:
    session = AdminSession(TokenStore(settings.TOKEN_DB_PATH))
    client = AdminApiClient(base_url=args.api_url, session=session)
    dashboard = AdminDashboard(client)

    if args.command == "login":
        result = await dashboard.login(args.email, args.password)
        print(f"[OK] Logged in as {result.user.name} <{result.user.email}>")
        return 0

    if args.command == "logout":
        dashboard.logout()
        print("[OK] Logged out")
        return 0

    if not dashboard.is_authenticated:
        print("[ERROR] Not logged in. Run: python run_admin.py login <email> <password>")
        return 1

    if args.command == "users":
        view = await dashboard.load_users(args.page, args.search)
        for user in view.items:
            flags = ("active" if user.is_active else "inactive") + (", verified" if user.is_verified else "")
            print(f"{user.id}  {user.name} <{user.email}>  [{user.role}; {flags}]")
        print_footer(view)

    elif args.command == "products":
        view = await dashboard.load_products(args.page, args.platform, args.category, args.search)
        for product in view.items:
            platforms = ", ".join(p.name for p in product.platforms)
            print(f"{product.id}  {product.name}  {format_price(product.price)}  [{platforms}]")
        print_footer(view)

    elif args.command == "payments":
        view = await dashboard.load_pending_payments(args.page)
        for payment in view.items:
            order = payment.order
            amount = format_price(order.total) if order else "-"
            proof = "PDF" if payment.is_pdf_proof else "image"
            print(f"{payment.id}  order={payment.order_id}  {amount}  {payment.status}  ({proof}: {payment.transfer_proof})")
        print_footer(view)

    elif args.command in ("approve", "reject"):
        await dashboard.review_payment(args.payment_id, approve=args.command == "approve")
        print(f"[OK] Payment {args.payment_id} {args.command}d")

    elif args.command == "orders":
        view = await dashboard.load_transactions(args.page, args.status)
        for order in view.items:
            product = order.product.name if order.product else order.product_id
            print(f"{order.id}  {product}  {format_price(order.total)}  {order_status_label(order.status)}")
        print_footer(view)

    elif args.command == "licenses":
        view = await dashboard.load_licenses(args.page, args.redeemed, args.search)
        for order in view.items:
            mark = "redeemed" if order.is_redeemed else "not redeemed"
            user = order.user.email if order.user else order.user_id
            print(f"{order.license_id or '-'}  order={order.id}  {user}  {mark}")
        print_footer(view)

    elif args.command == "issue-license":
        order = await dashboard.issue_license(args.product_id, args.user_id, args.total)
        print(f"[OK] License issued: {order.license_id} (order {order.id}, {format_price(order.total)})")

    elif args.command == "redeem":
        order = await client.update_license_redeemed(args.order_id, not args.undo)
        print(f"[OK] Order {order.id}: license_redeemed={order.license_redeemed}")

    return 0


if __name__ == "__main__":
    # Настройка логирования
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", settings.LOG_LEVEL),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    arguments = build_parser().parse_args()

    try:
        sys.exit(asyncio.run(run(arguments)))
    except ApiError as e:
        print(f"[ERROR] {e.message}")
        sys.exit(1)
    except ValueError as e:
        print(f"[ERROR] {e}")
        sys.exit(2)
    except KeyboardInterrupt:
        print("\n[INFO] Interrupted")
        sys.exit(130)
