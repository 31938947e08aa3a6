"""
Модели данных backend API маркетплейса.
"""

from .user import User, UserRole, UserUpdate
from .category import Category, Platform
from .product import Product, ProductForm
from .order import Order, OrderStatus, LicenseCreate
from .payment import Payment, PaymentStatus
from .common import Page, MessageResponse, LoginResponse, RegisterResponse

__all__ = [
    # User
    "User", "UserRole", "UserUpdate",
    # Category
    "Category", "Platform",
    # Product
    "Product", "ProductForm",
    # Order
    "Order", "OrderStatus", "LicenseCreate",
    # Payment
    "Payment", "PaymentStatus",
    # Envelopes
    "Page", "MessageResponse", "LoginResponse", "RegisterResponse",
]
