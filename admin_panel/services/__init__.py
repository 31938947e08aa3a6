"""
Сервисы клиента админ-панели.
"""

from .exceptions import ApiError, RequestFailedError, MalformedResponseError
from .session import AdminSession, TokenStore
from .api_client import AdminApiClient
from .formatting import format_price, order_status_label
from .dashboard import AdminDashboard, ListView

__all__ = [
    "ApiError", "RequestFailedError", "MalformedResponseError",
    "AdminSession", "TokenStore",
    "AdminApiClient",
    "format_price", "order_status_label",
    "AdminDashboard", "ListView",
]
