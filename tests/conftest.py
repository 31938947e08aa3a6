"""
Общие фикстуры тестов клиента админ-панели.
"""

import json
from typing import Any, Callable, List, Optional
import httpx
import pytest

from admin_panel.services import AdminApiClient, AdminSession, TokenStore


BASE_URL = "http://backend.test/api"


class Recorder:
    """Подставной backend: запоминает запросы и отвечает заготовленными ответами."""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.responses: List[httpx.Response] = []

    def reply(self, status_code: int = 200, json_body: Any = None, text: Optional[str] = None) -> None:
        if text is not None:
            self.responses.append(httpx.Response(status_code, text=text))
        else:
            self.responses.append(httpx.Response(
                status_code,
                content=json.dumps(json_body).encode("utf-8"),
                headers={"Content-Type": "application/json"},
            ))

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.responses:
            return self.responses.pop(0)
        return httpx.Response(200, json={})

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last.content)


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def session() -> AdminSession:
    """Сессия только в памяти."""
    return AdminSession()


@pytest.fixture
def token_store(tmp_path) -> TokenStore:
    return TokenStore(tmp_path / "session.db")


@pytest.fixture
def make_client(recorder: Recorder) -> Callable[..., AdminApiClient]:
    def factory(session: Optional[AdminSession] = None) -> AdminApiClient:
        return AdminApiClient(
            base_url=BASE_URL,
            session=session if session is not None else AdminSession(),
            transport=httpx.MockTransport(recorder.handler),
        )
    return factory


@pytest.fixture
def client(make_client, session) -> AdminApiClient:
    return make_client(session)


@pytest.fixture
def backend():
    """Состояние подставного FastAPI backend."""
    from fake_backend import FakeState
    return FakeState()


@pytest.fixture
def backend_client(backend) -> AdminApiClient:
    """Клиент, подключённый к подставному backend через ASGI."""
    from fake_backend import create_app
    return AdminApiClient(
        base_url="http://testserver/api",
        session=AdminSession(),
        transport=httpx.ASGITransport(app=create_app(backend)),
    )
