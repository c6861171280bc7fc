import pathlib
import sys
from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient

sys.path.append(str(pathlib.Path(__file__).resolve().parents[2]))

from canteen.app.deps import build_services  # noqa: E402
from canteen.app.main import create_app  # noqa: E402
from config import Settings  # noqa: E402

GATEWAY_URL = "https://gw.test/pg"


class GatewayStub:
    """Record outgoing gateway requests and answer from a queue."""

    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []
        self.responses: list[Any] = []
        self.client_kwargs: dict[str, Any] = {}

    def reply(self, status: int, body: dict) -> None:
        self.responses.append(httpx.Response(status, json=body))

    def fail(self, exc: Exception) -> None:
        self.responses.append(exc)

    def answer(self, method: str, url: str, payload, headers) -> httpx.Response:
        self.calls.append({"method": method, "url": url, "json": payload, "headers": headers})
        nxt = self.responses.pop(0)
        if isinstance(nxt, Exception):
            raise nxt
        return nxt


@pytest.fixture
def gateway_stub(monkeypatch):
    stub = GatewayStub()

    class _Client:
        def __init__(self, *args, **kwargs):
            stub.client_kwargs = kwargs

        async def __aenter__(self):
            return self

        async def __aexit__(self, exc_type, exc, tb):
            pass

        async def post(self, url, json=None, headers=None):
            return stub.answer("POST", url, json, headers)

        async def get(self, url, headers=None):
            return stub.answer("GET", url, None, headers)

    monkeypatch.setattr(httpx, "AsyncClient", _Client)
    return stub


@pytest.fixture
def settings():
    return Settings(
        storage_backend="memory",
        cashfree_base_url=GATEWAY_URL,
        cashfree_app_id="app-id",
        cashfree_secret_key="secret",
        seed_demo_students=True,
        allowed_origins="",
    )


@pytest.fixture
def services(settings):
    svc = build_services(settings)
    svc.students.seed_demo()
    return svc


@pytest.fixture
def client(settings, services):
    return TestClient(create_app(settings, services), raise_server_exceptions=False)

