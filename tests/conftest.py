from __future__ import annotations

from typing import Any, Callable, List, Optional
from urllib.parse import parse_qsl

import httpx
import pytest
from fastapi.testclient import TestClient

from app.api.deps import get_prodamus_client
from app.main import create_app
from app.services.prodamus_client import ProdamusClient

FUTURE_DATE = "2099-12-31 23:59"
PAST_DATE = "2000-01-01 00:00"
PRODAMUS_URL = "https://demo.payform.ru"
SECRET = "secret"


class ProviderStub:
    """httpx.MockTransport handler that records requests and answers with a canned reply."""

    def __init__(
        self,
        *,
        status_code: int = 200,
        json_body: Any = None,
        text: Optional[str] = None,
        error: Optional[Callable[[httpx.Request], Exception]] = None,
    ) -> None:
        self.status_code = status_code
        self.json_body = {"success": True} if json_body is None and text is None else json_body
        self.text = text
        self.error = error
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error(request)
        if self.text is not None:
            return httpx.Response(self.status_code, text=self.text)
        return httpx.Response(self.status_code, json=self.json_body)

    @property
    def last(self) -> httpx.Request:
        assert self.requests, "no request reached the provider"
        return self.requests[-1]

    def last_form(self) -> dict:
        return dict(parse_qsl(self.last.content.decode("utf-8"), keep_blank_values=True))


@pytest.fixture
def provider() -> ProviderStub:
    return ProviderStub()


@pytest.fixture
def prodamus(provider: ProviderStub) -> ProdamusClient:
    return ProdamusClient(timeout=5, transport=httpx.MockTransport(provider))


@pytest.fixture
def app(prodamus: ProdamusClient):
    application = create_app()
    application.dependency_overrides[get_prodamus_client] = lambda: prodamus
    return application


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)
