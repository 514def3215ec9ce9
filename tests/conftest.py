"""Shared fixtures: a recording fake of ``requests.Session`` and an in-memory token store."""
from __future__ import annotations

from typing import Any

import pytest
import requests

from inkaranya.api import ApiClient, TokenStore
from inkaranya.notify import Notifier

BASE_URL = "http://api.test/api"


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None) -> None:
        self.status_code = status_code
        self._payload = payload

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400

    def json(self) -> Any:
        if self._payload is None:
            raise ValueError("No JSON body")
        return self._payload


def ok(data: Any = None, **extra: Any) -> FakeResponse:
    body = {"status": "success", "data": data if data is not None else {}}
    body.update(extra)
    return FakeResponse(200, body)


def fail(status_code: int, message: str | None = None) -> FakeResponse:
    body = {"status": "error"}
    if message:
        body["message"] = message
    return FakeResponse(status_code, body)


class FakeSession:
    """Replies from a route table keyed by ``(METHOD, path)``.

    A route value may be a response, an exception to raise, or a list that is
    consumed one reply per call.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Any] = {}
        self.calls: list[dict[str, Any]] = []

    def route(self, method: str, path: str, reply: Any) -> None:
        self.routes[(method.upper(), path)] = reply

    def request(self, method, url, headers=None, json=None, params=None, timeout=None):
        path = url[len(BASE_URL):]
        self.calls.append(
            {
                "method": method,
                "path": path,
                "headers": headers or {},
                "json": json,
                "params": params,
                "timeout": timeout,
            }
        )
        reply = self.routes.get((method, path))
        if isinstance(reply, list):
            reply = reply.pop(0) if reply else None
        if reply is None:
            return FakeResponse(404, {"status": "error", "message": f"No route {method} {path}"})
        if isinstance(reply, Exception):
            raise reply
        return reply

    def paths(self, method: str | None = None) -> list[str]:
        return [c["path"] for c in self.calls if method is None or c["method"] == method]

    def last(self) -> dict[str, Any]:
        return self.calls[-1]


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def token_store() -> TokenStore:
    return TokenStore()


@pytest.fixture
def api(fake_session, token_store) -> ApiClient:
    return ApiClient(BASE_URL, token_store=token_store, session=fake_session, timeout=5)


@pytest.fixture
def notifier() -> Notifier:
    return Notifier()


@pytest.fixture
def connection_error() -> requests.ConnectionError:
    return requests.ConnectionError("connection refused")
