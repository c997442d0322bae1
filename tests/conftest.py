"""Shared fakes for the HTTP transport"""

import json
import logging

import pytest

from rbxauth.core.config import SessionConfig


class FakeHeaders:
    """Case-insensitive multi-value headers, like curl_cffi's Headers"""

    def __init__(self, items: list[tuple[str, str]] | None = None):
        self._items = list(items or [])

    def get(self, key: str, default=None):
        for k, v in self._items:
            if k.lower() == key.lower():
                return v
        return default

    def get_list(self, key: str) -> list[str]:
        return [v for k, v in self._items if k.lower() == key.lower()]


class FakeResponse:
    def __init__(self, status_code: int = 200, body=None, headers=None):
        self.status_code = status_code
        if body is None:
            self.content = b""
        elif isinstance(body, bytes):
            self.content = body
        elif isinstance(body, str):
            self.content = body.encode("utf-8")
        else:
            self.content = json.dumps(body).encode("utf-8")
        self.headers = FakeHeaders(headers)


class FakeTransport:
    """Replays queued responses and records every request"""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls: list[dict] = []

    def request(self, method: str, url: str, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        if not self.responses:
            raise AssertionError(f"Unexpected request: {method} {url}")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def token_failure(token: str = "tok-1") -> FakeResponse:
    return FakeResponse(
        403,
        {"errors": [{"code": 0, "message": "Token Validation Failed"}]},
        headers=[("x-csrf-token", token)],
    )


@pytest.fixture
def make_config():
    def _make(*responses, **overrides) -> SessionConfig:
        return SessionConfig(transport=FakeTransport(*responses), **overrides)

    return _make


@pytest.fixture
def rbxauth_logs(monkeypatch, caplog):
    """caplog for the rbxauth logger, which the CLI detaches from root"""
    monkeypatch.setattr(logging.getLogger("rbxauth"), "propagate", True)
    caplog.set_level(logging.INFO, logger="rbxauth")
    return caplog
