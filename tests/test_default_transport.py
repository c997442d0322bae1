"""Tests for the default curl_cffi transport against a local server"""

import json
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

from rbxauth.auth.step import VerificationStep
from rbxauth.client.session_client import SessionClient
from rbxauth.core.config import SessionConfig
from rbxauth.core.types import Credential, CredentialType, SessionCookie

PROXY_VARS = ["http_proxy", "HTTP_PROXY", "https_proxy", "HTTPS_PROXY", "all_proxy", "ALL_PROXY"]


class AuthHandler(BaseHTTPRequestHandler):
    """Sets a session cookie on login and records the cookies sent to every path"""

    def do_POST(self):
        length = int(self.headers.get("Content-Length") or 0)
        payload = json.loads(self.rfile.read(length) or b"{}")
        self.server.seen.append((self.path, self.headers.get("Cookie", "")))

        body = {}
        cookie = None
        if self.path == "/login":
            body = {"user": {"id": 1, "name": payload.get("cvalue", "")}}
            cookie = f".ROBLOSECURITY={payload.get('cvalue')}-session; Path=/"
            if payload.get("cvalue") == "carol":
                body["twoStepVerificationData"] = {"mediaType": "Email", "ticket": "T1"}
        elif self.path == "/verify":
            cookie = ".ROBLOSECURITY=carol-verified; Path=/"

        data = json.dumps(body).encode("utf-8")
        self.send_response(200)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(data)))
        if cookie:
            self.send_header("Set-Cookie", cookie)
        self.end_headers()
        self.wfile.write(data)

    def log_message(self, format, *args):
        pass


@pytest.fixture
def server(monkeypatch):
    for name in PROXY_VARS:
        monkeypatch.delenv(name, raising=False)
    httpd = ThreadingHTTPServer(("127.0.0.1", 0), AuthHandler)
    httpd.seen = []
    thread = threading.Thread(target=httpd.serve_forever, daemon=True)
    thread.start()
    yield httpd
    httpd.shutdown()
    httpd.server_close()


def local_config(httpd) -> SessionConfig:
    base = f"http://127.0.0.1:{httpd.server_address[1]}"
    return SessionConfig(
        login_endpoint=f"{base}/login",
        logout_endpoint=f"{base}/logout",
        verify_endpoint=f"{base}/verify",
        timeout=5.0,
        impersonate=None,
    )


def test_logout_sends_only_the_given_cookies(server) -> None:
    client = SessionClient(local_config(server))

    cookies = client.login(Credential(CredentialType.USERNAME, "alice"), "pw")
    assert [c.value for c in cookies] == ["alice-session"]

    client.logout([SessionCookie(".ROBLOSECURITY", "bob-session")])

    path, sent = server.seen[-1]
    assert path == "/logout"
    assert sent == ".ROBLOSECURITY=bob-session"
    assert client.config.transport is None


def test_verification_step_starts_without_cookies(server) -> None:
    client = SessionClient(local_config(server))

    step = client.login(Credential(CredentialType.USERNAME, "carol"), "pw")
    assert isinstance(step, VerificationStep)

    cookies = step.verify("123456")

    assert [c.value for c in cookies] == ["carol-verified"]
    assert server.seen[-1] == ("/verify", "")
    assert step.config.transport is None
