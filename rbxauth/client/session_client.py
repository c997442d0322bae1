"""Session client for the Auth v2 API"""

import json
import logging
from typing import Any

from curl_cffi import CurlError, requests

from ..auth.resolver import CredentialResolver
from ..auth.step import VerificationStep
from ..core.config import SessionConfig
from ..core.exceptions import (
    APIError,
    LoginFailed,
    MalformedResponse,
    StatusError,
    TransportError,
)
from ..core.types import ApiErrorEntry, Credential, CredentialType, SessionCookie
from ..storage.cookie_file import response_cookies

logger = logging.getLogger(__name__)

TOKEN_HEADER = "X-CSRF-TOKEN"
# API error code returned with a 403 when the token is missing or stale
TOKEN_VALIDATION_CODE = 0

BASE_HEADERS = {
    "Accept": "application/json",
}


def decode_errors(body: dict) -> list[ApiErrorEntry]:
    """Extract the errors list of a response body, empty if there is none"""
    raw_errors = body.get("errors") or []
    if not isinstance(raw_errors, list):
        return []
    errors = []
    for raw in raw_errors:
        if not isinstance(raw, dict):
            continue
        try:
            code = int(raw.get("code", 0))
        except (TypeError, ValueError):
            code = -1
        errors.append(
            ApiErrorEntry(
                code=code,
                message=str(raw.get("message", "")),
                field=raw.get("field") or None,
            )
        )
    return errors


class SessionClient:
    """Executes login, logout and lookup requests against an identity service"""

    def __init__(self, config: SessionConfig | None = None):
        self.config = config if config is not None else SessionConfig()

    @property
    def transport(self) -> Any:
        # curl_cffi's module-level request uses a throwaway session, so no
        # cookie jar survives between calls or is shared by config copies
        if self.config.transport is None:
            return requests
        return self.config.transport

    def request_api(
        self,
        method: str,
        url: str,
        payload: dict | None = None,
        cookies: list[SessionCookie] | None = None,
        use_token: bool = True,
        _retried: bool = False,
    ) -> tuple[Any, dict]:
        """
        Send one request and decode its response.

        Returns the raw response and its decoded JSON body. When use_token is
        set, the anti-forgery token is sent if known and learned from the
        response; a request sent without a token that fails token validation
        is repeated once with the learned token.
        """
        headers = dict(BASE_HEADERS)
        if payload is not None:
            headers["Content-Type"] = "application/json"
        sent_token = use_token and bool(self.config.token)
        if sent_token:
            headers[TOKEN_HEADER] = self.config.token
        if cookies:
            headers["Cookie"] = "; ".join(f"{c.name}={c.value}" for c in cookies)

        kwargs: dict[str, Any] = {"headers": headers, "timeout": self.config.timeout}
        if payload is not None:
            kwargs["json"] = payload
        if self.config.impersonate:
            kwargs["impersonate"] = self.config.impersonate

        try:
            resp = self.transport.request(method, url, **kwargs)
        except CurlError as e:
            logger.error(f"[request] {method} {url} failed: {e}")
            raise TransportError(url, str(e)) from e

        status = resp.status_code
        if use_token:
            token = resp.headers.get(TOKEN_HEADER)
            if token:
                self.config.token = token

        try:
            body = json.loads(resp.content) if resp.content else {}
        except ValueError as e:
            if not 200 <= status < 300:
                logger.warning(f"[request] {method} {url} returned status {status}")
                raise StatusError(status, url) from e
            logger.error(f"[request] {method} {url}: invalid JSON response")
            raise MalformedResponse(status, "invalid JSON") from e
        if not isinstance(body, dict):
            if not 200 <= status < 300:
                logger.warning(f"[request] {method} {url} returned status {status}")
                raise StatusError(status, url)
            logger.error(f"[request] {method} {url}: response is not a JSON object")
            raise MalformedResponse(status, "expected a JSON object")

        errors = decode_errors(body)
        if errors:
            if (
                use_token
                and status == 403
                and errors[0].code == TOKEN_VALIDATION_CODE
                and not sent_token
                and not _retried
            ):
                logger.info(f"[request] Token validation failed for {url}, retrying with new token")
                return self.request_api(
                    method, url, payload, cookies, use_token=use_token, _retried=True
                )
            logger.warning(f"[request] {method} {url} returned API errors: {errors}")
            raise APIError(errors, status)

        if status < 200 or status >= 300:
            logger.warning(f"[request] {method} {url} returned status {status}")
            raise StatusError(status, url)

        return resp, body

    def login(
        self, credential: Credential, password: str
    ) -> list[SessionCookie] | VerificationStep:
        """
        Attempt to authenticate using the provided credentials.

        A UserID credential is first resolved to a username, which costs one
        extra request. Returns the session cookies, or a VerificationStep when
        the account requires two-step verification.
        """
        credential = CredentialResolver(self).resolve(credential)
        payload = {
            "ctype": credential.kind.value,
            "cvalue": credential.identifier,
            "password": password,
        }

        try:
            resp, body = self.request_api("POST", self.config.login_url, payload)
        except APIError as e:
            logger.warning(f"[login] Login failed for {credential.kind.value}: {e}")
            raise LoginFailed(e.errors, e.status_code) from e

        two_step = body.get("twoStepVerificationData")
        if two_step:
            user = body.get("user") or {}
            if not isinstance(two_step, dict) or not isinstance(user, dict):
                logger.error("[login] Malformed two-step verification response")
                raise MalformedResponse(resp.status_code, "malformed two-step verification data")
            step = VerificationStep(
                client=SessionClient(self.config.copy()),
                username=str(user.get("name") or ""),
                ticket=str(two_step.get("ticket") or ""),
                media_type=str(two_step.get("mediaType") or ""),
            )
            logger.info(f"[login] Two-step verification required (via {step.media_type})")
            return step

        cookies = response_cookies(resp)
        logger.info(f"[login] Logged in with {len(cookies)} session cookie(s)")
        return cookies

    def login_username(
        self, username: str, password: str
    ) -> list[SessionCookie] | VerificationStep:
        return self.login(Credential(CredentialType.USERNAME, username), password)

    def login_user_id(
        self, user_id: int, password: str
    ) -> list[SessionCookie] | VerificationStep:
        return self.login(Credential(CredentialType.USER_ID, str(user_id)), password)

    def logout(self, cookies: list[SessionCookie]) -> None:
        """Destroy the session associated with the given cookies"""
        self.request_api("POST", self.config.logout_url, cookies=cookies)
        logger.info("[logout] Session logged out")

    def resolve_username(self, user_id: int) -> str:
        """Look up the username of a user ID"""
        resp, body = self.request_api("GET", self.config.user_id_url(user_id), use_token=False)
        username = body.get("Username")
        if not username:
            logger.error(f"[lookup] No username in response for user ID {user_id}")
            raise MalformedResponse(resp.status_code, f"no username for user ID {user_id}")
        return str(username)
