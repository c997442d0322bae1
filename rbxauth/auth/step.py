"""Two-step verification state"""

import logging
from typing import TYPE_CHECKING

from ..core.config import SessionConfig
from ..core.exceptions import InvalidArgument
from ..core.types import SessionCookie
from ..storage.cookie_file import response_cookies

if TYPE_CHECKING:
    from ..client.session_client import SessionClient

logger = logging.getLogger(__name__)

LOGIN_ACTION = "Login"


class VerificationStep:
    """
    Pending two-step verification of a login attempt.

    Holds its own copy of the session config, so its token evolves
    independently of the client that produced it. After a successful
    verify() the step is complete and must not be used again.
    """

    def __init__(
        self,
        client: "SessionClient",
        username: str,
        ticket: str,
        media_type: str,
        action_type: str = LOGIN_ACTION,
    ):
        self._client = client
        self.username = username
        self.ticket = ticket
        self.media_type = media_type  # Channel the code was sent on (Email, SMS)
        self.action_type = action_type
        self.completed = False

    @property
    def config(self) -> SessionConfig:
        return self._client.config

    def _ticket_request(self) -> dict:
        return {
            "username": self.username,
            "ticket": self.ticket,
            "actionType": self.action_type,
        }

    def _ensure_pending(self) -> None:
        if self.completed:
            raise InvalidArgument("Verification step already completed")

    def verify(self, code: str, remember_device: bool = False) -> list[SessionCookie]:
        """
        Submit a verification code to complete authentication.

        Returns the session cookies. remember_device asks the provider to
        remember the current device for future logins.
        """
        self._ensure_pending()
        payload = {
            **self._ticket_request(),
            "code": code,
            "rememberDevice": remember_device,
        }
        resp, _ = self._client.request_api("POST", self.config.verify_url, payload)
        self.completed = True
        cookies = response_cookies(resp)
        logger.info(f"[verify] Verified, {len(cookies)} session cookie(s)")
        return cookies

    def resend(self) -> None:
        """Retransmit the verification code, possibly on another channel"""
        self._ensure_pending()
        _, body = self._client.request_api(
            "POST", self.config.resend_url, self._ticket_request()
        )
        self.ticket = str(body.get("ticket") or "")
        self.media_type = str(body.get("mediaType") or "")
        logger.info(f"[resend] Verification code resent via {self.media_type}")
