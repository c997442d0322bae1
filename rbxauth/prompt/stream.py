"""Interactive line-oriented login"""

import getpass
import logging
import sys
from typing import TextIO

from ..auth.step import VerificationStep
from ..client.session_client import SessionClient
from ..core.exceptions import InvalidArgument
from ..core.types import Credential, CredentialType, SessionCookie

logger = logging.getLogger(__name__)

_IDENT_PROMPTS = {
    CredentialType.USERNAME: "Enter username: ",
    CredentialType.EMAIL: "Enter email: ",
    CredentialType.PHONE_NUMBER: "Enter phone number: ",
    CredentialType.USER_ID: "Enter user ID: ",
}


class PromptStream:
    """Performs an interactive login over a reader and an optional writer"""

    def __init__(
        self,
        client: SessionClient,
        reader: TextIO | None,
        writer: TextIO | None = None,
    ):
        self.client = client
        self.reader = reader
        self.writer = writer

    @classmethod
    def standard(cls, client: SessionClient) -> "PromptStream":
        """Stream connected to stdin and stderr"""
        return cls(client, sys.stdin, sys.stderr)

    def _write(self, text: str) -> None:
        if self.writer is None:
            return
        self.writer.write(text)
        self.writer.flush()

    def _read_line(self) -> str:
        line = self.reader.readline()
        if not line:
            raise InvalidArgument("Input closed before login completed")
        return line.rstrip("\r\n")

    def _read_password(self) -> str:
        if self.reader is sys.stdin and sys.stdin.isatty():
            return getpass.getpass("", stream=self.writer)
        return self._read_line()

    def prompt_credential(
        self, kind: CredentialType | None = None, identifier: str = ""
    ) -> tuple[Credential, list[SessionCookie]]:
        """
        Prompt for any missing credential parts and the password, then log in,
        handling two-step verification if required.

        Returns the credential used and the session cookies.
        """
        if self.reader is None:
            raise InvalidArgument("Prompt stream is missing a reader")
        if kind is not None and not isinstance(kind, CredentialType):
            raise InvalidArgument(f"Invalid credential type: {kind!r}")

        while kind is None:
            self._write("Enter credential type ((Username), Email, PhoneNumber, UserID): ")
            text = self._read_line()
            if not text.strip():
                kind = CredentialType.USERNAME
                break
            try:
                kind = CredentialType.parse(text)
            except InvalidArgument:
                self._write(f"Unknown credential type {text!r}\n")

        while not identifier:
            self._write(_IDENT_PROMPTS[kind])
            identifier = self._read_line()

        credential = Credential(kind, identifier)
        self._write(f"Enter password for {identifier}: ")
        password = self._read_password()

        result = self.client.login(credential, password)
        if not isinstance(result, VerificationStep):
            return credential, result

        return credential, self._verify(result)

    def _verify(self, step: VerificationStep) -> list[SessionCookie]:
        self._write(f"Two-step verification code sent via {step.media_type}\n")
        while True:
            self._write("Enter code (leave empty to resend): ")
            code = self._read_line()
            if code:
                break
            step.resend()
            self._write(f"Resent verification code via {step.media_type}\n")

        remember = False
        while True:
            self._write("Remember device? ((no), yes): ")
            answer = self._read_line().strip().lower()
            if answer in ("y", "yes"):
                remember = True
                break
            if answer in ("n", "no", ""):
                break

        return step.verify(code, remember)

    def prompt(self, username: str = "") -> tuple[Credential, list[SessionCookie]]:
        """Log in with a username, prompting for it if empty"""
        if username:
            return self.prompt_credential(CredentialType.USERNAME, username)
        return self.prompt_credential()

    def prompt_user_id(self, user_id: int = 0) -> tuple[Credential, list[SessionCookie]]:
        """Log in with a user ID, prompting for it if less than 1"""
        if user_id < 1:
            return self.prompt_credential(CredentialType.USER_ID)
        return self.prompt_credential(CredentialType.USER_ID, str(user_id))
