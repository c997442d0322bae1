"""Core data types for the authentication session protocol"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from .exceptions import InvalidArgument


class CredentialType(Enum):
    """Kind of identifier associated with an account"""

    USERNAME = "Username"
    EMAIL = "Email"
    PHONE_NUMBER = "PhoneNumber"
    USER_ID = "UserID"  # Resolved to USERNAME before login

    @classmethod
    def parse(cls, text: str) -> "CredentialType":
        """Parse a canonical name or prompt shorthand, case-insensitively"""
        kind = _CREDENTIAL_ALIASES.get(text.strip().lower())
        if kind is None:
            raise InvalidArgument(f"Unknown credential type: {text!r}")
        return kind


_CREDENTIAL_ALIASES = {
    "username": CredentialType.USERNAME,
    "user": CredentialType.USERNAME,
    "u": CredentialType.USERNAME,
    "email": CredentialType.EMAIL,
    "e": CredentialType.EMAIL,
    "phonenumber": CredentialType.PHONE_NUMBER,
    "phone number": CredentialType.PHONE_NUMBER,
    "phone": CredentialType.PHONE_NUMBER,
    "pn": CredentialType.PHONE_NUMBER,
    "userid": CredentialType.USER_ID,
    "user id": CredentialType.USER_ID,
    "id": CredentialType.USER_ID,
}


@dataclass(frozen=True)
class Credential:
    """Identifies an account prior to authentication"""

    kind: CredentialType
    identifier: str


@dataclass(frozen=True)
class ApiErrorEntry:
    """Single entry of the errors list in an API response"""

    code: int
    message: str
    field: str | None = None

    def __str__(self) -> str:
        return f"response code {self.code}: {self.message}"


@dataclass
class SessionCookie:
    """HTTP cookie that is part of an authenticated session"""

    name: str
    value: str
    domain: str | None = None
    path: str | None = None
    expires: datetime | None = None  # Timezone-aware
    max_age: int | None = None
    secure: bool = False
    http_only: bool = False
    same_site: str | None = None  # "Lax" | "Strict" | "None"
