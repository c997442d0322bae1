"""Custom exceptions for the authentication session protocol"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .types import ApiErrorEntry


class AuthError(Exception):
    """Base exception for rbxauth"""

    pass


class TransportError(AuthError):
    """The underlying network call failed"""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Request to {url} failed: {reason}")


class StatusError(AuthError):
    """Response status outside 2XX without a structured error body"""

    def __init__(self, status_code: int, url: str | None = None):
        self.status_code = status_code
        self.url = url
        super().__init__(f"HTTP status {status_code}")


class APIError(AuthError):
    """Response body carried one or more API errors"""

    def __init__(self, errors: list["ApiErrorEntry"], status_code: int):
        self.errors = list(errors)
        self.status_code = status_code
        super().__init__("; ".join(str(e) for e in self.errors))

    @property
    def code(self) -> int | None:
        """Code of the first error in the list"""
        return self.errors[0].code if self.errors else None


class LoginFailed(APIError):
    """API errors returned by a login attempt"""

    pass


class InvalidArgument(AuthError):
    """Malformed caller input"""

    pass


class MalformedResponse(AuthError):
    """2XX response whose body is not a JSON object"""

    def __init__(self, status_code: int, detail: str):
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"Malformed response (status {status_code}): {detail}")
