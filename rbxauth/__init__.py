"""rbxauth - Roblox authentication session client (Auth v2 API)"""

from .auth.resolver import CredentialResolver
from .auth.step import VerificationStep
from .client.session_client import TOKEN_HEADER, SessionClient
from .core.config import SessionConfig, load_session_config
from .core.exceptions import (
    APIError,
    AuthError,
    InvalidArgument,
    LoginFailed,
    MalformedResponse,
    StatusError,
    TransportError,
)
from .core.types import ApiErrorEntry, Credential, CredentialType, SessionCookie
from .prompt.stream import PromptStream
from .storage.cookie_file import CookieFileStorage, decode_cookies, encode_cookies

__all__ = [
    "APIError",
    "ApiErrorEntry",
    "AuthError",
    "CookieFileStorage",
    "Credential",
    "CredentialResolver",
    "CredentialType",
    "InvalidArgument",
    "LoginFailed",
    "MalformedResponse",
    "PromptStream",
    "SessionClient",
    "SessionConfig",
    "SessionCookie",
    "StatusError",
    "TOKEN_HEADER",
    "TransportError",
    "VerificationStep",
    "decode_cookies",
    "encode_cookies",
    "load_session_config",
]
