"""Session configuration and config file loader"""

import json
import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_LOGIN_ENDPOINT = "https://auth.roblox.com/v2/login"
DEFAULT_LOGOUT_ENDPOINT = "https://auth.roblox.com/v2/logout"
DEFAULT_VERIFY_ENDPOINT = "https://auth.roblox.com/v2/twostepverification/verify"
DEFAULT_RESEND_ENDPOINT = "https://auth.roblox.com/v2/twostepverification/resend"
# {user_id} is replaced with the numeric user ID
DEFAULT_USER_ID_ENDPOINT = "https://api.roblox.com/users/{user_id}"

DEFAULT_TIMEOUT = 30.0
DEFAULT_IMPERSONATE = "chrome"

_FILE_KEYS = (
    "login_endpoint",
    "logout_endpoint",
    "verify_endpoint",
    "resend_endpoint",
    "user_id_endpoint",
    "timeout",
    "impersonate",
)


@dataclass
class SessionConfig:
    """
    Configures an authentication action.

    Endpoints left as None fall back to the DEFAULT_* constants. The token is
    updated from every response that carries a fresh one, so a config value
    must not be shared between concurrent operations. Use copy() to branch.
    """

    login_endpoint: str | None = None
    logout_endpoint: str | None = None
    verify_endpoint: str | None = None
    resend_endpoint: str | None = None
    user_id_endpoint: str | None = None

    transport: Any = None  # curl_cffi.requests.Session or compatible
    token: str = ""  # Anti-forgery token learned from responses
    timeout: float | None = DEFAULT_TIMEOUT
    impersonate: str | None = DEFAULT_IMPERSONATE

    @property
    def login_url(self) -> str:
        return self.login_endpoint or DEFAULT_LOGIN_ENDPOINT

    @property
    def logout_url(self) -> str:
        return self.logout_endpoint or DEFAULT_LOGOUT_ENDPOINT

    @property
    def verify_url(self) -> str:
        return self.verify_endpoint or DEFAULT_VERIFY_ENDPOINT

    @property
    def resend_url(self) -> str:
        return self.resend_endpoint or DEFAULT_RESEND_ENDPOINT

    def user_id_url(self, user_id: int) -> str:
        template = self.user_id_endpoint or DEFAULT_USER_ID_ENDPOINT
        return template.format(user_id=user_id)

    def copy(self) -> "SessionConfig":
        """Independent copy; only the transport object is shared"""
        return replace(self)


def load_session_config(config_path: str | Path = "config.json") -> SessionConfig:
    """Build a SessionConfig from the "auth" section of a JSON config file

    Args:
        config_path: Path to config.json

    Returns:
        SessionConfig with the overrides found in the file
    """
    config_file = Path(config_path)
    if not config_file.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_file, "r", encoding="utf-8") as f:
        config = json.load(f)

    auth_config = config.get("auth") if isinstance(config, dict) else None
    if not isinstance(auth_config, dict):
        raise ValueError("Auth config not found in config file")

    overrides: dict[str, Any] = {}
    for key, value in auth_config.items():
        if key not in _FILE_KEYS:
            logger.warning(f"Ignoring unknown auth config key: {key}")
            continue
        overrides[key] = value

    if "timeout" in overrides and overrides["timeout"] is not None:
        overrides["timeout"] = float(overrides["timeout"])

    session_config = SessionConfig(**overrides)
    logger.info(f"Loaded auth config from {config_path} ({len(overrides)} override(s))")
    return session_config
