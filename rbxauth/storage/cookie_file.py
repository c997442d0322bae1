"""Set-Cookie header codec and cookie file storage"""

import logging
from datetime import datetime, timezone
from email.utils import format_datetime, parsedate_to_datetime
from pathlib import Path
from typing import Any

from ..core.exceptions import InvalidArgument
from ..core.types import SessionCookie

logger = logging.getLogger(__name__)

SET_COOKIE_HEADER = "Set-Cookie"

_SAME_SITE = {"lax": "Lax", "strict": "Strict", "none": "None"}


def parse_set_cookie(header_value: str) -> SessionCookie | None:
    """Parse the value of one Set-Cookie header, None if it names no cookie"""
    parts = header_value.strip().split(";")
    name, sep, value = parts[0].partition("=")
    name = name.strip()
    if not sep or not name:
        return None

    value = value.strip()
    if len(value) > 1 and value[0] == value[-1] == '"':
        value = value[1:-1]

    cookie = SessionCookie(name=name, value=value)
    for attr in parts[1:]:
        key, _, attr_value = attr.partition("=")
        key = key.strip().lower()
        attr_value = attr_value.strip()
        if key == "domain" and attr_value:
            cookie.domain = attr_value.lstrip(".").lower()
        elif key == "path" and attr_value:
            cookie.path = attr_value
        elif key == "expires" and attr_value:
            cookie.expires = _parse_expires(attr_value)
        elif key == "max-age" and attr_value:
            try:
                cookie.max_age = int(attr_value)
            except ValueError:
                logger.debug(f"[cookies] Ignoring bad Max-Age on {name}")
        elif key == "secure":
            cookie.secure = True
        elif key == "httponly":
            cookie.http_only = True
        elif key == "samesite":
            cookie.same_site = _SAME_SITE.get(attr_value.lower())
    return cookie


def _parse_expires(text: str) -> datetime | None:
    try:
        expires = parsedate_to_datetime(text)
    except (TypeError, ValueError):
        return None
    if expires.tzinfo is None:
        expires = expires.replace(tzinfo=timezone.utc)
    return expires


def format_set_cookie(cookie: SessionCookie) -> str:
    """Format a cookie as the value of a Set-Cookie header"""
    parts = [f"{cookie.name}={cookie.value}"]
    if cookie.path:
        parts.append(f"Path={cookie.path}")
    if cookie.domain:
        parts.append(f"Domain={cookie.domain}")
    if cookie.expires is not None:
        expires = cookie.expires
        if expires.tzinfo is None:
            expires = expires.replace(tzinfo=timezone.utc)
        parts.append(f"Expires={format_datetime(expires.astimezone(timezone.utc), usegmt=True)}")
    if cookie.max_age is not None:
        parts.append(f"Max-Age={cookie.max_age}")
    if cookie.http_only:
        parts.append("HttpOnly")
    if cookie.secure:
        parts.append("Secure")
    if cookie.same_site:
        parts.append(f"SameSite={cookie.same_site}")
    return "; ".join(parts)


def response_cookies(resp: Any) -> list[SessionCookie]:
    """Cookies set by an HTTP response, in header order"""
    cookies = []
    for header_value in resp.headers.get_list(SET_COOKIE_HEADER):
        cookie = parse_set_cookie(header_value)
        if cookie is not None:
            cookies.append(cookie)
    return cookies


def encode_cookies(cookies: list[SessionCookie]) -> str:
    """Format cookies as Set-Cookie header lines, one per cookie"""
    return "".join(f"{SET_COOKIE_HEADER}: {format_set_cookie(c)}\r\n" for c in cookies)


def decode_cookies(text: str) -> list[SessionCookie]:
    """Parse cookies from Set-Cookie header lines. Empty text gives an empty list"""
    cookies: list[SessionCookie] = []
    for line in text.splitlines():
        if not line.strip():
            continue
        key, sep, value = line.partition(":")
        if not sep or not key.strip() or key != key.strip():
            raise InvalidArgument(f"Malformed header line: {line!r}")
        if key.lower() != SET_COOKIE_HEADER.lower():
            continue
        cookie = parse_set_cookie(value)
        if cookie is not None:
            cookies.append(cookie)
    return cookies


class CookieFileStorage:
    """Store a session's cookies in a text file of Set-Cookie lines"""

    def __init__(self, path: str | Path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> list[SessionCookie]:
        """Load cookies, empty list if the file does not exist"""
        if not self._path.exists():
            return []
        with open(self._path, "r", encoding="utf-8", newline="") as f:
            return decode_cookies(f.read())

    def save(self, cookies: list[SessionCookie]) -> None:
        """Write cookies, replacing the file"""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with open(self._path, "w", encoding="utf-8", newline="") as f:
            f.write(encode_cookies(cookies))
        logger.info(f"[cookies] Saved {len(cookies)} cookie(s) to {self._path}")
