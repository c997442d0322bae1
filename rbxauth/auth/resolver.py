"""Credential resolver"""

import logging
import re
from typing import TYPE_CHECKING

from ..core.exceptions import InvalidArgument
from ..core.types import Credential, CredentialType

if TYPE_CHECKING:
    from ..client.session_client import SessionClient

logger = logging.getLogger(__name__)

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_USER_ID_PATTERN = re.compile(r"[+-]?[0-9]+")


def parse_user_id(identifier: str) -> int:
    """Parse a user ID as a signed 64-bit integer"""
    text = identifier.strip()
    if not _USER_ID_PATTERN.fullmatch(text):
        logger.warning(f"[resolve] User ID is not numeric: {identifier!r}")
        raise InvalidArgument(f"User ID is not numeric: {identifier!r}")
    user_id = int(text)
    if not _INT64_MIN <= user_id <= _INT64_MAX:
        logger.warning(f"[resolve] User ID out of range: {identifier!r}")
        raise InvalidArgument(f"User ID out of range: {identifier!r}")
    return user_id


class CredentialResolver:
    """Normalizes credentials to a form accepted by the login operation"""

    def __init__(self, client: "SessionClient"):
        self._client = client

    def resolve(self, credential: Credential) -> Credential:
        """Rewrite a UserID credential to its Username, other kinds pass through"""
        if not isinstance(credential.kind, CredentialType):
            logger.warning(f"[resolve] Unknown credential type: {credential.kind!r}")
            raise InvalidArgument(f"Unknown credential type: {credential.kind!r}")
        if credential.kind is not CredentialType.USER_ID:
            return credential

        user_id = parse_user_id(credential.identifier)
        username = self._client.resolve_username(user_id)
        logger.info(f"[resolve] User ID {user_id} resolved to username {username}")
        return Credential(CredentialType.USERNAME, username)
