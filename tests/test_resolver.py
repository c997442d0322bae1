"""Tests for credential resolution"""

import pytest

from conftest import FakeResponse
from rbxauth.auth.resolver import CredentialResolver, parse_user_id
from rbxauth.client.session_client import SessionClient
from rbxauth.core.config import DEFAULT_USER_ID_ENDPOINT
from rbxauth.core.exceptions import InvalidArgument
from rbxauth.core.types import Credential, CredentialType


def test_user_id_resolves_to_username(make_config) -> None:
    config = make_config(FakeResponse(200, {"Id": 123, "Username": "alice"}))
    resolver = CredentialResolver(SessionClient(config))

    resolved = resolver.resolve(Credential(CredentialType.USER_ID, "123"))

    assert resolved == Credential(CredentialType.USERNAME, "alice")
    assert config.transport.calls[0]["url"] == DEFAULT_USER_ID_ENDPOINT.format(user_id=123)


@pytest.mark.parametrize("identifier", ["abc", "", "12.5", "99999999999999999999"])
def test_bad_user_id_fails_without_request(make_config, identifier) -> None:
    config = make_config()
    resolver = CredentialResolver(SessionClient(config))

    with pytest.raises(InvalidArgument):
        resolver.resolve(Credential(CredentialType.USER_ID, identifier))

    assert config.transport.calls == []


@pytest.mark.parametrize("kind", [CredentialType.USERNAME, CredentialType.EMAIL, CredentialType.PHONE_NUMBER])
def test_other_kinds_pass_through(make_config, kind) -> None:
    config = make_config()
    credential = Credential(kind, "someone")

    assert CredentialResolver(SessionClient(config)).resolve(credential) is credential
    assert config.transport.calls == []


def test_unknown_kind_is_invalid(make_config) -> None:
    resolver = CredentialResolver(SessionClient(make_config()))
    with pytest.raises(InvalidArgument):
        resolver.resolve(Credential("Nickname", "bob"))


def test_login_resolves_user_id_first(make_config) -> None:
    config = make_config(
        FakeResponse(200, {"Username": "alice"}),
        FakeResponse(200, {"user": {"id": 123, "name": "alice"}}),
    )

    SessionClient(config).login_user_id(123, "pw")

    calls = config.transport.calls
    assert calls[0]["method"] == "GET"
    assert calls[1]["json"] == {"ctype": "Username", "cvalue": "alice", "password": "pw"}


def test_parse_user_id_bounds() -> None:
    assert parse_user_id(" 42 ") == 42
    assert parse_user_id(str(2**63 - 1)) == 2**63 - 1
    with pytest.raises(InvalidArgument):
        parse_user_id(str(2**63))


@pytest.mark.parametrize(
    "text,expected",
    [
        ("Username", CredentialType.USERNAME),
        ("u", CredentialType.USERNAME),
        ("EMAIL", CredentialType.EMAIL),
        ("phone number", CredentialType.PHONE_NUMBER),
        ("pn", CredentialType.PHONE_NUMBER),
        ("UserID", CredentialType.USER_ID),
    ],
)
def test_credential_type_parse(text, expected) -> None:
    assert CredentialType.parse(text) is expected


def test_credential_type_parse_rejects_unknown() -> None:
    with pytest.raises(InvalidArgument):
        CredentialType.parse("nickname")


@pytest.mark.parametrize("identifier", ["abc", "-9223372036854775809"])
def test_bad_user_id_is_logged(rbxauth_logs, identifier) -> None:
    with pytest.raises(InvalidArgument):
        parse_user_id(identifier)

    assert any(identifier in r.getMessage() for r in rbxauth_logs.records if r.levelname == "WARNING")
