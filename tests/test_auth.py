from __future__ import annotations

import pytest

from columbo_connector.adapters import InMemoryCredentialStore
from columbo_connector.services.auth import AuthGate, ErrorCode, UserCredentials, is_authorized


@pytest.mark.parametrize(
    ("username", "token", "expected"),
    [
        ("a", "b", True),
        ("", "x", False),
        ("x", "", False),
        (None, None, False),
        ("a", None, False),
        (None, "b", False),
    ],
)
def test_is_authorized_presence_check(username, token, expected):
    assert is_authorized(UserCredentials(username=username, token=token)) is expected


def test_set_credentials_persists_valid_pair():
    store = InMemoryCredentialStore()
    gate = AuthGate(store=store)

    result = gate.set_credentials(UserCredentials(username="alice", token="s3cret"))

    assert result.accepted
    assert result.to_dict() == {"errorCode": "NONE"}
    assert store.properties == {"username": "alice", "token": "s3cret"}
    assert gate.is_auth_valid()


def test_set_credentials_rejects_without_persisting():
    store = InMemoryCredentialStore({"username": "old", "token": "old-token"})
    gate = AuthGate(store=store)

    result = gate.set_credentials(UserCredentials(username="", token="new"))

    assert result.error_code is ErrorCode.INVALID_CREDENTIALS
    assert not result.accepted
    assert store.properties == {"username": "old", "token": "old-token"}


def test_reset_auth_is_idempotent():
    store = InMemoryCredentialStore({"username": "a", "token": "b"})
    gate = AuthGate(store=store)

    gate.reset_auth()
    gate.reset_auth()

    assert store.properties == {}
    assert gate.stored_credentials() == UserCredentials()
    assert not gate.is_auth_valid()


def test_partial_store_is_unauthorized():
    gate = AuthGate(store=InMemoryCredentialStore({"token": "b"}))

    assert gate.stored_credentials() == UserCredentials(username=None, token="b")
    assert gate.is_auth_valid() is False


def test_user_credentials_from_payload():
    assert UserCredentials.from_payload({"userToken": {"username": "a", "token": "b"}}) == UserCredentials("a", "b")
    assert UserCredentials.from_payload({"userToken": {"username": 5}}) == UserCredentials()
    assert UserCredentials.from_payload({}) == UserCredentials()
    assert UserCredentials.from_payload(None) == UserCredentials()


def test_user_credentials_repr_hides_token():
    text = repr(UserCredentials(username="alice", token="s3cret"))

    assert "alice" in text
    assert "s3cret" not in text
