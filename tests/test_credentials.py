import pytest

from futures_desk.core.credentials import EMPTY_CREDENTIALS, Credentials, CredentialStore
from futures_desk.core.errors import UnauthenticatedError


def test_set_then_get_returns_same_credentials():
    store = CredentialStore()
    creds = Credentials("key", "secret", True)
    store.set_credentials(creds)
    assert store.get_credentials() == creds
    assert store.is_authenticated


def test_set_replaces_previous():
    store = CredentialStore(Credentials("a", "b", False))
    store.set_credentials(Credentials("c", "d", True))
    assert store.get_credentials().api_key == "c"
    assert store.require().use_testnet is True


def test_clear_leaves_store_empty():
    store = CredentialStore(Credentials("a", "b"))
    store.clear()
    assert store.get_credentials() is None
    assert not store.is_authenticated
    with pytest.raises(UnauthenticatedError):
        store.require()


def test_partial_credentials_are_not_authenticated():
    assert CredentialStore(Credentials("key", "")).get_credentials() is None
    assert CredentialStore(Credentials("", "secret")).is_authenticated is False
    assert EMPTY_CREDENTIALS.is_empty


def test_secret_not_in_repr():
    creds = Credentials("public-key", "very-secret-value")
    assert "very-secret-value" not in repr(creds)
    assert "public-key" in repr(creds)


def test_masked_key_and_environment():
    creds = Credentials("abcdefgh12345", "s", use_testnet=True)
    assert creds.masked_api_key == "abcdefgh*****"
    assert creds.environment == "TESTNET"
    assert Credentials("short", "s").masked_api_key == "short"
    assert Credentials("", "").masked_api_key == "Not configured"
    assert Credentials("k", "s").environment == "PRODUCTION"
