"""Tests for CredentialStore and AccessToken."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from pyebeco.credentials import CredentialStore
from pyebeco.models import AccessToken


def make_token(value: str = "abc", *, age: timedelta = timedelta(0), expires_in: int = 3600) -> AccessToken:
    """Build a token issued ``age`` ago."""
    return AccessToken(access_token=value, obtained_at=datetime.now(UTC) - age, expires_in=expires_in)


class TestCredentialStore:
    """Test credential storage."""

    def test_initial_state(self) -> None:
        """Test a new store has no token."""
        store = CredentialStore("hello", "world")

        assert store.username == "hello"
        assert store.password == "world"
        assert store.token is None
        assert store.access_token is None
        assert store.obtained_at is None

    def test_replace_token(self) -> None:
        """Test the token and its issuance time are replaced together."""
        store = CredentialStore("hello", "world")
        first = make_token("first")
        second = make_token("second")

        store.replace_token(first)
        store.replace_token(second)

        assert store.token is second
        assert store.access_token == "second"
        assert store.obtained_at == second.obtained_at

    def test_empty_token_rejected(self) -> None:
        """Test an empty token string is never stored."""
        store = CredentialStore("hello", "world")

        with pytest.raises(ValueError, match="must not be empty"):
            store.replace_token(make_token(""))

        assert store.token is None

    def test_clear(self) -> None:
        """Test clearing the token."""
        store = CredentialStore("hello", "world")
        store.replace_token(make_token())

        store.clear()

        assert store.token is None

    def test_repr_hides_password(self) -> None:
        """Test the password does not appear in the representation."""
        store = CredentialStore("hello", "s3cret")
        assert "s3cret" not in repr(store)
        assert "hello" in repr(store)


class TestAccessToken:
    """Test token expiry."""

    def test_not_expired(self) -> None:
        """Test a fresh token."""
        token = make_token()
        assert not token.is_expired
        assert token.expires_at == token.obtained_at + timedelta(seconds=3600)

    def test_expired(self) -> None:
        """Test a token past its lifetime."""
        assert make_token(age=timedelta(hours=2)).is_expired

    def test_immutable(self) -> None:
        """Test tokens cannot be modified in place."""
        token = make_token()
        with pytest.raises(AttributeError):
            token.access_token = "other"  # type: ignore[misc]
