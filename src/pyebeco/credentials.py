"""In-memory credential store for one Ebeco account."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from datetime import datetime

    from pyebeco.models import AccessToken

_LOGGER = logging.getLogger(__name__)


class CredentialStore:
    """Hold the account credentials and the current bearer token.

    The token is an immutable AccessToken that is swapped as a whole on every
    successful login. Readers take a single reference, so they always see a
    token together with its own issuance time.

    Attributes:
        username: Account username or email address.
        password: Account password.
    """

    def __init__(self, username: str, password: str) -> None:
        """Initialize the store.

        Args:
            username: Account username or email address.
            password: Account password.
        """
        self.username = username
        self.password = password
        self._token: AccessToken | None = None

    @property
    def token(self) -> AccessToken | None:
        """Get the current token, or None if never logged in."""
        return self._token

    @property
    def access_token(self) -> str | None:
        """Get the current bearer token string."""
        token = self._token
        return token.access_token if token is not None else None

    @property
    def obtained_at(self) -> datetime | None:
        """Get when the current token was issued."""
        token = self._token
        return token.obtained_at if token is not None else None

    def replace_token(self, token: AccessToken) -> None:
        """Replace the current token.

        Args:
            token: Newly issued token. Must carry a non-empty token string.

        Raises:
            ValueError: If the token string is empty.
        """
        if not token.access_token:
            msg = "Access token must not be empty"
            raise ValueError(msg)
        self._token = token
        _LOGGER.debug("Stored new access token (expires at %s)", token.expires_at.isoformat())

    def clear(self) -> None:
        """Forget the current token."""
        self._token = None

    def __repr__(self) -> str:
        """Return a representation without the secret."""
        return f"CredentialStore(username={self.username!r}, authenticated={self._token is not None})"
