"""Authentication handler for Ebeco API."""

from __future__ import annotations

import asyncio
import logging
from datetime import UTC, datetime
from http import HTTPStatus
from typing import TYPE_CHECKING

from pyebeco.const import DEFAULT_TOKEN_LIFETIME_SECONDS, LOGIN_ENDPOINT, TWO_FACTOR_REQUIRED_MESSAGE
from pyebeco.exceptions import (
    ApiError,
    AuthenticationRejectedError,
    TransportError,
    TwoFactorRequiredError,
)
from pyebeco.models import AccessToken
from pyebeco.parsers import parse_envelope, parse_login_response
from pyebeco.serializers import serialize_login_request


if TYPE_CHECKING:
    from collections.abc import Callable

    from pyebeco.credentials import CredentialStore
    from pyebeco.models import LoginResponse
    from pyebeco.transport import Transport

_LOGGER = logging.getLogger(__name__)


class AuthenticationHandler:
    """Handle authentication with the Ebeco API.

    The handler performs the login exchange and is the only component that
    writes to the credential store. It registers itself with the transport so
    that requests rejected with 401 can log in again.

    Token Update Callback:
        The optional on_token_updated callback is invoked with the handler after
        every successful login, so an application can observe new tokens:

        Example:
            def handle_token_update(handler: AuthenticationHandler) -> None:
                my_app.token_expires_at = handler.token.expires_at

            handler = AuthenticationHandler(
                transport=transport,
                credentials=credentials,
                on_token_updated=handle_token_update,
            )
    """

    def __init__(
        self,
        *,
        transport: Transport,
        credentials: CredentialStore,
        on_token_updated: Callable[[AuthenticationHandler], None] | None = None,
    ) -> None:
        """Initialize the authentication handler.

        Args:
            transport: Transport used to send the login request.
            credentials: Credential store holding the account and its token.
            on_token_updated: Optional callback invoked after a successful login.
        """
        self._transport = transport
        self._credentials = credentials
        self._on_token_updated = on_token_updated
        self._login_lock = asyncio.Lock()

        transport.set_auth_handler(self)

    @property
    def username(self) -> str:
        """Get the account username."""
        return self._credentials.username

    @property
    def access_token(self) -> str | None:
        """Get the current bearer token."""
        return self._credentials.access_token

    @property
    def token(self) -> AccessToken | None:
        """Get the current token with its issuance time."""
        return self._credentials.token

    @property
    def last_authenticated_at(self) -> datetime | None:
        """Get when the current token was issued."""
        return self._credentials.obtained_at

    def is_authenticated(self) -> bool:
        """Check if the handler holds a token.

        Returns:
            True if a token has been issued, False otherwise.
        """
        return self._credentials.token is not None

    def needs_reauthentication(self) -> bool:
        """Check if a login is needed before making requests.

        Returns:
            True if no token exists or the token has expired.
        """
        token = self._credentials.token
        return token is None or token.is_expired

    async def login(self) -> LoginResponse:
        """Log in with the configured account credentials.

        Sends exactly one request. The request is never replayed by the
        transport, even when it is answered with 401.

        Returns:
            The parsed login response.

        Raises:
            TwoFactorRequiredError: If the account requires two factor verification.
            AuthenticationRejectedError: If the login fails for any other reason,
                including network failures.
        """
        async with self._login_lock:
            return await self._login()

    async def reauthenticate(self, rejected_token: str | None) -> str:
        """Replace a token the API rejected.

        Logins are serialized, so a caller that waited while another login
        completed reuses that token instead of logging in again.

        Args:
            rejected_token: The token a request was rejected with.

        Returns:
            The token to retry with.

        Raises:
            TwoFactorRequiredError: If the account requires two factor verification.
            AuthenticationRejectedError: If the login fails.
        """
        async with self._login_lock:
            current = self._credentials.access_token
            if current is not None and current != rejected_token:
                _LOGGER.debug("Token was replaced while waiting, reusing it")
                return current

            _LOGGER.warning("Access token was rejected, attempting reauthentication")
            login_response = await self._login()
            return login_response.access_token

    async def _login(self) -> LoginResponse:
        """Perform the login exchange. Must be called with the login lock held."""
        _LOGGER.debug("Authenticating user %s", self._credentials.username)

        data = serialize_login_request(self._credentials.username, self._credentials.password)

        try:
            status, body = await self._transport.request("POST", LOGIN_ENDPOINT, json_data=data, retry_auth=False)
        except TransportError as exc:
            msg = f"Authentication request failed: {exc}"
            raise AuthenticationRejectedError(msg) from exc

        if status == HTTPStatus.UNAUTHORIZED:
            msg = "Authentication failed: Invalid credentials"
            raise AuthenticationRejectedError(msg)

        if status != HTTPStatus.OK or body is None:
            msg = f"Authentication failed with status {status}"
            raise AuthenticationRejectedError(msg)

        try:
            envelope = parse_envelope(body)
            if not envelope.success:
                detail = envelope.error.message if envelope.error is not None else "unknown error"
                msg = f"Authentication failed: {detail}"
                raise AuthenticationRejectedError(msg)
            login_response = parse_login_response(envelope.result)
        except ApiError as exc:
            msg = f"Invalid authentication response: {exc}"
            raise AuthenticationRejectedError(msg) from exc

        if login_response.requires_two_factor_verification:
            _LOGGER.error("Account %s requires two factor authentication", self._credentials.username)
            raise TwoFactorRequiredError(TWO_FACTOR_REQUIRED_MESSAGE)

        if not login_response.access_token:
            msg = "Missing access token in authentication response"
            raise AuthenticationRejectedError(msg)

        self._credentials.replace_token(
            AccessToken(
                access_token=login_response.access_token,
                obtained_at=datetime.now(UTC),
                expires_in=login_response.expire_in_seconds or DEFAULT_TOKEN_LIFETIME_SECONDS,
            )
        )

        _LOGGER.info(
            "Logged in to Ebeco API. Token valid for %s seconds",
            login_response.expire_in_seconds,
        )

        if self._on_token_updated is not None:
            self._on_token_updated(self)

        return login_response

    async def ensure_authenticated(self) -> None:
        """Log in only if there is no token or the token has expired.

        Raises:
            TwoFactorRequiredError: If the account requires two factor verification.
            AuthenticationRejectedError: If the login fails.
        """
        async with self._login_lock:
            if self.needs_reauthentication():
                await self._login()
            else:
                _LOGGER.debug("Skipping authentication - valid token already exists")

    def clear_authentication(self) -> None:
        """Forget the current token so the next request must log in again."""
        self._credentials.clear()
        _LOGGER.debug("Authentication state cleared")
