"""HTTP transport for the Ebeco API.

The transport sends requests with the standard headers and transparently
recovers from an expired token: a 401 on any request other than the login
request triggers one reauthentication and one replay of the original request.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import TYPE_CHECKING, Any

from aiohttp import ClientError, ClientSession, ClientTimeout

from pyebeco.const import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, LOGIN_ENDPOINT, TENANT_HEADER, TENANT_ID
from pyebeco.exceptions import ApiError, AuthenticationError, EbecoConnectionError, EbecoTimeoutError


if TYPE_CHECKING:
    from types import TracebackType

    from pyebeco.auth import AuthenticationHandler
    from pyebeco.credentials import CredentialStore

_LOGGER = logging.getLogger(__name__)


class Transport:
    """Request executor shared by everything that talks to one Ebeco account.

    Example:
        ```python
        credentials = CredentialStore("user@example.com", "password")
        transport = Transport(credentials)
        auth = AuthenticationHandler(transport=transport, credentials=credentials)

        async with transport:
            await auth.login()
            status, data = await transport.request("GET", GET_USER_DEVICES_ENDPOINT)
        ```

    Attributes:
        base_url: Base URL for the API (without trailing slash).
    """

    def __init__(
        self,
        credentials: CredentialStore,
        *,
        session: ClientSession | None = None,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize the transport.

        Args:
            credentials: Credential store whose token is attached to requests.
            session: Optional aiohttp ClientSession. If not provided, one will be
                created when entering the context manager.
            base_url: Base URL for the API. Defaults to the Ebeco production API.
            timeout: Total timeout for a single request in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self._credentials = credentials
        self._session = session
        self._owns_session = session is None
        self._timeout = timeout
        self._auth_handler: AuthenticationHandler | None = None

    def set_auth_handler(self, auth_handler: AuthenticationHandler) -> None:
        """Set the handler used to log in again after a 401 response.

        Args:
            auth_handler: The account's authentication handler.
        """
        self._auth_handler = auth_handler

    @property
    def session(self) -> ClientSession | None:
        """Get the underlying aiohttp session."""
        return self._session

    async def __aenter__(self) -> Transport:
        """Enter the context manager.

        Creates a new aiohttp session if one wasn't provided during initialization.

        Returns:
            Self for use in async with statements.
        """
        if self._session is None or self._session.closed:
            self._session = ClientSession()
            self._owns_session = True
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit the context manager.

        Closes the session if it was created by this transport.
        """
        await self.close()

    async def close(self) -> None:
        """Close the session if this transport owns it."""
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()

    def build_headers(self, token: str | None = None) -> dict[str, str]:
        """Build the headers sent with every request.

        Args:
            token: Optional bearer token to include.

        Returns:
            Dictionary of HTTP headers.
        """
        headers = {
            TENANT_HEADER: TENANT_ID,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def request(
        self,
        method: str,
        endpoint: str,
        *,
        json_data: dict[str, Any] | None = None,
        retry_auth: bool = True,
    ) -> tuple[int, dict[str, Any] | None]:
        """Send a request, reauthenticating once if the token was rejected.

        Args:
            method: HTTP method (GET, PUT, POST).
            endpoint: API endpoint path (e.g., "/api/services/app/Devices/GetUserDevices").
            json_data: Optional JSON data for request body.
            retry_auth: Whether to reauthenticate and replay on 401. The login
                request is never replayed regardless of this flag.

        Returns:
            Tuple of (status_code, response_data). Response data is None if
            the response is not JSON.

        Raises:
            RuntimeError: If session is not initialized or is closed.
            EbecoTimeoutError: If a request times out.
            EbecoConnectionError: If a connection error occurs.
            AuthenticationError: If reauthentication after a 401 fails.
        """
        self._validate_session()

        is_login = endpoint == LOGIN_ENDPOINT
        token = None if is_login else self._credentials.access_token

        status, data = await self._send(method, endpoint, json_data=json_data, token=token)

        if status != HTTPStatus.UNAUTHORIZED:
            return status, data

        if is_login or not retry_auth:
            _LOGGER.debug("Received status %d for %s, not reauthenticating", status, endpoint)
            return status, data

        new_token = await self._reauthenticate(endpoint, token)

        _LOGGER.debug("Replaying %s %s with new token", method, endpoint)
        return await self._send(method, endpoint, json_data=json_data, token=new_token)

    async def _reauthenticate(self, endpoint: str, rejected_token: str | None) -> str:
        """Get a new token after a 401.

        Args:
            endpoint: Endpoint that returned 401, for logging.
            rejected_token: The token the failed request was sent with.

        Returns:
            The token to replay the request with.

        Raises:
            AuthenticationError: If no handler is configured or login fails.
        """
        if self._auth_handler is None:
            msg = "Received status 401 and no authentication handler is configured"
            raise AuthenticationError(msg)

        _LOGGER.debug("Received status 401 for %s", endpoint)
        return await self._auth_handler.reauthenticate(rejected_token)

    async def _send(
        self,
        method: str,
        endpoint: str,
        *,
        json_data: dict[str, Any] | None,
        token: str | None,
    ) -> tuple[int, dict[str, Any] | None]:
        """Send a single request without any retry handling."""
        assert self._session is not None

        url = f"{self.base_url}{endpoint}"
        headers = self.build_headers(token)
        timeout = ClientTimeout(total=self._timeout)

        try:
            async with self._session.request(
                method,
                url,
                json=json_data,
                headers=headers,
                timeout=timeout,
            ) as response:
                _LOGGER.debug("%s %s -> HTTP %d", method, endpoint, response.status)

                response_data = None
                # Substring match handles charset parameters
                if "application/json" in response.content_type:
                    response_data = await response.json()

                return response.status, response_data

        except TimeoutError as exc:
            msg = f"Request to {url} timed out"
            raise EbecoTimeoutError(msg) from exc

        except ClientError as exc:
            msg = f"Failed to connect to API: {exc}"
            raise EbecoConnectionError(msg) from exc

        except ValueError as exc:
            msg = f"Invalid JSON response from API: {exc}"
            raise ApiError(msg) from exc

    def _validate_session(self) -> None:
        """Validate that the session is initialized and open.

        Raises:
            RuntimeError: If session is not initialized or is closed.
        """
        if self._session is None:
            msg = "Session not initialized. Use 'async with' or provide a session."
            raise RuntimeError(msg)

        if self._session.closed:
            msg = "Session is closed. Cannot make request."
            raise RuntimeError(msg)
