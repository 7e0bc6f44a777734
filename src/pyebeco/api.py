"""Device client for the Ebeco API.

Typed device operations layered on the Transport. Both operations benefit
from the transport's transparent reauthentication.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import TYPE_CHECKING, Any

from pyebeco.const import GET_USER_DEVICES_ENDPOINT, UPDATE_USER_DEVICE_ENDPOINT
from pyebeco.exceptions import ApiError
from pyebeco.parsers import parse_device_snapshots, parse_envelope
from pyebeco.serializers import serialize_update_intent


if TYPE_CHECKING:
    from pyebeco.auth import AuthenticationHandler
    from pyebeco.models import ApiEnvelope, DeviceSnapshot, LoginResponse, UpdateIntent
    from pyebeco.transport import Transport

_LOGGER = logging.getLogger(__name__)


class EbecoAPI:
    """Device operations for one Ebeco account.

    Example:
        ```python
        async with transport:
            api = EbecoAPI(transport=transport, auth_handler=auth)
            await api.login()

            devices = await api.get_user_devices()
            success = await api.update_user_device(
                UpdateIntent(device_id=devices[0].id, power_on=True, temperature_set=21.5)
            )
        ```
    """

    def __init__(self, *, transport: Transport, auth_handler: AuthenticationHandler) -> None:
        """Initialize the device client.

        Args:
            transport: Transport shared by all requests for the account.
            auth_handler: Authentication handler for the same account.
        """
        self._transport = transport
        self._auth_handler = auth_handler

    @property
    def transport(self) -> Transport:
        """Get the underlying transport."""
        return self._transport

    async def login(self) -> LoginResponse:
        """Log in with the account credentials.

        Returns:
            The parsed login response.
        """
        return await self._auth_handler.login()

    async def get_user_devices(self) -> list[DeviceSnapshot]:
        """Get all devices for the authenticated user.

        Returns:
            Device snapshots in the order returned by the API.

        Raises:
            ApiError: If the request fails or the response is malformed.
            AuthenticationError: If reauthentication after a 401 fails.
        """
        status, data = await self._transport.request("GET", GET_USER_DEVICES_ENDPOINT)
        envelope = self._check_response("get devices", status, data)

        devices = parse_device_snapshots(envelope.result)
        _LOGGER.debug("Loaded device list: %s", devices)
        return devices

    async def update_user_device(self, intent: UpdateIntent) -> bool:
        """Send a complete device update.

        A 200 response does not guarantee the write was applied; the return
        value is the API's own success flag.

        Args:
            intent: Desired power state and target temperature.

        Returns:
            True if the API reports the update as applied, False otherwise.

        Raises:
            ApiError: If the request fails or the response is malformed.
            AuthenticationError: If reauthentication after a 401 fails.
        """
        body = serialize_update_intent(intent)
        status, data = await self._transport.request("PUT", UPDATE_USER_DEVICE_ENDPOINT, json_data=body)

        if status != HTTPStatus.OK or data is None:
            msg = f"Failed to update device {intent.device_id}: HTTP {status}"
            _LOGGER.error(msg)
            raise ApiError(msg, status=status)

        envelope = parse_envelope(data)
        _LOGGER.debug("Sent update to device %s, success: %s", intent.device_id, envelope.success)

        if not envelope.success and envelope.error is not None:
            _LOGGER.warning(
                "Update to device %s was not applied: %s",
                intent.device_id,
                envelope.error.message,
            )

        return envelope.success

    def _check_response(self, operation: str, status: int, data: dict[str, Any] | None) -> ApiEnvelope:
        """Validate status and envelope of a response.

        Raises:
            ApiError: If the status is not 200 or the envelope reports failure.
        """
        if status != HTTPStatus.OK or data is None:
            msg = f"Failed to {operation}: HTTP {status}"
            _LOGGER.error(msg)
            raise ApiError(msg, status=status)

        envelope = parse_envelope(data)
        if not envelope.success:
            detail = envelope.error.message if envelope.error is not None else "unknown error"
            msg = f"Failed to {operation}: {detail}"
            raise ApiError(msg, status=status, error=envelope.error)

        return envelope
