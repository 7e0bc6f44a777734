"""Device manager and coordinator for Ebeco thermostats.

This module wires one account's credential store, transport, authentication
handler and device client together, and manages one EbecoDevice per
thermostat.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from pyebeco.api import EbecoAPI
from pyebeco.auth import AuthenticationHandler
from pyebeco.config import EbecoConfig
from pyebeco.const import DEFAULT_BASE_URL
from pyebeco.credentials import CredentialStore
from pyebeco.devices import EbecoDevice
from pyebeco.transport import Transport


if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from aiohttp import ClientSession

    from pyebeco.models import LoginResponse

_LOGGER = logging.getLogger(__name__)


class EbecoClient:
    """Device manager and coordinator for one Ebeco account.

    The client owns exactly one credential store and one transport, shared by
    every device it creates.

    Example:
        Basic usage with automatic session management:

        ```python
        from pyebeco import EbecoClient

        async with EbecoClient(username="user@example.com", password="password") as client:
            await client.login()
            devices = await client.get_devices()

            for device in devices:
                await device.set_target_temperature(22)
        ```

        Host start-up sequence with polling:

        ```python
        config = EbecoConfig.from_dict(host_config)

        async with EbecoClient(config=config) as client:
            devices = await client.setup()
            for device in devices:
                device.add_listener(push_to_host)
            await stop_event.wait()
        ```

    Attributes:
        config: Validated client configuration.
    """

    def __init__(
        self,
        username: str | None = None,
        password: str | None = None,
        base_url: str = DEFAULT_BASE_URL,
        *,
        config: EbecoConfig | None = None,
        session: ClientSession | None = None,
        on_token_updated: Callable[[AuthenticationHandler], None] | None = None,
    ) -> None:
        """Initialize the Ebeco client.

        Args:
            username: Account username or email address. Ignored if config is given.
            password: Account password. Ignored if config is given.
            base_url: Base URL for the API. Ignored if config is given.
            config: Optional complete configuration.
            session: Optional aiohttp ClientSession. If not provided, one will be
                created when entering the context manager.
            on_token_updated: Optional callback invoked after each successful login.

        Raises:
            ConfigError: If username or password is missing.
        """
        if config is None:
            config = EbecoConfig(username=username, password=password, api_host=base_url)
        self.config = config

        # Validated by EbecoConfig
        assert config.username is not None
        assert config.password is not None

        self._credentials = CredentialStore(config.username, config.password)
        self._transport = Transport(self._credentials, session=session, base_url=config.api_host)
        self._auth_handler = AuthenticationHandler(
            transport=self._transport,
            credentials=self._credentials,
            on_token_updated=on_token_updated,
        )
        self._api = EbecoAPI(transport=self._transport, auth_handler=self._auth_handler)

        self._devices: dict[int, EbecoDevice] = {}

    @property
    def api(self) -> EbecoAPI:
        """Get the underlying device client."""
        return self._api

    @property
    def auth_handler(self) -> AuthenticationHandler:
        """Get the authentication handler."""
        return self._auth_handler

    @property
    def devices(self) -> list[EbecoDevice]:
        """Get the devices discovered so far."""
        return list(self._devices.values())

    async def __aenter__(self) -> EbecoClient:
        """Enter the context manager.

        Creates the HTTP session if needed.

        Returns:
            Self for use in async with statements.
        """
        await self._transport.__aenter__()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit the context manager.

        Stops polling for all devices and closes the session if the client owns it.
        """
        await self.stop_polling()
        await self._transport.__aexit__(exc_type, exc_val, exc_tb)

    async def login(self) -> LoginResponse:
        """Log in with the configured credentials.

        Returns:
            The parsed login response.

        Raises:
            TwoFactorRequiredError: If the account requires two factor verification.
            AuthenticationRejectedError: If the login fails.
        """
        return await self._auth_handler.login()

    async def get_devices(self) -> list[EbecoDevice]:
        """Discover all devices for the account.

        Devices already known are reused and updated with the new snapshot, so
        there is never more than one EbecoDevice per device ID.

        Returns:
            EbecoDevice instances in the order returned by the API.

        Raises:
            ApiError: If the device list cannot be loaded.
        """
        snapshots = await self._api.get_user_devices()
        _LOGGER.info("Discovered %s devices", len(snapshots))

        devices: list[EbecoDevice] = []
        for snapshot in snapshots:
            device = self._devices.get(snapshot.id)
            if device is not None:
                _LOGGER.debug("Updating existing device %s", snapshot.id)
                await device.apply_snapshot(snapshot)
            else:
                _LOGGER.info("Device id %s has name %s", snapshot.id, snapshot.display_name)
                device = EbecoDevice(
                    api=self._api,
                    state=snapshot,
                    include_off_option=self.config.include_off_option,
                    temperature_sensor=self.config.temperature_sensor,
                )
                self._devices[snapshot.id] = device

            devices.append(device)

        return devices

    def get_device(self, device_id: int) -> EbecoDevice | None:
        """Get a discovered device by ID.

        Args:
            device_id: The device's ID.

        Returns:
            EbecoDevice instance if discovered, None otherwise.
        """
        return self._devices.get(device_id)

    async def refresh_all(self) -> None:
        """Refresh state for all discovered devices.

        Failures for individual devices are logged and do not stop the others.
        """
        if not self._devices:
            return

        devices = list(self._devices.values())
        results = await asyncio.gather(*[device.poll() for device in devices], return_exceptions=True)

        for device, result in zip(devices, results, strict=True):
            if isinstance(result, Exception):
                _LOGGER.error("Failed to refresh device %s: %s", device.device_id, result, exc_info=result)

    async def start_polling(self, interval: float | None = None) -> None:
        """Start polling every discovered device.

        Args:
            interval: Polling period in seconds. Defaults to the configured
                poll interval.
        """
        seconds = self.config.poll_interval_seconds if interval is None else interval
        for device in self._devices.values():
            await device.start_auto_refresh(interval=seconds)

    async def stop_polling(self) -> None:
        """Stop polling every device."""
        for device in self._devices.values():
            await device.shutdown()

    async def setup(self) -> list[EbecoDevice]:
        """Log in, discover devices and start polling them.

        Returns:
            The discovered devices.

        Raises:
            AuthenticationError: If the login fails.
            ApiError: If the device list cannot be loaded.
        """
        login_response = await self.login()
        _LOGGER.debug("Login succeeded, token valid for %s seconds", login_response.expire_in_seconds)

        devices = await self.get_devices()
        await self.start_polling()
        return devices

