"""Python client library for Ebeco thermostats.

This package provides an async client for controlling Ebeco floor-heating
thermostats through the Ebeco Connect cloud API.

The library is organized into layers:
1. **Transport Layer** (pyebeco.transport): HTTP requests with transparent reauthentication
2. **Auth Layer** (pyebeco.auth): Login exchange and token storage
3. **API Layer** (pyebeco.api): Typed device list and update operations
4. **Device Layer** (pyebeco.devices): Stateful devices with polling and serialized writes
5. **Client Layer** (pyebeco.client): Wiring and device discovery for one account

Example:
    Basic usage:

    ```python
    from pyebeco import EbecoClient

    async with EbecoClient(username="user@example.com", password="password") as client:
        await client.login()
        devices = await client.get_devices()

        for device in devices:
            await device.set_target_temperature(21.5)
            print(f"{device.name}: {device.current_temperature} °C")
    ```
"""

from __future__ import annotations

from pyebeco.api import EbecoAPI
from pyebeco.auth import AuthenticationHandler
from pyebeco.client import EbecoClient
from pyebeco.config import EbecoConfig, TemperatureSensor
from pyebeco.credentials import CredentialStore
from pyebeco.devices import EbecoDevice
from pyebeco.exceptions import (
    ApiError,
    AuthenticationError,
    AuthenticationRejectedError,
    ConfigError,
    DeviceError,
    DeviceNotFoundError,
    EbecoConnectionError,
    EbecoError,
    EbecoTimeoutError,
    InvalidParameterError,
    TransportError,
    TwoFactorRequiredError,
    WriteRejectedError,
)
from pyebeco.models import (
    AccessToken,
    ApiEnvelope,
    ApiErrorInfo,
    DeviceSnapshot,
    LoginResponse,
    UpdateIntent,
)
from pyebeco.transport import Transport


__version__ = "0.1.0"

__all__ = [
    "AccessToken",
    "ApiEnvelope",
    "ApiError",
    "ApiErrorInfo",
    "AuthenticationError",
    "AuthenticationHandler",
    "AuthenticationRejectedError",
    "ConfigError",
    "CredentialStore",
    "DeviceError",
    "DeviceNotFoundError",
    "DeviceSnapshot",
    "EbecoAPI",
    "EbecoClient",
    "EbecoConfig",
    "EbecoConnectionError",
    "EbecoDevice",
    "EbecoError",
    "EbecoTimeoutError",
    "InvalidParameterError",
    "LoginResponse",
    "TemperatureSensor",
    "Transport",
    "TransportError",
    "TwoFactorRequiredError",
    "UpdateIntent",
    "WriteRejectedError",
    "__version__",
]
