"""Custom exceptions for pyebeco library."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any


if TYPE_CHECKING:
    from pyebeco.models import ApiErrorInfo


class EbecoError(Exception):
    """Base exception for all Ebeco errors."""


class ConfigError(EbecoError):
    """Exception raised when required configuration is missing or invalid."""


class AuthenticationError(EbecoError):
    """Exception raised for authentication failures."""


class TwoFactorRequiredError(AuthenticationError):
    """Exception raised when the account requires a second authentication factor.

    This cannot be resolved automatically and must be surfaced to the user.
    """


class AuthenticationRejectedError(AuthenticationError):
    """Exception raised when the login request was rejected or could not be sent."""


class ApiError(EbecoError):
    """Exception raised when an API call fails or returns an unexpected payload.

    Attributes:
        status: HTTP status code of the failed response, if one was received.
        error: Error details from the response envelope, if present.
    """

    def __init__(
        self,
        message: str = "",
        status: int | None = None,
        error: ApiErrorInfo | None = None,
    ) -> None:
        """Initialize ApiError.

        Args:
            message: Error message.
            status: Optional HTTP status code.
            error: Optional error details from the response envelope.
        """
        super().__init__(message)
        self.status = status
        self.error = error


class TransportError(ApiError):
    """Exception raised when a request could not be completed."""


class EbecoConnectionError(TransportError):
    """Exception raised for connection failures."""


class EbecoTimeoutError(TransportError):
    """Exception raised when API requests timeout."""


class DeviceError(EbecoError):
    """Exception raised for device-related errors.

    Attributes:
        device_id: Optional device ID associated with the error.
    """

    def __init__(self, message: str = "", device_id: int | None = None) -> None:
        """Initialize DeviceError.

        Args:
            message: Error message.
            device_id: Optional device ID associated with the error.
        """
        super().__init__(message)
        self.device_id = device_id


class DeviceNotFoundError(DeviceError):
    """Exception raised when a tracked device is missing from the device list."""


class WriteRejectedError(DeviceError):
    """Exception raised when the API accepted an update but reported it as not applied."""


class InvalidParameterError(EbecoError):
    """Exception raised for invalid parameter values.

    Attributes:
        parameter_name: Optional name of the invalid parameter.
        value: Optional value that was invalid.
    """

    def __init__(
        self,
        message: str = "",
        parameter_name: str | None = None,
        value: Any = None,
    ) -> None:
        """Initialize InvalidParameterError.

        Args:
            message: Error message.
            parameter_name: Optional name of the invalid parameter.
            value: Optional value that was invalid.
        """
        super().__init__(message)
        self.parameter_name = parameter_name
        self.value = value
