"""Data models for Ebeco API requests and responses."""

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import UTC, datetime, timedelta
from typing import Any


__all__ = [
    "AccessToken",
    "ApiEnvelope",
    "ApiErrorInfo",
    "DeviceSnapshot",
    "LoginResponse",
    "UpdateIntent",
]


@dataclass(frozen=True)
class AccessToken:
    """Bearer token issued by the authentication endpoint.

    Instances are immutable; a new login always produces a new instance so the
    token and its issuance time are never observed out of step.

    Attributes:
        access_token: Bearer token for API requests.
        obtained_at: When the token was issued (UTC).
        expires_in: Token lifetime in seconds, as reported by the API.
    """

    access_token: str
    obtained_at: datetime
    expires_in: int

    @property
    def expires_at(self) -> datetime:
        """Get the absolute expiry time of the token."""
        return self.obtained_at + timedelta(seconds=self.expires_in)

    @property
    def is_expired(self) -> bool:
        """Check if the token has passed its expiry time."""
        return datetime.now(UTC) >= self.expires_at


@dataclass
class LoginResponse:
    """Response from authentication endpoint.

    Attributes:
        access_token: Bearer token for API requests.
        expire_in_seconds: Token lifetime in seconds.
        requires_two_factor_verification: Whether the account needs a second factor.
    """

    access_token: str
    expire_in_seconds: int
    requires_two_factor_verification: bool


@dataclass
class ApiErrorInfo:
    """Error details carried in a response envelope.

    Attributes:
        code: Numeric error code.
        message: Short error message.
        details: Longer description, if any.
    """

    code: int
    message: str
    details: str | None = None


@dataclass
class ApiEnvelope:
    """Standard wrapper around every Ebeco API response.

    Attributes:
        result: The payload of the response.
        success: Whether the API reports the operation as successful.
        error: Error details when the operation failed.
        unauthorized_request: Whether the API considered the request unauthorized.
    """

    result: Any
    success: bool
    error: ApiErrorInfo | None = None
    unauthorized_request: bool = False


@dataclass(frozen=True)
class DeviceSnapshot:
    """Point-in-time copy of a thermostat's state.

    Attributes:
        id: Device identifier assigned by the Ebeco platform.
        display_name: The given name of the thermostat.
        power_on: Whether the thermostat is on.
        selected_program: Program set on the thermostat (Manual, Week, Timer).
        program_state: State of the current program (Standby, Active, Timer).
        temperature_set: Target temperature in degrees Celsius.
        temperature_floor: Current temperature from the floor sensor.
        temperature_room: Current temperature from the room sensor.
        has_error: Whether the thermostat reports an error or appears offline.
        error_message: Description of the error, if any.
    """

    id: int
    display_name: str
    power_on: bool
    selected_program: str | None
    program_state: str | None
    temperature_set: float
    temperature_floor: float
    temperature_room: float
    has_error: bool
    error_message: str | None

    def diff(self, other: DeviceSnapshot) -> dict[str, Any]:
        """Return the fields of ``other`` whose values differ from this snapshot.

        Args:
            other: The newer snapshot.

        Returns:
            Mapping of field name to the value in ``other`` for every changed field.
        """
        changes: dict[str, Any] = {}
        for snapshot_field in fields(self):
            new_value = getattr(other, snapshot_field.name)
            if getattr(self, snapshot_field.name) != new_value:
                changes[snapshot_field.name] = new_value
        return changes


@dataclass(frozen=True)
class UpdateIntent:
    """Complete set of writable fields for a device update.

    Attributes:
        device_id: Device identifier.
        power_on: Desired power state.
        temperature_set: Desired target temperature in degrees Celsius.
    """

    device_id: int
    power_on: bool
    temperature_set: float
