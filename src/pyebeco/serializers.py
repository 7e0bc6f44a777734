"""Serialization of request bodies for the Ebeco API.

Stateless functions that build the exact JSON bodies the API expects.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any


if TYPE_CHECKING:
    from pyebeco.models import UpdateIntent


def serialize_login_request(username: str, password: str) -> dict[str, Any]:
    """Build the body of an authentication request.

    Args:
        username: Account username or email address.
        password: Account password.

    Returns:
        Body in format {"userNameOrEmailAddress": str, "password": str}.
    """
    return {
        "userNameOrEmailAddress": username,
        "password": password,
    }


def serialize_update_intent(intent: UpdateIntent) -> dict[str, Any]:
    """Build the body of a device update request.

    Example:
        >>> serialize_update_intent(UpdateIntent(device_id=1, power_on=True, temperature_set=21.5))
        {'id': 1, 'temperatureSet': 21.5, 'powerOn': True}
    """
    return {
        "id": intent.device_id,
        "temperatureSet": intent.temperature_set,
        "powerOn": intent.power_on,
    }
