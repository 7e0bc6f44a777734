"""Tests for request body serialization."""

from __future__ import annotations

from pyebeco.models import UpdateIntent
from pyebeco.serializers import serialize_login_request, serialize_update_intent


def test_login_request() -> None:
    """Test the login body."""
    assert serialize_login_request("hello", "world") == {
        "userNameOrEmailAddress": "hello",
        "password": "world",
    }


def test_update_intent() -> None:
    """Test the update body holds exactly the three writable fields."""
    body = serialize_update_intent(UpdateIntent(device_id=1, power_on=True, temperature_set=21.5))
    assert body == {"id": 1, "temperatureSet": 21.5, "powerOn": True}


def test_update_intent_power_off() -> None:
    """Test powering off keeps the target temperature."""
    body = serialize_update_intent(UpdateIntent(device_id=7, power_on=False, temperature_set=18.5))
    assert body == {"id": 7, "temperatureSet": 18.5, "powerOn": False}
