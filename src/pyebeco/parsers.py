"""Parsing utilities for Ebeco API responses.

This module converts raw JSON payloads into data models. Parsing is strict:
a payload that does not have the documented shape raises ApiError rather
than silently filling in defaults.
"""

from __future__ import annotations

from typing import Any

from pyebeco.exceptions import ApiError
from pyebeco.models import ApiEnvelope, ApiErrorInfo, DeviceSnapshot, LoginResponse


__all__ = [
    "parse_device_snapshot",
    "parse_device_snapshots",
    "parse_envelope",
    "parse_login_response",
]


def parse_envelope(data: Any) -> ApiEnvelope:
    """Parse the standard response envelope.

    Args:
        data: Raw JSON body in format:
              {"result": ..., "success": bool, "error": {...} | null, "unAuthorizedRequest": bool}

    Returns:
        ApiEnvelope instance.

    Raises:
        ApiError: If the body is not an envelope.
    """
    if not isinstance(data, dict) or "success" not in data:
        msg = f"Unexpected response body: {data!r}"
        raise ApiError(msg)

    error_data = data.get("error")
    error = None
    if isinstance(error_data, dict):
        error = ApiErrorInfo(
            code=error_data.get("code", 0),
            message=error_data.get("message") or "",
            details=error_data.get("details"),
        )

    return ApiEnvelope(
        result=data.get("result"),
        success=bool(data["success"]),
        error=error,
        unauthorized_request=bool(data.get("unAuthorizedRequest", False)),
    )


def parse_login_response(result: Any) -> LoginResponse:
    """Parse the result of an authentication request.

    Args:
        result: The envelope's result in format:
                {"accessToken": str, "expireInSeconds": int, "requiresTwoFactorVerification": bool}

    Returns:
        LoginResponse instance.

    Raises:
        ApiError: If the result is missing.
    """
    if not isinstance(result, dict):
        msg = "Missing result in authentication response"
        raise ApiError(msg)

    return LoginResponse(
        access_token=result.get("accessToken") or "",
        expire_in_seconds=int(result.get("expireInSeconds") or 0),
        requires_two_factor_verification=bool(result.get("requiresTwoFactorVerification", False)),
    )


def parse_device_snapshot(data: Any) -> DeviceSnapshot:
    """Parse a single device object.

    Every documented key must be present. ``selectedProgram``, ``programState``
    and ``errorMessage`` may be null.

    Args:
        data: Raw device object from the device list.

    Returns:
        DeviceSnapshot instance.

    Raises:
        ApiError: If a field is missing or has the wrong type.
    """
    if not isinstance(data, dict):
        msg = f"Unexpected device object: {data!r}"
        raise ApiError(msg)

    try:
        return DeviceSnapshot(
            id=_parse_int(data["id"], "id"),
            display_name=_parse_str(data["displayName"], "displayName"),
            power_on=_parse_bool(data["powerOn"], "powerOn"),
            selected_program=_parse_optional_str(data["selectedProgram"], "selectedProgram"),
            program_state=_parse_optional_str(data["programState"], "programState"),
            temperature_set=_parse_float(data["temperatureSet"], "temperatureSet"),
            temperature_floor=_parse_float(data["temperatureFloor"], "temperatureFloor"),
            temperature_room=_parse_float(data["temperatureRoom"], "temperatureRoom"),
            has_error=_parse_bool(data["hasError"], "hasError"),
            error_message=_parse_optional_str(data["errorMessage"], "errorMessage"),
        )
    except KeyError as exc:
        msg = f"Device object is missing field {exc.args[0]!r}"
        raise ApiError(msg) from exc
    except (TypeError, ValueError) as exc:
        msg = f"Device object has an invalid value: {exc}"
        raise ApiError(msg) from exc


def parse_device_snapshots(result: Any) -> list[DeviceSnapshot]:
    """Parse the device list, keeping the order returned by the API.

    Args:
        result: The envelope's result, an array of device objects.

    Returns:
        List of DeviceSnapshot instances.

    Raises:
        ApiError: If the result is not a list or any device is malformed.
    """
    if not isinstance(result, list):
        msg = f"Expected a list of devices, got {type(result).__name__}"
        raise ApiError(msg)

    return [parse_device_snapshot(item) for item in result]


def _parse_bool(value: Any, name: str) -> bool:
    if not isinstance(value, bool):
        msg = f"{name} must be a boolean, got {value!r}"
        raise TypeError(msg)
    return value


def _parse_int(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        msg = f"{name} must be an integer, got {value!r}"
        raise TypeError(msg)
    return value


def _parse_float(value: Any, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, int | float):
        msg = f"{name} must be a number, got {value!r}"
        raise TypeError(msg)
    return float(value)


def _parse_str(value: Any, name: str) -> str:
    if not isinstance(value, str):
        msg = f"{name} must be a string, got {value!r}"
        raise TypeError(msg)
    return value


def _parse_optional_str(value: Any, name: str) -> str | None:
    if value is None:
        return None
    return _parse_str(value, name)
