"""Configuration for the Ebeco client."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from pyebeco.const import DEFAULT_BASE_URL, DEFAULT_POLL_INTERVAL_MS, MISSING_CREDENTIALS_MESSAGE
from pyebeco.exceptions import ConfigError


if TYPE_CHECKING:
    from collections.abc import Mapping

_LOGGER = logging.getLogger(__name__)


class TemperatureSensor(Enum):
    """Temperature sensor used to report the current temperature."""

    FLOOR = 0
    ROOM = 1


@dataclass
class EbecoConfig:
    """Client configuration supplied by the host application.

    Attributes:
        username: Account username or email address.
        password: Account password.
        api_host: Base URL of the Ebeco API.
        poll_interval: Polling period in milliseconds.
        include_off_option: Whether the thermostat may be switched off. When False,
            only the target temperature can be controlled and writes always send
            ``powerOn=true``.
        temperature_sensor: Sensor reported as the current temperature.
    """

    username: str | None = None
    password: str | None = None
    api_host: str = DEFAULT_BASE_URL
    poll_interval: int = DEFAULT_POLL_INTERVAL_MS
    include_off_option: bool = True
    temperature_sensor: TemperatureSensor = TemperatureSensor.ROOM

    def __post_init__(self) -> None:
        """Validate the configuration.

        Raises:
            ConfigError: If credentials are missing or the poll interval is invalid.
        """
        if not self.username or not self.password:
            _LOGGER.warning("username & password not found in config")
            raise ConfigError(MISSING_CREDENTIALS_MESSAGE)

        if not self.api_host:
            self.api_host = DEFAULT_BASE_URL

        if self.poll_interval <= 0:
            msg = f"Poll interval must be a positive number of milliseconds, got {self.poll_interval}"
            raise ConfigError(msg)

    @property
    def poll_interval_seconds(self) -> float:
        """Get the polling period in seconds."""
        return self.poll_interval / 1000

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> EbecoConfig:
        """Build a configuration from a host platform config mapping.

        Recognised keys are ``username``, ``password``, ``apiHost``,
        ``pollFrequency`` (milliseconds), ``includeOffOption`` and
        ``temperatureSensor`` (``0``/``"FLOOR"`` or ``1``/``"ROOM"``).
        Unknown keys are ignored.

        Raises:
            ConfigError: If required values are missing or invalid.
        """
        sensor = data.get("temperatureSensor")
        include_off_option = data.get("includeOffOption")
        poll_frequency = data.get("pollFrequency")

        return cls(
            username=data.get("username"),
            password=data.get("password"),
            api_host=data.get("apiHost") or DEFAULT_BASE_URL,
            poll_interval=int(poll_frequency) if poll_frequency else DEFAULT_POLL_INTERVAL_MS,
            include_off_option=_parse_include_off_option(include_off_option),
            temperature_sensor=_parse_sensor(sensor),
        )


def _parse_include_off_option(value: Any) -> bool:
    if value is None:
        return True
    if not isinstance(value, bool):
        msg = f"includeOffOption must be true or false, got {value!r}"
        raise ConfigError(msg)
    return value


def _parse_sensor(value: Any) -> TemperatureSensor:
    if value is None:
        return TemperatureSensor.ROOM
    if isinstance(value, TemperatureSensor):
        return value
    try:
        if isinstance(value, str):
            return TemperatureSensor[value.upper()]
        return TemperatureSensor(value)
    except (KeyError, ValueError) as exc:
        msg = f"Unknown temperature sensor: {value!r}"
        raise ConfigError(msg) from exc
