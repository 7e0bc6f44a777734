"""Tests for EbecoConfig."""

from __future__ import annotations

import pytest

from pyebeco.config import EbecoConfig, TemperatureSensor
from pyebeco.const import DEFAULT_BASE_URL, DEFAULT_POLL_INTERVAL_MS
from pyebeco.exceptions import ConfigError


class TestEbecoConfig:
    """Test configuration validation."""

    def test_defaults(self) -> None:
        """Test default values."""
        config = EbecoConfig(username="hello", password="world")

        assert config.api_host == DEFAULT_BASE_URL
        assert config.poll_interval == DEFAULT_POLL_INTERVAL_MS
        assert config.poll_interval_seconds == 10.0
        assert config.include_off_option is True
        assert config.temperature_sensor is TemperatureSensor.ROOM

    @pytest.mark.parametrize(
        ("username", "password"),
        [(None, "world"), ("hello", None), ("", "world"), ("hello", ""), (None, None)],
    )
    def test_missing_credentials(self, username: str | None, password: str | None) -> None:
        """Test missing credentials are rejected before anything else happens."""
        with pytest.raises(ConfigError, match="Not all required configuration values found"):
            EbecoConfig(username=username, password=password)

    def test_missing_credentials_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test a warning is logged for missing credentials."""
        with pytest.raises(ConfigError):
            EbecoConfig(username="hello")

        assert "username & password not found in config" in caplog.text

    def test_empty_host_uses_default(self) -> None:
        """Test an empty host falls back to the production API."""
        config = EbecoConfig(username="hello", password="world", api_host="")
        assert config.api_host == DEFAULT_BASE_URL

    @pytest.mark.parametrize("interval", [0, -100])
    def test_invalid_poll_interval(self, interval: int) -> None:
        """Test a non-positive poll interval is rejected."""
        with pytest.raises(ConfigError, match="Poll interval"):
            EbecoConfig(username="hello", password="world", poll_interval=interval)


class TestFromDict:
    """Test building a configuration from a host mapping."""

    def test_all_keys(self) -> None:
        """Test every recognised key."""
        config = EbecoConfig.from_dict(
            {
                "platform": "Ebeco",
                "username": "hello",
                "password": "world",
                "apiHost": "https://test.example.com",
                "pollFrequency": 30000,
                "includeOffOption": False,
                "temperatureSensor": 0,
            }
        )

        assert config.username == "hello"
        assert config.password == "world"
        assert config.api_host == "https://test.example.com"
        assert config.poll_interval == 30000
        assert config.poll_interval_seconds == 30.0
        assert config.include_off_option is False
        assert config.temperature_sensor is TemperatureSensor.FLOOR

    def test_minimal(self) -> None:
        """Test defaults are applied for absent keys."""
        config = EbecoConfig.from_dict({"username": "hello", "password": "world"})

        assert config.api_host == DEFAULT_BASE_URL
        assert config.poll_interval == DEFAULT_POLL_INTERVAL_MS
        assert config.include_off_option is True
        assert config.temperature_sensor is TemperatureSensor.ROOM

    def test_missing_password(self) -> None:
        """Test missing credentials in the mapping."""
        with pytest.raises(ConfigError):
            EbecoConfig.from_dict({"username": "hello"})

    @pytest.mark.parametrize("value", [True, False])
    def test_include_off_option(self, value: bool) -> None:
        """Test boolean off option values are taken as given."""
        config = EbecoConfig.from_dict({"username": "hello", "password": "world", "includeOffOption": value})
        assert config.include_off_option is value

    @pytest.mark.parametrize("value", ["false", "true", 0, 1])
    def test_invalid_include_off_option(self, value: object) -> None:
        """Test non-boolean off option values are rejected instead of coerced."""
        with pytest.raises(ConfigError, match="includeOffOption must be true or false"):
            EbecoConfig.from_dict({"username": "hello", "password": "world", "includeOffOption": value})

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (0, TemperatureSensor.FLOOR),
            (1, TemperatureSensor.ROOM),
            ("floor", TemperatureSensor.FLOOR),
            ("ROOM", TemperatureSensor.ROOM),
            (TemperatureSensor.FLOOR, TemperatureSensor.FLOOR),
        ],
    )
    def test_temperature_sensor(self, value: object, expected: TemperatureSensor) -> None:
        """Test accepted temperature sensor values."""
        config = EbecoConfig.from_dict({"username": "hello", "password": "world", "temperatureSensor": value})
        assert config.temperature_sensor is expected

    @pytest.mark.parametrize("value", [2, "ceiling"])
    def test_unknown_temperature_sensor(self, value: object) -> None:
        """Test unknown sensors are rejected."""
        with pytest.raises(ConfigError, match="Unknown temperature sensor"):
            EbecoConfig.from_dict({"username": "hello", "password": "world", "temperatureSensor": value})
