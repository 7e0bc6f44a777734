"""Stateful device objects for Ebeco thermostats.

Each EbecoDevice owns the last known snapshot of one thermostat, keeps it
fresh by polling, reports changes to listeners and serializes writes against
that snapshot.
"""

from __future__ import annotations

import asyncio
import contextlib
import dataclasses
import logging
import math
from collections.abc import Callable  # noqa: TC003 - Used at runtime for type hints
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from pyebeco.config import TemperatureSensor
from pyebeco.const import DEFAULT_POLL_INTERVAL_MS, TEMPERATURE_PRECISION
from pyebeco.exceptions import (
    DeviceNotFoundError,
    EbecoError,
    InvalidParameterError,
    WriteRejectedError,
)
from pyebeco.models import UpdateIntent


if TYPE_CHECKING:
    from pyebeco.api import EbecoAPI
    from pyebeco.models import DeviceSnapshot

_LOGGER = logging.getLogger(__name__)

DeviceListener = Callable[["EbecoDevice", dict[str, Any]], None]


class EbecoDevice:
    """Stateful representation of an Ebeco thermostat.

    **Key Features:**
    - **State Caching**: Properties return the last known snapshot without API calls
    - **Serialized Access**: One lock per device covers refreshes and writes, so a
      refresh never overwrites a just-applied write with stale data
    - **Optimistic Updates**: A successful write updates the snapshot immediately
      instead of waiting for the next poll
    - **Skip-on-overlap Polling**: A poll tick is skipped while a refresh is still
      in flight
    - **Change Listeners**: Callbacks receive the fields that changed

    Example:
        ```python
        def on_change(device: EbecoDevice, delta: dict[str, Any]) -> None:
            print(f"{device.name} changed: {delta}")


        async with EbecoClient(username="user@example.com", password="password") as client:
            await client.login()
            devices = await client.get_devices()
            device = devices[0]

            device.add_listener(on_change)
            await device.start_auto_refresh(interval=10)

            await device.set_target_temperature(21.5)
            print(device.target_temperature)  # 21.5, before the next poll
        ```
    """

    def __init__(
        self,
        api: EbecoAPI,
        state: DeviceSnapshot,
        *,
        include_off_option: bool = True,
        temperature_sensor: TemperatureSensor = TemperatureSensor.ROOM,
    ) -> None:
        """Initialize the device.

        Args:
            api: EbecoAPI instance shared by all devices of the account.
            state: Initial snapshot from discovery.
            include_off_option: Whether the thermostat may be switched off.
            temperature_sensor: Sensor reported as the current temperature.
        """
        self._api = api
        self._state = state
        self._last_refresh: datetime = datetime.now(UTC)
        self._last_applied_intent: UpdateIntent | None = None
        self._include_off_option = include_off_option
        self._temperature_sensor = temperature_sensor

        self._lock = asyncio.Lock()
        self._pending_refreshes = 0

        self._listeners: list[DeviceListener] = []

        self._auto_refresh_task: asyncio.Task[None] | None = None
        self._auto_refresh_interval: float = DEFAULT_POLL_INTERVAL_MS / 1000
        self._tick_tasks: set[asyncio.Task[dict[str, Any] | None]] = set()

    # -------------------------------------------------------------------------
    # Snapshot Properties
    # -------------------------------------------------------------------------

    @property
    def state(self) -> DeviceSnapshot:
        """Get the current snapshot."""
        return self._state

    @property
    def device_id(self) -> int:
        """Get device ID."""
        return self._state.id

    @property
    def name(self) -> str:
        """Get device display name."""
        return self._state.display_name

    @property
    def power_on(self) -> bool:
        """Check if the thermostat is on."""
        return self._state.power_on

    @property
    def target_temperature(self) -> float:
        """Get target temperature in degrees Celsius."""
        return self._state.temperature_set

    @property
    def floor_temperature(self) -> float:
        """Get floor sensor temperature."""
        return self._state.temperature_floor

    @property
    def room_temperature(self) -> float:
        """Get room sensor temperature."""
        return self._state.temperature_room

    @property
    def current_temperature(self) -> float:
        """Get the temperature of the configured sensor."""
        if self._temperature_sensor is TemperatureSensor.FLOOR:
            return self._state.temperature_floor
        return self._state.temperature_room

    @property
    def selected_program(self) -> str | None:
        """Get selected program (Manual, Week, Timer)."""
        return self._state.selected_program

    @property
    def program_state(self) -> str | None:
        """Get program state (Standby, Active, Timer)."""
        return self._state.program_state

    @property
    def has_error(self) -> bool:
        """Check if the thermostat reports an error."""
        return self._state.has_error

    @property
    def error_message(self) -> str | None:
        """Get error description."""
        return self._state.error_message

    @property
    def supports_power_off(self) -> bool:
        """Check if the thermostat may be switched off."""
        return self._include_off_option

    @property
    def last_applied_intent(self) -> UpdateIntent | None:
        """Get the last update the API confirmed."""
        return self._last_applied_intent

    @property
    def last_refresh(self) -> datetime:
        """Get timestamp of last state refresh."""
        return self._last_refresh

    @property
    def state_age_seconds(self) -> float:
        """Get the age of the cached state in seconds."""
        return (datetime.now(UTC) - self._last_refresh).total_seconds()

    @property
    def is_refreshing(self) -> bool:
        """Check if a refresh is pending or in progress."""
        return self._pending_refreshes > 0

    # -------------------------------------------------------------------------
    # Control Methods
    # -------------------------------------------------------------------------

    async def turn_on(self) -> DeviceSnapshot:
        """Turn the thermostat on."""
        return await self.set_power(True)

    async def turn_off(self) -> DeviceSnapshot:
        """Turn the thermostat off."""
        return await self.set_power(False)

    async def set_power(self, power_on: bool) -> DeviceSnapshot:
        """Set the power state.

        The current target temperature is sent along with the new power state.
        If the thermostat is already in the requested state, no request is sent.

        Args:
            power_on: True to turn on, False to turn off.

        Returns:
            The snapshot after the update.

        Raises:
            InvalidParameterError: If turning off is disabled for this device.
            WriteRejectedError: If the API reports the update as not applied.
            ApiError: If the request fails.
        """
        if not power_on and not self._include_off_option:
            msg = f"Turning off device {self.device_id} is disabled by configuration"
            raise InvalidParameterError(msg, parameter_name="power_on", value=power_on)

        async with self._lock:
            if self._state.power_on == power_on:
                _LOGGER.debug("Device %s is already powered %s", self.device_id, "on" if power_on else "off")
                return self._state

            intent = self._build_intent(power_on=power_on)
            return await self._apply_intent("set_power", intent)

    async def set_target_temperature(self, celsius: float) -> DeviceSnapshot:
        """Set the target temperature.

        The value is rounded to one decimal place. The current power state is
        sent along with the new temperature.

        Args:
            celsius: Target temperature in degrees Celsius.

        Returns:
            The snapshot after the update.

        Raises:
            InvalidParameterError: If the temperature is not a finite number.
            WriteRejectedError: If the API reports the update as not applied.
            ApiError: If the request fails.
        """
        if isinstance(celsius, bool) or not isinstance(celsius, int | float) or not math.isfinite(celsius):
            msg = f"Target temperature must be a finite number, got {celsius!r}"
            raise InvalidParameterError(msg, parameter_name="celsius", value=celsius)

        temperature = round(float(celsius), TEMPERATURE_PRECISION)

        async with self._lock:
            intent = self._build_intent(temperature_set=temperature)
            return await self._apply_intent("set_target_temperature", intent)

    def _build_intent(
        self,
        *,
        power_on: bool | None = None,
        temperature_set: float | None = None,
    ) -> UpdateIntent:
        """Build a complete update from the current snapshot with overrides."""
        state = self._state
        power = state.power_on if power_on is None else power_on
        if not self._include_off_option:
            power = True

        return UpdateIntent(
            device_id=state.id,
            power_on=power,
            temperature_set=state.temperature_set if temperature_set is None else temperature_set,
        )

    async def _apply_intent(self, operation: str, intent: UpdateIntent) -> DeviceSnapshot:
        """Send an update and apply it locally once the API confirms it.

        Must be called with the device lock held. If the caller is cancelled
        while the request is pending, the snapshot is left unchanged.
        """
        _LOGGER.debug("%s -> %s", operation, intent)

        try:
            success = await self._api.update_user_device(intent)
        except EbecoError as exc:
            _LOGGER.error("Failed to %s for device %s: %s", operation, self.device_id, exc)
            raise

        if not success:
            msg = "Update to device state was not successful"
            _LOGGER.warning("Failed to %s for device %s: %s", operation, self.device_id, msg)
            raise WriteRejectedError(msg, device_id=self.device_id)

        self._last_applied_intent = intent
        new_state = dataclasses.replace(
            self._state,
            power_on=intent.power_on,
            temperature_set=intent.temperature_set,
        )
        self._replace_state(new_state)
        return new_state

    # -------------------------------------------------------------------------
    # State Management
    # -------------------------------------------------------------------------

    def initialize(self, snapshot: DeviceSnapshot) -> None:
        """Seed the device with a snapshot from discovery.

        Args:
            snapshot: Snapshot for this device.

        Raises:
            ValueError: If the snapshot belongs to another device.
        """
        self._check_identity(snapshot)
        self._state = snapshot
        self._last_refresh = datetime.now(UTC)

    async def apply_snapshot(self, snapshot: DeviceSnapshot) -> dict[str, Any]:
        """Replace the snapshot with one obtained elsewhere (e.g. rediscovery).

        Waits for any in-flight refresh or write to finish first.

        Args:
            snapshot: New snapshot for this device.

        Returns:
            The fields that changed.
        """
        self._check_identity(snapshot)
        async with self._lock:
            return self._replace_state(snapshot, refreshed=True)

    async def refresh(self) -> dict[str, Any]:
        """Refresh the snapshot from the device list.

        The snapshot is replaced wholesale; listeners are notified if anything
        changed.

        Returns:
            The fields that changed, mapped to their new values.

        Raises:
            DeviceNotFoundError: If the device is no longer in the device list.
            ApiError: If the request fails.
        """
        self._pending_refreshes += 1
        try:
            async with self._lock:
                devices = await self._api.get_user_devices()

                snapshot = next((device for device in devices if device.id == self.device_id), None)
                if snapshot is None:
                    msg = f"Could not find device for id: {self.device_id}"
                    _LOGGER.warning(msg)
                    raise DeviceNotFoundError(msg, device_id=self.device_id)

                return self._replace_state(snapshot, refreshed=True)
        finally:
            self._pending_refreshes -= 1

    async def poll(self) -> dict[str, Any] | None:
        """Run one polling tick.

        The tick is skipped when a refresh is already in flight. Failures are
        logged and the device keeps its last known snapshot until the next tick.

        Returns:
            The fields that changed, or None if the tick was skipped or failed.
        """
        if self.is_refreshing:
            _LOGGER.debug("Refresh already in flight for device %s, skipping tick", self.device_id)
            return None

        try:
            return await self.refresh()
        except EbecoError as exc:
            _LOGGER.error("Failed to load updated state for device %s: %s", self.device_id, exc)
            return None

    def _replace_state(self, new_state: DeviceSnapshot, *, refreshed: bool = False) -> dict[str, Any]:
        """Swap in a new snapshot and notify listeners of the difference."""
        delta = self._state.diff(new_state)
        self._state = new_state
        if refreshed:
            self._last_refresh = datetime.now(UTC)

        if delta:
            _LOGGER.debug("Device %s changed: %s", self.device_id, delta)
            self._notify_listeners(delta)

        return delta

    def _check_identity(self, snapshot: DeviceSnapshot) -> None:
        if snapshot.id != self._state.id:
            msg = f"Snapshot for device {snapshot.id} cannot be applied to device {self._state.id}"
            raise ValueError(msg)

    def _notify_listeners(self, delta: dict[str, Any]) -> None:
        """Notify all registered listeners of a state change.

        Listeners are called synchronously in the order they were registered.
        If a listener raises an exception, it is logged but doesn't affect
        other listeners.
        """
        for listener in self._listeners:
            try:
                listener(self, delta)
            except Exception:
                _LOGGER.exception("Error in state change listener for device %s", self.device_id)

    def add_listener(self, callback: DeviceListener) -> None:
        """Register a callback to be called when device state changes.

        The callback receives the device and a mapping of changed fields to
        their new values. It is called after a refresh that changed something
        and after every successful write.

        Args:
            callback: Callable taking an EbecoDevice and the delta.
        """
        if callback not in self._listeners:
            self._listeners.append(callback)
            _LOGGER.debug("Added state change listener for device %s", self.device_id)

    def remove_listener(self, callback: DeviceListener) -> None:
        """Unregister a state change callback.

        Args:
            callback: Previously registered callback to remove.
        """
        if callback in self._listeners:
            self._listeners.remove(callback)
            _LOGGER.debug("Removed state change listener for device %s", self.device_id)

    # -------------------------------------------------------------------------
    # Auto-refresh
    # -------------------------------------------------------------------------

    @property
    def is_auto_refreshing(self) -> bool:
        """Check if the polling timer is running."""
        return self._auto_refresh_task is not None and not self._auto_refresh_task.done()

    async def start_auto_refresh(self, interval: float | None = None) -> None:
        """Start polling the device on a fixed interval.

        Each tick runs as its own task. A tick that fires while the previous
        refresh is still running is skipped, so a slow API never builds up a
        backlog.

        Args:
            interval: Polling period in seconds. Defaults to the previous
                interval, initially 10 seconds.
        """
        await self.stop_auto_refresh()

        if interval is not None:
            if interval <= 0:
                msg = f"Polling interval must be positive, got {interval}"
                raise InvalidParameterError(msg, parameter_name="interval", value=interval)
            self._auto_refresh_interval = interval

        self._auto_refresh_task = asyncio.create_task(self._auto_refresh_loop())
        _LOGGER.info(
            "Polling for device %s status updates every %s s",
            self.device_id,
            self._auto_refresh_interval,
        )

    async def stop_auto_refresh(self) -> None:
        """Stop polling and cancel any tick still running."""
        if self._auto_refresh_task is not None:
            self._auto_refresh_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._auto_refresh_task
            self._auto_refresh_task = None
            _LOGGER.info("Stopped polling for device %s", self.device_id)

        ticks = list(self._tick_tasks)
        for tick in ticks:
            tick.cancel()
        if ticks:
            await asyncio.gather(*ticks, return_exceptions=True)

    async def shutdown(self) -> None:
        """Stop background work for this device."""
        await self.stop_auto_refresh()

    async def _auto_refresh_loop(self) -> None:
        """Background task that starts a polling tick at each interval.

        This runs until cancelled by stop_auto_refresh().
        """
        try:
            while True:
                await asyncio.sleep(self._auto_refresh_interval)
                _LOGGER.debug("Getting updated state for device %s on timer", self.device_id)
                tick = asyncio.create_task(self.poll())
                self._tick_tasks.add(tick)
                tick.add_done_callback(self._on_tick_done)
        except asyncio.CancelledError:
            _LOGGER.debug("Polling loop cancelled for device %s", self.device_id)

    def _on_tick_done(self, tick: asyncio.Task[dict[str, Any] | None]) -> None:
        """Forget a finished tick and log any error poll() did not handle."""
        self._tick_tasks.discard(tick)
        if tick.cancelled():
            return

        exc = tick.exception()
        if exc is not None:
            _LOGGER.error(
                "Unexpected error polling device %s",
                self.device_id,
                exc_info=(type(exc), exc, exc.__traceback__),
            )

    # -------------------------------------------------------------------------
    # String Representation
    # -------------------------------------------------------------------------

    def __str__(self) -> str:
        """Return string representation of device."""
        return f"{self.name} ({self.device_id})"

    def __repr__(self) -> str:
        """Return detailed string representation of device."""
        return f"EbecoDevice(device_id={self.device_id}, name='{self.name}')"
