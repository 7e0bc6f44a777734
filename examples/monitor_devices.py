"""Monitor Ebeco thermostats example.

This example demonstrates:
- Building the client from a host configuration mapping
- Polling every thermostat in the background
- Reacting to state changes with listeners
"""

import asyncio
from datetime import datetime
from typing import Any

from pyebeco import EbecoClient, EbecoConfig, EbecoDevice


HOST_CONFIG = {
    "username": "your@email.com",
    "password": "your_password",
    "pollFrequency": 30000,
    "includeOffOption": True,
    "temperatureSensor": "FLOOR",
}


def on_change(device: EbecoDevice, delta: dict[str, Any]) -> None:
    """Print the fields that changed on a device.

    Args:
        device: The device that changed.
        delta: Changed fields mapped to their new values.
    """
    timestamp = datetime.now().strftime("%H:%M:%S")
    changes = ", ".join(f"{field}={value}" for field, value in delta.items())
    print(f"[{timestamp}] {device.name}: {changes}")

    if delta.get("has_error"):
        print(f"  ⚠️  {device.name} reports an error: {device.error_message}")


async def main() -> None:
    """Main monitoring function."""
    config = EbecoConfig.from_dict(HOST_CONFIG)

    async with EbecoClient(config=config) as client:
        devices = await client.setup()

        if not devices:
            print("No devices found.")
            return

        for device in devices:
            print(f"{device.name}: {device.current_temperature} °C (target {device.target_temperature} °C)")
            device.add_listener(on_change)

        print(f"\nMonitoring {len(devices)} device(s) every {config.poll_interval_seconds:.0f} seconds...")
        print("Press Ctrl+C to stop\n")

        await asyncio.Event().wait()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\nExiting...")
