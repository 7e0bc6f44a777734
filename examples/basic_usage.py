"""Basic usage example for pyebeco library."""

import asyncio

from pyebeco import EbecoClient, TwoFactorRequiredError


async def main() -> None:
    """Demonstrate basic usage of pyebeco."""
    # Initialize client with credentials
    async with EbecoClient(
        username="your@email.com",
        password="your_password",
    ) as client:
        try:
            await client.login()
        except TwoFactorRequiredError:
            print("Accounts with two factor authentication are not supported")
            return

        print("Connected to Ebeco API")

        # Get all devices
        devices = await client.get_devices()
        print(f"Found {len(devices)} device(s)")

        for device in devices:
            print(f"\nDevice: {device.name}")
            print(f"  ID: {device.device_id}")
            print(f"  Powered: {device.power_on}")
            print(f"  Program: {device.selected_program} ({device.program_state})")
            print(f"  Target: {device.target_temperature} °C")
            print(f"  Floor: {device.floor_temperature} °C")
            print(f"  Room: {device.room_temperature} °C")

            if device.has_error:
                print(f"  Error: {device.error_message}")
                continue

            print("\nSetting target temperature to 21.5 °C...")
            state = await device.set_target_temperature(21.5)
            print(f"Target is now {state.temperature_set} °C")

            # Refresh device state
            print("\nRefreshing device state...")
            changes = await device.refresh()
            print(f"Changed since last update: {changes or 'nothing'}")


if __name__ == "__main__":
    asyncio.run(main())
