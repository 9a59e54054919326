"""Bluetooth radio control through hciconfig."""

import asyncio
import logging

from nodemanager.models.errors import RadioError


class BluetoothRadio:
    """Drives the local HCI adapter shared by every device operation."""

    def __init__(self, interface: str = "hci0"):
        """Initialize radio transport.

        Args:
            interface: HCI interface name (e.g., "hci0")
        """
        self.logger = logging.getLogger("nodemanager.radio")
        self.interface = interface

    async def reset_device(self) -> None:
        """Reset the adapter to drop connections left over from a previous cycle.

        Raises:
            RadioError: If hciconfig fails
        """
        await self._hciconfig("reset")

    async def close_device(self) -> None:
        """Bring the adapter down so other tooling can claim it.

        Raises:
            RadioError: If hciconfig fails
        """
        await self._hciconfig("down")

    async def open_device(self) -> None:
        """Bring the adapter back up.

        Raises:
            RadioError: If hciconfig fails
        """
        await self._hciconfig("up")

    async def _hciconfig(self, command: str) -> None:
        self.logger.debug(f"hciconfig {self.interface} {command}")

        try:
            process = await asyncio.create_subprocess_exec(
                "hciconfig",
                self.interface,
                command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
            _, stderr = await process.communicate()
        except OSError as e:
            raise RadioError(f"hciconfig {self.interface} {command}: {e}") from e

        if process.returncode != 0:
            raise RadioError(
                f"hciconfig {self.interface} {command}: "
                f"exit code {process.returncode}, "
                f"stderr: {stderr.decode().strip()}"
            )
