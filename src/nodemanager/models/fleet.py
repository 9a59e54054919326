"""Interfaces consumed from the fleet collaborators.

Applications, devices and the radio driver are owned by other components; the
process core only depends on the narrow surface described here.
"""

from typing import List, MutableMapping, Optional, Protocol

from nodemanager.models.status import DeviceStatus


class Device(Protocol):
    """A managed edge device."""

    commit: str
    target_commit: str
    status: DeviceStatus


class Application(Protocol):
    """A managed application and the devices provisioned against it.

    Fatal operations raise on failure. Per-device operations return one
    exception per failing device and carry on with the rest.
    """

    name: str
    board_type: Optional[str]
    devices: MutableMapping[str, Device]

    async def put_devices(self) -> None: ...

    async def handle_delete_flag(self) -> None: ...

    async def get_online_devices(self) -> None: ...

    async def provision_devices(self) -> List[Exception]: ...

    async def set_offline_device_status(self) -> List[Exception]: ...

    async def update_online_devices(self) -> List[Exception]: ...

    async def update_config_online_devices(self) -> List[Exception]: ...

    async def update_environment_online_devices(self) -> List[Exception]: ...

    async def handle_flags(self) -> None: ...


class Radio(Protocol):
    """Radio transport shared by every device operation."""

    async def reset_device(self) -> None: ...

    async def close_device(self) -> None: ...

    async def open_device(self) -> None: ...
