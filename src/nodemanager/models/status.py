"""Status enums for the node manager process and managed devices."""

from enum import Enum


class ProcessStatus(str, Enum):
    """Process lifecycle status.

    State transitions:
    running ──(target=paused)──► paused ──(target=running)──► running

    No terminal state; the process cycles for its whole lifetime.
    """

    RUNNING = "running"
    PAUSED = "paused"


class DeviceStatus(str, Enum):
    """Device reachability as reported by the fleet collaborators."""

    ONLINE = "online"
    OFFLINE = "offline"
