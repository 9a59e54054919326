"""Error taxonomy for the node manager.

Every error carries a short code prefix so log lines and API responses can be
grepped the same way (e.g. ``LOCK_CONTENTION: /tmp/resin/resin-updates.lock``).
"""


class NodeManagerError(Exception):
    """Base class for node manager errors."""

    code = "NODE_MANAGER_ERROR"

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"{self.code}: {detail}")


class StartupError(NodeManagerError):
    """Configuration or lock failure while the process is starting.

    The entry point decides how to report it; the core never exits the process.
    """

    code = "STARTUP_FAILED"


class LockContentionError(NodeManagerError):
    """Another live process already holds the update lock."""

    code = "LOCK_CONTENTION"


class RadioError(NodeManagerError):
    """Radio transport could not be reset, opened or closed."""

    code = "RADIO_FAILED"
