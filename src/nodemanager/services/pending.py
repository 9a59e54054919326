"""Tracks whether any online device is behind its target commit."""

import logging
from typing import Iterable, Optional

from nodemanager.models.fleet import Application
from nodemanager.models.status import DeviceStatus
from nodemanager.services.registry import ApplicationRegistry
from nodemanager.services.status_controller import StatusController


class PendingTracker:
    """Computes the process-wide ``updates_pending`` flag."""

    def __init__(
        self,
        applications: Optional[Iterable[Application]] = None,
        status: Optional[StatusController] = None,
    ):
        """Initialize pending tracker.

        Args:
            applications: Applications to scan (uses registry singleton if None)
            status: StatusController instance (uses singleton if None)
        """
        self.logger = logging.getLogger("nodemanager.pending")
        self.applications = applications if applications is not None else ApplicationRegistry()
        self.status = status or StatusController()

    def recompute(self) -> bool:
        """Scan every device and publish the result.

        Stops at the first online device whose commit differs from its target
        commit. Devices are never modified.

        Returns:
            True if at least one update is pending
        """
        pending = self._scan()
        self.status.updates_pending = pending
        self.logger.debug(f"Updates pending: {pending}")
        return pending

    def _scan(self) -> bool:
        for application in self.applications:
            for device in application.devices.values():
                if (
                    device.commit != device.target_commit
                    and device.status != DeviceStatus.OFFLINE
                ):
                    return True
        return False
