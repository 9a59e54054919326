"""Process status shared between the scheduler and the control API."""

import logging
import threading
from typing import Optional

from pydantic import BaseModel, Field

from nodemanager.models.status import ProcessStatus


class StatusSnapshot(BaseModel):
    """Consistent view of the process status at one instant."""

    current: ProcessStatus = Field(..., description="What is true now")
    target: ProcessStatus = Field(..., description="What the controller asked for")
    updates_pending: bool = Field(
        False, description="At least one online device is behind its target commit"
    )


class StatusController:
    """Singleton owner of the process status.

    ``target`` is the only externally writable input; ``current`` is written by
    the pause controller and ``updates_pending`` by the pending tracker. All
    three live under one lock so readers on other threads see a consistent
    snapshot.
    """

    _instance: Optional["StatusController"] = None

    def __new__(cls):
        """Implement singleton pattern."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        """Initialize status controller (only once due to singleton)."""
        if self._initialized:
            return

        self.logger = logging.getLogger("nodemanager.status")
        self._lock = threading.Lock()
        self._current = ProcessStatus.RUNNING
        self._target = ProcessStatus.RUNNING
        self._updates_pending = False

        self._initialized = True

    @property
    def current(self) -> ProcessStatus:
        with self._lock:
            return self._current

    @current.setter
    def current(self, status: ProcessStatus) -> None:
        with self._lock:
            self._current = status

    @property
    def target(self) -> ProcessStatus:
        with self._lock:
            return self._target

    @property
    def updates_pending(self) -> bool:
        with self._lock:
            return self._updates_pending

    @updates_pending.setter
    def updates_pending(self, pending: bool) -> None:
        with self._lock:
            self._updates_pending = pending

    def set_target(self, status: ProcessStatus) -> None:
        with self._lock:
            previous = self._target
            self._target = status
        if previous != status:
            self.logger.info(f"Target status changed: {previous.value} -> {status.value}")

    def request_pause(self) -> None:
        self.set_target(ProcessStatus.PAUSED)

    def request_resume(self) -> None:
        self.set_target(ProcessStatus.RUNNING)

    def snapshot(self) -> StatusSnapshot:
        with self._lock:
            return StatusSnapshot(
                current=self._current,
                target=self._target,
                updates_pending=self._updates_pending,
            )

    def reset(self) -> None:
        """Back to RUNNING/RUNNING with nothing pending."""
        with self._lock:
            self._current = ProcessStatus.RUNNING
            self._target = ProcessStatus.RUNNING
            self._updates_pending = False
