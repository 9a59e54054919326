"""Cooperative pause/resume of all fleet activity."""

import asyncio
import logging
from pathlib import Path
from typing import Optional

from nodemanager.models.errors import LockContentionError, StartupError
from nodemanager.models.fleet import Radio
from nodemanager.models.status import ProcessStatus
from nodemanager.services.lock_manager import LockHandle, LockManager
from nodemanager.services.status_controller import StatusController


class PauseController:
    """Suspends the pipeline while the target status is PAUSED.

    While paused the radio is closed and the update lock is released so another
    process can safely touch the same fleet. Both are reacquired before any
    fleet work resumes.
    """

    def __init__(
        self,
        radio: Radio,
        lock_path: Path,
        pause_delay: float,
        lock_manager: Optional[LockManager] = None,
        status: Optional[StatusController] = None,
    ):
        """Initialize pause controller.

        Args:
            radio: Radio transport to close and reopen
            lock_path: Update lock file location
            pause_delay: Seconds between target status checks while paused
            lock_manager: LockManager instance (new one if None)
            status: StatusController instance (uses singleton if None)
        """
        self.logger = logging.getLogger("nodemanager.pause")
        self.radio = radio
        self.lock_path = Path(lock_path)
        self.pause_delay = pause_delay
        self.lock_manager = lock_manager or LockManager()
        self.status = status or StatusController()

        self._lock: Optional[LockHandle] = None
        self._radio_open = False

    @property
    def lock_held(self) -> bool:
        return self._lock is not None and self._lock.held

    def start(self) -> None:
        """Take the update lock at process start.

        Raises:
            StartupError: If the lock cannot be acquired
        """
        try:
            self._lock = self.lock_manager.acquire(self.lock_path)
        except (LockContentionError, OSError) as e:
            raise StartupError(f"unable to lock container updates: {e}") from e

        self._radio_open = True
        self.status.current = ProcessStatus.RUNNING
        self.logger.debug(f"Initialised process: pause delay={self.pause_delay}s")

    def stop(self) -> None:
        """Release the update lock at shutdown."""
        self.lock_manager.release(self._lock)
        self._lock = None

    async def gate(self) -> None:
        """Block while the process should be paused.

        Returns immediately when running and no pause is requested. A failed
        resume leaves the process PAUSED, so the next call retries it.

        Raises:
            RadioError: If the radio cannot be closed or reopened
            LockContentionError: If the lock cannot be reacquired on resume
        """
        if (
            self.status.target == ProcessStatus.PAUSED
            and self.status.current == ProcessStatus.RUNNING
        ):
            await self._pause()

        if self.status.current != ProcessStatus.PAUSED:
            return

        while self.status.target == ProcessStatus.PAUSED:
            await asyncio.sleep(self.pause_delay)

        await self._resume()

    async def _pause(self) -> None:
        await self.radio.close_device()
        self._radio_open = False

        self.lock_manager.release(self._lock)
        self._lock = None

        self.status.current = ProcessStatus.PAUSED
        self.logger.info(f"Process status: {ProcessStatus.PAUSED.value}")

    async def _resume(self) -> None:
        if not self._radio_open:
            await self.radio.open_device()
            self._radio_open = True

        self._lock = self.lock_manager.acquire(self.lock_path)

        self.status.current = ProcessStatus.RUNNING
        self.logger.info(f"Process status: {ProcessStatus.RUNNING.value}")
