"""Exclusive update lock shared with other fleet-mutating processes."""

import fcntl
import logging
import os
from pathlib import Path
from typing import IO, Optional

from nodemanager.models.errors import LockContentionError


class LockHandle:
    """A held lock on a lock file.

    One handle per acquisition; after release it is dead and a new one must be
    acquired.
    """

    def __init__(self, path: Path, handle: IO[str]):
        self.path = path
        self._handle: Optional[IO[str]] = handle

    @property
    def held(self) -> bool:
        return self._handle is not None

    def unlock(self) -> None:
        if self._handle is None:
            return
        try:
            fcntl.flock(self._handle.fileno(), fcntl.LOCK_UN)
        finally:
            self._handle.close()
            self._handle = None


class LockManager:
    """Acquires and releases the process-wide update lock.

    Uses a non-blocking ``flock`` so a crashed holder never leaves a stale lock
    behind: the kernel drops it with the holder's file descriptor.
    """

    def __init__(self):
        self.logger = logging.getLogger("nodemanager.lock")

    def acquire(self, path: Path) -> LockHandle:
        """Take the exclusive lock at ``path``.

        Args:
            path: Lock file location (parent directories are created)

        Returns:
            Held LockHandle

        Raises:
            LockContentionError: If another live process holds the lock
            OSError: If the lock file cannot be created
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        handle = path.open("a+", encoding="utf-8")
        try:
            fcntl.flock(handle.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
        except OSError as e:
            handle.close()
            raise LockContentionError(f"{path} is held by another process ({e})") from e

        handle.seek(0)
        handle.truncate()
        handle.write(f"{os.getpid()}\n")
        handle.flush()

        self.logger.debug(f"Acquired update lock: {path}")
        return LockHandle(path, handle)

    def release(self, lock: Optional[LockHandle]) -> None:
        """Release a lock handle; releasing twice (or None) is a no-op."""
        if lock is None or not lock.held:
            return
        lock.unlock()
        self.logger.debug(f"Released update lock: {lock.path}")
