"""Process-wide directory of managed applications."""

import logging
from typing import Dict, Iterator, Optional

from nodemanager.models.fleet import Application


class ApplicationRegistry:
    """Singleton directory of the applications this process manages.

    Populated by the application loader; read by the scheduler and the
    pending tracker. Iteration order is registration order.
    """

    _instance: Optional["ApplicationRegistry"] = None

    def __new__(cls):
        """Implement singleton pattern."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        """Initialize registry (only once due to singleton)."""
        if self._initialized:
            return

        self.logger = logging.getLogger("nodemanager.registry")
        self._applications: Dict[str, Application] = {}
        self._initialized = True

    def register(self, application: Application) -> None:
        """Add or replace an application, keyed by name."""
        self._applications[application.name] = application
        self.logger.debug(f"Registered application: {application.name}")

    def unregister(self, name: str) -> None:
        if self._applications.pop(name, None) is not None:
            self.logger.debug(f"Unregistered application: {name}")

    def get(self, name: str) -> Optional[Application]:
        return self._applications.get(name)

    def clear(self) -> None:
        self._applications.clear()

    def __iter__(self) -> Iterator[Application]:
        # Copy so loaders can register while a cycle is iterating
        return iter(list(self._applications.values()))

    def __len__(self) -> int:
        return len(self._applications)
