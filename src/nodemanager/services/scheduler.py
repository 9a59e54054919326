"""Main processing loop over every managed application."""

import asyncio
import logging
from typing import Dict, Iterable, List, Optional

from nodemanager.models.errors import LockContentionError, RadioError
from nodemanager.models.fleet import Application
from nodemanager.services.orchestrator import Orchestrator
from nodemanager.services.pause import PauseController
from nodemanager.services.pending import PendingTracker
from nodemanager.services.registry import ApplicationRegistry


class Scheduler:
    """Runs the orchestrator for each application, cycle after cycle."""

    def __init__(
        self,
        orchestrator: Orchestrator,
        pending: PendingTracker,
        loop_delay: float,
        applications: Optional[Iterable[Application]] = None,
        pause: Optional[PauseController] = None,
    ):
        """Initialize scheduler.

        Args:
            orchestrator: Pipeline driver for a single application
            pending: Pending tracker refreshed before every cycle
            loop_delay: Seconds to sleep between cycles
            applications: Applications to process (uses registry singleton if None)
            pause: Pause controller gated before every cycle (the orchestrator's if None)
        """
        self.logger = logging.getLogger("nodemanager.scheduler")
        self.orchestrator = orchestrator
        self.pending = pending
        self.loop_delay = loop_delay
        self.applications = applications if applications is not None else ApplicationRegistry()
        self.pause = pause or orchestrator.pause

    async def run_cycle(self) -> Dict[str, List[Exception]]:
        """Process every application once.

        One application's errors never stop the others. Retrying is left to
        the next cycle.

        Returns:
            Errors per application name (only applications that failed)
        """
        # Gate once per cycle, the registry may be empty
        try:
            await self.pause.gate()
        except (RadioError, LockContentionError, OSError) as e:
            self.logger.error(f"Unable to apply process status: {e}")

        if self.pending.recompute():
            self.logger.info("Updates pending")

        failures: Dict[str, List[Exception]] = {}
        for application in self.applications:
            errors = await self.orchestrator.run(application)
            if not errors:
                continue

            failures[application.name] = errors
            for error in errors:
                self.logger.error(
                    f"Unable to process application {application.name}: {error}"
                )

        return failures

    async def run_forever(self) -> None:
        """Cycle until the task is cancelled."""
        self.logger.info(f"Scheduler started: loop delay={self.loop_delay}s")
        try:
            while True:
                await self.run_cycle()
                await asyncio.sleep(self.loop_delay)
        except asyncio.CancelledError:
            self.logger.info("Scheduler stopped")
            raise
