"""FastAPI application for the edge node manager."""

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
import uvicorn

from nodemanager.config import (
    get_lock_file_location,
    get_log_level,
    get_pause_delay,
    get_settings,
)
from nodemanager.models.errors import StartupError
from nodemanager.utils.logging import setup_logger
from nodemanager.services.lock_manager import LockManager
from nodemanager.services.orchestrator import Orchestrator
from nodemanager.services.pause import PauseController
from nodemanager.services.pending import PendingTracker
from nodemanager.services.radio import BluetoothRadio
from nodemanager.services.registry import ApplicationRegistry
from nodemanager.services.scheduler import Scheduler
from nodemanager.services.status_controller import StatusController
from nodemanager.api.routes import router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown hooks.

    Startup:
    - Load settings (refuse to start on invalid configuration)
    - Initialize logger
    - Take the update lock (refuse to start if another process holds it)
    - Start the scheduler loop in the background

    Shutdown:
    - Cancel the scheduler loop
    - Release the update lock
    """
    try:
        settings = get_settings()
    except StartupError as e:
        logging.getLogger("nodemanager").critical(f"Unable to load configuration: {e}")
        raise

    logger = setup_logger(
        "nodemanager", settings.log_file, level=get_log_level()
    )
    logger.info("Node manager starting up...")

    status = StatusController()
    status.reset()

    radio = BluetoothRadio(settings.bluetooth_interface)
    pause = PauseController(
        radio=radio,
        lock_path=get_lock_file_location(),
        pause_delay=get_pause_delay(),
        lock_manager=LockManager(),
        status=status,
    )
    try:
        pause.start()
    except StartupError as e:
        logger.critical(f"Unable to lock container updates: {e}")
        raise

    registry = ApplicationRegistry()
    scheduler = Scheduler(
        orchestrator=Orchestrator(pause, radio),
        pending=PendingTracker(registry, status),
        loop_delay=settings.loop_delay,
        applications=registry,
        pause=pause,
    )
    task = asyncio.create_task(scheduler.run_forever())

    app.state.pause = pause
    app.state.scheduler = scheduler

    logger.info(f"Node manager ready on port {settings.api_port}")

    yield

    # Shutdown
    logger.info("Node manager shutting down...")
    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        pass
    pause.stop()


# Create FastAPI application
app = FastAPI(
    title="Edge Node Manager",
    description="Fleet reconciliation service for edge devices",
    version="1.0.0",
    lifespan=lifespan,
)

# Register API routes
app.include_router(router)


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "edge-node-manager", "version": "1.0.0"}


def main():
    """Main entry point for running the server."""
    try:
        settings = get_settings()
    except StartupError as e:
        logging.getLogger("nodemanager").critical(f"Unable to load configuration: {e}")
        raise SystemExit(1) from e

    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level,
        access_log=True,
    )


if __name__ == "__main__":
    main()
