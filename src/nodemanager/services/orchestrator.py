"""Per-application reconciliation pipeline."""

import logging
from typing import Awaitable, Callable, List, Optional

from nodemanager.models.fleet import Application, Radio
from nodemanager.models.outcome import StageOutcome, fold_outcomes
from nodemanager.services.pause import PauseController

FatalStage = Callable[[], Awaitable[None]]
PartialStage = Callable[[], Awaitable[List[Exception]]]


class Orchestrator:
    """Runs the fixed stage sequence for one application at a time.

    Stage order:
    pause gate → board type → delete flag → radio reset → online devices →
    provision → offline status → firmware → config → environment → device flags

    Fatal stages raise and stop the pipeline. Per-device stages return their
    errors and the pipeline carries on. Provisioned devices are always put back
    once the run finishes.
    """

    def __init__(self, pause: PauseController, radio: Radio):
        """Initialize orchestrator.

        Args:
            pause: Pause controller gating every run
            radio: Radio transport reset before device I/O
        """
        self.logger = logging.getLogger("nodemanager.orchestrator")
        self.pause = pause
        self.radio = radio

    async def run(self, application: Application) -> List[Exception]:
        """Process one application.

        Args:
            application: Application to reconcile

        Returns:
            Per-device errors in stage order then device order, or the single
            error of a fatal stage; empty on full success. Never raises.
        """
        self.logger.info("-" * 100)
        outcomes: List[StageOutcome] = []

        try:
            for stage in self._pipeline(application):
                outcome = await stage
                if outcome is None:
                    break
                outcomes.append(outcome)
                if outcome.is_fatal:
                    self.logger.error(
                        f"Application {application.name}: stage {outcome.stage} "
                        f"failed: {outcome.errors[0]}"
                    )
                    break
        finally:
            errors = fold_outcomes(outcomes)
            try:
                await application.put_devices()
            except Exception as e:
                self.logger.error(
                    f"Application {application.name}: unable to put devices: {e}"
                )

        return errors

    def _pipeline(self, application: Application):
        """Yield awaitable stage outcomes in order.

        A ``None`` outcome ends the run without error.
        """
        yield self._fatal("pause", self.pause.gate)
        yield self._check_board_type(application)
        yield self._fatal("delete flag", application.handle_delete_flag)
        yield self._fatal("radio reset", self.radio.reset_device)
        yield self._fatal("online devices", application.get_online_devices)
        yield self._partial("provision", application.provision_devices)
        yield self._partial("offline status", application.set_offline_device_status)
        yield self._partial("firmware update", application.update_online_devices)
        yield self._partial("config update", application.update_config_online_devices)
        yield self._partial(
            "environment update", application.update_environment_online_devices
        )
        yield self._fatal("device flags", application.handle_flags)

    async def _check_board_type(self, application: Application) -> Optional[StageOutcome]:
        if not application.board_type:
            self.logger.warning(
                f"Processing application {application.name}: "
                f"application board type not set"
            )
            return None

        self.logger.info(
            f"Processing application {application.name}: "
            f"{len(application.devices)} devices"
        )
        return StageOutcome.ok("board type")

    async def _fatal(self, stage: str, operation: FatalStage) -> StageOutcome:
        try:
            await operation()
        except Exception as e:
            return StageOutcome.fatal(stage, e)
        return StageOutcome.ok(stage)

    async def _partial(self, stage: str, operation: PartialStage) -> StageOutcome:
        try:
            errors = await operation()
        except Exception as e:
            return StageOutcome.fatal(stage, e)

        for error in errors or []:
            self.logger.warning(f"Stage {stage}: {error}")
        return StageOutcome.partial(stage, errors or [])
