"""Unit tests for Orchestrator."""

import asyncio

import pytest

from nodemanager.models.errors import RadioError
from nodemanager.models.status import ProcessStatus
from nodemanager.services.orchestrator import Orchestrator
from nodemanager.services.pause import PauseController
from nodemanager.services.status_controller import StatusController

FULL_PIPELINE = [
    "handle_delete_flag",
    "get_online_devices",
    "provision_devices",
    "set_offline_device_status",
    "update_online_devices",
    "update_config_online_devices",
    "update_environment_online_devices",
    "handle_flags",
    "put_devices",
]


@pytest.fixture
def status():
    return StatusController()


@pytest.fixture
def pause(mock_radio, lock_path, status):
    controller = PauseController(
        radio=mock_radio, lock_path=lock_path, pause_delay=0.01, status=status
    )
    controller.start()
    yield controller
    controller.stop()


@pytest.fixture
def orchestrator(pause, mock_radio):
    return Orchestrator(pause, mock_radio)


@pytest.mark.unit
class TestOrchestratorSuccess:
    """Pipeline runs that succeed."""

    @pytest.mark.asyncio
    async def test_runs_every_stage_in_order(self, orchestrator, mock_radio, application_factory):
        app = application_factory()

        errors = await orchestrator.run(app)

        assert errors == []
        assert app.calls == FULL_PIPELINE
        mock_radio.reset_device.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_radio_reset_happens_before_enumeration(
        self, orchestrator, mock_radio, application_factory
    ):
        app = application_factory()
        seen = []

        async def reset():
            seen.append(list(app.calls))

        mock_radio.reset_device.side_effect = reset

        await orchestrator.run(app)

        assert seen == [["handle_delete_flag"]]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("board_type", [None, ""])
    async def test_unset_board_type_skips_pipeline(
        self, orchestrator, mock_radio, application_factory, board_type
    ):
        app = application_factory(board_type=board_type)

        errors = await orchestrator.run(app)

        assert errors == []
        assert app.calls == ["put_devices"]
        mock_radio.reset_device.assert_not_awaited()


@pytest.mark.unit
class TestOrchestratorFatalStages:
    """Fatal stages stop the pipeline but devices are still put back."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "op_name",
        ["handle_delete_flag", "get_online_devices", "handle_flags"],
    )
    async def test_fatal_stage_stops_later_stages(
        self, orchestrator, application_factory, op_name
    ):
        app = application_factory()
        failure = RuntimeError(f"{op_name} failed")
        app.stub(op_name, error=failure)

        errors = await orchestrator.run(app)

        assert errors == [failure]
        stop = FULL_PIPELINE.index(op_name)
        assert app.calls == FULL_PIPELINE[: stop + 1] + ["put_devices"]

    @pytest.mark.asyncio
    async def test_radio_reset_failure(self, orchestrator, mock_radio, application_factory):
        app = application_factory()
        mock_radio.reset_device.side_effect = RadioError("hciconfig hci0 reset: exit code 1")

        errors = await orchestrator.run(app)

        assert len(errors) == 1
        assert isinstance(errors[0], RadioError)
        assert app.calls == ["handle_delete_flag", "put_devices"]
        app.put_devices.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_partial_stage_raising_is_fatal(self, orchestrator, application_factory):
        app = application_factory()
        failure = ConnectionError("scan aborted")
        app.stub("provision_devices", error=failure)

        errors = await orchestrator.run(app)

        assert errors == [failure]
        assert "set_offline_device_status" not in app.calls
        assert app.calls[-1] == "put_devices"

    @pytest.mark.asyncio
    async def test_fatal_after_partial_returns_only_fatal_error(
        self, orchestrator, application_factory
    ):
        app = application_factory()
        device_error = RuntimeError("device 01: update failed")
        flags_error = RuntimeError("flags failed")
        app.stub("update_online_devices", return_value=[device_error])
        app.stub("handle_flags", error=flags_error)

        errors = await orchestrator.run(app)

        assert errors == [flags_error]
        assert app.calls == FULL_PIPELINE

    @pytest.mark.asyncio
    async def test_put_devices_failure_is_logged_not_returned(
        self, orchestrator, application_factory, caplog
    ):
        app = application_factory()
        app.stub("put_devices", error=RuntimeError("put failed"))

        errors = await orchestrator.run(app)

        assert errors == []
        assert "unable to put devices: put failed" in caplog.text

    @pytest.mark.asyncio
    async def test_radio_reset_failure_with_put_devices_failure(
        self, orchestrator, mock_radio, application_factory
    ):
        app = application_factory()
        reset_error = RadioError("hciconfig hci0 reset: exit code 1")
        mock_radio.reset_device.side_effect = reset_error
        app.stub("put_devices", error=RuntimeError("put failed"))

        errors = await orchestrator.run(app)

        assert errors == [reset_error]


@pytest.mark.unit
class TestOrchestratorPartialStages:
    """Per-device stages carry on and concatenate their errors."""

    @pytest.mark.asyncio
    async def test_errors_concatenated_in_stage_order(self, orchestrator, application_factory):
        app = application_factory()
        e1 = RuntimeError("device 01: provision failed")
        e2 = RuntimeError("device 02: firmware failed")
        e3 = RuntimeError("device 03: firmware failed")
        e4 = RuntimeError("device 02: environment failed")
        app.stub("provision_devices", return_value=[e1])
        app.stub("update_online_devices", return_value=[e2, e3])
        app.stub("update_environment_online_devices", return_value=[e4])

        errors = await orchestrator.run(app)

        assert errors == [e1, e2, e3, e4]
        assert app.calls == FULL_PIPELINE

    @pytest.mark.asyncio
    async def test_one_error_per_failing_device(self, orchestrator, application_factory):
        app = application_factory()
        e1 = RuntimeError("device 01: config failed")
        app.stub("update_config_online_devices", return_value=[e1])

        errors = await orchestrator.run(app)

        assert errors == [e1]

    @pytest.mark.asyncio
    async def test_none_from_partial_stage_is_success(self, orchestrator, application_factory):
        app = application_factory()
        app.stub("set_offline_device_status", return_value=None)

        errors = await orchestrator.run(app)

        assert errors == []


@pytest.mark.unit
class TestOrchestratorPauseGate:
    """Runs are gated by the pause controller."""

    @pytest.mark.asyncio
    async def test_gate_failure_still_puts_devices(
        self, orchestrator, mock_radio, status, application_factory
    ):
        app = application_factory()
        mock_radio.close_device.side_effect = RadioError("hciconfig hci0 down: exit code 1")
        status.request_pause()

        errors = await orchestrator.run(app)

        assert len(errors) == 1
        assert isinstance(errors[0], RadioError)
        assert app.calls == ["put_devices"]

    @pytest.mark.asyncio
    async def test_run_blocks_while_paused(
        self, orchestrator, pause, mock_radio, status, application_factory
    ):
        app = application_factory()
        status.request_pause()

        task = asyncio.create_task(orchestrator.run(app))
        await asyncio.sleep(0.05)

        assert not task.done()
        assert app.calls == []
        assert status.current == ProcessStatus.PAUSED
        assert not pause.lock_held

        status.request_resume()
        errors = await asyncio.wait_for(task, timeout=1.0)

        assert errors == []
        assert app.calls == FULL_PIPELINE
        assert status.current == ProcessStatus.RUNNING
        assert pause.lock_held
        mock_radio.open_device.assert_awaited_once()
