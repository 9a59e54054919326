"""Global pytest fixtures and configuration."""

import sys
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from nodemanager.config import get_settings  # noqa: E402
from nodemanager.models.status import DeviceStatus  # noqa: E402
from nodemanager.services.registry import ApplicationRegistry  # noqa: E402
from nodemanager.services.status_controller import StatusController  # noqa: E402


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset process-wide singletons and cached settings around every test."""
    StatusController._instance = None
    ApplicationRegistry._instance = None
    get_settings.cache_clear()
    yield
    StatusController._instance = None
    ApplicationRegistry._instance = None
    get_settings.cache_clear()


@pytest.fixture
def lock_path(tmp_path):
    """Lock file location inside the test's temp dir."""
    return tmp_path / "locks" / "updates.lock"


@pytest.fixture
def mock_radio():
    """Radio transport where every operation succeeds."""
    radio = MagicMock()
    radio.reset_device = AsyncMock()
    radio.close_device = AsyncMock()
    radio.open_device = AsyncMock()
    return radio


def make_device(commit="a", target_commit="a", status=DeviceStatus.ONLINE):
    return SimpleNamespace(commit=commit, target_commit=target_commit, status=status)


@pytest.fixture
def device_factory():
    """Factory for devices with commit, target_commit and status."""
    return make_device


@pytest.fixture
def application_factory():
    """Factory for applications whose operations are AsyncMocks.

    Every operation records its name in ``app.calls`` so tests can assert on
    stage order. Per-device stages return ``[]`` unless overridden with
    ``app.stub(op_name, return_value=..., error=...)``.
    """

    def _make(name="app", board_type="nrf51822dk", devices=None):
        app = MagicMock()
        app.name = name
        app.board_type = board_type
        app.devices = devices if devices is not None else {}
        app.calls = []

        def _op(op_name, return_value=None, error=None):
            async def _record(*args, **kwargs):
                app.calls.append(op_name)
                if error is not None:
                    raise error
                return return_value

            return AsyncMock(side_effect=_record)

        def stub(op_name, return_value=None, error=None):
            setattr(app, op_name, _op(op_name, return_value, error))

        app.stub = stub
        app.put_devices = _op("put_devices")
        app.handle_delete_flag = _op("handle_delete_flag")
        app.get_online_devices = _op("get_online_devices")
        app.provision_devices = _op("provision_devices", [])
        app.set_offline_device_status = _op("set_offline_device_status", [])
        app.update_online_devices = _op("update_online_devices", [])
        app.update_config_online_devices = _op("update_config_online_devices", [])
        app.update_environment_online_devices = _op(
            "update_environment_online_devices", []
        )
        app.handle_flags = _op("handle_flags")
        return app

    return _make
