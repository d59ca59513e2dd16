"""Shared pytest fixtures for Command Relay tests."""

from datetime import datetime, timedelta, timezone
from typing import Generator

import pytest
from fastapi.testclient import TestClient

from command_relay.api.app import create_app
from command_relay.api.dependencies import set_control_plane_instance, set_sweeper_instance
from command_relay.config import Config
from command_relay.core import (
    CommandQueueStore,
    ControlPlane,
    DeviceDirectory,
    ExpirySweeper,
)

ONLINE_WINDOW = 300.0
EVICTION_WINDOW = 3600.0


class FakeClock:
    """Manually advanced clock returning aware UTC datetimes."""

    def __init__(self, start: datetime = None):
        self.now = start or datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture(scope="function")
def clock() -> FakeClock:
    """Create a controllable clock."""
    return FakeClock()


@pytest.fixture(scope="function")
def test_config() -> Config:
    """Create a test configuration."""
    return Config(
        online_window_seconds=ONLINE_WINDOW,
        eviction_window_seconds=EVICTION_WINDOW,
        sweep_interval_seconds=0.01,
        api_host="127.0.0.1",
        api_port=5000,
        metrics_enabled=False,
        log_level="WARNING",  # Quiet logs in tests
        log_format="text",
    )


@pytest.fixture(scope="function")
def directory(clock: FakeClock, test_config: Config) -> DeviceDirectory:
    """Create a device directory driven by the fake clock."""
    return DeviceDirectory(
        online_window_seconds=test_config.online_window_seconds,
        device_code_prefix=test_config.device_code_prefix,
        device_code_min_length=test_config.device_code_min_length,
        clock=clock,
    )


@pytest.fixture(scope="function")
def queues(directory: DeviceDirectory) -> CommandQueueStore:
    """Create a command queue store bound to the directory."""
    return CommandQueueStore(directory)


@pytest.fixture(scope="function")
def control_plane(directory: DeviceDirectory, queues: CommandQueueStore) -> ControlPlane:
    """Create a control plane without metrics."""
    return ControlPlane(directory, queues)


@pytest.fixture(scope="function")
def sweeper(
    directory: DeviceDirectory,
    queues: CommandQueueStore,
    test_config: Config,
) -> ExpirySweeper:
    """Create an expiry sweeper with a short interval."""
    return ExpirySweeper(
        directory,
        queues,
        eviction_window_seconds=test_config.eviction_window_seconds,
        interval_seconds=test_config.sweep_interval_seconds,
    )


@pytest.fixture(scope="function")
def test_app(control_plane: ControlPlane) -> Generator[TestClient, None, None]:
    """Create a FastAPI test client wired to the test control plane."""
    set_control_plane_instance(control_plane)
    app = create_app(enable_metrics=False)
    yield TestClient(app)
    set_control_plane_instance(None)
    set_sweeper_instance(None)


@pytest.fixture(scope="session")
def sample_device_ids() -> list[str]:
    """Valid device codes for testing."""
    return ["PCAB12345", "PC000001", "PCDESKTOP-42"]
