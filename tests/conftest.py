"""Pytest fixtures for metserve tests."""

import os
import tempfile
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

# Keep log files out of the working tree before importing app modules
os.environ.setdefault("METSERVE_LOG_DIR", str(Path(tempfile.gettempdir()) / "metserve-test-logs"))

from fakes import (
    GPU_KEY,
    GPU_OUTPUT,
    HELPER_KEY,
    HELPER_OUTPUT,
    MEMORY_PRESSURE_KEY,
    MEMORY_PRESSURE_OUTPUT,
    PMSET_KEY,
    PMSET_OUTPUT,
    SENSOR_HELPER,
    SMC_KEY,
    SMC_OUTPUT,
    SWAP_KEY,
    SWAP_OUTPUT,
    FakeRunner,
    ok,
)

from metserve.config import Settings
from metserve.main import create_app
from metserve.services.probes import ProbeCollector
from metserve.services.runner import CommandResult


@pytest.fixture
def healthy_results() -> dict[str, CommandResult]:
    """Every command succeeds with realistic output."""
    return {
        GPU_KEY: ok(GPU_OUTPUT),
        MEMORY_PRESSURE_KEY: ok(MEMORY_PRESSURE_OUTPUT),
        SWAP_KEY: ok(SWAP_OUTPUT),
        PMSET_KEY: ok(PMSET_OUTPUT),
        SMC_KEY: ok(SMC_OUTPUT),
        HELPER_KEY: ok(HELPER_OUTPUT),
    }


@pytest.fixture
def fake_runner(healthy_results) -> FakeRunner:
    return FakeRunner(healthy_results)


@pytest.fixture
def collector(fake_runner) -> ProbeCollector:
    return ProbeCollector(sensor_helper=SENSOR_HELPER, runner=fake_runner)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        host="127.0.0.1",
        port=8787,
        dashboard_path=tmp_path / "dashboard.html",
        sensor_helper=list(SENSOR_HELPER),
    )


@pytest.fixture
def app(settings, collector):
    """App wired to the fake runner instead of real diagnostic tools."""
    app = create_app(settings)
    app.state.collector = collector
    return app


@pytest.fixture
async def client(app):
    """Create an async test client for the app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
