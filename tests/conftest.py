"""Pytest configuration and fixtures."""

import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line("markers", "integration: marks tests as integration tests")


class FakeClock:
    """Manually advanced clock for cooldown and TTL tests."""

    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class MockAsyncContextManager:
    """Helper for mocking async context managers."""

    def __init__(self, return_value):
        self.return_value = return_value

    async def __aenter__(self):
        return self.return_value

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        pass


def make_response(payload, headers=None):
    """Mock aiohttp response returning ``payload`` from ``json()``."""
    response = MagicMock()
    response.json = AsyncMock(return_value=payload)
    response.raise_for_status = MagicMock()
    response.headers = headers or {}
    return response


def make_session(*responses):
    """Mock session whose ``get`` yields the given responses in order."""
    session = MagicMock()
    session.closed = False
    session.get = MagicMock(
        side_effect=[MockAsyncContextManager(response) for response in responses]
    )
    return session


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    """Create temporary directory for tests."""
    test_dir = tmp_path / "wallhub_test"
    test_dir.mkdir(parents=True, exist_ok=True)
    yield test_dir


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def tracker(clock):
    """UsageTracker on a fake clock with default quotas."""
    from services.usage_tracker import UsageTracker

    return UsageTracker(clock=clock)


@pytest.fixture
def caller(tracker):
    """ResilientCaller with no backoff delay."""
    from services.safe_call import ResilientCaller

    return ResilientCaller(tracker, max_retries=2, backoff_base_ms=0)


@pytest.fixture
def config_service(temp_dir: Path) -> object:
    """ConfigService fixture for tests."""
    from services.config_service import ConfigService

    config_file = temp_dir / "config.json"
    return ConfigService(config_file=config_file, environ={})
