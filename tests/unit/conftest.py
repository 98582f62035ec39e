"""Unit test fixtures (mocks and stubs).

Provides mock provider clients, a no-wait retry executor and a fake clock
for testing without network access or real sleeps.
"""

import pytest
from unittest.mock import AsyncMock, Mock

from choosewise.orchestrator.chain import ProviderSpec
from choosewise.retry.backoff import BackoffPolicy
from choosewise.retry.executor import RetryExecutor


@pytest.fixture
def mock_provider_client():
    """Factory fixture for a mock provider adapter.

    Usage:
        client = mock_provider_client("claude", side_effect=[ProviderTransientError("x"), "ok"])
    """
    def _create(name: str, return_value: str = "Advice", side_effect=None, configured: bool = True):
        mock = Mock()
        mock.name = name
        mock.model = f"{name}-test-model"
        mock.is_configured = configured
        mock.generate = AsyncMock(return_value=return_value, side_effect=side_effect)
        mock.close = AsyncMock()
        return mock

    return _create


@pytest.fixture
def make_spec():
    """Factory fixture wrapping a client in a ProviderSpec."""
    def _create(client, priority: str = "primary", max_retries: int = 2, timeout: float = 5.0):
        return ProviderSpec(
            name=client.name,
            priority=priority,
            max_retries=max_retries,
            timeout=timeout,
            client=client,
        )

    return _create


@pytest.fixture
def mock_sleep():
    """AsyncMock standing in for asyncio.sleep (records requested delays)."""
    return AsyncMock()


@pytest.fixture
def instant_executor(mock_sleep) -> RetryExecutor:
    """RetryExecutor with real backoff math but no actual waiting."""
    return RetryExecutor(BackoffPolicy(base_delay_ms=1000, jitter_max_ms=1000), sleep=mock_sleep)


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()
