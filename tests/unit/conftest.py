"""Unit test fixtures (mocks and stubs).

Provides fake sleeps, recording observers and scripted operations so the
retry loop can be tested without real waits or providers.
"""

import pytest
from unittest.mock import AsyncMock

from provider_resilience.errors.exceptions import ProviderError
from provider_resilience.retry.metadata import RetryEvent


class RecordingSleep:
    """Stands in for asyncio.sleep and records requested waits (seconds)."""

    def __init__(self):
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)

    @property
    def waits_ms(self) -> list[float]:
        return [round(seconds * 1000, 6) for seconds in self.calls]


class RecordingObserver:
    """Collects every RetryEvent the executor publishes."""

    def __init__(self):
        self.events: list[RetryEvent] = []

    def on_retry_decision(self, event: RetryEvent) -> None:
        self.events.append(event)


@pytest.fixture
def fake_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def recording_observer() -> RecordingObserver:
    return RecordingObserver()


@pytest.fixture
def scripted_operation():
    """Factory fixture: AsyncMock raising/returning the given outcomes in order.

    Usage:
        op = scripted_operation(ProviderError("timeout"), "ok")
    """
    def _create(*outcomes) -> AsyncMock:
        return AsyncMock(side_effect=list(outcomes))

    return _create


@pytest.fixture
def transient_error() -> ProviderError:
    return ProviderError("Request timeout while contacting provider")


@pytest.fixture
def model_not_found_error() -> ProviderError:
    return ProviderError(
        "models/gemini-9-ultra is not found for API version v1beta",
        http_status=404,
    )
