"""
Unit tests for CircuitBreaker.

A fake clock drives the state transitions.
"""

import pytest
from unittest.mock import AsyncMock

from provider_resilience.config import Settings
from provider_resilience.retry.circuit_breaker import CircuitBreaker, CircuitState
from provider_resilience.retry.exceptions import CircuitOpenError


class FakeClock:
    def __init__(self):
        self.ms = 1_000_000

    def __call__(self) -> float:
        return self.ms / 1000

    def advance_ms(self, ms: int) -> None:
        self.ms += ms


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def breaker(clock) -> CircuitBreaker:
    return CircuitBreaker(
        name="groq",
        failure_threshold=3,
        reset_timeout_ms=60000,
        half_open_timeout_ms=30000,
        clock=clock,
    )


def test_opens_after_threshold(breaker):
    breaker.record_failure()
    breaker.record_failure()
    assert breaker.state is CircuitState.CLOSED

    breaker.record_failure()

    assert breaker.is_open()
    assert breaker.snapshot().failure_count == 3


def test_half_opens_after_reset_timeout(breaker, clock):
    for _ in range(3):
        breaker.record_failure()

    clock.advance_ms(59999)
    assert breaker.state is CircuitState.OPEN

    clock.advance_ms(1)
    assert breaker.state is CircuitState.HALF_OPEN


def test_half_open_closes_after_quiet_period(breaker, clock):
    for _ in range(3):
        breaker.record_failure()
    clock.advance_ms(60000)
    assert breaker.state is CircuitState.HALF_OPEN

    clock.advance_ms(30000)

    assert breaker.state is CircuitState.CLOSED
    assert breaker.snapshot().failure_count == 0


def test_failure_while_half_open_reopens(breaker, clock):
    for _ in range(3):
        breaker.record_failure()
    clock.advance_ms(60000)
    assert breaker.state is CircuitState.HALF_OPEN

    breaker.record_failure()

    assert breaker.is_open()


def test_success_resets(breaker):
    breaker.record_failure()
    breaker.record_failure()

    breaker.record_success()

    assert breaker.snapshot().failure_count == 0
    assert breaker.state is CircuitState.CLOSED


@pytest.mark.asyncio
async def test_guard_rejects_without_invoking_when_open(breaker, clock):
    for _ in range(3):
        breaker.record_failure()
    clock.advance_ms(15000)
    operation = AsyncMock(return_value="ok")

    with pytest.raises(CircuitOpenError) as exc_info:
        await breaker.guard(operation)

    operation.assert_not_awaited()
    assert exc_info.value.retry_in_ms == pytest.approx(45000)
    assert "45 seconds" in exc_info.value.user_message


@pytest.mark.asyncio
async def test_guard_records_outcomes(breaker):
    failing = AsyncMock(side_effect=RuntimeError("boom"))

    for _ in range(3):
        with pytest.raises(RuntimeError):
            await breaker.guard(failing)

    assert breaker.is_open()


@pytest.mark.asyncio
async def test_guard_skips_excluded_failures(breaker):
    failing = AsyncMock(side_effect=ValueError("not a health signal"))

    for _ in range(5):
        with pytest.raises(ValueError):
            await breaker.guard(failing, is_failure=lambda exc: not isinstance(exc, ValueError))

    assert breaker.state is CircuitState.CLOSED


@pytest.mark.asyncio
async def test_guard_success_closes(breaker):
    breaker.record_failure()

    assert await breaker.guard(AsyncMock(return_value="ok")) == "ok"
    assert breaker.snapshot().failure_count == 0


def test_from_settings(test_settings: Settings):
    breaker = CircuitBreaker.from_settings(test_settings, name="google")

    assert breaker.name == "google"
    assert breaker.failure_threshold == 5
    assert breaker.reset_timeout_ms == 60000


def test_threshold_must_be_positive():
    with pytest.raises(ValueError):
        CircuitBreaker(failure_threshold=0)
