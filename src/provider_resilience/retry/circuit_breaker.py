"""
Circuit breaker for provider endpoints.

Stops dispatching to a dependency that keeps failing and lets a trial
request through once it had time to recover:

    closed --(failure_threshold failures)--> open
    open --(reset_timeout_ms elapsed)--> half_open
    half_open --(half_open_timeout_ms without failure)--> closed
    any --(success)--> closed

A breaker is shared mutable state. It is opt-in: the caller owns it and
decides which invocations share one (typically one per provider).
"""

import time
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Optional, TypeVar

import structlog

from provider_resilience.config import Settings
from provider_resilience.retry.exceptions import CircuitOpenError

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class CircuitState(str, Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


@dataclass(frozen=True)
class CircuitSnapshot:
    state: CircuitState
    failure_count: int
    last_failure_ms: Optional[float]
    next_transition_ms: Optional[float]


class CircuitBreaker:
    """
    Counts failures and opens after ``failure_threshold`` of them.

    Args:
        name: Label used in logs and CircuitOpenError
        failure_threshold: Failures that open the circuit
        reset_timeout_ms: Time an open circuit waits before half-opening
        half_open_timeout_ms: Quiet time after which half-open closes
        clock: Monotonic clock in seconds
    """

    def __init__(
        self,
        name: str = "provider",
        failure_threshold: int = 5,
        reset_timeout_ms: float = 60000,
        half_open_timeout_ms: float = 30000,
        clock: Callable[[], float] = time.monotonic,
    ):
        if failure_threshold < 1:
            raise ValueError("failure_threshold must be >= 1")
        self.name = name
        self.failure_threshold = failure_threshold
        self.reset_timeout_ms = reset_timeout_ms
        self.half_open_timeout_ms = half_open_timeout_ms
        self._clock = clock

        self._state = CircuitState.CLOSED
        self._failure_count = 0
        self._last_failure_ms: Optional[float] = None
        self._next_transition_ms: Optional[float] = None

    @classmethod
    def from_settings(cls, settings: Settings, name: str = "provider", **kwargs) -> "CircuitBreaker":
        return cls(
            name=name,
            failure_threshold=settings.CIRCUIT_FAILURE_THRESHOLD,
            reset_timeout_ms=settings.CIRCUIT_RESET_TIMEOUT_MS,
            half_open_timeout_ms=settings.CIRCUIT_HALF_OPEN_TIMEOUT_MS,
            **kwargs,
        )

    def _now_ms(self) -> float:
        return self._clock() * 1000

    def _update_state(self) -> None:
        now = self._now_ms()
        if self._next_transition_ms is None or now < self._next_transition_ms:
            return

        if self._state is CircuitState.OPEN:
            self._state = CircuitState.HALF_OPEN
            self._next_transition_ms = now + self.half_open_timeout_ms
            logger.info("Circuit half-open", circuit=self.name)
        elif self._state is CircuitState.HALF_OPEN:
            self._state = CircuitState.CLOSED
            self._failure_count = 0
            self._next_transition_ms = None
            logger.info("Circuit closed after quiet half-open period", circuit=self.name)

    @property
    def state(self) -> CircuitState:
        self._update_state()
        return self._state

    def snapshot(self) -> CircuitSnapshot:
        self._update_state()
        return CircuitSnapshot(
            state=self._state,
            failure_count=self._failure_count,
            last_failure_ms=self._last_failure_ms,
            next_transition_ms=self._next_transition_ms,
        )

    def is_open(self) -> bool:
        return self.state is CircuitState.OPEN

    def record_success(self) -> None:
        if self._state is not CircuitState.CLOSED:
            logger.info("Circuit closed after success", circuit=self.name)
        self.reset()

    def record_failure(self) -> None:
        self._update_state()
        self._failure_count += 1
        self._last_failure_ms = self._now_ms()

        if self._failure_count >= self.failure_threshold:
            if self._state is not CircuitState.OPEN:
                logger.warning(
                    "Circuit opened",
                    circuit=self.name,
                    failure_count=self._failure_count,
                    reset_timeout_ms=self.reset_timeout_ms,
                )
            self._state = CircuitState.OPEN
            self._next_transition_ms = self._last_failure_ms + self.reset_timeout_ms

    def reset(self) -> None:
        self._state = CircuitState.CLOSED
        self._failure_count = 0
        self._last_failure_ms = None
        self._next_transition_ms = None

    async def guard(
        self,
        operation: Callable[[], Awaitable[T]],
        is_failure: Optional[Callable[[Exception], bool]] = None,
    ) -> T:
        """
        Run ``operation`` unless the circuit is open, recording the outcome.

        Args:
            operation: Coroutine function to run
            is_failure: Decides whether a raised exception counts against
                the circuit; every exception counts when omitted

        Raises:
            CircuitOpenError: Circuit open; ``operation`` was not invoked
        """
        if self.is_open():
            retry_in = None
            if self._next_transition_ms is not None:
                retry_in = max(0.0, self._next_transition_ms - self._now_ms())
            raise CircuitOpenError(self.name, retry_in_ms=retry_in)

        try:
            result = await operation()
        except Exception as exc:
            if is_failure is None or is_failure(exc):
                self.record_failure()
            raise
        self.record_success()
        return result
