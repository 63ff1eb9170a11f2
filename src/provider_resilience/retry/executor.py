"""
Retry executor.

Runs an async operation under a RetryPolicy:

    Idle -> Attempting -> (Succeeded | Waiting -> Attempting)* -> (Succeeded | Exhausted)

1. Invoke the operation; return its result on success.
2. On failure, classify it. MODEL_UNAVAILABLE and FATAL are raised at
   once, whatever budget remains.
3. On the last attempt, raise RetryExhausted.
4. Otherwise wait (provider hint or backoff, see BackoffScheduler) and
   try again.

Attempts of one execution never overlap. The wait is ``await sleep(...)``,
so it suspends only the calling task and is where cancellation lands.

Usage:
    executor = RetryExecutor.from_settings(settings)
    result = await executor.execute(lambda: client.generate(request), model="gemini-2.5-flash")
"""

import asyncio
import time
from typing import Awaitable, Callable, Iterable, Optional, TypeVar

import structlog

from provider_resilience.config import Settings
from provider_resilience.errors.categories import ErrorCategory
from provider_resilience.errors.classifier import ErrorClassifier
from provider_resilience.errors.exceptions import ProviderError
from provider_resilience.models.enums import ErrorKind, RetryAction
from provider_resilience.retry.backoff import BackoffScheduler
from provider_resilience.retry.exceptions import (
    FatalProviderError,
    InvocationError,
    ModelUnavailableError,
    RetryExhausted,
)
from provider_resilience.retry.metadata import RetryEvent, RetryMetadata
from provider_resilience.retry.observers import (
    CompositeRetryObserver,
    LoggingRetryObserver,
    MetricsRetryObserver,
    RetryObserver,
)
from provider_resilience.retry.policy import RetryPolicy

logger = structlog.get_logger(__name__)

T = TypeVar("T")
Operation = Callable[[], Awaitable[T]]
Sleep = Callable[[float], Awaitable[None]]


class RetryExecutor:
    """
    Executes operations with classification-driven retries.

    The executor itself holds no per-execution state: one instance can
    serve any number of concurrent ``execute`` calls.

    Attributes:
        policy: Attempt budget, backoff curve and classifier
        observer: Receives every retry decision
        sleep: Coroutine used for inter-attempt waits (seconds)
    """

    def __init__(
        self,
        policy: Optional[RetryPolicy] = None,
        observers: Optional[Iterable[RetryObserver]] = None,
        sleep: Sleep = asyncio.sleep,
    ):
        self.policy = policy or RetryPolicy()
        if observers is None:
            observers = (LoggingRetryObserver(),)
        self.observer = CompositeRetryObserver(observers)
        self.sleep = sleep

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        classifier: Optional[ErrorClassifier] = None,
        sleep: Sleep = asyncio.sleep,
    ) -> "RetryExecutor":
        """Executor with the configured policy, logging, and metrics when enabled."""
        observers: list[RetryObserver] = [LoggingRetryObserver()]
        if settings.PROMETHEUS_ENABLED:
            observers.append(MetricsRetryObserver())
        return cls(RetryPolicy.from_settings(settings, classifier), observers, sleep)

    async def execute(self, operation: Operation[T], *, model: Optional[str] = None) -> T:
        """
        Run ``operation`` until it succeeds or a terminal error is reached.

        Args:
            operation: Zero-argument coroutine function, invoked fresh per attempt
            model: Canonical model id the operation targets (logs and errors only)

        Returns:
            The operation's result

        Raises:
            ModelUnavailableError: Model missing or incapable; not retried
            FatalProviderError: Unclassified failure; not retried
            RetryExhausted: Retryable failures used up ``max_attempts``
        """
        result, _ = await self.execute_with_metadata(operation, model=model)
        return result

    async def execute_with_metadata(
        self, operation: Operation[T], *, model: Optional[str] = None
    ) -> tuple[T, RetryMetadata]:
        """Same as ``execute`` but also returns the RetryMetadata of the run."""
        policy = self.policy
        scheduler = BackoffScheduler(policy)
        start = time.monotonic()
        categories: list[ErrorCategory] = []
        total_wait_ms = 0.0
        attempt = 0

        while True:
            attempt += 1
            try:
                result = await operation()
            except Exception as exc:
                error = ProviderError.coerce(exc)
                category = policy.classify(error)
                categories.append(category)

                if not category.retryable:
                    action = RetryAction.ABORT
                elif attempt >= policy.max_attempts:
                    action = RetryAction.EXHAUSTED
                else:
                    action = RetryAction.RETRY

                wait_ms = scheduler.next_wait_ms(category) if action is RetryAction.RETRY else 0.0

                self.observer.on_retry_decision(
                    RetryEvent(
                        attempt=attempt,
                        max_attempts=policy.max_attempts,
                        category=category,
                        error=error,
                        action=action,
                        wait_ms=wait_ms,
                        model=model,
                    )
                )

                if action is not RetryAction.RETRY:
                    metadata = RetryMetadata(
                        total_attempts=attempt,
                        total_wait_ms=total_wait_ms,
                        categories=tuple(categories),
                        elapsed_ms=_elapsed_ms(start),
                    )
                    raise _terminal_error(error, category, metadata, model) from exc

                total_wait_ms += wait_ms
                await self.sleep(wait_ms / 1000)
                continue

            metadata = RetryMetadata(
                total_attempts=attempt,
                total_wait_ms=total_wait_ms,
                categories=tuple(categories),
                elapsed_ms=_elapsed_ms(start),
            )
            if attempt > 1:
                logger.info(
                    "Provider call succeeded after retry",
                    model=model,
                    total_attempts=attempt,
                    total_wait_ms=total_wait_ms,
                )
            return result, metadata


def _elapsed_ms(start: float) -> int:
    return max(0, int((time.monotonic() - start) * 1000))


def _terminal_error(
    error: ProviderError,
    category: ErrorCategory,
    metadata: RetryMetadata,
    model: Optional[str],
) -> InvocationError:
    if category.kind is ErrorKind.MODEL_UNAVAILABLE:
        return ModelUnavailableError(error, category, metadata, model)
    if category.kind is ErrorKind.FATAL:
        return FatalProviderError(error, category, metadata, model)
    return RetryExhausted(error, category, metadata, model)
