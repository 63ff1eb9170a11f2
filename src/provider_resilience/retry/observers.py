"""
Retry observers.

The executor reports every retry decision to its observers and ignores what
they do with it. Logging and metrics are two observers; callers can add
their own (e.g. to surface "retrying in 5s" in a UI).
"""

from typing import Iterable, Protocol

import structlog

from provider_resilience.models.enums import RetryAction
from provider_resilience.monitoring import metrics
from provider_resilience.retry.metadata import RetryEvent

logger = structlog.get_logger(__name__)


class RetryObserver(Protocol):
    """
    Receives one RetryEvent per failed attempt.

    Observers run inline in the executing task and should not block. An
    exception raised here is not caught: it ends the execution and reaches
    the caller as is, not as an InvocationError.
    """

    def on_retry_decision(self, event: RetryEvent) -> None:
        ...


class LoggingRetryObserver:
    """Logs retry decisions with structlog."""

    def __init__(self, log=None):
        self.log = log or logger

    def on_retry_decision(self, event: RetryEvent) -> None:
        fields = {
            "model": event.model,
            "attempt": event.attempt,
            "max_attempts": event.max_attempts,
            "category": event.category.kind.value,
            "error_message": event.error.message,
            "http_status": event.error.http_status,
        }

        if event.action is RetryAction.RETRY:
            self.log.warning(
                f"Attempt {event.attempt}/{event.max_attempts} failed, retrying in {event.wait_ms:.0f}ms",
                wait_ms=event.wait_ms,
                retry_after_seconds=event.category.retry_after_seconds,
                **fields,
            )
        elif event.action is RetryAction.ABORT:
            self.log.warning("Non-retryable provider error, not retrying", **fields)
        else:
            self.log.error(f"Retries exhausted after {event.attempt} attempts", **fields)


class MetricsRetryObserver:
    """Records retry decisions in Prometheus metrics."""

    def on_retry_decision(self, event: RetryEvent) -> None:
        category = event.category.kind.value
        metrics.retry_decisions_total.labels(category=category, action=event.action.value).inc()
        if event.action is RetryAction.RETRY:
            metrics.retry_wait_seconds.labels(category=category).observe(event.wait_ms / 1000)


class CompositeRetryObserver:
    """Fans one event out to several observers, in order."""

    def __init__(self, observers: Iterable[RetryObserver]):
        self.observers = tuple(observers)

    def on_retry_decision(self, event: RetryEvent) -> None:
        for observer in self.observers:
            observer.on_retry_decision(event)
