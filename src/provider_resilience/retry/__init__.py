"""
Retry execution for provider calls.

Main Components:
    - RetryPolicy: Attempt budget, backoff curve and classifier
    - BackoffScheduler: Wait computation (provider hint or exponential backoff)
    - RetryExecutor: Attempt loop raising one terminal InvocationError
    - RetryObserver: Hook receiving every retry decision
    - CircuitBreaker: Optional guard for a repeatedly failing provider

Usage:
    >>> from provider_resilience.retry import RetryExecutor, RetryPolicy
    >>> executor = RetryExecutor(RetryPolicy(max_attempts=3))
    >>> result = await executor.execute(call_provider)
"""

from provider_resilience.retry.backoff import BackoffScheduler
from provider_resilience.retry.circuit_breaker import (
    CircuitBreaker,
    CircuitSnapshot,
    CircuitState,
)
from provider_resilience.retry.exceptions import (
    CircuitOpenError,
    FatalProviderError,
    InvocationError,
    ModelUnavailableError,
    ModelValidationError,
    RetryExhausted,
)
from provider_resilience.retry.executor import RetryExecutor
from provider_resilience.retry.metadata import RetryEvent, RetryMetadata
from provider_resilience.retry.observers import (
    CompositeRetryObserver,
    LoggingRetryObserver,
    MetricsRetryObserver,
    RetryObserver,
)
from provider_resilience.retry.policy import RetryPolicy

__all__ = [
    "BackoffScheduler",
    "CircuitBreaker",
    "CircuitOpenError",
    "CircuitSnapshot",
    "CircuitState",
    "CompositeRetryObserver",
    "FatalProviderError",
    "InvocationError",
    "LoggingRetryObserver",
    "MetricsRetryObserver",
    "ModelUnavailableError",
    "ModelValidationError",
    "RetryEvent",
    "RetryExecutor",
    "RetryExhausted",
    "RetryMetadata",
    "RetryObserver",
    "RetryPolicy",
]
