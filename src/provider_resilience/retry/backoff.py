"""
Backoff scheduling.

The scheduler holds the growing backoff delay for one execution. A new
scheduler is created for every ``RetryExecutor.execute`` call so concurrent
executions never share delay state.
"""

from provider_resilience.errors.categories import ErrorCategory
from provider_resilience.models.enums import ErrorKind
from provider_resilience.retry.policy import RetryPolicy


class BackoffScheduler:
    """
    Computes the wait before the next attempt.

    A provider hint (RATE_LIMITED with ``retry_after_seconds``) is used as-is,
    capped at ``max_delay_ms``, and leaves the backoff curve untouched.
    Every other retryable failure advances the curve:
    ``delay = min(delay * backoff_multiplier, max_delay_ms)``.
    """

    def __init__(self, policy: RetryPolicy):
        self.policy = policy
        self.current_delay_ms: float = policy.initial_delay_ms

    def next_wait_ms(self, category: ErrorCategory) -> float:
        """
        Return the wait in milliseconds, always within ``[0, max_delay_ms]``.
        """
        max_delay = self.policy.max_delay_ms

        if category.kind is ErrorKind.RATE_LIMITED and category.retry_after_seconds is not None:
            wait = category.retry_after_seconds * 1000
        else:
            self.current_delay_ms = min(
                self.current_delay_ms * self.policy.backoff_multiplier, max_delay
            )
            wait = self.current_delay_ms

        return max(0.0, min(wait, max_delay))
