"""
Retry history records.

RetryEvent describes one decision taken after a failed attempt and is what
observers receive. RetryMetadata summarizes a whole execution; it is
attached to terminal errors and successful invocation results.
"""

from dataclasses import dataclass, field
from typing import Optional

from provider_resilience.errors.categories import ErrorCategory
from provider_resilience.errors.exceptions import ProviderError
from provider_resilience.models.enums import RetryAction


@dataclass(frozen=True)
class RetryEvent:
    """
    One retry decision.

    Attributes:
        attempt: Attempt that just failed (1-indexed)
        max_attempts: Attempt budget of the policy
        category: Classification of the failure
        error: The failure itself
        action: RETRY, ABORT (non-retryable) or EXHAUSTED (budget spent)
        wait_ms: Wait before the next attempt; 0 unless action is RETRY
        model: Canonical model id the operation targeted, when known
    """

    attempt: int
    max_attempts: int
    category: ErrorCategory
    error: ProviderError
    action: RetryAction
    wait_ms: float = 0.0
    model: Optional[str] = None


@dataclass(frozen=True)
class RetryMetadata:
    """
    Summary of one execution for logs, metrics and error reporting.

    Attributes:
        total_attempts: Operation invocations made
        total_wait_ms: Sum of waits between attempts
        categories: Category of every failed attempt, in order
        elapsed_ms: Wall time from first attempt to final outcome
    """

    total_attempts: int
    total_wait_ms: float = 0.0
    categories: tuple[ErrorCategory, ...] = field(default_factory=tuple)
    elapsed_ms: int = 0

    def __post_init__(self) -> None:
        if self.total_attempts < 1:
            raise ValueError("total_attempts must be >= 1")

        if len(self.categories) > self.total_attempts:
            raise ValueError("categories cannot outnumber attempts")

        if self.total_wait_ms < 0 or self.elapsed_ms < 0:
            raise ValueError("total_wait_ms and elapsed_ms must be >= 0")
