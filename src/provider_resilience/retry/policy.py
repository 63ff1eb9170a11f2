"""
Retry policy.

A RetryPolicy is built once per call site and reused for every invocation
made there. It is immutable, so one policy can back any number of
concurrent executions.
"""

from typing import Callable

from pydantic import BaseModel, ConfigDict, Field, model_validator

from provider_resilience.config import Settings
from provider_resilience.errors.categories import ErrorCategory
from provider_resilience.errors.classifier import ErrorClassifier

Classify = Callable[[BaseException], ErrorCategory]


class RetryPolicy(BaseModel):
    """
    Attempt budget, backoff curve and classification used by RetryExecutor.

    Delays are in milliseconds. The first backoff wait is
    ``initial_delay_ms * backoff_multiplier``; each later one grows by the
    multiplier again, capped at ``max_delay_ms``.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    max_attempts: int = Field(default=3, ge=1, description="Total attempts including the first")
    initial_delay_ms: float = Field(default=1000, gt=0, description="Backoff seed")
    max_delay_ms: float = Field(default=30000, gt=0, description="Upper bound for any wait")
    backoff_multiplier: float = Field(default=2.0, gt=1, description="Growth factor per retry")
    classify: Classify = Field(
        default_factory=lambda: ErrorClassifier().classify,
        description="Maps a provider failure to an ErrorCategory",
    )

    @model_validator(mode="after")
    def _check_delay_bounds(self) -> "RetryPolicy":
        if self.max_delay_ms < self.initial_delay_ms:
            raise ValueError(
                f"max_delay_ms ({self.max_delay_ms}) must be >= initial_delay_ms ({self.initial_delay_ms})"
            )
        return self

    @classmethod
    def from_settings(
        cls, settings: Settings, classifier: ErrorClassifier | None = None
    ) -> "RetryPolicy":
        """Build the policy configured by RETRY_* settings."""
        return cls(
            max_attempts=settings.RETRY_MAX_ATTEMPTS,
            initial_delay_ms=settings.RETRY_INITIAL_DELAY_MS,
            max_delay_ms=settings.RETRY_MAX_DELAY_MS,
            backoff_multiplier=settings.RETRY_BACKOFF_MULTIPLIER,
            classify=(classifier or ErrorClassifier()).classify,
        )
