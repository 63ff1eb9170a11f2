"""
Enumerations for the provider resilience layer.

All enums are closed taxonomies - no values outside these sets are permitted.
"""

from enum import Enum


class Provider(str, Enum):
    """
    Language-model providers known to the resolver.

    GOOGLE is the default provider: bare model names without a namespace
    prefix (e.g. "gemini-2.5-flash") belong to it.
    """

    GOOGLE = "google"
    GROQ = "groq"


class ErrorKind(str, Enum):
    """
    Closed taxonomy of provider failures.

    RATE_LIMITED and TRANSIENT are retried; MODEL_UNAVAILABLE and FATAL
    are surfaced on the first occurrence.
    """

    RATE_LIMITED = "rate_limited"
    MODEL_UNAVAILABLE = "model_unavailable"
    TRANSIENT = "transient"
    FATAL = "fatal"

    @property
    def retryable(self) -> bool:
        return self in (ErrorKind.RATE_LIMITED, ErrorKind.TRANSIENT)


class RetryAction(str, Enum):
    """What the executor decided after a failed attempt."""

    RETRY = "retry"
    ABORT = "abort"  # Non-retryable category, raised immediately
    EXHAUSTED = "exhausted"  # Retryable, but no attempts left
