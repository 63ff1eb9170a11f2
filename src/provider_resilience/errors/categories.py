"""
Error categories produced by the classifier.
"""

from dataclasses import dataclass
from typing import Optional

from provider_resilience.models.enums import ErrorKind


@dataclass(frozen=True)
class ErrorCategory:
    """
    Classification of one ProviderError.

    Attributes:
        kind: Taxonomy bucket
        retry_after_seconds: Provider-supplied wait hint; only set for
            RATE_LIMITED, None when the provider gave no hint
    """

    kind: ErrorKind
    retry_after_seconds: Optional[float] = None

    def __post_init__(self) -> None:
        if self.retry_after_seconds is not None:
            if self.kind is not ErrorKind.RATE_LIMITED:
                raise ValueError("retry_after_seconds is only valid for RATE_LIMITED")
            if self.retry_after_seconds < 0:
                raise ValueError("retry_after_seconds must be >= 0")

    @property
    def retryable(self) -> bool:
        return self.kind.retryable

    @classmethod
    def rate_limited(cls, retry_after_seconds: Optional[float] = None) -> "ErrorCategory":
        return cls(ErrorKind.RATE_LIMITED, retry_after_seconds)


MODEL_UNAVAILABLE = ErrorCategory(ErrorKind.MODEL_UNAVAILABLE)
TRANSIENT = ErrorCategory(ErrorKind.TRANSIENT)
FATAL = ErrorCategory(ErrorKind.FATAL)
