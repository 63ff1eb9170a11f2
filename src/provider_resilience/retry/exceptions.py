"""
Terminal invocation errors.

Callers of the retry layer see either the operation's result or exactly one
of these. Each carries the last provider failure (also chained as
``__cause__``), its category, the retry metadata and a ``user_message``
safe to show to an end user instead of a raw provider trace.
"""

import math
from typing import TYPE_CHECKING, Optional

from provider_resilience.models.enums import ErrorKind

if TYPE_CHECKING:
    from provider_resilience.errors.categories import ErrorCategory
    from provider_resilience.errors.exceptions import ProviderError
    from provider_resilience.models.catalog_models import ValidationResult
    from provider_resilience.retry.metadata import RetryMetadata


def _attempts_phrase(attempts: int) -> str:
    return f"{attempts} attempt" if attempts == 1 else f"{attempts} attempts"


class InvocationError(Exception):
    """
    Base class for every terminal failure of the invocation layer.

    Attributes:
        last_error: Final ProviderError (None when nothing was dispatched)
        category: Classification of ``last_error``
        metadata: Retry history (None when nothing was dispatched)
        model: Canonical model id involved, when known
    """

    def __init__(
        self,
        message: str,
        last_error: Optional["ProviderError"] = None,
        category: Optional["ErrorCategory"] = None,
        metadata: Optional["RetryMetadata"] = None,
        model: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.last_error = last_error
        self.category = category
        self.metadata = metadata
        self.model = model

    @property
    def attempts(self) -> int:
        return self.metadata.total_attempts if self.metadata else 0

    @property
    def user_message(self) -> str:
        return f"Request failed after {_attempts_phrase(self.attempts)}."


class RetryExhausted(InvocationError):
    """
    Raised when every attempt failed with a retryable category.
    """

    def __init__(
        self,
        last_error: "ProviderError",
        category: "ErrorCategory",
        metadata: "RetryMetadata",
        model: Optional[str] = None,
    ) -> None:
        message = (
            f"Failed after {metadata.total_attempts} attempts. "
            f"Last error: {last_error.message}"
        )
        if last_error.details:
            message += f"\n{last_error.details}"
        super().__init__(message, last_error, category, metadata, model)

    @property
    def retry_after_seconds(self) -> Optional[float]:
        """Provider wait hint of the last failure, if it was rate limited."""
        if self.category is None:
            return None
        return self.category.retry_after_seconds

    @property
    def user_message(self) -> str:
        if self.category is not None and self.category.kind is ErrorKind.RATE_LIMITED:
            hint = self.retry_after_seconds
            if hint is not None:
                return (
                    "The model provider is rate limiting requests. "
                    f"Please wait about {math.ceil(hint)} seconds and try again."
                )
            return "The model provider is rate limiting requests. Please wait a moment and try again."
        return super().user_message


class ModelUnavailableError(InvocationError):
    """
    Raised on the first MODEL_UNAVAILABLE failure; never retried.

    ``fallback_suggestion`` is filled in by callers that looked up a
    replacement model.
    """

    def __init__(
        self,
        last_error: "ProviderError",
        category: "ErrorCategory",
        metadata: "RetryMetadata",
        model: Optional[str] = None,
        fallback_suggestion: Optional[str] = None,
    ) -> None:
        target = f" ({model})" if model else ""
        super().__init__(
            f"Model unavailable{target}: {last_error.message}",
            last_error,
            category,
            metadata,
            model,
        )
        self.fallback_suggestion = fallback_suggestion

    @property
    def user_message(self) -> str:
        name = f'Model "{self.model}"' if self.model else "The selected model"
        message = f"{name} is unavailable or does not support this request."
        if self.fallback_suggestion:
            message += f' Try "{self.fallback_suggestion}" instead.'
        return message


class FatalProviderError(InvocationError):
    """
    Raised on the first FATAL failure; never retried.
    """

    def __init__(
        self,
        last_error: "ProviderError",
        category: "ErrorCategory",
        metadata: "RetryMetadata",
        model: Optional[str] = None,
    ) -> None:
        super().__init__(
            f"Provider request failed: {last_error.message}",
            last_error,
            category,
            metadata,
            model,
        )


class ModelValidationError(InvocationError):
    """
    Raised before dispatch when the requested model is rejected by the
    catalog and no replacement exists.
    """

    def __init__(self, validation: "ValidationResult") -> None:
        super().__init__(
            validation.diagnostic or "Model validation failed",
            model=validation.normalized,
        )
        self.validation = validation

    @property
    def user_message(self) -> str:
        return self.validation.diagnostic or "The requested model is not available."


class CircuitOpenError(InvocationError):
    """
    Raised without dispatching while a circuit breaker is open.
    """

    def __init__(self, name: str, retry_in_ms: Optional[float] = None) -> None:
        super().__init__(f"Circuit breaker '{name}' is open; service temporarily unavailable")
        self.name = name
        self.retry_in_ms = retry_in_ms

    @property
    def user_message(self) -> str:
        if self.retry_in_ms:
            return (
                "The model provider is temporarily unavailable. "
                f"Please try again in about {math.ceil(self.retry_in_ms / 1000)} seconds."
            )
        return "The model provider is temporarily unavailable. Please try again shortly."
