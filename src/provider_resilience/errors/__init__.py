"""
Provider failure taxonomy.

ProviderError is what operations raise; ErrorClassifier turns it into an
ErrorCategory (RATE_LIMITED, MODEL_UNAVAILABLE, TRANSIENT or FATAL) that the
retry executor acts on.
"""

from provider_resilience.errors.categories import ErrorCategory
from provider_resilience.errors.classifier import (
    DEFAULT_RULES,
    ClassificationRule,
    ErrorClassifier,
    classify_error,
    extract_retry_after,
)
from provider_resilience.errors.exceptions import ProviderError

__all__ = [
    "ClassificationRule",
    "DEFAULT_RULES",
    "ErrorCategory",
    "ErrorClassifier",
    "ProviderError",
    "classify_error",
    "extract_retry_after",
]
