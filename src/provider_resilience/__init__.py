"""
Resilient invocation layer for language-model providers.

Wraps provider calls with:
- Error classification (rate limited, model unavailable, transient, fatal)
- Retries with exponential backoff honoring provider "retry in Ns" hints
- Model name normalization to canonical provider-qualified ids
- Validation against a catalog snapshot (fail open when it is empty)
- Fallback model selection, same provider first

Architecture: asyncio retry loop + pydantic models + structlog/Prometheus observers
"""

from provider_resilience.catalog import (
    FallbackSelector,
    ModelAvailabilityValidator,
    ModelNameResolver,
    normalize_model_name,
)
from provider_resilience.config import Settings
from provider_resilience.errors import ErrorCategory, ErrorClassifier, ProviderError
from provider_resilience.invocation import InvocationResult, ResilientInvoker
from provider_resilience.models import (
    ErrorKind,
    ModelDescriptor,
    Provider,
    ValidationResult,
)
from provider_resilience.retry import (
    BackoffScheduler,
    CircuitBreaker,
    CircuitOpenError,
    FatalProviderError,
    InvocationError,
    ModelUnavailableError,
    ModelValidationError,
    RetryExecutor,
    RetryExhausted,
    RetryPolicy,
)

__version__ = "0.1.0"

__all__ = [
    "BackoffScheduler",
    "CircuitBreaker",
    "CircuitOpenError",
    "ErrorCategory",
    "ErrorClassifier",
    "ErrorKind",
    "FallbackSelector",
    "FatalProviderError",
    "InvocationError",
    "InvocationResult",
    "ModelAvailabilityValidator",
    "ModelDescriptor",
    "ModelNameResolver",
    "ModelUnavailableError",
    "ModelValidationError",
    "Provider",
    "ProviderError",
    "ResilientInvoker",
    "RetryExecutor",
    "RetryExhausted",
    "RetryPolicy",
    "Settings",
    "ValidationResult",
    "normalize_model_name",
]
