"""
Resilient model invocation.

Ties the pieces together for a call that targets a model:

    1. normalize and validate the requested model against the catalog
       (a rejected model is swapped for a fallback before dispatch)
    2. run the operation through the RetryExecutor
    3. on ModelUnavailableError, pick a fallback not tried yet and restart,
       at most ``max_fallback_hops`` times

Usage:
    invoker = ResilientInvoker.from_settings(settings)
    result = await invoker.invoke(
        "gemini-1.5-flash-latest",
        lambda model: client.generate(model=model, prompt=prompt),
        catalog=catalog,
    )
    result.value, result.model, result.fallbacks_used
"""

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, Iterable, Optional, TypeVar

import structlog

from provider_resilience.catalog.fallback import FallbackSelector
from provider_resilience.catalog.resolver import ModelNameResolver, default_resolver
from provider_resilience.catalog.validator import ModelAvailabilityValidator
from provider_resilience.config import Settings
from provider_resilience.models.catalog_models import CatalogEntry
from provider_resilience.monitoring import metrics
from provider_resilience.retry.circuit_breaker import CircuitBreaker
from provider_resilience.retry.exceptions import (
    CircuitOpenError,
    FatalProviderError,
    InvocationError,
    ModelUnavailableError,
    ModelValidationError,
    RetryExhausted,
)
from provider_resilience.retry.executor import RetryExecutor, Sleep
from provider_resilience.retry.metadata import RetryMetadata

logger = structlog.get_logger(__name__)

T = TypeVar("T")
OperationFactory = Callable[[str], Awaitable[T]]

_OUTCOMES: tuple[tuple[type, str], ...] = (
    (RetryExhausted, "exhausted"),
    (ModelUnavailableError, "model_unavailable"),
    (FatalProviderError, "fatal"),
    (ModelValidationError, "rejected"),
    (CircuitOpenError, "circuit_open"),
)


@dataclass(frozen=True)
class InvocationResult(Generic[T]):
    """
    Successful invocation.

    Attributes:
        value: What the operation returned
        model: Canonical id of the model that produced ``value``
        requested_model: Model name as the caller passed it
        fallbacks_used: Replacement models switched to, in order
        metadata: Retry history of the successful execution
    """

    value: T
    model: str
    requested_model: str
    fallbacks_used: tuple[str, ...]
    metadata: RetryMetadata


class ResilientInvoker:
    """
    Runs model-targeted operations with validation, retries and fallback.

    Args:
        executor: Retry loop for each model tried
        resolver: Model name normalization
        validator: Pre-dispatch catalog check
        selector: Fallback choice
        max_fallback_hops: Replacement models tried after ModelUnavailable
        circuit_breaker: Optional guard around every execution
        record_metrics: Record Prometheus outcome and fallback counters
    """

    def __init__(
        self,
        executor: Optional[RetryExecutor] = None,
        resolver: ModelNameResolver = default_resolver,
        validator: Optional[ModelAvailabilityValidator] = None,
        selector: Optional[FallbackSelector] = None,
        max_fallback_hops: int = 2,
        circuit_breaker: Optional[CircuitBreaker] = None,
        record_metrics: bool = True,
    ):
        if max_fallback_hops < 0:
            raise ValueError("max_fallback_hops must be >= 0")
        self.executor = executor or RetryExecutor()
        self.resolver = resolver
        self.validator = validator or ModelAvailabilityValidator(resolver)
        self.selector = selector or FallbackSelector(resolver)
        self.max_fallback_hops = max_fallback_hops
        self.circuit_breaker = circuit_breaker
        self.record_metrics = record_metrics

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        circuit_breaker: Optional[CircuitBreaker] = None,
        sleep: Sleep = asyncio.sleep,
    ) -> "ResilientInvoker":
        resolver = default_resolver
        return cls(
            executor=RetryExecutor.from_settings(settings, sleep=sleep),
            resolver=resolver,
            validator=ModelAvailabilityValidator.from_settings(settings, resolver),
            selector=FallbackSelector(resolver),
            max_fallback_hops=settings.MAX_FALLBACK_HOPS,
            circuit_breaker=circuit_breaker,
            record_metrics=settings.PROMETHEUS_ENABLED,
        )

    async def invoke(
        self,
        model: str,
        operation_factory: OperationFactory[T],
        catalog: Optional[Iterable[CatalogEntry]] = None,
    ) -> InvocationResult[T]:
        """
        Invoke ``operation_factory(model_id)`` resiliently.

        Args:
            model: Requested model, raw
            operation_factory: Builds one attempt for a canonical model id
            catalog: Freshly fetched catalog snapshot; empty skips validation

        Returns:
            InvocationResult with the value and the model that produced it

        Raises:
            ModelValidationError: Rejected by the catalog with no replacement
            ModelUnavailableError: Unusable model and no fallback left;
                ``fallback_suggestion`` is set when one exists
            RetryExhausted / FatalProviderError / CircuitOpenError
        """
        entries = list(catalog or ())
        fallbacks: list[str] = []

        validation = self.validator.validate(model, entries)
        if validation.valid:
            current = validation.normalized
        else:
            replacement = None
            if validation.normalized is not None:
                replacement = self.selector.select(validation.normalized, entries)
            if replacement is None:
                self._record_outcome(validation.normalized, "rejected")
                raise ModelValidationError(validation)

            logger.warning(
                "Requested model not in catalog, using fallback",
                requested_model=model,
                fallback_model=replacement,
                diagnostic=validation.diagnostic,
            )
            self._record_fallback(replacement, "validation")
            fallbacks.append(replacement)
            current = replacement

        tried = [m for m in (validation.normalized, current) if m is not None]
        hops = 0

        while True:
            try:
                value, metadata = await self._dispatch(current, operation_factory)
            except ModelUnavailableError as exc:
                replacement = self.selector.select(current, entries, exclude=tried)
                if replacement is None or hops >= self.max_fallback_hops:
                    exc.fallback_suggestion = replacement
                    self._record_outcome(current, "model_unavailable")
                    raise

                hops += 1
                logger.warning(
                    "Model unavailable, restarting with fallback",
                    failed_model=current,
                    fallback_model=replacement,
                    hop=hops,
                    max_hops=self.max_fallback_hops,
                )
                self._record_fallback(replacement, "unavailable")
                fallbacks.append(replacement)
                tried.append(replacement)
                current = replacement
                continue
            except InvocationError as exc:
                self._record_outcome(current, _outcome_label(exc))
                raise

            self._record_outcome(current, "success")
            return InvocationResult(
                value=value,
                model=current,
                requested_model=model,
                fallbacks_used=tuple(fallbacks),
                metadata=metadata,
            )

    async def _dispatch(
        self, model_id: str, operation_factory: OperationFactory[T]
    ) -> tuple[T, RetryMetadata]:
        async def execute() -> tuple[T, RetryMetadata]:
            return await self.executor.execute_with_metadata(
                lambda: operation_factory(model_id), model=model_id
            )

        if self.circuit_breaker is None:
            return await execute()
        # An unusable model says nothing about provider health
        return await self.circuit_breaker.guard(
            execute, is_failure=lambda exc: not isinstance(exc, ModelUnavailableError)
        )

    def _record_outcome(self, model_id: Optional[str], outcome: str) -> None:
        if not self.record_metrics:
            return
        provider = self.resolver.provider_of(model_id).value if model_id else "unknown"
        metrics.invocations_total.labels(provider=provider, outcome=outcome).inc()

    def _record_fallback(self, model_id: str, reason: str) -> None:
        if not self.record_metrics:
            return
        provider = self.resolver.provider_of(model_id).value
        metrics.model_fallbacks_total.labels(provider=provider, reason=reason).inc()


def _outcome_label(exc: InvocationError) -> str:
    for exc_type, label in _OUTCOMES:
        if isinstance(exc, exc_type):
            return label
    return "error"
