"""Monitoring and metrics instrumentation for the provider resilience layer."""

from provider_resilience.monitoring.metrics import (
    invocations_total,
    model_fallbacks_total,
    retry_decisions_total,
    retry_wait_seconds,
)

__all__ = [
    "invocations_total",
    "model_fallbacks_total",
    "retry_decisions_total",
    "retry_wait_seconds",
]
