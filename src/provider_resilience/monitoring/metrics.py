"""Prometheus metrics for the provider resilience layer.

Metrics live in the default registry; the host application exposes them
(e.g. via prometheus_client.start_http_server or its own /metrics route).
Alert rules worth configuring:
- provider_retry_decisions_total{action="exhausted"} (providers failing past the retry budget)
- provider_retry_decisions_total{category="rate_limited"} (quota pressure)
- model_fallbacks_total (requested models disappearing from catalogs)
"""

from prometheus_client import Counter, Histogram

# === Retry Metrics ===

retry_decisions_total = Counter(
    "provider_retry_decisions_total",
    "Retry decisions after failed provider attempts",
    ["category", "action"],
)
"""
Retry decisions by error category and action.

Labels:
- category: rate_limited, model_unavailable, transient, fatal
- action: retry (another attempt scheduled), abort (non-retryable), exhausted (budget spent)
"""

retry_wait_seconds = Histogram(
    "provider_retry_wait_seconds",
    "Wait scheduled before a retry attempt",
    ["category"],
    buckets=[0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 20.0, 30.0, 60.0],
)
"""
Scheduled wait before the next attempt.

Labels:
- category: rate_limited (provider hint or backoff), transient (backoff)
"""

# === Invocation Metrics ===

invocations_total = Counter(
    "provider_invocations_total",
    "Resilient invocations by outcome",
    ["provider", "outcome"],
)
"""
Invocation outcomes.

Labels:
- provider: google, groq
- outcome: success, exhausted, model_unavailable, fatal, rejected, circuit_open
"""

model_fallbacks_total = Counter(
    "model_fallbacks_total",
    "Fallback model substitutions",
    ["provider", "reason"],
)
"""
Model substitutions made by the invoker.

Labels:
- provider: provider of the replacement model
- reason: validation (rejected by catalog), unavailable (failed at the provider)
"""
