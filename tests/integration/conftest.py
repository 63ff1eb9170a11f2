"""Integration test fixtures.

Integration tests drive the full invocation stack (validation, retry loop,
fallback, circuit breaker) against an in-process fake provider with real,
short asyncio sleeps. No external service is needed.
"""

import asyncio

import pytest

from provider_resilience.config import Settings
from provider_resilience.errors.exceptions import ProviderError


class FakeProviderService:
    """In-process stand-in for a model provider.

    ``failures`` maps a model id to the errors its next calls raise, in
    order; once drained, calls succeed. Models listed in ``missing`` always
    answer 404. ``latency_s`` is awaited on every call so concurrent
    invocations interleave.
    """

    def __init__(self, latency_s: float = 0.001):
        self.latency_s = latency_s
        self.failures: dict[str, list[ProviderError]] = {}
        self.missing: set[str] = set()
        self.calls: list[str] = []

    def fail(self, model: str, *errors: ProviderError) -> None:
        self.failures.setdefault(model, []).extend(errors)

    async def generate(self, model: str, prompt: str) -> str:
        self.calls.append(model)
        await asyncio.sleep(self.latency_s)
        if model in self.missing:
            raise ProviderError(
                f"models/{model} is not found for API version v1beta, "
                "or is not supported for generateContent",
                http_status=404,
            )
        pending = self.failures.get(model)
        if pending:
            raise pending.pop(0)
        return f"{model}: {prompt}"


@pytest.fixture
def integration_settings() -> Settings:
    """Settings with millisecond backoff so real sleeps stay short."""
    return Settings(
        APP_NAME="provider-resilience-integration",
        ENVIRONMENT="development",
        RETRY_MAX_ATTEMPTS=3,
        RETRY_INITIAL_DELAY_MS=5,
        RETRY_MAX_DELAY_MS=50,
        RETRY_BACKOFF_MULTIPLIER=2.0,
        MAX_FALLBACK_HOPS=2,
        CIRCUIT_FAILURE_THRESHOLD=2,
        CIRCUIT_RESET_TIMEOUT_MS=60000,
        PROMETHEUS_ENABLED=False,
    )


@pytest.fixture
def fake_service() -> FakeProviderService:
    return FakeProviderService()


@pytest.fixture
def groq_listing() -> dict:
    """Body of a Groq "list models" response."""
    return {
        "object": "list",
        "data": [
            {"id": "llama-3.1-8b-instant", "object": "model", "owned_by": "Meta"},
            {"id": "llama-3.3-70b-versatile", "object": "model", "owned_by": "Meta"},
            {"id": "whisper-large-v3", "object": "model", "owned_by": "OpenAI"},
        ],
    }


@pytest.fixture
def gemini_listing() -> dict:
    """Body of a Gemini "list models" response."""
    return {
        "models": [
            {"name": "models/gemini-2.5-flash", "displayName": "Gemini 2.5 Flash"},
            {"name": "models/gemini-2.5-pro", "displayName": "Gemini 2.5 Pro"},
            {"name": "models/text-embedding-004", "displayName": "Text Embedding 004"},
        ]
    }
