"""Shared test fixtures and configuration for all tests.

This conftest.py provides common fixtures used across unit and integration tests.
"""

import pytest

from provider_resilience.config import Settings
from provider_resilience.models.catalog_models import ModelDescriptor
from provider_resilience.models.enums import Provider


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with fast retries and metrics disabled.

    Override specific settings in individual tests as needed:
        def test_something(test_settings):
            settings = test_settings.model_copy(update={"RETRY_MAX_ATTEMPTS": 5})
    """
    return Settings(
        # === Application ===
        APP_NAME="provider-resilience-test",
        LOG_LEVEL="DEBUG",
        ENVIRONMENT="development",

        # === Retry & Backoff ===
        RETRY_MAX_ATTEMPTS=3,
        RETRY_INITIAL_DELAY_MS=100,
        RETRY_MAX_DELAY_MS=1000,
        RETRY_BACKOFF_MULTIPLIER=2.0,

        # === Model Fallback ===
        MAX_FALLBACK_HOPS=2,
        VALIDATION_PREVIEW_LIMIT=5,

        # === Monitoring ===
        PROMETHEUS_ENABLED=False,  # Keep the default registry quiet unless a test needs it
    )


@pytest.fixture
def google_catalog() -> list[ModelDescriptor]:
    """Gemini-only catalog snapshot."""
    return [
        ModelDescriptor(id="gemini-2.5-flash", display_name="Gemini 2.5 Flash", provider=Provider.GOOGLE),
        ModelDescriptor(id="gemini-1.5-pro", display_name="Gemini 1.5 Pro", provider=Provider.GOOGLE),
    ]


@pytest.fixture
def mixed_catalog() -> list[ModelDescriptor]:
    """Catalog with Groq models listed before Gemini ones, as the model listing returns them."""
    return [
        ModelDescriptor(id="groq/llama-3.1-8b-instant", name="Llama 3.1 8B Instant (Groq)", provider="groq"),
        ModelDescriptor(id="groq/llama-3.3-70b-versatile", name="Llama 3.3 70B Versatile (Groq)", provider="groq"),
        ModelDescriptor(id="gemini-2.5-flash", name="Gemini 2.5 Flash", provider="google"),
        ModelDescriptor(id="gemini-2.5-pro", name="Gemini 2.5 Pro", provider="google"),
        ModelDescriptor(id="gemini-1.5-flash", name="Gemini 1.5 Flash", provider="google"),
        ModelDescriptor(id="gemini-1.5-pro", name="Gemini 1.5 Pro", provider="google"),
    ]
