"""
Configuration settings for the provider resilience layer.

Settings are loaded from environment variables (or a local .env file) with
sensible defaults. Build one Settings instance at process start and pass it
to the components that need it; nothing in this package reads configuration
from a global.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Application ===
    APP_NAME: str = "provider-resilience"
    LOG_LEVEL: str = "INFO"
    ENVIRONMENT: str = "development"  # "production" switches logs to JSON

    # === Retry & Backoff ===
    RETRY_MAX_ATTEMPTS: int = 3
    RETRY_INITIAL_DELAY_MS: int = 1000
    RETRY_MAX_DELAY_MS: int = 30000
    RETRY_BACKOFF_MULTIPLIER: float = 2.0

    # === Model Fallback ===
    MAX_FALLBACK_HOPS: int = 2  # Replacement models tried after ModelUnavailable
    VALIDATION_PREVIEW_LIMIT: int = 5  # Catalog ids listed in a rejection diagnostic

    # === Circuit Breaker ===
    CIRCUIT_FAILURE_THRESHOLD: int = 5
    CIRCUIT_RESET_TIMEOUT_MS: int = 60000
    CIRCUIT_HALF_OPEN_TIMEOUT_MS: int = 30000

    # === Monitoring ===
    PROMETHEUS_ENABLED: bool = True
