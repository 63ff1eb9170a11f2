"""
Data models for the provider resilience layer.

Includes:
- Enums (Provider, ErrorKind, RetryAction)
- Catalog models (ModelDescriptor, ParsedModelId, ValidationResult)
"""

from provider_resilience.models.catalog_models import (
    CatalogEntry,
    ModelDescriptor,
    ParsedModelId,
    ValidationResult,
)
from provider_resilience.models.enums import ErrorKind, Provider, RetryAction

__all__ = [
    # Enums
    "ErrorKind",
    "Provider",
    "RetryAction",
    # Catalog models
    "CatalogEntry",
    "ModelDescriptor",
    "ParsedModelId",
    "ValidationResult",
]
