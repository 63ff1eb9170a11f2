"""
Model identifiers and catalogs.

- ModelNameResolver: raw name -> canonical provider-qualified id
- ModelAvailabilityValidator: canonical id vs. catalog snapshot (fail open)
- FallbackSelector: replacement model, same provider first
- snapshot: provider listing payloads -> ModelDescriptor lists
"""

from provider_resilience.catalog.fallback import FallbackSelector, get_fallback_model
from provider_resilience.catalog.resolver import (
    MODEL_NAME_ALIASES,
    ModelNameResolver,
    default_resolver,
    normalize_model_name,
)
from provider_resilience.catalog.snapshot import (
    merge_catalogs,
    parse_gemini_catalog,
    parse_groq_catalog,
)
from provider_resilience.catalog.validator import (
    ModelAvailabilityValidator,
    catalog_ids,
    validate_model_name,
)

__all__ = [
    "FallbackSelector",
    "MODEL_NAME_ALIASES",
    "ModelAvailabilityValidator",
    "ModelNameResolver",
    "catalog_ids",
    "default_resolver",
    "get_fallback_model",
    "merge_catalogs",
    "normalize_model_name",
    "parse_gemini_catalog",
    "parse_groq_catalog",
    "validate_model_name",
]
