"""
Model availability validation against a catalog snapshot.

Validation fails open: with an empty catalog (provider listing unreachable,
not fetched yet) every usable name is accepted, so catalog outages never
block requests. The provider then has the final word, and a
MODEL_UNAVAILABLE failure routes through fallback selection instead.
"""

from typing import Any, Iterable, Optional

import structlog

from provider_resilience.catalog.resolver import ModelNameResolver, default_resolver
from provider_resilience.config import Settings
from provider_resilience.models.catalog_models import CatalogEntry, ValidationResult

logger = structlog.get_logger(__name__)

NAME_REQUIRED = "model name required"


def catalog_ids(
    catalog: Optional[Iterable[CatalogEntry]],
    resolver: ModelNameResolver = default_resolver,
) -> list[str]:
    """Ids of a catalog whose entries are descriptors, mappings or bare ids."""
    if not catalog:
        return []
    return [resolver.descriptor(entry).id for entry in catalog]


class ModelAvailabilityValidator:
    """
    Checks a raw model name against a catalog snapshot.

    Args:
        resolver: Normalizes names before the membership test
        preview_limit: Catalog ids listed in a rejection diagnostic
    """

    def __init__(
        self,
        resolver: ModelNameResolver = default_resolver,
        preview_limit: int = 5,
    ):
        self.resolver = resolver
        self.preview_limit = preview_limit

    @classmethod
    def from_settings(
        cls, settings: Settings, resolver: ModelNameResolver = default_resolver
    ) -> "ModelAvailabilityValidator":
        return cls(resolver=resolver, preview_limit=settings.VALIDATION_PREVIEW_LIMIT)

    def validate(
        self, raw: Any, catalog: Optional[Iterable[CatalogEntry]] = None
    ) -> ValidationResult:
        """
        Validate ``raw`` against ``catalog``.

        Args:
            raw: Model name as received (anything; non-strings are invalid)
            catalog: Descriptors or ids; empty or None skips the check

        Returns:
            ValidationResult; ``valid`` is True on a catalog hit and
            whenever the catalog is empty
        """
        normalized = self.resolver.normalize(raw)
        if normalized is None:
            return ValidationResult(
                valid=False,
                original=raw if isinstance(raw, str) else None,
                diagnostic=NAME_REQUIRED,
            )

        ids = catalog_ids(catalog, self.resolver)
        if not ids:
            return self._skipped(raw, normalized)

        if normalized in ids:
            diagnostic = None
            if normalized != raw:
                diagnostic = f'Model name normalized from "{raw}" to "{normalized}"'
            return ValidationResult(
                valid=True,
                normalized=normalized,
                original=raw,
                diagnostic=diagnostic,
                catalog_checked=True,
            )

        preview = ", ".join(ids[: self.preview_limit])
        if len(ids) > self.preview_limit:
            preview += "..."
        diagnostic = (
            f'Model "{raw}" (normalized: "{normalized}") is not available. '
            f"Available models: {preview}"
        )
        logger.info(
            "Model rejected by catalog",
            model=raw,
            normalized=normalized,
            catalog_size=len(ids),
        )
        return ValidationResult(
            valid=False,
            normalized=normalized,
            original=raw,
            diagnostic=diagnostic,
            catalog_checked=True,
            available=tuple(ids),
        )

    def _skipped(self, raw: str, normalized: str) -> ValidationResult:
        diagnostic = "Model catalog unavailable; validation skipped"
        if not self.resolver.matches_known_pattern(normalized):
            provider = self.resolver.provider_of(normalized)
            diagnostic += (
                f'. Warning: "{normalized}" does not match known '
                f"{provider.value} model patterns"
            )
        logger.debug("Model validation skipped, empty catalog", model=raw, normalized=normalized)
        return ValidationResult(
            valid=True,
            normalized=normalized,
            original=raw,
            diagnostic=diagnostic,
            catalog_checked=False,
        )


_default_validator = ModelAvailabilityValidator()


def validate_model_name(
    raw: Any, catalog: Optional[Iterable[CatalogEntry]] = None
) -> ValidationResult:
    """Validate with the default resolver and preview limit."""
    return _default_validator.validate(raw, catalog)
