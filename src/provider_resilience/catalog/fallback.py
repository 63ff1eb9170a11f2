"""
Fallback model selection.

Picks a replacement when the requested model is unusable. A model from the
same provider is preferred since it keeps latency and output behaviour
close to what was asked for; any other provider is a last resort.
"""

from typing import Iterable, Optional

import structlog

from provider_resilience.catalog.resolver import ModelNameResolver, default_resolver
from provider_resilience.models.catalog_models import CatalogEntry
from provider_resilience.models.enums import Provider

logger = structlog.get_logger(__name__)


class FallbackSelector:
    """Chooses a different catalog model for a failed one."""

    def __init__(self, resolver: ModelNameResolver = default_resolver):
        self.resolver = resolver

    def _entry(self, entry: CatalogEntry) -> tuple[str, Provider]:
        descriptor = self.resolver.descriptor(entry)
        return descriptor.id, descriptor.provider

    def select(
        self,
        failed_model: str,
        catalog: Optional[Iterable[CatalogEntry]],
        exclude: Iterable[str] = (),
    ) -> Optional[str]:
        """
        Return a replacement model id, or None.

        Args:
            failed_model: Model that failed (raw or canonical)
            catalog: Descriptors or ids to choose from, in preference order
            exclude: Ids already tried, never returned

        Returns:
            First same-provider id different from ``failed_model``, else the
            first id of any provider different from it, else None
        """
        entries = [self._entry(entry) for entry in catalog or ()]
        if not entries:
            return None

        normalized = self.resolver.normalize(failed_model)
        provider = self.resolver.provider_of(normalized) if normalized else None
        skip = {normalized, *exclude}

        candidates = [(model_id, p) for model_id, p in entries if model_id not in skip]

        for model_id, candidate_provider in candidates:
            if candidate_provider is provider:
                logger.info(
                    "Fallback model selected",
                    failed_model=failed_model,
                    fallback_model=model_id,
                    same_provider=True,
                )
                return model_id

        if candidates:
            model_id, candidate_provider = candidates[0]
            logger.info(
                "Fallback model selected from another provider",
                failed_model=failed_model,
                fallback_model=model_id,
                fallback_provider=candidate_provider.value,
                same_provider=False,
            )
            return model_id

        logger.warning("No fallback model available", failed_model=failed_model)
        return None


_default_selector = FallbackSelector()


def get_fallback_model(
    failed_model: str, catalog: Optional[Iterable[CatalogEntry]]
) -> Optional[str]:
    """Select with the default resolver."""
    return _default_selector.select(failed_model, catalog)
