"""
Model name normalization.

Canonical ids are provider-qualified for every provider except the default
one (Google), whose models keep their bare names:

    "gemini-2.5-flash"                 google
    "groq/llama-3.3-70b-versatile"     groq

``normalize`` maps whatever a user, a saved session or an older client sent
to that form. It is a pure function over static tables and idempotent:
normalize(normalize(x)) == normalize(x).
"""

import re
from types import MappingProxyType
from typing import Any, Mapping, Optional

from provider_resilience.models.catalog_models import CatalogEntry, ModelDescriptor, ParsedModelId
from provider_resilience.models.enums import Provider

LATEST_SUFFIX = "-latest"

# Deprecated or aliased names -> canonical id. Every value is a fixed point
# of normalize().
MODEL_NAME_ALIASES: Mapping[str, str] = MappingProxyType(
    {
        # Gemini
        "gemini-1.5-flash-latest": "gemini-1.5-flash",
        "gemini-1.5-pro-latest": "gemini-1.5-pro",
        "gemini-2.0-flash-exp": "gemini-2.0-flash-exp",
        "gemini-2.5-flash-latest": "gemini-2.5-flash",
        "gemini-2.5-pro-latest": "gemini-2.5-pro",
        # Groq
        "llama-3.1-8b-instant": "groq/llama-3.1-8b-instant",
        "llama-3.1-70b-versatile": "groq/llama-3.1-70b-versatile",
        "llama-3.3-70b-versatile": "groq/llama-3.3-70b-versatile",
        "mixtral-8x7b-32768": "groq/mixtral-8x7b-32768",
    }
)

# Namespace prefix of each non-default provider
PROVIDER_PREFIXES: Mapping[Provider, str] = MappingProxyType({Provider.GROQ: "groq/"})

DEFAULT_PROVIDER = Provider.GOOGLE

# Bare names that belong to a non-default provider
BARE_NAME_PREFIXES: Mapping[Provider, tuple[str, ...]] = MappingProxyType(
    {
        Provider.GROQ: (
            "llama-",
            "mixtral-",
            "meta-llama/",
            "moonshotai/",
            "openai/",
        ),
    }
)

# Shapes of model names each provider is known to serve. Only used to warn
# when validation has no catalog to check against.
KNOWN_MODEL_PATTERNS: Mapping[Provider, tuple[re.Pattern, ...]] = MappingProxyType(
    {
        Provider.GOOGLE: (
            re.compile(r"^gemini-1\.5-(flash|pro)$"),
            re.compile(r"^gemini-2\.0-flash-exp$"),
            re.compile(r"^gemini-2\.5-(flash|pro)$"),
        ),
        Provider.GROQ: (
            re.compile(r"^llama-3\.(1|2|3)-"),
            re.compile(r"^mixtral-"),
            re.compile(r"^(meta-llama|moonshotai|openai)/"),
        ),
    }
)


class ModelNameResolver:
    """
    Normalizes raw model identifiers to canonical ModelIds.

    Steps, first applicable wins:
        (a) exact alias table hit
        (b) strip trailing "-latest"
        (c) prepend the provider namespace to a known bare name of a
            non-default provider
        (d) leave unchanged (default-provider bare name)
    """

    def __init__(
        self,
        aliases: Mapping[str, str] = MODEL_NAME_ALIASES,
        provider_prefixes: Mapping[Provider, str] = PROVIDER_PREFIXES,
        bare_name_prefixes: Mapping[Provider, tuple[str, ...]] = BARE_NAME_PREFIXES,
        default_provider: Provider = DEFAULT_PROVIDER,
    ):
        self.aliases = aliases
        self.provider_prefixes = provider_prefixes
        self.bare_name_prefixes = bare_name_prefixes
        self.default_provider = default_provider

    def normalize(self, raw: Any) -> Optional[str]:
        """
        Return the canonical id for ``raw``, or None if it is not a usable name.

        Non-strings, empty and whitespace-only strings are not usable names.
        """
        if not isinstance(raw, str):
            return None
        name = raw.strip()
        if not name:
            return None

        if name in self.aliases:
            return self.aliases[name]

        while name.endswith(LATEST_SUFFIX) and len(name) > len(LATEST_SUFFIX):
            name = name[: -len(LATEST_SUFFIX)]

        if name in self.aliases:
            return self.aliases[name]

        if self._namespace_provider(name) is not None:
            return name

        for provider, prefixes in self.bare_name_prefixes.items():
            if name.startswith(prefixes):
                return f"{self.provider_prefixes[provider]}{name}"

        return name

    def _namespace_provider(self, name: str) -> Optional[Provider]:
        for provider, prefix in self.provider_prefixes.items():
            if name.startswith(prefix):
                return provider
        return None

    def provider_of(self, model_id: str) -> Provider:
        """Provider of a canonical (or raw) model id."""
        normalized = self.normalize(model_id) or ""
        return self._namespace_provider(normalized) or self.default_provider

    def parse(self, model_id: str) -> ParsedModelId:
        """
        Split a model id into provider and provider-native name.

        >>> resolver.parse("groq/llama-3.1-8b-instant")
        ParsedModelId(provider=<Provider.GROQ: 'groq'>, model='llama-3.1-8b-instant')
        """
        normalized = self.normalize(model_id)
        if normalized is None:
            raise ValueError(f"Not a model name: {model_id!r}")

        provider = self.provider_of(normalized)
        prefix = self.provider_prefixes.get(provider, "")
        model = normalized[len(prefix):] if prefix and normalized.startswith(prefix) else normalized
        return ParsedModelId(provider=provider, model=model)

    def descriptor(self, entry: CatalogEntry) -> ModelDescriptor:
        """
        Coerce one catalog entry to a ModelDescriptor.

        Bare ids and mappings without a ``provider`` key get the provider
        inferred from the id.

        Raises:
            TypeError: Entry is neither a descriptor, a mapping nor a string
            pydantic.ValidationError: Mapping without a usable ``id``
        """
        if isinstance(entry, ModelDescriptor):
            return entry
        if isinstance(entry, str):
            return ModelDescriptor(id=entry, provider=self.provider_of(entry))
        if isinstance(entry, Mapping):
            if entry.get("provider") is None:
                entry = {**entry, "provider": self.provider_of(entry.get("id"))}
            return ModelDescriptor.model_validate(entry)
        raise TypeError(f"Unsupported catalog entry type: {type(entry).__name__}")

    def matches_known_pattern(self, model_id: str) -> bool:
        """Whether a canonical id looks like a model its provider serves."""
        parsed = self.parse(model_id)
        patterns = KNOWN_MODEL_PATTERNS.get(parsed.provider, ())
        return any(pattern.search(parsed.model) for pattern in patterns)


default_resolver = ModelNameResolver()


def normalize_model_name(raw: Any) -> Optional[str]:
    """Normalize with the default tables."""
    return default_resolver.normalize(raw)
