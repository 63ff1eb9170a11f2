"""
Unit tests for ModelNameResolver.
"""

import pytest

from provider_resilience.catalog.resolver import (
    MODEL_NAME_ALIASES,
    ModelNameResolver,
    normalize_model_name,
)
from provider_resilience.models.enums import Provider

SAMPLE_NAMES = [
    "gemini-2.5-flash",
    "gemini-1.5-flash-latest",
    "gemini-2.5-pro-latest",
    "gemini-2.0-flash-exp",
    "llama-3.1-8b-instant",
    "llama-3.2-90b-text-preview",
    "mixtral-8x7b-32768-latest",
    "groq/llama-3.3-70b-versatile",
    "openai/gpt-oss-20b",
    "meta-llama/llama-4-scout-17b-16e-instruct",
    "custom-model-latest-latest",
    "  gemini-2.5-flash  ",
    "-latest",
]


@pytest.fixture
def resolver() -> ModelNameResolver:
    return ModelNameResolver()


@pytest.mark.parametrize("raw", SAMPLE_NAMES + list(MODEL_NAME_ALIASES))
def test_normalize_is_idempotent(resolver, raw):
    once = resolver.normalize(raw)

    assert resolver.normalize(once) == once


def test_latest_suffix_is_stripped(resolver):
    assert resolver.normalize("gemini-1.5-flash-latest") == "gemini-1.5-flash"


def test_bare_groq_name_gets_prefix(resolver):
    assert resolver.normalize("llama-3.1-8b-instant") == "groq/llama-3.1-8b-instant"


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("gemini-2.5-flash-latest", "gemini-2.5-flash"),
        ("gemini-2.0-flash-exp", "gemini-2.0-flash-exp"),
        ("mixtral-8x7b-32768", "groq/mixtral-8x7b-32768"),
        ("llama-3.2-11b-text-preview", "groq/llama-3.2-11b-text-preview"),
        ("llama-3.2-11b-text-preview-latest", "groq/llama-3.2-11b-text-preview"),
        ("openai/gpt-oss-120b", "groq/openai/gpt-oss-120b"),
        ("moonshotai/kimi-k2-instruct-0905", "groq/moonshotai/kimi-k2-instruct-0905"),
        ("groq/llama-3.1-8b-instant", "groq/llama-3.1-8b-instant"),
        ("gemini-2.5-pro", "gemini-2.5-pro"),
        ("some-unknown-model", "some-unknown-model"),
    ],
)
def test_normalize_examples(resolver, raw, expected):
    assert resolver.normalize(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "   ", 42, ["gemini-2.5-flash"], {"id": "x"}])
def test_invalid_input_resolves_to_none(resolver, raw):
    assert resolver.normalize(raw) is None


def test_surrounding_whitespace_is_stripped(resolver):
    assert resolver.normalize(" llama-3.1-8b-instant\n") == "groq/llama-3.1-8b-instant"


def test_alias_values_are_fixed_points(resolver):
    for canonical in MODEL_NAME_ALIASES.values():
        assert resolver.normalize(canonical) == canonical


def test_custom_alias_table():
    resolver = ModelNameResolver(aliases={"old-flash": "gemini-2.5-flash"})

    assert resolver.normalize("old-flash") == "gemini-2.5-flash"
    assert resolver.normalize("old-flash-latest") == "gemini-2.5-flash"


def test_module_level_normalize():
    assert normalize_model_name("gemini-2.5-pro-latest") == "gemini-2.5-pro"


# ============================================================================
# Provider parsing
# ============================================================================


@pytest.mark.parametrize(
    "model_id, provider",
    [
        ("gemini-2.5-flash", Provider.GOOGLE),
        ("groq/llama-3.1-8b-instant", Provider.GROQ),
        ("llama-3.1-8b-instant", Provider.GROQ),
        ("unknown-model", Provider.GOOGLE),
    ],
)
def test_provider_of(resolver, model_id, provider):
    assert resolver.provider_of(model_id) is provider


def test_parse_strips_namespace(resolver):
    parsed = resolver.parse("groq/meta-llama/llama-4-scout-17b-16e-instruct")

    assert parsed.provider is Provider.GROQ
    assert parsed.model == "meta-llama/llama-4-scout-17b-16e-instruct"


def test_parse_default_provider(resolver):
    parsed = resolver.parse("gemini-1.5-pro-latest")

    assert parsed.provider is Provider.GOOGLE
    assert parsed.model == "gemini-1.5-pro"


def test_parse_rejects_invalid_name(resolver):
    with pytest.raises(ValueError):
        resolver.parse("")


@pytest.mark.parametrize(
    "model_id, known",
    [
        ("gemini-2.5-flash", True),
        ("gemini-2.0-flash-exp", True),
        ("gemini-3.0-ultra", False),
        ("groq/llama-3.3-70b-versatile", True),
        ("groq/openai/gpt-oss-20b", True),
        ("groq/qwen-2.5-32b", False),
    ],
)
def test_matches_known_pattern(resolver, model_id, known):
    assert resolver.matches_known_pattern(model_id) is known


# ============================================================================
# Catalog entries
# ============================================================================


def test_descriptor_from_mapping_keeps_display_name(resolver):
    descriptor = resolver.descriptor({"id": "gemini-2.5-flash", "name": "Gemini 2.5 Flash", "provider": "google"})

    assert descriptor.id == "gemini-2.5-flash"
    assert descriptor.display_name == "Gemini 2.5 Flash"
    assert descriptor.provider is Provider.GOOGLE


def test_descriptor_from_bare_id(resolver):
    descriptor = resolver.descriptor("groq/mixtral-8x7b-32768")

    assert descriptor.provider is Provider.GROQ
    assert descriptor.display_name == "groq/mixtral-8x7b-32768"


def test_descriptor_passthrough(resolver, google_catalog):
    assert resolver.descriptor(google_catalog[0]) is google_catalog[0]
