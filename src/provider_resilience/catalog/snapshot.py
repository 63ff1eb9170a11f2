"""
Catalog snapshots from provider model listings.

Turns the JSON bodies of the providers' "list models" endpoints, already
fetched by the caller, into ModelDescriptor lists with canonical ids:

    Groq    GET /openai/v1/models   {"data": [{"id": "llama-3.1-8b-instant", ...}]}
    Gemini  GET /v1beta/models      {"models": [{"name": "models/gemini-2.5-flash",
                                                 "displayName": "Gemini 2.5 Flash"}]}

Only chat-capable model families are kept. No network I/O happens here.
"""

from typing import Any, Iterable, Mapping

import structlog
from pydantic import ValidationError

from provider_resilience.models.catalog_models import ModelDescriptor
from provider_resilience.models.enums import Provider

logger = structlog.get_logger(__name__)

GROQ_MODEL_FAMILIES = (
    "llama",
    "mixtral",
    "gemma",
    "openai/",
    "meta-llama/",
    "moonshotai/",
)

GEMINI_CHAT_FAMILIES = ("gemini-2", "gemini-1.5", "gemini-1.0")


def parse_groq_catalog(payload: Mapping[str, Any]) -> list[ModelDescriptor]:
    """Descriptors for the chat models in a Groq listing, ids prefixed "groq/"."""
    descriptors = []
    for item in payload.get("data") or []:
        model_id = item.get("id") if isinstance(item, Mapping) else None
        if not isinstance(model_id, str) or not model_id.startswith(GROQ_MODEL_FAMILIES):
            continue
        descriptors.append(
            ModelDescriptor(
                id=f"groq/{model_id}",
                display_name=f"{model_id} (Groq)",
                provider=Provider.GROQ,
            )
        )
    logger.debug("Parsed Groq catalog", models=len(descriptors))
    return descriptors


def parse_gemini_catalog(payload: Mapping[str, Any]) -> list[ModelDescriptor]:
    """Descriptors for the chat models in a Gemini listing, "models/" stripped."""
    descriptors = []
    for item in payload.get("models") or []:
        name = item.get("name") if isinstance(item, Mapping) else None
        if not isinstance(name, str) or not any(family in name for family in GEMINI_CHAT_FAMILIES):
            continue
        model_id = name.removeprefix("models/")
        try:
            descriptors.append(
                ModelDescriptor(
                    id=model_id,
                    display_name=item.get("displayName") or model_id,
                    provider=Provider.GOOGLE,
                )
            )
        except ValidationError:
            logger.warning("Skipping malformed Gemini catalog entry", entry=name)
    logger.debug("Parsed Gemini catalog", models=len(descriptors))
    return descriptors


def merge_catalogs(*catalogs: Iterable[ModelDescriptor]) -> list[ModelDescriptor]:
    """Concatenate catalogs in order, keeping the first descriptor per id."""
    seen: set[str] = set()
    merged = []
    for catalog in catalogs:
        for descriptor in catalog:
            if descriptor.id in seen:
                continue
            seen.add(descriptor.id)
            merged.append(descriptor)
    return merged
