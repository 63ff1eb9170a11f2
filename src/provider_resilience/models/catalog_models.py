"""
Catalog data models.

A catalog is a snapshot of the models a provider currently serves. It is
fetched by an external collaborator and handed to this layer as a list of
ModelDescriptor, plain mappings or bare id strings. These models are
immutable: one snapshot is shared read-only by every request that received it.
"""

from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from provider_resilience.models.enums import Provider


class ModelDescriptor(BaseModel):
    """
    One entry of a provider model catalog.

    ``display_name`` may also be supplied as ``name`` (the key provider
    listings use); it defaults to the id.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., min_length=1, description="Canonical model id (e.g. 'groq/llama-3.1-8b-instant')")
    display_name: str = Field(default="", alias="name", description="Human readable model name")
    provider: Provider = Field(..., description="Provider serving this model")

    @model_validator(mode="before")
    @classmethod
    def _default_display_name(cls, data: Any) -> Any:
        if isinstance(data, dict) and not (data.get("display_name") or data.get("name")):
            data = {**data, "display_name": data.get("id", "")}
        return data


CatalogEntry = Union[ModelDescriptor, Mapping[str, Any], str]
"""Catalog entries are descriptors, plain mappings with the same keys, or bare ids."""


class ParsedModelId(BaseModel):
    """A canonical model id split into provider and provider-native name."""

    model_config = ConfigDict(frozen=True)

    provider: Provider
    model: str = Field(..., description="Name as the provider API expects it (namespace stripped)")


class ValidationResult(BaseModel):
    """
    Outcome of checking a model name against a catalog snapshot.

    ``catalog_checked`` is False when the catalog was empty and the check
    failed open. ``available`` lists the catalog ids on rejection so callers
    can offer alternatives.
    """

    model_config = ConfigDict(frozen=True)

    valid: bool
    normalized: Optional[str] = None
    original: Optional[str] = None
    diagnostic: Optional[str] = None
    catalog_checked: bool = False
    available: tuple[str, ...] = ()
