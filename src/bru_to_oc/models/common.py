"""Shared base models for the canonical request model."""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field


class FrozenModel(BaseModel):
    """Immutable model that rejects unknown fields.

    ``populate_by_name`` lets code build models with snake_case names while
    YAML input uses the camelCase aliases.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)


class NamedValue(FrozenModel):
    """A name/value pair that can be switched off."""

    name: Annotated[str, Field(description="Entry name")]
    value: Annotated[str, Field(default="", description="Entry value")]
    enabled: Annotated[bool, Field(default=True, description="False when disabled")]
