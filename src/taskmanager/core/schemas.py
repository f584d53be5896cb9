"""Base Pydantic schemas shared by all entities."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Wire format is camelCase, snake_case field names are still accepted on input
WIRE_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EntityIn(BaseModel):
    """Base input schema; id is optional and assigned by the database when omitted."""

    model_config = WIRE_CONFIG

    id: int | None = Field(default=None, gt=0, description="Entity identifier")


class EntityOut(BaseModel):
    """Base output schema for persisted entities."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int = Field(description="Entity identifier")
    created_at: datetime = Field(description="Creation timestamp (UTC)")
    updated_at: datetime = Field(description="Last update timestamp (UTC)")


class PaginatedResponse[T](BaseModel):
    """Envelope for one page of results."""

    items: list[T] = Field(description="Items on this page")
    total: int = Field(description="Total number of items")
    page: int = Field(description="Current page number (1-based)")
    size: int = Field(description="Page size")
    pages: int = Field(description="Total number of pages")
