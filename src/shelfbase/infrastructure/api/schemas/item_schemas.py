"""Pydantic schemas for item endpoints.

Field values are accepted untyped here; the schema validator checks them
against the collection's field definitions.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from shelfbase.domain.entities import FieldType, ItemFields


class ItemFieldsPayload(BaseModel):
    """Field values bucketed by declared type, keyed by field ID."""

    number_fields: dict[str, Any] = Field(default_factory=dict)
    text_fields: dict[str, Any] = Field(default_factory=dict)
    multiline_text_fields: dict[str, Any] = Field(default_factory=dict)
    checkbox_fields: dict[str, Any] = Field(default_factory=dict)
    date_fields: dict[str, Any] = Field(default_factory=dict)

    def to_item_fields(self) -> ItemFields:
        return ItemFields(
            number_fields=dict(self.number_fields),
            text_fields=dict(self.text_fields),
            multiline_text_fields=dict(self.multiline_text_fields),
            checkbox_fields=dict(self.checkbox_fields),
            date_fields=dict(self.date_fields),
        )


class CreateItemBody(BaseModel):
    """Request body for creating an item."""

    collection_id: str
    name: str = Field(..., min_length=1, max_length=255)
    tags: list[str] = Field(default_factory=list)
    fields: ItemFieldsPayload = Field(default_factory=ItemFieldsPayload)


class UpdateItemBody(BaseModel):
    """Request body for replacing an item's name, tags and values."""

    name: str = Field(..., min_length=1, max_length=255)
    tags: list[str] = Field(default_factory=list)
    fields: ItemFieldsPayload = Field(default_factory=ItemFieldsPayload)


class CreatedResponse(BaseModel):
    id: str


class ItemResponse(BaseModel):
    id: str
    collection_id: str
    name: str
    tags: list[str]
    created_at: datetime


class ItemFieldValueResponse(BaseModel):
    id: str
    name: str
    type: FieldType
    value: Any


class ItemCommentResponse(BaseModel):
    id: str
    author_id: str
    author_name: str
    text: str
    created_at: datetime


class ItemViewResponse(BaseModel):
    """An item with its values in schema order and its comments."""

    id: str
    name: str
    tags: list[str]
    created_at: datetime
    collection_id: str
    collection_name: str
    owner_id: str
    fields: list[ItemFieldValueResponse]
    comments: list[ItemCommentResponse]
