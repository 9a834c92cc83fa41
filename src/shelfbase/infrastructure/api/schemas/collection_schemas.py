"""Pydantic schemas for collection and topic endpoints.

Name lengths are checked by the collection service so that violations come
back with which bound was missed.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from shelfbase.domain.entities import FieldType
from shelfbase.infrastructure.api.schemas.item_schemas import ItemResponse


class TopicResponse(BaseModel):
    id: str
    name: str


class CreateCollectionBody(BaseModel):
    """Request body for creating a collection.

    ``owner_id`` defaults to the requester; admins may create collections
    for other users.
    """

    name: str
    topic_id: str
    image: str | None = None
    owner_id: str | None = None


class UpdatedFieldBody(BaseModel):
    id: str
    name: str
    type: FieldType


class NewFieldBody(BaseModel):
    name: str
    type: FieldType


class UpdateCollectionBody(BaseModel):
    """Request body for updating a collection and its schema."""

    name: str
    topic_id: str
    image: str | None = None
    updated_fields: list[UpdatedFieldBody] = Field(default_factory=list)
    created_fields: list[NewFieldBody] = Field(default_factory=list)


class FieldResponse(BaseModel):
    id: str
    name: str
    type: FieldType
    position: int


class CollectionResponse(BaseModel):
    id: str
    owner_id: str
    name: str
    topic_id: str
    image: str | None
    created_at: datetime
    updated_at: datetime


class CollectionViewResponse(CollectionResponse):
    owner_name: str
    topic_name: str
    fields: list[FieldResponse]
    items: list[ItemResponse]
