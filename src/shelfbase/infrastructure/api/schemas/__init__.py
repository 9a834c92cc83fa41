"""Pydantic request and response schemas for the HTTP API."""

from shelfbase.infrastructure.api.schemas.collection_schemas import (
    CollectionResponse,
    CollectionViewResponse,
    CreateCollectionBody,
    FieldResponse,
    NewFieldBody,
    TopicResponse,
    UpdateCollectionBody,
    UpdatedFieldBody,
)
from shelfbase.infrastructure.api.schemas.item_schemas import (
    CreatedResponse,
    CreateItemBody,
    ItemCommentResponse,
    ItemFieldsPayload,
    ItemFieldValueResponse,
    ItemResponse,
    ItemViewResponse,
    UpdateItemBody,
)
from shelfbase.infrastructure.api.schemas.misc_schemas import (
    CommentBody,
    CommentResponse,
    CreateCommentBody,
    SearchResultResponse,
    SetAdminBody,
    SetBlockedBody,
    UserResponse,
)

__all__ = [
    "CollectionResponse",
    "CollectionViewResponse",
    "CommentBody",
    "CommentResponse",
    "CreateCollectionBody",
    "CreateCommentBody",
    "CreateItemBody",
    "CreatedResponse",
    "FieldResponse",
    "ItemCommentResponse",
    "ItemFieldValueResponse",
    "ItemFieldsPayload",
    "ItemResponse",
    "ItemViewResponse",
    "NewFieldBody",
    "SearchResultResponse",
    "SetAdminBody",
    "SetBlockedBody",
    "TopicResponse",
    "UpdateCollectionBody",
    "UpdateItemBody",
    "UpdatedFieldBody",
    "UserResponse",
]
