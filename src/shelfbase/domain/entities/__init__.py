"""Domain entities for ShelfBase.

Entities are pure Python dataclasses that represent core business concepts.
They have no dependencies on infrastructure or external frameworks.
"""

from shelfbase.domain.entities.collection import (
    FIELD_TYPES,
    Collection,
    CollectionField,
    FieldType,
    Topic,
)
from shelfbase.domain.entities.comment import Comment
from shelfbase.domain.entities.failure import (
    BadRequestFailure,
    ConflictFailure,
    Failure,
    InternalFailure,
    NotAuthorizedFailure,
    NotFoundFailure,
    ValidateLengthFailure,
    is_failure,
)
from shelfbase.domain.entities.item import Item, ItemFields
from shelfbase.domain.entities.user import User

__all__ = [
    "BadRequestFailure",
    "Collection",
    "CollectionField",
    "Comment",
    "ConflictFailure",
    "FIELD_TYPES",
    "Failure",
    "FieldType",
    "InternalFailure",
    "Item",
    "ItemFields",
    "NotAuthorizedFailure",
    "NotFoundFailure",
    "Topic",
    "User",
    "ValidateLengthFailure",
    "is_failure",
]
