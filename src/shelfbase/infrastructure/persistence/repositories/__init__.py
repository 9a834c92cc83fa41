"""Persistence repositories for database operations."""

from shelfbase.infrastructure.persistence.repositories.collection_field_repository import (
    CollectionFieldRepository,
)
from shelfbase.infrastructure.persistence.repositories.collection_repository import (
    CollectionRepository,
)
from shelfbase.infrastructure.persistence.repositories.comment_repository import (
    CommentRepository,
)
from shelfbase.infrastructure.persistence.repositories.field_value_repository import (
    FieldValueRepository,
    FieldValueStores,
)
from shelfbase.infrastructure.persistence.repositories.item_repository import (
    ItemRepository,
)
from shelfbase.infrastructure.persistence.repositories.tag_repository import (
    TagRepository,
)
from shelfbase.infrastructure.persistence.repositories.topic_repository import (
    TopicRepository,
)
from shelfbase.infrastructure.persistence.repositories.user_repository import (
    UserRepository,
)

__all__ = [
    "CollectionFieldRepository",
    "CollectionRepository",
    "CommentRepository",
    "FieldValueRepository",
    "FieldValueStores",
    "ItemRepository",
    "TagRepository",
    "TopicRepository",
    "UserRepository",
]
