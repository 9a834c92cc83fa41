"""SQLAlchemy models for ShelfBase tables.

All models inherit from the Base class defined in database.py and are
automatically created on application startup in development mode.
"""

from shelfbase.infrastructure.persistence.models.collection import (
    CollectionFieldModel,
    CollectionModel,
)
from shelfbase.infrastructure.persistence.models.comment import CommentModel
from shelfbase.infrastructure.persistence.models.field_value import (
    CheckboxFieldValueModel,
    DateFieldValueModel,
    MultilineTextFieldValueModel,
    NumberFieldValueModel,
    TextFieldValueModel,
)
from shelfbase.infrastructure.persistence.models.item import ItemModel, ItemTagModel
from shelfbase.infrastructure.persistence.models.topic import TopicModel
from shelfbase.infrastructure.persistence.models.user import UserModel

__all__ = [
    "CheckboxFieldValueModel",
    "CollectionFieldModel",
    "CollectionModel",
    "CommentModel",
    "DateFieldValueModel",
    "ItemModel",
    "ItemTagModel",
    "MultilineTextFieldValueModel",
    "NumberFieldValueModel",
    "TextFieldValueModel",
    "TopicModel",
    "UserModel",
]
