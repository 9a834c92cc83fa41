"""Item entities.

Items hold identity and metadata only. Field values live in the five typed
value stores and travel alongside an item as an ``ItemFields`` bundle.
"""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any

from shelfbase.domain.entities.collection import FIELD_TYPES, FieldType


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Item:
    """Item entity owned by exactly one collection.

    Attributes:
        id: Unique identifier (random, URL-safe).
        collection_id: ID of the owning collection.
        name: Item name.
        tags: Set of free-form tags.
        created_at: Timestamp when the item was created.
    """

    id: str
    collection_id: str
    name: str
    tags: set[str] = field(default_factory=set)
    created_at: datetime = field(default_factory=_utcnow)

    def __post_init__(self) -> None:
        """Validate item data after initialization."""
        if not self.id:
            raise ValueError("Item ID is required")
        if not self.collection_id:
            raise ValueError("Collection ID is required")
        self.tags = set(self.tags)

    def renamed(self, name: str, tags: set[str]) -> "Item":
        """Return a copy of the item with a new name and tag set."""
        return replace(self, name=name, tags=set(tags))


@dataclass
class ItemFields:
    """Field values of one item, bucketed by declared type.

    Each bucket maps a collection field ID to its value.
    """

    number_fields: dict[str, float] = field(default_factory=dict)
    text_fields: dict[str, str] = field(default_factory=dict)
    multiline_text_fields: dict[str, str] = field(default_factory=dict)
    checkbox_fields: dict[str, bool] = field(default_factory=dict)
    date_fields: dict[str, datetime] = field(default_factory=dict)

    def of_type(self, field_type: FieldType) -> dict[str, Any]:
        """Return the bucket holding values of the given type."""
        buckets: dict[FieldType, dict[str, Any]] = {
            FieldType.NUMBER: self.number_fields,
            FieldType.TEXT: self.text_fields,
            FieldType.MULTILINE_TEXT: self.multiline_text_fields,
            FieldType.CHECKBOX: self.checkbox_fields,
            FieldType.DATE: self.date_fields,
        }
        return buckets[FieldType(field_type)]

    def by_type(self) -> Iterator[tuple[FieldType, dict[str, Any]]]:
        """Yield (type, bucket) pairs in the fixed type order."""
        for field_type in FIELD_TYPES:
            yield field_type, self.of_type(field_type)

    def __len__(self) -> int:
        return sum(len(bucket) for _, bucket in self.by_type())

    @classmethod
    def from_buckets(cls, buckets: Mapping[FieldType, Mapping[str, Any]]) -> "ItemFields":
        """Build an ItemFields from a type -> bucket mapping."""
        fields = cls()
        for field_type, bucket in buckets.items():
            fields.of_type(field_type).update(bucket)
        return fields
