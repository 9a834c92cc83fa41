"""Collection entities and the typed schema they carry.

A collection owns an ordered list of typed field definitions. Every item in
the collection must carry exactly one value per field definition.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class FieldType(str, Enum):
    """Declared type of a collection field.

    Each type is backed by its own typed value store.
    """

    NUMBER = "Number"
    TEXT = "Text"
    MULTILINE_TEXT = "MultilineText"
    CHECKBOX = "Checkbox"
    DATE = "Date"


# Fixed iteration order used wherever the five types are walked structurally
FIELD_TYPES: tuple[FieldType, ...] = (
    FieldType.NUMBER,
    FieldType.TEXT,
    FieldType.MULTILINE_TEXT,
    FieldType.CHECKBOX,
    FieldType.DATE,
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Topic:
    """Topic a collection is filed under (e.g. Books, Coins)."""

    id: str
    name: str


@dataclass
class Collection:
    """Collection entity representing a user-owned bucket of items.

    Attributes:
        id: Unique identifier.
        owner_id: ID of the user that owns the collection.
        name: Display name (1-100 characters).
        topic_id: ID of the topic the collection is filed under.
        image: Optional image URL.
        created_at: Timestamp when the collection was created.
        updated_at: Timestamp when the collection was last updated.
    """

    id: str
    owner_id: str
    name: str
    topic_id: str
    image: str | None = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    def __post_init__(self) -> None:
        """Validate collection data after initialization."""
        if not self.id:
            raise ValueError("Collection ID is required")
        if not self.owner_id:
            raise ValueError("Owner ID is required")


@dataclass
class CollectionField:
    """A typed field definition belonging to one collection.

    Renaming or re-typing a field leaves previously stored values where they
    are; values are never migrated between typed stores.
    """

    id: str
    collection_id: str
    name: str
    type: FieldType
    position: int = 0

    def __post_init__(self) -> None:
        """Normalize the declared type."""
        if not self.id:
            raise ValueError("Field ID is required")
        self.type = FieldType(self.type)
