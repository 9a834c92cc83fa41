"""Comment entity. Comments discuss a single item."""

from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass
class Comment:
    """A comment left on an item by a user."""

    id: str
    item_id: str
    author_id: str
    text: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
