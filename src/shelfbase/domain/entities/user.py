"""User entity.

Users own collections and author comments. Admins may mutate any
collection; blocked users cannot act at all.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass
class User:
    """User entity.

    Attributes:
        id: Unique identifier.
        username: Unique handle.
        email: Unique email address.
        fullname: Display name.
        is_admin: Whether the user may act on resources they don't own.
        blocked: Whether the user is barred from acting.
        created_at: Timestamp when the user was created.
    """

    id: str
    username: str
    email: str
    fullname: str = ""
    is_admin: bool = False
    blocked: bool = False
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        """Validate user data after initialization."""
        if not self.id:
            raise ValueError("User ID is required")
        if not self.username:
            raise ValueError("Username is required")
        if not self.email:
            raise ValueError("Email is required")
