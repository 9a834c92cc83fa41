"""SQLAlchemy model for the users table.

Users own collections and author comments. Usernames and emails are unique.
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from shelfbase.infrastructure.persistence.database import Base


class UserModel(Base):
    """SQLAlchemy model for the users table.

    Attributes:
        id: Primary key (random URL-safe string).
        username: Unique handle.
        email: Unique email address.
        fullname: Display name.
        is_admin: Whether the user may mutate resources they don't own.
        blocked: Whether the user is barred from acting.
        created_at: Timestamp when the user was created.
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(
        String(32),
        primary_key=True,
        comment="User ID",
    )
    username: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        unique=True,
        index=True,
        comment="Unique user handle",
    )
    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        comment="User email address",
    )
    fullname: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        default="",
    )
    is_admin: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        comment="Whether the user may act on any collection",
    )
    blocked: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        comment="Whether the user is barred from acting",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username={self.username})>"
