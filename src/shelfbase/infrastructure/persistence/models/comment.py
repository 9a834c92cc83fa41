"""SQLAlchemy model for the comments table."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from shelfbase.infrastructure.persistence.database import Base


class CommentModel(Base):
    """SQLAlchemy model for the comments table.

    Attributes:
        id: Primary key.
        item_id: Foreign key to the commented item.
        author_id: Foreign key to the authoring user.
        text: Comment body.
        created_at: Timestamp when the comment was created.
    """

    __tablename__ = "comments"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    item_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("items.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    author_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("users.id"),
        nullable=False,
    )
    text: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"<Comment(id={self.id}, item_id={self.item_id})>"
