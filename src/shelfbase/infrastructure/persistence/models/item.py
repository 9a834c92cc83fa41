"""SQLAlchemy models for items and their tags."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, func
from sqlalchemy.orm import Mapped, mapped_column

from shelfbase.infrastructure.persistence.database import Base


class ItemModel(Base):
    """SQLAlchemy model for the items table.

    Field values are held in the typed value tables, not here.
    """

    __tablename__ = "items"

    id: Mapped[str] = mapped_column(
        String(32),
        primary_key=True,
        comment="Item ID",
    )
    collection_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("collections.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Foreign key to collections table",
    )
    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"<Item(id={self.id}, name={self.name})>"


class ItemTagModel(Base):
    """Junction of items and free-form tag strings."""

    __tablename__ = "item_tags"

    item_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("items.id", ondelete="CASCADE"),
        primary_key=True,
    )
    tag: Mapped[str] = mapped_column(
        String(64),
        primary_key=True,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<ItemTag(item_id={self.item_id}, tag={self.tag})>"
