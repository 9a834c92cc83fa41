"""SQLAlchemy models for collections and their field definitions.

A collection's schema is the ordered set of rows in ``collection_fields``.
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from shelfbase.infrastructure.persistence.database import Base


class CollectionModel(Base):
    """SQLAlchemy model for the collections table.

    Attributes:
        id: Primary key.
        owner_id: Foreign key to the owning user.
        name: Collection name (1-100 chars).
        topic_id: Foreign key to topics table.
        image: Optional image URL.
        created_at: Timestamp when the collection was created.
        updated_at: Timestamp when the collection was last updated.
    """

    __tablename__ = "collections"

    id: Mapped[str] = mapped_column(
        String(32),
        primary_key=True,
        comment="Collection ID",
    )
    owner_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("users.id"),
        nullable=False,
        index=True,
        comment="Foreign key to users table",
    )
    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="Collection name (1-100 chars)",
    )
    topic_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("topics.id"),
        nullable=False,
        comment="Foreign key to topics table",
    )
    image: Mapped[str | None] = mapped_column(
        String(2048),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    def __repr__(self) -> str:
        return f"<Collection(id={self.id}, name={self.name})>"


class CollectionFieldModel(Base):
    """SQLAlchemy model for the collection_fields table.

    ``type`` holds the FieldType value naming the typed store that backs the
    field. Changing it does not move stored values.
    """

    __tablename__ = "collection_fields"

    id: Mapped[str] = mapped_column(
        String(32),
        primary_key=True,
        comment="Field ID",
    )
    collection_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("collections.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Foreign key to collections table",
    )
    name: Mapped[str] = mapped_column(
        String(25),
        nullable=False,
        comment="Field name (1-25 chars)",
    )
    type: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        comment="Declared field type",
    )
    position: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )

    def __repr__(self) -> str:
        return f"<CollectionField(id={self.id}, name={self.name}, type={self.type})>"
