"""SQLAlchemy model for the topics table."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from shelfbase.infrastructure.persistence.database import Base


class TopicModel(Base):
    """Topic a collection is filed under."""

    __tablename__ = "topics"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    name: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        unique=True,
    )

    def __repr__(self) -> str:
        return f"<Topic(id={self.id}, name={self.name})>"
