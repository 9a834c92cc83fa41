"""SQLAlchemy models for the five typed field value stores.

Every table is keyed by (item_id, field_id) and holds one value column of
its own type. The models share their key columns through a mixin.
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Float, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, declared_attr, mapped_column

from shelfbase.infrastructure.persistence.database import Base


class FieldValueMixin:
    """Composite key shared by every typed value table."""

    @declared_attr
    def item_id(cls) -> Mapped[str]:
        return mapped_column(
            String(32),
            ForeignKey("items.id", ondelete="CASCADE"),
            primary_key=True,
        )

    @declared_attr
    def field_id(cls) -> Mapped[str]:
        return mapped_column(
            String(32),
            ForeignKey("collection_fields.id", ondelete="CASCADE"),
            primary_key=True,
            index=True,
        )

    def __repr__(self) -> str:
        return (
            f"<{type(self).__name__}(item_id={self.item_id}, "
            f"field_id={self.field_id}, value={self.value!r})>"
        )


class NumberFieldValueModel(FieldValueMixin, Base):
    __tablename__ = "number_field_values"

    value: Mapped[float] = mapped_column(Float, nullable=False)


class TextFieldValueModel(FieldValueMixin, Base):
    __tablename__ = "text_field_values"

    value: Mapped[str] = mapped_column(String(255), nullable=False)


class MultilineTextFieldValueModel(FieldValueMixin, Base):
    __tablename__ = "multiline_text_field_values"

    value: Mapped[str] = mapped_column(Text, nullable=False)


class CheckboxFieldValueModel(FieldValueMixin, Base):
    __tablename__ = "checkbox_field_values"

    value: Mapped[bool] = mapped_column(Boolean, nullable=False)


class DateFieldValueModel(FieldValueMixin, Base):
    __tablename__ = "date_field_values"

    value: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
