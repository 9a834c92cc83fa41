"""Repositories for the five typed field value stores.

``FieldValueRepository`` is generic over the value model; one instance per
field type is bundled into ``FieldValueStores``, which moves whole
``ItemFields`` bundles in and out of the stores.
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from shelfbase.domain.entities import FIELD_TYPES, FieldType, ItemFields
from shelfbase.domain.services.schema_validator import parse_date
from shelfbase.infrastructure.persistence.models import (
    CheckboxFieldValueModel,
    DateFieldValueModel,
    MultilineTextFieldValueModel,
    NumberFieldValueModel,
    TextFieldValueModel,
)
from shelfbase.infrastructure.persistence.models.field_value import FieldValueMixin

ModelT = TypeVar("ModelT", bound=FieldValueMixin)

VALUE_MODELS: dict[FieldType, type] = {
    FieldType.NUMBER: NumberFieldValueModel,
    FieldType.TEXT: TextFieldValueModel,
    FieldType.MULTILINE_TEXT: MultilineTextFieldValueModel,
    FieldType.CHECKBOX: CheckboxFieldValueModel,
    FieldType.DATE: DateFieldValueModel,
}


class FieldValueRepository(Generic[ModelT]):
    """Store of values of one field type keyed by (item_id, field_id)."""

    def __init__(self, session: AsyncSession, model: type[ModelT]) -> None:
        self.session = session
        self.model = model

    def _load(self, value: Any) -> Any:
        # SQLite hands back naive datetimes
        if self.model is DateFieldValueModel:
            return parse_date(value)
        return value

    async def get(self, item_id: str, field_id: str) -> Any | None:
        row = await self.session.get(self.model, (item_id, field_id))
        return self._load(row.value) if row else None

    async def get_by_item(self, item_id: str) -> dict[str, Any]:
        """All values of this type stored for an item, keyed by field ID."""
        result = await self.session.execute(
            select(self.model).where(self.model.item_id == item_id)
        )
        return {row.field_id: self._load(row.value) for row in result.scalars().all()}

    async def create(self, item_id: str, field_id: str, value: Any) -> None:
        self.session.add(self.model(item_id=item_id, field_id=field_id, value=value))
        await self.session.flush()

    async def create_many(self, item_id: str, values: dict[str, Any]) -> None:
        if not values:
            return
        self.session.add_all(
            [
                self.model(item_id=item_id, field_id=field_id, value=value)
                for field_id, value in values.items()
            ]
        )
        await self.session.flush()

    async def update(self, item_id: str, field_id: str, value: Any) -> None:
        await self.session.execute(
            update(self.model)
            .where(self.model.item_id == item_id, self.model.field_id == field_id)
            .values(value=value)
        )

    async def delete(self, item_id: str, field_id: str) -> None:
        await self.session.execute(
            delete(self.model).where(
                self.model.item_id == item_id, self.model.field_id == field_id
            )
        )

    async def delete_all_for_item(self, item_id: str) -> None:
        await self.session.execute(delete(self.model).where(self.model.item_id == item_id))


class FieldValueStores:
    """The five typed value stores of one session, addressed by field type."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.stores: dict[FieldType, FieldValueRepository] = {
            field_type: FieldValueRepository(session, VALUE_MODELS[field_type])
            for field_type in FIELD_TYPES
        }

    def __getitem__(self, field_type: FieldType) -> FieldValueRepository:
        return self.stores[FieldType(field_type)]

    async def load(self, item_id: str) -> ItemFields:
        """Read every stored value of an item into an ItemFields bundle."""
        buckets = {
            field_type: await store.get_by_item(item_id)
            for field_type, store in self.stores.items()
        }
        return ItemFields.from_buckets(buckets)

    async def create_all(self, item_id: str, fields: ItemFields) -> None:
        for field_type, bucket in fields.by_type():
            await self.stores[field_type].create_many(item_id, bucket)

    async def replace_all(self, item_id: str, fields: ItemFields) -> None:
        """Delete every typed value of the item, then write the new bundle."""
        await self.delete_all_for_item(item_id)
        await self.create_all(item_id, fields)

    async def delete_all_for_item(self, item_id: str) -> None:
        for store in self.stores.values():
            await store.delete_all_for_item(item_id)
