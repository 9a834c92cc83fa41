"""Repository for collection field definitions (the schema store)."""

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from shelfbase.domain.entities import CollectionField
from shelfbase.infrastructure.persistence.models import CollectionFieldModel


def to_field(model: CollectionFieldModel) -> CollectionField:
    return CollectionField(
        id=model.id,
        collection_id=model.collection_id,
        name=model.name,
        type=model.type,
        position=model.position,
    )


class CollectionFieldRepository:
    """Repository for the ordered field definitions of collections."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_collection(self, collection_id: str) -> list[CollectionField]:
        """Return the schema of a collection in field order."""
        result = await self.session.execute(
            select(CollectionFieldModel)
            .where(CollectionFieldModel.collection_id == collection_id)
            .order_by(CollectionFieldModel.position, CollectionFieldModel.id)
            .execution_options(populate_existing=True)
        )
        return [to_field(m) for m in result.scalars().all()]

    async def create_many(self, fields: list[CollectionField]) -> None:
        """Insert several field definitions in one round trip."""
        if not fields:
            return
        self.session.add_all(
            [
                CollectionFieldModel(
                    id=f.id,
                    collection_id=f.collection_id,
                    name=f.name,
                    type=f.type.value,
                    position=f.position,
                )
                for f in fields
            ]
        )
        await self.session.flush()

    async def update_many(self, fields: list[CollectionField]) -> None:
        """Update name, type and position of existing fields by primary key.

        Stored values are left in place, even when the type changes.
        """
        if not fields:
            return
        await self.session.execute(
            update(CollectionFieldModel),
            [
                {"id": f.id, "name": f.name, "type": f.type.value, "position": f.position}
                for f in fields
            ],
        )

    async def delete(self, field_id: str) -> None:
        await self.session.execute(
            delete(CollectionFieldModel).where(CollectionFieldModel.id == field_id)
        )

    async def delete_by_collection(self, collection_id: str) -> None:
        await self.session.execute(
            delete(CollectionFieldModel).where(
                CollectionFieldModel.collection_id == collection_id
            )
        )
