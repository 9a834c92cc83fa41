"""Repository for collection operations.

Provides CRUD operations for the collections table.
"""

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from shelfbase.domain.entities import Collection
from shelfbase.domain.services.schema_validator import parse_date
from shelfbase.infrastructure.persistence.models import CollectionModel


def to_collection(model: CollectionModel) -> Collection:
    return Collection(
        id=model.id,
        owner_id=model.owner_id,
        name=model.name,
        topic_id=model.topic_id,
        image=model.image,
        created_at=parse_date(model.created_at),
        updated_at=parse_date(model.updated_at),
    )


class CollectionRepository:
    """Repository for collection database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository with a database session.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def get(self, collection_id: str) -> Collection | None:
        """Get a collection by ID.

        Args:
            collection_id: The collection ID.

        Returns:
            The collection if found, None otherwise.
        """
        model = await self.session.get(CollectionModel, collection_id)
        return to_collection(model) if model else None

    async def get_by_owner(self, owner_id: str) -> list[Collection]:
        """List the collections of a user, newest first."""
        result = await self.session.execute(
            select(CollectionModel)
            .where(CollectionModel.owner_id == owner_id)
            .order_by(CollectionModel.created_at.desc(), CollectionModel.id)
        )
        return [to_collection(m) for m in result.scalars().all()]

    async def get_all(self) -> list[Collection]:
        result = await self.session.execute(select(CollectionModel))
        return [to_collection(m) for m in result.scalars().all()]

    async def create(self, collection: Collection) -> Collection:
        """Create a new collection.

        Args:
            collection: The collection to create.

        Returns:
            The created collection.
        """
        self.session.add(
            CollectionModel(
                id=collection.id,
                owner_id=collection.owner_id,
                name=collection.name,
                topic_id=collection.topic_id,
                image=collection.image,
                created_at=collection.created_at,
                updated_at=collection.updated_at,
            )
        )
        await self.session.flush()
        return collection

    async def update(self, collection: Collection) -> Collection | None:
        """Update name, topic, image and timestamp of a collection.

        Returns:
            The updated collection, or None if it does not exist.
        """
        model = await self.session.get(CollectionModel, collection.id)
        if model is None:
            return None
        model.name = collection.name
        model.topic_id = collection.topic_id
        model.image = collection.image
        model.updated_at = collection.updated_at
        await self.session.flush()
        return collection

    async def delete(self, collection_id: str) -> None:
        await self.session.execute(
            delete(CollectionModel).where(CollectionModel.id == collection_id)
        )
