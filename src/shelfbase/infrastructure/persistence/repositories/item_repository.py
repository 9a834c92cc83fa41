"""Repository for item operations.

Items are stored in ``items`` with their tags in ``item_tags``. Field values
are handled by the typed value repositories.
"""

from collections import defaultdict

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from shelfbase.domain.entities import Item
from shelfbase.domain.services.schema_validator import parse_date
from shelfbase.infrastructure.persistence.models import ItemModel, ItemTagModel


class ItemRepository:
    """Repository for item database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository with a database session.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def _tags_for(self, item_ids: list[str]) -> dict[str, set[str]]:
        tags: dict[str, set[str]] = defaultdict(set)
        if not item_ids:
            return tags
        result = await self.session.execute(
            select(ItemTagModel).where(ItemTagModel.item_id.in_(list(set(item_ids))))
        )
        for row in result.scalars().all():
            tags[row.item_id].add(row.tag)
        return tags

    async def _to_items(self, models: list[ItemModel]) -> list[Item]:
        tags = await self._tags_for([m.id for m in models])
        return [
            Item(
                id=m.id,
                collection_id=m.collection_id,
                name=m.name,
                tags=tags.get(m.id, set()),
                created_at=parse_date(m.created_at),
            )
            for m in models
        ]

    async def get(self, item_id: str) -> Item | None:
        """Get an item with its tags.

        Args:
            item_id: The item ID.

        Returns:
            The item if found, None otherwise.
        """
        model = await self.session.get(ItemModel, item_id)
        if model is None:
            return None
        return (await self._to_items([model]))[0]

    async def get_by_collection(self, collection_id: str) -> list[Item]:
        """List the items of a collection ordered by creation time."""
        result = await self.session.execute(
            select(ItemModel)
            .where(ItemModel.collection_id == collection_id)
            .order_by(ItemModel.created_at, ItemModel.id)
        )
        return await self._to_items(list(result.scalars().all()))

    async def get_many(self, item_ids: list[str]) -> list[Item]:
        """Fetch several items, in the order of ``item_ids``.

        Unknown IDs are skipped.
        """
        if not item_ids:
            return []
        result = await self.session.execute(
            select(ItemModel).where(ItemModel.id.in_(list(set(item_ids))))
        )
        by_id = {m.id: m for m in result.scalars().all()}
        ordered = [by_id[i] for i in dict.fromkeys(item_ids) if i in by_id]
        return await self._to_items(ordered)

    async def get_one_from_each_collection(self, collection_ids: list[str]) -> list[Item]:
        """Return the earliest item of each collection, in the given order.

        Collections without items contribute nothing.
        """
        if not collection_ids:
            return []
        result = await self.session.execute(
            select(ItemModel)
            .where(ItemModel.collection_id.in_(list(set(collection_ids))))
            .order_by(ItemModel.created_at, ItemModel.id)
        )
        first: dict[str, ItemModel] = {}
        for model in result.scalars().all():
            first.setdefault(model.collection_id, model)
        ordered = [first[c] for c in dict.fromkeys(collection_ids) if c in first]
        return await self._to_items(ordered)

    async def get_all(self) -> list[Item]:
        result = await self.session.execute(select(ItemModel))
        return await self._to_items(list(result.scalars().all()))

    async def create(self, item: Item) -> Item:
        """Create an item row and its tags.

        Args:
            item: The item to create.

        Returns:
            The created item.
        """
        self.session.add(
            ItemModel(
                id=item.id,
                collection_id=item.collection_id,
                name=item.name,
                created_at=item.created_at,
            )
        )
        # Tag rows reference the item, so it must be written first
        await self.session.flush()
        self.session.add_all([ItemTagModel(item_id=item.id, tag=tag) for tag in item.tags])
        await self.session.flush()
        return item

    async def update(self, item: Item) -> Item | None:
        """Replace the name and tag set of an existing item.

        Returns:
            The updated item, or None if it does not exist.
        """
        model = await self.session.get(ItemModel, item.id)
        if model is None:
            return None
        model.name = item.name
        await self.session.execute(delete(ItemTagModel).where(ItemTagModel.item_id == item.id))
        self.session.add_all([ItemTagModel(item_id=item.id, tag=tag) for tag in item.tags])
        await self.session.flush()
        return item

    async def delete(self, item_id: str) -> None:
        """Delete an item row and its tags."""
        await self.session.execute(delete(ItemTagModel).where(ItemTagModel.item_id == item_id))
        await self.session.execute(delete(ItemModel).where(ItemModel.id == item_id))
