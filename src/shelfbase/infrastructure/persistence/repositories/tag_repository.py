"""Read-only view over item tags."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shelfbase.infrastructure.persistence.models import ItemTagModel

DEFAULT_AUTOCOMPLETE_LIMIT = 10


class TagRepository:
    """Distinct tags across all items."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_all(self) -> list[str]:
        result = await self.session.execute(
            select(ItemTagModel.tag).distinct().order_by(ItemTagModel.tag)
        )
        return list(result.scalars().all())

    async def get_starting_with(
        self, prefix: str, limit: int = DEFAULT_AUTOCOMPLETE_LIMIT
    ) -> list[str]:
        """Distinct tags beginning with ``prefix``, at most ``limit`` of them."""
        result = await self.session.execute(
            select(ItemTagModel.tag)
            .where(ItemTagModel.tag.startswith(prefix, autoescape=True))
            .distinct()
            .order_by(ItemTagModel.tag)
            .limit(limit)
        )
        return list(result.scalars().all())
