"""Repository for topic operations."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shelfbase.domain.entities import Topic
from shelfbase.infrastructure.persistence.models import TopicModel


class TopicRepository:
    """Read access to the seeded topic list."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, topic_id: str) -> Topic | None:
        model = await self.session.get(TopicModel, topic_id)
        return Topic(id=model.id, name=model.name) if model else None

    async def get_all(self) -> list[Topic]:
        """Return all topics ordered by name."""
        result = await self.session.execute(select(TopicModel).order_by(TopicModel.name))
        return [Topic(id=m.id, name=m.name) for m in result.scalars().all()]
