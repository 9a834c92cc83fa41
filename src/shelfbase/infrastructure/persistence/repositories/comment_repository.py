"""Repository for comment operations."""

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from shelfbase.domain.entities import Comment
from shelfbase.domain.services.schema_validator import parse_date
from shelfbase.infrastructure.persistence.models import CommentModel


def to_comment(model: CommentModel) -> Comment:
    return Comment(
        id=model.id,
        item_id=model.item_id,
        author_id=model.author_id,
        text=model.text,
        created_at=parse_date(model.created_at),
    )


class CommentRepository:
    """Repository for comment database operations."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, comment_id: str) -> Comment | None:
        model = await self.session.get(CommentModel, comment_id)
        return to_comment(model) if model else None

    async def get_by_item(self, item_id: str) -> list[Comment]:
        """Comments on an item, oldest first."""
        result = await self.session.execute(
            select(CommentModel)
            .where(CommentModel.item_id == item_id)
            .order_by(CommentModel.created_at, CommentModel.id)
        )
        return [to_comment(m) for m in result.scalars().all()]

    async def get_all(self) -> list[Comment]:
        result = await self.session.execute(select(CommentModel))
        return [to_comment(m) for m in result.scalars().all()]

    async def create(self, comment: Comment) -> Comment:
        self.session.add(
            CommentModel(
                id=comment.id,
                item_id=comment.item_id,
                author_id=comment.author_id,
                text=comment.text,
                created_at=comment.created_at,
            )
        )
        await self.session.flush()
        return comment

    async def update(self, comment: Comment) -> Comment | None:
        model = await self.session.get(CommentModel, comment.id)
        if model is None:
            return None
        model.text = comment.text
        await self.session.flush()
        return comment

    async def delete(self, comment_id: str) -> None:
        await self.session.execute(delete(CommentModel).where(CommentModel.id == comment_id))

    async def delete_by_item(self, item_id: str) -> list[str]:
        """Delete every comment on an item and return the deleted IDs."""
        result = await self.session.execute(
            select(CommentModel.id).where(CommentModel.item_id == item_id)
        )
        comment_ids = list(result.scalars().all())
        await self.session.execute(delete(CommentModel).where(CommentModel.item_id == item_id))
        return comment_ids

    async def delete_by_author(self, author_id: str) -> list[str]:
        """Delete every comment written by a user and return the deleted IDs."""
        result = await self.session.execute(
            select(CommentModel.id).where(CommentModel.author_id == author_id)
        )
        comment_ids = list(result.scalars().all())
        await self.session.execute(
            delete(CommentModel).where(CommentModel.author_id == author_id)
        )
        return comment_ids
