"""Comment service for business logic.

Any active user may comment on an item. Only the author may edit or delete a
comment; ownership of the item's collection grants nothing here.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from shelfbase.core.logging import get_logger
from shelfbase.domain.entities import (
    BadRequestFailure,
    Comment,
    Failure,
    NotAuthorizedFailure,
    NotFoundFailure,
)
from shelfbase.domain.services.id_generator import new_id
from shelfbase.domain.services.transaction import run_in_transaction
from shelfbase.infrastructure.persistence.repositories import (
    CommentRepository,
    ItemRepository,
    UserRepository,
)
from shelfbase.infrastructure.search.synchronizer import SearchIndexSynchronizer

logger = get_logger(__name__)


class CommentService:
    """Service for comment business logic."""

    def __init__(
        self,
        session: AsyncSession,
        synchronizer: SearchIndexSynchronizer,
        store_timeout_seconds: float = 10.0,
    ) -> None:
        self.session = session
        self.synchronizer = synchronizer
        self.store_timeout_seconds = store_timeout_seconds
        self.comments = CommentRepository(session)
        self.items = ItemRepository(session)
        self.users = UserRepository(session)

    async def _active_requester(self, requester_id: str) -> Failure | None:
        requester = await self.users.get(requester_id)
        if requester is None:
            return NotFoundFailure(resource="User", resource_id=requester_id)
        if requester.blocked:
            return NotAuthorizedFailure(message="User is blocked")
        return None

    async def _own_comment(self, comment_id: str, requester_id: str) -> Comment | Failure:
        comment = await self.comments.get(comment_id)
        if comment is None:
            return NotFoundFailure(resource="Comment", resource_id=comment_id)
        inactive = await self._active_requester(requester_id)
        if inactive:
            return inactive
        if comment.author_id != requester_id:
            return NotAuthorizedFailure()
        return comment

    async def create(self, item_id: str, text: str, requester_id: str) -> str | Failure:
        if not text.strip():
            return BadRequestFailure(message="Comment text is required")
        if await self.items.get(item_id) is None:
            return NotFoundFailure(resource="Item", resource_id=item_id)
        inactive = await self._active_requester(requester_id)
        if inactive:
            return inactive

        comment = Comment(id=new_id(), item_id=item_id, author_id=requester_id, text=text)

        async def write() -> None:
            await self.comments.create(comment)

        failure = await run_in_transaction(
            self.session, "Create comment", write, self.store_timeout_seconds
        )
        if failure:
            return failure

        logger.info("Comment created", comment_id=comment.id, item_id=item_id)
        self.synchronizer.schedule(self.synchronizer.add_comment(comment))
        return comment.id

    async def update(self, comment_id: str, text: str, requester_id: str) -> Comment | Failure:
        if not text.strip():
            return BadRequestFailure(message="Comment text is required")
        comment = await self._own_comment(comment_id, requester_id)
        if isinstance(comment, Failure):
            return comment

        comment.text = text

        async def write() -> None:
            await self.comments.update(comment)

        failure = await run_in_transaction(
            self.session, "Update comment", write, self.store_timeout_seconds
        )
        if failure:
            return failure

        logger.info("Comment updated", comment_id=comment_id)
        self.synchronizer.schedule(self.synchronizer.replace_comment(comment))
        return comment

    async def delete(self, comment_id: str, requester_id: str) -> None | Failure:
        comment = await self._own_comment(comment_id, requester_id)
        if isinstance(comment, Failure):
            return comment

        async def write() -> None:
            await self.comments.delete(comment_id)

        failure = await run_in_transaction(
            self.session, "Delete comment", write, self.store_timeout_seconds
        )
        if failure:
            return failure

        logger.info("Comment deleted", comment_id=comment_id)
        self.synchronizer.schedule(self.synchronizer.delete_comment(comment_id))
        return None
