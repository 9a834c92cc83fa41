"""User service: profile lookups, admin-only account flags and deletion."""

from dataclasses import replace

from sqlalchemy.ext.asyncio import AsyncSession

from shelfbase.core.logging import get_logger
from shelfbase.domain.entities import (
    Failure,
    NotAuthorizedFailure,
    NotFoundFailure,
    User,
    is_failure,
)
from shelfbase.domain.services.authorization import AuthorizationGate
from shelfbase.domain.services.collection_service import CollectionService
from shelfbase.domain.services.id_generator import new_id
from shelfbase.domain.services.transaction import run_in_transaction
from shelfbase.infrastructure.persistence.repositories import (
    CollectionRepository,
    CommentRepository,
    UserRepository,
)
from shelfbase.infrastructure.search.synchronizer import SearchIndexSynchronizer

logger = get_logger(__name__)


class UserService:
    """Service for user business logic.

    The synchronizer is only needed by ``delete``; the command line creates
    users without a search index.
    """

    def __init__(
        self,
        session: AsyncSession,
        synchronizer: SearchIndexSynchronizer | None = None,
        store_timeout_seconds: float = 10.0,
    ) -> None:
        self.session = session
        self.synchronizer = synchronizer
        self.store_timeout_seconds = store_timeout_seconds
        self.users = UserRepository(session)
        self.collections = CollectionRepository(session)
        self.comments = CommentRepository(session)
        self.gate = AuthorizationGate(self.users)

    async def view(self, user_id: str) -> User | Failure:
        user = await self.users.get(user_id)
        if user is None:
            return NotFoundFailure(resource="User", resource_id=user_id)
        return user

    async def create(
        self, username: str, email: str, fullname: str = "", is_admin: bool = False
    ) -> User | Failure:
        """Create a user. Used by the command line; there is no sign-up."""
        user = User(
            id=new_id(), username=username, email=email, fullname=fullname, is_admin=is_admin
        )

        async def write() -> None:
            await self.users.create(user)

        failure = await run_in_transaction(
            self.session, "Create user", write, self.store_timeout_seconds
        )
        if failure:
            return failure
        logger.info("User created", user_id=user.id, username=username, is_admin=is_admin)
        return user

    async def _set_flags(self, user_id: str, requester_id: str, **flags: bool) -> User | Failure:
        requester = await self.users.get(requester_id)
        if requester is None or requester.blocked or not requester.is_admin:
            return NotAuthorizedFailure()

        user = await self.users.get(user_id)
        if user is None:
            return NotFoundFailure(resource="User", resource_id=user_id)

        changed = replace(user, **flags)

        async def write() -> None:
            await self.users.update(changed)

        failure = await run_in_transaction(
            self.session, "Update user", write, self.store_timeout_seconds
        )
        if failure:
            return failure
        logger.info("User flags changed", user_id=user_id, changed_by=requester_id, **flags)
        return changed

    async def set_is_admin(self, user_id: str, is_admin: bool, requester_id: str) -> User | Failure:
        """Grant or revoke admin rights. Only admins may do this."""
        return await self._set_flags(user_id, requester_id, is_admin=is_admin)

    async def set_blocked(self, user_id: str, blocked: bool, requester_id: str) -> User | Failure:
        """Block or unblock a user. Only admins may do this."""
        return await self._set_flags(user_id, requester_id, blocked=blocked)

    async def delete(self, user_id: str, requester_id: str) -> None | Failure:
        """Delete a user with everything they own.

        Users may delete themselves and admins may delete anyone. The user's
        collections go with the same cascade as a collection delete, and
        their comments on other users' items are removed too.
        """
        if await self.users.get(user_id) is None:
            return NotFoundFailure(resource="User", resource_id=user_id)

        authorized = await self.gate.check(user_id, requester_id)
        if is_failure(authorized):
            return authorized

        cascade = CollectionService(self.session, self.synchronizer, self.store_timeout_seconds)
        owned = await self.collections.get_by_owner(user_id)
        deleted_collections: dict[str, dict[str, list[str]]] = {}
        deleted_comments: list[str] = []

        async def write() -> None:
            for collection in owned:
                deleted_collections[collection.id] = await cascade.delete_rows(collection.id)
            deleted_comments.extend(await self.comments.delete_by_author(user_id))
            await self.users.delete(user_id)

        failure = await run_in_transaction(
            self.session, "Delete user", write, self.store_timeout_seconds
        )
        if failure:
            return failure

        logger.info(
            "User deleted",
            user_id=user_id,
            deleted_by=requester_id,
            collection_count=len(deleted_collections),
        )
        if self.synchronizer is not None:
            self.synchronizer.schedule(
                self.synchronizer.delete_user_content(deleted_collections, deleted_comments)
            )
        return None
