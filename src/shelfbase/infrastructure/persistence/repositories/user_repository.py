"""Repository for user operations."""

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from shelfbase.domain.entities import User
from shelfbase.domain.services.schema_validator import parse_date
from shelfbase.infrastructure.persistence.models import UserModel


def to_user(model: UserModel) -> User:
    return User(
        id=model.id,
        username=model.username,
        email=model.email,
        fullname=model.fullname,
        is_admin=model.is_admin,
        blocked=model.blocked,
        created_at=parse_date(model.created_at),
    )


class UserRepository:
    """Repository for user database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository with a database session.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def get(self, user_id: str) -> User | None:
        """Get a user by ID.

        Args:
            user_id: The user ID.

        Returns:
            The user if found, None otherwise.
        """
        model = await self.session.get(UserModel, user_id)
        return to_user(model) if model else None

    async def get_by_username(self, username: str) -> User | None:
        result = await self.session.execute(
            select(UserModel).where(UserModel.username == username)
        )
        model = result.scalar_one_or_none()
        return to_user(model) if model else None

    async def get_many(self, user_ids: list[str]) -> dict[str, User]:
        """Get several users at once, keyed by ID. Unknown IDs are skipped."""
        if not user_ids:
            return {}
        result = await self.session.execute(
            select(UserModel).where(UserModel.id.in_(list(set(user_ids))))
        )
        return {model.id: to_user(model) for model in result.scalars().all()}

    async def create(self, user: User) -> User:
        """Create a new user.

        Args:
            user: The user to create.

        Returns:
            The created user.
        """
        self.session.add(
            UserModel(
                id=user.id,
                username=user.username,
                email=user.email,
                fullname=user.fullname,
                is_admin=user.is_admin,
                blocked=user.blocked,
                created_at=user.created_at,
            )
        )
        await self.session.flush()
        return user

    async def update(self, user: User) -> User | None:
        """Persist the mutable flags and display name of a user.

        Returns:
            The updated user, or None if no such user exists.
        """
        model = await self.session.get(UserModel, user.id)
        if model is None:
            return None
        model.fullname = user.fullname
        model.is_admin = user.is_admin
        model.blocked = user.blocked
        await self.session.flush()
        return to_user(model)

    async def delete(self, user_id: str) -> None:
        await self.session.execute(delete(UserModel).where(UserModel.id == user_id))
