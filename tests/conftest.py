"""Pytest configuration for all tests."""

from datetime import datetime, timezone
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from shelfbase.domain.entities import Topic
from shelfbase.infrastructure.auth.jwt_service import jwt_service
from shelfbase.infrastructure.persistence import models  # noqa: F401
from shelfbase.infrastructure.persistence.database import (
    Base,
    enable_sqlite_foreign_keys,
    seed_default_topics,
)
from shelfbase.infrastructure.persistence.models import TopicModel, UserModel
from shelfbase.infrastructure.search import (
    SearchIndexError,
    SearchIndexSynchronizer,
    SqliteSearchEngine,
)


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session.

    Uses an in-memory SQLite database with foreign keys enforced and the
    default topics seeded.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )
    enable_sqlite_foreign_keys(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session_maker() as session:
        await seed_default_topics(session)

    async with async_session_maker() as session:
        yield session
        await session.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def search_engine(tmp_path) -> AsyncGenerator[SqliteSearchEngine, None]:
    """A file-backed FTS5 index in a temporary directory."""
    engine = SqliteSearchEngine(
        f"sqlite+aiosqlite:///{tmp_path / 'search.db'}",
        timeout_seconds=5.0,
    )
    try:
        await engine.connect()
    except SearchIndexError as e:
        await engine.close()
        pytest.skip(f"SQLite FTS5 is not available: {e}")
    yield engine
    await engine.close()


@pytest_asyncio.fixture
async def synchronizer(
    search_engine: SqliteSearchEngine,
) -> AsyncGenerator[SearchIndexSynchronizer, None]:
    """Synchronizer whose background mirror calls finish before the index closes."""
    synchronizer = SearchIndexSynchronizer(search_engine)
    yield synchronizer
    await synchronizer.drain()


async def _add_user(session: AsyncSession, user_id: str, **kwargs) -> UserModel:
    user = UserModel(
        id=user_id,
        username=kwargs.pop("username", user_id),
        email=kwargs.pop("email", f"{user_id}@example.com"),
        fullname=kwargs.pop("fullname", user_id.title()),
        is_admin=kwargs.pop("is_admin", False),
        blocked=kwargs.pop("blocked", False),
        created_at=datetime.now(timezone.utc),
    )
    session.add(user)
    await session.commit()
    return user


@pytest_asyncio.fixture
async def owner(db_session: AsyncSession) -> UserModel:
    """A regular user who owns the collections under test."""
    return await _add_user(db_session, "john", fullname="John Doe")


@pytest_asyncio.fixture
async def admin(db_session: AsyncSession) -> UserModel:
    return await _add_user(db_session, "admin", fullname="Site Admin", is_admin=True)


@pytest_asyncio.fixture
async def stranger(db_session: AsyncSession) -> UserModel:
    """A regular user who owns nothing."""
    return await _add_user(db_session, "jane", fullname="Jane Roe")


@pytest_asyncio.fixture
async def blocked_user(db_session: AsyncSession) -> UserModel:
    return await _add_user(db_session, "mallory", blocked=True)


@pytest_asyncio.fixture
async def books_topic(db_session: AsyncSession) -> Topic:
    result = await db_session.execute(select(TopicModel).where(TopicModel.name == "Books"))
    model = result.scalar_one()
    return Topic(id=model.id, name=model.name)


@pytest_asyncio.fixture
async def client(
    db_session: AsyncSession,
    search_engine: SqliteSearchEngine,
    synchronizer: SearchIndexSynchronizer,
) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with overridden database dependency.

    The lifespan does not run under ASGITransport, so the search engine and
    synchronizer are placed on the application state directly.
    """
    from shelfbase.infrastructure.api.app import app
    from shelfbase.infrastructure.persistence.database import get_db_session

    app.dependency_overrides[get_db_session] = lambda: db_session
    app.state.search_engine = search_engine
    app.state.synchronizer = synchronizer

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides = {}


@pytest.fixture
def auth_headers():
    """Build an Authorization header for a user ID."""

    def build(user_id: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {jwt_service.create_access_token(user_id)}"}

    return build
