"""Database abstraction layer using SQLAlchemy 2.0 async.

This module provides the database session management and engine configuration
for SQLAlchemy with async support. SQLite (aiosqlite) is the default driver;
any async SQLAlchemy URL works.
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from sqlalchemy import event, select, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from shelfbase.core.config import Settings, get_settings
from shelfbase.core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_TOPICS = ("Books", "Coins", "Stamps", "Other")


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models.

    All models should inherit from this class to get proper ORM mapping
    and metadata management.
    """

    pass


def engine_options(url: str, settings: Settings) -> dict:
    """Keyword arguments for create_async_engine appropriate to the URL."""
    if url.startswith("sqlite"):
        # In-memory SQLite uses a static pool that takes no sizing options
        if ":memory:" in url:
            return {"connect_args": {"check_same_thread": False}}
        return {
            "connect_args": {"check_same_thread": False},
            "pool_timeout": settings.db_pool_timeout,
        }
    return {
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
        "pool_timeout": settings.db_pool_timeout,
        "pool_recycle": settings.db_pool_recycle,
    }


def enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """Turn on foreign key enforcement for every new SQLite connection.

    SQLite ships with it off, which would leave the ``ON DELETE CASCADE``
    clauses and the references from value rows to items and fields unchecked.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def set_foreign_keys(dbapi_connection, connection_record) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def ensure_sqlite_directory(url: str) -> None:
    """Create the parent directory of a file-backed SQLite database."""
    if not url.startswith("sqlite") or ":memory:" in url:
        return
    db_dir = Path(url.split(":///")[-1]).parent
    db_dir.mkdir(parents=True, exist_ok=True)
    logger.debug("Database directory ensured", path=str(db_dir))


class DatabaseManager:
    """Database connection and session manager.

    This class manages the async database engine and session factory.
    It provides context managers for database sessions and handles
    connection pooling.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize the database manager."""
        self.settings = settings or get_settings()
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    @property
    def engine(self) -> AsyncEngine:
        """Get or create the database engine."""
        if self._engine is None:
            url = self.settings.database_url
            self._engine = create_async_engine(
                url,
                echo=self.settings.db_echo,
                **engine_options(url, self.settings),
            )
            if url.startswith("sqlite") and self.settings.db_sqlite_foreign_keys:
                enable_sqlite_foreign_keys(self._engine)
            logger.info(
                "Database engine created",
                database_url=self._engine.url.render_as_string(hide_password=True),
            )
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        """Get or create the session factory."""
        if self._session_factory is None:
            self._session_factory = async_sessionmaker(
                bind=self.engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False,
            )
            logger.debug("Database session factory created")
        return self._session_factory

    async def create_tables(self) -> None:
        """Create all database tables.

        Should be called on application startup for development.
        In production, use migrations instead.
        """
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
            logger.info("Database tables created")

    async def drop_tables(self) -> None:
        """Drop all database tables.

        WARNING: This will delete all data. Only use in testing!
        """
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
            logger.warning("Database tables dropped")

    async def disconnect(self) -> None:
        """Close the database engine and all connections."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
            logger.info("Database engine disposed")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide a transactional scope for database operations.

        Yields:
            AsyncSession: SQLAlchemy async session.

        Example:
            async with db.session() as session:
                result = await session.execute(select(UserModel))
                users = result.scalars().all()
        """
        async with self.session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    async def check_connection(self) -> bool:
        """Check if database connection is working."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
                logger.debug("Database connection check successful")
                return True
        except Exception as e:
            logger.error("Database connection check failed", error=str(e))
            return False


# Global database manager instance
_db_manager: DatabaseManager | None = None


def get_db_manager() -> DatabaseManager:
    """Get the global database manager instance."""
    global _db_manager
    if _db_manager is None:
        _db_manager = DatabaseManager()
    return _db_manager


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Dependency for FastAPI to get database session.

    Example:
        @router.get("/topics")
        async def list_topics(session: AsyncSession = Depends(get_db_session)):
            ...
    """
    db = get_db_manager()
    async with db.session() as session:
        yield session


async def seed_default_topics(session: AsyncSession) -> None:
    """Insert the default topics that do not exist yet."""
    from shelfbase.domain.services.id_generator import new_id
    from shelfbase.infrastructure.persistence.models import TopicModel

    result = await session.execute(select(TopicModel.name))
    existing = set(result.scalars().all())
    for name in DEFAULT_TOPICS:
        if name not in existing:
            session.add(TopicModel(id=new_id(), name=name))
            logger.info("Seeded default topic", topic_name=name)
    await session.commit()


async def init_database() -> None:
    """Initialize the database.

    This function should be called on application startup.
    It creates tables if they don't exist (development mode).
    In production, migrations should be used instead.
    """
    # Import all models so they are registered with Base.metadata
    import shelfbase.infrastructure.persistence.models  # noqa: F401

    db = get_db_manager()
    settings = db.settings

    ensure_sqlite_directory(settings.database_url)

    if not await db.check_connection():
        logger.error("Database connection failed")
        raise RuntimeError("Failed to connect to database")

    if settings.is_development:
        logger.info("Development mode: Creating database tables")
        await db.create_tables()
    else:
        logger.info("Production mode: Skipping auto-create, use migrations")

    async with db.session() as session:
        await seed_default_topics(session)


async def close_database() -> None:
    """Close the database connection.

    This function should be called on application shutdown.
    """
    db = get_db_manager()
    await db.disconnect()
