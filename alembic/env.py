"""Alembic environment for the ShelfBase canonical store.

Only the canonical database is migrated. The search index keeps no schema
history of its own: its FTS5 tables are created on connect and refilled
with ``shelfbase reindex``.
"""

import asyncio
from logging.config import fileConfig

from sqlalchemy import pool, text
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine

from alembic import context
from shelfbase.core.config import get_settings
from shelfbase.infrastructure.persistence import models  # noqa: F401
from shelfbase.infrastructure.persistence.database import Base

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

settings = get_settings()
database_url = config.get_main_option("sqlalchemy.url") or settings.database_url
is_sqlite = database_url.startswith("sqlite")


def run_migrations_offline() -> None:
    """Emit the migration SQL for the canonical store without connecting."""
    context.configure(
        url=database_url,
        target_metadata=Base.metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=is_sqlite,
    )
    with context.begin_transaction():
        context.run_migrations()


def check_foreign_keys(connection: Connection) -> None:
    """Fail the upgrade if the migrated rows break a reference.

    Batch migrations copy SQLite tables with enforcement off, so dangling
    value, tag or comment rows only show up here.
    """
    violations = connection.execute(text("PRAGMA foreign_key_check")).all()
    if violations:
        tables = sorted({row[0] for row in violations})
        raise RuntimeError(
            f"{len(violations)} rows reference missing parents in: {', '.join(tables)}"
        )


def do_run_migrations(connection: Connection) -> None:
    context.configure(
        connection=connection,
        target_metadata=Base.metadata,
        render_as_batch=is_sqlite,
        compare_type=True,
    )
    with context.begin_transaction():
        context.run_migrations()
        if is_sqlite and settings.db_sqlite_foreign_keys:
            check_foreign_keys(connection)


async def run_migrations_online() -> None:
    engine = create_async_engine(database_url, poolclass=pool.NullPool)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(do_run_migrations)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
