"""Unit tests for the database manager's SQLite connection setup."""

import pytest
from sqlalchemy import text

from shelfbase.core.config import Settings
from shelfbase.infrastructure.persistence.database import DatabaseManager


async def foreign_keys_pragma(manager: DatabaseManager) -> int:
    async with manager.engine.connect() as conn:
        result = await conn.execute(text("PRAGMA foreign_keys"))
        value = result.scalar_one()
    await manager.disconnect()
    return value


@pytest.mark.asyncio
async def test_sqlite_connections_enforce_foreign_keys():
    settings = Settings(_env_file=None, database_url="sqlite+aiosqlite:///:memory:")

    assert await foreign_keys_pragma(DatabaseManager(settings)) == 1


@pytest.mark.asyncio
async def test_foreign_keys_can_be_turned_off():
    settings = Settings(
        _env_file=None,
        database_url="sqlite+aiosqlite:///:memory:",
        db_sqlite_foreign_keys=False,
    )

    assert await foreign_keys_pragma(DatabaseManager(settings)) == 0
