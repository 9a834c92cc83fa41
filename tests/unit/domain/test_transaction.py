"""Unit tests for run_in_transaction."""

import asyncio
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from shelfbase.domain.entities import ConflictFailure, InternalFailure
from shelfbase.domain.services.transaction import run_in_transaction


@pytest.fixture
def mock_session():
    """Mock SQLAlchemy session."""
    return AsyncMock()


@pytest.mark.asyncio
async def test_commits_after_successful_write(mock_session):
    write = AsyncMock()

    failure = await run_in_transaction(mock_session, "Create item", write, 1.0)

    assert failure is None
    write.assert_awaited_once()
    mock_session.commit.assert_awaited_once()
    mock_session.rollback.assert_not_awaited()


@pytest.mark.asyncio
async def test_timeout_rolls_back_and_is_retryable(mock_session):
    async def slow_write():
        await asyncio.sleep(1)

    failure = await run_in_transaction(mock_session, "Create item", slow_write, 0.01)

    assert isinstance(failure, InternalFailure)
    assert failure.retryable is True
    mock_session.rollback.assert_awaited_once()
    mock_session.commit.assert_not_awaited()


@pytest.mark.asyncio
async def test_integrity_error_becomes_conflict(mock_session):
    write = AsyncMock(side_effect=IntegrityError("INSERT", {}, Exception("UNIQUE failed")))

    failure = await run_in_transaction(mock_session, "Create user", write, 1.0)

    assert isinstance(failure, ConflictFailure)
    mock_session.rollback.assert_awaited_once()


@pytest.mark.asyncio
async def test_other_store_errors_are_internal_and_not_retryable(mock_session):
    write = AsyncMock(side_effect=OperationalError("INSERT", {}, Exception("disk I/O error")))

    failure = await run_in_transaction(mock_session, "Create item", write, 1.0)

    assert isinstance(failure, InternalFailure)
    assert failure.retryable is False
    mock_session.rollback.assert_awaited_once()


@pytest.mark.asyncio
async def test_failing_commit_rolls_back(mock_session):
    mock_session.commit.side_effect = OperationalError("COMMIT", {}, Exception("locked"))

    failure = await run_in_transaction(mock_session, "Delete item", AsyncMock(), 1.0)

    assert isinstance(failure, InternalFailure)
    mock_session.rollback.assert_awaited_once()
