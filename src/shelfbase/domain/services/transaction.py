"""Atomic multi-store writes.

Every mutation of the canonical store runs as one session transaction,
bounded by a timeout. Store errors roll the transaction back and come back
as failure values.
"""

import asyncio
from collections.abc import Awaitable, Callable

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shelfbase.core.logging import get_logger
from shelfbase.domain.entities import ConflictFailure, Failure, InternalFailure

logger = get_logger(__name__)


async def run_in_transaction(
    session: AsyncSession,
    operation: str,
    write: Callable[[], Awaitable[None]],
    timeout_seconds: float,
) -> Failure | None:
    """Run ``write`` and commit, or roll back and return a failure.

    Args:
        session: Session whose transaction the writes join.
        operation: Name used in log events.
        write: Coroutine function issuing the writes (without committing).
        timeout_seconds: Bound on the writes and the commit together.

    Returns:
        None on success, ``ConflictFailure`` on a uniqueness violation,
        ``InternalFailure`` otherwise (``retryable`` on timeout).
    """

    async def apply() -> None:
        await write()
        await session.commit()

    try:
        await asyncio.wait_for(apply(), timeout=timeout_seconds)
    except asyncio.TimeoutError:
        await session.rollback()
        logger.error("Store write timed out", operation=operation, timeout=timeout_seconds)
        return InternalFailure(message=f"{operation} timed out", retryable=True)
    except IntegrityError as e:
        await session.rollback()
        logger.warning("Store write conflict", operation=operation, error=str(e.orig))
        return ConflictFailure(message=f"{operation} conflicts with existing data")
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error("Store write failed", operation=operation, error=str(e))
        return InternalFailure(message=f"{operation} failed")
    return None
