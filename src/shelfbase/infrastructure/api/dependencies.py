"""FastAPI dependencies for identity, the search index and services.

Provides dependencies for extracting and validating JWT tokens from requests
and for building request-scoped services over the request's session.
"""

from typing import Annotated

from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from shelfbase.core.config import get_settings
from shelfbase.core.logging import get_logger
from shelfbase.domain.entities import User
from shelfbase.domain.services.collection_service import CollectionService
from shelfbase.domain.services.comment_service import CommentService
from shelfbase.domain.services.item_service import ItemService
from shelfbase.domain.services.search_service import SearchService
from shelfbase.domain.services.user_service import UserService
from shelfbase.infrastructure.auth import (
    InvalidTokenError,
    TokenExpiredError,
    jwt_service,
)
from shelfbase.infrastructure.persistence.database import get_db_session
from shelfbase.infrastructure.persistence.repositories import UserRepository
from shelfbase.infrastructure.search import SearchEngine, SearchIndexSynchronizer

logger = get_logger(__name__)

DBSession = Annotated[AsyncSession, Depends(get_db_session)]


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def _resolve_user(authorization: str, session: AsyncSession) -> User:
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        logger.info("Authentication failed: invalid Authorization header format")
        raise _unauthorized("Could not validate credentials")

    try:
        user_id = jwt_service.user_id_from(parts[1])
    except TokenExpiredError:
        logger.info("Authentication failed: token expired")
        raise _unauthorized("Token has expired")
    except InvalidTokenError as e:
        logger.info("Authentication failed: invalid token", error=str(e))
        raise _unauthorized(f"Invalid token: {e}")

    user = await UserRepository(session).get(user_id)
    if user is None:
        logger.info("Authentication failed: unknown user", user_id=user_id)
        raise _unauthorized("Unknown user")
    if user.blocked:
        logger.info("Request from blocked user rejected", user_id=user.id)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="User is blocked")
    return user


async def get_current_user(
    session: DBSession,
    authorization: Annotated[str | None, Header()] = None,
) -> User:
    """Resolve the requester from the Authorization header.

    Raises:
        HTTPException: 401 if the token is missing, invalid or expired or
            names an unknown user, 403 if the user is blocked.
    """
    if authorization is None:
        logger.info("Authentication failed: missing Authorization header")
        raise _unauthorized("Missing Authorization header")
    return await _resolve_user(authorization, session)


async def get_optional_user(
    session: DBSession,
    authorization: Annotated[str | None, Header()] = None,
) -> User | None:
    """Like ``get_current_user`` but anonymous requests resolve to None."""
    if authorization is None:
        return None
    return await _resolve_user(authorization, session)


AuthenticatedUser = Annotated[User, Depends(get_current_user)]
OptionalUser = Annotated[User | None, Depends(get_optional_user)]


def get_search_engine(request: Request) -> SearchEngine:
    """Get the search engine opened by the application lifespan."""
    return request.app.state.search_engine


def get_synchronizer(request: Request) -> SearchIndexSynchronizer:
    return request.app.state.synchronizer


Synchronizer = Annotated[SearchIndexSynchronizer, Depends(get_synchronizer)]


def get_item_service(session: DBSession, synchronizer: Synchronizer) -> ItemService:
    return ItemService(session, synchronizer, get_settings().store_timeout_seconds)


def get_collection_service(session: DBSession, synchronizer: Synchronizer) -> CollectionService:
    return CollectionService(session, synchronizer, get_settings().store_timeout_seconds)


def get_comment_service(session: DBSession, synchronizer: Synchronizer) -> CommentService:
    return CommentService(session, synchronizer, get_settings().store_timeout_seconds)


def get_user_service(session: DBSession, synchronizer: Synchronizer) -> UserService:
    return UserService(session, synchronizer, get_settings().store_timeout_seconds)


def get_search_service(
    session: DBSession,
    engine: Annotated[SearchEngine, Depends(get_search_engine)],
) -> SearchService:
    return SearchService(session, engine, get_settings().search_result_limit)
