"""Search and tag autocomplete routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from shelfbase.core.config import get_settings
from shelfbase.core.logging import get_logger
from shelfbase.domain.entities import is_failure
from shelfbase.domain.services.search_service import SearchService
from shelfbase.infrastructure.api.dependencies import get_search_service
from shelfbase.infrastructure.api.failures import failure_response
from shelfbase.infrastructure.api.schemas import SearchResultResponse
from shelfbase.infrastructure.persistence.database import get_db_session
from shelfbase.infrastructure.persistence.repositories import TagRepository

logger = get_logger(__name__)

router = APIRouter()


@router.get(
    "/search",
    response_model=list[SearchResultResponse],
    responses={400: {"description": "Blank query"}},
)
async def search(
    service: Annotated[SearchService, Depends(get_search_service)],
    q: str = Query(default="", description="Free-text query"),
) -> list[SearchResultResponse] | JSONResponse:
    """Search items directly, through their collections and through comments."""
    result = await service.search(q)
    if is_failure(result):
        return failure_response(result)
    return [SearchResultResponse(id=r.id, name=r.name, created_at=r.created_at) for r in result]


@router.get("/tags", response_model=list[str])
async def list_tags(
    session: AsyncSession = Depends(get_db_session),
    prefix: str | None = Query(default=None, description="Only tags starting with this"),
) -> list[str]:
    """List all tags, or autocomplete tags starting with ``prefix``."""
    tags = TagRepository(session)
    if prefix:
        return await tags.get_starting_with(prefix, get_settings().tag_autocomplete_limit)
    return await tags.get_all()
