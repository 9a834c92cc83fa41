"""Search across collections, items and comments.

One free-text query runs against the three indexes at once. Every kind of
hit is mapped back to items:

* item hits are used as they are,
* a collection hit contributes one representative item of that collection,
* a comment hit contributes the item it was left on.

The lists are concatenated in that order and deduplicated by item ID, the
first occurrence winning.
"""

from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from shelfbase.core.logging import get_logger
from shelfbase.domain.entities import BadRequestFailure, Failure, InternalFailure
from shelfbase.domain.services.schema_validator import parse_date
from shelfbase.infrastructure.persistence.repositories import ItemRepository
from shelfbase.infrastructure.search.engine import (
    COLLECTION_INDEX,
    COMMENT_INDEX,
    ITEM_INDEX,
    SearchEngine,
    SearchIndexError,
    SearchIndexTimeoutError,
    SearchQuery,
)

logger = get_logger(__name__)


@dataclass
class SearchResult:
    id: str
    name: str
    created_at: datetime


def dedupe(results: list[SearchResult]) -> list[SearchResult]:
    """Drop repeated IDs, keeping the first occurrence and the order."""
    seen: set[str] = set()
    unique = []
    for result in results:
        if result.id not in seen:
            seen.add(result.id)
            unique.append(result)
    return unique


class SearchService:
    """Query fan-out over the three search indexes."""

    def __init__(self, session: AsyncSession, engine: SearchEngine, limit: int = 20) -> None:
        self.items = ItemRepository(session)
        self.engine = engine
        self.limit = limit

    async def search(self, query: str) -> list[SearchResult] | Failure:
        query = query.strip()
        if not query:
            return BadRequestFailure(message="Search query must not be blank")

        try:
            hits = await self.engine.multi_search(
                [
                    SearchQuery(index=index, query=query, limit=self.limit)
                    for index in (COLLECTION_INDEX, ITEM_INDEX, COMMENT_INDEX)
                ]
            )
        except SearchIndexTimeoutError as e:
            logger.error("Search timed out", query=query, error=str(e))
            return InternalFailure(message="Search timed out", retryable=True)
        except SearchIndexError as e:
            logger.error("Search failed", query=query, error=str(e))
            return InternalFailure(message="Search failed")

        direct = [
            SearchResult(
                id=hit.payload["id"],
                name=hit.payload["name"],
                created_at=parse_date(hit.payload["created_at"]),
            )
            for hit in hits.get(ITEM_INDEX, [])
        ]

        collection_ids = list(dict.fromkeys(hit.id for hit in hits.get(COLLECTION_INDEX, [])))
        representatives = [
            SearchResult(id=item.id, name=item.name, created_at=item.created_at)
            for item in await self.items.get_one_from_each_collection(collection_ids)
        ]

        commented_ids = list(
            dict.fromkeys(hit.payload["item_id"] for hit in hits.get(COMMENT_INDEX, []))
        )
        commented = [
            SearchResult(id=item.id, name=item.name, created_at=item.created_at)
            for item in await self.items.get_many(commented_ids)
        ]

        results = dedupe(direct + representatives + commented)
        logger.debug(
            "Search completed",
            query=query,
            direct=len(direct),
            via_collections=len(representatives),
            via_comments=len(commented),
            returned=len(results),
        )
        return results
