"""Full-text search engine backed by SQLite FTS5.

The index lives in its own database, separate from the canonical store, and
holds one FTS5 table per named index. Documents are upserted by ID; every
round trip is bounded by a timeout and surfaces failures as
``SearchIndexError``.
"""

import asyncio
import json
import re
from abc import ABC, abstractmethod
from collections.abc import Awaitable
from dataclasses import dataclass, field
from typing import Any, TypeVar

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from shelfbase.core.logging import get_logger
from shelfbase.infrastructure.persistence.database import ensure_sqlite_directory

logger = get_logger(__name__)

T = TypeVar("T")

COLLECTION_INDEX = "collection"
ITEM_INDEX = "item"
COMMENT_INDEX = "comment"
INDEXES = (COLLECTION_INDEX, ITEM_INDEX, COMMENT_INDEX)

# Characters with meaning in FTS5 query syntax
_QUERY_SYNTAX = re.compile(r'["*^(){}<>:+\-]')
MAX_QUERY_TOKENS = 32


class SearchIndexError(Exception):
    """A search index round trip failed."""


class SearchIndexTimeoutError(SearchIndexError):
    """A search index round trip exceeded its timeout."""


@dataclass
class SearchDocument:
    """A denormalized projection stored in one index.

    ``content`` is the text that is matched; ``payload`` is returned verbatim
    with every hit.
    """

    id: str
    content: str
    payload: dict[str, Any] = field(default_factory=dict)


@dataclass
class SearchHit:
    id: str
    payload: dict[str, Any]
    score: float = 0.0


@dataclass
class SearchQuery:
    index: str
    query: str
    limit: int | None = None


def build_match_query(query: str) -> str | None:
    """Turn free text into an FTS5 MATCH expression.

    Each token becomes a quoted prefix term and all terms must match.
    Returns None when nothing searchable is left.
    """
    cleaned = _QUERY_SYNTAX.sub(" ", query)
    tokens = [t for t in cleaned.split() if t][:MAX_QUERY_TOKENS]
    if not tokens:
        return None
    return " AND ".join(f'"{token}"*' for token in tokens)


class SearchEngine(ABC):
    """Abstract interface for the full-text search index."""

    @abstractmethod
    async def connect(self) -> None:
        """Prepare the named indexes."""

    @abstractmethod
    async def close(self) -> None:
        """Release connections."""

    @abstractmethod
    async def health_check(self) -> bool:
        """Whether the index is reachable."""

    @abstractmethod
    async def add_or_replace(self, index: str, document: SearchDocument) -> None:
        """Add a document, replacing any document with the same ID."""

    @abstractmethod
    async def delete(self, index: str, doc_id: str) -> None:
        """Delete a document by ID. Deleting a missing document is a no-op."""

    @abstractmethod
    async def query(self, index: str, query: str, limit: int | None = None) -> list[SearchHit]:
        """Run a free-text query against one index, best match first."""

    @abstractmethod
    async def multi_search(self, queries: list[SearchQuery]) -> dict[str, list[SearchHit]]:
        """Run several queries at once and return hits keyed by index name."""

    @abstractmethod
    async def clear(self, index: str) -> None:
        """Remove every document from an index."""


class SqliteSearchEngine(SearchEngine):
    """SQLite FTS5 implementation of ``SearchEngine``.

    Args:
        url: Async SQLAlchemy URL of the index database.
        timeout_seconds: Bound applied to every round trip.
        default_limit: Hit limit used when a query gives none.
    """

    def __init__(self, url: str, timeout_seconds: float = 5.0, default_limit: int = 20) -> None:
        self.url = url
        self.timeout_seconds = timeout_seconds
        self.default_limit = default_limit
        self._engine: AsyncEngine | None = None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            self._engine = create_async_engine(self.url)
            logger.debug("Search engine created", url=self.url)
        return self._engine

    @staticmethod
    def _table(index: str) -> str:
        if index not in INDEXES:
            raise SearchIndexError(f"Unknown search index '{index}'")
        return f"search_{index}"

    async def _bounded(self, operation: str, index: str, awaitable: Awaitable[T]) -> T:
        try:
            return await asyncio.wait_for(awaitable, timeout=self.timeout_seconds)
        except asyncio.TimeoutError as e:
            raise SearchIndexTimeoutError(
                f"Search index {operation} on '{index}' timed out "
                f"after {self.timeout_seconds}s"
            ) from e
        except SQLAlchemyError as e:
            raise SearchIndexError(f"Search index {operation} on '{index}' failed: {e}") from e

    async def connect(self) -> None:
        ensure_sqlite_directory(self.url)

        async def create() -> None:
            async with self.engine.begin() as conn:
                for index in INDEXES:
                    await conn.execute(
                        text(
                            f"CREATE VIRTUAL TABLE IF NOT EXISTS {self._table(index)} "
                            "USING fts5(doc_id UNINDEXED, content, payload UNINDEXED, "
                            "tokenize='unicode61')"
                        )
                    )

        await self._bounded("setup", "*", create())
        logger.info("Search indexes ready", indexes=list(INDEXES))

    async def close(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            logger.info("Search engine disposed")

    async def health_check(self) -> bool:
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error("Search index health check failed", error=str(e))
            return False

    async def add_or_replace(self, index: str, document: SearchDocument) -> None:
        table = self._table(index)

        # FTS5 tables have no unique key to upsert on, so delete then insert
        async def upsert() -> None:
            async with self.engine.begin() as conn:
                await conn.execute(
                    text(f"DELETE FROM {table} WHERE doc_id = :doc_id"),
                    {"doc_id": document.id},
                )
                await conn.execute(
                    text(
                        f"INSERT INTO {table} (doc_id, content, payload) "
                        "VALUES (:doc_id, :content, :payload)"
                    ),
                    {
                        "doc_id": document.id,
                        "content": document.content,
                        "payload": json.dumps(document.payload, default=str),
                    },
                )

        await self._bounded("add_or_replace", index, upsert())

    async def delete(self, index: str, doc_id: str) -> None:
        table = self._table(index)

        async def remove() -> None:
            async with self.engine.begin() as conn:
                await conn.execute(
                    text(f"DELETE FROM {table} WHERE doc_id = :doc_id"), {"doc_id": doc_id}
                )

        await self._bounded("delete", index, remove())

    async def query(self, index: str, query: str, limit: int | None = None) -> list[SearchHit]:
        table = self._table(index)
        match = build_match_query(query)
        if match is None:
            return []

        async def run() -> list[SearchHit]:
            async with self.engine.connect() as conn:
                result = await conn.execute(
                    text(
                        f"SELECT doc_id, payload, bm25({table}) AS score FROM {table} "
                        f"WHERE {table} MATCH :match ORDER BY score LIMIT :limit"
                    ),
                    {"match": match, "limit": limit or self.default_limit},
                )
                return [
                    SearchHit(id=row.doc_id, payload=json.loads(row.payload), score=row.score)
                    for row in result
                ]

        return await self._bounded("query", index, run())

    async def multi_search(self, queries: list[SearchQuery]) -> dict[str, list[SearchHit]]:
        results = await asyncio.gather(
            *(self.query(q.index, q.query, q.limit) for q in queries)
        )
        return {q.index: hits for q, hits in zip(queries, results)}

    async def clear(self, index: str) -> None:
        table = self._table(index)

        async def wipe() -> None:
            async with self.engine.begin() as conn:
                await conn.execute(text(f"DELETE FROM {table}"))

        await self._bounded("clear", index, wipe())
