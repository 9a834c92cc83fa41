"""Full-text search index and the synchronizer that mirrors into it."""

from shelfbase.infrastructure.search.engine import (
    COLLECTION_INDEX,
    COMMENT_INDEX,
    INDEXES,
    ITEM_INDEX,
    SearchDocument,
    SearchEngine,
    SearchHit,
    SearchIndexError,
    SearchIndexTimeoutError,
    SearchQuery,
    SqliteSearchEngine,
)
from shelfbase.infrastructure.search.synchronizer import SearchIndexSynchronizer

__all__ = [
    "COLLECTION_INDEX",
    "COMMENT_INDEX",
    "INDEXES",
    "ITEM_INDEX",
    "SearchDocument",
    "SearchEngine",
    "SearchHit",
    "SearchIndexError",
    "SearchIndexSynchronizer",
    "SearchIndexTimeoutError",
    "SearchQuery",
    "SqliteSearchEngine",
]
