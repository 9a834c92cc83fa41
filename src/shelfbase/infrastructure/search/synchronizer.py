"""Mirrors canonical mutations into the search index.

The canonical store is the system of record. Once a canonical write has
committed, a failure to mirror it is logged and counted here and never
raised to the caller; the projection stays stale until the next write of
the same entity or a ``reindex``.

Services hand mirror work to ``schedule`` so the index never delays the
response to a committed mutation.
"""

import asyncio
from collections.abc import Awaitable, Coroutine
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from shelfbase.core.logging import get_logger
from shelfbase.domain.entities import Collection, Comment, Item, ItemFields
from shelfbase.infrastructure.persistence.repositories import (
    CollectionRepository,
    CommentRepository,
    FieldValueStores,
    ItemRepository,
)
from shelfbase.infrastructure.search.documents import (
    collection_document,
    comment_document,
    item_document,
)
from shelfbase.infrastructure.search.engine import (
    COLLECTION_INDEX,
    COMMENT_INDEX,
    INDEXES,
    ITEM_INDEX,
    SearchEngine,
    SearchIndexError,
)

logger = get_logger(__name__)


class SearchIndexSynchronizer:
    """Best-effort writer of search projections.

    ``replace`` is the same operation as ``add``: the index upserts by ID, so
    no diff against the previous projection is needed.
    """

    def __init__(self, engine: SearchEngine) -> None:
        self.engine = engine
        self.failures = 0
        self._pending: set[asyncio.Task] = set()
        self._order = asyncio.Lock()

    def schedule(self, mirror: Coroutine[Any, Any, bool]) -> asyncio.Task:
        """Run a mirror call in the background.

        Scheduled calls run one at a time in scheduling order, so a later
        projection of an entity always lands after an earlier one. Tasks stay
        referenced until they finish; ``drain`` waits for all of them.
        """
        task = asyncio.create_task(self._in_order(mirror))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _in_order(self, mirror: Coroutine[Any, Any, bool]) -> bool:
        async with self._order:
            return await mirror

    @property
    def pending(self) -> int:
        return len(self._pending)

    async def drain(self) -> None:
        """Wait until every scheduled mirror call has finished."""
        while self._pending:
            await asyncio.gather(*self._pending)

    async def _mirror(self, action: str, index: str, doc_id: str, call: Awaitable[None]) -> bool:
        try:
            await call
        except SearchIndexError as e:
            self.failures += 1
            logger.error(
                "Search index sync failed",
                action=action,
                index=index,
                doc_id=doc_id,
                error=str(e),
                failures=self.failures,
            )
            return False
        logger.debug("Search index synced", action=action, index=index, doc_id=doc_id)
        return True

    async def add_item(self, item: Item, fields: ItemFields) -> bool:
        return await self._mirror(
            "add",
            ITEM_INDEX,
            item.id,
            self.engine.add_or_replace(ITEM_INDEX, item_document(item, fields)),
        )

    async def replace_item(self, item: Item, fields: ItemFields) -> bool:
        return await self.add_item(item, fields)

    async def delete_item(self, item_id: str, comment_ids: list[str] | None = None) -> bool:
        """Remove an item and the comments that were deleted with it."""
        results = await asyncio.gather(
            self._mirror("delete", ITEM_INDEX, item_id, self.engine.delete(ITEM_INDEX, item_id)),
            *(self.delete_comment(comment_id) for comment_id in comment_ids or []),
        )
        return all(results)

    async def delete_items(self, deleted: dict[str, list[str]]) -> bool:
        """Remove many items, keyed by item ID with their deleted comment IDs."""
        results = await asyncio.gather(
            *(self.delete_item(item_id, comment_ids) for item_id, comment_ids in deleted.items())
        )
        return all(results)

    async def add_collection(self, collection: Collection) -> bool:
        return await self._mirror(
            "add",
            COLLECTION_INDEX,
            collection.id,
            self.engine.add_or_replace(COLLECTION_INDEX, collection_document(collection)),
        )

    async def replace_collection(self, collection: Collection) -> bool:
        return await self.add_collection(collection)

    async def delete_collection(
        self, collection_id: str, deleted_items: dict[str, list[str]] | None = None
    ) -> bool:
        """Remove a collection and, concurrently, the items deleted with it."""
        results = await asyncio.gather(
            self._mirror(
                "delete",
                COLLECTION_INDEX,
                collection_id,
                self.engine.delete(COLLECTION_INDEX, collection_id),
            ),
            self.delete_items(deleted_items or {}),
        )
        return all(results)

    async def delete_user_content(
        self, collections: dict[str, dict[str, list[str]]], comment_ids: list[str]
    ) -> bool:
        """Remove what was deleted with a user.

        Args:
            collections: Deleted items with their comment IDs, keyed by
                deleted collection ID.
            comment_ids: The user's comments on other users' items.
        """
        results = await asyncio.gather(
            *(self.delete_collection(cid, items) for cid, items in collections.items()),
            *(self.delete_comment(comment_id) for comment_id in comment_ids),
        )
        return all(results)

    async def add_comment(self, comment: Comment) -> bool:
        return await self._mirror(
            "add",
            COMMENT_INDEX,
            comment.id,
            self.engine.add_or_replace(COMMENT_INDEX, comment_document(comment)),
        )

    async def replace_comment(self, comment: Comment) -> bool:
        return await self.add_comment(comment)

    async def delete_comment(self, comment_id: str) -> bool:
        return await self._mirror(
            "delete", COMMENT_INDEX, comment_id, self.engine.delete(COMMENT_INDEX, comment_id)
        )

    async def reindex(self, session: AsyncSession) -> dict[str, int]:
        """Rebuild all three indexes from the canonical store.

        Unlike the per-mutation calls this raises ``SearchIndexError`` on
        failure, since it is run explicitly by an operator.

        Returns:
            Number of documents written per index.
        """
        for index in INDEXES:
            await self.engine.clear(index)

        counts = dict.fromkeys(INDEXES, 0)
        for collection in await CollectionRepository(session).get_all():
            await self.engine.add_or_replace(COLLECTION_INDEX, collection_document(collection))
            counts[COLLECTION_INDEX] += 1

        stores = FieldValueStores(session)
        for item in await ItemRepository(session).get_all():
            fields = await stores.load(item.id)
            await self.engine.add_or_replace(ITEM_INDEX, item_document(item, fields))
            counts[ITEM_INDEX] += 1

        for comment in await CommentRepository(session).get_all():
            await self.engine.add_or_replace(COMMENT_INDEX, comment_document(comment))
            counts[COMMENT_INDEX] += 1

        logger.info("Search indexes rebuilt", **counts)
        return counts
