"""Integration tests for the FTS5 engine and the search fan-out."""

from unittest.mock import AsyncMock

import pytest

from shelfbase.domain.entities import BadRequestFailure, InternalFailure
from shelfbase.domain.services.collection_service import CreateCollectionRequest
from shelfbase.domain.services.item_service import CreateItemRequest
from shelfbase.domain.services.search_service import SearchService
from shelfbase.infrastructure.persistence.repositories import TagRepository
from shelfbase.infrastructure.search import (
    COLLECTION_INDEX,
    ITEM_INDEX,
    SearchDocument,
    SearchIndexError,
    SearchIndexTimeoutError,
    SearchQuery,
)


class TestSqliteSearchEngine:
    @pytest.mark.asyncio
    async def test_add_or_replace_is_idempotent(self, search_engine):
        document = SearchDocument(id="i1", content="Dune Herbert", payload={"id": "i1"})

        await search_engine.add_or_replace(ITEM_INDEX, document)
        await search_engine.add_or_replace(ITEM_INDEX, document)

        hits = await search_engine.query(ITEM_INDEX, "dune")
        assert [(h.id, h.payload) for h in hits] == [("i1", {"id": "i1"})]

    @pytest.mark.asyncio
    async def test_replace_drops_old_content(self, search_engine):
        await search_engine.add_or_replace(ITEM_INDEX, SearchDocument(id="i1", content="Dune"))
        await search_engine.add_or_replace(ITEM_INDEX, SearchDocument(id="i1", content="Emma"))

        assert await search_engine.query(ITEM_INDEX, "dune") == []
        assert [h.id for h in await search_engine.query(ITEM_INDEX, "emma")] == ["i1"]

    @pytest.mark.asyncio
    async def test_prefix_match_and_all_terms_required(self, search_engine):
        await search_engine.add_or_replace(
            ITEM_INDEX, SearchDocument(id="i1", content="Foundation and Empire")
        )
        await search_engine.add_or_replace(
            ITEM_INDEX, SearchDocument(id="i2", content="Foundation")
        )

        assert {h.id for h in await search_engine.query(ITEM_INDEX, "found")} == {"i1", "i2"}
        assert [h.id for h in await search_engine.query(ITEM_INDEX, "found emp")] == ["i1"]

    @pytest.mark.asyncio
    async def test_delete_missing_document_is_noop(self, search_engine):
        await search_engine.delete(ITEM_INDEX, "never-indexed")

    @pytest.mark.asyncio
    async def test_limit(self, search_engine):
        for n in range(5):
            await search_engine.add_or_replace(
                ITEM_INDEX, SearchDocument(id=f"i{n}", content="stamp")
            )

        assert len(await search_engine.query(ITEM_INDEX, "stamp", limit=3)) == 3

    @pytest.mark.asyncio
    async def test_multi_search_keys_hits_by_index(self, search_engine):
        await search_engine.add_or_replace(ITEM_INDEX, SearchDocument(id="i1", content="coin"))
        await search_engine.add_or_replace(
            COLLECTION_INDEX, SearchDocument(id="c1", content="coin box")
        )

        hits = await search_engine.multi_search(
            [SearchQuery(index=COLLECTION_INDEX, query="coin"), SearchQuery(ITEM_INDEX, "coin")]
        )

        assert [h.id for h in hits[COLLECTION_INDEX]] == ["c1"]
        assert [h.id for h in hits[ITEM_INDEX]] == ["i1"]

    @pytest.mark.asyncio
    async def test_unknown_index(self, search_engine):
        with pytest.raises(SearchIndexError):
            await search_engine.query("users", "john")

    @pytest.mark.asyncio
    async def test_clear_and_health(self, search_engine):
        await search_engine.add_or_replace(ITEM_INDEX, SearchDocument(id="i1", content="coin"))

        await search_engine.clear(ITEM_INDEX)

        assert await search_engine.query(ITEM_INDEX, "coin") == []
        assert await search_engine.health_check() is True


async def make_item(item_service, owner_id, collection_id, name, fields=None, tags=()):
    from shelfbase.domain.entities import ItemFields

    return await item_service.create(
        CreateItemRequest(
            collection_id=collection_id,
            name=name,
            tags=set(tags),
            fields=fields or ItemFields(),
        ),
        requester_id=owner_id,
    )


class TestSearchService:
    @pytest.mark.asyncio
    async def test_blank_query(self, search_service):
        assert isinstance(await search_service.search("   "), BadRequestFailure)

    @pytest.mark.asyncio
    async def test_direct_hits_then_collections_then_comments(
        self,
        search_service,
        collection_service,
        item_service,
        comment_service,
        synchronizer,
        owner,
        stranger,
        books_topic,
    ):
        # A collection named after the query, whose earliest item does not match
        marine_id = await collection_service.create(
            CreateCollectionRequest(
                owner_id=owner.id, name="Marine stamps", topic_id=books_topic.id
            ),
            requester_id=owner.id,
        )
        other_id = await collection_service.create(
            CreateCollectionRequest(owner_id=owner.id, name="Misc", topic_id=books_topic.id),
            requester_id=owner.id,
        )
        representative = await make_item(item_service, owner.id, marine_id, "Penny Black")
        await make_item(item_service, owner.id, marine_id, "Penny Red")
        direct = await make_item(item_service, owner.id, other_id, "Marine blue", tags=["sea"])
        commented = await make_item(item_service, owner.id, other_id, "Inverted Jenny")
        await comment_service.create(commented, "A marine classic", stranger.id)
        # Already a direct hit; its comment must not add it twice
        await comment_service.create(direct, "marine again", stranger.id)
        await synchronizer.drain()

        results = await search_service.search("marine")

        assert [r.id for r in results] == [direct, representative, commented]
        assert results[1].name == "Penny Black"

    @pytest.mark.asyncio
    async def test_item_matching_by_name_collection_and_comment_appears_once(
        self,
        search_service,
        collection_service,
        item_service,
        comment_service,
        synchronizer,
        owner,
        stranger,
        books_topic,
    ):
        marine_id = await collection_service.create(
            CreateCollectionRequest(
                owner_id=owner.id, name="Marine stamps", topic_id=books_topic.id
            ),
            requester_id=owner.id,
        )
        # Earliest item of the matching collection, so also its representative
        everywhere = await make_item(item_service, owner.id, marine_id, "Marine blue")
        await make_item(item_service, owner.id, marine_id, "Penny Red")
        await comment_service.create(everywhere, "A marine classic", stranger.id)
        await synchronizer.drain()

        results = await search_service.search("marine")

        assert [r.id for r in results] == [everywhere]

    @pytest.mark.asyncio
    async def test_no_hits(self, search_service):
        assert await search_service.search("nothing") == []

    @pytest.mark.asyncio
    async def test_index_timeout_is_retryable(self, db_session):
        engine = AsyncMock()
        engine.multi_search.side_effect = SearchIndexTimeoutError("slow")

        result = await SearchService(db_session, engine).search("dune")

        assert isinstance(result, InternalFailure)
        assert result.retryable is True

    @pytest.mark.asyncio
    async def test_index_error_is_internal(self, db_session):
        engine = AsyncMock()
        engine.multi_search.side_effect = SearchIndexError("gone")

        result = await SearchService(db_session, engine).search("dune")

        assert isinstance(result, InternalFailure)
        assert result.retryable is False

    @pytest.mark.asyncio
    async def test_reindex_rebuilds_from_store(
        self, synchronizer, search_engine, db_session, item_service, owner, books
    ):
        item_id = await make_item(item_service, owner.id, books.id, "Dune", books.payload())
        await synchronizer.drain()
        await search_engine.clear(ITEM_INDEX)

        counts = await synchronizer.reindex(db_session)

        assert counts == {"collection": 1, "item": 1, "comment": 0}
        assert [h.id for h in await search_engine.query(ITEM_INDEX, "dune")] == [item_id]


@pytest.mark.asyncio
async def test_tag_autocomplete(db_session, item_service, owner, books):
    await make_item(
        item_service, owner.id, books.id, "Dune", books.payload(), tags=["scifi", "signed"]
    )
    await make_item(
        item_service, owner.id, books.id, "Emma", books.payload(), tags=["scifi", "romance"]
    )
    await make_item(item_service, owner.id, books.id, "Odd", books.payload(), tags=["50%_off"])
    tags = TagRepository(db_session)

    assert await tags.get_all() == ["50%_off", "romance", "scifi", "signed"]
    assert await tags.get_starting_with("s") == ["scifi", "signed"]
    assert await tags.get_starting_with("s", limit=1) == ["scifi"]
    assert await tags.get_starting_with("50%") == ["50%_off"]
    assert await tags.get_starting_with("5_") == []
