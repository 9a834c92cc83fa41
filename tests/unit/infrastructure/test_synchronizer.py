"""Unit tests for SearchIndexSynchronizer with a mocked engine."""

from unittest.mock import AsyncMock, call

import pytest

from shelfbase.domain.entities import Collection, Item, ItemFields
from shelfbase.infrastructure.search import (
    COLLECTION_INDEX,
    COMMENT_INDEX,
    ITEM_INDEX,
    SearchIndexError,
    SearchIndexSynchronizer,
    SearchIndexTimeoutError,
)


@pytest.fixture
def engine():
    """Mock search engine."""
    return AsyncMock()


@pytest.fixture
def item():
    return Item(id="i1", collection_id="c1", name="Dune", tags={"scifi"})


@pytest.mark.asyncio
async def test_add_item_upserts_projection(engine, item):
    synchronizer = SearchIndexSynchronizer(engine)

    assert await synchronizer.add_item(item, ItemFields()) is True

    index, document = engine.add_or_replace.await_args.args
    assert index == ITEM_INDEX
    assert document.id == "i1"
    assert synchronizer.failures == 0


@pytest.mark.asyncio
async def test_index_failure_is_absorbed_and_counted(engine, item):
    engine.add_or_replace.side_effect = SearchIndexError("index unavailable")
    synchronizer = SearchIndexSynchronizer(engine)

    assert await synchronizer.add_item(item, ItemFields()) is False
    assert await synchronizer.replace_item(item, ItemFields()) is False

    assert synchronizer.failures == 2


@pytest.mark.asyncio
async def test_timeout_is_absorbed(engine):
    engine.delete.side_effect = SearchIndexTimeoutError("timed out")
    synchronizer = SearchIndexSynchronizer(engine)

    assert await synchronizer.delete_collection("c1") is False
    assert synchronizer.failures == 1


@pytest.mark.asyncio
async def test_delete_item_removes_its_comments(engine):
    synchronizer = SearchIndexSynchronizer(engine)

    assert await synchronizer.delete_item("i1", ["m1", "m2"]) is True

    assert engine.delete.await_args_list == [
        call(ITEM_INDEX, "i1"),
        call(COMMENT_INDEX, "m1"),
        call(COMMENT_INDEX, "m2"),
    ]


@pytest.mark.asyncio
async def test_delete_item_continues_past_a_failed_comment(engine):
    engine.delete.side_effect = [None, SearchIndexError("boom"), None]
    synchronizer = SearchIndexSynchronizer(engine)

    assert await synchronizer.delete_item("i1", ["m1", "m2"]) is False

    assert engine.delete.await_count == 3
    assert synchronizer.failures == 1


@pytest.mark.asyncio
async def test_replace_collection_is_an_upsert(engine):
    synchronizer = SearchIndexSynchronizer(engine)
    collection = Collection(id="c1", owner_id="john", name="Books", topic_id="t1")

    await synchronizer.replace_collection(collection)

    engine.add_or_replace.assert_awaited_once()
    assert engine.add_or_replace.await_args.args[0] == COLLECTION_INDEX
    engine.delete.assert_not_awaited()


@pytest.mark.asyncio
async def test_scheduled_mirror_runs_in_background(engine, item):
    synchronizer = SearchIndexSynchronizer(engine)

    synchronizer.schedule(synchronizer.add_item(item, ItemFields()))

    assert synchronizer.pending == 1
    engine.add_or_replace.assert_not_awaited()
    await synchronizer.drain()
    assert synchronizer.pending == 0
    engine.add_or_replace.assert_awaited_once()


@pytest.mark.asyncio
async def test_scheduled_mirrors_keep_their_order(engine):
    synchronizer = SearchIndexSynchronizer(engine)
    first = Item(id="i1", collection_id="c1", name="Dune")
    second = Item(id="i1", collection_id="c1", name="Dune Messiah")

    synchronizer.schedule(synchronizer.add_item(first, ItemFields()))
    synchronizer.schedule(synchronizer.replace_item(second, ItemFields()))
    synchronizer.schedule(synchronizer.delete_item("i1"))
    await synchronizer.drain()

    names = [c.args[1].payload["name"] for c in engine.add_or_replace.await_args_list]
    assert names == ["Dune", "Dune Messiah"]
    assert engine.delete.await_args_list == [call(ITEM_INDEX, "i1")]


@pytest.mark.asyncio
async def test_delete_collection_removes_items_and_comments(engine):
    synchronizer = SearchIndexSynchronizer(engine)

    ok = await synchronizer.delete_collection("c1", {"i1": ["m1"], "i2": []})

    assert ok is True
    assert sorted(c.args for c in engine.delete.await_args_list) == [
        (COLLECTION_INDEX, "c1"),
        (COMMENT_INDEX, "m1"),
        (ITEM_INDEX, "i1"),
        (ITEM_INDEX, "i2"),
    ]


@pytest.mark.asyncio
async def test_delete_user_content(engine):
    synchronizer = SearchIndexSynchronizer(engine)

    ok = await synchronizer.delete_user_content({"c1": {"i1": []}}, ["m9"])

    assert ok is True
    assert sorted(c.args for c in engine.delete.await_args_list) == [
        (COLLECTION_INDEX, "c1"),
        (COMMENT_INDEX, "m9"),
        (ITEM_INDEX, "i1"),
    ]
