"""Integration tests for referential integrity of the typed value stores."""

import pytest
from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError

from shelfbase.domain.entities import FieldType
from shelfbase.domain.services.item_service import CreateItemRequest
from shelfbase.infrastructure.persistence.models import ItemModel
from shelfbase.infrastructure.persistence.repositories import (
    CommentRepository,
    FieldValueStores,
)


@pytest.mark.asyncio
async def test_value_rows_must_reference_an_existing_item(db_session, books):
    stores = FieldValueStores(db_session)

    with pytest.raises(IntegrityError):
        await stores[FieldType.NUMBER].create("ghost-item", books.fields["year"].id, 1.0)
    await db_session.rollback()


@pytest.mark.asyncio
async def test_value_rows_must_reference_an_existing_field(
    db_session, item_service, owner, books
):
    item_id = await item_service.create(
        CreateItemRequest(collection_id=books.id, name="Dune", fields=books.payload()),
        requester_id=owner.id,
    )

    with pytest.raises(IntegrityError):
        await FieldValueStores(db_session)[FieldType.TEXT].create(item_id, "ghost-field", "x")
    await db_session.rollback()


@pytest.mark.asyncio
async def test_deleting_an_item_row_cascades_to_its_rows(
    db_session, item_service, comment_service, owner, stranger, books
):
    item_id = await item_service.create(
        CreateItemRequest(
            collection_id=books.id, name="Dune", tags={"scifi"}, fields=books.payload()
        ),
        requester_id=owner.id,
    )
    await comment_service.create(item_id, "Great read", stranger.id)

    await db_session.execute(delete(ItemModel).where(ItemModel.id == item_id))
    await db_session.commit()

    assert len(await FieldValueStores(db_session).load(item_id)) == 0
    assert await CommentRepository(db_session).get_by_item(item_id) == []
