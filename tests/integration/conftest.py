"""Fixtures for service-level integration tests."""

from dataclasses import dataclass

import pytest
import pytest_asyncio

from shelfbase.domain.entities import CollectionField, FieldType, ItemFields, Topic
from shelfbase.domain.services.collection_service import (
    CollectionService,
    CreateCollectionRequest,
    NewField,
    UpdateCollectionRequest,
)
from shelfbase.domain.services.comment_service import CommentService
from shelfbase.domain.services.item_service import ItemService
from shelfbase.domain.services.search_service import SearchService


@pytest.fixture
def collection_service(db_session, synchronizer) -> CollectionService:
    return CollectionService(db_session, synchronizer, store_timeout_seconds=5.0)


@pytest.fixture
def item_service(db_session, synchronizer) -> ItemService:
    return ItemService(db_session, synchronizer, store_timeout_seconds=5.0)


@pytest.fixture
def comment_service(db_session, synchronizer) -> CommentService:
    return CommentService(db_session, synchronizer, store_timeout_seconds=5.0)


@pytest.fixture
def search_service(db_session, search_engine) -> SearchService:
    return SearchService(db_session, search_engine, limit=20)


@dataclass
class BooksCollection:
    """John's "books" collection with one field of every type."""

    id: str
    fields: dict[str, CollectionField]

    def payload(self, **overrides) -> ItemFields:
        values = {
            "year": 1965,
            "publisher": "Chilton",
            "notes": "First edition",
            "signed": False,
            "bought": "2024-01-01T12:00:00Z",
        }
        values.update(overrides)
        fields = ItemFields()
        for name, value in values.items():
            f = self.fields[name]
            fields.of_type(f.type)[f.id] = value
        return fields


@pytest_asyncio.fixture
async def books(collection_service, owner, books_topic: Topic) -> BooksCollection:
    collection_id = await collection_service.create(
        CreateCollectionRequest(owner_id=owner.id, name="books", topic_id=books_topic.id),
        requester_id=owner.id,
    )
    await collection_service.update(
        UpdateCollectionRequest(
            id=collection_id,
            name="books",
            topic_id=books_topic.id,
            created_fields=[
                NewField(name="year", type=FieldType.NUMBER),
                NewField(name="publisher", type=FieldType.TEXT),
                NewField(name="notes", type=FieldType.MULTILINE_TEXT),
                NewField(name="signed", type=FieldType.CHECKBOX),
                NewField(name="bought", type=FieldType.DATE),
            ],
        ),
        requester_id=owner.id,
    )
    schema = await collection_service.schema.get_by_collection(collection_id)
    return BooksCollection(id=collection_id, fields={f.name: f for f in schema})
