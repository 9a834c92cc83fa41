"""Item service for business logic.

Creates, updates and deletes items across the item store and the five typed
value stores. Each mutation is authorized against the owning collection,
validated against the collection's current schema, written in one
transaction and then mirrored into the search index.
"""

from dataclasses import dataclass, field

from sqlalchemy.ext.asyncio import AsyncSession

from shelfbase.core.logging import get_logger
from shelfbase.domain.entities import (
    BadRequestFailure,
    Collection,
    CollectionField,
    Comment,
    Failure,
    Item,
    ItemFields,
    NotFoundFailure,
    is_failure,
)
from shelfbase.domain.services.authorization import AuthorizationGate
from shelfbase.domain.services.id_generator import new_id
from shelfbase.domain.services.schema_validator import SchemaValidator
from shelfbase.domain.services.transaction import run_in_transaction
from shelfbase.infrastructure.persistence.repositories import (
    CollectionFieldRepository,
    CollectionRepository,
    CommentRepository,
    FieldValueStores,
    ItemRepository,
    UserRepository,
)
from shelfbase.infrastructure.search.synchronizer import SearchIndexSynchronizer

logger = get_logger(__name__)

DEFAULT_STORE_TIMEOUT_SECONDS = 10.0


@dataclass
class CreateItemRequest:
    collection_id: str
    name: str
    tags: set[str] = field(default_factory=set)
    fields: ItemFields = field(default_factory=ItemFields)


@dataclass
class UpdateItemRequest:
    item_id: str
    name: str
    tags: set[str] = field(default_factory=set)
    fields: ItemFields = field(default_factory=ItemFields)


@dataclass
class CommentView:
    comment: Comment
    author_name: str


@dataclass
class ItemView:
    """An item with everything needed to display it."""

    item: Item
    collection: Collection
    schema: list[CollectionField]
    fields: ItemFields
    comments: list[CommentView]


def schema_failure(errors) -> BadRequestFailure:
    return BadRequestFailure(
        message="Item fields do not match the collection schema",
        errors=errors,
    )


class ItemService:
    """Service for item business logic."""

    def __init__(
        self,
        session: AsyncSession,
        synchronizer: SearchIndexSynchronizer,
        store_timeout_seconds: float = DEFAULT_STORE_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize the service.

        Args:
            session: SQLAlchemy async session. Each mutation commits it.
            synchronizer: Search index synchronizer.
            store_timeout_seconds: Bound on each multi-store write.
        """
        self.session = session
        self.synchronizer = synchronizer
        self.store_timeout_seconds = store_timeout_seconds
        self.items = ItemRepository(session)
        self.collections = CollectionRepository(session)
        self.schema = CollectionFieldRepository(session)
        self.values = FieldValueStores(session)
        self.comments = CommentRepository(session)
        self.users = UserRepository(session)
        self.gate = AuthorizationGate(self.users)

    async def create(self, request: CreateItemRequest, requester_id: str) -> str | Failure:
        """Create an item with one value for every field of its collection.

        Returns:
            The new item ID, or a failure.
        """
        collection = await self.collections.get(request.collection_id)
        if collection is None:
            return NotFoundFailure(resource="Collection", resource_id=request.collection_id)

        authorized = await self.gate.check(collection.owner_id, requester_id)
        if is_failure(authorized):
            return authorized

        schema = await self.schema.get_by_collection(collection.id)
        errors = SchemaValidator.validate(request.fields, schema)
        if errors:
            logger.info(
                "Item rejected by schema",
                collection_id=collection.id,
                error_count=len(errors),
            )
            return schema_failure(errors)

        item = Item(
            id=new_id(),
            collection_id=collection.id,
            name=request.name,
            tags=request.tags,
        )
        fields = SchemaValidator.normalize(request.fields)

        async def write() -> None:
            await self.items.create(item)
            await self.values.create_all(item.id, fields)

        failure = await run_in_transaction(
            self.session, "Create item", write, self.store_timeout_seconds
        )
        if failure:
            return failure

        logger.info("Item created", item_id=item.id, collection_id=collection.id)
        self.synchronizer.schedule(self.synchronizer.add_item(item, fields))
        return item.id

    async def update(self, request: UpdateItemRequest, requester_id: str) -> Item | Failure:
        """Replace the name, tags and every field value of an item.

        Values are checked against the schema as it is now. All typed rows of
        the item are deleted and recreated; concurrent updates of the same
        item resolve as last writer wins.
        """
        existing = await self.items.get(request.item_id)
        if existing is None:
            return NotFoundFailure(resource="Item", resource_id=request.item_id)

        collection = await self.collections.get(existing.collection_id)
        if collection is None:
            return NotFoundFailure(resource="Collection", resource_id=existing.collection_id)

        authorized = await self.gate.check(collection.owner_id, requester_id)
        if is_failure(authorized):
            return authorized

        schema = await self.schema.get_by_collection(collection.id)
        errors = SchemaValidator.validate(request.fields, schema)
        if errors:
            return schema_failure(errors)

        item = existing.renamed(request.name, request.tags)
        fields = SchemaValidator.normalize(request.fields)

        async def write() -> None:
            await self.items.update(item)
            await self.values.replace_all(item.id, fields)

        failure = await run_in_transaction(
            self.session, "Update item", write, self.store_timeout_seconds
        )
        if failure:
            return failure

        logger.info("Item updated", item_id=item.id)
        self.synchronizer.schedule(self.synchronizer.replace_item(item, fields))
        return item

    async def delete(self, item_id: str, requester_id: str) -> None | Failure:
        """Delete an item, its typed values, tags and comments as one unit."""
        item = await self.items.get(item_id)
        if item is None:
            return NotFoundFailure(resource="Item", resource_id=item_id)

        collection = await self.collections.get(item.collection_id)
        if collection is None:
            return NotFoundFailure(resource="Collection", resource_id=item.collection_id)

        authorized = await self.gate.check(collection.owner_id, requester_id)
        if is_failure(authorized):
            return authorized

        deleted_comments: list[str] = []

        async def write() -> None:
            await self.values.delete_all_for_item(item_id)
            deleted_comments.extend(await self.comments.delete_by_item(item_id))
            await self.items.delete(item_id)

        failure = await run_in_transaction(
            self.session, "Delete item", write, self.store_timeout_seconds
        )
        if failure:
            return failure

        logger.info("Item deleted", item_id=item_id, comment_count=len(deleted_comments))
        self.synchronizer.schedule(self.synchronizer.delete_item(item_id, deleted_comments))
        return None

    async def view(self, item_id: str) -> ItemView | Failure:
        """Load an item with its field values and comments."""
        item = await self.items.get(item_id)
        if item is None:
            return NotFoundFailure(resource="Item", resource_id=item_id)

        collection = await self.collections.get(item.collection_id)
        if collection is None:
            return NotFoundFailure(resource="Collection", resource_id=item.collection_id)

        comments = await self.comments.get_by_item(item_id)
        authors = await self.users.get_many([c.author_id for c in comments])
        return ItemView(
            item=item,
            collection=collection,
            schema=await self.schema.get_by_collection(collection.id),
            fields=await self.values.load(item_id),
            comments=[
                CommentView(
                    comment=c,
                    author_name=authors[c.author_id].fullname if c.author_id in authors else "",
                )
                for c in comments
            ],
        )

    async def list_by_collection(self, collection_id: str) -> list[Item] | Failure:
        if await self.collections.get(collection_id) is None:
            return NotFoundFailure(resource="Collection", resource_id=collection_id)
        return await self.items.get_by_collection(collection_id)
