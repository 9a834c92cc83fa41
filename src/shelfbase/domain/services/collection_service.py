"""Collection service for business logic.

Handles collection creation, schema updates, deletion and the read views of
collections and topics.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from shelfbase.core.logging import get_logger
from shelfbase.domain.entities import (
    Collection,
    CollectionField,
    Failure,
    FieldType,
    Item,
    NotFoundFailure,
    Topic,
    User,
    ValidateLengthFailure,
    is_failure,
)
from shelfbase.domain.services.authorization import AuthorizationGate
from shelfbase.domain.services.id_generator import new_id
from shelfbase.domain.services.transaction import run_in_transaction
from shelfbase.infrastructure.persistence.repositories import (
    CollectionFieldRepository,
    CollectionRepository,
    CommentRepository,
    FieldValueStores,
    ItemRepository,
    TopicRepository,
    UserRepository,
)
from shelfbase.infrastructure.search.synchronizer import SearchIndexSynchronizer

logger = get_logger(__name__)

COLLECTION_NAME_LENGTH = (1, 100)
FIELD_NAME_LENGTH = (1, 25)


def validate_length(
    value: str, field_name: str, bounds: tuple[int, int]
) -> ValidateLengthFailure | None:
    """Check that ``value`` is within the inclusive length bounds."""
    min_length, max_length = bounds
    satisfies_min = len(value) >= min_length
    satisfies_max = len(value) <= max_length
    if satisfies_min and satisfies_max:
        return None
    return ValidateLengthFailure(
        message=f"{field_name} must be {min_length}-{max_length} characters",
        field_name=field_name,
        satisfies_min_length=satisfies_min,
        satisfies_max_length=satisfies_max,
    )


@dataclass
class CreateCollectionRequest:
    owner_id: str
    name: str
    topic_id: str
    image: str | None = None


@dataclass
class UpdatedField:
    id: str
    name: str
    type: FieldType


@dataclass
class NewField:
    name: str
    type: FieldType


@dataclass
class UpdateCollectionRequest:
    """Schema update: collection attributes, edits of existing fields by
    ID and new fields appended after the existing ones."""

    id: str
    name: str
    topic_id: str
    image: str | None = None
    updated_fields: list[UpdatedField] = field(default_factory=list)
    created_fields: list[NewField] = field(default_factory=list)


@dataclass
class CollectionView:
    collection: Collection
    owner: User | None
    topic: Topic | None
    fields: list[CollectionField]
    items: list[Item]


class CollectionService:
    """Service for collection business logic."""

    def __init__(
        self,
        session: AsyncSession,
        synchronizer: SearchIndexSynchronizer,
        store_timeout_seconds: float = 10.0,
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
        self.collections = CollectionRepository(session)
        self.schema = CollectionFieldRepository(session)
        self.topics = TopicRepository(session)
        self.items = ItemRepository(session)
        self.values = FieldValueStores(session)
        self.comments = CommentRepository(session)
        self.users = UserRepository(session)
        self.gate = AuthorizationGate(self.users)

    async def create(self, request: CreateCollectionRequest, requester_id: str) -> str | Failure:
        """Create an empty collection for ``request.owner_id``.

        Only the future owner or an admin may create it.
        """
        invalid = validate_length(request.name, "name", COLLECTION_NAME_LENGTH)
        if invalid:
            return invalid

        if await self.users.get(request.owner_id) is None:
            return NotFoundFailure(resource="User", resource_id=request.owner_id)

        authorized = await self.gate.check(request.owner_id, requester_id)
        if is_failure(authorized):
            return authorized

        if await self.topics.get(request.topic_id) is None:
            return NotFoundFailure(resource="Topic", resource_id=request.topic_id)

        collection = Collection(
            id=new_id(),
            owner_id=request.owner_id,
            name=request.name,
            topic_id=request.topic_id,
            image=request.image,
        )

        async def write() -> None:
            await self.collections.create(collection)

        failure = await run_in_transaction(
            self.session, "Create collection", write, self.store_timeout_seconds
        )
        if failure:
            return failure

        logger.info("Collection created", collection_id=collection.id, owner_id=collection.owner_id)
        self.synchronizer.schedule(self.synchronizer.add_collection(collection))
        return collection.id

    async def update(
        self, request: UpdateCollectionRequest, requester_id: str
    ) -> Collection | Failure:
        """Update collection attributes and its schema in one transaction.

        Existing fields are edited in place; their stored values are not
        migrated when the type changes. Field updates and field creations are
        each issued as a single bulk write.
        """
        collection = await self.collections.get(request.id)
        if collection is None:
            return NotFoundFailure(resource="Collection", resource_id=request.id)

        authorized = await self.gate.check(collection.owner_id, requester_id)
        if is_failure(authorized):
            return authorized

        if request.topic_id != collection.topic_id:
            if await self.topics.get(request.topic_id) is None:
                return NotFoundFailure(resource="Topic", resource_id=request.topic_id)

        current = {f.id: f for f in await self.schema.get_by_collection(collection.id)}

        updated: list[CollectionField] = []
        for change in request.updated_fields:
            existing = current.get(change.id)
            if existing is None:
                return NotFoundFailure(resource="Field", resource_id=change.id)
            invalid = validate_length(change.name, "field name", FIELD_NAME_LENGTH)
            if invalid:
                return invalid
            updated.append(replace(existing, name=change.name, type=FieldType(change.type)))

        next_position = max((f.position for f in current.values()), default=-1) + 1
        created: list[CollectionField] = []
        for offset, new_field in enumerate(request.created_fields):
            invalid = validate_length(new_field.name, "field name", FIELD_NAME_LENGTH)
            if invalid:
                return invalid
            created.append(
                CollectionField(
                    id=new_id(),
                    collection_id=collection.id,
                    name=new_field.name,
                    type=new_field.type,
                    position=next_position + offset,
                )
            )

        invalid = validate_length(request.name, "name", COLLECTION_NAME_LENGTH)
        if invalid:
            return invalid

        changed = replace(
            collection,
            name=request.name,
            topic_id=request.topic_id,
            image=request.image,
            updated_at=datetime.now(timezone.utc),
        )

        async def write() -> None:
            await self.schema.update_many(updated)
            await self.schema.create_many(created)
            await self.collections.update(changed)

        failure = await run_in_transaction(
            self.session, "Update collection", write, self.store_timeout_seconds
        )
        if failure:
            return failure

        retyped = [f.id for f in updated if f.type != current[f.id].type]
        if retyped:
            logger.warning(
                "Field types changed without migrating stored values",
                collection_id=collection.id,
                field_ids=retyped,
            )
        logger.info(
            "Collection updated",
            collection_id=collection.id,
            updated_fields=len(updated),
            created_fields=len(created),
        )
        self.synchronizer.schedule(self.synchronizer.replace_collection(changed))
        return changed

    async def delete(self, collection_id: str, requester_id: str) -> None | Failure:
        """Delete a collection with its fields, items, values, tags and comments."""
        collection = await self.collections.get(collection_id)
        if collection is None:
            return NotFoundFailure(resource="Collection", resource_id=collection_id)

        authorized = await self.gate.check(collection.owner_id, requester_id)
        if is_failure(authorized):
            return authorized

        deleted_comments: dict[str, list[str]] = {}

        async def write() -> None:
            deleted_comments.update(await self.delete_rows(collection_id))

        failure = await run_in_transaction(
            self.session, "Delete collection", write, self.store_timeout_seconds
        )
        if failure:
            return failure

        logger.info(
            "Collection deleted", collection_id=collection_id, item_count=len(deleted_comments)
        )
        self.synchronizer.schedule(
            self.synchronizer.delete_collection(collection_id, deleted_comments)
        )
        return None

    async def delete_rows(self, collection_id: str) -> dict[str, list[str]]:
        """Delete a collection and everything in it without committing.

        Returns:
            Deleted comment IDs keyed by deleted item ID.
        """
        deleted_comments: dict[str, list[str]] = {}
        for item in await self.items.get_by_collection(collection_id):
            await self.values.delete_all_for_item(item.id)
            deleted_comments[item.id] = await self.comments.delete_by_item(item.id)
            await self.items.delete(item.id)
        await self.schema.delete_by_collection(collection_id)
        await self.collections.delete(collection_id)
        return deleted_comments

    async def view(self, collection_id: str) -> CollectionView | Failure:
        collection = await self.collections.get(collection_id)
        if collection is None:
            return NotFoundFailure(resource="Collection", resource_id=collection_id)
        return CollectionView(
            collection=collection,
            owner=await self.users.get(collection.owner_id),
            topic=await self.topics.get(collection.topic_id),
            fields=await self.schema.get_by_collection(collection_id),
            items=await self.items.get_by_collection(collection_id),
        )

    async def list_by_owner(self, owner_id: str) -> list[Collection] | Failure:
        if await self.users.get(owner_id) is None:
            return NotFoundFailure(resource="User", resource_id=owner_id)
        return await self.collections.get_by_owner(owner_id)

    async def list_topics(self) -> list[Topic]:
        return await self.topics.get_all()
