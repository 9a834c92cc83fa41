"""Collections API routes.

Provides endpoints for managing collections and their schemas, plus the
topic list collections are filed under.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import JSONResponse

from shelfbase.core.logging import get_logger
from shelfbase.domain.entities import Collection, is_failure
from shelfbase.domain.services.collection_service import (
    CollectionService,
    CreateCollectionRequest,
    NewField,
    UpdateCollectionRequest,
    UpdatedField,
)
from shelfbase.domain.services.item_service import ItemService
from shelfbase.infrastructure.api.dependencies import (
    AuthenticatedUser,
    OptionalUser,
    get_collection_service,
    get_item_service,
)
from shelfbase.infrastructure.api.failures import failure_response
from shelfbase.infrastructure.api.routes.items_router import item_response
from shelfbase.infrastructure.api.schemas import (
    CollectionResponse,
    CollectionViewResponse,
    CreateCollectionBody,
    CreatedResponse,
    FieldResponse,
    ItemResponse,
    TopicResponse,
    UpdateCollectionBody,
)

logger = get_logger(__name__)

router = APIRouter()
topics_router = APIRouter()

CollectionServiceDep = Annotated[CollectionService, Depends(get_collection_service)]


def collection_response(collection: Collection) -> CollectionResponse:
    return CollectionResponse(
        id=collection.id,
        owner_id=collection.owner_id,
        name=collection.name,
        topic_id=collection.topic_id,
        image=collection.image,
        created_at=collection.created_at,
        updated_at=collection.updated_at,
    )


@topics_router.get("", response_model=list[TopicResponse])
async def list_topics(service: CollectionServiceDep) -> list[TopicResponse]:
    """List the topics a collection can be filed under."""
    return [TopicResponse(id=t.id, name=t.name) for t in await service.list_topics()]


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=CreatedResponse,
    responses={
        403: {"description": "Not the owner or an admin"},
        404: {"description": "Owner or topic not found"},
        422: {"description": "Name length out of range"},
    },
)
async def create_collection(
    body: CreateCollectionBody,
    current_user: AuthenticatedUser,
    service: CollectionServiceDep,
) -> CreatedResponse | JSONResponse:
    """Create an empty collection."""
    result = await service.create(
        CreateCollectionRequest(
            owner_id=body.owner_id or current_user.id,
            name=body.name,
            topic_id=body.topic_id,
            image=body.image,
        ),
        current_user.id,
    )
    if is_failure(result):
        return failure_response(result)
    return CreatedResponse(id=result)


@router.get("/{collection_id}", response_model=CollectionViewResponse)
async def view_collection(
    collection_id: str,
    _viewer: OptionalUser,
    service: CollectionServiceDep,
) -> CollectionViewResponse | JSONResponse:
    """View a collection with its schema and items."""
    result = await service.view(collection_id)
    if is_failure(result):
        return failure_response(result)
    return CollectionViewResponse(
        **collection_response(result.collection).model_dump(),
        owner_name=result.owner.fullname if result.owner else "",
        topic_name=result.topic.name if result.topic else "",
        fields=[
            FieldResponse(id=f.id, name=f.name, type=f.type, position=f.position)
            for f in result.fields
        ],
        items=[item_response(i) for i in result.items],
    )


@router.get("/{collection_id}/items", response_model=list[ItemResponse])
async def list_collection_items(
    collection_id: str,
    _viewer: OptionalUser,
    service: Annotated[ItemService, Depends(get_item_service)],
) -> list[ItemResponse] | JSONResponse:
    """List the items of a collection, oldest first."""
    result = await service.list_by_collection(collection_id)
    if is_failure(result):
        return failure_response(result)
    return [item_response(i) for i in result]


@router.put(
    "/{collection_id}",
    response_model=CollectionResponse,
    responses={
        403: {"description": "Not the collection owner or an admin"},
        404: {"description": "Collection, topic or field not found"},
        422: {"description": "Name length out of range"},
    },
)
async def update_collection(
    collection_id: str,
    body: UpdateCollectionBody,
    current_user: AuthenticatedUser,
    service: CollectionServiceDep,
) -> CollectionResponse | JSONResponse:
    """Update a collection and its schema.

    Existing fields are edited by ID and new fields are appended. Values
    already stored for a field are kept when its type changes.
    """
    result = await service.update(
        UpdateCollectionRequest(
            id=collection_id,
            name=body.name,
            topic_id=body.topic_id,
            image=body.image,
            updated_fields=[
                UpdatedField(id=f.id, name=f.name, type=f.type) for f in body.updated_fields
            ],
            created_fields=[NewField(name=f.name, type=f.type) for f in body.created_fields],
        ),
        current_user.id,
    )
    if is_failure(result):
        return failure_response(result)
    return collection_response(result)


@router.delete("/{collection_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_collection(
    collection_id: str,
    current_user: AuthenticatedUser,
    service: CollectionServiceDep,
) -> Response:
    """Delete a collection together with everything in it."""
    result = await service.delete(collection_id, current_user.id)
    if is_failure(result):
        return failure_response(result)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
