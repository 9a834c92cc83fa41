"""Items API routes.

Provides endpoints for creating, viewing, updating and deleting items.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import JSONResponse

from shelfbase.core.logging import get_logger
from shelfbase.domain.entities import Item, is_failure
from shelfbase.domain.services.item_service import (
    CreateItemRequest,
    ItemService,
    ItemView,
    UpdateItemRequest,
)
from shelfbase.infrastructure.api.dependencies import (
    AuthenticatedUser,
    OptionalUser,
    get_item_service,
)
from shelfbase.infrastructure.api.failures import failure_response
from shelfbase.infrastructure.api.schemas import (
    CreatedResponse,
    CreateItemBody,
    ItemCommentResponse,
    ItemFieldValueResponse,
    ItemResponse,
    ItemViewResponse,
    UpdateItemBody,
)

logger = get_logger(__name__)

router = APIRouter()

ItemServiceDep = Annotated[ItemService, Depends(get_item_service)]


def item_response(item: Item) -> ItemResponse:
    return ItemResponse(
        id=item.id,
        collection_id=item.collection_id,
        name=item.name,
        tags=sorted(item.tags),
        created_at=item.created_at,
    )


def item_view_response(view: ItemView) -> ItemViewResponse:
    # Values are read from the bucket of each field's current type
    fields = [
        ItemFieldValueResponse(
            id=f.id,
            name=f.name,
            type=f.type,
            value=view.fields.of_type(f.type).get(f.id),
        )
        for f in view.schema
    ]
    return ItemViewResponse(
        id=view.item.id,
        name=view.item.name,
        tags=sorted(view.item.tags),
        created_at=view.item.created_at,
        collection_id=view.collection.id,
        collection_name=view.collection.name,
        owner_id=view.collection.owner_id,
        fields=fields,
        comments=[
            ItemCommentResponse(
                id=c.comment.id,
                author_id=c.comment.author_id,
                author_name=c.author_name,
                text=c.comment.text,
                created_at=c.comment.created_at,
            )
            for c in view.comments
        ],
    )


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=CreatedResponse,
    responses={
        400: {"description": "Fields do not match the collection schema"},
        403: {"description": "Not the collection owner or an admin"},
        404: {"description": "Collection not found"},
    },
)
async def create_item(
    body: CreateItemBody,
    current_user: AuthenticatedUser,
    service: ItemServiceDep,
) -> CreatedResponse | JSONResponse:
    """Create an item carrying one value for every field of its collection."""
    result = await service.create(
        CreateItemRequest(
            collection_id=body.collection_id,
            name=body.name,
            tags=set(body.tags),
            fields=body.fields.to_item_fields(),
        ),
        current_user.id,
    )
    if is_failure(result):
        return failure_response(result)
    return CreatedResponse(id=result)


@router.get("/{item_id}", response_model=ItemViewResponse)
async def view_item(
    item_id: str,
    _viewer: OptionalUser,
    service: ItemServiceDep,
) -> ItemViewResponse | JSONResponse:
    """View an item with its field values and comments."""
    result = await service.view(item_id)
    if is_failure(result):
        return failure_response(result)
    return item_view_response(result)


@router.put(
    "/{item_id}",
    response_model=ItemResponse,
    responses={
        400: {"description": "Fields do not match the collection schema"},
        403: {"description": "Not the collection owner or an admin"},
        404: {"description": "Item not found"},
    },
)
async def update_item(
    item_id: str,
    body: UpdateItemBody,
    current_user: AuthenticatedUser,
    service: ItemServiceDep,
) -> ItemResponse | JSONResponse:
    """Replace an item's name, tags and all of its field values."""
    result = await service.update(
        UpdateItemRequest(
            item_id=item_id,
            name=body.name,
            tags=set(body.tags),
            fields=body.fields.to_item_fields(),
        ),
        current_user.id,
    )
    if is_failure(result):
        return failure_response(result)
    return item_response(result)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_item(
    item_id: str,
    current_user: AuthenticatedUser,
    service: ItemServiceDep,
) -> Response:
    """Delete an item with its values, tags and comments."""
    result = await service.delete(item_id, current_user.id)
    if is_failure(result):
        return failure_response(result)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
