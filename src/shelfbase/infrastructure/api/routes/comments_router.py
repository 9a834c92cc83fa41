"""Comments API routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import JSONResponse

from shelfbase.domain.entities import is_failure
from shelfbase.domain.services.comment_service import CommentService
from shelfbase.infrastructure.api.dependencies import AuthenticatedUser, get_comment_service
from shelfbase.infrastructure.api.failures import failure_response
from shelfbase.infrastructure.api.schemas import (
    CommentBody,
    CommentResponse,
    CreateCommentBody,
    CreatedResponse,
)

router = APIRouter()

CommentServiceDep = Annotated[CommentService, Depends(get_comment_service)]


@router.post("", status_code=status.HTTP_201_CREATED, response_model=CreatedResponse)
async def create_comment(
    body: CreateCommentBody,
    current_user: AuthenticatedUser,
    service: CommentServiceDep,
) -> CreatedResponse | JSONResponse:
    """Comment on an item. Any signed-in user may comment."""
    result = await service.create(body.item_id, body.text, current_user.id)
    if is_failure(result):
        return failure_response(result)
    return CreatedResponse(id=result)


@router.put(
    "/{comment_id}",
    response_model=CommentResponse,
    responses={403: {"description": "Not the comment author"}},
)
async def update_comment(
    comment_id: str,
    body: CommentBody,
    current_user: AuthenticatedUser,
    service: CommentServiceDep,
) -> CommentResponse | JSONResponse:
    result = await service.update(comment_id, body.text, current_user.id)
    if is_failure(result):
        return failure_response(result)
    return CommentResponse(
        id=result.id,
        item_id=result.item_id,
        author_id=result.author_id,
        text=result.text,
        created_at=result.created_at,
    )


@router.delete(
    "/{comment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={403: {"description": "Not the comment author"}},
)
async def delete_comment(
    comment_id: str,
    current_user: AuthenticatedUser,
    service: CommentServiceDep,
) -> Response:
    result = await service.delete(comment_id, current_user.id)
    if is_failure(result):
        return failure_response(result)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
