"""Users API routes.

User profiles are public. Admin and blocked flags can only be changed by
admins. Users may delete themselves; admins may delete anyone.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import JSONResponse

from shelfbase.domain.entities import User, is_failure
from shelfbase.domain.services.collection_service import CollectionService
from shelfbase.domain.services.user_service import UserService
from shelfbase.infrastructure.api.dependencies import (
    AuthenticatedUser,
    get_collection_service,
    get_user_service,
)
from shelfbase.infrastructure.api.failures import failure_response
from shelfbase.infrastructure.api.routes.collections_router import collection_response
from shelfbase.infrastructure.api.schemas import (
    CollectionResponse,
    SetAdminBody,
    SetBlockedBody,
    UserResponse,
)

router = APIRouter()

UserServiceDep = Annotated[UserService, Depends(get_user_service)]


def user_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        username=user.username,
        fullname=user.fullname,
        is_admin=user.is_admin,
        blocked=user.blocked,
        created_at=user.created_at,
    )


@router.get("/me", response_model=UserResponse)
async def me(current_user: AuthenticatedUser) -> UserResponse:
    return user_response(current_user)


@router.get("/{user_id}", response_model=UserResponse)
async def view_user(user_id: str, service: UserServiceDep) -> UserResponse | JSONResponse:
    result = await service.view(user_id)
    if is_failure(result):
        return failure_response(result)
    return user_response(result)


@router.get("/{user_id}/collections", response_model=list[CollectionResponse])
async def list_user_collections(
    user_id: str,
    service: Annotated[CollectionService, Depends(get_collection_service)],
) -> list[CollectionResponse] | JSONResponse:
    result = await service.list_by_owner(user_id)
    if is_failure(result):
        return failure_response(result)
    return [collection_response(c) for c in result]


@router.put("/{user_id}/admin", response_model=UserResponse)
async def set_admin(
    user_id: str,
    body: SetAdminBody,
    current_user: AuthenticatedUser,
    service: UserServiceDep,
) -> UserResponse | JSONResponse:
    """Grant or revoke admin rights (admins only)."""
    result = await service.set_is_admin(user_id, body.is_admin, current_user.id)
    if is_failure(result):
        return failure_response(result)
    return user_response(result)


@router.put("/{user_id}/blocked", response_model=UserResponse)
async def set_blocked(
    user_id: str,
    body: SetBlockedBody,
    current_user: AuthenticatedUser,
    service: UserServiceDep,
) -> UserResponse | JSONResponse:
    """Block or unblock a user (admins only)."""
    result = await service.set_blocked(user_id, body.blocked, current_user.id)
    if is_failure(result):
        return failure_response(result)
    return user_response(result)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: str,
    current_user: AuthenticatedUser,
    service: UserServiceDep,
) -> Response:
    """Delete a user with their collections and comments."""
    result = await service.delete(user_id, current_user.id)
    if is_failure(result):
        return failure_response(result)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
