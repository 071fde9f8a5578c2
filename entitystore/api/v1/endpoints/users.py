"""User API: thin routes delegating to UserService."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response

from entitystore.api.v1.dependencies import get_user_service, parse_entity_id
from entitystore.application.services import UserService
from entitystore.schemas.user import (
    UserCreateRequest,
    UserListResponse,
    UserResponse,
    UserUpdateRequest,
)

router = APIRouter()

UserServiceDep = Annotated[UserService, Depends(get_user_service)]


def _user_id(user_id: str) -> int:
    return parse_entity_id(user_id, "user")


UserId = Annotated[int, Depends(_user_id)]


@router.post("", response_model=UserResponse, status_code=201)
async def create_user(body: UserCreateRequest, users: UserServiceDep) -> UserResponse:
    """Create a user. 409 if the email is already registered."""
    user = await users.create_user(
        name=body.name, email=body.email, password=body.password, age=body.age
    )
    return UserResponse.model_validate(user)


@router.get("", response_model=UserListResponse)
async def list_users(
    users: UserServiceDep,
    page: int = 1,
    page_size: int = 10,
) -> UserListResponse:
    """List users ordered by id. Out-of-range page values are clamped, not rejected."""
    result = await users.list_users(page, page_size)
    return UserListResponse(
        users=[UserResponse.model_validate(u) for u in result.items],
        total=result.total,
        page=result.page,
        page_size=result.page_size,
    )


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: UserId, users: UserServiceDep) -> UserResponse:
    return UserResponse.model_validate(await users.get_user(user_id))


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: UserId, body: UserUpdateRequest, users: UserServiceDep
) -> UserResponse:
    """Partial update: omitted, empty and zero fields keep their stored values."""
    user = await users.update_user(
        user_id,
        name=body.name,
        email=body.email,
        password=body.password,
        age=body.age,
    )
    return UserResponse.model_validate(user)


@router.delete("/{user_id}", status_code=204)
async def delete_user(user_id: UserId, users: UserServiceDep) -> Response:
    await users.delete_user(user_id)
    return Response(status_code=204)
