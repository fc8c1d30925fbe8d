from __future__ import annotations

from typing import Union

from fastapi import APIRouter, Depends, Request

from users_api.adapters.repository import UserRepository
from users_api.entrypoints.schemas.user import (
    MessageResponse,
    StoredUser,
    UserCreateRequest,
    UserListResponse,
    UserResponse,
    UserUpdateRequest,
)
from users_api.services.user_service import UserService

router = APIRouter()


def get_service(request: Request) -> UserService:
    settings = request.app.state.settings
    return UserService(UserRepository(request.app.state.store, list_limit=settings.USERS_API_LIST_LIMIT))


@router.get(
    "/users",
    response_model=Union[UserListResponse, MessageResponse],
    response_model_exclude_none=True,
    summary="List users",
)
async def list_users(service: UserService = Depends(get_service)) -> Union[UserListResponse, MessageResponse]:
    result = await service.list_users()
    if "message" in result:
        return MessageResponse(**result)
    return UserListResponse(usuarios=[StoredUser(**user) for user in result["usuarios"]])


@router.get("/users/{user_id}", response_model=UserResponse, response_model_exclude_none=True, summary="Get a user")
async def get_user(user_id: str, service: UserService = Depends(get_service)) -> UserResponse:
    return UserResponse(**await service.get_user(user_id))


@router.post("/users", response_model=StoredUser, response_model_exclude_none=True, summary="Create a user")
async def create_user(payload: UserCreateRequest, service: UserService = Depends(get_service)) -> StoredUser:
    user = await service.create_user(payload.name, payload.password, email=payload.email, age=payload.age)
    return StoredUser(**user)


@router.put("/users/{user_id}", response_model=MessageResponse, summary="Replace a user")
async def update_user(
    user_id: str,
    payload: UserUpdateRequest,
    service: UserService = Depends(get_service),
) -> MessageResponse:
    result = await service.update_user(user_id, payload.name, payload.password, email=payload.email, age=payload.age)
    return MessageResponse(**result)


@router.delete("/users/{user_id}", response_model=MessageResponse, summary="Delete a user")
async def delete_user(user_id: str, service: UserService = Depends(get_service)) -> MessageResponse:
    return MessageResponse(**await service.delete_user(user_id))
