from fastapi import APIRouter, Depends, HTTPException, Response, status
from typing import List

from parkfinder.application.services.user_service import UserService
from parkfinder.domain.entities import User
from parkfinder.infrastructure.api.dependencies import get_user_service
from parkfinder.infrastructure.api.routers.errors import http_error
from parkfinder.infrastructure.api.schemas.users import UserCreate, UserUpdate, UserResponse

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("", response_model=List[UserResponse])
async def list_users(service: UserService = Depends(get_user_service)):
    try:
        return await service.list_users()
    except Exception as e:
        raise http_error(e, "fetch users")


@router.get("/username/{username}", response_model=UserResponse)
async def get_user_by_username(username: str, service: UserService = Depends(get_user_service)):
    try:
        return await service.get_by_username(username)
    except Exception as e:
        raise http_error(e, "fetch user")


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: int, service: UserService = Depends(get_user_service)):
    try:
        return await service.get_user(user_id)
    except Exception as e:
        raise http_error(e, "fetch user")


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(user_data: UserCreate, service: UserService = Depends(get_user_service)):
    try:
        return await service.create_user(
            User(username=user_data.username, name=user_data.name, email=user_data.email)
        )
    except Exception as e:
        raise http_error(e, "create user")


@router.put("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_user(
    user_id: int,
    user_data: UserUpdate,
    service: UserService = Depends(get_user_service)
):
    if user_data.id != user_id:
        raise HTTPException(status_code=400, detail="ID mismatch")
    try:
        await service.update_user(
            user_id, User(username=user_data.username, name=user_data.name, email=user_data.email)
        )
    except Exception as e:
        raise http_error(e, "update user")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(user_id: int, service: UserService = Depends(get_user_service)):
    try:
        await service.delete_user(user_id)
    except Exception as e:
        raise http_error(e, "delete user")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
