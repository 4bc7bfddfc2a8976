from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends, status

from ..core.auth import CurrentUser, get_current_user
from ..core.dependencies import get_user_service
from ..schemas.common import ApiResponse, MessageResponse
from ..schemas.user import PasswordChange, ProfileUpdate, UserCreate, UserMe, UserOut, UserUpdate
from ..services.user import UserService

router = APIRouter(dependencies=[Depends(get_current_user)])


@router.get("", response_model=ApiResponse[List[UserOut]])
def list_users(users: UserService = Depends(get_user_service)):
    """Get all users, newest first"""
    data = [UserOut.model_validate(u) for u in users.list_users()]
    return ApiResponse(message="Users retrieved successfully", data=data)


@router.get("/me", response_model=ApiResponse[UserMe])
def get_me(
    current_user: CurrentUser = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
):
    user = users.get_current_user(current_user.id)
    return ApiResponse(message="User retrieved successfully", data=UserMe.model_validate(user))


@router.put("/me", response_model=ApiResponse[UserMe])
def update_me(
    payload: ProfileUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
):
    user = users.update_profile(current_user.id, payload.name)
    return ApiResponse(message="Profile updated successfully", data=UserMe.model_validate(user))


@router.put("/me/change-password", response_model=MessageResponse)
def change_password(
    payload: PasswordChange,
    current_user: CurrentUser = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
):
    users.change_password(current_user.id, payload.current_password, payload.new_password)
    return MessageResponse(message="Password changed successfully")


@router.get("/{user_id}", response_model=ApiResponse[UserOut])
def get_user(user_id: UUID, users: UserService = Depends(get_user_service)):
    user = users.get_user(user_id)
    return ApiResponse(message="User retrieved successfully", data=UserOut.model_validate(user))


@router.post("", response_model=ApiResponse[UserOut], status_code=status.HTTP_201_CREATED)
def create_user(payload: UserCreate, users: UserService = Depends(get_user_service)):
    user = users.create_user(email=payload.email, password=payload.password, name=payload.name)
    return ApiResponse(message="User created successfully", data=UserOut.model_validate(user))


@router.put("/{user_id}", response_model=ApiResponse[UserOut])
def update_user(user_id: UUID, payload: UserUpdate, users: UserService = Depends(get_user_service)):
    user = users.update_user(user_id, payload.model_dump(exclude_unset=True))
    return ApiResponse(message="User updated successfully", data=UserOut.model_validate(user))


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(user_id: UUID, users: UserService = Depends(get_user_service)):
    users.delete_user(user_id)
    return MessageResponse(message="User deleted successfully")
