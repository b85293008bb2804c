from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query, status
from typing import List, Optional

from ..models import ApiResponse
from ..users.models import User as UserModel, UserRole

from .schema import (
    AdminEditedUser,
    AdminEditUser,
    EditorSummary,
    SortOrder,
    UserCreate,
    UserPublic,
    UserSortField,
    UserUpdate,
)
from .service import UserService
from ..auth.dependencies import AdminUser, CurrentUser, get_user_service

router = APIRouter(prefix="/users", tags=["users"])


def _public(users: List[UserModel]) -> List[UserPublic]:
    return [UserPublic.model_validate(user) for user in users]


@router.post("", response_model=ApiResponse[UserPublic], status_code=status.HTTP_201_CREATED)
async def create_user(
    user_data: UserCreate,
    admin: UserModel = AdminUser,
    user_service: UserService = Depends(get_user_service),
):
    """(Admin only) Creates a user with any role."""
    user = await user_service.create_user(
        name=user_data.name,
        email=user_data.email,
        password=user_data.password,
        role=user_data.role,
    )
    return ApiResponse[UserPublic](message="User created successfully", data=UserPublic.model_validate(user))

@router.get("", response_model=ApiResponse[List[UserPublic]])
async def list_users(
    role: Optional[UserRole] = None,
    sort_by: UserSortField = Query(UserSortField.NAME, alias="sortBy"),
    order: SortOrder = SortOrder.ASC,
    admin: UserModel = AdminUser,
    user_service: UserService = Depends(get_user_service),
):
    users = await user_service.list_users(role=role, sort_by=sort_by.column, order=order.value)
    return ApiResponse[List[UserPublic]](message="Users retrieved successfully", data=_public(users))

@router.get("/inactive", response_model=ApiResponse[List[UserPublic]])
async def list_inactive_users(
    admin: UserModel = AdminUser,
    user_service: UserService = Depends(get_user_service),
):
    users = await user_service.list_inactive()
    return ApiResponse[List[UserPublic]](message="Inactive users retrieved successfully", data=_public(users))

@router.get("/{user_id}", response_model=ApiResponse[UserPublic])
async def get_user(
    user_id: str,
    current_user: UserModel = CurrentUser,
    user_service: UserService = Depends(get_user_service),
):
    user = await user_service.get_user(user_id, current_user)
    return ApiResponse[UserPublic](message="User found", data=UserPublic.model_validate(user))

@router.patch("/{user_id}", response_model=ApiResponse[UserPublic])
async def update_user(
    user_id: str,
    changes: UserUpdate,
    current_user: UserModel = CurrentUser,
    user_service: UserService = Depends(get_user_service),
):
    user = await user_service.update_user(user_id, current_user, changes)
    return ApiResponse[UserPublic](message="User updated successfully", data=UserPublic.model_validate(user))

@router.put("/admin/edit/{user_id}", response_model=ApiResponse[AdminEditedUser])
async def admin_edit_user(
    user_id: str,
    changes: AdminEditUser,
    admin: UserModel = AdminUser,
    user_service: UserService = Depends(get_user_service),
):
    """(Admin only) Edits any field of any user, email included, without the current password."""
    user = await user_service.admin_edit_user(user_id, changes)
    edited = AdminEditedUser(
        **UserPublic.model_validate(user).model_dump(),
        edited_by=EditorSummary.model_validate(admin),
        edited_at=datetime.now(timezone.utc),
    )
    return ApiResponse[AdminEditedUser](message="User edited successfully by administrator", data=edited)

@router.delete("/{user_id}", response_model=ApiResponse[None])
async def remove_user(
    user_id: str,
    current_user: UserModel = CurrentUser,
    user_service: UserService = Depends(get_user_service),
):
    await user_service.remove_user(user_id, current_user)
    return ApiResponse[None](message="User removed successfully")
