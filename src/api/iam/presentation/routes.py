"""HTTP routes for IAM bounded context.

Provides the caller's identity and the administrator role management API.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Path

from iam.application.services import RoleAdministrationService, RoleResolver
from iam.application.value_objects import CurrentUser
from iam.dependencies.roles import get_role_administration_service, get_role_resolver
from iam.dependencies.user import get_current_user
from iam.domain.value_objects import UserId
from iam.presentation.models import (
    CurrentUserResponse,
    UpdateRoleRequest,
    UserListResponse,
    UserResponse,
)

router = APIRouter(
    prefix="/iam",
    tags=["iam"],
)


@router.get(
    "/me",
    response_model=CurrentUserResponse,
    summary="Get the current user",
    description="Returns the authenticated caller's profile and effective role.",
    responses={
        200: {"description": "Caller profile and role"},
        401: {"description": "Authentication required"},
    },
)
async def get_me(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    resolver: Annotated[RoleResolver, Depends(get_role_resolver)],
) -> CurrentUserResponse:
    """Resolve the caller's role."""
    role = await resolver.resolve(current_user.user_id.value)
    return CurrentUserResponse.from_domain(current_user, role)


@router.get(
    "/users",
    response_model=UserListResponse,
    summary="List users with roles",
    description="Lists every user with their effective role, ordered by email. "
    "Requires the admin role.",
    responses={
        200: {"description": "Users listed"},
        401: {"description": "Authentication required"},
        403: {"description": "Caller is not an admin"},
    },
)
async def list_users(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[
        RoleAdministrationService, Depends(get_role_administration_service)
    ],
) -> UserListResponse:
    """List users for role administration."""
    entries = await service.list_users(current_user.user_id)
    users = [UserResponse.from_domain(entry) for entry in entries]
    return UserListResponse(users=users, count=len(users))


@router.put(
    "/users/{user_id}/role",
    response_model=UserResponse,
    summary="Replace a user's role",
    description="Replaces the user's single role assignment atomically. "
    "Requires the admin role. Administrators may change their own role.",
    responses={
        200: {"description": "Role replaced"},
        401: {"description": "Authentication required"},
        403: {"description": "Caller is not an admin"},
        404: {"description": "User not found"},
        422: {"description": "Unknown role"},
    },
)
async def set_user_role(
    user_id: Annotated[str, Path(min_length=1, max_length=255)],
    request: UpdateRoleRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[
        RoleAdministrationService, Depends(get_role_administration_service)
    ],
) -> UserResponse:
    """Replace a user's role."""
    entry = await service.set_role(
        caller_id=current_user.user_id,
        target_user_id=UserId(value=user_id),
        new_role=request.role,
    )
    return UserResponse.from_domain(entry)
