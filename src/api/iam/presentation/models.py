"""Request and response models for IAM API endpoints."""

from __future__ import annotations

from pydantic import BaseModel, Field

from iam.application.value_objects import CurrentUser, UserWithRole
from shared_kernel.authorization.types import Role


class CurrentUserResponse(BaseModel):
    """The authenticated caller with their effective role.

    Attributes:
        id: User ID (identity provider subject)
        email: Email address
        display_name: Human-readable name, if the provider supplies one
        role: Effective role (student when none is assigned)
    """

    id: str = Field(..., description="User ID (identity provider subject)")
    email: str = Field(..., description="Email address")
    display_name: str | None = Field(None, description="Display name")
    role: Role = Field(..., description="Effective role")

    @classmethod
    def from_domain(cls, user: CurrentUser, role: Role) -> CurrentUserResponse:
        """Convert the authenticated caller and role to an API response."""
        return cls(
            id=user.user_id.value,
            email=user.email,
            display_name=user.display_name,
            role=role,
        )


class UserResponse(BaseModel):
    """A user with their effective role."""

    id: str = Field(..., description="User ID")
    email: str = Field(..., description="Email address")
    display_name: str | None = Field(None, description="Display name")
    role: Role = Field(..., description="Effective role")

    @classmethod
    def from_domain(cls, entry: UserWithRole) -> UserResponse:
        """Convert a UserWithRole view to an API response."""
        return cls(
            id=entry.user.id.value,
            email=entry.user.email,
            display_name=entry.user.display_name,
            role=entry.role,
        )


class UserListResponse(BaseModel):
    """All users ordered by email."""

    users: list[UserResponse] = Field(..., description="Users with their roles")
    count: int = Field(..., description="Number of users")


class UpdateRoleRequest(BaseModel):
    """Request to replace a user's role.

    Attributes:
        role: The new role (student, staff or admin)
    """

    role: Role = Field(..., description="New role", examples=["staff"])
