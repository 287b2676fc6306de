"""Application-layer value objects for IAM bounded context.

These represent the authentication context of a request and read-only
views returned from queries, not core business entities.
"""

from __future__ import annotations

from dataclasses import dataclass

from iam.domain.aggregates import User
from iam.domain.value_objects import UserId
from shared_kernel.authorization.types import Role


@dataclass(frozen=True)
class CurrentUser:
    """Represents the currently authenticated user.

    Extracted from the validated session token and used throughout the
    request lifecycle.
    """

    user_id: UserId
    email: str
    display_name: str | None = None


@dataclass(frozen=True)
class UserWithRole:
    """A user joined with their effective role.

    Attributes:
        user: The user aggregate
        role: The resolved role (student when no assignment exists)
    """

    user: User
    role: Role
