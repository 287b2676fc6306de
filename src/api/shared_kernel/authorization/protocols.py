"""Authorization protocols consumed across bounded contexts.

The IAM context provides the implementations; other contexts depend only
on these protocols so that role storage stays an IAM concern.
"""

from __future__ import annotations

from collections.abc import Collection
from typing import Protocol, runtime_checkable

from shared_kernel.authorization.types import Role, UserProfile


@runtime_checkable
class RoleAuthority(Protocol):
    """Resolves a caller's effective role and enforces role gates."""

    async def resolve(self, user_id: str | None) -> Role:
        """Resolve the caller's effective role.

        Args:
            user_id: The authenticated caller's ID, or None if there is no session

        Returns:
            The caller's role (STUDENT when no assignment exists)

        Raises:
            NotAuthenticatedError: If user_id is None
        """
        ...

    async def require_role(self, user_id: str | None, *allowed: Role) -> Role:
        """Resolve the caller's role and require it to be one of ``allowed``.

        Args:
            user_id: The authenticated caller's ID, or None if there is no session
            allowed: Roles that may perform the operation

        Returns:
            The caller's resolved role

        Raises:
            NotAuthenticatedError: If user_id is None
            PermissionDeniedError: If the resolved role is not allowed
        """
        ...


@runtime_checkable
class UserDirectory(Protocol):
    """Read-only lookup of user profiles for display joins."""

    async def get_profiles(self, user_ids: Collection[str]) -> dict[str, UserProfile]:
        """Look up profiles for the given user IDs.

        Args:
            user_ids: IDs to look up

        Returns:
            Mapping of user ID to profile. Unknown IDs are absent.
        """
        ...
