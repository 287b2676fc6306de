"""Repository protocols (ports) for IAM bounded context.

Repository protocols define the interface for persisting and retrieving
aggregates. Implementations never commit; the calling service owns the
transaction.
"""

from __future__ import annotations

from collections.abc import Collection
from typing import Protocol, runtime_checkable

from iam.domain.aggregates import RoleAssignment, User
from iam.domain.value_objects import UserId


@runtime_checkable
class IUserRepository(Protocol):
    """Repository for User aggregate persistence."""

    async def save(self, user: User) -> None:
        """Persist a user aggregate.

        Creates a new user or updates an existing one's profile.

        Args:
            user: The User aggregate to persist
        """
        ...

    async def get_by_id(self, user_id: UserId) -> User | None:
        """Retrieve a user by their ID.

        Args:
            user_id: The unique identifier of the user

        Returns:
            The User aggregate, or None if not found
        """
        ...

    async def get_many(self, user_ids: Collection[UserId]) -> list[User]:
        """Retrieve several users at once.

        Args:
            user_ids: IDs to look up

        Returns:
            The users found; unknown IDs are skipped
        """
        ...

    async def list_all(self) -> list[User]:
        """List every user ordered by email."""
        ...


@runtime_checkable
class IRoleAssignmentRepository(Protocol):
    """Repository for RoleAssignment persistence.

    At most one assignment exists per user. ``replace`` must swap it
    atomically so that no reader ever observes zero or two rows.
    """

    async def replace(self, assignment: RoleAssignment) -> None:
        """Insert or overwrite the user's single assignment in one statement.

        Args:
            assignment: The new assignment
        """
        ...

    async def get_for_user(self, user_id: UserId) -> list[RoleAssignment]:
        """Retrieve the user's assignments (zero or one).

        Args:
            user_id: The user to look up

        Returns:
            The stored assignments
        """
        ...

    async def list_all(self) -> list[RoleAssignment]:
        """List every stored assignment."""
        ...
