"""Role assignment aggregate for IAM context."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime

from iam.domain.value_objects import UserId
from shared_kernel.authorization.types import DEFAULT_ROLE, Role


@dataclass(frozen=True)
class RoleAssignment:
    """The single role a user holds.

    Business rules:
    - A user has at most one assignment; replacing it swaps the whole row
    - A user without an assignment resolves to the default role (student)
    - Assignments are made by an administrator, recorded in assigned_by
    """

    user_id: UserId
    role: Role
    assigned_by: UserId | None
    assigned_at: datetime

    @classmethod
    def assign(
        cls,
        user_id: UserId,
        role: Role,
        assigned_by: UserId | None,
        now: datetime | None = None,
    ) -> RoleAssignment:
        """Factory method for a new assignment.

        Args:
            user_id: The user receiving the role
            role: The role to hold
            assigned_by: The administrator making the assignment
            now: Assignment timestamp (defaults to the current UTC time)

        Returns:
            A new RoleAssignment
        """
        return cls(
            user_id=user_id,
            role=Role(role),
            assigned_by=assigned_by,
            assigned_at=now or datetime.now(UTC),
        )


def resolve_role(assignments: Iterable[RoleAssignment]) -> Role:
    """Resolve the effective role from a user's stored assignments.

    The store holds at most one assignment per user. When none exists the
    user is a student. Should legacy data ever yield several rows, the most
    recent assignment wins.
    """
    latest: RoleAssignment | None = None
    for assignment in assignments:
        if latest is None or assignment.assigned_at > latest.assigned_at:
            latest = assignment
    if latest is None:
        return DEFAULT_ROLE
    return latest.role
