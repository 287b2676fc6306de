"""Role administration service for IAM bounded context.

Lets administrators list users and replace a user's single role.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from iam.application.observability import (
    DefaultRoleAdministrationProbe,
    RoleAdministrationProbe,
)
from iam.application.value_objects import UserWithRole
from iam.domain.aggregates import RoleAssignment, resolve_role
from iam.domain.value_objects import UserId
from iam.ports.repositories import IRoleAssignmentRepository, IUserRepository
from shared_kernel.authorization.protocols import RoleAuthority
from shared_kernel.authorization.types import Role
from shared_kernel.exceptions import NotFoundError


class RoleAdministrationService:
    """Application service for administering user roles.

    Every operation requires the caller to resolve to admin. Replacing a
    role is a single atomic upsert keyed by user, so the at-most-one-role
    invariant holds even under concurrent administrators. Administrators
    may change their own role, including demoting themselves.
    """

    def __init__(
        self,
        session: AsyncSession,
        user_repository: IUserRepository,
        role_repository: IRoleAssignmentRepository,
        authority: RoleAuthority,
        probe: RoleAdministrationProbe | None = None,
    ):
        """Initialize RoleAdministrationService with dependencies.

        Args:
            session: Database session for transaction management
            user_repository: Repository for users
            role_repository: Repository for role assignments
            authority: Role gate for the caller
            probe: Optional domain probe for observability
        """
        self._session = session
        self._user_repository = user_repository
        self._role_repository = role_repository
        self._authority = authority
        self._probe = probe or DefaultRoleAdministrationProbe()

    async def set_role(
        self,
        caller_id: UserId | None,
        target_user_id: UserId,
        new_role: Role,
    ) -> UserWithRole:
        """Replace the target user's role.

        Args:
            caller_id: The acting administrator
            target_user_id: The user whose role changes
            new_role: The role to assign

        Returns:
            The target user with the new role

        Raises:
            NotAuthenticatedError: If there is no caller
            PermissionDeniedError: If the caller is not an admin
            NotFoundError: If the target user does not exist
        """
        await self._authority.require_role(
            caller_id.value if caller_id else None, Role.ADMIN
        )

        async with self._session.begin():
            user = await self._user_repository.get_by_id(target_user_id)
            if user is None:
                self._probe.role_change_target_not_found(target_user_id.value)
                raise NotFoundError(f"User {target_user_id.value} not found")

            previous = resolve_role(
                await self._role_repository.get_for_user(target_user_id)
            )
            assignment = RoleAssignment.assign(
                user_id=target_user_id,
                role=new_role,
                assigned_by=caller_id,
            )
            await self._role_repository.replace(assignment)

        self._probe.role_changed(
            target_user_id=target_user_id.value,
            old_role=previous.value,
            new_role=assignment.role.value,
            changed_by=caller_id.value if caller_id else "",
        )

        return UserWithRole(user=user, role=assignment.role)

    async def list_users(self, caller_id: UserId | None) -> list[UserWithRole]:
        """List every user with their resolved role, ordered by email.

        Raises:
            NotAuthenticatedError: If there is no caller
            PermissionDeniedError: If the caller is not an admin
        """
        await self._authority.require_role(
            caller_id.value if caller_id else None, Role.ADMIN
        )

        users = await self._user_repository.list_all()
        assignments: dict[str, list[RoleAssignment]] = {}
        for assignment in await self._role_repository.list_all():
            assignments.setdefault(assignment.user_id.value, []).append(assignment)

        result = [
            UserWithRole(
                user=user,
                role=resolve_role(assignments.get(user.id.value, [])),
            )
            for user in sorted(users, key=lambda u: u.email.lower())
        ]

        self._probe.users_listed(count=len(result))
        return result
