"""Identity and role resolution for IAM bounded context."""

from __future__ import annotations

from iam.application.observability import (
    DefaultRoleResolverProbe,
    RoleResolverProbe,
)
from iam.domain.aggregates import resolve_role
from iam.domain.value_objects import UserId
from iam.ports.repositories import IRoleAssignmentRepository
from shared_kernel.authorization.types import Role
from shared_kernel.exceptions import NotAuthenticatedError, PermissionDeniedError


class RoleResolver:
    """Resolves a caller's effective role and enforces role gates.

    Read-only. Implements the shared ``RoleAuthority`` protocol so other
    bounded contexts can gate operations without touching role storage.
    Role checks read the store on every call, so a role change takes
    effect on the caller's next operation.
    """

    def __init__(
        self,
        role_repository: IRoleAssignmentRepository,
        probe: RoleResolverProbe | None = None,
    ):
        """Initialize RoleResolver with dependencies.

        Args:
            role_repository: Repository for role assignments
            probe: Optional domain probe for observability
        """
        self._role_repository = role_repository
        self._probe = probe or DefaultRoleResolverProbe()

    async def resolve(self, user_id: str | None) -> Role:
        """Resolve the caller's effective role.

        Args:
            user_id: The authenticated caller's ID, or None without a session

        Returns:
            The caller's role (student when no assignment exists)

        Raises:
            NotAuthenticatedError: If there is no caller
        """
        if not user_id:
            self._probe.unauthenticated_caller()
            raise NotAuthenticatedError("Authentication required")

        assignments = await self._role_repository.get_for_user(UserId(value=user_id))
        role = resolve_role(assignments)

        self._probe.role_resolved(
            user_id=user_id, role=role.value, was_default=not assignments
        )
        return role

    async def require_role(self, user_id: str | None, *allowed: Role) -> Role:
        """Resolve the caller's role and require it to be one of ``allowed``.

        Args:
            user_id: The authenticated caller's ID, or None without a session
            allowed: Roles permitted to perform the operation

        Returns:
            The caller's resolved role

        Raises:
            NotAuthenticatedError: If there is no caller
            PermissionDeniedError: If the resolved role is not allowed
        """
        role = await self.resolve(user_id)
        if role not in allowed:
            allowed_values = sorted(r.value for r in allowed)
            self._probe.permission_denied(
                user_id=str(user_id), role=role.value, allowed=allowed_values
            )
            raise PermissionDeniedError(
                f"Role '{role.value}' may not perform this operation "
                f"(requires one of: {', '.join(allowed_values)})"
            )
        return role
