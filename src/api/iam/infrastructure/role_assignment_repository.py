"""PostgreSQL implementation of IRoleAssignmentRepository.

Replacement is a single ``INSERT ... ON CONFLICT (user_id) DO UPDATE``
so a user never holds zero rows mid-change or two rows after a race.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from iam.domain.aggregates import RoleAssignment
from iam.domain.value_objects import UserId
from iam.infrastructure.models import RoleAssignmentModel
from iam.infrastructure.observability import (
    DefaultRoleAssignmentRepositoryProbe,
    RoleAssignmentRepositoryProbe,
)
from iam.ports.repositories import IRoleAssignmentRepository
from shared_kernel.authorization.types import Role


class RoleAssignmentRepository(IRoleAssignmentRepository):
    """PostgreSQL-backed repository for role assignments."""

    def __init__(
        self,
        session: AsyncSession,
        probe: RoleAssignmentRepositoryProbe | None = None,
    ) -> None:
        self._session = session
        self._probe = probe or DefaultRoleAssignmentRepositoryProbe()

    async def replace(self, assignment: RoleAssignment) -> None:
        """Upsert the user's single assignment in one statement."""
        values = {
            "user_id": assignment.user_id.value,
            "role": assignment.role.value,
            "assigned_by": (
                assignment.assigned_by.value if assignment.assigned_by else None
            ),
            "assigned_at": assignment.assigned_at,
        }
        stmt = insert(RoleAssignmentModel).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[RoleAssignmentModel.user_id],
            set_={
                "role": stmt.excluded.role,
                "assigned_by": stmt.excluded.assigned_by,
                "assigned_at": stmt.excluded.assigned_at,
            },
        )
        await self._session.execute(stmt)
        self._probe.assignment_replaced(
            assignment.user_id.value, assignment.role.value
        )

    async def get_for_user(self, user_id: UserId) -> list[RoleAssignment]:
        """Retrieve the user's assignments (zero or one)."""
        stmt = select(RoleAssignmentModel).where(
            RoleAssignmentModel.user_id == user_id.value
        )
        result = await self._session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    async def list_all(self) -> list[RoleAssignment]:
        """List every stored assignment."""
        result = await self._session.execute(select(RoleAssignmentModel))
        return [self._to_domain(model) for model in result.scalars().all()]

    @staticmethod
    def _to_domain(model: RoleAssignmentModel) -> RoleAssignment:
        return RoleAssignment(
            user_id=UserId(value=model.user_id),
            role=Role(model.role),
            assigned_by=UserId(value=model.assigned_by) if model.assigned_by else None,
            assigned_at=model.assigned_at,
        )
