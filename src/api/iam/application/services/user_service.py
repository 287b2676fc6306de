"""User application service for IAM bounded context.

Handles user provisioning from the identity provider with JIT
(just-in-time) creation.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from iam.application.observability import DefaultUserServiceProbe, UserServiceProbe
from iam.domain.aggregates import User
from iam.domain.value_objects import UserId
from iam.ports.repositories import IUserRepository


class UserService:
    """Application service for user management.

    Handles user provisioning from the identity provider with JIT creation.
    """

    def __init__(
        self,
        user_repository: IUserRepository,
        session: AsyncSession,
        probe: UserServiceProbe | None = None,
    ):
        """Initialize UserService with dependencies.

        Args:
            user_repository: Repository for user persistence
            session: Database session for transaction management
            probe: Optional domain probe for observability
        """
        self._user_repository = user_repository
        self._probe = probe or DefaultUserServiceProbe()
        self._session = session

    async def ensure_user(
        self, user_id: UserId, email: str, display_name: str | None = None
    ) -> User:
        """Ensure user exists in database (find-or-create pattern).

        Creates the user on first sight and syncs email and display name
        whenever the identity provider reports new values.

        Args:
            user_id: The user's ID (token subject)
            email: The user's email (from token claims)
            display_name: The user's display name (from token claims)

        Returns:
            The User aggregate (existing, updated or newly created)
        """
        was_created = False
        was_updated = False
        try:
            async with self._session.begin():
                existing = await self._user_repository.get_by_id(user_id)
                if existing is None:
                    user = User(id=user_id, email=email, display_name=display_name)
                    await self._user_repository.save(user)
                    was_created = True
                elif existing.differs_from_claims(email, display_name):
                    user = existing.with_profile(email, display_name)
                    await self._user_repository.save(user)
                    was_updated = True
                else:
                    user = existing

        except Exception as e:
            self._probe.user_provision_failed(
                user_id=user_id.value,
                email=email,
                error=str(e),
            )
            raise

        self._probe.user_ensured(
            user_id=user_id.value,
            email=email,
            was_created=was_created,
            was_updated=was_updated,
        )
        return user
