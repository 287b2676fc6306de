"""PostgreSQL implementation of IUserRepository."""

from __future__ import annotations

from collections.abc import Collection

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from iam.domain.aggregates import User
from iam.domain.value_objects import UserId
from iam.infrastructure.models import UserModel
from iam.infrastructure.observability import (
    DefaultUserRepositoryProbe,
    UserRepositoryProbe,
)
from iam.ports.repositories import IUserRepository


class UserRepository(IUserRepository):
    """PostgreSQL-backed repository for User aggregates.

    Never commits; the calling service owns the transaction.
    """

    def __init__(
        self, session: AsyncSession, probe: UserRepositoryProbe | None = None
    ) -> None:
        """Initialize repository with database session and probe.

        Args:
            session: AsyncSession from FastAPI dependency injection
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultUserRepositoryProbe()

    async def save(self, user: User) -> None:
        """Persist a user aggregate.

        Creates a new user or updates an existing one's profile.

        Args:
            user: The User aggregate to persist
        """
        stmt = select(UserModel).where(UserModel.id == user.id.value)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model:
            model.email = user.email
            model.display_name = user.display_name
        else:
            model = UserModel(
                id=user.id.value,
                email=user.email,
                display_name=user.display_name,
            )
            self._session.add(model)

        await self._session.flush()
        self._probe.user_saved(user.id.value, user.email)

    async def get_by_id(self, user_id: UserId) -> User | None:
        """Retrieve a user by their ID.

        Args:
            user_id: The unique identifier of the user

        Returns:
            The User aggregate, or None if not found
        """
        stmt = select(UserModel).where(UserModel.id == user_id.value)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            self._probe.user_not_found(user_id.value)
            return None

        self._probe.user_retrieved(user_id.value)
        return self._to_domain(model)

    async def get_many(self, user_ids: Collection[UserId]) -> list[User]:
        """Retrieve several users in one query; unknown IDs are skipped."""
        if not user_ids:
            return []

        stmt = select(UserModel).where(
            UserModel.id.in_([user_id.value for user_id in user_ids])
        )
        result = await self._session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    async def list_all(self) -> list[User]:
        """List every user ordered by email."""
        stmt = select(UserModel).order_by(UserModel.email, UserModel.id)
        result = await self._session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    @staticmethod
    def _to_domain(model: UserModel) -> User:
        return User(
            id=UserId(value=model.id),
            email=model.email,
            display_name=model.display_name,
        )
