"""Read-only user profile lookups for other bounded contexts."""

from __future__ import annotations

from collections.abc import Collection

from iam.application.observability import DefaultUserServiceProbe, UserServiceProbe
from iam.domain.value_objects import UserId
from iam.ports.repositories import IUserRepository
from shared_kernel.authorization.types import UserProfile


class UserDirectoryService:
    """Implements the shared ``UserDirectory`` protocol over the user store."""

    def __init__(
        self,
        user_repository: IUserRepository,
        probe: UserServiceProbe | None = None,
    ):
        self._user_repository = user_repository
        self._probe = probe or DefaultUserServiceProbe()

    async def get_profiles(self, user_ids: Collection[str]) -> dict[str, UserProfile]:
        """Look up display profiles for the given user IDs.

        Unknown IDs are left out of the result.
        """
        unique_ids = sorted(set(user_ids))
        if not unique_ids:
            return {}

        users = await self._user_repository.get_many(
            [UserId(value=user_id) for user_id in unique_ids]
        )
        profiles = {
            user.id.value: UserProfile(
                user_id=user.id.value,
                email=user.email,
                display_name=user.display_name,
            )
            for user in users
        }

        self._probe.profiles_looked_up(requested=len(unique_ids), found=len(profiles))
        return profiles
