"""Dependency providers for role resolution and administration.

Role checks and profile lookups run on the read session so they never
open a transaction on the write session a service is about to begin.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from iam.application.observability import (
    DefaultRoleAdministrationProbe,
    DefaultRoleResolverProbe,
    DefaultUserServiceProbe,
    RoleAdministrationProbe,
    RoleResolverProbe,
)
from iam.application.services import (
    RoleAdministrationService,
    RoleResolver,
    UserDirectoryService,
)
from iam.dependencies.user import get_user_repository
from iam.infrastructure.role_assignment_repository import RoleAssignmentRepository
from iam.infrastructure.user_repository import UserRepository
from infrastructure.database.dependencies import get_read_session, get_write_session


def get_role_resolver_probe() -> RoleResolverProbe:
    return DefaultRoleResolverProbe()


def get_role_administration_probe() -> RoleAdministrationProbe:
    return DefaultRoleAdministrationProbe()


def get_role_resolver(
    session: Annotated[AsyncSession, Depends(get_read_session)],
    probe: Annotated[RoleResolverProbe, Depends(get_role_resolver_probe)],
) -> RoleResolver:
    """Get RoleResolver instance.

    Args:
        session: Read session for role lookups
        probe: Role resolver probe

    Returns:
        RoleResolver implementing the shared RoleAuthority protocol
    """
    return RoleResolver(
        role_repository=RoleAssignmentRepository(session=session),
        probe=probe,
    )


def get_user_directory(
    session: Annotated[AsyncSession, Depends(get_read_session)],
) -> UserDirectoryService:
    """Get UserDirectoryService instance (shared UserDirectory protocol)."""
    return UserDirectoryService(
        user_repository=UserRepository(session=session),
        probe=DefaultUserServiceProbe(),
    )


def get_role_administration_service(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    user_repo: Annotated[UserRepository, Depends(get_user_repository)],
    resolver: Annotated[RoleResolver, Depends(get_role_resolver)],
    probe: Annotated[
        RoleAdministrationProbe, Depends(get_role_administration_probe)
    ],
) -> RoleAdministrationService:
    """Get RoleAdministrationService instance.

    Args:
        session: Write session owning the role change transaction
        user_repo: User repository on the same session
        resolver: Role gate for the caller
        probe: Role administration probe

    Returns:
        RoleAdministrationService instance
    """
    return RoleAdministrationService(
        session=session,
        user_repository=user_repo,
        role_repository=RoleAssignmentRepository(session=session),
        authority=resolver,
        probe=probe,
    )
