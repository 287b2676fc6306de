"""Dependency injection for the reservations bounded context.

The only module in this context allowed to import IAM: it adapts the
authenticated CurrentUser to a plain caller ID and hands IAM's role
resolver and user directory to the service as shared-kernel protocols.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from iam.application.value_objects import CurrentUser
from iam.dependencies.roles import get_role_resolver, get_user_directory
from iam.dependencies.user import get_current_user, get_current_user_for_stream
from infrastructure.database.dependencies import get_write_session
from infrastructure.dependencies import get_change_feed
from infrastructure.settings import get_reservation_settings
from reservations.application.observability import (
    DefaultReservationServiceProbe,
    ReservationServiceProbe,
)
from reservations.application.services import ReservationService
from reservations.domain.value_objects import ReservationRules
from reservations.infrastructure.equipment_catalog import StaticEquipmentCatalog
from reservations.infrastructure.reservation_repository import ReservationRepository
from reservations.ports.repositories import IEquipmentCatalog
from shared_kernel.authorization.protocols import RoleAuthority, UserDirectory
from shared_kernel.change_feed import ChangeFeed

_catalog = StaticEquipmentCatalog()


def get_caller_id(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> str:
    """Authenticated caller's user ID."""
    return current_user.user_id.value


def get_stream_caller_id(
    current_user: Annotated[CurrentUser, Depends(get_current_user_for_stream)],
) -> str:
    """Authenticated caller's user ID for streaming endpoints."""
    return current_user.user_id.value


def get_equipment_catalog() -> IEquipmentCatalog:
    return _catalog


def get_role_authority(
    resolver: Annotated[RoleAuthority, Depends(get_role_resolver)],
) -> RoleAuthority:
    return resolver


def get_directory(
    directory: Annotated[UserDirectory, Depends(get_user_directory)],
) -> UserDirectory:
    return directory


def get_reservation_service_probe() -> ReservationServiceProbe:
    return DefaultReservationServiceProbe()


def get_reservation_service(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    catalog: Annotated[IEquipmentCatalog, Depends(get_equipment_catalog)],
    authority: Annotated[RoleAuthority, Depends(get_role_authority)],
    directory: Annotated[UserDirectory, Depends(get_directory)],
    change_feed: Annotated[ChangeFeed, Depends(get_change_feed)],
    probe: Annotated[
        ReservationServiceProbe, Depends(get_reservation_service_probe)
    ],
) -> ReservationService:
    """Get ReservationService instance.

    Args:
        session: Write session owning reservation transactions
        catalog: Equipment catalog
        authority: Role gate (IAM role resolver)
        directory: Profile lookups (IAM user directory)
        change_feed: Application-scoped change feed
        probe: Reservation service probe

    Returns:
        ReservationService instance
    """
    settings = get_reservation_settings()
    return ReservationService(
        session=session,
        repository=ReservationRepository(session=session),
        catalog=catalog,
        authority=authority,
        directory=directory,
        change_feed=change_feed,
        rules=ReservationRules(
            time_slot_max_length=settings.time_slot_max_length,
            notes_max_length=settings.notes_max_length,
        ),
        campus_timezone=settings.tzinfo,
        probe=probe,
    )
