"""Reservation lifecycle service.

Owns the reservation state machine: students submit requests, staff and
admins move them through pending -> approved/rejected -> completed. Every
status write is a compare-and-set on the stored status, so concurrent
reviewers cannot both act on the same reservation.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, date, datetime, tzinfo

from sqlalchemy.ext.asyncio import AsyncSession

from reservations.application.observability import (
    DefaultReservationServiceProbe,
    ReservationServiceProbe,
)
from reservations.application.value_objects import ReservationView
from reservations.domain.aggregates import Reservation
from reservations.domain.events import DomainEvent
from reservations.domain.value_objects import (
    ReservationId,
    ReservationRules,
    ReservationStatus,
)
from reservations.ports.repositories import IEquipmentCatalog, IReservationRepository
from shared_kernel.authorization.protocols import RoleAuthority, UserDirectory
from shared_kernel.authorization.types import REVIEWER_ROLES, Role
from shared_kernel.change_feed import ChangeFeed, ChangeStream, ReservationChange
from shared_kernel.exceptions import (
    ConcurrentModificationError,
    InvalidTransitionError,
    NotFoundError,
    UnknownEquipmentError,
    ValidationError,
)


def _utc_now() -> datetime:
    return datetime.now(UTC)


class ReservationService:
    """Application service for the reservation lifecycle."""

    def __init__(
        self,
        session: AsyncSession,
        repository: IReservationRepository,
        catalog: IEquipmentCatalog,
        authority: RoleAuthority,
        directory: UserDirectory,
        change_feed: ChangeFeed,
        rules: ReservationRules | None = None,
        campus_timezone: tzinfo = UTC,
        clock: Callable[[], datetime] = _utc_now,
        probe: ReservationServiceProbe | None = None,
    ):
        """Initialize ReservationService with dependencies.

        Args:
            session: Database session for transaction management
            repository: Reservation store
            catalog: Equipment reference data
            authority: Role gate for callers
            directory: Profile lookups for the staff list view
            change_feed: Where committed changes are published
            rules: Input limits for time slots and notes
            campus_timezone: Timezone that decides which day is "today"
            clock: Source of the current UTC time
            probe: Optional domain probe for observability
        """
        self._session = session
        self._repository = repository
        self._catalog = catalog
        self._authority = authority
        self._directory = directory
        self._change_feed = change_feed
        self._rules = rules or ReservationRules()
        self._campus_timezone = campus_timezone
        self._clock = clock
        self._probe = probe or DefaultReservationServiceProbe()

    def _today(self, now: datetime) -> date:
        return now.astimezone(self._campus_timezone).date()

    async def submit(
        self,
        caller_id: str | None,
        equipment_ref: str,
        reservation_date: date,
        time_slot: str,
        notes: str | None = None,
    ) -> Reservation:
        """Submit a new pending reservation for the caller.

        The caller is always the owner; there is no way to submit on behalf
        of another student.

        Args:
            caller_id: The authenticated student
            equipment_ref: Catalog ID or exact equipment name
            reservation_date: Requested day (today or later, campus time)
            time_slot: Free-text slot
            notes: Optional notes

        Returns:
            The stored pending reservation

        Raises:
            NotAuthenticatedError: If there is no caller
            PermissionDeniedError: If the caller is not a student
            UnknownEquipmentError: If the equipment is not in the catalog
            ValidationError: If the date, time slot or notes are invalid
        """
        await self._authority.require_role(caller_id, Role.STUDENT)
        assert caller_id is not None

        equipment = self._catalog.get(equipment_ref)
        if equipment is None:
            self._probe.unknown_equipment_requested(caller_id, equipment_ref)
            raise UnknownEquipmentError(equipment_ref)

        now = self._clock()
        try:
            reservation = Reservation.submit(
                student_id=caller_id,
                equipment=equipment,
                reservation_date=reservation_date,
                time_slot=time_slot,
                notes=notes,
                today=self._today(now),
                rules=self._rules,
                now=now,
            )
        except ValidationError as e:
            self._probe.submission_rejected(caller_id, e.field, str(e))
            raise

        async with self._session.begin():
            await self._repository.add(reservation)

        self._probe.reservation_submitted(
            reservation_id=reservation.id.value,
            student_id=caller_id,
            equipment_name=equipment.name,
        )
        await self._publish(reservation.collect_events())
        return reservation

    async def list_for_student(self, caller_id: str | None) -> list[Reservation]:
        """List the caller's own reservations, newest first.

        Raises:
            NotAuthenticatedError: If there is no caller
        """
        await self._authority.resolve(caller_id)
        assert caller_id is not None

        reservations = await self._repository.list(student_id=caller_id)
        self._probe.reservations_listed(count=len(reservations), student_id=caller_id)
        return reservations

    async def list_all(self, caller_id: str | None) -> list[ReservationView]:
        """List every reservation with owner profiles, newest first.

        Raises:
            NotAuthenticatedError: If there is no caller
            PermissionDeniedError: If the caller is not staff or admin
        """
        await self._authority.require_role(caller_id, *REVIEWER_ROLES)

        reservations = await self._repository.list()
        profiles = await self._directory.get_profiles(
            {reservation.student_id for reservation in reservations}
        )

        views = []
        for reservation in reservations:
            profile = profiles.get(reservation.student_id)
            views.append(
                ReservationView(
                    reservation=reservation,
                    student_email=profile.email if profile else None,
                    student_display_name=profile.display_name if profile else None,
                )
            )

        self._probe.reservations_listed(count=len(views), student_id=None)
        return views

    async def get(self, caller_id: str | None, reservation_id: str) -> Reservation:
        """Get one reservation visible to the caller.

        Students only see their own reservations; another student's record
        is reported as not found.

        Raises:
            NotAuthenticatedError: If there is no caller
            NotFoundError: If the reservation does not exist or is not visible
        """
        role = await self._authority.resolve(caller_id)

        reservation = await self._load(reservation_id)
        if reservation is None or (
            role not in REVIEWER_ROLES and reservation.student_id != caller_id
        ):
            self._probe.reservation_not_found(reservation_id)
            raise NotFoundError(f"Reservation {reservation_id} not found")
        return reservation

    async def transition(
        self,
        caller_id: str | None,
        reservation_id: str,
        target_status: ReservationStatus,
        notes: str | None = None,
    ) -> Reservation:
        """Move a reservation to ``target_status``.

        Supplied notes replace the stored notes in the same write as the
        status change.

        Args:
            caller_id: The acting staff member or admin
            reservation_id: The reservation to update
            target_status: Requested status
            notes: Optional staff notes

        Returns:
            The updated reservation

        Raises:
            NotAuthenticatedError: If there is no caller
            PermissionDeniedError: If the caller is not staff or admin
            NotFoundError: If the reservation does not exist
            InvalidTransitionError: If the target is not reachable from the
                current status
            ValidationError: If the notes are too long
            ConcurrentModificationError: If another writer changed the status
                between read and write
        """
        await self._authority.require_role(caller_id, *REVIEWER_ROLES)

        async with self._session.begin():
            reservation = await self._load(reservation_id)
            if reservation is None:
                self._probe.reservation_not_found(reservation_id)
                raise NotFoundError(f"Reservation {reservation_id} not found")

            expected = reservation.status
            try:
                reservation.transition_to(
                    target_status,
                    notes=notes,
                    rules=self._rules,
                    now=self._clock(),
                )
            except InvalidTransitionError:
                self._probe.invalid_transition_attempted(
                    reservation_id, expected.value, str(target_status)
                )
                raise

            updated = await self._repository.compare_and_set_status(
                reservation.id,
                expected=expected,
                new=reservation.status,
                notes=reservation.notes,
                updated_at=reservation.updated_at,
            )
            if updated is None:
                self._probe.transition_conflict(reservation_id, expected.value)
                raise ConcurrentModificationError(
                    f"Reservation {reservation_id} was modified concurrently"
                )

        self._probe.reservation_transitioned(
            reservation_id=reservation_id,
            from_status=expected.value,
            to_status=updated.status.value,
            actor_id=str(caller_id),
        )
        await self._publish(reservation.collect_events())
        return updated

    async def subscribe_changes(self, caller_id: str | None) -> ChangeStream:
        """Open a change stream scoped to what the caller may see.

        Students receive changes to their own reservations; staff and
        admins receive every change.

        Raises:
            NotAuthenticatedError: If there is no caller
        """
        role = await self._authority.resolve(caller_id)
        student_filter = None if role in REVIEWER_ROLES else caller_id
        return self._change_feed.subscribe(student_filter)

    async def _load(self, reservation_id: str) -> Reservation | None:
        try:
            parsed = ReservationId.from_string(reservation_id)
        except ValueError:
            return None
        return await self._repository.get_by_id(parsed)

    async def _publish(self, events: list[DomainEvent]) -> None:
        # The write is already committed; a feed outage must not fail it
        for event in events:
            change = ReservationChange(
                reservation_id=event.reservation_id,
                student_id=event.student_id,
                new_status=event.status,
                occurred_at=event.occurred_at,
            )
            try:
                await self._change_feed.publish(change)
            except Exception as e:
                self._probe.change_publish_failed(event.reservation_id, str(e))
