"""Repository protocols (ports) for the reservations bounded context.

Implementations never commit; the lifecycle service owns transactions.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol, runtime_checkable

from reservations.domain.aggregates import Reservation
from reservations.domain.value_objects import (
    Equipment,
    ReservationId,
    ReservationStatus,
)


@runtime_checkable
class IReservationRepository(Protocol):
    """Persistence for Reservation aggregates."""

    async def add(self, reservation: Reservation) -> None:
        """Insert a newly submitted reservation.

        Args:
            reservation: The pending reservation
        """
        ...

    async def get_by_id(self, reservation_id: ReservationId) -> Reservation | None:
        """Retrieve a reservation by ID.

        Args:
            reservation_id: The reservation to look up

        Returns:
            The Reservation, or None if not found
        """
        ...

    async def compare_and_set_status(
        self,
        reservation_id: ReservationId,
        expected: ReservationStatus,
        new: ReservationStatus,
        notes: str | None,
        updated_at: datetime,
    ) -> Reservation | None:
        """Atomically move a reservation from ``expected`` to ``new``.

        The status, notes and updated timestamp change in one write, and
        only if the stored status still equals ``expected``.

        Args:
            reservation_id: The reservation to update
            expected: Status the caller last observed
            new: Status to set
            notes: Notes to store alongside the new status
            updated_at: Update timestamp

        Returns:
            The updated Reservation, or None if the stored status no longer
            matched (another writer won) or the record does not exist
        """
        ...

    async def list(self, student_id: str | None = None) -> list[Reservation]:
        """List reservations, newest first.

        Args:
            student_id: Only this student's reservations; None for all

        Returns:
            Reservations ordered by creation time, descending
        """
        ...


@runtime_checkable
class IEquipmentCatalog(Protocol):
    """Read-only equipment reference data."""

    def get(self, ref: str) -> Equipment | None:
        """Find an item by catalog ID or exact name.

        Args:
            ref: Catalog ID or exact equipment name

        Returns:
            The item, or None if the catalog has no match
        """
        ...

    def list_all(self) -> list[Equipment]:
        """List every catalog item."""
        ...
