"""PostgreSQL implementation of IReservationRepository.

Status changes use ``UPDATE ... WHERE id = :id AND status = :expected
RETURNING ...``: the database serializes competing writers on the row, and
the loser's update matches nothing.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from reservations.domain.aggregates import Reservation
from reservations.domain.value_objects import ReservationId, ReservationStatus
from reservations.infrastructure.models import ReservationModel
from reservations.infrastructure.observability import (
    DefaultReservationRepositoryProbe,
    ReservationRepositoryProbe,
)
from reservations.ports.repositories import IReservationRepository

_table = ReservationModel.__table__


class ReservationRepository(IReservationRepository):
    """PostgreSQL-backed store for Reservation aggregates.

    Never commits; the lifecycle service owns the transaction.
    """

    def __init__(
        self,
        session: AsyncSession,
        probe: ReservationRepositoryProbe | None = None,
    ) -> None:
        """Initialize repository with database session and probe.

        Args:
            session: AsyncSession from FastAPI dependency injection
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultReservationRepositoryProbe()

    async def add(self, reservation: Reservation) -> None:
        """Insert a newly submitted reservation."""
        model = ReservationModel(
            id=reservation.id.value,
            student_id=reservation.student_id,
            equipment_name=reservation.equipment_name,
            equipment_category=reservation.equipment_category,
            reservation_date=reservation.reservation_date,
            time_slot=reservation.time_slot,
            notes=reservation.notes,
            status=reservation.status.value,
            created_at=reservation.created_at,
            updated_at=reservation.updated_at,
        )
        self._session.add(model)
        await self._session.flush()
        self._probe.reservation_added(reservation.id.value, reservation.student_id)

    async def get_by_id(self, reservation_id: ReservationId) -> Reservation | None:
        """Retrieve a reservation by ID."""
        stmt = select(*_table.c).where(_table.c.id == reservation_id.value)
        result = await self._session.execute(stmt)
        row = result.mappings().one_or_none()
        if row is None:
            return None
        return self._to_domain(row)

    async def compare_and_set_status(
        self,
        reservation_id: ReservationId,
        expected: ReservationStatus,
        new: ReservationStatus,
        notes: str | None,
        updated_at: datetime,
    ) -> Reservation | None:
        """Atomically swap the status when it still equals ``expected``."""
        stmt = (
            update(_table)
            .where(
                _table.c.id == reservation_id.value,
                _table.c.status == expected.value,
            )
            .values(status=new.value, notes=notes, updated_at=updated_at)
            .returning(*_table.c)
        )
        result = await self._session.execute(stmt)
        row = result.mappings().one_or_none()

        if row is None:
            self._probe.status_swap_missed(reservation_id.value, expected.value)
            return None

        self._probe.status_swapped(reservation_id.value, expected.value, new.value)
        return self._to_domain(row)

    async def list(self, student_id: str | None = None) -> list[Reservation]:
        """List reservations newest first, optionally for one student."""
        stmt = select(*_table.c).order_by(
            _table.c.created_at.desc(), _table.c.id.desc()
        )
        if student_id is not None:
            stmt = stmt.where(_table.c.student_id == student_id)

        result = await self._session.execute(stmt)
        return [self._to_domain(row) for row in result.mappings().all()]

    @staticmethod
    def _to_domain(row: Any) -> Reservation:
        return Reservation(
            id=ReservationId(value=row["id"]),
            student_id=row["student_id"],
            equipment_name=row["equipment_name"],
            equipment_category=row["equipment_category"],
            reservation_date=row["reservation_date"],
            time_slot=row["time_slot"],
            notes=row["notes"],
            status=ReservationStatus(row["status"]),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
