"""Domain events for the reservations bounded context.

Recorded by the Reservation aggregate and turned into change feed
messages once the surrounding transaction has committed.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class ReservationSubmitted:
    """Event raised when a student submits a new reservation.

    Attributes:
        reservation_id: The ULID of the reservation
        student_id: The owning student's user ID
        equipment_name: The reserved equipment
        status: Always "pending"
        occurred_at: When the event occurred (UTC)
    """

    reservation_id: str
    student_id: str
    equipment_name: str
    status: str
    occurred_at: datetime


@dataclass(frozen=True)
class ReservationStatusChanged:
    """Event raised when staff move a reservation to a new status.

    Attributes:
        reservation_id: The ULID of the reservation
        student_id: The owning student's user ID
        previous_status: Status before the transition
        status: Status after the transition
        occurred_at: When the event occurred (UTC)
    """

    reservation_id: str
    student_id: str
    previous_status: str
    status: str
    occurred_at: datetime


DomainEvent = ReservationSubmitted | ReservationStatusChanged
