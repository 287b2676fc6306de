"""Application-layer read views for the reservations bounded context."""

from __future__ import annotations

from dataclasses import dataclass

from reservations.domain.aggregates import Reservation


@dataclass(frozen=True)
class ReservationView:
    """A reservation joined with its owner's display profile.

    Attributes:
        reservation: The reservation
        student_email: Owner's email, if the user directory knows them
        student_display_name: Owner's display name, if any
    """

    reservation: Reservation
    student_email: str | None = None
    student_display_name: str | None = None
