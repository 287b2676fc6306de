"""SQLAlchemy ORM models for the reservations bounded context."""

from reservations.infrastructure.models.reservation import ReservationModel

__all__ = ["ReservationModel"]
