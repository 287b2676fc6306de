"""Application services for the reservations bounded context."""

from reservations.application.services.reservation_service import ReservationService

__all__ = ["ReservationService"]
