"""Domain-Oriented Observability for the reservations application layer."""

from reservations.application.observability.reservation_service_probe import (
    DefaultReservationServiceProbe,
    ReservationServiceProbe,
)

__all__ = [
    "DefaultReservationServiceProbe",
    "ReservationServiceProbe",
]
