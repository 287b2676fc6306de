"""Observability for the reservations infrastructure layer."""

from reservations.infrastructure.observability.repository_probe import (
    DefaultReservationRepositoryProbe,
    ReservationRepositoryProbe,
)

__all__ = [
    "DefaultReservationRepositoryProbe",
    "ReservationRepositoryProbe",
]
