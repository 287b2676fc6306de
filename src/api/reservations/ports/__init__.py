"""Ports for the reservations bounded context."""

from reservations.ports.repositories import IEquipmentCatalog, IReservationRepository

__all__ = [
    "IEquipmentCatalog",
    "IReservationRepository",
]
