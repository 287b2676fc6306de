"""Value objects for the reservations domain."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from ulid import ULID


@dataclass(frozen=True)
class ReservationId:
    """Identifier for a Reservation aggregate.

    Uses ULID for sortability and distribution-friendly generation.
    """

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> ReservationId:
        """Generate a new ReservationId using ULID."""
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> ReservationId:
        """Create ReservationId from string value.

        Args:
            value: ULID string

        Returns:
            ReservationId instance

        Raises:
            ValueError: If value is not a valid ULID
        """
        try:
            ULID.from_str(value)
        except ValueError as e:
            raise ValueError(f"Invalid ReservationId: {value}") from e

        return cls(value=value)


class ReservationStatus(StrEnum):
    """Lifecycle states of a reservation."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    COMPLETED = "completed"


# pending is initial only; rejected and completed are terminal
ALLOWED_TRANSITIONS: dict[ReservationStatus, frozenset[ReservationStatus]] = {
    ReservationStatus.PENDING: frozenset(
        {ReservationStatus.APPROVED, ReservationStatus.REJECTED}
    ),
    ReservationStatus.APPROVED: frozenset({ReservationStatus.COMPLETED}),
    ReservationStatus.REJECTED: frozenset(),
    ReservationStatus.COMPLETED: frozenset(),
}


def can_transition(current: ReservationStatus, target: ReservationStatus) -> bool:
    """Check whether ``target`` is reachable from ``current`` in one step."""
    return target in ALLOWED_TRANSITIONS[current]


@dataclass(frozen=True)
class Equipment:
    """A catalog item students can reserve.

    Attributes:
        id: Catalog identifier
        name: Display name, copied onto reservations
        category: Category, copied onto reservations
        total_available: Number of units the campus owns
        description: Short description for the catalog page
    """

    id: str
    name: str
    category: str
    total_available: int
    description: str = ""


@dataclass(frozen=True)
class ReservationRules:
    """Input limits applied when submitting or annotating a reservation."""

    time_slot_max_length: int = 50
    notes_max_length: int = 500
