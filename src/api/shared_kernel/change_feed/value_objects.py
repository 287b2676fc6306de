"""Value objects carried by the reservation change feed."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class ReservationChange:
    """A committed change to a reservation's status.

    Published after every successful submission and status transition.
    ``student_id`` lets subscribers filter to a single student's records.

    Attributes:
        reservation_id: The ULID of the reservation
        student_id: The owning student's user ID
        new_status: The status the reservation now has
        occurred_at: When the change was committed (UTC)
    """

    reservation_id: str
    student_id: str
    new_status: str
    occurred_at: datetime

    def to_payload(self) -> dict[str, Any]:
        """Serialize to the JSON wire shape used by subscribers."""
        return {
            "reservationId": self.reservation_id,
            "studentId": self.student_id,
            "newStatus": self.new_status,
            "occurredAt": self.occurred_at.isoformat(),
        }

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> ReservationChange:
        """Reconstruct a change from its wire shape.

        Raises:
            KeyError: If a required key is missing
            ValueError: If occurredAt is not an ISO-8601 timestamp
        """
        return cls(
            reservation_id=payload["reservationId"],
            student_id=payload["studentId"],
            new_status=payload["newStatus"],
            occurred_at=datetime.fromisoformat(payload["occurredAt"]),
        )
