"""Request and response models for reservation API endpoints.

Length and date rules are enforced by the domain so that every rule
violation carries the same error code and field name.
"""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, Field

from reservations.application.value_objects import ReservationView
from reservations.domain.aggregates import Reservation
from reservations.domain.value_objects import Equipment, ReservationStatus


class EquipmentResponse(BaseModel):
    """A catalog item."""

    id: str = Field(..., description="Catalog ID")
    name: str = Field(..., description="Equipment name")
    category: str = Field(..., description="Equipment category")
    total_available: int = Field(..., description="Units owned by the campus")
    description: str = Field("", description="Short description")

    @classmethod
    def from_domain(cls, equipment: Equipment) -> EquipmentResponse:
        """Convert domain Equipment to API response."""
        return cls(
            id=equipment.id,
            name=equipment.name,
            category=equipment.category,
            total_available=equipment.total_available,
            description=equipment.description,
        )


class SubmitReservationRequest(BaseModel):
    """Request to reserve equipment.

    Attributes:
        equipment: Catalog ID or exact equipment name
        reservation_date: Requested day (today or later)
        time_slot: Free-text slot, at most 50 characters
        notes: Optional notes, at most 500 characters
    """

    equipment: str = Field(
        ...,
        description="Catalog ID or exact equipment name",
        examples=["Projector", "1"],
    )
    reservation_date: date = Field(..., description="Requested day")
    time_slot: str = Field(
        ..., description="Time slot", examples=["10:00 AM - 12:00 PM"]
    )
    notes: str | None = Field(None, description="Optional notes")


class TransitionRequest(BaseModel):
    """Request to move a reservation to a new status.

    Attributes:
        status: Target status
        notes: Optional staff notes; replaces stored notes when non-blank
    """

    status: ReservationStatus = Field(..., description="Target status")
    notes: str | None = Field(None, description="Optional staff notes")


class ReservationResponse(BaseModel):
    """A reservation.

    Student email and display name are only present in the staff list.
    """

    id: str = Field(..., description="Reservation ID (ULID)")
    student_id: str = Field(..., description="Owning student's user ID")
    equipment_name: str
    equipment_category: str
    reservation_date: date
    time_slot: str
    notes: str | None = None
    status: ReservationStatus
    created_at: datetime
    updated_at: datetime
    student_email: str | None = None
    student_display_name: str | None = None

    @classmethod
    def from_domain(cls, reservation: Reservation) -> ReservationResponse:
        """Convert a domain Reservation to API response."""
        return cls(
            id=reservation.id.value,
            student_id=reservation.student_id,
            equipment_name=reservation.equipment_name,
            equipment_category=reservation.equipment_category,
            reservation_date=reservation.reservation_date,
            time_slot=reservation.time_slot,
            notes=reservation.notes,
            status=reservation.status,
            created_at=reservation.created_at,
            updated_at=reservation.updated_at,
        )

    @classmethod
    def from_view(cls, view: ReservationView) -> ReservationResponse:
        """Convert a staff list entry to API response."""
        response = cls.from_domain(view.reservation)
        response.student_email = view.student_email
        response.student_display_name = view.student_display_name
        return response


class ReservationListResponse(BaseModel):
    """Reservations, newest first."""

    reservations: list[ReservationResponse]
    count: int
