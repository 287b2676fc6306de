"""Reservation aggregate."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, date, datetime

from reservations.domain.events import (
    DomainEvent,
    ReservationStatusChanged,
    ReservationSubmitted,
)
from reservations.domain.value_objects import (
    Equipment,
    ReservationId,
    ReservationRules,
    ReservationStatus,
    can_transition,
)
from shared_kernel.exceptions import InvalidTransitionError, ValidationError


def normalize_notes(notes: str | None, rules: ReservationRules) -> str | None:
    """Trim notes; blank notes become None.

    Raises:
        ValidationError: If the trimmed notes exceed the maximum length
    """
    if notes is None:
        return None
    trimmed = notes.strip()
    if not trimmed:
        return None
    if len(trimmed) > rules.notes_max_length:
        raise ValidationError(
            "notes",
            f"Notes must be at most {rules.notes_max_length} characters",
        )
    return trimmed


def normalize_time_slot(time_slot: str, rules: ReservationRules) -> str:
    """Trim the time slot and enforce presence and length.

    Raises:
        ValidationError: If the slot is blank or too long
    """
    trimmed = (time_slot or "").strip()
    if not trimmed:
        raise ValidationError("time_slot", "Time slot is required")
    if len(trimmed) > rules.time_slot_max_length:
        raise ValidationError(
            "time_slot",
            f"Time slot must be at most {rules.time_slot_max_length} characters",
        )
    return trimmed


@dataclass
class Reservation:
    """A student's request to use one piece of equipment on one day.

    Business rules:
    - New reservations start as pending and never return to pending
    - The reservation date is the submission day or later
    - Time slot is required and short; notes are optional and bounded
    - Status only moves along the allowed transition table

    Event collection:
    - submit() and transition_to() record domain events
    - Events are collected via collect_events() after the write commits
    """

    id: ReservationId
    student_id: str
    equipment_name: str
    equipment_category: str
    reservation_date: date
    time_slot: str
    notes: str | None
    status: ReservationStatus
    created_at: datetime
    updated_at: datetime
    _pending_events: list[DomainEvent] = field(default_factory=list, repr=False)

    @classmethod
    def submit(
        cls,
        student_id: str,
        equipment: Equipment,
        reservation_date: date,
        time_slot: str,
        notes: str | None,
        today: date,
        rules: ReservationRules | None = None,
        now: datetime | None = None,
    ) -> Reservation:
        """Factory method for a new pending reservation.

        Args:
            student_id: The submitting student (always the owner)
            equipment: The catalog item being reserved
            reservation_date: Requested day
            time_slot: Free-text slot, e.g. "10:00-12:00"
            notes: Optional student notes
            today: The submission day in the campus timezone
            rules: Input limits
            now: Creation timestamp (defaults to the current UTC time)

        Returns:
            A new Reservation with ReservationSubmitted recorded

        Raises:
            ValidationError: If the date, time slot or notes are invalid
        """
        rules = rules or ReservationRules()
        if reservation_date < today:
            raise ValidationError(
                "reservation_date", "Date must be today or in the future"
            )
        slot = normalize_time_slot(time_slot, rules)
        clean_notes = normalize_notes(notes, rules)

        now = now or datetime.now(UTC)
        reservation = cls(
            id=ReservationId.generate(),
            student_id=student_id,
            equipment_name=equipment.name,
            equipment_category=equipment.category,
            reservation_date=reservation_date,
            time_slot=slot,
            notes=clean_notes,
            status=ReservationStatus.PENDING,
            created_at=now,
            updated_at=now,
        )
        reservation._pending_events.append(
            ReservationSubmitted(
                reservation_id=reservation.id.value,
                student_id=student_id,
                equipment_name=equipment.name,
                status=ReservationStatus.PENDING.value,
                occurred_at=now,
            )
        )
        return reservation

    def transition_to(
        self,
        target: ReservationStatus,
        notes: str | None = None,
        rules: ReservationRules | None = None,
        now: datetime | None = None,
    ) -> None:
        """Move to ``target``, optionally replacing the notes.

        Args:
            target: Requested status
            notes: Staff notes; blank or None keeps the current notes
            rules: Input limits
            now: Update timestamp (defaults to the current UTC time)

        Raises:
            InvalidTransitionError: If target is not reachable from the current status
            ValidationError: If the notes are too long
        """
        target = ReservationStatus(target)
        if not can_transition(self.status, target):
            raise InvalidTransitionError(self.status.value, target.value)

        clean_notes = normalize_notes(notes, rules or ReservationRules())
        previous = self.status
        now = now or datetime.now(UTC)

        self.status = target
        if clean_notes is not None:
            self.notes = clean_notes
        self.updated_at = now

        self._pending_events.append(
            ReservationStatusChanged(
                reservation_id=self.id.value,
                student_id=self.student_id,
                previous_status=previous.value,
                status=target.value,
                occurred_at=now,
            )
        )

    def collect_events(self) -> list[DomainEvent]:
        """Return and clear pending domain events."""
        events = self._pending_events.copy()
        self._pending_events.clear()
        return events
