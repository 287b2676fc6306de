"""Unit tests for the Reservation aggregate."""

from datetime import UTC, date, datetime

import pytest

from reservations.domain.aggregates import (
    Reservation,
    normalize_notes,
    normalize_time_slot,
)
from reservations.domain.events import ReservationSubmitted
from reservations.domain.value_objects import (
    Equipment,
    ReservationId,
    ReservationRules,
    ReservationStatus,
)
from shared_kernel.exceptions import ValidationError

PROJECTOR = Equipment(
    id="1", name="Projector", category="Presentation", total_available=12
)
TODAY = date(2025, 2, 20)
NOW = datetime(2025, 2, 20, 9, 0, tzinfo=UTC)


def _submit(**overrides) -> Reservation:
    kwargs = dict(
        student_id="s1",
        equipment=PROJECTOR,
        reservation_date=date(2025, 3, 1),
        time_slot="10:00-11:00",
        notes=None,
        today=TODAY,
        now=NOW,
    )
    kwargs.update(overrides)
    return Reservation.submit(**kwargs)


class TestReservationSubmit:
    """Tests for Reservation.submit factory."""

    def test_creates_pending_reservation(self):
        reservation = _submit()

        assert reservation.status == ReservationStatus.PENDING
        assert reservation.student_id == "s1"
        assert reservation.equipment_name == "Projector"
        assert reservation.equipment_category == "Presentation"
        assert reservation.reservation_date == date(2025, 3, 1)
        assert reservation.time_slot == "10:00-11:00"
        assert reservation.notes is None
        assert reservation.created_at == NOW
        assert reservation.updated_at == NOW

    def test_generates_ulid_identifier(self):
        reservation = _submit()

        assert ReservationId.from_string(reservation.id.value) == reservation.id

    def test_records_submitted_event(self):
        reservation = _submit()

        assert reservation.collect_events() == [
            ReservationSubmitted(
                reservation_id=reservation.id.value,
                student_id="s1",
                equipment_name="Projector",
                status="pending",
                occurred_at=NOW,
            )
        ]

    def test_collect_events_clears_pending_events(self):
        reservation = _submit()
        reservation.collect_events()

        assert reservation.collect_events() == []

    def test_accepts_today(self):
        reservation = _submit(reservation_date=TODAY)

        assert reservation.reservation_date == TODAY

    def test_rejects_past_date(self):
        with pytest.raises(ValidationError) as exc_info:
            _submit(reservation_date=date(2025, 2, 19))

        assert exc_info.value.field == "reservation_date"

    def test_trims_time_slot_and_notes(self):
        reservation = _submit(time_slot="  9-10  ", notes="  tripod please ")

        assert reservation.time_slot == "9-10"
        assert reservation.notes == "tripod please"

    def test_blank_notes_stored_as_none(self):
        reservation = _submit(notes="   ")

        assert reservation.notes is None

    def test_rejects_blank_time_slot(self):
        with pytest.raises(ValidationError) as exc_info:
            _submit(time_slot="   ")

        assert exc_info.value.field == "time_slot"

    def test_time_slot_length_boundary(self):
        assert _submit(time_slot="x" * 50).time_slot == "x" * 50

        with pytest.raises(ValidationError) as exc_info:
            _submit(time_slot="x" * 51)
        assert exc_info.value.field == "time_slot"

    def test_notes_length_boundary(self):
        assert _submit(notes="n" * 500).notes == "n" * 500

        with pytest.raises(ValidationError) as exc_info:
            _submit(notes="n" * 501)
        assert exc_info.value.field == "notes"

    def test_date_checked_before_other_fields(self):
        with pytest.raises(ValidationError) as exc_info:
            _submit(reservation_date=date(2024, 1, 1), time_slot="", notes="n" * 600)

        assert exc_info.value.field == "reservation_date"

    def test_custom_rules_apply(self):
        rules = ReservationRules(time_slot_max_length=5, notes_max_length=10)

        with pytest.raises(ValidationError):
            _submit(time_slot="10:00-11:00", rules=rules)


class TestTransitionNotes:
    """Tests for how transitions treat staff notes."""

    def test_supplied_notes_replace_existing(self):
        reservation = _submit(notes="student note")
        reservation.transition_to(ReservationStatus.APPROVED, notes="bring ID")

        assert reservation.notes == "bring ID"

    def test_blank_notes_keep_existing(self):
        reservation = _submit(notes="student note")
        reservation.transition_to(ReservationStatus.REJECTED, notes="  ")

        assert reservation.notes == "student note"

    def test_over_long_staff_notes_rejected_without_state_change(self):
        reservation = _submit()

        with pytest.raises(ValidationError):
            reservation.transition_to(ReservationStatus.APPROVED, notes="n" * 501)

        assert reservation.status == ReservationStatus.PENDING

    def test_accepts_status_as_plain_string(self):
        reservation = _submit()
        reservation.transition_to("approved")

        assert reservation.status is ReservationStatus.APPROVED


class TestNormalizers:
    def test_normalize_notes_none(self):
        assert normalize_notes(None, ReservationRules()) is None

    def test_normalize_time_slot_none_is_blank(self):
        with pytest.raises(ValidationError):
            normalize_time_slot(None, ReservationRules())  # type: ignore[arg-type]


class TestReservationId:
    def test_from_string_rejects_non_ulid(self):
        with pytest.raises(ValueError):
            ReservationId.from_string("not-a-ulid")

    def test_generated_ids_are_unique(self):
        assert ReservationId.generate() != ReservationId.generate()
