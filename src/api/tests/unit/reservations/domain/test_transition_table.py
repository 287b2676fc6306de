"""Exhaustive tests for the reservation status transition table."""

from datetime import UTC, date, datetime

import pytest

from reservations.domain.aggregates import Reservation
from reservations.domain.events import ReservationStatusChanged
from reservations.domain.value_objects import (
    ALLOWED_TRANSITIONS,
    ReservationId,
    ReservationStatus,
    can_transition,
)
from shared_kernel.exceptions import InvalidTransitionError

P = ReservationStatus.PENDING
A = ReservationStatus.APPROVED
R = ReservationStatus.REJECTED
C = ReservationStatus.COMPLETED

LEGAL = {(P, A), (P, R), (A, C)}
ALL_PAIRS = [
    (current, target) for current in ReservationStatus for target in ReservationStatus
]


def _reservation(status: ReservationStatus) -> Reservation:
    created = datetime(2025, 2, 20, 9, 0, tzinfo=UTC)
    return Reservation(
        id=ReservationId.generate(),
        student_id="s1",
        equipment_name="Projector",
        equipment_category="Presentation",
        reservation_date=date(2025, 3, 1),
        time_slot="10:00-11:00",
        notes=None,
        status=status,
        created_at=created,
        updated_at=created,
    )


def test_table_covers_every_status():
    assert set(ALLOWED_TRANSITIONS) == set(ReservationStatus)


def test_there_are_sixteen_pairs():
    assert len(ALL_PAIRS) == 16


@pytest.mark.parametrize(("current", "target"), ALL_PAIRS)
def test_can_transition_matches_table(current, target):
    assert can_transition(current, target) is ((current, target) in LEGAL)


@pytest.mark.parametrize(("current", "target"), ALL_PAIRS)
def test_transition_to_enforces_table(current, target):
    reservation = _reservation(current)
    later = datetime(2025, 2, 21, 8, 0, tzinfo=UTC)

    if (current, target) in LEGAL:
        reservation.transition_to(target, now=later)
        assert reservation.status == target
        assert reservation.updated_at == later
        events = reservation.collect_events()
        assert events == [
            ReservationStatusChanged(
                reservation_id=reservation.id.value,
                student_id="s1",
                previous_status=current.value,
                status=target.value,
                occurred_at=later,
            )
        ]
    else:
        with pytest.raises(InvalidTransitionError) as exc_info:
            reservation.transition_to(target, now=later)
        assert exc_info.value.current == current.value
        assert exc_info.value.target == target.value
        assert reservation.status == current
        assert reservation.collect_events() == []


@pytest.mark.parametrize("current", list(ReservationStatus))
def test_nothing_returns_to_pending(current):
    assert not can_transition(current, ReservationStatus.PENDING)


def test_reapplying_an_applied_transition_fails():
    reservation = _reservation(P)
    reservation.transition_to(A)

    with pytest.raises(InvalidTransitionError):
        reservation.transition_to(A)
