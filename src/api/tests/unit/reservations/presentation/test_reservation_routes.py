"""Unit tests for reservation HTTP routes.

Tests the presentation layer with the service mocked out; the error
mapping is registered so domain errors render as they do in production.
"""

from __future__ import annotations

import json
from datetime import UTC, date, datetime
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI, status
from fastapi.testclient import TestClient

from infrastructure.database.dependencies import get_read_session
from infrastructure.error_handlers import register_error_handlers
from reservations.application.services import ReservationService
from reservations.application.value_objects import ReservationView
from reservations.dependencies import (
    get_caller_id,
    get_reservation_service,
    get_stream_caller_id,
)
from reservations.domain.aggregates import Reservation
from reservations.domain.value_objects import Equipment, ReservationStatus
from reservations.presentation import equipment_router, router
from shared_kernel.change_feed import ReservationChange
from shared_kernel.exceptions import (
    ConcurrentModificationError,
    InvalidTransitionError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)

NOW = datetime(2025, 2, 20, 9, 0, tzinfo=UTC)


def _reservation(**overrides) -> Reservation:
    kwargs = dict(
        student_id="s1",
        equipment=Equipment(
            id="1", name="Projector", category="Presentation", total_available=12
        ),
        reservation_date=date(2025, 3, 1),
        time_slot="10:00-11:00",
        notes=None,
        today=date(2025, 2, 20),
        now=NOW,
    )
    kwargs.update(overrides)
    return Reservation.submit(**kwargs)


class _FiniteStream:
    """Change stream that ends after the given changes."""

    def __init__(self, changes: list[ReservationChange]):
        self._changes = list(changes)
        self.closed = False

    def __aiter__(self):
        return self

    async def __anext__(self) -> ReservationChange:
        if not self._changes:
            raise StopAsyncIteration
        return self._changes.pop(0)

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def mock_service() -> AsyncMock:
    """Mock ReservationService for testing."""
    return AsyncMock(spec=ReservationService)


@pytest.fixture
def read_session() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def test_client(mock_service: AsyncMock, read_session: AsyncMock) -> TestClient:
    """Create TestClient with mocked dependencies."""
    app = FastAPI()
    register_error_handlers(app)

    app.dependency_overrides[get_reservation_service] = lambda: mock_service
    app.dependency_overrides[get_caller_id] = lambda: "s1"
    app.dependency_overrides[get_stream_caller_id] = lambda: "s1"
    app.dependency_overrides[get_read_session] = lambda: read_session

    app.include_router(equipment_router)
    app.include_router(router)

    return TestClient(app)


class TestEquipmentRoutes:
    def test_lists_catalog(self, test_client: TestClient) -> None:
        response = test_client.get("/equipment")

        assert response.status_code == status.HTTP_200_OK
        names = [item["name"] for item in response.json()]
        assert names[:2] == ["Projector", "Laptop"]
        assert len(names) == 6


class TestSubmitRoute:
    def test_returns_201_with_pending_reservation(
        self, test_client: TestClient, mock_service: AsyncMock
    ) -> None:
        reservation = _reservation()
        mock_service.submit.return_value = reservation

        response = test_client.post(
            "/reservations",
            json={
                "equipment": "Projector",
                "reservation_date": "2025-03-01",
                "time_slot": "10:00-11:00",
            },
        )

        assert response.status_code == status.HTTP_201_CREATED
        body = response.json()
        assert body["id"] == reservation.id.value
        assert body["status"] == "pending"
        mock_service.submit.assert_called_once_with(
            caller_id="s1",
            equipment_ref="Projector",
            reservation_date=date(2025, 3, 1),
            time_slot="10:00-11:00",
            notes=None,
        )

    def test_validation_error_names_field(
        self, test_client: TestClient, mock_service: AsyncMock
    ) -> None:
        mock_service.submit.side_effect = ValidationError(
            "reservation_date", "Reservation date cannot be in the past"
        )

        response = test_client.post(
            "/reservations",
            json={
                "equipment": "Projector",
                "reservation_date": "2020-01-01",
                "time_slot": "9-10",
            },
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.json()["field"] == "reservation_date"

    def test_missing_time_slot_rejected_before_service(
        self, test_client: TestClient, mock_service: AsyncMock
    ) -> None:
        response = test_client.post(
            "/reservations",
            json={"equipment": "Projector", "reservation_date": "2025-03-01"},
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.json()["field"] == "time_slot"
        mock_service.submit.assert_not_called()

    def test_permission_denied_is_403(
        self, test_client: TestClient, mock_service: AsyncMock
    ) -> None:
        mock_service.submit.side_effect = PermissionDeniedError("Students only")

        response = test_client.post(
            "/reservations",
            json={
                "equipment": "Projector",
                "reservation_date": "2025-03-01",
                "time_slot": "9-10",
            },
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["code"] == "permission_denied"


class TestListRoutes:
    def test_list_mine(self, test_client: TestClient, mock_service: AsyncMock) -> None:
        mock_service.list_for_student.return_value = [_reservation(), _reservation()]

        response = test_client.get("/reservations/mine")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["count"] == 2
        mock_service.list_for_student.assert_called_once_with("s1")

    def test_list_all_includes_student_profile(
        self, test_client: TestClient, mock_service: AsyncMock
    ) -> None:
        mock_service.list_all.return_value = [
            ReservationView(
                reservation=_reservation(),
                student_email="s1@campus.edu",
                student_display_name="Sam One",
            )
        ]

        response = test_client.get("/reservations")

        item = response.json()["reservations"][0]
        assert item["student_email"] == "s1@campus.edu"
        assert item["student_display_name"] == "Sam One"


class TestGetRoute:
    def test_not_found(self, test_client: TestClient, mock_service: AsyncMock) -> None:
        mock_service.get.side_effect = NotFoundError("Reservation not found")

        response = test_client.get("/reservations/01JN0000000000000000000000")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["code"] == "not_found"


class TestTransitionRoute:
    def test_applies_transition(
        self, test_client: TestClient, mock_service: AsyncMock
    ) -> None:
        reservation = _reservation()
        reservation.transition_to(ReservationStatus.APPROVED, notes="bring ID")
        mock_service.transition.return_value = reservation

        response = test_client.post(
            f"/reservations/{reservation.id.value}/transitions",
            json={"status": "approved", "notes": "bring ID"},
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["status"] == "approved"
        mock_service.transition.assert_called_once_with(
            caller_id="s1",
            reservation_id=reservation.id.value,
            target_status=ReservationStatus.APPROVED,
            notes="bring ID",
        )

    @pytest.mark.parametrize(
        ("error", "code"),
        [
            (InvalidTransitionError("pending", "completed"), "invalid_transition"),
            (ConcurrentModificationError("changed"), "concurrent_modification"),
        ],
    )
    def test_conflicts_are_409(
        self, test_client: TestClient, mock_service: AsyncMock, error, code
    ) -> None:
        mock_service.transition.side_effect = error

        response = test_client.post(
            "/reservations/01JN0000000000000000000000/transitions",
            json={"status": "completed"},
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["code"] == code

    def test_unknown_status_rejected(
        self, test_client: TestClient, mock_service: AsyncMock
    ) -> None:
        response = test_client.post(
            "/reservations/01JN0000000000000000000000/transitions",
            json={"status": "cancelled"},
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.json()["field"] == "status"
        mock_service.transition.assert_not_called()


class TestChangeStreamRoute:
    def test_streams_changes_as_server_sent_events(
        self,
        test_client: TestClient,
        mock_service: AsyncMock,
        read_session: AsyncMock,
    ) -> None:
        change = ReservationChange(
            reservation_id="01JN0000000000000000000000",
            student_id="s1",
            new_status="approved",
            occurred_at=NOW,
        )
        stream = _FiniteStream([change])
        mock_service.subscribe_changes.return_value = stream

        response = test_client.get("/reservations/changes")

        assert response.status_code == status.HTTP_200_OK
        assert response.headers["content-type"].startswith("text/event-stream")
        events = [
            block for block in response.text.split("\n\n") if block.startswith("event:")
        ]
        assert len(events) == 1
        data_line = events[0].split("\n")[1]
        assert json.loads(data_line.removeprefix("data: ")) == change.to_payload()
        assert stream.closed
        read_session.close.assert_awaited_once()
        mock_service.subscribe_changes.assert_called_once_with("s1")
