"""Unit test fixtures: mocked sessions and in-memory fakes for the ports."""

from __future__ import annotations

import asyncio
from collections.abc import Collection
from dataclasses import replace
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from iam.domain.aggregates import RoleAssignment, User
from iam.domain.value_objects import UserId
from reservations.domain.aggregates import Reservation
from reservations.domain.value_objects import ReservationId, ReservationStatus
from shared_kernel.authorization.types import DEFAULT_ROLE, Role, UserProfile
from shared_kernel.exceptions import NotAuthenticatedError, PermissionDeniedError


class FakeReservationRepository:
    """Dict-backed reservation store.

    ``compare_and_set_status`` yields to the event loop between its read and
    its write so that concurrent callers interleave the way they would
    against a real database round-trip; the check and the swap themselves
    happen without an intervening await, like a conditional UPDATE.
    """

    def __init__(self) -> None:
        self.rows: dict[str, Reservation] = {}
        self.writes = 0

    async def add(self, reservation: Reservation) -> None:
        self.rows[reservation.id.value] = replace(reservation, _pending_events=[])

    async def get_by_id(self, reservation_id: ReservationId) -> Reservation | None:
        stored = self.rows.get(reservation_id.value)
        return replace(stored, _pending_events=[]) if stored else None

    async def compare_and_set_status(
        self,
        reservation_id: ReservationId,
        expected: ReservationStatus,
        new: ReservationStatus,
        notes: str | None,
        updated_at: datetime,
    ) -> Reservation | None:
        await asyncio.sleep(0)
        stored = self.rows.get(reservation_id.value)
        if stored is None or stored.status != expected:
            return None
        updated = replace(
            stored, status=new, notes=notes, updated_at=updated_at, _pending_events=[]
        )
        self.rows[reservation_id.value] = updated
        self.writes += 1
        return replace(updated, _pending_events=[])

    async def list(self, student_id: str | None = None) -> list[Reservation]:
        rows = [
            r
            for r in self.rows.values()
            if student_id is None or r.student_id == student_id
        ]
        return sorted(rows, key=lambda r: (r.created_at, r.id.value), reverse=True)


class FakeRoleAuthority:
    """RoleAuthority backed by a plain dict; unknown users are students."""

    def __init__(self, roles: dict[str, Role] | None = None) -> None:
        self.roles = dict(roles or {})

    async def resolve(self, user_id: str | None) -> Role:
        if not user_id:
            raise NotAuthenticatedError("Authentication required")
        return self.roles.get(user_id, DEFAULT_ROLE)

    async def require_role(self, user_id: str | None, *allowed: Role) -> Role:
        role = await self.resolve(user_id)
        if role not in allowed:
            raise PermissionDeniedError(f"Role '{role.value}' may not do this")
        return role


class FakeUserDirectory:
    """UserDirectory over a fixed set of profiles."""

    def __init__(self, profiles: list[UserProfile] | None = None) -> None:
        self.profiles = {p.user_id: p for p in profiles or []}

    async def get_profiles(self, user_ids: Collection[str]) -> dict[str, UserProfile]:
        return {uid: self.profiles[uid] for uid in user_ids if uid in self.profiles}


class FakeUserRepository:
    """Dict-backed user store."""

    def __init__(self, users: list[User] | None = None) -> None:
        self.users = {u.id.value: u for u in users or []}

    async def save(self, user: User) -> None:
        self.users[user.id.value] = user

    async def get_by_id(self, user_id: UserId) -> User | None:
        return self.users.get(user_id.value)

    async def get_many(self, user_ids: Collection[UserId]) -> list[User]:
        return [self.users[u.value] for u in user_ids if u.value in self.users]

    async def list_all(self) -> list[User]:
        return sorted(self.users.values(), key=lambda u: (u.email, u.id.value))


class FakeRoleAssignmentRepository:
    """Role store keyed by user ID, mirroring the role_assignments primary key."""

    def __init__(self) -> None:
        self.rows: dict[str, RoleAssignment] = {}

    async def replace(self, assignment: RoleAssignment) -> None:
        self.rows[assignment.user_id.value] = assignment

    async def get_for_user(self, user_id: UserId) -> list[RoleAssignment]:
        row = self.rows.get(user_id.value)
        return [row] if row else []

    async def list_all(self) -> list[RoleAssignment]:
        return list(self.rows.values())


class FixedClock:
    """Callable clock returning a settable instant."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def mock_session():
    """Create mock async session with transaction support."""
    session = AsyncMock()
    mock_transaction = MagicMock()
    mock_transaction.__aenter__ = AsyncMock(return_value=None)
    mock_transaction.__aexit__ = AsyncMock(return_value=None)
    session.begin = MagicMock(return_value=mock_transaction)
    return session


@pytest.fixture
def clock() -> FixedClock:
    """Clock pinned to 2025-02-20 09:00 UTC."""
    return FixedClock(datetime(2025, 2, 20, 9, 0, tzinfo=UTC))


@pytest.fixture
def reservation_repository() -> FakeReservationRepository:
    return FakeReservationRepository()


@pytest.fixture
def role_authority() -> FakeRoleAuthority:
    """Authority with one student, one staff member and one admin."""
    return FakeRoleAuthority(
        {"s1": Role.STUDENT, "st1": Role.STAFF, "a1": Role.ADMIN}
    )


@pytest.fixture
def user_directory() -> FakeUserDirectory:
    return FakeUserDirectory(
        [
            UserProfile(user_id="s1", email="s1@campus.edu", display_name="Sam One"),
            UserProfile(user_id="s2", email="s2@campus.edu", display_name=None),
        ]
    )


@pytest.fixture
def user_repository() -> FakeUserRepository:
    return FakeUserRepository(
        [
            User(id=UserId(value="a1"), email="admin@campus.edu", display_name="Ada"),
            User(id=UserId(value="u2"), email="u2@campus.edu", display_name="Uma"),
        ]
    )


@pytest.fixture
def role_assignment_repository() -> FakeRoleAssignmentRepository:
    repository = FakeRoleAssignmentRepository()
    repository.rows["a1"] = RoleAssignment.assign(
        user_id=UserId(value="a1"),
        role=Role.ADMIN,
        assigned_by=None,
        now=datetime(2025, 1, 1, tzinfo=UTC),
    )
    return repository
