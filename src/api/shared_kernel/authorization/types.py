"""Authorization type definitions shared across bounded contexts.

Defines the role vocabulary used for permission decisions, and the
read-only user profile shape other contexts may join against.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class Role(StrEnum):
    """Roles a user can hold.

    A user holds at most one role; holding none resolves to STUDENT.
    """

    STUDENT = "student"
    STAFF = "staff"
    ADMIN = "admin"


DEFAULT_ROLE = Role.STUDENT

# Roles allowed to review and act on any student's reservations
REVIEWER_ROLES: frozenset[Role] = frozenset({Role.STAFF, Role.ADMIN})


@dataclass(frozen=True)
class UserProfile:
    """Read-only view of a user's identity for display joins.

    Attributes:
        user_id: The user's ID (identity provider subject)
        email: The user's email address
        display_name: Optional human-readable name
    """

    user_id: str
    email: str
    display_name: str | None = None
