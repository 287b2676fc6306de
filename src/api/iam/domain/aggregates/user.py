"""User aggregate for IAM context."""

from __future__ import annotations

from dataclasses import dataclass

from iam.domain.value_objects import UserId


@dataclass(frozen=True)
class User:
    """User aggregate representing a person in the system.

    Users are provisioned just-in-time from identity provider claims. The
    email and display name are kept in sync with the provider on every
    authenticated request.
    """

    id: UserId
    email: str
    display_name: str | None = None

    def __str__(self) -> str:
        """Return string representation."""
        return f"User({self.email})"

    def __eq__(self, other: object) -> bool:
        """Users are equal if they have the same ID (identity-based equality)."""
        if not isinstance(other, User):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        """Hash based on ID for use in sets and dicts."""
        return hash(self.id)

    def differs_from_claims(self, email: str, display_name: str | None) -> bool:
        """Check whether the provider's claims changed since the last sync."""
        return self.email != email or self.display_name != display_name

    def with_profile(self, email: str, display_name: str | None) -> User:
        """Return a copy carrying the provider's latest profile."""
        return User(id=self.id, email=email, display_name=display_name)
