"""Value objects for IAM domain.

Value objects are immutable descriptors that provide type safety and
domain semantics for identifiers and domain concepts.
"""

from __future__ import annotations

from dataclasses import dataclass

# Identity provider subjects may be UUIDs, opaque strings, etc.
MAX_USER_ID_LENGTH = 255


@dataclass(frozen=True)
class UserId:
    """Identifier for a User aggregate.

    Users are provisioned from the identity provider, so the value is the
    provider's subject claim rather than a locally generated ULID.
    """

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def from_string(cls, value: str) -> UserId:
        """Create UserId from string value.

        Args:
            value: Identity provider subject

        Returns:
            UserId instance

        Raises:
            ValueError: If value is empty or too long
        """
        if not value or not value.strip():
            raise ValueError("Invalid UserId: must not be empty")
        if len(value) > MAX_USER_ID_LENGTH:
            raise ValueError(
                f"Invalid UserId: must be at most {MAX_USER_ID_LENGTH} characters"
            )
        return cls(value=value)
