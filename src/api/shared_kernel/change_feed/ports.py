"""Protocol (port) for the reservation change feed.

Implementations decide how changes travel between publishers and
subscribers; the lifecycle engine only sees this interface.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Protocol, runtime_checkable

from shared_kernel.change_feed.value_objects import ReservationChange


@runtime_checkable
class ChangeStream(Protocol):
    """A live subscription: iterate it, then release it with ``aclose()``."""

    def __aiter__(self) -> AsyncIterator[ReservationChange]: ...

    async def __anext__(self) -> ReservationChange: ...

    async def aclose(self) -> None:
        """Stop receiving changes."""
        ...


@runtime_checkable
class ChangeFeed(Protocol):
    """Publish/subscribe channel for committed reservation changes."""

    async def publish(self, change: ReservationChange) -> None:
        """Broadcast a committed change to every matching subscriber.

        Must be called only after the change has been committed, so that
        subscribers never observe uncommitted state.

        Args:
            change: The committed change
        """
        ...

    def subscribe(self, student_id: str | None = None) -> ChangeStream:
        """Register a subscriber.

        The subscription is live as soon as this returns, so no change
        published afterwards is missed.

        Args:
            student_id: Only yield changes for this student's reservations.
                None yields every change (staff/admin view).

        Returns:
            A stream the consumer iterates and finally closes
        """
        ...
