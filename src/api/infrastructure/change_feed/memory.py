"""In-process broadcast implementation of the change feed.

Every subscriber owns a bounded queue. Publishing never blocks: when a
subscriber's queue is full, its oldest pending change is dropped to make
room for the newest one.
"""

from __future__ import annotations

import asyncio

from shared_kernel.change_feed.observability import (
    ChangeFeedProbe,
    DefaultChangeFeedProbe,
)
from shared_kernel.change_feed.value_objects import ReservationChange


class ChangeSubscription:
    """A single subscriber's view of the feed.

    Registered with the feed on creation, so no change published after
    ``subscribe()`` returns is missed. Iterate with ``async for`` and
    release with ``aclose()`` (or use it as an async context manager).
    """

    def __init__(
        self,
        feed: InMemoryChangeFeed,
        student_id: str | None,
        maxsize: int,
    ) -> None:
        self._feed = feed
        self.student_id = student_id
        # None on the queue marks the subscription closed.
        self._queue: asyncio.Queue[ReservationChange | None] = asyncio.Queue(
            maxsize=maxsize
        )
        self._closed = False

    def matches(self, change: ReservationChange) -> bool:
        """Check whether this subscriber should see the change."""
        return self.student_id is None or change.student_id == self.student_id

    def offer(self, change: ReservationChange) -> int:
        """Enqueue a change without blocking.

        Returns:
            Number of older changes dropped to make room (0 or 1)
        """
        return self._put(change)

    def _put(self, item: ReservationChange | None) -> int:
        dropped = 0
        if self._queue.full():
            self._queue.get_nowait()
            dropped = 1
        self._queue.put_nowait(item)
        return dropped

    @property
    def pending(self) -> int:
        """Number of changes waiting to be consumed."""
        return self._queue.qsize()

    def __aiter__(self) -> ChangeSubscription:
        return self

    async def __anext__(self) -> ReservationChange:
        if self._closed:
            raise StopAsyncIteration
        change = await self._queue.get()
        if change is None:
            raise StopAsyncIteration
        return change

    async def aclose(self) -> None:
        """Stop receiving changes and unregister from the feed.

        Wakes a consumer already waiting in another task.
        """
        if self._closed:
            return
        self._closed = True
        self._feed._remove(self)
        self._put(None)

    async def __aenter__(self) -> ChangeSubscription:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


class InMemoryChangeFeed:
    """Per-process broadcast of committed reservation changes.

    Suitable for a single service instance, and used as the local fan-out
    stage of ``PostgresNotifyChangeFeed``.
    """

    def __init__(
        self,
        subscriber_queue_size: int = 100,
        probe: ChangeFeedProbe | None = None,
    ) -> None:
        self._queue_size = subscriber_queue_size
        self._probe = probe or DefaultChangeFeedProbe()
        self._subscriptions: set[ChangeSubscription] = set()

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    async def publish(self, change: ReservationChange) -> None:
        """Deliver a change to every matching subscriber."""
        self.broadcast(change)

    def broadcast(self, change: ReservationChange) -> None:
        """Deliver a change synchronously to every matching subscriber."""
        delivered = 0
        for subscription in list(self._subscriptions):
            if not subscription.matches(change):
                continue
            dropped = subscription.offer(change)
            if dropped:
                self._probe.subscriber_lagged(subscription.student_id, dropped)
            delivered += 1

        self._probe.change_published(
            reservation_id=change.reservation_id,
            new_status=change.new_status,
            subscriber_count=delivered,
        )

    def subscribe(self, student_id: str | None = None) -> ChangeSubscription:
        """Register a new subscriber.

        Args:
            student_id: Only receive this student's changes; None for all

        Returns:
            The registered subscription
        """
        subscription = ChangeSubscription(
            feed=self, student_id=student_id, maxsize=self._queue_size
        )
        self._subscriptions.add(subscription)
        self._probe.subscriber_added(student_id, len(self._subscriptions))
        return subscription

    def _remove(self, subscription: ChangeSubscription) -> None:
        self._subscriptions.discard(subscription)
        self._probe.subscriber_removed(
            subscription.student_id, len(self._subscriptions)
        )
