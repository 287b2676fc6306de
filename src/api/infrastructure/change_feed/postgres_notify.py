"""PostgreSQL NOTIFY-based change feed.

Publishing issues ``pg_notify`` on the write engine, so every service
instance connected to the same database receives the change. A background
relay LISTENs on the channel with asyncpg-listen (reconnecting on failure)
and fans received changes out through a local ``InMemoryChangeFeed``.
"""

from __future__ import annotations

import asyncio
import json

from asyncpg_listen import (
    ListenPolicy,
    NotificationListener,
    NotificationOrTimeout,
    Timeout,
    connect_func,
)
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine

from infrastructure.change_feed.memory import ChangeSubscription, InMemoryChangeFeed
from shared_kernel.change_feed.observability import (
    ChangeFeedProbe,
    DefaultChangeFeedProbe,
)
from shared_kernel.change_feed.value_objects import ReservationChange


class PostgresNotifyChangeFeed:
    """Change feed that is correct across multiple service instances.

    Changes published on any instance reach subscribers on every instance,
    including the publishing one, through the LISTEN relay.
    """

    def __init__(
        self,
        engine: AsyncEngine,
        listen_dsn: str,
        channel: str = "reservation_changes",
        subscriber_queue_size: int = 100,
        probe: ChangeFeedProbe | None = None,
    ) -> None:
        """Initialize the feed.

        Args:
            engine: Write engine used to issue NOTIFY
            listen_dsn: Plain PostgreSQL DSN for the LISTEN connection
            channel: NOTIFY channel name
            subscriber_queue_size: Per-subscriber buffer size
            probe: Optional observability probe
        """
        self._engine = engine
        self._listen_dsn = listen_dsn
        self._channel = channel
        self._probe = probe or DefaultChangeFeedProbe()
        self._local = InMemoryChangeFeed(
            subscriber_queue_size=subscriber_queue_size, probe=self._probe
        )
        self._running = False
        self._listener_task: asyncio.Task[None] | None = None

    async def publish(self, change: ReservationChange) -> None:
        """NOTIFY the channel with the change's JSON payload."""
        payload = json.dumps(change.to_payload())
        async with self._engine.begin() as conn:
            await conn.execute(
                text("SELECT pg_notify(:channel, :payload)"),
                {"channel": self._channel, "payload": payload},
            )

    def subscribe(self, student_id: str | None = None) -> ChangeSubscription:
        """Register a subscriber on this instance's local broadcast."""
        return self._local.subscribe(student_id)

    async def _handle_notification(self, notification: NotificationOrTimeout) -> None:
        if not self._running:
            return

        # asyncpg-listen yields Timeout when nothing arrived in the window
        if isinstance(notification, Timeout):
            return

        if not notification.payload:
            return

        try:
            change = ReservationChange.from_payload(json.loads(notification.payload))
        except (ValueError, KeyError, TypeError) as e:
            self._probe.invalid_notification_ignored(notification.payload, str(e))
            return

        self._local.broadcast(change)

    async def _listen(self) -> None:
        try:
            listener = NotificationListener(connect_func(self._listen_dsn))
            self._probe.relay_started(self._channel)
            await listener.run(
                {self._channel: self._handle_notification},
                policy=ListenPolicy.ALL,
            )
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self._probe.relay_error(str(e))

    async def start(self) -> None:
        """Start the LISTEN relay in the background."""
        if self._running:
            return
        self._running = True
        self._listener_task = asyncio.create_task(self._listen())

    async def stop(self) -> None:
        """Stop the LISTEN relay."""
        self._running = False

        if self._listener_task and not self._listener_task.done():
            self._listener_task.cancel()
            try:
                await self._listener_task
            except asyncio.CancelledError:
                pass

        self._listener_task = None
        self._probe.relay_stopped()
