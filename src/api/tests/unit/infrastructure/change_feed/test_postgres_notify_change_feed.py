"""Unit tests for PostgresNotifyChangeFeed.

The NOTIFY connection and the LISTEN relay are mocked; these tests cover
payload encoding, notification decoding and relay lifecycle.
"""

from __future__ import annotations

import asyncio
import json
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock, create_autospec, patch

import pytest
from asyncpg_listen import Timeout

from infrastructure.change_feed import PostgresNotifyChangeFeed
from shared_kernel.change_feed import ReservationChange
from shared_kernel.change_feed.observability import ChangeFeedProbe

CHANNEL = "reservation_changes"
MODULE = "infrastructure.change_feed.postgres_notify"


def _change() -> ReservationChange:
    return ReservationChange(
        reservation_id="01JN5Z8Q3V4W6X7Y8Z9A0B1C2D",
        student_id="s1",
        new_status="approved",
        occurred_at=datetime(2025, 2, 21, 8, 0, tzinfo=UTC),
    )


def _notification(payload: str | None) -> MagicMock:
    notification = MagicMock()
    notification.channel = CHANNEL
    notification.payload = payload
    return notification


@pytest.fixture
def mock_probe():
    return create_autospec(ChangeFeedProbe, instance=True)


@pytest.fixture
def mock_engine():
    """Engine whose begin() yields a connection with an async execute."""
    engine = MagicMock()
    conn = MagicMock()
    conn.execute = AsyncMock()
    transaction = MagicMock()
    transaction.__aenter__ = AsyncMock(return_value=conn)
    transaction.__aexit__ = AsyncMock(return_value=None)
    engine.begin = MagicMock(return_value=transaction)
    engine.conn = conn
    return engine


@pytest.fixture
def feed(mock_engine, mock_probe) -> PostgresNotifyChangeFeed:
    return PostgresNotifyChangeFeed(
        engine=mock_engine,
        listen_dsn="postgresql://user:pass@db:5432/campus_reserve",
        channel=CHANNEL,
        subscriber_queue_size=5,
        probe=mock_probe,
    )


class TestPublish:
    @pytest.mark.asyncio
    async def test_publish_issues_pg_notify_with_json_payload(self, feed, mock_engine):
        await feed.publish(_change())

        mock_engine.conn.execute.assert_awaited_once()
        statement, params = mock_engine.conn.execute.call_args.args
        assert "pg_notify" in str(statement)
        assert params["channel"] == CHANNEL
        assert json.loads(params["payload"]) == {
            "reservationId": "01JN5Z8Q3V4W6X7Y8Z9A0B1C2D",
            "studentId": "s1",
            "newStatus": "approved",
            "occurredAt": "2025-02-21T08:00:00+00:00",
        }

    @pytest.mark.asyncio
    async def test_publish_does_not_deliver_locally_without_relay(self, feed):
        subscription = feed.subscribe()

        await feed.publish(_change())

        assert subscription.pending == 0


class TestHandleNotification:
    @pytest.mark.asyncio
    async def test_valid_payload_is_broadcast_to_local_subscribers(self, feed):
        feed._running = True
        subscription = feed.subscribe(student_id="s1")

        await feed._handle_notification(
            _notification(json.dumps(_change().to_payload()))
        )

        assert await anext(subscription) == _change()

    @pytest.mark.asyncio
    async def test_filtered_subscriber_skips_other_students(self, feed):
        feed._running = True
        subscription = feed.subscribe(student_id="s2")

        await feed._handle_notification(
            _notification(json.dumps(_change().to_payload()))
        )

        assert subscription.pending == 0

    @pytest.mark.asyncio
    async def test_timeout_is_ignored(self, feed, mock_probe):
        feed._running = True
        subscription = feed.subscribe()

        await feed._handle_notification(Timeout(channel=CHANNEL))

        assert subscription.pending == 0
        mock_probe.invalid_notification_ignored.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload", ["not json", json.dumps({"reservationId": "x"}), "[]"]
    )
    async def test_malformed_payload_is_reported_and_dropped(
        self, feed, mock_probe, payload
    ):
        feed._running = True
        subscription = feed.subscribe()

        await feed._handle_notification(_notification(payload))

        assert subscription.pending == 0
        mock_probe.invalid_notification_ignored.assert_called_once()

    @pytest.mark.asyncio
    async def test_empty_payload_is_ignored(self, feed, mock_probe):
        feed._running = True

        await feed._handle_notification(_notification(None))

        mock_probe.invalid_notification_ignored.assert_not_called()

    @pytest.mark.asyncio
    async def test_notifications_ignored_when_stopped(self, feed):
        subscription = feed.subscribe()

        await feed._handle_notification(
            _notification(json.dumps(_change().to_payload()))
        )

        assert subscription.pending == 0


class TestRelayLifecycle:
    @pytest.mark.asyncio
    async def test_start_runs_listener_on_channel(self, feed, mock_probe):
        started = asyncio.Event()

        async def fake_run(handlers, **kwargs):
            assert CHANNEL in handlers
            started.set()
            await asyncio.Event().wait()

        with (
            patch(f"{MODULE}.NotificationListener") as mock_listener_class,
            patch(f"{MODULE}.connect_func") as mock_connect_func,
        ):
            mock_listener_class.return_value.run = fake_run

            await feed.start()
            await asyncio.wait_for(started.wait(), timeout=1)

            mock_connect_func.assert_called_once_with(
                "postgresql://user:pass@db:5432/campus_reserve"
            )
            mock_probe.relay_started.assert_called_once_with(CHANNEL)

            await feed.stop()

        assert feed._listener_task is None
        mock_probe.relay_stopped.assert_called_once()

    @pytest.mark.asyncio
    async def test_start_is_idempotent(self, feed):
        with patch(f"{MODULE}.NotificationListener") as mock_listener_class:
            mock_listener_class.return_value.run = AsyncMock()

            await feed.start()
            task = feed._listener_task
            await feed.start()

            assert feed._listener_task is task
            await feed.stop()

    @pytest.mark.asyncio
    async def test_listener_failure_is_reported(self, feed, mock_probe):
        with patch(f"{MODULE}.NotificationListener") as mock_listener_class:
            mock_listener_class.return_value.run = AsyncMock(
                side_effect=OSError("connection refused")
            )

            await feed.start()
            await feed._listener_task

            mock_probe.relay_error.assert_called_once_with("connection refused")
            await feed.stop()

    @pytest.mark.asyncio
    async def test_stop_without_start(self, feed, mock_probe):
        await feed.stop()

        mock_probe.relay_stopped.assert_called_once()
