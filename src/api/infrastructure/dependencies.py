"""Shared infrastructure dependencies.

Provides ONLY raw infrastructure resources (the change feed transport).
Does NOT import from bounded contexts to maintain DDD boundaries.
"""

from functools import lru_cache

from infrastructure.change_feed import InMemoryChangeFeed, PostgresNotifyChangeFeed
from infrastructure.database.dependencies import get_write_engine
from infrastructure.database.engines import build_listen_dsn
from infrastructure.settings import (
    ChangeFeedBackend,
    get_change_feed_settings,
    get_database_settings,
)
from shared_kernel.change_feed import ChangeFeed


@lru_cache
def get_change_feed() -> ChangeFeed:
    """Get the application-scoped change feed (singleton).

    The backend is chosen by ``CAMPUS_RESERVE_CHANGE_FEED_BACKEND``.
    """
    settings = get_change_feed_settings()

    if settings.backend == ChangeFeedBackend.POSTGRES:
        return PostgresNotifyChangeFeed(
            engine=get_write_engine(),
            listen_dsn=build_listen_dsn(get_database_settings()),
            channel=settings.channel,
            subscriber_queue_size=settings.subscriber_queue_size,
        )

    return InMemoryChangeFeed(subscriber_queue_size=settings.subscriber_queue_size)


async def start_change_feed() -> None:
    """Start the change feed's background relay, if it has one."""
    feed = get_change_feed()
    if isinstance(feed, PostgresNotifyChangeFeed):
        await feed.start()


async def stop_change_feed() -> None:
    """Stop the change feed's background relay, if it has one."""
    feed = get_change_feed()
    if isinstance(feed, PostgresNotifyChangeFeed):
        await feed.stop()
