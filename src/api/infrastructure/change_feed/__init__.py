"""Change feed transports for realtime reservation updates."""

from infrastructure.change_feed.memory import ChangeSubscription, InMemoryChangeFeed
from infrastructure.change_feed.postgres_notify import PostgresNotifyChangeFeed

__all__ = [
    "ChangeSubscription",
    "InMemoryChangeFeed",
    "PostgresNotifyChangeFeed",
]
