"""Change feed contracts for realtime reservation updates.

The lifecycle engine publishes through the ``ChangeFeed`` port; transports
(in-process broadcast, PostgreSQL NOTIFY) live in infrastructure.
"""

from shared_kernel.change_feed.ports import ChangeFeed, ChangeStream
from shared_kernel.change_feed.value_objects import ReservationChange

__all__ = ["ChangeFeed", "ChangeStream", "ReservationChange"]
