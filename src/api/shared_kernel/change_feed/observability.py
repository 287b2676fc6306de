"""Observability probes for the reservation change feed."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class ChangeFeedProbe(Protocol):
    """Domain probe for change feed operations."""

    def change_published(
        self, reservation_id: str, new_status: str, subscriber_count: int
    ) -> None:
        """Record that a change was broadcast to local subscribers."""
        ...

    def subscriber_added(self, student_id: str | None, subscriber_count: int) -> None:
        """Record that a subscriber joined."""
        ...

    def subscriber_removed(
        self, student_id: str | None, subscriber_count: int
    ) -> None:
        """Record that a subscriber left."""
        ...

    def subscriber_lagged(self, student_id: str | None, dropped: int) -> None:
        """Record that a slow subscriber lost its oldest pending changes."""
        ...

    def relay_started(self, channel: str) -> None:
        """Record that the cross-instance relay started listening."""
        ...

    def relay_stopped(self) -> None:
        """Record that the cross-instance relay stopped."""
        ...

    def relay_error(self, error: str) -> None:
        """Record that the relay listen loop failed."""
        ...

    def invalid_notification_ignored(self, payload: str, reason: str) -> None:
        """Record that a relayed notification could not be decoded."""
        ...

    def with_context(self, context: ObservationContext) -> ChangeFeedProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultChangeFeedProbe:
    """Default implementation of ChangeFeedProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultChangeFeedProbe:
        """Create a new probe with observation context bound."""
        return DefaultChangeFeedProbe(logger=self._logger, context=context)

    def change_published(
        self, reservation_id: str, new_status: str, subscriber_count: int
    ) -> None:
        self._logger.debug(
            "reservation_change_published",
            reservation_id=reservation_id,
            new_status=new_status,
            subscriber_count=subscriber_count,
            **self._get_context_kwargs(),
        )

    def subscriber_added(self, student_id: str | None, subscriber_count: int) -> None:
        self._logger.info(
            "change_feed_subscriber_added",
            student_id=student_id,
            subscriber_count=subscriber_count,
            **self._get_context_kwargs(),
        )

    def subscriber_removed(
        self, student_id: str | None, subscriber_count: int
    ) -> None:
        self._logger.info(
            "change_feed_subscriber_removed",
            student_id=student_id,
            subscriber_count=subscriber_count,
            **self._get_context_kwargs(),
        )

    def subscriber_lagged(self, student_id: str | None, dropped: int) -> None:
        self._logger.warning(
            "change_feed_subscriber_lagged",
            student_id=student_id,
            dropped=dropped,
            **self._get_context_kwargs(),
        )

    def relay_started(self, channel: str) -> None:
        self._logger.info(
            "change_feed_relay_started",
            channel=channel,
            **self._get_context_kwargs(),
        )

    def relay_stopped(self) -> None:
        self._logger.info("change_feed_relay_stopped", **self._get_context_kwargs())

    def relay_error(self, error: str) -> None:
        self._logger.error(
            "change_feed_relay_error",
            error=error,
            **self._get_context_kwargs(),
        )

    def invalid_notification_ignored(self, payload: str, reason: str) -> None:
        self._logger.warning(
            "change_feed_invalid_notification_ignored",
            payload=payload,
            reason=reason,
            **self._get_context_kwargs(),
        )
