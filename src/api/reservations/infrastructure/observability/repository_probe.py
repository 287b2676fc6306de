"""Domain probe for reservation store operations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class ReservationRepositoryProbe(Protocol):
    """Domain probe for reservation repository operations."""

    def reservation_added(self, reservation_id: str, student_id: str) -> None:
        """Record that a reservation row was inserted."""
        ...

    def status_swapped(self, reservation_id: str, expected: str, new: str) -> None:
        """Record that a compare-and-set write succeeded."""
        ...

    def status_swap_missed(self, reservation_id: str, expected: str) -> None:
        """Record that a compare-and-set write matched no row."""
        ...

    def with_context(self, context: ObservationContext) -> ReservationRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultReservationRepositoryProbe:
    """Default implementation of ReservationRepositoryProbe using structlog."""

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

    def with_context(
        self, context: ObservationContext
    ) -> DefaultReservationRepositoryProbe:
        """Create a new probe with observation context bound."""
        return DefaultReservationRepositoryProbe(logger=self._logger, context=context)

    def reservation_added(self, reservation_id: str, student_id: str) -> None:
        self._logger.debug(
            "reservation_added",
            reservation_id=reservation_id,
            student_id=student_id,
            **self._get_context_kwargs(),
        )

    def status_swapped(self, reservation_id: str, expected: str, new: str) -> None:
        self._logger.debug(
            "reservation_status_swapped",
            reservation_id=reservation_id,
            expected=expected,
            new=new,
            **self._get_context_kwargs(),
        )

    def status_swap_missed(self, reservation_id: str, expected: str) -> None:
        self._logger.debug(
            "reservation_status_swap_missed",
            reservation_id=reservation_id,
            expected=expected,
            **self._get_context_kwargs(),
        )
