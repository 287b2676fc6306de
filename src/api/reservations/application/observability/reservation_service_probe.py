"""Protocol for reservation lifecycle observability.

Defines the interface for domain probes that capture application-level
domain events for reservation service operations.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class ReservationServiceProbe(Protocol):
    """Domain probe for reservation lifecycle operations."""

    def reservation_submitted(
        self, reservation_id: str, student_id: str, equipment_name: str
    ) -> None:
        """Record that a student submitted a reservation."""
        ...

    def submission_rejected(self, student_id: str, field: str, reason: str) -> None:
        """Record that a submission failed field validation."""
        ...

    def unknown_equipment_requested(self, student_id: str, equipment_ref: str) -> None:
        """Record that a submission named equipment outside the catalog."""
        ...

    def reservation_transitioned(
        self,
        reservation_id: str,
        from_status: str,
        to_status: str,
        actor_id: str,
    ) -> None:
        """Record that staff moved a reservation to a new status."""
        ...

    def invalid_transition_attempted(
        self, reservation_id: str, from_status: str, to_status: str
    ) -> None:
        """Record that a transition outside the table was requested."""
        ...

    def transition_conflict(self, reservation_id: str, expected_status: str) -> None:
        """Record that a compare-and-set write lost a race."""
        ...

    def reservation_not_found(self, reservation_id: str) -> None:
        """Record that a reservation was missing or not visible to the caller."""
        ...

    def reservations_listed(self, count: int, student_id: str | None) -> None:
        """Record that reservations were listed."""
        ...

    def change_publish_failed(self, reservation_id: str, error: str) -> None:
        """Record that a committed change could not be pushed to the feed."""
        ...

    def with_context(self, context: ObservationContext) -> ReservationServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultReservationServiceProbe:
    """Default implementation of ReservationServiceProbe using structlog."""

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
    ) -> DefaultReservationServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultReservationServiceProbe(logger=self._logger, context=context)

    def reservation_submitted(
        self, reservation_id: str, student_id: str, equipment_name: str
    ) -> None:
        """Record that a student submitted a reservation."""
        self._logger.info(
            "reservation_submitted",
            reservation_id=reservation_id,
            student_id=student_id,
            equipment_name=equipment_name,
            **self._get_context_kwargs(),
        )

    def submission_rejected(self, student_id: str, field: str, reason: str) -> None:
        """Record that a submission failed field validation."""
        self._logger.info(
            "reservation_submission_rejected",
            student_id=student_id,
            field=field,
            reason=reason,
            **self._get_context_kwargs(),
        )

    def unknown_equipment_requested(self, student_id: str, equipment_ref: str) -> None:
        self._logger.info(
            "reservation_unknown_equipment",
            student_id=student_id,
            equipment_ref=equipment_ref,
            **self._get_context_kwargs(),
        )

    def reservation_transitioned(
        self,
        reservation_id: str,
        from_status: str,
        to_status: str,
        actor_id: str,
    ) -> None:
        """Record that staff moved a reservation to a new status."""
        self._logger.info(
            "reservation_transitioned",
            reservation_id=reservation_id,
            from_status=from_status,
            to_status=to_status,
            actor_id=actor_id,
            **self._get_context_kwargs(),
        )

    def invalid_transition_attempted(
        self, reservation_id: str, from_status: str, to_status: str
    ) -> None:
        self._logger.info(
            "reservation_invalid_transition",
            reservation_id=reservation_id,
            from_status=from_status,
            to_status=to_status,
            **self._get_context_kwargs(),
        )

    def transition_conflict(self, reservation_id: str, expected_status: str) -> None:
        """Record that a compare-and-set write lost a race."""
        self._logger.warning(
            "reservation_transition_conflict",
            reservation_id=reservation_id,
            expected_status=expected_status,
            **self._get_context_kwargs(),
        )

    def reservation_not_found(self, reservation_id: str) -> None:
        self._logger.debug(
            "reservation_not_found",
            reservation_id=reservation_id,
            **self._get_context_kwargs(),
        )

    def reservations_listed(self, count: int, student_id: str | None) -> None:
        self._logger.debug(
            "reservations_listed",
            count=count,
            student_id=student_id,
            **self._get_context_kwargs(),
        )

    def change_publish_failed(self, reservation_id: str, error: str) -> None:
        """Record that a committed change could not be pushed to the feed."""
        self._logger.error(
            "reservation_change_publish_failed",
            reservation_id=reservation_id,
            error=error,
            **self._get_context_kwargs(),
        )
