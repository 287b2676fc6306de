"""Domain probe for IAM repository operations.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events related to user and role assignment persistence.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class UserRepositoryProbe(Protocol):
    """Domain probe for user repository operations."""

    def user_saved(self, user_id: str, email: str) -> None:
        """Record that a user was successfully saved."""
        ...

    def user_retrieved(self, user_id: str) -> None:
        """Record that a user was retrieved."""
        ...

    def user_not_found(self, user_id: str) -> None:
        """Record that a user was not found."""
        ...

    def with_context(self, context: ObservationContext) -> UserRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultUserRepositoryProbe:
    """Default implementation of UserRepositoryProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultUserRepositoryProbe:
        """Create a new probe with observation context bound."""
        return DefaultUserRepositoryProbe(logger=self._logger, context=context)

    def user_saved(self, user_id: str, email: str) -> None:
        """Record that a user was successfully saved."""
        self._logger.info(
            "user_saved",
            user_id=user_id,
            email=email,
            **self._get_context_kwargs(),
        )

    def user_retrieved(self, user_id: str) -> None:
        """Record that a user was retrieved."""
        self._logger.debug(
            "user_retrieved",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def user_not_found(self, user_id: str) -> None:
        """Record that a user was not found."""
        self._logger.debug(
            "user_not_found",
            user_id=user_id,
            **self._get_context_kwargs(),
        )


class RoleAssignmentRepositoryProbe(Protocol):
    """Domain probe for role assignment repository operations."""

    def assignment_replaced(self, user_id: str, role: str) -> None:
        """Record that a user's assignment was upserted."""
        ...

    def with_context(
        self, context: ObservationContext
    ) -> RoleAssignmentRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultRoleAssignmentRepositoryProbe:
    """Default implementation of RoleAssignmentRepositoryProbe using structlog."""

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
    ) -> DefaultRoleAssignmentRepositoryProbe:
        """Create a new probe with observation context bound."""
        return DefaultRoleAssignmentRepositoryProbe(
            logger=self._logger, context=context
        )

    def assignment_replaced(self, user_id: str, role: str) -> None:
        self._logger.info(
            "role_assignment_replaced",
            user_id=user_id,
            role=role,
            **self._get_context_kwargs(),
        )
