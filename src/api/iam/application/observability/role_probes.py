"""Probes for role resolution and role administration.

Role gates are the security boundary of the service, so denials are
logged at warning level and every role change at info.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class RoleResolverProbe(Protocol):
    """Domain probe for role resolution."""

    def role_resolved(self, user_id: str, role: str, was_default: bool) -> None:
        """Record that a caller's effective role was resolved."""
        ...

    def unauthenticated_caller(self) -> None:
        """Record that a role check was attempted without a session."""
        ...

    def permission_denied(
        self, user_id: str, role: str, allowed: list[str]
    ) -> None:
        """Record that a caller failed a role gate."""
        ...

    def with_context(self, context: ObservationContext) -> RoleResolverProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultRoleResolverProbe:
    """Default implementation of RoleResolverProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultRoleResolverProbe:
        """Create a new probe with observation context bound."""
        return DefaultRoleResolverProbe(logger=self._logger, context=context)

    def role_resolved(self, user_id: str, role: str, was_default: bool) -> None:
        self._logger.debug(
            "role_resolved",
            user_id=user_id,
            role=role,
            was_default=was_default,
            **self._get_context_kwargs(),
        )

    def unauthenticated_caller(self) -> None:
        self._logger.warning(
            "role_check_unauthenticated",
            **self._get_context_kwargs(),
        )

    def permission_denied(
        self, user_id: str, role: str, allowed: list[str]
    ) -> None:
        self._logger.warning(
            "role_permission_denied",
            user_id=user_id,
            role=role,
            allowed=allowed,
            **self._get_context_kwargs(),
        )


class RoleAdministrationProbe(Protocol):
    """Domain probe for role administration."""

    def role_changed(
        self,
        target_user_id: str,
        old_role: str,
        new_role: str,
        changed_by: str,
    ) -> None:
        """Record that an administrator replaced a user's role."""
        ...

    def role_change_target_not_found(self, target_user_id: str) -> None:
        """Record that a role change named an unknown user."""
        ...

    def users_listed(self, count: int) -> None:
        """Record that the user list was read."""
        ...

    def with_context(self, context: ObservationContext) -> RoleAdministrationProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultRoleAdministrationProbe:
    """Default implementation of RoleAdministrationProbe using structlog."""

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
    ) -> DefaultRoleAdministrationProbe:
        """Create a new probe with observation context bound."""
        return DefaultRoleAdministrationProbe(logger=self._logger, context=context)

    def role_changed(
        self,
        target_user_id: str,
        old_role: str,
        new_role: str,
        changed_by: str,
    ) -> None:
        self._logger.info(
            "role_changed",
            target_user_id=target_user_id,
            old_role=old_role,
            new_role=new_role,
            changed_by=changed_by,
            **self._get_context_kwargs(),
        )

    def role_change_target_not_found(self, target_user_id: str) -> None:
        self._logger.warning(
            "role_change_target_not_found",
            target_user_id=target_user_id,
            **self._get_context_kwargs(),
        )

    def users_listed(self, count: int) -> None:
        self._logger.debug(
            "users_listed",
            count=count,
            **self._get_context_kwargs(),
        )
