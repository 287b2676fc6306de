"""Domain probes for infrastructure observability.

Domain probes provide a high-level instrumentation API oriented around
domain semantics, keeping infrastructure code clean and testable.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class ConnectionProbe(Protocol):
    """Domain probe for database engine lifecycle."""

    def engine_created(self, role: str, host: str, database: str) -> None:
        """Record that a read or write engine was created."""
        ...

    def pool_closed(self, role: str) -> None:
        """Record that an engine's pool was disposed."""
        ...

    def with_context(self, context: ObservationContext) -> ConnectionProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultConnectionProbe:
    """Default implementation of ConnectionProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultConnectionProbe:
        """Create a new probe with observation context bound."""
        return DefaultConnectionProbe(logger=self._logger, context=context)

    def engine_created(self, role: str, host: str, database: str) -> None:
        self._logger.info(
            "database_engine_created",
            role=role,
            host=host,
            database=database,
            **self._get_context_kwargs(),
        )

    def pool_closed(self, role: str) -> None:
        self._logger.info(
            "database_pool_closed",
            role=role,
            **self._get_context_kwargs(),
        )


class RequestErrorProbe(Protocol):
    """Domain probe for errors rendered by the HTTP error mapping."""

    def domain_error_returned(
        self, code: str, status_code: int, path: str, message: str
    ) -> None:
        """Record that a domain error was returned to a client."""
        ...

    def unhandled_error(self, path: str, error: Exception) -> None:
        """Record that an unexpected error was masked as an internal error."""
        ...


class DefaultRequestErrorProbe:
    """Default implementation of RequestErrorProbe using structlog."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None):
        self._logger = logger or structlog.get_logger()

    def domain_error_returned(
        self, code: str, status_code: int, path: str, message: str
    ) -> None:
        self._logger.info(
            "domain_error_returned",
            code=code,
            status_code=status_code,
            path=path,
            message=message,
        )

    def unhandled_error(self, path: str, error: Exception) -> None:
        self._logger.error(
            "unhandled_request_error",
            path=path,
            error=str(error),
            error_type=type(error).__name__,
            exc_info=error,
        )


class ApplicationProbe(Protocol):
    """Domain probe for application lifecycle events."""

    def application_starting(self, app_name: str, version: str) -> None:
        """Record that the application is starting."""
        ...

    def application_stopped(self) -> None:
        """Record that the application shut down cleanly."""
        ...


class DefaultApplicationProbe:
    """Default implementation of ApplicationProbe using structlog."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None):
        self._logger = logger or structlog.get_logger()

    def application_starting(self, app_name: str, version: str) -> None:
        self._logger.info("application_starting", app_name=app_name, version=version)

    def application_stopped(self) -> None:
        self._logger.info("application_stopped")
