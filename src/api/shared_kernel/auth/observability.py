"""Domain probe for session token validation.

Captures identity-provider related events (token verification and JWKS
retrieval) without leaking logging details into the validator.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class JWTValidatorProbe(Protocol):
    """Domain probe for session token validation."""

    def token_validated(self, user_id: str) -> None:
        """Record that a session token was accepted."""
        ...

    def token_validation_failed(self, reason: str) -> None:
        """Record that a session token was rejected."""
        ...

    def jwks_fetched(self, key_count: int) -> None:
        """Record that signing keys were fetched from the identity provider."""
        ...

    def jwks_cache_hit(self) -> None:
        """Record that cached signing keys were reused."""
        ...

    def jwks_fetch_failed(self, error: str) -> None:
        """Record that the identity provider's signing keys were unreachable."""
        ...

    def with_context(self, context: ObservationContext) -> JWTValidatorProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultJWTValidatorProbe:
    """Default implementation of JWTValidatorProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultJWTValidatorProbe:
        return DefaultJWTValidatorProbe(logger=self._logger, context=context)

    def token_validated(self, user_id: str) -> None:
        self._logger.debug(
            "session_token_validated",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def token_validation_failed(self, reason: str) -> None:
        self._logger.warning(
            "session_token_rejected",
            reason=reason,
            **self._get_context_kwargs(),
        )

    def jwks_fetched(self, key_count: int) -> None:
        self._logger.info(
            "identity_provider_keys_fetched",
            key_count=key_count,
            **self._get_context_kwargs(),
        )

    def jwks_cache_hit(self) -> None:
        self._logger.debug(
            "identity_provider_keys_cache_hit",
            **self._get_context_kwargs(),
        )

    def jwks_fetch_failed(self, error: str) -> None:
        self._logger.error(
            "identity_provider_keys_fetch_failed",
            error=error,
            **self._get_context_kwargs(),
        )
