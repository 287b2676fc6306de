"""Session token validation against the campus identity provider.

The provider issues the tokens; this module only checks them. Signing
keys come from the provider's JWKS, located through its OpenID discovery
document and cached for a configurable TTL.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any

import httpx
from jose import JWTError, jwt
from jose.exceptions import ExpiredSignatureError, JWTClaimsError

if TYPE_CHECKING:
    from shared_kernel.auth.observability import JWTValidatorProbe

_DECODE_OPTIONS = {
    "verify_signature": True,
    "verify_aud": True,
    "verify_iss": True,
    "verify_exp": True,
    "verify_iat": True,
}


@dataclass(frozen=True)
class TokenClaims:
    """Identity claims extracted from a validated token.

    Attributes:
        sub: The user ID (from the configured user ID claim)
        email: Email address, if the token carries one
        name: Display name, if the token carries one
    """

    sub: str
    email: str | None
    name: str | None


class InvalidTokenError(Exception):
    """Raised when a session token cannot be trusted."""


@dataclass
class _KeySet:
    keys: dict[str, Any]
    fetched_at: datetime

    def is_fresh(self, ttl: timedelta) -> bool:
        return datetime.now(tz=timezone.utc) - self.fetched_at < ttl


class JWTValidator:
    """Verifies session tokens and maps their claims to TokenClaims.

    Checks signature, expiry, issue time, issuer and audience. Claim names
    are configurable because identity providers disagree on them.
    """

    def __init__(
        self,
        issuer_url: str,
        audience: str,
        probe: JWTValidatorProbe,
        user_id_claim: str = "sub",
        email_claim: str = "email",
        name_claim: str = "name",
        algorithms: tuple[str, ...] = ("RS256", "ES256"),
        jwks_cache_ttl: timedelta = timedelta(hours=24),
    ):
        """Initialize the validator.

        Args:
            issuer_url: Expected ``iss`` claim; also the discovery base URL
            audience: Expected ``aud`` claim
            probe: Observability probe
            user_id_claim: Claim holding the user ID
            email_claim: Claim holding the email address
            name_claim: Claim holding the display name
            algorithms: Accepted signing algorithms
            jwks_cache_ttl: How long fetched keys are trusted
        """
        self._issuer_url = issuer_url.rstrip("/")
        self._audience = audience
        self._probe = probe
        self._user_id_claim = user_id_claim
        self._email_claim = email_claim
        self._name_claim = name_claim
        self._algorithms = list(algorithms)
        self._jwks_cache_ttl = jwks_cache_ttl

        self._key_set: _KeySet | None = None
        self._refresh_lock = asyncio.Lock()

    async def validate_token(self, token: str) -> TokenClaims:
        """Validate a session token and return its identity claims.

        Raises:
            InvalidTokenError: If the token is malformed, expired, signed by
                an unknown key, issued for another audience or issuer, or
                missing the user ID claim; or if keys cannot be fetched.
        """
        try:
            header = jwt.get_unverified_header(token)
        except JWTError as e:
            raise self._reject(
                f"Malformed token: {e}", f"Invalid token format: {e}"
            ) from e
        if not header:
            raise self._reject("Missing token header", "Invalid token: missing header")

        keys = await self._signing_keys()
        claims = self._decode(token, keys)
        return self._identity_from(claims)

    def _reject(self, reason: str, message: str) -> InvalidTokenError:
        self._probe.token_validation_failed(reason=reason)
        return InvalidTokenError(message)

    def _decode(self, token: str, keys: dict[str, Any]) -> dict[str, Any]:
        try:
            return jwt.decode(
                token=token,
                key=keys,
                algorithms=self._algorithms,
                audience=self._audience,
                issuer=self._issuer_url,
                options=_DECODE_OPTIONS,
            )
        except ExpiredSignatureError as e:
            raise self._reject("Token expired", "Token has expired") from e
        except JWTClaimsError as e:
            detail = str(e).lower()
            if "audience" in detail:
                raise self._reject("Invalid audience", "Invalid audience claim") from e
            if "issuer" in detail:
                raise self._reject("Invalid issuer", "Invalid issuer claim") from e
            raise self._reject(
                f"Claims error: {e}", f"Invalid token claims: {e}"
            ) from e
        except JWTError as e:
            if "signature" in str(e).lower():
                raise self._reject(
                    "Invalid signature", "Invalid token signature"
                ) from e
            raise self._reject(f"JWT error: {e}", f"Invalid token: {e}") from e

    def _identity_from(self, claims: dict[str, Any]) -> TokenClaims:
        user_id = claims.get(self._user_id_claim)
        if user_id is None:
            raise self._reject(
                f"Missing {self._user_id_claim} claim",
                f"Missing required claim: {self._user_id_claim}",
            )

        email = claims.get(self._email_claim)
        name = claims.get(self._name_claim)
        self._probe.token_validated(user_id=str(user_id))
        return TokenClaims(
            sub=str(user_id),
            email=str(email) if email is not None else None,
            name=str(name) if name else None,
        )

    async def _signing_keys(self) -> dict[str, Any]:
        """Return cached keys, refreshing once per TTL across concurrent callers."""
        if self._key_set and self._key_set.is_fresh(self._jwks_cache_ttl):
            self._probe.jwks_cache_hit()
            return self._key_set.keys

        async with self._refresh_lock:
            if self._key_set and self._key_set.is_fresh(self._jwks_cache_ttl):
                self._probe.jwks_cache_hit()
                return self._key_set.keys

            keys = await self._fetch_jwks()
            self._key_set = _KeySet(
                keys=keys, fetched_at=datetime.now(tz=timezone.utc)
            )
            self._probe.jwks_fetched(key_count=len(keys.get("keys", [])))
            return keys

    async def _fetch_jwks(self) -> dict[str, Any]:
        discovery_url = f"{self._issuer_url}/.well-known/openid-configuration"
        try:
            async with httpx.AsyncClient() as client:
                discovery = await client.get(discovery_url)
                discovery.raise_for_status()
                jwks_uri = discovery.json().get("jwks_uri")
                if not jwks_uri:
                    self._probe.jwks_fetch_failed(
                        error="Missing jwks_uri in OpenID configuration"
                    )
                    raise InvalidTokenError(
                        "OIDC provider missing jwks_uri in configuration"
                    )

                response = await client.get(jwks_uri)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPError as e:
            self._probe.jwks_fetch_failed(error=str(e))
            raise InvalidTokenError(
                f"Failed to fetch JWKS from OIDC provider: {e}"
            ) from e
