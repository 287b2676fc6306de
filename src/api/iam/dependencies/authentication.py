from functools import lru_cache

from fastapi.security import HTTPBearer

from iam.application.observability import (
    AuthenticationProbe,
    DefaultAuthenticationProbe,
)
from infrastructure.settings import get_oidc_settings
from shared_kernel.auth import JWTValidator
from shared_kernel.auth.observability import DefaultJWTValidatorProbe

# Bearer scheme for Swagger UI integration. auto_error is off so a missing
# header surfaces as the not_authenticated error code, not FastAPI's 403.
bearer_scheme = HTTPBearer(
    bearerFormat="JWT",
    description="Session token issued by the campus identity provider",
    auto_error=False,
)


@lru_cache
def get_jwt_validator() -> JWTValidator:
    """Get cached JWT validator.

    Uses lru_cache to ensure a single JWTValidator instance is reused across
    requests, enabling reuse of the instance-level JWKS cache.

    Returns:
        JWTValidator instance configured from OIDC settings.
    """
    settings = get_oidc_settings()
    probe = DefaultJWTValidatorProbe()
    return JWTValidator(
        issuer_url=settings.issuer_url,
        audience=settings.audience,
        probe=probe,
        user_id_claim=settings.user_id_claim,
        email_claim=settings.email_claim,
        name_claim=settings.name_claim,
    )


def get_authentication_probe() -> AuthenticationProbe:
    """Get AuthenticationProbe instance.

    Returns:
        DefaultAuthenticationProbe instance for observability
    """
    return DefaultAuthenticationProbe()
