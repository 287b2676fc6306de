"""Session token validation shared by all bounded contexts."""

from shared_kernel.auth.jwt_validator import (
    InvalidTokenError,
    JWTValidator,
    TokenClaims,
)
from shared_kernel.auth.observability import (
    DefaultJWTValidatorProbe,
    JWTValidatorProbe,
)

__all__ = [
    "InvalidTokenError",
    "JWTValidator",
    "JWTValidatorProbe",
    "DefaultJWTValidatorProbe",
    "TokenClaims",
]
