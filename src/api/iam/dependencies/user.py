"""Authentication dependencies: session token to CurrentUser.

Every authenticated request JIT-provisions the caller's user record so
that later operations (role changes, reservation joins) can rely on it.
"""

from typing import Annotated

from fastapi import Depends, Query
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from iam.application.observability import (
    AuthenticationProbe,
    DefaultUserServiceProbe,
    UserServiceProbe,
)
from iam.application.services import UserService
from iam.application.value_objects import CurrentUser
from iam.dependencies.authentication import (
    bearer_scheme,
    get_authentication_probe,
    get_jwt_validator,
)
from iam.domain.value_objects import UserId
from iam.infrastructure.user_repository import UserRepository
from infrastructure.database.dependencies import get_write_session
from shared_kernel.auth import InvalidTokenError, JWTValidator
from shared_kernel.exceptions import NotAuthenticatedError


def get_user_service_probe() -> UserServiceProbe:
    """Get UserServiceProbe instance.

    Returns:
        DefaultUserServiceProbe instance for observability
    """
    return DefaultUserServiceProbe()


def get_user_repository(
    session: Annotated[AsyncSession, Depends(get_write_session)],
) -> UserRepository:
    """Get UserRepository instance bound to the write session."""
    return UserRepository(session=session)


def get_user_service(
    user_repo: Annotated[UserRepository, Depends(get_user_repository)],
    session: Annotated[AsyncSession, Depends(get_write_session)],
    probe: Annotated[UserServiceProbe, Depends(get_user_service_probe)],
) -> UserService:
    """Get UserService instance for JIT provisioning."""
    return UserService(user_repository=user_repo, session=session, probe=probe)


async def _authenticate(
    token: str | None,
    validator: JWTValidator,
    user_service: UserService,
    auth_probe: AuthenticationProbe,
) -> CurrentUser:
    if not token:
        auth_probe.authentication_failed(reason="Missing authorization")
        raise NotAuthenticatedError("Not authenticated")

    try:
        claims = await validator.validate_token(token)
    except InvalidTokenError as e:
        auth_probe.authentication_failed(reason=str(e))
        raise NotAuthenticatedError(str(e)) from e

    try:
        user_id = UserId.from_string(claims.sub)
    except ValueError as e:
        auth_probe.authentication_failed(reason=str(e))
        raise NotAuthenticatedError(str(e)) from e

    email = claims.email or ""
    user = await user_service.ensure_user(user_id, email, claims.name)
    auth_probe.user_authenticated(user_id=user_id.value, email=email)

    return CurrentUser(
        user_id=user.id,
        email=user.email,
        display_name=user.display_name,
    )


async def get_current_user(
    validator: Annotated[JWTValidator, Depends(get_jwt_validator)],
    user_service: Annotated[UserService, Depends(get_user_service)],
    auth_probe: Annotated[AuthenticationProbe, Depends(get_authentication_probe)],
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(bearer_scheme)
    ] = None,
) -> CurrentUser:
    """Authenticate the request from its Bearer token.

    Raises:
        NotAuthenticatedError: If the token is missing or invalid
    """
    token = credentials.credentials if credentials else None
    return await _authenticate(token, validator, user_service, auth_probe)


async def get_current_user_for_stream(
    validator: Annotated[JWTValidator, Depends(get_jwt_validator)],
    user_service: Annotated[UserService, Depends(get_user_service)],
    auth_probe: Annotated[AuthenticationProbe, Depends(get_authentication_probe)],
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(bearer_scheme)
    ] = None,
    access_token: Annotated[
        str | None,
        Query(description="Session token, for clients that cannot set headers"),
    ] = None,
) -> CurrentUser:
    """Authenticate a streaming request.

    Browser EventSource clients cannot send an Authorization header, so
    the token may also arrive as the ``access_token`` query parameter.
    """
    token = credentials.credentials if credentials else access_token
    return await _authenticate(token, validator, user_service, auth_probe)
