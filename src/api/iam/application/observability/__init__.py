"""Domain-Oriented Observability for IAM application layer.

Probes for application service operations following Domain-Oriented Observability patterns.
"""

from iam.application.observability.authentication_probe import (
    AuthenticationProbe,
    DefaultAuthenticationProbe,
)
from iam.application.observability.role_probes import (
    DefaultRoleAdministrationProbe,
    DefaultRoleResolverProbe,
    RoleAdministrationProbe,
    RoleResolverProbe,
)
from iam.application.observability.user_service_probe import (
    DefaultUserServiceProbe,
    UserServiceProbe,
)

__all__ = [
    "AuthenticationProbe",
    "DefaultAuthenticationProbe",
    "DefaultRoleAdministrationProbe",
    "DefaultRoleResolverProbe",
    "DefaultUserServiceProbe",
    "RoleAdministrationProbe",
    "RoleResolverProbe",
    "UserServiceProbe",
]
