"""Authorization primitives shared across bounded contexts.

Provides the role vocabulary and the protocols through which contexts
check roles and look up user profiles without depending on IAM internals.
"""

from shared_kernel.authorization.protocols import RoleAuthority, UserDirectory
from shared_kernel.authorization.types import (
    DEFAULT_ROLE,
    REVIEWER_ROLES,
    Role,
    UserProfile,
)

__all__ = [
    "DEFAULT_ROLE",
    "REVIEWER_ROLES",
    "Role",
    "RoleAuthority",
    "UserDirectory",
    "UserProfile",
]
