"""Application services for IAM bounded context.

Application services orchestrate domain aggregates, repositories, and
other infrastructure to fulfill use cases. They are the "front door" to
the IAM context.
"""

from iam.application.services.role_administration_service import (
    RoleAdministrationService,
)
from iam.application.services.role_resolver import RoleResolver
from iam.application.services.user_directory import UserDirectoryService
from iam.application.services.user_service import UserService

__all__ = [
    "RoleAdministrationService",
    "RoleResolver",
    "UserDirectoryService",
    "UserService",
]
