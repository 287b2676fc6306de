"""SQLAlchemy ORM models for IAM bounded context.

These models map to database tables and are used by repository implementations.
"""

from iam.infrastructure.models.role_assignment import RoleAssignmentModel
from iam.infrastructure.models.user import UserModel

__all__ = [
    "RoleAssignmentModel",
    "UserModel",
]
