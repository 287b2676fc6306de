"""Aggregates for IAM context."""

from iam.domain.aggregates.role_assignment import RoleAssignment, resolve_role
from iam.domain.aggregates.user import User

__all__ = [
    "RoleAssignment",
    "User",
    "resolve_role",
]
