"""Observability for IAM infrastructure layer."""

from iam.infrastructure.observability.repository_probe import (
    DefaultRoleAssignmentRepositoryProbe,
    DefaultUserRepositoryProbe,
    RoleAssignmentRepositoryProbe,
    UserRepositoryProbe,
)

__all__ = [
    "DefaultRoleAssignmentRepositoryProbe",
    "DefaultUserRepositoryProbe",
    "RoleAssignmentRepositoryProbe",
    "UserRepositoryProbe",
]
