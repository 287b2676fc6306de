"""Ports for IAM bounded context."""

from iam.ports.repositories import IRoleAssignmentRepository, IUserRepository

__all__ = [
    "IRoleAssignmentRepository",
    "IUserRepository",
]
