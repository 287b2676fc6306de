"""Error taxonomy shared by all bounded contexts.

Every error carries a stable ``code`` so the presentation layer can map it
to a response without inspecting messages. Store and identity-provider
failures never cross the service boundary as-is; they surface either as one
of these kinds or as an opaque internal error.
"""

from __future__ import annotations


class DomainError(Exception):
    """Base class for errors that terminate a single operation."""

    code: str = "domain_error"


class NotAuthenticatedError(DomainError):
    """Raised when an operation is attempted without a valid session."""

    code = "not_authenticated"


class PermissionDeniedError(DomainError):
    """Raised when the caller's resolved role does not allow the operation."""

    code = "permission_denied"


class ValidationError(DomainError):
    """Raised when an input field fails a length or date rule.

    Attributes:
        field: Name of the offending input field
    """

    code = "validation_error"

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field


class UnknownEquipmentError(DomainError):
    """Raised when an equipment reference is not in the catalog."""

    code = "unknown_equipment"

    def __init__(self, equipment_ref: str):
        super().__init__(f"Unknown equipment: {equipment_ref}")
        self.equipment_ref = equipment_ref


class InvalidTransitionError(DomainError):
    """Raised when a target status is not reachable from the current status."""

    code = "invalid_transition"

    def __init__(self, current: str, target: str):
        super().__init__(f"Cannot transition reservation from {current} to {target}")
        self.current = current
        self.target = target


class ConcurrentModificationError(DomainError):
    """Raised when another writer changed the record between read and write.

    This is the one error callers are expected to retry: re-fetch the
    current status, re-check the transition table, and reissue.
    """

    code = "concurrent_modification"


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist or is not visible."""

    code = "not_found"
