"""
Custom exceptions for the application.
"""

from typing import Any, Optional


class CadenceError(Exception):
    """Base exception for cadence."""

    def __init__(self, message: str, details: Optional[Any] = None):
        self.message = message
        self.details = details
        super().__init__(message)


class NotFoundError(CadenceError):
    """Resource not found."""

    pass


class ValidationError(CadenceError):
    """Validation error."""

    pass


class InvalidRuleError(ValidationError):
    """Recurrence rule cannot be constructed from the given values."""

    def __init__(self, field: str, value: Any, reason: str):
        super().__init__(
            f"Invalid recurrence rule: {field}={value!r} ({reason})",
            details={"field": field, "value": value},
        )
        self.field = field
        self.value = value


class InfrastructureError(CadenceError):
    """Infrastructure-related error (DB, external services, etc.)."""

    pass


class PersistenceError(InfrastructureError):
    """Loading or committing records failed."""

    pass
