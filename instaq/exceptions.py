"""Error taxonomy shared by the attendance services and the HTTP layer."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FieldViolation:
    field: str
    message: str

    def as_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


class InstaQError(Exception):
    """Base class for errors raised by the attendance core."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(InstaQError):
    """One or more field violations. Nothing was persisted."""

    status_code = 400
    default_message = "Validation failed"

    def __init__(self, violations: list[FieldViolation], message: str | None = None):
        super().__init__(message)
        self.violations = list(violations)

    def __str__(self) -> str:
        details = "; ".join(f"{v.field}: {v.message}" for v in self.violations)
        return f"{self.message} ({details})" if details else self.message


class AuthenticationError(InstaQError):
    status_code = 401
    default_message = "Not authenticated"


class AuthorizationError(InstaQError):
    status_code = 403
    default_message = "Access denied. Admin privileges required."


class NotFoundError(InstaQError):
    status_code = 404
    default_message = "Attendance record not found"
