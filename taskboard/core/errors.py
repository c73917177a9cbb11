"""Error taxonomy shared by the services and the HTTP layer.

Services raise these; ``taskboard.main`` turns them into JSON responses.
"""
from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class FieldViolation:
    field: str
    message: str

    def as_dict(self) -> dict:
        return {"field": self.field, "message": self.message}


class TaskboardError(Exception):
    """Base class for expected, client-facing failures."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(TaskboardError):
    status_code = 400
    default_message = "Invalid data"

    def __init__(self, violations: List[FieldViolation], message: Optional[str] = None):
        super().__init__(message)
        self.violations = list(violations)


class UnauthorizedError(TaskboardError):
    status_code = 401
    default_message = "Not authenticated"


class ForbiddenError(TaskboardError):
    # Rendered as 404 by the HTTP layer so other users' tasks stay invisible
    status_code = 403
    default_message = "Not authorized"


class NotFoundError(TaskboardError):
    status_code = 404
    default_message = "Task not found"


class ConflictError(TaskboardError):
    status_code = 409
    default_message = "Email already registered"


class InternalError(TaskboardError):
    status_code = 500
