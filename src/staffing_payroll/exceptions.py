"""Error taxonomy shared by the engines and the HTTP surface.

Every error carries an HTTP-equivalent status code, a stable machine-readable
code and a ``details`` mapping with whatever the caller needs to act on it
(current status, allowed transitions, conflicting record id).
"""

from __future__ import annotations

from typing import Any, Iterable


class StaffingError(Exception):
    """Base class for all domain errors."""

    status_code = 400
    error_code = "BUSINESS_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ValidationError(StaffingError):
    """Missing or malformed input the caller can fix."""

    status_code = 400
    error_code = "VALIDATION_ERROR"


class NotFound(StaffingError):
    """A referenced entity does not exist."""

    status_code = 404
    error_code = "NOT_FOUND"

    def __init__(self, entity: str, entity_id: Any):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(
            f"{entity} {entity_id} not found",
            {"entity": entity, "id": str(entity_id)},
        )


class Conflict(StaffingError):
    """A uniqueness or one-per-key rule would be violated."""

    status_code = 409
    error_code = "CONFLICT"


class PreconditionFailed(StaffingError):
    """The record is not in the lifecycle state the operation requires."""

    status_code = 409
    error_code = "PRECONDITION_FAILED"


class InvalidTransition(StaffingError):
    """A requested status change is not allowed from the current status."""

    status_code = 400
    error_code = "INVALID_TRANSITION"

    def __init__(self, current: str, requested: str, allowed: Iterable[str]):
        self.current = current
        self.requested = requested
        self.allowed = sorted(allowed)
        super().__init__(
            f"Cannot transition from '{current}' to '{requested}'. "
            f"Allowed: {', '.join(self.allowed) or 'none'}",
            {"current": current, "requested": requested, "allowed": self.allowed},
        )


class NoBillableEntity(StaffingError):
    """A client has no active employees to bill for."""

    status_code = 422
    error_code = "NO_BILLABLE_ENTITY"


class NoBillableHours(StaffingError):
    """A client's employees logged no hours in the period."""

    status_code = 422
    error_code = "NO_BILLABLE_HOURS"


class InternalError(StaffingError):
    """Storage or otherwise unexpected failure."""

    status_code = 500
    error_code = "INTERNAL_ERROR"
