"""
Built-in exception types. Add new ones here or via exception_factory().
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

from fieldbook.core.exceptions.base import ProjectError, exception_factory

if TYPE_CHECKING:
    from fieldbook.scheduling.types import ConflictReport


class ValidationError(ProjectError):
    """Request or input validation failed."""

    default_code = "VALIDATION_ERROR"
    default_http_status = 400


class InvalidIntervalError(ValidationError):
    """Interval start is not strictly before its end."""

    default_code = "INVALID_INTERVAL"


class InvalidReasonError(ValidationError):
    """Block reason is not one of the enumerated values."""

    default_code = "INVALID_REASON"


class UnauthorizedError(ProjectError):
    """Caller identity missing."""

    default_code = "UNAUTHORIZED"
    default_http_status = 401


class NotFoundError(ProjectError):
    """Requested resource not found."""

    default_code = "NOT_FOUND"
    default_http_status = 404


class ConflictError(ProjectError):
    """Requested interval collides with existing commitments.

    ``report`` keeps the structured ConflictReport; ``details`` holds its
    wire form so the API handler can render it as-is.
    """

    default_code = "CONFLICT"
    default_http_status = 409

    def __init__(
        self,
        message: str,
        *,
        report: Optional["ConflictReport"] = None,
        details: Optional[dict[str, Any]] = None,
        **kwargs: Any,
    ) -> None:
        if report is not None and details is None:
            details = report.to_payload()
        super().__init__(message, details=details, **kwargs)
        self.report = report


class DuplicateIdError(ProjectError):
    """A commitment with the same id is already stored."""

    default_code = "DUPLICATE_ID"
    default_http_status = 409


HoldExpiredError = exception_factory("HoldExpiredError", code="HOLD_EXPIRED", http_status=410)
"""Hold is past its TTL or no longer active; confirmation must not proceed."""
