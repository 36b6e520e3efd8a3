"""
Project exception system.

Usage:
    from fieldbook.core.exceptions import ProjectError, ValidationError, exception_factory

    # Built-in types
    raise InvalidIntervalError("start must be before end", details={"startTime": "..."})

    # Add new type on demand
    QuotaError = exception_factory("QuotaError", code="QUOTA_ERROR", http_status=429)
    raise QuotaError("Too many holds", cause=original_error)
"""
from fieldbook.core.exceptions.base import ProjectError, exception_factory
from fieldbook.core.exceptions.errors import (
    ConflictError,
    DuplicateIdError,
    HoldExpiredError,
    InvalidIntervalError,
    InvalidReasonError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)

__all__ = [
    "ProjectError",
    "exception_factory",
    "ValidationError",
    "InvalidIntervalError",
    "InvalidReasonError",
    "UnauthorizedError",
    "NotFoundError",
    "ConflictError",
    "DuplicateIdError",
    "HoldExpiredError",
]
