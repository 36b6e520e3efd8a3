"""
Base exception types for the reservation engine.

Subclass ProjectError or use exception_factory() to add new exception types
on demand. Every error carries a machine-readable code and an HTTP status so
the API layer can render it without a per-route mapping.
"""
from __future__ import annotations

import traceback
from typing import Any, Optional, Type


class ProjectError(Exception):
    """
    Base exception for all fieldbook errors.

    Attributes:
        message: Human-readable error description.
        code: Machine-readable slug (defaults to class __name__).
        http_status: HTTP status used by the API exception handler (default 500).
        details: Extra context rendered next to the message (e.g. conflict lists).
        cause: Optional chained exception.
    """

    default_code: str = "ERROR"
    default_http_status: int = 500

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = None,
        http_status: Optional[int] = None,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code if code is not None else getattr(
            self.__class__, "default_code", self.__class__.__name__
        )
        self.http_status = (
            http_status
            if http_status is not None
            else getattr(self.__class__, "default_http_status", 500)
        )
        self.details: dict[str, Any] = details or {}
        self.cause = cause

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, code={self.code!r}, "
            f"http_status={self.http_status})"
        )

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Serialize for logging. Includes the cause traceback when chained."""
        out: dict[str, Any] = {
            "message": self.message,
            "code": self.code,
            "http_status": self.http_status,
        }
        if self.details:
            out["details"] = self.details
        if self.cause is not None:
            out["cause"] = str(self.cause)
            out["cause_traceback"] = traceback.format_exception(
                type(self.cause), self.cause, self.cause.__traceback__
            )
        return out

    def to_response(self) -> dict[str, Any]:
        """Body for API responses: message + code, with details flattened in."""
        body: dict[str, Any] = {"message": self.message, "code": self.code}
        body.update(self.details)
        return body


def exception_factory(
    name: str,
    *,
    code: Optional[str] = None,
    http_status: int = 500,
    base: Type[ProjectError] = ProjectError,
) -> Type[ProjectError]:
    """
    Create a new exception class on demand.

    Example:
        HoldExpiredError = exception_factory("HoldExpiredError", code="HOLD_EXPIRED", http_status=410)
        raise HoldExpiredError("Hold has expired", details={"holdId": "..."})
    """
    code = code or name.upper().replace(" ", "_")
    return type(
        name,
        (base,),
        {
            "default_code": code,
            "default_http_status": http_status,
        },
    )
