# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Errors tell HOW to fix, not just WHAT failed.
#
# Editing failures (fetch/write/upload) never reach this layer: the editors
# turn them into notifications. These exceptions cover requests that cannot
# reach an editor at all (unknown resource, bad sign-in, ...).
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse


class SalonSiteException(Exception):
    """
    Base exception for the salon site API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "SALON_SITE_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Admin Editor Exceptions
# =============================================================================

class UnknownResourceError(SalonSiteException):
    """Raised when the admin API is asked for a table it does not edit."""

    def __init__(self, resource: str, available: list[str]):
        super().__init__(
            message=f"Unknown resource: {resource}",
            code="UNKNOWN_RESOURCE",
            status_code=404,
            suggestion=f"Use one of: {', '.join(available)}",
            details={"resource": resource, "available": available}
        )


class RowNotFoundError(SalonSiteException):
    """Raised when a row id is not among the editor's loaded rows."""

    def __init__(self, resource: str, row_id: str):
        super().__init__(
            message=f"No {resource} row with id {row_id}",
            code="ROW_NOT_FOUND",
            status_code=404,
            suggestion=f"Reload GET /admin/{resource} and pick an id from the list",
            details={"resource": resource, "row_id": row_id}
        )


class InvalidDraftFieldError(SalonSiteException):
    """Raised when a draft update names a field the row does not have."""

    def __init__(self, resource: str, error: str):
        super().__init__(
            message=error,
            code="INVALID_DRAFT_FIELD",
            status_code=400,
            suggestion="Only send fields listed in the draft returned by the editor",
            details={"resource": resource}
        )


# =============================================================================
# Auth Exceptions
# =============================================================================

class SignInError(SalonSiteException):
    """Raised when Supabase Auth rejects the credentials."""

    def __init__(self, error: str):
        super().__init__(
            message=f"Authentication Error: {error}",
            code="SIGN_IN_FAILED",
            status_code=401,
            suggestion="Check the email and password, or request a password reset",
        )


class AuthServiceError(SalonSiteException):
    """Raised when Supabase Auth cannot be reached or fails unexpectedly."""

    def __init__(self, action: str, error: str):
        super().__init__(
            message=f"Failed to {action}: {error}",
            code="AUTH_SERVICE_ERROR",
            status_code=502,
            suggestion="Try again later or contact support if the issue persists",
            details={"action": action}
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def salon_site_exception_handler(
    request: Request,
    exc: SalonSiteException
) -> JSONResponse:
    """
    Convert SalonSiteException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )
