# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application:
# - Form value normalization (blank text -> None, line lists)
# - UTC timestamps for row stamping
# - ApplicationError base class
# =============================================================================

from datetime import datetime, timezone
from typing import Any
from uuid import UUID


# =============================================================================
# Identifier Utilities
# =============================================================================

def normalize_id(value: str | int | UUID) -> str:
    """
    Normalize a row identifier to string format.

    Rows use UUID keys except the content table, which uses fixed text ids
    ("home", "about"). Both are compared as strings.

    Example:
        normalize_id(uuid_obj)  # "550e8400-..."
        normalize_id("about")   # "about"
    """
    return value if isinstance(value, str) else str(value)


# =============================================================================
# Form Value Utilities
# =============================================================================

def blank_to_none(value: Any) -> Any:
    """
    Store empty text as NULL, never as an empty string.

    Non-string values pass through unchanged.
    """
    if isinstance(value, str):
        return value if value.strip() else None
    return value


def split_lines(text: str | None) -> list[str] | None:
    """
    Split newline-delimited form text into a list, dropping blank lines.

    Returns None when no non-blank line remains.

    Example:
        split_lines("Deep cleansing\\n\\nGlow")  # ["Deep cleansing", "Glow"]
        split_lines("")                          # None
    """
    if not text:
        return None
    items = [line.strip() for line in text.splitlines() if line.strip()]
    return items or None


def join_lines(items: list[str] | None) -> str:
    """Inverse of split_lines for pre-filling an edit form."""
    return "\n".join(items) if items else ""


def utc_now() -> datetime:
    """Timezone-aware current time."""
    return datetime.now(timezone.utc)


def utc_now_iso() -> str:
    """Current time as an ISO-8601 string, as Postgres timestamptz expects."""
    return utc_now().isoformat()


# =============================================================================
# Base Error Class
# =============================================================================

class ApplicationError(Exception):
    """
    Base error class for application-specific errors.

    Provides actionable error messages following the principle:
    "Errors should tell HOW to fix, not just WHAT failed."

    Attributes:
        code: Error code for categorization
        message: Human-readable error message
        suggestion: Actionable suggestion for fixing the error
        details: Additional context for debugging

    Example:
        class MyServiceError(ApplicationError):
            def __init__(self, message: str, **kwargs):
                super().__init__(message, code="MY_SERVICE_ERROR", **kwargs)
    """

    def __init__(
        self,
        message: str,
        code: str = "APPLICATION_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f"\n  Suggestion: {self.suggestion}"
        return result

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for API responses."""
        return {
            "code": self.code,
            "message": self.message,
            "suggestion": self.suggestion,
            "details": self.details,
        }
