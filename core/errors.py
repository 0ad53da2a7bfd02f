# =============================================================================
# core/errors.py - Editing Workflow Failures
# =============================================================================
# Failure taxonomy of the content editing workflow:
# - FetchFailure: a read failed; stale or fallback rows stay displayed
# - WriteFailure: insert/update/delete failed; the draft is kept for retry
# - UploadError: storing an image failed; blocks the enclosing write
# - CleanupFailure: removing an orphaned image failed; swallowed
# - DraftValidationError: a required field is missing; nothing is written
#
# The editor catches all of these at its operation boundary and turns them
# into notifications.
# =============================================================================

from lib.utils import ApplicationError


class EditorError(ApplicationError):
    """Base class for failures raised inside the editing workflow."""

    #: Short title shown on the notification for this failure
    title = "Error"


class FetchFailure(EditorError):
    """Raised when rows of a table cannot be read."""

    def __init__(self, table: str, error: str):
        super().__init__(
            message=f"Failed to fetch {table}",
            code="FETCH_FAILED",
            suggestion="Reload the page to try again",
            details={"table": table, "error": error},
        )


class WriteFailure(EditorError):
    """Raised when an insert, update or delete is rejected by the backend."""

    def __init__(self, action: str, table: str, error: str):
        super().__init__(
            message=f"Failed to {action} {table}",
            code="WRITE_FAILED",
            suggestion="Your changes are kept; submit again to retry",
            details={"action": action, "table": table, "error": error},
        )


class UploadError(EditorError):
    """Raised when an image cannot be stored. The enclosing write is aborted."""

    title = "Upload failed"

    def __init__(self, filename: str, error: str):
        super().__init__(
            message=f"Failed to upload image: {error}",
            code="UPLOAD_FAILED",
            suggestion="Choose another file or paste an image URL instead",
            details={"filename": filename, "error": error},
        )


# Name used by the failure taxonomy
UploadFailure = UploadError


class CleanupFailure(EditorError):
    """Raised when a stored image cannot be deleted. Never surfaced."""

    def __init__(self, path: str, error: str):
        super().__init__(
            message=f"Failed to delete stored image {path}",
            code="CLEANUP_FAILED",
            details={"path": path, "error": error},
        )


class DraftValidationError(EditorError):
    """Raised when required fields of a draft are missing."""

    title = "Missing information"

    def __init__(self, table: str, missing: list[str], message: str | None = None):
        labels = ", ".join(name.replace("_", " ") for name in missing)
        super().__init__(
            message=message or f"Please fill in: {labels}",
            code="VALIDATION_FAILED",
            details={"table": table, "missing": missing},
        )

    @property
    def missing(self) -> list[str]:
        return list(self.details.get("missing", []))

