# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains framework-agnostic business logic:
# - models/: Pydantic schemas for table rows, notifications and the page
# - resources.py: Field schemas of the four editable tables
# - errors.py: Failure taxonomy of the editing workflow
# - services/: Resource editor, image handling, page rendering, workspaces
#
# Code in this package should NOT import from FastAPI.
# This keeps the logic testable and reusable.
# =============================================================================
