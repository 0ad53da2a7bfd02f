# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .image_service import ImageInput, ImageService
from .notifications import NotificationChannel
from .page_service import PublicPageRenderer
from .resource_editor import Draft, ResourceEditor
from .workspace import AdminWorkspace, WorkspaceRegistry

__all__ = [
    "AdminWorkspace",
    "Draft",
    "ImageInput",
    "ImageService",
    "NotificationChannel",
    "PublicPageRenderer",
    "ResourceEditor",
    "WorkspaceRegistry",
]
