# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends().
#
# Tests replace the stores through app.dependency_overrides, e.g.
#   app.dependency_overrides[get_row_store] = lambda: InMemoryRowStore()
# =============================================================================

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from app.config import settings
from core.services.image_service import ImageService
from core.services.page_service import PublicPageRenderer
from core.services.workspace import WorkspaceRegistry
from lib.backend import ObjectStore, RowStore
from lib.supabase_client import SupabaseObjectStore, SupabaseRowStore


@lru_cache
def get_row_store() -> RowStore:
    """Row store over the Supabase tables (shared instance)."""
    return SupabaseRowStore()


@lru_cache
def get_object_store() -> ObjectStore:
    """Object store over the image bucket (shared instance)."""
    return SupabaseObjectStore(bucket=settings.STORAGE_BUCKET)


def get_image_service(
    store: ObjectStore = Depends(get_object_store),
) -> ImageService:
    return ImageService(
        store,
        public_prefix=settings.storage_public_prefix,
        allowed_extensions=settings.allowed_image_extensions_list,
        max_bytes=settings.max_upload_size_bytes,
    )


_registry: WorkspaceRegistry | None = None


def get_workspace_registry(
    store: RowStore = Depends(get_row_store),
    images: ImageService = Depends(get_image_service),
) -> WorkspaceRegistry:
    """
    Process-wide registry of admin workspaces.

    Created on first use with the stores of that request.
    """
    global _registry
    if _registry is None:
        _registry = WorkspaceRegistry(
            store,
            images,
            notification_ttl=settings.NOTIFICATION_TTL_SECONDS,
        )
    return _registry


def reset_workspace_registry() -> None:
    """Close every workspace and forget the registry."""
    global _registry
    if _registry is not None:
        for user_id in _registry.active_users():
            _registry.discard(user_id)
    _registry = None


def get_page_renderer(
    store: RowStore = Depends(get_row_store),
) -> PublicPageRenderer:
    """A fresh renderer per page request; it starts from empty state."""
    return PublicPageRenderer(
        store,
        salon_name=settings.SALON_NAME,
        whatsapp_number=settings.WHATSAPP_NUMBER,
        gallery_limit=settings.PUBLIC_GALLERY_LIMIT,
    )


# Type aliases for dependency injection
RowStoreDep = Annotated[RowStore, Depends(get_row_store)]
ObjectStoreDep = Annotated[ObjectStore, Depends(get_object_store)]
RegistryDep = Annotated[WorkspaceRegistry, Depends(get_workspace_registry)]
RendererDep = Annotated[PublicPageRenderer, Depends(get_page_renderer)]
