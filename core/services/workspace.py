# =============================================================================
# core/services/workspace.py - Per-Admin Editor Workspaces
# =============================================================================
# Every signed-in admin gets a workspace holding:
# - one ResourceEditor per editable table (services, gallery, content,
#   social_media), each with its own draft
# - a personal NotificationChannel all of those editors emit into
#
# Workspaces for different admins share nothing but the backend tables.
# Signing out closes the workspace; requests still in flight for it are
# discarded by the editors.
# =============================================================================

import logging

from core.resources import RESOURCES, ResourceSpec
from core.services.image_service import ImageService
from core.services.notifications import NotificationChannel
from core.services.resource_editor import ResourceEditor
from lib.backend import RowStore

logger = logging.getLogger(__name__)


class AdminWorkspace:
    """The editors and notification channel of one admin."""

    def __init__(
        self,
        user_id: str,
        store: RowStore,
        images: ImageService | None,
        notification_ttl: int | None = 5,
        resources: dict[str, ResourceSpec] | None = None,
    ):
        self.user_id = user_id
        self.notifications = NotificationChannel(ttl_seconds=notification_ttl)
        self.editors: dict[str, ResourceEditor] = {
            name: ResourceEditor(spec, store, images, self.notifications)
            for name, spec in (resources or RESOURCES).items()
        }
        self.closed = False

    def editor(self, resource: str) -> ResourceEditor:
        """
        Raises:
            KeyError: If `resource` is not an editable table
        """
        return self.editors[resource]

    def close(self) -> None:
        for editor in self.editors.values():
            editor.close()
        self.closed = True


class WorkspaceRegistry:
    """
    Lazily creates and tracks one AdminWorkspace per admin user.

    Example:
        registry = WorkspaceRegistry(SupabaseRowStore(), image_service)
        editor = registry.get(user_id).editor("services")
    """

    def __init__(
        self,
        store: RowStore,
        images: ImageService | None,
        notification_ttl: int | None = 5,
    ):
        self.store = store
        self.images = images
        self.notification_ttl = notification_ttl
        self._workspaces: dict[str, AdminWorkspace] = {}

    def get(self, user_id: str) -> AdminWorkspace:
        workspace = self._workspaces.get(user_id)
        if workspace is None or workspace.closed:
            workspace = AdminWorkspace(
                user_id,
                self.store,
                self.images,
                notification_ttl=self.notification_ttl,
            )
            self._workspaces[user_id] = workspace
            logger.info(f"Opened editor workspace for user {user_id}")
        return workspace

    def discard(self, user_id: str) -> bool:
        """Close and forget an admin's workspace. Returns False if none existed."""
        workspace = self._workspaces.pop(user_id, None)
        if workspace is None:
            return False
        workspace.close()
        logger.info(f"Closed editor workspace for user {user_id}")
        return True

    def active_users(self) -> list[str]:
        return list(self._workspaces.keys())
