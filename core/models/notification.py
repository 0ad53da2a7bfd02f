# =============================================================================
# core/models/notification.py - Admin Notification Schemas
# =============================================================================
# Transient messages ("toasts") emitted by the editors, e.g.
# "Service created successfully" or "Failed to fetch gallery".
# =============================================================================

from datetime import datetime, timedelta
from enum import Enum

from pydantic import BaseModel, Field

from lib.utils import utc_now


class NotificationLevel(str, Enum):
    """How the presentation layer should style a notification."""
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


class Notification(BaseModel):
    """
    A transient user-facing message.

    Example:
        {
            "level": "error",
            "title": "Error",
            "message": "Failed to delete gallery",
            "resource": "gallery",
            "created_at": "2024-01-15T10:30:00Z",
            "expires_at": "2024-01-15T10:30:05Z"
        }
    """

    level: NotificationLevel = Field(..., description="success, error or info")

    title: str = Field(..., description="Short headline")

    message: str = Field(..., description="Human-readable description")

    # Which editor emitted it (None for auth/session messages)
    resource: str | None = Field(default=None)

    created_at: datetime = Field(default_factory=utc_now)

    expires_at: datetime | None = Field(
        default=None,
        description="When the presentation layer should dismiss it"
    )

    model_config = {"use_enum_values": True}

    @classmethod
    def build(
        cls,
        level: NotificationLevel,
        title: str,
        message: str,
        resource: str | None = None,
        ttl_seconds: int | None = None,
    ) -> "Notification":
        now = utc_now()
        expires_at = now + timedelta(seconds=ttl_seconds) if ttl_seconds else None
        return cls(
            level=level,
            title=title,
            message=message,
            resource=resource,
            created_at=now,
            expires_at=expires_at,
        )

    @property
    def is_error(self) -> bool:
        return self.level == NotificationLevel.ERROR.value
