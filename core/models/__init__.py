# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for the site's tables and views:
# - service.py: Service rows (services table)
# - gallery.py: GalleryItem rows (gallery table)
# - content.py: ContentBlock rows (content table, "home"/"about")
# - social.py: SocialLink rows (social_media table)
# - notification.py: Admin notifications emitted by the editors
# - page.py: Public page model
# =============================================================================

# -----------------------------------------------------------------------------
# Table Rows
# -----------------------------------------------------------------------------
from .content import CONTENT_BLOCK_IDS, ContentBlock, ContentBlockId
from .gallery import GalleryItem
from .service import Service
from .social import SocialLink

# -----------------------------------------------------------------------------
# Notifications
# -----------------------------------------------------------------------------
from .notification import Notification, NotificationLevel

# -----------------------------------------------------------------------------
# Public Page
# -----------------------------------------------------------------------------
from .page import AboutSection, ContactInfo, HomeSection, SitePage, SocialLinkView

__all__ = [
    # Rows
    "CONTENT_BLOCK_IDS",
    "ContentBlock",
    "ContentBlockId",
    "GalleryItem",
    "Service",
    "SocialLink",
    # Notifications
    "Notification",
    "NotificationLevel",
    # Page
    "AboutSection",
    "ContactInfo",
    "HomeSection",
    "SitePage",
    "SocialLinkView",
]
