# =============================================================================
# core/services/page_service.py - Public Page Rendering
# =============================================================================
# Reads the content tables read-only and builds the public page model.
#
# Each page request:
# 1. fetches services, the newest gallery images, the home/about copy and the
#    active social links concurrently and independently
# 2. keeps whatever each fetch returned; a failed fetch keeps the previous
#    (initially empty) state, there is no retry
# 3. renders, substituting the built-in fallback content for anything empty
#
# This way a freshly provisioned backend still shows a complete page.
# =============================================================================

import asyncio
import logging
from typing import Any
from urllib.parse import quote

from core.models.content import CONTENT_BLOCK_IDS, ContentBlock
from core.models.gallery import GalleryItem
from core.models.page import AboutSection, ContactInfo, HomeSection, SitePage, SocialLinkView
from core.models.service import Service
from core.models.social import SocialLink
from lib.backend import Filter, Order, RowStore

logger = logging.getLogger(__name__)


# =============================================================================
# Fallback Content
# =============================================================================

FALLBACK_PHOTO_URL = "https://images.unsplash.com/photo-1616394584738-fc6e612e71b9?w=400&h=400&fit=crop"

FALLBACK_SERVICES: list[dict[str, Any]] = [
    {
        "id": "1",
        "name": "Facial Treatments",
        "photo_url": FALLBACK_PHOTO_URL,
        "short_description": "Rejuvenating facial treatments for all skin types",
        "duration": "60-90 minutes",
        "benefits": ["Deep cleansing", "Anti-aging benefits", "Glowing skin"],
    },
    {
        "id": "2",
        "name": "Hair Styling",
        "photo_url": "https://images.unsplash.com/photo-1522337360788-8b13dee7a37e?w=400&h=400&fit=crop",
        "short_description": "Professional cuts, colors, and styling",
        "duration": "2-3 hours",
        "benefits": ["Color consultation", "Premium products", "Style that lasts"],
    },
    {
        "id": "3",
        "name": "Nail Care",
        "photo_url": "https://images.unsplash.com/photo-1604654894610-df63bc536371?w=400&h=400&fit=crop",
        "short_description": "Professional manicure and pedicure services",
        "duration": "45-60 minutes",
        "benefits": ["Nail shaping", "Cuticle care", "Long-lasting polish"],
    },
]

FALLBACK_GALLERY: list[dict[str, Any]] = [
    {
        "id": "1",
        "photo_url": "https://images.unsplash.com/photo-1560066984-138dadb4c035?w=400&h=400&fit=crop",
        "caption": "Bridal Makeup",
    },
    {
        "id": "2",
        "photo_url": "https://images.unsplash.com/photo-1522337360788-8b13dee7a37e?w=400&h=400&fit=crop",
        "caption": "Hair Styling",
    },
    {
        "id": "3",
        "photo_url": FALLBACK_PHOTO_URL,
        "caption": "Facial Treatment",
    },
    {
        "id": "4",
        "photo_url": "https://images.unsplash.com/photo-1604654894610-df63bc536371?w=400&h=400&fit=crop",
        "caption": "Nail Art",
    },
]

FALLBACK_SOCIAL_LINKS: list[dict[str, Any]] = [
    {"id": "1", "platform": "Instagram", "url": "#", "icon_name": "Instagram", "is_active": True, "display_order": 1},
    {"id": "2", "platform": "Facebook", "url": "#", "icon_name": "Facebook", "is_active": True, "display_order": 2},
]

FALLBACK_HOME = {
    "title": "Where beauty blossoms",
    "body": (
        "Discover your natural radiance at our luxurious beauty salon. We offer premium "
        "services in a serene, elegant environment designed to make you feel beautiful "
        "inside and out."
    ),
}

FALLBACK_ABOUT = {
    "title": "About {salon_name}",
    "body": (
        "At {salon_name}, we believe that beauty is not just about appearance. It's about "
        "confidence, self-care, and feeling your absolute best."
    ),
    "philosophy": (
        "Founded with a passion for enhancing natural beauty, our salon combines luxury "
        "with accessibility. We use only premium products and the latest techniques to "
        "ensure every client receives exceptional service."
    ),
    "what_sets_apart": [
        "Personalized consultations for every service",
        "Premium, cruelty-free products only",
        "Relaxing, luxurious atmosphere",
        "Highly trained and certified professionals",
    ],
}

KNOWN_ICONS = ("instagram", "facebook")


def resolve_icon(icon_name: str | None) -> str:
    """Map a stored icon name to a drawable icon; unknown names draw Instagram."""
    name = (icon_name or "").strip().lower()
    return name if name in KNOWN_ICONS else "instagram"


# =============================================================================
# Renderer
# =============================================================================

class PublicPageRenderer:
    """
    Builds the public page from the last successfully fetched rows.

    Example:
        renderer = PublicPageRenderer(SupabaseRowStore(), salon_name="Oshin ...")
        await renderer.refresh()
        page = renderer.render()
    """

    def __init__(
        self,
        store: RowStore,
        salon_name: str,
        whatsapp_number: str,
        gallery_limit: int = 6,
    ):
        self.store = store
        self.salon_name = salon_name
        self.whatsapp_number = whatsapp_number
        self.gallery_limit = gallery_limit

        self.services: list[dict[str, Any]] = []
        self.gallery: list[dict[str, Any]] = []
        self.content: dict[str, ContentBlock] = {}
        self.social_links: list[dict[str, Any]] = []

        self._closed = False

    def close(self) -> None:
        self._closed = True

    # -------------------------------------------------------------------------
    # Fetching
    # -------------------------------------------------------------------------

    async def refresh(self) -> dict[str, bool]:
        """
        Run the four read-only fetches concurrently.

        Returns:
            Which sections were fetched successfully
        """
        results = await asyncio.gather(
            self.store.select("services", order=Order("created_at")),
            self.store.select(
                "gallery",
                order=Order("created_at", descending=True),
                limit=self.gallery_limit,
            ),
            self.store.select("content", filters=[Filter.in_("id", CONTENT_BLOCK_IDS)]),
            self.store.select(
                "social_media",
                filters=[Filter.eq("is_active", True)],
                order=Order("display_order"),
            ),
            return_exceptions=True,
        )

        outcome: dict[str, bool] = {}
        if self._closed:
            return outcome

        for section, result in zip(("services", "gallery", "content", "social_links"), results):
            if isinstance(result, BaseException):
                logger.warning(f"Public page: failed to fetch {section}: {result}")
                outcome[section] = False
                continue

            if section == "content":
                blocks = (ContentBlock.model_validate(row) for row in result)
                self.content = {block.id: block for block in blocks}
            else:
                setattr(self, section, result)
            outcome[section] = True

        return outcome

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def render(self) -> SitePage:
        fallbacks: list[str] = []

        services = self.services
        if not services:
            services = FALLBACK_SERVICES
            fallbacks.append("services")

        gallery = self.gallery
        if not gallery:
            gallery = FALLBACK_GALLERY
            fallbacks.append("gallery")

        links = self.social_links
        if not links:
            links = FALLBACK_SOCIAL_LINKS
            fallbacks.append("social_links")

        if not self.content:
            fallbacks.append("content")

        return SitePage(
            salon_name=self.salon_name,
            home=self._render_home(),
            about=self._render_about(),
            services=[self._render_service(row) for row in services],
            gallery=[GalleryItem.model_validate(row) for row in gallery],
            social_links=[self._render_link(row) for row in links],
            contact=self._render_contact(),
            fallbacks=fallbacks,
        )

    @staticmethod
    def _render_service(row: dict[str, Any]) -> Service:
        service = Service.model_validate(row)
        if not service.photo_url:
            service.photo_url = FALLBACK_PHOTO_URL
        return service

    @staticmethod
    def _render_link(row: dict[str, Any]) -> SocialLinkView:
        link = SocialLink.model_validate(row)
        return SocialLinkView(
            id=link.id,
            platform=link.platform,
            url=link.url,
            icon=resolve_icon(link.icon_name),
        )

    def _render_home(self) -> HomeSection:
        block = self.content.get("home") or ContentBlock(id="home")
        return HomeSection(
            title=block.title or FALLBACK_HOME["title"],
            body=block.body or FALLBACK_HOME["body"],
        )

    def _render_about(self) -> AboutSection:
        block = self.content.get("about") or ContentBlock(id="about")
        return AboutSection(
            title=block.title or FALLBACK_ABOUT["title"].format(salon_name=self.salon_name),
            body=block.body or FALLBACK_ABOUT["body"].format(salon_name=self.salon_name),
            philosophy=block.philosophy or FALLBACK_ABOUT["philosophy"],
            what_sets_apart=block.what_sets_apart or list(FALLBACK_ABOUT["what_sets_apart"]),
        )

    def _render_contact(self) -> ContactInfo:
        whatsapp_url = f"https://wa.me/{self.whatsapp_number}"
        text = f"Hi! I would like to book an appointment at {self.salon_name}"
        return ContactInfo(
            whatsapp_url=whatsapp_url,
            booking_url=f"{whatsapp_url}?text={quote(text)}",
        )
