# =============================================================================
# core/models/page.py - Public Page Schemas
# =============================================================================
# The page model returned by GET /site. Every section is always filled:
# empty tables are replaced by built-in fallback content.
# =============================================================================

from pydantic import BaseModel, Field

from .gallery import GalleryItem
from .service import Service


class HomeSection(BaseModel):
    """Hero copy under the salon name."""
    title: str
    body: str


class AboutSection(BaseModel):
    """About-us section."""
    title: str
    body: str
    philosophy: str
    what_sets_apart: list[str] = Field(default_factory=list)


class SocialLinkView(BaseModel):
    """An active social link with the icon the page should draw."""
    id: str
    platform: str
    url: str
    icon: str = Field(..., description="Resolved icon: instagram or facebook")


class ContactInfo(BaseModel):
    """WhatsApp chat and booking links."""
    whatsapp_url: str
    booking_url: str


class SitePage(BaseModel):
    """
    Everything the public page renders.

    `fallbacks` names the sections showing built-in content because the
    table was empty or could not be read.

    Example:
        {
            "salon_name": "Oshin Beauty Salon & Academy",
            "home": {"title": "Where beauty blossoms", "body": "..."},
            "services": [...],
            "gallery": [...],
            "social_links": [{"platform": "Instagram", "icon": "instagram", ...}],
            "fallbacks": ["gallery"]
        }
    """

    salon_name: str
    home: HomeSection
    about: AboutSection
    services: list[Service] = Field(default_factory=list)
    gallery: list[GalleryItem] = Field(default_factory=list)
    social_links: list[SocialLinkView] = Field(default_factory=list)
    contact: ContactInfo
    fallbacks: list[str] = Field(default_factory=list)
