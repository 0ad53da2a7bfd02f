# =============================================================================
# tests/test_page_service.py - Public Page Rendering Tests
# =============================================================================
# Tests for the public page: concurrent fetches, per-section fallbacks,
# icon resolution and the booking link.
#
# Run with: pytest tests/test_page_service.py -v
# =============================================================================

import asyncio
from urllib.parse import unquote

from core.services.page_service import (
    FALLBACK_ABOUT,
    FALLBACK_GALLERY,
    FALLBACK_HOME,
    FALLBACK_PHOTO_URL,
    FALLBACK_SERVICES,
    PublicPageRenderer,
    resolve_icon,
)

SALON = "Oshin Beauty Salon & Academy"


def render(store, gallery_limit=6):
    renderer = PublicPageRenderer(store, SALON, "918310298181", gallery_limit=gallery_limit)
    outcome = asyncio.run(renderer.refresh())
    return renderer.render(), outcome


class TestPopulatedBackend:
    """Rendering from filled tables."""

    def test_services_oldest_first(self, row_store):
        page, outcome = render(row_store)

        assert [s.id for s in page.services] == ["svc-1", "svc-2"]
        assert outcome == {"services": True, "gallery": True, "content": True, "social_links": True}
        assert page.fallbacks == []

    def test_service_without_photo_gets_placeholder(self, row_store):
        page, _ = render(row_store)

        hair = [s for s in page.services if s.id == "svc-2"][0]
        assert hair.photo_url == FALLBACK_PHOTO_URL

    def test_gallery_newest_first_and_limited(self, row_store):
        page, _ = render(row_store, gallery_limit=1)

        assert [g.id for g in page.gallery] == ["gal-2"]

    def test_only_active_social_links_in_order(self, row_store):
        page, _ = render(row_store)

        assert [link.platform for link in page.social_links] == ["Instagram", "Facebook"]
        assert [link.icon for link in page.social_links] == ["instagram", "facebook"]

    def test_home_copy_from_content(self, row_store):
        page, _ = render(row_store)

        assert page.home.title == "Where beauty blossoms"
        assert page.home.body == "Discover your natural radiance."

    def test_missing_about_fields_fall_back(self, row_store):
        row_store.tables["content"][1]["what_sets_apart"] = None
        row_store.tables["content"][1]["philosophy"] = ""

        page, _ = render(row_store)

        assert page.about.title == "About us"
        assert page.about.philosophy == FALLBACK_ABOUT["philosophy"]
        assert page.about.what_sets_apart == FALLBACK_ABOUT["what_sets_apart"]


class TestFallbacks:
    """Rendering from empty or failing tables."""

    def test_empty_backend_renders_complete_page(self, empty_row_store):
        page, _ = render(empty_row_store)

        assert len(page.services) == len(FALLBACK_SERVICES)
        assert len(page.gallery) == len(FALLBACK_GALLERY)
        assert [link.platform for link in page.social_links] == ["Instagram", "Facebook"]
        assert page.home.title == FALLBACK_HOME["title"]
        assert page.about.title == f"About {SALON}"
        assert set(page.fallbacks) == {"services", "gallery", "social_links", "content"}

    def test_failed_fetch_is_independent(self, row_store):
        row_store.fail_on.add(("select", "gallery"))

        page, outcome = render(row_store)

        assert outcome["gallery"] is False
        assert outcome["services"] is True
        assert page.fallbacks == ["gallery"]
        assert [s.id for s in page.services] == ["svc-1", "svc-2"]

    def test_all_fetches_failing_still_renders(self, row_store):
        row_store.fail_on.add(("select", "*"))

        page, outcome = render(row_store)

        assert not any(outcome.values())
        assert page.salon_name == SALON
        assert len(page.services) == len(FALLBACK_SERVICES)

    def test_closed_renderer_ignores_results(self, row_store):
        renderer = PublicPageRenderer(row_store, SALON, "918310298181")
        renderer.close()

        assert asyncio.run(renderer.refresh()) == {}
        assert renderer.services == []


class TestContact:
    """Tests for the WhatsApp links."""

    def test_booking_link(self, empty_row_store):
        page, _ = render(empty_row_store)

        assert page.contact.whatsapp_url == "https://wa.me/918310298181"
        assert page.contact.booking_url.startswith("https://wa.me/918310298181?text=")
        text = unquote(page.contact.booking_url.split("text=", 1)[1])
        assert text == f"Hi! I would like to book an appointment at {SALON}"


class TestResolveIcon:
    """Tests for icon name resolution."""

    def test_known_icons(self):
        assert resolve_icon("Instagram") == "instagram"
        assert resolve_icon(" facebook ") == "facebook"

    def test_unknown_icon_defaults_to_instagram(self):
        assert resolve_icon("TikTok") == "instagram"
        assert resolve_icon(None) == "instagram"
