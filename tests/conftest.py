# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - In-memory RowStore / ObjectStore fakes recording every call
# - Sample rows for each editable table
# =============================================================================

import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import copy
import uuid
from typing import Any, Sequence

import pytest

from core.services.image_service import ImageService
from core.services.notifications import NotificationChannel
from lib.backend import Filter, Order
from lib.utils import utc_now_iso

PUBLIC_PREFIX = "https://test-project.supabase.co/storage/v1/object/public/site-images/"


# =============================================================================
# In-memory backend
# =============================================================================

class InMemoryRowStore:
    """
    RowStore over plain dicts.

    `calls` records (method, table) for every request. `fail_on` makes the
    next requests of a (method, table) pair raise.
    """

    def __init__(self, tables: dict[str, list[dict[str, Any]]] | None = None):
        self.tables: dict[str, list[dict[str, Any]]] = copy.deepcopy(tables or {})
        self.calls: list[tuple[str, str]] = []
        self.fail_on: set[tuple[str, str]] = set()

    def _check(self, method: str, table: str) -> None:
        self.calls.append((method, table))
        if (method, table) in self.fail_on or (method, "*") in self.fail_on:
            raise RuntimeError(f"{method} on {table} failed")

    def count(self, method: str, table: str | None = None) -> int:
        return sum(1 for m, t in self.calls if m == method and (table is None or t == table))

    @staticmethod
    def _matches(row: dict[str, Any], filters: Sequence[Filter]) -> bool:
        return all(f.matches(row) for f in filters)

    async def select(
        self,
        table: str,
        columns: str = "*",
        filters: Sequence[Filter] = (),
        order: Order | None = None,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        self._check("select", table)
        rows = [dict(r) for r in self.tables.get(table, []) if self._matches(r, filters)]
        if order is not None:
            rows.sort(
                key=lambda r: (r.get(order.column) is None, r.get(order.column)),
                reverse=order.descending,
            )
        if limit is not None:
            rows = rows[:limit]
        return rows

    async def insert(self, table: str, rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
        self._check("insert", table)
        inserted = []
        for row in rows:
            row = dict(row)
            row.setdefault("id", str(uuid.uuid4()))
            row.setdefault("created_at", utc_now_iso())
            self.tables.setdefault(table, []).append(row)
            inserted.append(dict(row))
        return inserted

    async def update(
        self,
        table: str,
        patch: dict[str, Any],
        filters: Sequence[Filter],
    ) -> list[dict[str, Any]]:
        self._check("update", table)
        updated = []
        for row in self.tables.get(table, []):
            if self._matches(row, filters):
                row.update(patch)
                updated.append(dict(row))
        return updated

    async def delete(self, table: str, filters: Sequence[Filter]) -> list[dict[str, Any]]:
        self._check("delete", table)
        kept, deleted = [], []
        for row in self.tables.get(table, []):
            (deleted if self._matches(row, filters) else kept).append(row)
        self.tables[table] = kept
        return deleted


class InMemoryObjectStore:
    """ObjectStore keeping uploaded bytes in a dict."""

    def __init__(self, public_prefix: str = PUBLIC_PREFIX):
        self.public_prefix = public_prefix
        self.objects: dict[str, bytes] = {}
        self.uploads: list[str] = []
        self.removals: list[list[str]] = []
        self.fail_upload = False
        self.fail_remove = False
        self.fail_check = False

    async def upload(self, path: str, content: bytes, content_type: str | None = None) -> str:
        self.uploads.append(path)
        if self.fail_upload:
            raise RuntimeError("Bucket not found")
        self.objects[path] = content
        return path

    def public_url(self, path: str) -> str:
        return f"{self.public_prefix}{path}"

    async def remove(self, paths: list[str]) -> None:
        self.removals.append(list(paths))
        if self.fail_remove:
            raise RuntimeError("Storage unavailable")
        for path in paths:
            self.objects.pop(path, None)

    async def check(self) -> None:
        if self.fail_check:
            raise RuntimeError("Bucket not found")


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def sample_tables():
    """One table's worth of rows per editable resource."""
    return {
        "services": [
            {
                "id": "svc-1",
                "name": "Facial Treatments",
                "photo_url": f"{PUBLIC_PREFIX}services/0.123.jpg",
                "short_description": "Rejuvenating facials",
                "duration": "60-90 minutes",
                "benefits": ["Deep cleansing", "Glowing skin"],
                "created_at": "2024-01-10T10:00:00+00:00",
            },
            {
                "id": "svc-2",
                "name": "Hair Styling",
                "photo_url": None,
                "short_description": None,
                "duration": "2-3 hours",
                "benefits": None,
                "created_at": "2024-01-12T10:00:00+00:00",
            },
        ],
        "gallery": [
            {
                "id": "gal-1",
                "photo_url": f"{PUBLIC_PREFIX}gallery/0.456.png",
                "caption": "Bridal Makeup",
                "created_at": "2024-01-11T10:00:00+00:00",
            },
            {
                "id": "gal-2",
                "photo_url": "https://images.unsplash.com/photo-1560066984-138dadb4c035",
                "caption": None,
                "created_at": "2024-01-13T10:00:00+00:00",
            },
        ],
        "content": [
            {
                "id": "home",
                "title": "Where beauty blossoms",
                "body": "Discover your natural radiance.",
                "philosophy": None,
                "what_sets_apart": None,
                "updated_at": "2024-01-01T00:00:00+00:00",
            },
            {
                "id": "about",
                "title": "About us",
                "body": "We believe in confidence.",
                "philosophy": "Luxury with accessibility.",
                "what_sets_apart": ["A", "B"],
                "updated_at": "2024-01-01T00:00:00+00:00",
            },
        ],
        "social_media": [
            {
                "id": "soc-2",
                "platform": "Facebook",
                "url": "https://facebook.com/salon",
                "icon_name": "Facebook",
                "is_active": True,
                "display_order": 2,
            },
            {
                "id": "soc-1",
                "platform": "Instagram",
                "url": "https://instagram.com/salon",
                "icon_name": "Instagram",
                "is_active": True,
                "display_order": 1,
            },
            {
                "id": "soc-3",
                "platform": "TikTok",
                "url": "https://tiktok.com/@salon",
                "icon_name": "TikTok",
                "is_active": False,
                "display_order": 3,
            },
        ],
    }


@pytest.fixture
def row_store(sample_tables):
    return InMemoryRowStore(sample_tables)


@pytest.fixture
def empty_row_store():
    return InMemoryRowStore()


@pytest.fixture
def object_store():
    return InMemoryObjectStore()


@pytest.fixture
def image_service(object_store):
    return ImageService(
        object_store,
        public_prefix=PUBLIC_PREFIX,
        allowed_extensions=[".jpg", ".jpeg", ".png", ".webp", ".gif"],
        max_bytes=1024 * 1024,
    )


@pytest.fixture
def channel():
    return NotificationChannel(ttl_seconds=5)
