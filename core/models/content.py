# =============================================================================
# core/models/content.py - Page Copy Schemas
# =============================================================================
# The content table holds exactly two pre-seeded rows:
# - "home": hero title and tagline
# - "about": about-us copy, philosophy and the "what sets us apart" list
#
# Rows are never created or deleted, only updated.
# =============================================================================

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class ContentBlockId(str, Enum):
    """Fixed ids of the content rows."""
    HOME = "home"
    ABOUT = "about"


CONTENT_BLOCK_IDS: tuple[str, ...] = tuple(block.value for block in ContentBlockId)


class ContentBlock(BaseModel):
    """
    A row of the content table.

    `philosophy` and `what_sets_apart` are only used by the "about" row.
    """

    id: ContentBlockId = Field(..., description="Either 'home' or 'about'")

    title: str | None = Field(default=None)

    body: str | None = Field(default=None)

    philosophy: str | None = Field(default=None, description="About page only")

    what_sets_apart: list[str] | None = Field(
        default=None,
        description="About page only: reasons to choose the salon"
    )

    updated_at: datetime | None = Field(default=None)

    model_config = {"from_attributes": True, "use_enum_values": True}
