# =============================================================================
# core/models/gallery.py - Gallery Schemas
# =============================================================================

from datetime import datetime

from pydantic import BaseModel, Field


class GalleryItem(BaseModel):
    """A row of the gallery table. Newest images are shown first."""

    id: str = Field(..., description="Gallery item identifier")

    photo_url: str = Field(..., description="Public URL of the image")

    caption: str | None = Field(default=None, description="Optional caption")

    created_at: datetime | None = Field(default=None)

    model_config = {"from_attributes": True}
