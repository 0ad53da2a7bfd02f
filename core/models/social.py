# =============================================================================
# core/models/social.py - Social Media Link Schemas
# =============================================================================

from datetime import datetime

from pydantic import BaseModel, Field, field_validator


class SocialLink(BaseModel):
    """
    A row of the social_media table.

    Links are listed by display_order ascending. display_order is not unique;
    ties keep whatever order the database returns them in.
    """

    id: str = Field(..., description="Link identifier")

    platform: str = Field(..., description="Platform name, e.g. Instagram")

    url: str = Field(..., description="Profile URL")

    # Name of the icon the page should draw (instagram, facebook, ...)
    icon_name: str = Field(..., description="Icon name")

    is_active: bool = Field(default=True, description="Shown on the public page")

    display_order: int = Field(default=0, description="Sort position")

    created_at: datetime | None = Field(default=None)

    model_config = {"from_attributes": True}

    @field_validator("is_active", mode="before")
    @classmethod
    def _active_by_default(cls, value):
        # Column is nullable; NULL means the link was never switched off
        return True if value is None else value

    @field_validator("display_order", mode="before")
    @classmethod
    def _order_defaults_to_zero(cls, value):
        return 0 if value is None else value
