# =============================================================================
# core/models/service.py - Service Schemas
# =============================================================================
# A salon service shown on the public page (facials, hair styling, ...).
# Rows live in the `services` table.
# =============================================================================

from datetime import datetime

from pydantic import BaseModel, Field


class Service(BaseModel):
    """
    A row of the services table.

    `benefits` is stored as a list; the admin form edits it as
    newline-delimited text.

    Example:
        {
            "id": "550e8400-e29b-41d4-a716-446655440000",
            "name": "Facial Treatments",
            "photo_url": "https://.../services/0.4821.jpg",
            "short_description": "Rejuvenating facial treatments",
            "duration": "60-90 minutes",
            "benefits": ["Deep cleansing", "Glowing skin"]
        }
    """

    id: str = Field(..., description="Service identifier")

    name: str = Field(..., min_length=1, description="Service name")

    photo_url: str | None = Field(
        default=None,
        description="Public URL of the service photo"
    )

    short_description: str | None = Field(
        default=None,
        description="One or two sentence summary"
    )

    # Free text such as "60-90 minutes"
    duration: str | None = Field(default=None, description="How long it takes")

    benefits: list[str] | None = Field(
        default=None,
        description="Bullet points listed under the service"
    )

    created_at: datetime | None = Field(default=None)

    model_config = {"from_attributes": True}
