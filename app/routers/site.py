# =============================================================================
# app/routers/site.py - Public Site Endpoint
# =============================================================================
# Serves the public marketing page model. Never requires authentication and
# never fails because of the backend: anything that cannot be fetched is
# replaced by built-in fallback content.
# =============================================================================

import logging

from fastapi import APIRouter

from app.dependencies import RendererDep
from core.models.page import SitePage

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/site", response_model=SitePage)
async def get_site(renderer: RendererDep) -> SitePage:
    """
    Get the public page.

    Services, gallery, home/about copy and social links are fetched
    concurrently; `fallbacks` lists the sections shown from built-in content.
    """
    try:
        await renderer.refresh()
        return renderer.render()
    finally:
        renderer.close()
