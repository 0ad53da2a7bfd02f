# =============================================================================
# app/routers/health.py - Health Check Endpoints
# =============================================================================
# Liveness for the process, readiness for the Supabase backend:
# - every site table answers a one-row select
# - the image bucket exists
#
# A degraded backend does not stop the public page (it falls back to the
# built-in content), so readiness reports "degraded" instead of failing.
# =============================================================================

import logging

from fastapi import APIRouter
from pydantic import BaseModel, Field

from app.config import settings
from app.dependencies import ObjectStoreDep, RowStoreDep
from core.resources import RESOURCES
from lib.utils import utc_now_iso

logger = logging.getLogger(__name__)

router = APIRouter()

SITE_TABLES = tuple(spec.table for spec in RESOURCES.values())


# =============================================================================
# Response Models
# =============================================================================

class HealthResponse(BaseModel):
    status: str
    service: str = "salon-site"
    environment: str
    timestamp: str


class ReadinessResponse(BaseModel):
    """Backend reachability, per table and for the image bucket."""
    status: str = Field(..., description="'ready' or 'degraded'")
    tables: dict[str, str]
    storage: str
    timestamp: str


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/health", response_model=HealthResponse)
@router.get("/health/live", response_model=HealthResponse)
async def liveness_check():
    """The process is up. Touches no backend."""
    return HealthResponse(
        status="alive",
        environment=settings.ENVIRONMENT,
        timestamp=utc_now_iso(),
    )


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness_check(rows: RowStoreDep, objects: ObjectStoreDep):
    """Check each site table and the image bucket."""
    tables = {}
    for table in SITE_TABLES:
        try:
            await rows.select(table, columns="id", limit=1)
            tables[table] = "healthy"
        except Exception as e:
            logger.warning(f"Readiness: {table} unreachable: {e}")
            tables[table] = f"unhealthy: {str(e)[:50]}"

    try:
        await objects.check()
        storage = "healthy"
    except Exception as e:
        logger.warning(f"Readiness: bucket {settings.STORAGE_BUCKET} unreachable: {e}")
        storage = f"unhealthy: {str(e)[:50]}"

    healthy = storage == "healthy" and all(v == "healthy" for v in tables.values())
    return ReadinessResponse(
        status="ready" if healthy else "degraded",
        tables=tables,
        storage=storage,
        timestamp=utc_now_iso(),
    )
