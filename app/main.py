# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Salon Site API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.dependencies import reset_workspace_registry
from app.exceptions import SalonSiteException, salon_site_exception_handler
from app.routers import admin, health, site
from app.auth import routes as auth_routes
from app.websocket import routes as websocket_routes

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    - Startup: log configuration
    - Shutdown: close every open admin workspace
    """
    logger.info(f"Starting Salon Site API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")

    yield

    logger.info("Shutting down Salon Site API")
    reset_workspace_registry()


# Create FastAPI application
app = FastAPI(
    title="Salon Site API",
    description=f"""
## {settings.SALON_NAME}

Public marketing site and content management API.

### Public Site

`GET /api/v1/site` returns the whole page: home and about copy, services,
the newest gallery images, social links and the WhatsApp booking link.
Anything the database does not have yet is filled with built-in content.

### Admin

Sign in with `POST /api/v1/auth/sign-in`, then edit the site's tables:

| Resource | Create | Edit | Delete | Image upload |
|----------|--------|------|--------|--------------|
| `services` | yes | yes | yes | `photo_url` |
| `gallery` | yes | yes | yes | `photo_url` |
| `content` | no | `home`, `about` | no | no |
| `social_media` | yes | yes | yes | no |

Each admin request returns the editor state plus the notifications the
operation produced. `WS /ws/admin/notifications?token=` streams them live.
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Site",
            "description": "Public page model",
        },
        {
            "name": "Auth",
            "description": "Sign in, sign out and password reset",
        },
        {
            "name": "Admin",
            "description": "Edit services, gallery, page copy and social links",
        },
        {
            "name": "WebSocket",
            "description": "Real-time admin notifications",
        },
        {
            "name": "Health",
            "description": "API health and readiness checks",
        },
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - allows cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(SalonSiteException)
async def handle_salon_site_exception(request: Request, exc: SalonSiteException):
    """Handle custom Salon Site exceptions."""
    return await salon_site_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

# Authentication endpoints
app.include_router(
    auth_routes.router,
    prefix="/api/v1/auth",
    tags=["Auth"]
)

# Health check endpoints
app.include_router(
    health.router,
    prefix="/api/v1",
    tags=["Health"]
)

# Public page
app.include_router(
    site.router,
    prefix="/api/v1",
    tags=["Site"]
)

# Admin editors
app.include_router(
    admin.router,
    prefix="/api/v1/admin",
    tags=["Admin"]
)

# WebSocket endpoints (Real-time notifications)
app.include_router(
    websocket_routes.router,
    tags=["WebSocket"]
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "Salon Site API",
        "version": "1.0.0",
        "docs": "/docs",
        "site": "/api/v1/site",
        "health": "/api/v1/health",
    }
