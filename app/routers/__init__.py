# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - site.py: Public page model
# - admin.py: Admin editors for services, gallery, content and social links
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import admin
from . import health
from . import site

__all__ = [
    "admin",
    "health",
    "site",
]
