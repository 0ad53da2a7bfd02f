# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# Provides JWT-based authentication using Supabase Auth and the session gate
# guarding the admin API.
#
# Usage:
#   from app.auth import require_admin, AuthUser
#
#   @router.get("/admin-only")
#   async def admin_only(user: AuthUser = Depends(require_admin)):
#       return {"user_id": user.id}
# =============================================================================

from app.auth.dependencies import (
    decode_access_token,
    get_access_token,
    get_current_user,
    get_current_user_optional,
    get_session_context,
    require_admin,
)
from app.auth.models import AuthUser, Profile
from app.auth.session_gate import GateDecision, SessionContext, SessionGate, SessionState

__all__ = [
    "decode_access_token",
    "get_access_token",
    "get_current_user",
    "get_current_user_optional",
    "get_session_context",
    "require_admin",
    "AuthUser",
    "Profile",
    "GateDecision",
    "SessionContext",
    "SessionGate",
    "SessionState",
]
