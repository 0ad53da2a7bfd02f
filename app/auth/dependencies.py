# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# Provides dependency injection for authentication and the admin session gate.
#
# The access token is read from the Authorization header (Bearer) or, for
# browser navigation, from the session cookie set at sign-in.
#
# Supports both:
# - ES256 (new Supabase JWT signing keys) via JWKS
# - HS256 (legacy Supabase JWT secret) as fallback
#
# Usage:
#   from app.auth import require_admin, AuthUser
#
#   @router.get("/admin-only")
#   async def admin_only(user: AuthUser = Depends(require_admin)):
#       return {"user_id": user.id}
# =============================================================================

import logging
import time
from typing import Optional
from uuid import UUID

import httpx
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt

from app.auth.models import AuthUser
from app.auth.session_gate import GateDecision, SessionContext, SessionGate
from app.config import settings

logger = logging.getLogger(__name__)

# HTTP Bearer token extractor (missing header is not an error; the cookie may carry it)
security_optional = HTTPBearer(auto_error=False)

# Cache for JWKS keys
_jwks_cache: dict = {}
_jwks_cache_time: float = 0
JWKS_CACHE_TTL = 3600  # 1 hour


def _get_jwks_url() -> str:
    """Get the JWKS URL from Supabase URL."""
    supabase_url = settings.SUPABASE_URL.rstrip('/')
    return f"{supabase_url}/auth/v1/.well-known/jwks.json"


def _fetch_jwks() -> dict:
    """Fetch JWKS from Supabase with caching."""
    global _jwks_cache, _jwks_cache_time

    current_time = time.time()

    # Return cached if valid
    if _jwks_cache and (current_time - _jwks_cache_time) < JWKS_CACHE_TTL:
        return _jwks_cache

    try:
        jwks_url = _get_jwks_url()
        response = httpx.get(jwks_url, timeout=10)
        response.raise_for_status()
        _jwks_cache = response.json()
        _jwks_cache_time = current_time
        logger.debug(f"Fetched JWKS from {jwks_url}")
        return _jwks_cache
    except Exception as e:
        logger.warning(f"Failed to fetch JWKS: {e}")
        # Return cached even if expired, as fallback
        if _jwks_cache:
            return _jwks_cache
        return {"keys": []}


def _get_signing_key(token: str) -> tuple[str | dict, str]:
    """
    Get the appropriate signing key for a token.

    Returns:
        Tuple of (key, algorithm) to use for verification
    """
    try:
        unverified_header = jwt.get_unverified_header(token)
    except JWTError:
        return settings.SUPABASE_JWT_SECRET, "HS256"

    alg = unverified_header.get("alg", "HS256")
    kid = unverified_header.get("kid")

    if alg == "HS256":
        return settings.SUPABASE_JWT_SECRET, "HS256"

    # For ES256 or other algorithms, use JWKS
    if kid:
        for key in _fetch_jwks().get("keys", []):
            if key.get("kid") == kid:
                return key, alg

    logger.warning(f"Could not find key for alg={alg}, kid={kid}, falling back to HS256")
    return settings.SUPABASE_JWT_SECRET, "HS256"


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def decode_access_token(token: str) -> AuthUser:
    """
    Verify a Supabase access token and extract the user.

    Raises:
        HTTPException: 401 if token is invalid or expired
    """
    try:
        signing_key, algorithm = _get_signing_key(token)
        payload = jwt.decode(
            token,
            signing_key,
            algorithms=[algorithm],
            audience="authenticated"
        )
    except ExpiredSignatureError:
        logger.warning("JWT token has expired")
        raise _unauthorized("Token has expired")
    except JWTError as e:
        logger.warning(f"JWT validation failed: {e}")
        raise _unauthorized(f"Invalid token: {str(e)}")

    user_id = payload.get("sub")
    if not user_id:
        logger.warning("JWT token missing 'sub' claim")
        raise _unauthorized("Invalid token: missing user ID")

    try:
        user_uuid = UUID(user_id)
    except ValueError:
        logger.warning(f"Invalid UUID in token: {user_id}")
        raise _unauthorized("Invalid token: malformed user ID")

    logger.debug(f"Authenticated user: {user_id}")
    return AuthUser(id=user_uuid, email=payload.get("email"))


def get_access_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security_optional),
) -> Optional[str]:
    """Bearer token if present, otherwise the session cookie."""
    if credentials is not None:
        return credentials.credentials
    return request.cookies.get(settings.SESSION_COOKIE_NAME)


async def get_current_user_optional(
    token: Optional[str] = Depends(get_access_token),
) -> Optional[AuthUser]:
    """
    Optionally get the current user from the access token.

    Returns None if no token is provided or the token is invalid,
    instead of raising an error.
    """
    if not token:
        return None

    try:
        return decode_access_token(token)
    except HTTPException:
        # If token is invalid, treat as no auth rather than error
        return None


async def get_current_user(
    token: Optional[str] = Depends(get_access_token),
) -> AuthUser:
    """
    Require a valid access token.

    Raises:
        HTTPException: 401 if no token or the token is invalid
    """
    if not token:
        raise _unauthorized("Not authenticated")
    return decode_access_token(token)


async def get_session_context(
    user: Optional[AuthUser] = Depends(get_current_user_optional),
) -> SessionContext:
    """Session context of this request, resolved from its token."""
    context = SessionContext()
    context.resolve(user)
    return context


session_gate = SessionGate(login_path=settings.LOGIN_PATH)


async def require_admin(
    context: SessionContext = Depends(get_session_context),
) -> AuthUser:
    """
    Gate for every admin endpoint.

    Runs before the endpoint body, so an unauthenticated request is
    redirected to the login surface before any table is touched.

    Raises:
        HTTPException: 303 redirect to LOGIN_PATH without a session
    """
    result = session_gate.check(context)

    if result.decision == GateDecision.RENDER:
        return result.user

    if result.decision == GateDecision.LOADING:
        # Session resolution is synchronous per request; reaching this is a bug
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Session not ready")

    raise HTTPException(
        status_code=status.HTTP_303_SEE_OTHER,
        detail="Sign in required",
        headers={"Location": result.location},
    )
