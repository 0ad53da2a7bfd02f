# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# API endpoints for the admin's Supabase Auth session:
# - sign in with email/password (sets the session cookie)
# - sign out (closes the admin's editors, clears the cookie)
# - password reset email
# - the login surface unauthenticated admin requests are redirected to
# - current identity / profile
# =============================================================================

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import RedirectResponse
from supabase import AuthApiError

from app.auth.dependencies import get_access_token, get_current_user, get_session_context
from app.auth.models import (
    AuthUser,
    Profile,
    ResetPasswordRequest,
    SignInRequest,
    SignInResponse,
)
from app.auth.session_gate import SessionContext
from app.config import settings
from app.dependencies import RegistryDep
from app.exceptions import AuthServiceError, SignInError
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Session
# =============================================================================

@router.post("/sign-in", response_model=SignInResponse)
def sign_in(body: SignInRequest, response: Response) -> SignInResponse:
    """
    Sign in with email and password.

    On success the access token is returned and also stored in an httponly
    cookie, so browser navigation to the admin surface is authenticated.

    Raises:
        401: If Supabase Auth rejects the credentials
        502: If Supabase Auth cannot be reached
    """
    client = SupabaseClient.create_anon_client()

    try:
        result = client.auth.sign_in_with_password(
            {"email": body.email, "password": body.password}
        )
    except AuthApiError as e:
        logger.warning(f"Sign-in rejected for {body.email}: {e}")
        raise SignInError(str(e))
    except Exception as e:
        logger.error(f"Sign-in failed: {e}")
        raise AuthServiceError("sign in", str(e))

    session = result.session
    if session is None or result.user is None:
        raise SignInError("No session returned")

    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=session.access_token,
        max_age=session.expires_in,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )

    logger.info(f"User {result.user.id} signed in")
    return SignInResponse(
        user_id=str(result.user.id),
        email=result.user.email,
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        expires_in=session.expires_in,
        redirect_to=settings.ADMIN_PATH,
    )


@router.post("/sign-out")
def sign_out(
    response: Response,
    registry: RegistryDep,
    context: SessionContext = Depends(get_session_context),
    token: Optional[str] = Depends(get_access_token),
) -> dict:
    """
    Sign out of the current session.

    Closes the admin's editors (late responses are discarded), revokes the
    session with Supabase Auth and clears the session cookie. Revocation is
    best-effort; the cookie is cleared either way.
    """
    user = context.user
    if user is not None:
        registry.discard(str(user.id))

        try:
            SupabaseClient.get_client().auth.admin.sign_out(token)
        except Exception as e:
            logger.warning(f"Could not revoke session of user {user.id}: {e}")

        logger.info(f"User {user.id} signed out")

    context.sign_out()
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return {"signed_out": True, "redirect_to": settings.LOGIN_PATH}


@router.post("/reset-password", status_code=status.HTTP_202_ACCEPTED)
def reset_password(body: ResetPasswordRequest) -> dict:
    """
    Send a password reset email.

    Raises:
        502: If Supabase Auth cannot send the email
    """
    client = SupabaseClient.create_anon_client()
    options = {}
    if settings.PASSWORD_RESET_REDIRECT_URL:
        options["redirect_to"] = settings.PASSWORD_RESET_REDIRECT_URL

    try:
        client.auth.reset_password_for_email(body.email, options)
    except Exception as e:
        logger.error(f"Password reset for {body.email} failed: {e}")
        raise AuthServiceError("send reset email", str(e))

    return {"sent": True, "email": body.email}


@router.get("/login")
def login_surface(context: SessionContext = Depends(get_session_context)):
    """
    Login surface, the target of the admin redirect.

    An already authenticated caller is sent on to the admin surface.
    """
    if context.is_authenticated:
        return RedirectResponse(settings.ADMIN_PATH, status_code=status.HTTP_303_SEE_OTHER)

    return {
        "authenticated": False,
        "sign_in": "/api/v1/auth/sign-in",
        "reset_password": "/api/v1/auth/reset-password",
        "salon_name": settings.SALON_NAME,
    }


# =============================================================================
# Identity
# =============================================================================

@router.get("/me", response_model=Profile)
def get_current_user_info(user: AuthUser = Depends(get_current_user)) -> Profile:
    """
    Get the current authenticated user's profile.

    Raises:
        401: If not authenticated
    """
    try:
        row = SupabaseClient.fetch_profile(str(user.id))
        if row:
            return Profile(**row)
    except Exception as e:
        logger.warning(f"Could not fetch user profile: {e}")

    # Auth user without a profiles row (trigger may not have run yet)
    return Profile(id=user.id, email=user.email)


@router.get("/verify")
def verify_token(user: AuthUser = Depends(get_current_user)) -> dict:
    """
    Verify that the current token is valid.

    Raises:
        401: If token is invalid or expired
    """
    return {
        "valid": True,
        "user_id": str(user.id),
        "email": user.email
    }
