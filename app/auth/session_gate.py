# =============================================================================
# app/auth/session_gate.py - Admin Session Gate
# =============================================================================
# The admin surface is only shown to an authenticated identity.
#
# SessionContext is the explicitly owned session state:
#
#   UNREADY --resolve(user)--> AUTHENTICATED
#           --resolve(None)--> UNAUTHENTICATED
#   AUTHENTICATED --sign_out()--> UNAUTHENTICATED
#   any --reset()--> UNREADY
#
# SessionGate turns that state into what the admin surface does:
#
#   UNREADY          -> LOADING   (placeholder while auth is indeterminate)
#   UNAUTHENTICATED  -> REDIRECT  (to the login surface)
#   AUTHENTICATED    -> RENDER
#
# No role check happens here; being signed in is enough.
# =============================================================================

import logging
from dataclasses import dataclass
from enum import Enum

from app.auth.models import AuthUser

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    UNREADY = "unready"
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"


class GateDecision(str, Enum):
    LOADING = "loading"
    REDIRECT = "redirect"
    RENDER = "render"


class SessionContext:
    """Session state of one request or connection."""

    def __init__(self):
        self.state = SessionState.UNREADY
        self.user: AuthUser | None = None

    @property
    def is_ready(self) -> bool:
        return self.state != SessionState.UNREADY

    @property
    def is_authenticated(self) -> bool:
        return self.state == SessionState.AUTHENTICATED

    def resolve(self, user: AuthUser | None) -> SessionState:
        """Settle the session once the identity (or its absence) is known."""
        self.user = user
        self.state = SessionState.AUTHENTICATED if user else SessionState.UNAUTHENTICATED
        return self.state

    def sign_out(self) -> SessionState:
        self.user = None
        self.state = SessionState.UNAUTHENTICATED
        return self.state

    def reset(self) -> SessionState:
        self.user = None
        self.state = SessionState.UNREADY
        return self.state


@dataclass(frozen=True)
class GateResult:
    decision: GateDecision
    location: str | None = None
    user: AuthUser | None = None


class SessionGate:
    """
    Decides whether the admin surface may be shown.

    Example:
        gate = SessionGate(login_path="/api/v1/auth/login")
        result = gate.check(context)
        if result.decision == GateDecision.REDIRECT:
            return RedirectResponse(result.location)
    """

    def __init__(self, login_path: str):
        self.login_path = login_path

    def check(self, context: SessionContext) -> GateResult:
        if context.state == SessionState.UNREADY:
            return GateResult(GateDecision.LOADING)

        if not context.is_authenticated:
            logger.debug(f"Admin access without session, redirecting to {self.login_path}")
            return GateResult(GateDecision.REDIRECT, location=self.login_path)

        return GateResult(GateDecision.RENDER, user=context.user)
