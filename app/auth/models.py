# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for authentication data.
# =============================================================================

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class AuthUser(BaseModel):
    """
    Authenticated user extracted from a Supabase JWT.

    This is the minimal user info available from the token itself,
    without querying the database.
    """
    id: UUID
    email: Optional[str] = None

    model_config = {"frozen": True}


class Profile(BaseModel):
    """
    A row of the profiles table.

    `role` exists in the schema but no access decision depends on it:
    every authenticated user may use the admin panel.
    """
    id: UUID
    email: Optional[str] = None
    role: Optional[str] = None
    created_at: Optional[datetime] = None


class SignInRequest(BaseModel):
    """Email/password credentials."""
    email: str = Field(..., min_length=3, examples=["owner@salon.com"])
    password: str = Field(..., min_length=1)


class SignInResponse(BaseModel):
    """Session established by Supabase Auth."""
    user_id: str
    email: Optional[str] = None
    access_token: str
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None
    redirect_to: str = Field(..., description="Where the client should go next")


class ResetPasswordRequest(BaseModel):
    """Request a password reset email."""
    email: str = Field(..., min_length=3)
