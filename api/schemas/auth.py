"""
Pydantic schemas for auth endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, EmailStr, Field

from camp_portal.models import Role


class SignUpRequest(BaseModel):
    """Request model for administrator sign-up."""

    email: EmailStr = Field(..., description="Login email")
    password: str = Field(..., min_length=8, description="Password (PocketBase minimum is 8)")
    full_name: str = Field(..., min_length=1, description="Administrator's full name")


class SignInRequest(BaseModel):
    """Request model for sign-in."""

    email: str = Field(..., description="Login email")
    password: str = Field(..., description="Password")


class SessionResponse(BaseModel):
    """Session state after an auth operation."""

    role: Role
    principal_id: str | None = None
    email: str | None = None
    token: str | None = Field(default=None, description="Bearer token for later requests")
