"""
Pydantic schemas for the Camp Portal API.

Re-exports all schemas for convenient importing.
"""

from __future__ import annotations

from .auth import SessionResponse, SignInRequest, SignUpRequest
from .registrations import RegistrationResponse
from .rooms import RoomLabelResponse, RoomResponse

__all__ = [
    "RegistrationResponse",
    "RoomLabelResponse",
    "RoomResponse",
    "SessionResponse",
    "SignInRequest",
    "SignUpRequest",
]
