"""Data repositories for the camp portal.

Provides the PocketBase access layer for rooms, registrations and profiles."""

from __future__ import annotations

from .profile_repository import ProfileRepository
from .registration_repository import RegistrationRepository
from .room_repository import RoomRepository

__all__ = [
    "ProfileRepository",
    "RegistrationRepository",
    "RoomRepository",
]
