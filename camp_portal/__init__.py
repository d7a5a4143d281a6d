"""
Camp Portal - Core logic for the summer-camp registration portal.

This package contains:
- models: Domain models (Room, Registration, AdminProfile, Role)
- data: PocketBase connection management and repositories
- allocation: First-fit room allocator
- auth: Session context, access gate and role middleware
- services: Room management and registration submission
"""

from camp_portal.models import (
    CamperGender,
    Registration,
    RegistrationForm,
    Role,
    Room,
    RoomCreate,
    RoomGender,
    SessionPreference,
)

__all__ = [
    "CamperGender",
    "Registration",
    "RegistrationForm",
    "Role",
    "Room",
    "RoomCreate",
    "RoomGender",
    "SessionPreference",
]
