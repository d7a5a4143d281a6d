from __future__ import annotations

from .registration_service import RegistrationService, RegistrationView
from .room_service import RoomService

__all__ = ["RegistrationService", "RegistrationView", "RoomService"]
