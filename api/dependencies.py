"""
Shared dependencies for the Camp Portal API.

This module provides:
- PocketBase client management (shared service client, per-caller user clients)
- Repository, allocator and service factories used with FastAPI Depends
- The AccessGate factory used by the role middleware and auth router
"""

from __future__ import annotations

import asyncio
import logging

from camp_portal.allocation import RoomAllocator
from camp_portal.auth import AccessGate, AuthSession
from camp_portal.data.connection_manager import ConnectionManager
from camp_portal.data.repositories import ProfileRepository, RegistrationRepository, RoomRepository
from camp_portal.services import RegistrationService, RoomService

from .settings import get_settings

logger = logging.getLogger(__name__)

# ========================================
# PocketBase Clients
# ========================================

# - connections.get_client(): shared service client, authenticated as a
#   superuser on startup, used for all data access
# - connections.create_user_client(): fresh client per caller session, so one
#   caller's auth store is never visible to another request
_settings = get_settings()
connections = ConnectionManager(_settings.connection_config())


async def authenticate_pb() -> None:
    """Authenticate the shared service client with PocketBase."""
    await asyncio.to_thread(connections.authenticate)


# ========================================
# Repositories and services
# ========================================


def get_room_repository() -> RoomRepository:
    return RoomRepository(connections.get_client(), read_retries=connections.config.read_retries)


def get_registration_repository() -> RegistrationRepository:
    return RegistrationRepository(connections.get_client(), read_retries=connections.config.read_retries)


def get_profile_repository() -> ProfileRepository:
    return ProfileRepository(connections.get_client(), read_retries=connections.config.read_retries)


def get_room_allocator() -> RoomAllocator:
    return RoomAllocator(get_room_repository(), get_registration_repository())


def get_room_service() -> RoomService:
    return RoomService(get_room_repository(), get_registration_repository())


def get_registration_service() -> RegistrationService:
    return RegistrationService(
        get_registration_repository(),
        get_room_repository(),
        get_room_allocator(),
        auto_assign=get_settings().auto_assign_rooms,
    )


# ========================================
# Access Gate
# ========================================


def create_access_gate() -> AccessGate:
    """Create a gate over a fresh user session. Callers must shut it down."""
    session = AuthSession(connections.create_user_client(), service_client=connections.get_client())
    return AccessGate(session, get_profile_repository())


__all__ = [
    "connections",
    "authenticate_pb",
    "create_access_gate",
    "get_profile_repository",
    "get_registration_repository",
    "get_registration_service",
    "get_room_allocator",
    "get_room_repository",
    "get_room_service",
]
