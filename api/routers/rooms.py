"""
Rooms Router - Admin endpoints for dorm rooms.

This router handles:
- Listing rooms with occupancy
- Creating and deleting rooms
- Room label lookup
- The overbooked-room report used to reconcile concurrent assignments
"""

from __future__ import annotations

import asyncio
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Path, status

from camp_portal.allocation import RoomAllocator
from camp_portal.auth.middleware import Caller, require_admin
from camp_portal.models import RoomCreate, RoomOccupancy
from camp_portal.services import RoomService

from ..dependencies import get_room_allocator, get_room_service
from ..schemas import RoomLabelResponse, RoomResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/rooms", tags=["rooms"])


@router.get("")
async def list_rooms(
    _admin: Annotated[Caller, Depends(require_admin)],
    service: Annotated[RoomService, Depends(get_room_service)],
) -> list[RoomResponse]:
    """List rooms ordered by room number, with occupancy."""
    rooms = await asyncio.to_thread(service.list_rooms_with_occupancy)
    return [RoomResponse.from_occupancy(r) for r in rooms]


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_room(
    request: RoomCreate,
    admin: Annotated[Caller, Depends(require_admin)],
    service: Annotated[RoomService, Depends(get_room_service)],
) -> RoomResponse:
    """Add a room."""
    room = await asyncio.to_thread(service.add_room, request)
    logger.info(f"Admin {admin.email or admin.principal_id} added room {room.room_number}")
    return RoomResponse.from_occupancy(RoomOccupancy(room=room))


@router.get("/overbooked")
async def list_overbooked_rooms(
    _admin: Annotated[Caller, Depends(require_admin)],
    service: Annotated[RoomService, Depends(get_room_service)],
) -> list[RoomResponse]:
    """Rooms whose occupancy exceeds capacity."""
    rooms = await asyncio.to_thread(service.overbooked_rooms)
    return [RoomResponse.from_occupancy(r) for r in rooms]


@router.get("/{room_id}/label")
async def get_room_label(
    room_id: Annotated[str, Path(description="Room record id")],
    _admin: Annotated[Caller, Depends(require_admin)],
    allocator: Annotated[RoomAllocator, Depends(get_room_allocator)],
) -> RoomLabelResponse:
    """Resolve a room id to its label; null when the room does not exist."""
    label = await asyncio.to_thread(allocator.room_label, room_id)
    return RoomLabelResponse(room_id=room_id, label=label)


@router.delete("/{room_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_room(
    room_id: Annotated[str, Path(description="Room record id")],
    admin: Annotated[Caller, Depends(require_admin)],
    service: Annotated[RoomService, Depends(get_room_service)],
) -> None:
    """Delete a room."""
    await asyncio.to_thread(service.delete_room, room_id)
    logger.info(f"Admin {admin.email or admin.principal_id} deleted room {room_id}")
