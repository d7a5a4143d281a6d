from __future__ import annotations

from .room_allocator import RoomAllocator, compatible_room_genders

__all__ = ["RoomAllocator", "compatible_room_genders"]
