"""
Room Service - Admin room management and occupancy reporting.

Occupancy is derived from registrations; rooms carry no counter of their own.
"""

from __future__ import annotations

import logging

from camp_portal.data.repositories import RegistrationRepository, RoomRepository
from camp_portal.errors import NotFoundError
from camp_portal.models import Room, RoomCreate, RoomOccupancy

logger = logging.getLogger(__name__)


class RoomService:
    def __init__(self, rooms: RoomRepository, registrations: RegistrationRepository):
        self.rooms = rooms
        self.registrations = registrations

    def add_room(self, room: RoomCreate) -> Room:
        return self.rooms.create(room)

    def delete_room(self, room_id: str) -> None:
        """Delete a room. Registrations that referenced it keep a dangling room id.

        Raises:
            NotFoundError: If the room does not exist
        """
        if not self.rooms.delete(room_id):
            raise NotFoundError(f"Room {room_id} not found")

    def list_rooms_with_occupancy(self) -> list[RoomOccupancy]:
        """All rooms in room_number order with their current occupancy."""
        rooms = self.rooms.list_all()
        counts = self.registrations.counts_by_room()
        return [RoomOccupancy(room=room, occupancy=counts.get(room.id, 0)) for room in rooms]

    def overbooked_rooms(self) -> list[RoomOccupancy]:
        """Rooms holding more campers than beds, left behind by concurrent assignments."""
        overbooked = [o for o in self.list_rooms_with_occupancy() if o.is_overbooked]
        if overbooked:
            logger.warning(
                f"{len(overbooked)} overbooked rooms: "
                + ", ".join(f"{o.room.room_number} ({o.occupancy}/{o.room.capacity})" for o in overbooked)
            )
        return overbooked
