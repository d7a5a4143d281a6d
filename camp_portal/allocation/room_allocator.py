"""
Room allocator - first-fit assignment of campers to gendered rooms.

Candidates are the rooms tagged with the camper's gender plus Co-ed rooms,
walked in ascending room_number order. The first room whose occupancy is
below its capacity wins; the allocator does not look for the emptiest room.

Known limitation: listing rooms, counting occupancy and writing the chosen
room onto the registration are separate store calls with no transaction
around them. Two submissions for the same gender can both see the last free
bed and both take it. PocketBase has no conditional increment to close this,
so assignments are best effort and RoomService.overbooked_rooms() is the
reconciliation report for administrators.
"""

from __future__ import annotations

import logging

from camp_portal.data.repositories import RegistrationRepository, RoomRepository
from camp_portal.models import CamperGender, RoomGender

logger = logging.getLogger(__name__)


def compatible_room_genders(gender: CamperGender | str) -> tuple[str, str]:
    """Room gender tags a camper may be placed in.

    Raises:
        ValueError: If `gender` is not a camper gender (Co-ed included)
    """
    camper_gender = CamperGender(gender)
    return (camper_gender.value, RoomGender.COED.value)


class RoomAllocator:
    """Chooses rooms for new registrations. Reads only; never writes."""

    def __init__(self, rooms: RoomRepository, registrations: RegistrationRepository):
        self.rooms = rooms
        self.registrations = registrations

    def assign_room(self, gender: CamperGender | str) -> str | None:
        """Pick the first compatible room with a free bed.

        Args:
            gender: Camper gender, "Male" or "Female"

        Returns:
            The room id, or None when no compatible room has space

        Raises:
            ValueError: For a gender that is not a camper gender
            DataAccessError: If rooms or occupancy cannot be read
        """
        candidates = self.rooms.list_for_genders(compatible_room_genders(gender))
        if not candidates:
            logger.info(f"No rooms configured for gender {CamperGender(gender).value}")
            return None

        for room in candidates:
            occupancy = self.registrations.count_for_room(room.id)
            if occupancy < room.capacity:
                logger.debug(f"Assigning room {room.room_number} ({occupancy}/{room.capacity})")
                return room.id
            logger.debug(f"Room {room.room_number} is full ({occupancy}/{room.capacity})")

        logger.info(f"All {len(candidates)} compatible rooms are full for gender {CamperGender(gender).value}")
        return None

    def room_label(self, room_id: str) -> str | None:
        """Human-readable label for a room id, or None if the room does not exist."""
        room = self.rooms.get(room_id)
        return room.room_number if room is not None else None
