"""
Pydantic schemas for room endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from camp_portal.models import RoomGender, RoomOccupancy


class RoomResponse(BaseModel):
    """A room with its occupancy."""

    id: str
    room_number: str
    gender: RoomGender
    capacity: int
    occupancy: int = Field(default=0, description="Registrations assigned to this room")

    @classmethod
    def from_occupancy(cls, item: RoomOccupancy) -> RoomResponse:
        return cls(
            id=item.room.id,
            room_number=item.room.room_number,
            gender=item.room.gender,
            capacity=item.room.capacity,
            occupancy=item.occupancy,
        )


class RoomLabelResponse(BaseModel):
    """Label lookup result; label is null when the room does not exist."""

    room_id: str
    label: str | None = None
