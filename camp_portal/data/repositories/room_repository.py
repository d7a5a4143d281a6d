"""Room Repository - Data access for dorm rooms"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from pocketbase.client import ClientResponseError  # type: ignore[attr-defined]

from camp_portal.errors import DataAccessError
from camp_portal.models import Room, RoomCreate

from .base import BaseRepository, is_not_found, quote

logger = logging.getLogger(__name__)

ROOMS_COLLECTION = "rooms"


def sort_by_label(rooms: Iterable[Room]) -> list[Room]:
    """Order rooms by label, ties broken by id so the order is stable."""
    return sorted(rooms, key=lambda room: (room.room_number, room.id))


class RoomRepository(BaseRepository):
    """Repository for dorm rooms"""

    collection_name = ROOMS_COLLECTION

    def list_all(self) -> list[Room]:
        """Get every room ordered by room number."""
        records = self._read(
            "list rooms",
            self._collection().get_full_list,
            query_params={"sort": "room_number"},
        )
        return sort_by_label(Room.from_record(r) for r in records)

    def list_for_genders(self, genders: Iterable[str]) -> list[Room]:
        """Get rooms whose gender tag is one of `genders`, ordered by room number.

        Args:
            genders: Room gender tags to include (e.g. "Male", "Co-ed")

        Returns:
            Rooms in ascending room_number order
        """
        gender_filter = " || ".join(f"gender = {quote(g)}" for g in genders)
        records = self._read(
            "list candidate rooms",
            self._collection().get_full_list,
            query_params={"filter": f"({gender_filter})", "sort": "room_number"},
        )
        return sort_by_label(Room.from_record(r) for r in records)

    def get(self, room_id: str) -> Room | None:
        """Find a room by id, or None if it does not exist."""
        record = self._get_one_or_none("get room", room_id)
        return Room.from_record(record) if record is not None else None

    def create(self, room: RoomCreate) -> Room:
        record = self._write("create room", self._collection().create, room.to_record())
        logger.info(f"Created room {room.room_number} ({room.gender.value}, capacity {room.capacity})")
        return Room.from_record(record)

    def delete(self, room_id: str) -> bool:
        """Delete a room.

        Returns:
            True if deleted, False if no such room existed
        """
        try:
            self._collection().delete(room_id)
        except ClientResponseError as e:
            if is_not_found(e):
                return False
            raise DataAccessError.from_response_error("delete room", e) from e
        logger.info(f"Deleted room {room_id}")
        return True
