"""Registration Repository - Data access for camper registrations"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Any

from camp_portal.models import Registration

from .base import BaseRepository, quote

logger = logging.getLogger(__name__)

REGISTRATIONS_COLLECTION = "camp_registrations"


class RegistrationRepository(BaseRepository):
    """Repository for camper registrations"""

    collection_name = REGISTRATIONS_COLLECTION

    def create(self, data: dict[str, Any]) -> Registration:
        record = self._write("create registration", self._collection().create, data)
        registration = Registration.from_record(record)
        logger.info(f"Created registration {registration.id} (room: {registration.room_id or 'unassigned'})")
        return registration

    def list_all(self) -> list[Registration]:
        """Get all registrations, newest first."""
        records = self._read(
            "list registrations",
            self._collection().get_full_list,
            query_params={"sort": "-created"},
        )
        return [Registration.from_record(r) for r in records]

    def count_for_room(self, room_id: str) -> int:
        """Count registrations referencing a room.

        Uses a one-item page and reads totalItems, so no records are transferred.
        """
        result = self._read(
            "count room occupancy",
            self._collection().get_list,
            1,
            1,
            query_params={"filter": f"room_id = {quote(room_id)}"},
        )
        return int(getattr(result, "total_items", 0) or 0)

    def counts_by_room(self) -> dict[str, int]:
        """Occupancy per room id from a single listing of assigned registrations."""
        records = self._read(
            "list room assignments",
            self._collection().get_full_list,
            query_params={"filter": 'room_id != ""', "fields": "id,room_id"},
        )
        counts: Counter[str] = Counter()
        for record in records:
            room_id = getattr(record, "room_id", None)
            if room_id:
                counts[str(room_id)] += 1
        return dict(counts)
