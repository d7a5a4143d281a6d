"""
Registration Service - Public registration submission and admin review.

Submission runs the allocator first (when auto assignment is on) and then
creates the registration with the chosen room in one write, so a failed
submission leaves nothing behind.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from camp_portal.allocation import RoomAllocator
from camp_portal.data.repositories import RegistrationRepository, RoomRepository
from camp_portal.models import Registration, RegistrationForm

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegistrationView:
    """A registration with its room label resolved (None means unassigned or deleted room)."""

    registration: Registration
    room_label: str | None


class RegistrationService:
    def __init__(
        self,
        registrations: RegistrationRepository,
        rooms: RoomRepository,
        allocator: RoomAllocator,
        auto_assign: bool = True,
    ):
        self.registrations = registrations
        self.rooms = rooms
        self.allocator = allocator
        self.auto_assign = auto_assign

    def submit(self, form: RegistrationForm) -> RegistrationView:
        """Create a registration, assigning a room first when auto assignment is on.

        Raises:
            DataAccessError: If the allocator reads or the create fail
        """
        room_id: str | None = None
        if self.auto_assign:
            room_id = self.allocator.assign_room(form.gender)
            if room_id is None:
                logger.info(f"No room available for {form.camper_name}, registering unassigned")

        registration = self.registrations.create(form.to_record(room_id))
        label = self.allocator.room_label(room_id) if room_id else None
        return RegistrationView(registration=registration, room_label=label)

    def list_registrations(self) -> list[RegistrationView]:
        """All registrations, newest first, with room labels from one room listing."""
        registrations = self.registrations.list_all()
        labels = {room.id: room.room_number for room in self.rooms.list_all()}
        return [
            RegistrationView(registration=r, room_label=labels.get(r.room_id) if r.room_id else None)
            for r in registrations
        ]
