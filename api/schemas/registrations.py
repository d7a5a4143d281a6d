"""
Pydantic schemas for registration endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel

from camp_portal.services import RegistrationView


class RegistrationResponse(BaseModel):
    """A registration as shown on the admin dashboard."""

    id: str
    camper_name: str
    age: int
    gender: str
    parent_name: str
    parent_email: str
    session_preference: str
    room_id: str | None = None
    room_label: str | None = None
    room_display: str = "Unassigned"
    created: str | None = None

    @classmethod
    def from_view(cls, view: RegistrationView) -> RegistrationResponse:
        r = view.registration
        return cls(
            id=r.id,
            camper_name=r.camper_name,
            age=r.age,
            gender=r.gender,
            parent_name=r.parent_name,
            parent_email=r.parent_email,
            session_preference=r.session_preference,
            room_id=r.room_id,
            room_label=view.room_label,
            room_display=view.room_label or "Unassigned",
            created=r.created,
        )
