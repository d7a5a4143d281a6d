from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, EmailStr, Field, field_validator


class RoomGender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"
    COED = "Co-ed"


class CamperGender(str, Enum):
    # Co-ed describes rooms only, never campers
    MALE = "Male"
    FEMALE = "Female"


class SessionPreference(str, Enum):
    WEEK_1 = "Week 1 (June 1-5)"
    WEEK_2 = "Week 2 (June 8-12)"
    WEEK_3 = "Week 3 (June 15-19)"
    WEEK_4 = "Week 4 (June 22-26)"
    FULL_MONTH = "Full Month"


class Role(str, Enum):
    ANONYMOUS = "anonymous"
    REGISTRANT = "registrant"
    ADMINISTRATOR = "administrator"


def _optional_id(value: Any) -> str | None:
    """PocketBase returns an empty string for an unset relation."""
    return str(value) if value else None


class Room(BaseModel):
    id: str
    room_number: str
    gender: RoomGender
    capacity: int = Field(ge=1)

    @classmethod
    def from_record(cls, record: Any) -> Room:
        return cls(
            id=record.id,
            room_number=str(getattr(record, "room_number", "")),
            gender=RoomGender(getattr(record, "gender", "")),
            capacity=int(getattr(record, "capacity", 0)),
        )

    def accepts(self, gender: CamperGender) -> bool:
        return self.gender == RoomGender.COED or self.gender.value == gender.value


class RoomCreate(BaseModel):
    """Admin input for a new room."""

    room_number: str = Field(min_length=1, description="Room label, e.g. 101")
    gender: RoomGender = RoomGender.MALE
    capacity: int = Field(ge=1, description="Number of beds")

    @field_validator("room_number", mode="before")
    @classmethod
    def strip_room_number(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    def to_record(self) -> dict[str, Any]:
        return {"room_number": self.room_number, "gender": self.gender.value, "capacity": self.capacity}


class RoomOccupancy(BaseModel):
    room: Room
    occupancy: int = 0

    @property
    def remaining(self) -> int:
        return self.room.capacity - self.occupancy

    @property
    def is_overbooked(self) -> bool:
        return self.occupancy > self.room.capacity


class RegistrationForm(BaseModel):
    """Public registration form submitted by a parent."""

    camper_name: str = Field(min_length=1)
    age: int = Field(ge=5, le=17)
    gender: CamperGender
    parent_name: str = Field(min_length=1)
    parent_email: EmailStr
    parent_phone: str = Field(min_length=1)
    emergency_contact: str = Field(min_length=1)
    emergency_phone: str = Field(min_length=1)
    medical_conditions: str = ""
    dietary_restrictions: str = ""
    session_preference: SessionPreference

    @field_validator("camper_name", "parent_name", "parent_email", "parent_phone", "emergency_contact", "emergency_phone", mode="before")
    @classmethod
    def strip_required_text(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    def to_record(self, room_id: str | None = None) -> dict[str, Any]:
        record = self.model_dump(mode="json")
        record["room_id"] = room_id or ""
        return record


class Registration(BaseModel):
    id: str
    camper_name: str
    age: int
    gender: str
    parent_name: str = ""
    parent_email: str = ""
    parent_phone: str = ""
    emergency_contact: str = ""
    emergency_phone: str = ""
    medical_conditions: str = ""
    dietary_restrictions: str = ""
    session_preference: str = ""
    room_id: str | None = None
    created: str | None = None

    @classmethod
    def from_record(cls, record: Any) -> Registration:
        return cls(
            id=record.id,
            camper_name=str(getattr(record, "camper_name", "")),
            age=int(getattr(record, "age", 0) or 0),
            gender=str(getattr(record, "gender", "")),
            parent_name=str(getattr(record, "parent_name", "") or ""),
            parent_email=str(getattr(record, "parent_email", "") or ""),
            parent_phone=str(getattr(record, "parent_phone", "") or ""),
            emergency_contact=str(getattr(record, "emergency_contact", "") or ""),
            emergency_phone=str(getattr(record, "emergency_phone", "") or ""),
            medical_conditions=str(getattr(record, "medical_conditions", "") or ""),
            dietary_restrictions=str(getattr(record, "dietary_restrictions", "") or ""),
            session_preference=str(getattr(record, "session_preference", "") or ""),
            room_id=_optional_id(getattr(record, "room_id", None)),
            created=_optional_id(getattr(record, "created", None)),
        )


class AdminProfile(BaseModel):
    id: str
    email: str = ""
    full_name: str = ""
    is_admin: bool = False

    @classmethod
    def from_record(cls, record: Any) -> AdminProfile:
        return cls(
            id=record.id,
            email=str(getattr(record, "email", "") or ""),
            full_name=str(getattr(record, "full_name", "") or ""),
            is_admin=bool(getattr(record, "is_admin", False)),
        )
