"""
Tests for first-fit room assignment.

Covers:
- Gender compatibility (own gender plus Co-ed, never the other gender)
- Capacity is never exceeded under sequential submissions
- Ascending room_number order and determinism
- Full and empty room sets return None rather than raising
- Store failures propagate as DataAccessError
"""

from __future__ import annotations

import pytest

from camp_portal.allocation import RoomAllocator, compatible_room_genders
from camp_portal.errors import DataAccessError
from camp_portal.models import CamperGender


@pytest.fixture
def allocator(room_repo, registration_repo):
    return RoomAllocator(room_repo, registration_repo)


def submit(allocator, registration_repo, gender: str) -> str | None:
    """Assign a room and record the registration the way a submission does."""
    room_id = allocator.assign_room(gender)
    registration_repo.place(room_id, gender=gender)
    return room_id


class TestCompatibleRoomGenders:
    def test_male_camper_matches_male_and_coed(self):
        assert compatible_room_genders("Male") == ("Male", "Co-ed")

    def test_female_camper_matches_female_and_coed(self):
        assert compatible_room_genders(CamperGender.FEMALE) == ("Female", "Co-ed")

    def test_coed_is_not_a_camper_gender(self):
        with pytest.raises(ValueError):
            compatible_room_genders("Co-ed")

    def test_unknown_gender_rejected(self):
        with pytest.raises(ValueError):
            compatible_room_genders("other")


class TestAssignRoom:
    def test_no_rooms_returns_none(self, allocator):
        """An empty room set is not an error."""
        assert allocator.assign_room("Male") is None

    def test_never_assigns_other_gender(self, allocator, room_repo, registration_repo):
        room_repo.add("r-f", "100", "Female", 10)

        assert allocator.assign_room("Male") is None

    def test_coed_room_accepts_both_genders(self, allocator, room_repo, registration_repo):
        room_repo.add("r-c", "300", "Co-ed", 2)

        assert submit(allocator, registration_repo, "Male") == "r-c"
        assert submit(allocator, registration_repo, "Female") == "r-c"
        assert submit(allocator, registration_repo, "Female") is None

    def test_first_fit_by_room_number(self, allocator, room_repo):
        """Lowest room_number with space wins, regardless of insertion order."""
        room_repo.add("r-b", "202", "Male", 5)
        room_repo.add("r-a", "201", "Male", 5)

        assert allocator.assign_room("Male") == "r-a"

    def test_first_fit_not_emptiest(self, allocator, room_repo, registration_repo):
        """A partly filled earlier room is chosen over an empty later one."""
        room_repo.add("r1", "101", "Male", 3)
        room_repo.add("r2", "102", "Male", 3)
        registration_repo.place("r1")
        registration_repo.place("r1")

        assert allocator.assign_room("Male") == "r1"

    def test_full_room_skipped(self, allocator, room_repo, registration_repo):
        room_repo.add("r1", "101", "Male", 1)
        room_repo.add("r2", "102", "Male", 1)
        registration_repo.place("r1")

        assert allocator.assign_room("Male") == "r2"

    def test_all_full_returns_none(self, allocator, room_repo, registration_repo):
        room_repo.add("r1", "101", "Male", 1)
        registration_repo.place("r1")

        assert allocator.assign_room("Male") is None

    def test_capacity_never_exceeded_sequentially(self, allocator, room_repo, registration_repo):
        """Sequential submissions fill rooms exactly to capacity and no further."""
        room_repo.add("r1", "101", "Male", 3)
        room_repo.add("r2", "102", "Co-ed", 2)
        room_repo.add("r3", "103", "Female", 2)

        results = [submit(allocator, registration_repo, g) for g in ["Male"] * 4 + ["Female"] * 4]

        counts = registration_repo.counts_by_room()
        for room in room_repo.list_all():
            assert counts.get(room.id, 0) <= room.capacity
        assert results.count(None) == 1
        assert counts == {"r1": 3, "r2": 2, "r3": 2}

    def test_unassigned_registrations_do_not_count(self, allocator, room_repo, registration_repo):
        room_repo.add("r1", "101", "Male", 1)
        registration_repo.place(None)

        assert allocator.assign_room("Male") == "r1"

    def test_deterministic_for_same_state(self, allocator, room_repo, registration_repo):
        room_repo.add("r1", "101", "Co-ed", 2)
        room_repo.add("r2", "102", "Male", 2)
        registration_repo.place("r1")

        first = allocator.assign_room("Male")
        assert all(allocator.assign_room("Male") == first for _ in range(5))

    def test_end_to_end_scenario(self, allocator, room_repo, registration_repo):
        """Male room then Co-ed room, then nothing left."""
        room_repo.add("r1", "101", "Male", 1)
        room_repo.add("r2", "102", "Co-ed", 1)

        assert submit(allocator, registration_repo, "Male") == "r1"
        assert submit(allocator, registration_repo, "Male") == "r2"
        assert submit(allocator, registration_repo, "Male") is None

    def test_invalid_gender_raises_value_error(self, allocator, room_repo):
        room_repo.add("r1", "101", "Co-ed", 1)

        with pytest.raises(ValueError):
            allocator.assign_room("Co-ed")

    def test_room_listing_failure_propagates(self, allocator, room_repo):
        room_repo.fail_with = DataAccessError("Failed to list candidate rooms: timeout")

        with pytest.raises(DataAccessError):
            allocator.assign_room("Male")

    def test_occupancy_failure_propagates(self, allocator, room_repo, registration_repo):
        """A failed count is an error, never treated as an empty room."""
        room_repo.add("r1", "101", "Male", 1)
        registration_repo.fail_with = DataAccessError("Failed to count room occupancy: timeout")

        with pytest.raises(DataAccessError):
            allocator.assign_room("Male")


class TestRoomLabel:
    def test_label_is_room_number(self, allocator, room_repo):
        room_repo.add("r1", "101", "Male", 1)

        assert allocator.room_label("r1") == "101"

    def test_missing_room_returns_none(self, allocator):
        assert allocator.room_label("does-not-exist") is None

    def test_failure_propagates(self, allocator, room_repo):
        room_repo.fail_with = DataAccessError("Failed to get room: 500")

        with pytest.raises(DataAccessError):
            allocator.room_label("r1")
