"""
Tests for the public registration endpoint and the admin registration list.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from camp_portal.allocation import RoomAllocator
from camp_portal.auth.middleware import Caller, require_admin
from camp_portal.errors import DataAccessError
from camp_portal.models import Role
from camp_portal.services import RegistrationService


@pytest.fixture
def app(room_repo, registration_repo):
    from api.dependencies import get_registration_service
    from api.main import app

    app.dependency_overrides[get_registration_service] = lambda: RegistrationService(
        registration_repo, room_repo, RoomAllocator(room_repo, registration_repo)
    )
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    return TestClient(app)


class TestSubmitRegistration:
    def test_anonymous_submission_assigns_room(self, client, room_repo, sample_form_data):
        room_repo.add("r1", "101", "Male", 1)

        response = client.post("/api/registrations", json=sample_form_data)

        assert response.status_code == 201
        body = response.json()
        assert body["room_id"] == "r1"
        assert body["room_label"] == "101"
        assert body["room_display"] == "101"

    def test_full_camp_registers_unassigned(self, client, sample_form_data):
        response = client.post("/api/registrations", json=sample_form_data)

        assert response.status_code == 201
        assert response.json()["room_id"] is None
        assert response.json()["room_display"] == "Unassigned"

    @pytest.mark.parametrize(
        "field, value",
        [
            ("age", 4),
            ("age", 18),
            ("gender", "Co-ed"),
            ("parent_email", "not-an-email"),
            ("session_preference", "Week 9"),
            ("camper_name", ""),
        ],
    )
    def test_invalid_form_rejected(self, client, registration_repo, sample_form_data, field, value):
        sample_form_data[field] = value

        response = client.post("/api/registrations", json=sample_form_data)

        assert response.status_code == 422
        assert registration_repo.registrations == []

    def test_store_rejection_is_400(self, client, registration_repo, sample_form_data):
        registration_repo.fail_with = DataAccessError(
            "Failed to create registration: parent_phone: Cannot be blank.", status=400
        )

        response = client.post("/api/registrations", json=sample_form_data)

        assert response.status_code == 400
        assert "parent_phone" in response.json()["detail"]

    def test_store_failure_is_502(self, client, room_repo, sample_form_data):
        room_repo.fail_with = DataAccessError("Failed to list candidate rooms: timeout")

        response = client.post("/api/registrations", json=sample_form_data)

        assert response.status_code == 502


class TestListRegistrations:
    def test_requires_admin(self, client):
        assert client.get("/api/registrations").status_code == 401

    def test_admin_sees_labels(self, app, client, room_repo, registration_repo):
        app.dependency_overrides[require_admin] = lambda: Caller(role=Role.ADMINISTRATOR, principal_id="u1")
        room_repo.add("r1", "101", "Male", 1)
        registration_repo.place("r1", camper_name="Sam")
        registration_repo.place(None, camper_name="Riley", gender="Female")

        response = client.get("/api/registrations")

        assert response.status_code == 200
        assert [(r["camper_name"], r["room_display"]) for r in response.json()] == [
            ("Riley", "Unassigned"),
            ("Sam", "101"),
        ]
