"""
Root test configuration and fixtures for the camp portal.

This conftest.py provides common fixtures for all test categories:
- unit/: Fast, isolated unit tests (no PocketBase server)

Note: sys.path manipulation is handled here to ensure imports work correctly.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any
from unittest.mock import Mock

import pytest

# Add project root to path to allow imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# api.dependencies reads settings at import time
os.environ.setdefault("SKIP_PB_AUTH", "true")
os.environ.setdefault("POCKETBASE_ADMIN_PASSWORD", "test-password-not-used")

from tests.fixtures.fakes import (  # noqa: E402
    FakeProfileRepository,
    FakeRegistrationRepository,
    FakeRoomRepository,
)


def create_mock_pocketbase() -> Mock:
    """Create a mock PocketBase instance with one shared collection mock."""
    mock_pb = Mock()
    mock_collection = Mock()

    mock_list_response = Mock()
    mock_list_response.items = []
    mock_list_response.total_items = 0

    mock_collection.get_full_list = Mock(return_value=[])
    mock_collection.get_list = Mock(return_value=mock_list_response)
    mock_collection.get_one = Mock()
    mock_collection.create = Mock(return_value=Mock(id="mock-id"))
    mock_collection.delete = Mock()
    mock_collection.auth_with_password = Mock()
    mock_collection.auth_refresh = Mock()

    mock_pb.collection = Mock(return_value=mock_collection)

    mock_pb.auth_store = Mock()
    mock_pb.auth_store.token = ""
    mock_pb.auth_store.model = None

    return mock_pb


@pytest.fixture
def mock_pocketbase() -> Mock:
    """Create a mock PocketBase instance for tests that need it."""
    return create_mock_pocketbase()


@pytest.fixture
def room_repo() -> FakeRoomRepository:
    return FakeRoomRepository()


@pytest.fixture
def registration_repo() -> FakeRegistrationRepository:
    return FakeRegistrationRepository()


@pytest.fixture
def profile_repo() -> FakeProfileRepository:
    return FakeProfileRepository()


@pytest.fixture
def sample_form_data() -> dict[str, Any]:
    """A valid public registration form payload."""
    return {
        "camper_name": "Sam Rivera",
        "age": 11,
        "gender": "Male",
        "parent_name": "Alex Rivera",
        "parent_email": "alex@example.com",
        "parent_phone": "555-0100",
        "emergency_contact": "Jo Rivera",
        "emergency_phone": "555-0101",
        "medical_conditions": "",
        "dietary_restrictions": "vegetarian",
        "session_preference": "Full Month",
    }
