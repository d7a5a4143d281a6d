"""
Tests for AccessGate role resolution and account flows.

Covers:
- Anonymous / Registrant / Administrator classification
- Fail-safe: a failed profile lookup yields Registrant, never Administrator
- Stale role resolutions are discarded by session generation
- Sign-up writes an admin profile and compensates when that write fails
- Sign-out is idempotent and the subscription is released on shutdown
"""

from __future__ import annotations

from unittest.mock import Mock

import pytest

from camp_portal.auth import AccessGate, AuthSession, SessionEvent, SessionSnapshot
from camp_portal.errors import (
    AuthenticationError,
    CredentialConflictError,
    DataAccessError,
    InconsistentAccountStateError,
    ProfileWriteError,
)
from camp_portal.models import AdminProfile, Role
from tests.fixtures.fakes import record, response_error


class StubSession:
    """Session double that lets a test deliver arbitrary snapshots."""

    def __init__(self, snapshot: SessionSnapshot | None = None):
        self.snapshot = snapshot or SessionSnapshot()
        self.handler = None
        self.unsubscribed = 0

    def on_session_change(self, handler):
        self.handler = handler

        def unsubscribe():
            self.unsubscribed += 1

        return unsubscribe

    def deliver(self, snapshot: SessionSnapshot, event: SessionEvent = SessionEvent.SIGNED_IN) -> None:
        self.snapshot = snapshot
        self.handler(event, snapshot)


@pytest.fixture
def user_client(mock_pocketbase):
    users = mock_pocketbase.collection.return_value
    users.auth_with_password.return_value = Mock(token="tok-1", record=record(id="u1", email="admin@camp.org"))
    users.auth_refresh.return_value = Mock(token="tok-2", record=record(id="u1", email="admin@camp.org"))
    return mock_pocketbase


@pytest.fixture
def service_client():
    client = Mock()
    client.collection.return_value.create.return_value = record(id="u1")
    return client


@pytest.fixture
def session(user_client, service_client):
    return AuthSession(user_client, service_client=service_client)


@pytest.fixture
def gate(session, profile_repo):
    with AccessGate(session, profile_repo) as gate:
        yield gate


def make_admin(profile_repo, principal_id: str = "u1", is_admin: bool = True) -> None:
    profile_repo.profiles[principal_id] = AdminProfile(id=principal_id, email="admin@camp.org", is_admin=is_admin)


class TestRoleResolution:
    def test_new_gate_is_anonymous(self, gate):
        assert gate.role == Role.ANONYMOUS
        assert gate.principal_id is None
        assert gate.is_admin is False

    def test_admin_profile_resolves_administrator(self, gate, profile_repo):
        make_admin(profile_repo)

        assert gate.sign_in("admin@camp.org", "secret123") == Role.ADMINISTRATOR
        assert gate.principal_id == "u1"
        assert gate.email == "admin@camp.org"
        assert gate.is_admin is True

    def test_missing_profile_resolves_registrant(self, gate):
        assert gate.sign_in("admin@camp.org", "secret123") == Role.REGISTRANT

    def test_non_admin_profile_resolves_registrant(self, gate, profile_repo):
        make_admin(profile_repo, is_admin=False)

        assert gate.sign_in("admin@camp.org", "secret123") == Role.REGISTRANT

    def test_profile_lookup_failure_is_registrant(self, gate, profile_repo):
        """A failed lookup must never grant Administrator."""
        make_admin(profile_repo)
        profile_repo.fail_lookup_with = DataAccessError("Failed to look up profile: timeout")

        assert gate.sign_in("admin@camp.org", "secret123") == Role.REGISTRANT

    def test_unexpected_lookup_error_is_registrant(self, session):
        """Any lookup failure replaces the previous role with Registrant."""

        class BrokenProfiles:
            def __init__(self):
                self.broken = False

            def get(self, principal_id):
                if self.broken:
                    raise KeyError("is_admin")
                return AdminProfile(id=principal_id, is_admin=True)

        profiles = BrokenProfiles()
        with AccessGate(session, profiles) as gate:
            session.sign_in("admin@camp.org", "secret123")
            assert gate.role == Role.ADMINISTRATOR

            profiles.broken = True
            session.restore("tok-1")

            assert gate.role == Role.REGISTRANT
            assert gate.principal_id == "u1"

    def test_resolve_role_without_principal(self, gate, profile_repo):
        assert gate.resolve_role(None) == Role.ANONYMOUS
        assert profile_repo.lookups == []

    def test_gate_picks_up_existing_session(self, session, profile_repo):
        make_admin(profile_repo)
        session.sign_in("admin@camp.org", "secret123")

        with AccessGate(session, profile_repo) as gate:
            assert gate.role == Role.ADMINISTRATOR

    def test_restore_resolves_role(self, gate, profile_repo, user_client):
        make_admin(profile_repo)

        assert gate.restore("tok-1") == Role.ADMINISTRATOR
        user_client.auth_store.save.assert_called_once_with("tok-1", None)

    def test_failed_sign_in_keeps_previous_role(self, gate, user_client):
        user_client.collection.return_value.auth_with_password.side_effect = response_error(400)

        with pytest.raises(AuthenticationError):
            gate.sign_in("admin@camp.org", "wrong")
        assert gate.role == Role.ANONYMOUS


class TestStaleResolution:
    def test_older_generation_is_discarded(self, profile_repo):
        make_admin(profile_repo, "old-admin")
        stub = StubSession()
        gate = AccessGate(stub, profile_repo)

        stub.deliver(SessionSnapshot(principal_id="new-user", generation=3))
        stub.deliver(SessionSnapshot(principal_id="old-admin", generation=2))

        assert gate.role == Role.REGISTRANT
        assert gate.principal_id == "new-user"

    def test_same_generation_applied_once(self, profile_repo):
        stub = StubSession()
        gate = AccessGate(stub, profile_repo)

        stub.deliver(SessionSnapshot(principal_id="u1", generation=1))
        make_admin(profile_repo)
        stub.deliver(SessionSnapshot(principal_id="u1", generation=1))

        assert gate.role == Role.REGISTRANT

    def test_slow_lookup_overtaken_by_sign_out(self, session, profile_repo):
        """A resolution still running when the session changes must not win."""
        make_admin(profile_repo)

        class SlowProfiles:
            def __init__(self):
                self.calls = 0

            def get(self, principal_id):
                self.calls += 1
                if self.calls == 1:
                    # The session moves on while this lookup is in flight
                    session.sign_out()
                return profile_repo.get(principal_id)

        with AccessGate(session, SlowProfiles()) as gate:
            session.sign_in("admin@camp.org", "secret123")

            assert gate.role == Role.ANONYMOUS
            assert gate.principal_id is None


class TestSignUp:
    def test_sign_up_creates_admin_and_signs_in(self, gate, profile_repo, service_client):
        role = gate.sign_up("admin@camp.org", "secret123", "Camp Director")

        assert role == Role.ADMINISTRATOR
        assert profile_repo.profiles["u1"].is_admin is True
        assert profile_repo.profiles["u1"].full_name == "Camp Director"
        assert gate.session.snapshot.token == "tok-1"
        service_client.collection.return_value.delete.assert_not_called()

    def test_duplicate_email_creates_nothing(self, gate, profile_repo, service_client):
        service_client.collection.return_value.create.side_effect = response_error(
            400, data={"data": {"email": {"code": "validation_not_unique"}}}
        )

        with pytest.raises(CredentialConflictError):
            gate.sign_up("taken@camp.org", "secret123", "Someone")
        assert profile_repo.profiles == {}
        assert gate.role == Role.ANONYMOUS

    def test_profile_failure_removes_principal(self, gate, profile_repo, service_client):
        profile_repo.fail_create_with = DataAccessError("Failed to create profile: 500")

        with pytest.raises(ProfileWriteError):
            gate.sign_up("admin@camp.org", "secret123", "Camp Director")

        service_client.collection.return_value.delete.assert_called_once_with("u1")
        assert gate.role == Role.ANONYMOUS

    def test_failed_cleanup_reports_inconsistent_state(self, gate, profile_repo, service_client):
        profile_repo.fail_create_with = DataAccessError("Failed to create profile: 500")
        service_client.collection.return_value.delete.side_effect = response_error(0, "connection reset")

        with pytest.raises(InconsistentAccountStateError) as exc_info:
            gate.sign_up("admin@camp.org", "secret123", "Camp Director")

        assert exc_info.value.principal_id == "u1"
        assert gate.role == Role.ANONYMOUS


class TestSignOut:
    def test_sign_out_twice_stays_anonymous(self, gate, profile_repo):
        make_admin(profile_repo)
        gate.sign_in("admin@camp.org", "secret123")

        assert gate.sign_out() == Role.ANONYMOUS
        assert gate.sign_out() == Role.ANONYMOUS
        assert gate.principal_id is None

    def test_sign_out_without_session(self, gate):
        assert gate.sign_out() == Role.ANONYMOUS


class TestLifecycle:
    def test_single_subscription_per_gate(self, session, profile_repo):
        gate = AccessGate(session, profile_repo)

        assert session.subscriber_count == 1
        gate.shutdown()
        gate.shutdown()
        assert session.subscriber_count == 0

    def test_context_manager_unsubscribes(self, session, profile_repo):
        with AccessGate(session, profile_repo):
            assert session.subscriber_count == 1
        assert session.subscriber_count == 0

    def test_shutdown_gate_ignores_later_changes(self, session, profile_repo):
        make_admin(profile_repo)
        gate = AccessGate(session, profile_repo)
        gate.shutdown()

        session.sign_in("admin@camp.org", "secret123")

        assert gate.role == Role.ANONYMOUS
