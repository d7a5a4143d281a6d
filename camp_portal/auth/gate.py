"""
Access gate - classifies the caller and runs sign-up, sign-in and sign-out.

Roles:
- Anonymous: no session
- Registrant: a session whose principal has no admin profile, or one with
  is_admin = false
- Administrator: a session whose principal's profile has is_admin = true

The role is re-resolved on every session change. Each resolution is tagged
with the session generation it was issued for, and a result that arrives
after a newer generation has been observed is dropped, so a slow lookup for
an old session can never overwrite the role of a newer one.
"""

from __future__ import annotations

import logging
import threading
from typing import Any

from camp_portal.data.repositories import ProfileRepository
from camp_portal.errors import DataAccessError, InconsistentAccountStateError, ProfileWriteError
from camp_portal.models import Role

from .session import AuthSession, SessionEvent, SessionSnapshot

logger = logging.getLogger(__name__)


class AccessGate:
    """Role gate bound to one AuthSession.

    Holds a single subscription to the session for its lifetime; call
    shutdown() (or use it as a context manager) to release it.
    """

    def __init__(self, session: AuthSession, profiles: ProfileRepository):
        self._session = session
        self._profiles = profiles
        self._lock = threading.Lock()

        self._role = Role.ANONYMOUS
        self._principal_id: str | None = None
        self._email: str | None = None
        self._applied_generation = -1
        self._latest_generation = -1

        self._unsubscribe: Any = session.on_session_change(self._on_session_change)
        self._refresh(session.snapshot)

    @property
    def session(self) -> AuthSession:
        return self._session

    @property
    def role(self) -> Role:
        with self._lock:
            return self._role

    @property
    def principal_id(self) -> str | None:
        with self._lock:
            return self._principal_id

    @property
    def email(self) -> str | None:
        with self._lock:
            return self._email

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMINISTRATOR

    def resolve_role(self, principal_id: str | None) -> Role:
        """Classify a principal. Anything short of a confirmed admin flag is Registrant."""
        if principal_id is None:
            return Role.ANONYMOUS

        try:
            profile = self._profiles.get(principal_id)
        except DataAccessError as e:
            logger.warning(f"Profile lookup failed for {principal_id}, treating as registrant: {e}")
            return Role.REGISTRANT

        if profile is not None and profile.is_admin:
            return Role.ADMINISTRATOR
        return Role.REGISTRANT

    def sign_up(self, email: str, password: str, full_name: str) -> Role:
        """Create an administrator account and sign it in.

        Every self-service sign-up is an administrator; registrants use the
        public form without an account.

        Raises:
            CredentialConflictError: If the email is already registered
            ProfileWriteError: If the profile could not be written (the new
                principal has been removed again)
            InconsistentAccountStateError: If the profile write failed and the
                principal could not be removed either
        """
        principal_id = self._session.create_principal(email, password, full_name)

        try:
            self._profiles.create(principal_id, email, full_name, is_admin=True)
        except DataAccessError as profile_error:
            logger.error(f"Profile write failed for new principal {principal_id}: {profile_error}")
            try:
                self._session.delete_principal(principal_id)
            except DataAccessError as cleanup_error:
                logger.error(f"Could not remove orphaned principal {principal_id}: {cleanup_error}")
                raise InconsistentAccountStateError(
                    "Account was created but could not be set up or removed; contact support",
                    principal_id=principal_id,
                ) from cleanup_error
            raise ProfileWriteError("Account setup failed, please try again") from profile_error

        self._session.sign_in(email, password)
        return self.role

    def sign_in(self, email: str, password: str) -> Role:
        """Sign in; the role comes from the profile lookup triggered by the session change."""
        self._session.sign_in(email, password)
        return self.role

    def restore(self, token: str) -> Role:
        """Resume a session from a bearer token."""
        self._session.restore(token)
        return self.role

    def sign_out(self) -> Role:
        """Sign out. Calling this without a session is not an error."""
        self._session.sign_out()
        return self.role

    def shutdown(self) -> None:
        """Release the session subscription. Idempotent."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _on_session_change(self, event: SessionEvent, snapshot: SessionSnapshot) -> None:
        logger.debug(f"Re-resolving role after {event.value} (generation {snapshot.generation})")
        self._refresh(snapshot)

    def _refresh(self, snapshot: SessionSnapshot) -> None:
        with self._lock:
            self._latest_generation = max(self._latest_generation, snapshot.generation)

        try:
            role = self.resolve_role(snapshot.principal_id)
        except Exception:
            # Session handlers must not raise; an unknown failure still never grants admin
            logger.exception(f"Role resolution failed for {snapshot.principal_id}, treating as registrant")
            role = Role.REGISTRANT

        with self._lock:
            if snapshot.generation < self._latest_generation or snapshot.generation <= self._applied_generation:
                logger.debug(f"Discarding stale role resolution for generation {snapshot.generation}")
                return
            self._role = role
            self._principal_id = snapshot.principal_id
            self._email = snapshot.email
            self._applied_generation = snapshot.generation

        logger.debug(f"Role resolved to {role.value} (generation {snapshot.generation})")

    def __enter__(self) -> AccessGate:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        self.shutdown()
