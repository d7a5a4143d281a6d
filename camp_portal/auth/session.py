"""
Auth session - explicit session context over a PocketBase user client.

One AuthSession holds at most one signed-in principal. Every change to that
session (sign-in, sign-out, token refresh) bumps a generation counter and is
published to subscribers registered with on_session_change().
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pocketbase import PocketBase
from pocketbase.client import ClientResponseError  # type: ignore[attr-defined]

from camp_portal.errors import AuthenticationError, CredentialConflictError, DataAccessError

logger = logging.getLogger(__name__)

USERS_COLLECTION = "users"

# Statuses PocketBase uses for rejected credentials or tokens
_REJECTED_STATUSES = {400, 401, 403, 404}


class SessionEvent(str, Enum):
    SIGNED_IN = "signed_in"
    SIGNED_OUT = "signed_out"
    TOKEN_REFRESHED = "token_refreshed"


@dataclass(frozen=True)
class SessionSnapshot:
    """Immutable view of the session at one generation."""

    principal_id: str | None = None
    email: str | None = None
    token: str | None = None
    generation: int = 0

    @property
    def is_authenticated(self) -> bool:
        return self.principal_id is not None


SessionChangeHandler = Callable[[SessionEvent, SessionSnapshot], None]


def _is_duplicate_email(error: ClientResponseError) -> bool:
    data = getattr(error, "data", None) or {}
    field_errors = data.get("data", {}) if isinstance(data, dict) else {}
    email_error = field_errors.get("email") if isinstance(field_errors, dict) else None
    return isinstance(email_error, dict) and email_error.get("code") == "validation_not_unique"


class AuthSession:
    """Session context for one caller.

    Args:
        pb_client: Unauthenticated client dedicated to this session
        service_client: Superuser client used to create and delete principals
            (defaults to pb_client)
    """

    def __init__(self, pb_client: PocketBase, service_client: PocketBase | None = None):
        self.pb = pb_client
        self._service = service_client or pb_client
        self._lock = threading.Lock()
        self._handlers: dict[int, SessionChangeHandler] = {}
        self._next_handler_id = 0
        self._snapshot = SessionSnapshot()

    @property
    def snapshot(self) -> SessionSnapshot:
        with self._lock:
            return self._snapshot

    def on_session_change(self, handler: SessionChangeHandler) -> Callable[[], None]:
        """Subscribe to session changes.

        Returns:
            A callable that removes the subscription (safe to call twice)
        """
        with self._lock:
            handler_id = self._next_handler_id
            self._next_handler_id += 1
            self._handlers[handler_id] = handler

        def unsubscribe() -> None:
            with self._lock:
                self._handlers.pop(handler_id, None)

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._handlers)

    def sign_in(self, email: str, password: str) -> SessionSnapshot:
        """Authenticate with email and password.

        Raises:
            AuthenticationError: If the credentials are rejected
            DataAccessError: If PocketBase cannot be reached
        """
        try:
            auth = self.pb.collection(USERS_COLLECTION).auth_with_password(email, password)
        except ClientResponseError as e:
            if getattr(e, "status", 0) in _REJECTED_STATUSES:
                logger.info(f"Sign-in rejected for {email}")
                raise AuthenticationError("Invalid email or password") from e
            raise DataAccessError.from_response_error("sign in", e) from e

        return self._publish(SessionEvent.SIGNED_IN, auth.record, auth.token)

    def restore(self, token: str) -> SessionSnapshot:
        """Resume a session from a bearer token by refreshing it.

        Raises:
            AuthenticationError: If the token is expired or invalid
            DataAccessError: If PocketBase cannot be reached
        """
        self.pb.auth_store.save(token, None)
        try:
            auth = self.pb.collection(USERS_COLLECTION).auth_refresh()
        except ClientResponseError as e:
            self.pb.auth_store.clear()
            if getattr(e, "status", 0) in _REJECTED_STATUSES:
                raise AuthenticationError("Session expired or invalid") from e
            raise DataAccessError.from_response_error("refresh session", e) from e

        return self._publish(SessionEvent.TOKEN_REFRESHED, auth.record, auth.token)

    def sign_out(self) -> SessionSnapshot:
        """Drop the current session. Without a session this does nothing."""
        self.pb.auth_store.clear()
        if not self.snapshot.is_authenticated:
            logger.debug("Sign-out requested without an active session")
            return self.snapshot

        return self._publish(SessionEvent.SIGNED_OUT, None, None)

    def create_principal(self, email: str, password: str, full_name: str) -> str:
        """Create a new auth principal and return its id.

        Raises:
            CredentialConflictError: If the email is already registered
            DataAccessError: For any other store failure
        """
        try:
            record = self._service.collection(USERS_COLLECTION).create(
                {
                    "email": email,
                    "password": password,
                    "passwordConfirm": password,
                    "name": full_name,
                }
            )
        except ClientResponseError as e:
            if _is_duplicate_email(e):
                raise CredentialConflictError(f"An account already exists for {email}") from e
            raise DataAccessError.from_response_error("create account", e) from e

        logger.info(f"Created principal {record.id} for {email}")
        return str(record.id)

    def delete_principal(self, principal_id: str) -> None:
        """Delete an auth principal.

        Raises:
            DataAccessError: If the principal could not be deleted
        """
        try:
            self._service.collection(USERS_COLLECTION).delete(principal_id)
        except ClientResponseError as e:
            raise DataAccessError.from_response_error("delete account", e) from e
        logger.info(f"Deleted principal {principal_id}")

    def _publish(self, event: SessionEvent, record: Any, token: str | None) -> SessionSnapshot:
        with self._lock:
            snapshot = SessionSnapshot(
                principal_id=str(record.id) if record is not None else None,
                email=getattr(record, "email", None) if record is not None else None,
                token=token,
                generation=self._snapshot.generation + 1,
            )
            self._snapshot = snapshot
            handlers = list(self._handlers.values())

        logger.debug(f"Session {event.value} (generation {snapshot.generation})")
        for handler in handlers:
            try:
                handler(event, snapshot)
            except Exception:
                logger.exception(f"Session change handler failed for {event.value}")
        return snapshot
