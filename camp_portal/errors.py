"""Portal error classes.

Absence of a room or a free bed is never an error; these exceptions cover
store failures and account problems only.
"""

from __future__ import annotations

from typing import Any


class PortalError(Exception):
    """Base exception for the camp portal."""

    pass


class DataAccessError(PortalError):
    """Raised when a read or write against PocketBase fails."""

    def __init__(self, message: str, status: int = 0):
        super().__init__(message)
        self.status = status

    @property
    def is_rejected_input(self) -> bool:
        """PocketBase answers 400 when it refuses the submitted field values."""
        return self.status == 400

    @classmethod
    def from_response_error(cls, operation: str, error: Any) -> DataAccessError:
        """Build from a pocketbase ClientResponseError, keeping its HTTP status.

        Field-level validation messages from the response body, when present,
        replace the generic SDK message.
        """
        status = getattr(error, "status", 0) or 0
        details = _field_messages(getattr(error, "data", None))
        return cls(f"Failed to {operation}: {details or error}", status=status)


def _field_messages(data: Any) -> str:
    """Flatten PocketBase's {"data": {field: {"code", "message"}}} body."""
    fields = data.get("data") if isinstance(data, dict) else None
    if not isinstance(fields, dict):
        return ""
    return "; ".join(
        f"{name}: {detail.get('message') or detail.get('code')}"
        for name, detail in fields.items()
        if isinstance(detail, dict)
    )


class NotFoundError(PortalError):
    """Raised when an admin operation targets a record that does not exist."""

    pass


class AuthError(PortalError):
    """Base exception for access gate failures."""

    pass


class AuthenticationError(AuthError):
    """Raised when credentials or a session token are rejected."""

    pass


class CredentialConflictError(AuthError):
    """Raised when signing up with an email that is already registered."""

    pass


class ProfileWriteError(AuthError):
    """Raised when the admin profile could not be written after sign-up."""

    pass


class InconsistentAccountStateError(AuthError):
    """Raised when a principal exists without a profile and cleanup failed."""

    def __init__(self, message: str, principal_id: str):
        super().__init__(message)
        self.principal_id = principal_id
