"""Profile Repository - Data access for admin profiles.

A profile shares its record id with the principal in the `users` auth
collection, so role lookups are a single point read."""

from __future__ import annotations

import logging

from camp_portal.models import AdminProfile

from .base import BaseRepository

logger = logging.getLogger(__name__)

PROFILES_COLLECTION = "admin_profiles"


class ProfileRepository(BaseRepository):
    """Repository for admin profiles"""

    collection_name = PROFILES_COLLECTION

    def get(self, principal_id: str) -> AdminProfile | None:
        """Find the profile for a principal, or None if it has none."""
        record = self._get_one_or_none("look up profile", principal_id)
        return AdminProfile.from_record(record) if record is not None else None

    def create(self, principal_id: str, email: str, full_name: str, is_admin: bool = True) -> AdminProfile:
        record = self._write(
            "create profile",
            self._collection().create,
            {
                "id": principal_id,
                "email": email,
                "full_name": full_name,
                "is_admin": is_admin,
            },
        )
        logger.info(f"Created profile for principal {principal_id} (is_admin={is_admin})")
        return AdminProfile.from_record(record)
