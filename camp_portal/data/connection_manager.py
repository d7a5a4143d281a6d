"""
ConnectionManager - Centralized PocketBase connection management.

Provides a shared service client (authenticated as a superuser for data
access) and a factory for unauthenticated user clients, which carry a single
caller's session.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from pocketbase import PocketBase

logger = logging.getLogger(__name__)


@dataclass
class ConnectionConfig:
    """Configuration for PocketBase connections."""

    url: str = "http://127.0.0.1:8090"
    admin_email: str | None = None
    admin_password: str | None = None
    timeout_seconds: float = 10.0
    read_retries: int = 2

    @classmethod
    def from_env(cls) -> ConnectionConfig:
        """Load configuration from environment variables."""
        return cls(
            url=os.environ.get("POCKETBASE_URL", "http://127.0.0.1:8090"),
            admin_email=os.environ.get("POCKETBASE_ADMIN_EMAIL"),
            admin_password=os.environ.get("POCKETBASE_ADMIN_PASSWORD"),
            timeout_seconds=float(os.environ.get("POCKETBASE_TIMEOUT_SECONDS", "10")),
            read_retries=int(os.environ.get("POCKETBASE_READ_RETRIES", "2")),
        )


class ConnectionManager:
    """
    Manages PocketBase connections.

    Usage:
        # Shared service client (singleton manager)
        manager = ConnectionManager.get_instance()
        manager.authenticate()
        client = manager.get_client()

        # Fresh client for one caller's session
        user_client = manager.create_user_client()

        # Reset singleton (for testing)
        ConnectionManager.reset()
    """

    _instance: ConnectionManager | None = None

    def __init__(self, config: ConnectionConfig | None = None):
        self._config = config or ConnectionConfig.from_env()
        self._client: PocketBase | None = None

    @classmethod
    def get_instance(cls, config: ConnectionConfig | None = None) -> ConnectionManager:
        """Get the singleton instance. `config` is used on first call only."""
        if cls._instance is None:
            cls._instance = cls(config)
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset the singleton instance. Used for testing."""
        cls._instance = None

    @property
    def config(self) -> ConnectionConfig:
        return self._config

    def get_client(self) -> PocketBase:
        """Get the shared service client, creating it if needed."""
        if self._client is None:
            self._client = self._create_client()
        return self._client

    def create_user_client(self) -> PocketBase:
        """Create a new unauthenticated client for a single caller session."""
        return self._create_client()

    def authenticate(self) -> None:
        """
        Authenticate the shared client as a superuser.

        Uses PocketBase 0.23+ _superusers collection auth.
        """
        admin_email = self._config.admin_email
        admin_password = self._config.admin_password

        if not admin_email or not admin_password:
            logger.warning("Admin credentials not provided, skipping authentication")
            return

        try:
            self.get_client().collection("_superusers").auth_with_password(admin_email, admin_password)
            logger.info("Successfully authenticated with PocketBase")
        except Exception as e:
            logger.error(f"Failed to authenticate with PocketBase: {e}")
            raise

    def _create_client(self) -> PocketBase:
        return PocketBase(self._config.url, timeout=self._config.timeout_seconds)
