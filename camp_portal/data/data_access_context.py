"""
DataAccessContext - Unified data access entry point for scripts.

Provides a context manager for scoped access to repositories, handling
connection setup and cleanup.
"""

from __future__ import annotations

import logging
from typing import Any

from pocketbase import PocketBase

from .connection_manager import ConnectionConfig, ConnectionManager
from .repositories import ProfileRepository, RegistrationRepository, RoomRepository

logger = logging.getLogger(__name__)


class DataAccessContext:
    """
    Unified entry point for data access operations.

    Usage as context manager:
        with DataAccessContext() as ctx:
            rooms = ctx.rooms.list_all()
            counts = ctx.registrations.counts_by_room()

    Usage with manual lifecycle:
        ctx = DataAccessContext()
        ctx.initialize_sync()
        try:
            rooms = ctx.rooms.list_all()
        finally:
            ctx.close()
    """

    def __init__(
        self,
        connection_config: ConnectionConfig | None = None,
        use_shared_connection: bool = True,
    ):
        """
        Args:
            connection_config: Optional connection configuration.
            use_shared_connection: If True, uses the singleton manager's client.
                                   If False, creates an isolated manager.
        """
        self._connection_config = connection_config
        self._use_shared_connection = use_shared_connection

        self._manager: ConnectionManager | None = None
        self._rooms: RoomRepository | None = None
        self._registrations: RegistrationRepository | None = None
        self._profiles: ProfileRepository | None = None
        self._closed = False

    def initialize_sync(self) -> None:
        """Authenticate the service client and create repositories."""
        if self._use_shared_connection:
            self._manager = ConnectionManager.get_instance(self._connection_config)
        else:
            self._manager = ConnectionManager(self._connection_config)

        self._manager.authenticate()
        client = self._manager.get_client()
        retries = self._manager.config.read_retries

        self._rooms = RoomRepository(client, read_retries=retries)
        self._registrations = RegistrationRepository(client, read_retries=retries)
        self._profiles = ProfileRepository(client, read_retries=retries)
        logger.debug("DataAccessContext initialization complete")

    def close(self) -> None:
        """Release repository references. Safe to call multiple times."""
        if self._closed:
            return

        logger.debug("Closing DataAccessContext")
        self._rooms = None
        self._registrations = None
        self._profiles = None
        self._closed = True

    @property
    def pb_client(self) -> PocketBase:
        if self._manager is None:
            raise RuntimeError("DataAccessContext not initialized")
        return self._manager.get_client()

    @property
    def rooms(self) -> RoomRepository:
        if self._rooms is None:
            raise RuntimeError("DataAccessContext not initialized")
        return self._rooms

    @property
    def registrations(self) -> RegistrationRepository:
        if self._registrations is None:
            raise RuntimeError("DataAccessContext not initialized")
        return self._registrations

    @property
    def profiles(self) -> ProfileRepository:
        if self._profiles is None:
            raise RuntimeError("DataAccessContext not initialized")
        return self._profiles

    def __enter__(self) -> DataAccessContext:
        self.initialize_sync()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        self.close()
