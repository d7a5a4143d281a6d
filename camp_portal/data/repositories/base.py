"""Shared plumbing for PocketBase repositories."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, TypeVar

from pocketbase import PocketBase
from pocketbase.client import ClientResponseError  # type: ignore[attr-defined]

from camp_portal.errors import DataAccessError
from camp_portal.logging_config import TRACE

from ..retry import call_with_retries

logger = logging.getLogger(__name__)

T = TypeVar("T")


def quote(value: str) -> str:
    """Quote a string literal for a PocketBase filter expression."""
    escaped = str(value).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def is_not_found(error: ClientResponseError) -> bool:
    return getattr(error, "status", 0) == 404


class BaseRepository:
    """Base class wrapping SDK calls so store failures surface as DataAccessError."""

    collection_name: str = ""

    def __init__(self, pb_client: PocketBase, read_retries: int = 2) -> None:
        self.pb = pb_client
        self.read_retries = read_retries

    def _collection(self) -> Any:
        return self.pb.collection(self.collection_name)

    def _read(self, operation: str, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        logger.log(TRACE, f"{self.collection_name}: {operation} args={args} kwargs={kwargs}")
        try:
            return call_with_retries(func, *args, retries=self.read_retries, **kwargs)
        except ClientResponseError as e:
            raise DataAccessError.from_response_error(operation, e) from e

    def _write(self, operation: str, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        logger.log(TRACE, f"{self.collection_name}: {operation} args={args}")
        try:
            return func(*args, **kwargs)
        except ClientResponseError as e:
            raise DataAccessError.from_response_error(operation, e) from e

    def _get_one_or_none(self, operation: str, record_id: str) -> Any | None:
        """Point lookup returning None on 404; other failures raise DataAccessError."""
        try:
            return call_with_retries(self._collection().get_one, record_id, retries=self.read_retries)
        except ClientResponseError as e:
            if is_not_found(e):
                return None
            raise DataAccessError.from_response_error(operation, e) from e
