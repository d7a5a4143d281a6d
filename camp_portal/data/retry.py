"""Retry policy for read-only PocketBase calls.

Only transport failures are retried. The SDK reports those as a
ClientResponseError with status 0; any HTTP status means the server answered
and the call is not repeated. Writes never go through this helper.
"""

from __future__ import annotations

import logging
import random
import time
from collections.abc import Callable
from typing import Any, TypeVar

from pocketbase.client import ClientResponseError  # type: ignore[attr-defined]

logger = logging.getLogger(__name__)

T = TypeVar("T")

INITIAL_DELAY_SECONDS = 0.2
MAX_DELAY_SECONDS = 2.0
EXPONENTIAL_BASE = 2


def is_transport_error(error: ClientResponseError) -> bool:
    return not getattr(error, "status", 0)


def calculate_retry_delay(attempt: int) -> float:
    """Exponential backoff with +/-10% jitter, capped at MAX_DELAY_SECONDS."""
    delay = min(INITIAL_DELAY_SECONDS * (EXPONENTIAL_BASE ** (attempt - 1)), MAX_DELAY_SECONDS)
    jitter = delay * 0.1 * (2 * random.random() - 1)
    return max(0.0, delay + jitter)


def call_with_retries(
    func: Callable[..., T],
    *args: Any,
    retries: int = 2,
    sleep: Callable[[float], None] = time.sleep,
    **kwargs: Any,
) -> T:
    """Call `func`, retrying up to `retries` times on transport failures."""
    attempt = 0
    while True:
        try:
            return func(*args, **kwargs)
        except ClientResponseError as e:
            if not is_transport_error(e) or attempt >= retries:
                raise
            attempt += 1
            delay = calculate_retry_delay(attempt)
            logger.warning(f"PocketBase transport error, retrying in {delay:.2f}s (attempt {attempt}/{retries}): {e}")
            sleep(delay)
