"""Session context, access gate and role middleware."""

from __future__ import annotations

from .gate import AccessGate
from .session import AuthSession, SessionEvent, SessionSnapshot

__all__ = [
    "AccessGate",
    "AuthSession",
    "SessionEvent",
    "SessionSnapshot",
]
