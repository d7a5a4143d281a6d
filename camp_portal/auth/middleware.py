"""
Role middleware - resolves the caller's role for every request.

A request without a bearer token is Anonymous. A bearer token is restored
through a fresh AccessGate, which refreshes it against PocketBase and looks
up the principal's admin profile. An expired or invalid token also yields
Anonymous.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from fastapi import Depends, HTTPException, Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import JSONResponse, Response

from camp_portal.errors import AuthenticationError, DataAccessError
from camp_portal.models import Role

from .gate import AccessGate

logger = logging.getLogger(__name__)

PUBLIC_PATHS = {"/health"}


@dataclass(frozen=True)
class Caller:
    """The classified caller of one request."""

    role: Role = Role.ANONYMOUS
    principal_id: str | None = None
    email: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMINISTRATOR

    @property
    def is_authenticated(self) -> bool:
        return self.role != Role.ANONYMOUS

    def to_dict(self) -> dict[str, Any]:
        return {"role": self.role.value, "principal_id": self.principal_id, "email": self.email}


ANONYMOUS = Caller()


def extract_bearer_token(authorization_header: str | None) -> str | None:
    """Extract bearer token from Authorization header."""
    if not authorization_header:
        return None

    parts = authorization_header.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None

    return parts[1]


class RoleMiddleware(BaseHTTPMiddleware):
    """Attach a Caller to request.state for every request."""

    def __init__(self, app: Any, gate_factory: Callable[[], AccessGate]):
        super().__init__(app)
        self.gate_factory = gate_factory

    def _resolve_caller(self, token: str) -> Caller:
        with self.gate_factory() as gate:
            gate.restore(token)
            return Caller(role=gate.role, principal_id=gate.principal_id, email=gate.email)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.url.path in PUBLIC_PATHS or request.method == "OPTIONS":
            return await call_next(request)

        caller = ANONYMOUS
        token = extract_bearer_token(request.headers.get("Authorization"))
        if token:
            try:
                caller = await asyncio.to_thread(self._resolve_caller, token)
            except AuthenticationError as e:
                # Sign-in, sign-out and the public form must work with a stale
                # token; require_admin turns Anonymous into a 401 where needed
                logger.info(f"Rejected bearer token for {request.url.path}, continuing as anonymous: {e}")
                caller = ANONYMOUS
            except DataAccessError as e:
                # BaseHTTPMiddleware turns raised HTTPExceptions into 500s
                logger.error(f"Could not resolve caller for {request.url.path}: {e}")
                return JSONResponse(status_code=502, content={"detail": "Authentication service unavailable"})

        request.state.caller = caller
        logger.debug(f"{request.method} {request.url.path} as {caller.role.value}")
        return await call_next(request)


def get_current_caller(request: Request) -> Caller:
    """
    Dependency returning the classified caller (Anonymous when no token was sent).

    Usage:
        @app.get("/api/auth/me")
        async def me(caller: Caller = Depends(get_current_caller)):
            return caller.to_dict()
    """
    caller: Caller = getattr(request.state, "caller", ANONYMOUS)
    return caller


def require_admin(caller: Caller = Depends(get_current_caller)) -> Caller:
    """
    Dependency to require administrator access.

    Anonymous callers get 401, signed-in registrants get 403.
    """
    if not caller.is_authenticated:
        raise HTTPException(status_code=401, detail="Authentication required")
    if not caller.is_admin:
        logger.warning(f"Non-admin principal {caller.principal_id} attempted an admin operation")
        raise HTTPException(status_code=403, detail="Admin access required")
    return caller
