"""
Auth Router - Endpoints for the access gate.

Each call runs on its own AccessGate over a fresh PocketBase user client;
the resulting token is handed back to the caller, who sends it as a bearer
token on later requests.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Annotated

from fastapi import APIRouter, Depends

from camp_portal.auth import AccessGate
from camp_portal.auth.middleware import Caller, get_current_caller
from camp_portal.models import Role

from ..dependencies import create_access_gate
from ..schemas import SessionResponse, SignInRequest, SignUpRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])

GateFactory = Callable[[], AccessGate]


def get_gate_factory() -> GateFactory:
    return create_access_gate


def _session_response(gate: AccessGate) -> SessionResponse:
    return SessionResponse(
        role=gate.role,
        principal_id=gate.principal_id,
        email=gate.email,
        token=gate.session.snapshot.token,
    )


@router.post("/signup")
async def sign_up(
    request: SignUpRequest,
    gate_factory: Annotated[GateFactory, Depends(get_gate_factory)],
) -> SessionResponse:
    """Create an administrator account and sign it in."""

    def run() -> SessionResponse:
        with gate_factory() as gate:
            gate.sign_up(request.email, request.password, request.full_name)
            return _session_response(gate)

    response = await asyncio.to_thread(run)
    logger.info(f"Signed up {request.email} as {response.role.value}")
    return response


@router.post("/signin")
async def sign_in(
    request: SignInRequest,
    gate_factory: Annotated[GateFactory, Depends(get_gate_factory)],
) -> SessionResponse:
    """Sign in with email and password."""

    def run() -> SessionResponse:
        with gate_factory() as gate:
            gate.sign_in(request.email, request.password)
            return _session_response(gate)

    return await asyncio.to_thread(run)


@router.post("/signout")
async def sign_out(
    gate_factory: Annotated[GateFactory, Depends(get_gate_factory)],
) -> SessionResponse:
    """Sign out. Always succeeds, with or without an active session.

    PocketBase tokens are stateless, so the client must discard its token;
    the server side only clears the session it holds for this request.
    """

    def run() -> Role:
        with gate_factory() as gate:
            return gate.sign_out()

    role = await asyncio.to_thread(run)
    return SessionResponse(role=role)


@router.get("/me")
async def whoami(caller: Annotated[Caller, Depends(get_current_caller)]) -> SessionResponse:
    """Role of the current caller (anonymous when no token is sent)."""
    return SessionResponse(role=caller.role, principal_id=caller.principal_id, email=caller.email)
