#!/usr/bin/env python3
"""
Camp Portal API - HTTP API layer for the summer-camp registration portal.

This is the FastAPI backend-for-frontend for the registration form and the
admin dashboard. It provides:
- Public registration submission with automatic room assignment
- Administrator sign-up / sign-in and role lookup
- Room management and registration review for administrators
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from camp_portal.auth.middleware import RoleMiddleware
from camp_portal.errors import (
    AuthenticationError,
    CredentialConflictError,
    DataAccessError,
    InconsistentAccountStateError,
    NotFoundError,
    PortalError,
    ProfileWriteError,
)
from camp_portal.logging_config import configure_logging, get_logger

from .dependencies import authenticate_pb, create_access_gate
from .settings import get_settings

# Format: 2026-01-06T14:05:52Z [api] LEVEL message
configure_logging(source="api")
logger = get_logger(__name__)

# Most specific first; the first isinstance match wins
ERROR_STATUS: list[tuple[type[PortalError], int]] = [
    (AuthenticationError, 401),
    (CredentialConflictError, 409),
    (NotFoundError, 404),
    (InconsistentAccountStateError, 500),
    (ProfileWriteError, 500),
    (DataAccessError, 502),
]


def status_for_error(exc: PortalError) -> int:
    if isinstance(exc, DataAccessError) and exc.is_rejected_input:
        return 400
    for error_type, status_code in ERROR_STATUS:
        if isinstance(exc, error_type):
            return status_code
    return 500


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifecycle - startup and shutdown."""
    settings = get_settings()

    if not settings.skip_pb_auth:
        await authenticate_pb()
    else:
        logger.warning("Skipping PocketBase authentication (SKIP_PB_AUTH=true)")

    yield


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(title="Camp Portal API", description="Summer camp registration portal API", lifespan=lifespan)

    @app.exception_handler(PortalError)
    async def portal_error_handler(request: Request, exc: PortalError) -> JSONResponse:
        status_code = status_for_error(exc)
        if status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc}")
        return JSONResponse(status_code=status_code, content={"detail": str(exc)})

    settings = get_settings()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    # Preflight OPTIONS requests pass through without role resolution
    app.add_middleware(RoleMiddleware, gate_factory=create_access_gate)

    from .routers import auth, registrations, rooms

    app.include_router(auth.router)
    app.include_router(rooms.router)
    app.include_router(registrations.router)

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy", "service": "camp-portal-api"}

    return app


# Create app instance for uvicorn
app = create_app()
