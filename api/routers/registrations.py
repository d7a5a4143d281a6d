"""
Registrations Router - Public submission and admin review of registrations.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status

from camp_portal.auth.middleware import Caller, require_admin
from camp_portal.models import RegistrationForm
from camp_portal.services import RegistrationService

from ..dependencies import get_registration_service
from ..schemas import RegistrationResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/registrations", tags=["registrations"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def submit_registration(
    form: RegistrationForm,
    service: Annotated[RegistrationService, Depends(get_registration_service)],
) -> RegistrationResponse:
    """Submit the public registration form. No account is needed."""
    view = await asyncio.to_thread(service.submit, form)
    return RegistrationResponse.from_view(view)


@router.get("")
async def list_registrations(
    _admin: Annotated[Caller, Depends(require_admin)],
    service: Annotated[RegistrationService, Depends(get_registration_service)],
) -> list[RegistrationResponse]:
    """All registrations, newest first."""
    views = await asyncio.to_thread(service.list_registrations)
    return [RegistrationResponse.from_view(v) for v in views]
