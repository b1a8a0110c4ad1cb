"""api/v1/endpoints/account.py — Account settings for any logged-in user.

Routes:
    GET /account/me          The upstream user record
    PUT /account/password    Change own password
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from api.dependencies import get_current_user, get_upstream
from client.api_client import ScoutingApiClient
from client.tokens import SessionUser
from core.errors import PortalError, UpstreamError, display_message
from schemas.auth import ChangePasswordRequest
from schemas.shared import MessageResponse
from schemas.user import User

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/me", response_model=User, summary="Own account")
def my_account(
    user: SessionUser = Depends(get_current_user),
    client: ScoutingApiClient = Depends(get_upstream),
):
    return client.get_current_user()


@router.put("/password", response_model=MessageResponse, summary="Change password")
def change_password(
    form: ChangePasswordRequest,
    user: SessionUser = Depends(get_current_user),
    client: ScoutingApiClient = Depends(get_upstream),
):
    try:
        client.change_password(user, form.new_password)
    except UpstreamError as exc:
        if exc.is_auth_failure:
            raise
        fallback = "Invalid password format" if exc.status_code == 400 else "Failed to change password. Please try again."
        raise PortalError(display_message(exc, fallback), exc.status_code) from exc

    logger.info("password changed", extra={"user_id": user.id})
    return MessageResponse(message="Password changed successfully!")
