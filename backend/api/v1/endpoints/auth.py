"""api/v1/endpoints/auth.py — Login, registration, logout, and session lookup.

Routes:
    POST /auth/register   Create an account, log in, land on onboarding
    POST /auth/login      Log in and pick the landing page
    POST /auth/logout     Drop the portal session
    GET  /auth/session    Who is logged in
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, Response

from api.dependencies import (
    get_anonymous_client,
    get_current_session,
    get_session_store,
    session_id_from,
)
from client.api_client import ScoutingApiClient
from core.config import settings
from core.errors import PortalError, UpstreamError
from db.models import PortalSession
from db.session_store import SessionStore, to_session_user
from schemas.auth import LoginRequest, RegisterRequest, SessionResponse, SessionUserResponse
from schemas.shared import MessageResponse
from services.access import ONBOARDING, dashboard_for, login_destination

logger = logging.getLogger(__name__)

router = APIRouter()

_DUPLICATE_EMAIL = (
    "This email address is already registered. "
    "Please use a different email or try logging in."
)


def _session_response(row: PortalSession, redirect: str, warning: str | None = None) -> SessionResponse:
    user = to_session_user(row)
    return SessionResponse(
        session_id=row.id,
        user=SessionUserResponse(
            id=user.id,
            email=user.email,
            user_type=user.user_type,
            talent_id=user.talent_id,
            scout_id=user.scout_id,
        ),
        redirect=redirect,
        warning=warning,
    )


def _set_cookie(response: Response, row: PortalSession) -> None:
    response.set_cookie(
        settings.session_cookie_name,
        row.id,
        max_age=settings.session_ttl_hours * 3600,
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
    )


@router.post("/register", response_model=SessionResponse, status_code=201, summary="Register")
def register(
    form: RegisterRequest,
    response: Response,
    client: ScoutingApiClient = Depends(get_anonymous_client),
    store: SessionStore = Depends(get_session_store),
):
    try:
        client.register(form.email, form.password, form.user_type)
    except UpstreamError as exc:
        if exc.status_code == 409:
            raise PortalError(_DUPLICATE_EMAIL, 409) from exc
        raise PortalError(exc.message or "An error occurred during registration", exc.status_code) from exc

    result = client.login(form.email, form.password)
    row = store.create(result.token, result.user)
    _set_cookie(response, row)
    return _session_response(row, ONBOARDING.get(result.user.user_type, dashboard_for(result.user.user_type)))


@router.post("/login", response_model=SessionResponse, summary="Log in")
def login(
    form: LoginRequest,
    response: Response,
    client: ScoutingApiClient = Depends(get_anonymous_client),
    store: SessionStore = Depends(get_session_store),
):
    result = client.login(form.email, form.password)
    client.token = result.token

    # The probe records talent_id / scout_id on result.user when found
    target, warning = login_destination(client, result.user)

    row = store.create(result.token, result.user)
    _set_cookie(response, row)
    return _session_response(row, target, warning)


@router.post("/logout", response_model=MessageResponse, summary="Log out")
def logout(
    request: Request,
    response: Response,
    store: SessionStore = Depends(get_session_store),
):
    session_id = session_id_from(request)
    if session_id:
        store.delete(session_id)
    response.delete_cookie(settings.session_cookie_name)
    return MessageResponse(message="Logged out")


@router.get("/session", response_model=SessionResponse, summary="Current session")
def current_session(row: PortalSession = Depends(get_current_session)):
    return _session_response(row, dashboard_for(row.user_role))
