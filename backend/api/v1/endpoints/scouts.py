"""api/v1/endpoints/scouts.py — Scout profile and dashboard.

Routes:
    GET  /scouts               Every scout (ADMIN)
    POST /scouts/onboarding    Create the caller's scout profile (SCOUT)
    GET  /scouts/me            Own profile + followed talents (SCOUT)
    PUT  /scouts/me            Edit own profile (SCOUT)
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from api.dependencies import (
    get_current_session,
    get_scout_id,
    get_session_store,
    get_upstream,
    require_roles,
)
from client.api_client import ScoutingApiClient
from client.tokens import SessionUser
from core.errors import PortalError
from db.models import PortalSession
from db.session_store import SessionStore
from schemas.scout import Scout, ScoutDashboardResponse, ScoutForm

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=list[Scout], summary="List scouts")
def list_scouts(
    user: SessionUser = Depends(require_roles("ADMIN")),
    client: ScoutingApiClient = Depends(get_upstream),
):
    return sorted(client.list_scouts(), key=lambda s: (s.last_name.lower(), s.first_name.lower()))


@router.post("/onboarding", response_model=Scout, status_code=201, summary="Create scout profile")
def create_profile(
    form: ScoutForm,
    user: SessionUser = Depends(require_roles("SCOUT")),
    row: PortalSession = Depends(get_current_session),
    client: ScoutingApiClient = Depends(get_upstream),
    store: SessionStore = Depends(get_session_store),
):
    if user.scout_id is not None:
        raise PortalError("Scout profile already exists", 409)
    scout = client.create_scout(form.to_upstream_for(user.id, []))
    store.update_profile(row.id, scout_id=scout.id)
    logger.info("scout profile created", extra={"user_id": user.id, "scout_id": scout.id})
    return scout


@router.get("/me", response_model=ScoutDashboardResponse, summary="Scout dashboard")
def my_profile(
    scout_id: int = Depends(get_scout_id),
    client: ScoutingApiClient = Depends(get_upstream),
):
    return ScoutDashboardResponse(
        scout=client.get_scout(scout_id),
        followed_talents=client.list_followed_talents(scout_id),
    )


@router.put("/me", response_model=Scout, summary="Edit own scout profile")
def update_profile(
    form: ScoutForm,
    user: SessionUser = Depends(require_roles("SCOUT")),
    scout_id: int = Depends(get_scout_id),
    client: ScoutingApiClient = Depends(get_upstream),
):
    # The update replaces the whole record; keep the follow list intact
    current = client.get_scout(scout_id)
    return client.update_scout(scout_id, form.to_upstream_for(user.id, current.followed_talent_ids))
