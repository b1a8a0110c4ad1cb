"""api/v1/endpoints/access.py — View gating for the browser router.

Routes:
    GET /access?path=/talent/dashboard    AccessDecision for the given view

The frontend asks before rendering a protected view and follows the answer:
render it, redirect, show onboarding, or show an error.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response

from api.dependencies import get_optional_session, get_optional_upstream, get_session_store
from client.api_client import ScoutingApiClient
from core.config import settings
from db.models import PortalSession
from db.session_store import SessionStore, to_session_user
from schemas.access import AccessDecisionResponse
from services.access import resolve_access

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=AccessDecisionResponse, summary="Gate a portal view")
def check_access(
    response: Response,
    path: str = Query(..., min_length=1, description="Portal view path, e.g. /talent/dashboard"),
    row: Optional[PortalSession] = Depends(get_optional_session),
    client: Optional[ScoutingApiClient] = Depends(get_optional_upstream),
    store: SessionStore = Depends(get_session_store),
):
    user = to_session_user(row) if row is not None else None
    decision = resolve_access(user, path, client)

    if row is not None:
        if decision.logout:
            store.delete(row.id)
            response.delete_cookie(settings.session_cookie_name)
        elif decision.profile_id is not None:
            if user.user_type == "TALENT":
                store.update_profile(row.id, talent_id=decision.profile_id)
            else:
                store.update_profile(row.id, scout_id=decision.profile_id)

    logger.debug(
        "access decision",
        extra={"path": decision.path, "action": decision.action, "target": decision.target},
    )
    return AccessDecisionResponse(
        path=decision.path,
        action=decision.action,
        target=decision.target,
        message=decision.message,
    )
