"""api/v1/endpoints/match_calendars.py — Scheduled matches.

Routes:
    GET    /match-calendars              All matches, or a date range (start/end), or one team's
    GET    /match-calendars/{id}         One scheduled match
    POST   /match-calendars              Schedule a match (TALENT, ADMIN)
    PUT    /match-calendars/{id}         Reschedule / edit (TALENT, ADMIN)
    DELETE /match-calendars/{id}         Remove (TALENT, ADMIN)

Entries come back decorated with team names and ordered by kick-off. An
upstream 403 on these calls is an ordinary permission error; it does not end
the session.
"""

from __future__ import annotations

import logging
from datetime import date

from fastapi import APIRouter, Depends, Query, Response

from api.dependencies import get_current_user, get_upstream, require_roles
from client.api_client import ScoutingApiClient
from client.tokens import SessionUser
from core.errors import ValidationFailed
from schemas.match import MatchCalendarEntry, MatchCalendarForm
from services.talents import decorate_calendar

logger = logging.getLogger(__name__)

router = APIRouter()

_WRITERS = ("TALENT", "ADMIN")


@router.get("", response_model=list[MatchCalendarEntry], summary="List scheduled matches")
def list_matches(
    start: date | None = Query(None, description="First day of the range (inclusive)"),
    end: date | None = Query(None, description="Last day of the range (inclusive)"),
    team_id: int | None = Query(None, description="Only matches of this team"),
    user: SessionUser = Depends(get_current_user),
    client: ScoutingApiClient = Depends(get_upstream),
):
    if (start is None) != (end is None):
        raise ValidationFailed("Both start and end are required for a date range")

    if start is not None:
        if end < start:
            raise ValidationFailed("End date must not be before start date")
        matches = client.list_match_calendar_by_date_range(start.isoformat(), end.isoformat())
        if team_id is not None:
            matches = [m for m in matches if team_id in (m.home_team_id, m.guest_team_id)]
    elif team_id is not None:
        matches = client.list_match_calendar_by_team(team_id)
    else:
        matches = client.list_match_calendar()

    return decorate_calendar(matches, client.list_teams())


@router.get("/{calendar_id}", response_model=MatchCalendarEntry, summary="Scheduled match")
def get_match(
    calendar_id: int,
    user: SessionUser = Depends(get_current_user),
    client: ScoutingApiClient = Depends(get_upstream),
):
    return decorate_calendar([client.get_match_calendar(calendar_id)], client.list_teams())[0]


@router.post("", response_model=MatchCalendarEntry, status_code=201, summary="Schedule match")
def create_match(
    form: MatchCalendarForm,
    user: SessionUser = Depends(require_roles(*_WRITERS)),
    client: ScoutingApiClient = Depends(get_upstream),
):
    created = client.create_match_calendar(form.to_upstream())
    logger.info("match scheduled", extra={"calendar_id": created.id, "user_id": user.id})
    return decorate_calendar([created], client.list_teams())[0]


@router.put("/{calendar_id}", response_model=MatchCalendarEntry, summary="Edit scheduled match")
def update_match(
    calendar_id: int,
    form: MatchCalendarForm,
    user: SessionUser = Depends(require_roles(*_WRITERS)),
    client: ScoutingApiClient = Depends(get_upstream),
):
    updated = client.update_match_calendar(calendar_id, form.to_upstream())
    return decorate_calendar([updated], client.list_teams())[0]


@router.delete("/{calendar_id}", status_code=204, summary="Remove scheduled match")
def delete_match(
    calendar_id: int,
    user: SessionUser = Depends(require_roles(*_WRITERS)),
    client: ScoutingApiClient = Depends(get_upstream),
):
    client.delete_match_calendar(calendar_id)
    logger.info("match removed", extra={"calendar_id": calendar_id, "user_id": user.id})
    return Response(status_code=204)
