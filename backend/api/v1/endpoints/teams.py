"""api/v1/endpoints/teams.py — Team list, rosters, and admin team management.

Routes:
    GET    /teams            All teams; optional search on name or city
    GET    /teams/{id}       Team with its roster resolved from playerIds
    POST   /teams            Create (ADMIN)
    PUT    /teams/{id}       Edit (ADMIN)
    DELETE /teams/{id}       Delete (ADMIN)
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query, Response

from api.dependencies import get_current_user, get_upstream, require_roles
from client.api_client import ScoutingApiClient
from client.tokens import SessionUser
from core.config import settings
from core.errors import UpstreamError
from schemas.team import RosterPlayer, Team, TeamDetailResponse, TeamForm
from services.talents import filter_teams, photo_url

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=list[Team], summary="List teams")
def list_teams(
    search: str | None = Query(None, description="Partial name or city match"),
    user: SessionUser = Depends(get_current_user),
    client: ScoutingApiClient = Depends(get_upstream),
):
    return sorted(filter_teams(client.list_teams(), search), key=lambda t: t.name.lower())


@router.get("/{team_id}", response_model=TeamDetailResponse, summary="Team roster")
def get_team(
    team_id: int,
    user: SessionUser = Depends(get_current_user),
    client: ScoutingApiClient = Depends(get_upstream),
):
    team = client.get_team(team_id)
    players: list[RosterPlayer] = []
    missing: list[int] = []

    for player_id in team.player_ids or []:
        try:
            talent = client.get_talent(player_id)
        except UpstreamError as exc:
            if not exc.is_not_found:
                raise
            missing.append(player_id)
            continue
        players.append(RosterPlayer(
            id=talent.id,
            first_name=talent.first_name,
            last_name=talent.last_name,
            position=talent.position,
            age=talent.age,
            photo_url=photo_url(talent, settings.upstream_uploads_url),
        ))

    if missing:
        logger.warning("roster has unknown players", extra={"team_id": team_id, "missing": missing})
    return TeamDetailResponse(team=team, players=players, missing_player_ids=missing)


@router.post("", response_model=Team, status_code=201, summary="Create team")
def create_team(
    form: TeamForm,
    user: SessionUser = Depends(require_roles("ADMIN")),
    client: ScoutingApiClient = Depends(get_upstream),
):
    team = client.create_team(form.to_upstream())
    logger.info("team created", extra={"team_id": team.id})
    return team


@router.put("/{team_id}", response_model=Team, summary="Edit team")
def update_team(
    team_id: int,
    form: TeamForm,
    user: SessionUser = Depends(require_roles("ADMIN")),
    client: ScoutingApiClient = Depends(get_upstream),
):
    return client.update_team(team_id, form.to_upstream())


@router.delete("/{team_id}", status_code=204, summary="Delete team")
def delete_team(
    team_id: int,
    user: SessionUser = Depends(require_roles("ADMIN")),
    client: ScoutingApiClient = Depends(get_upstream),
):
    client.delete_team(team_id)
    logger.info("team deleted", extra={"team_id": team_id})
    return Response(status_code=204)
