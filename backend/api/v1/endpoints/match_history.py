"""api/v1/endpoints/match_history.py — Played-match records.

Routes:
    GET    /match-history           Every record, optionally one talent's (ADMIN)
    GET    /match-history/me        Own records, newest first (TALENT)
    POST   /match-history           Add a record (TALENT)
    PUT    /match-history/{id}      Edit one of own records (TALENT)
    DELETE /match-history/{id}      Delete one of own records (TALENT)

Every write answers with the re-fetched list so the caller never shows a
stale history.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_talent_id, get_upstream, require_roles
from client.api_client import ScoutingApiClient
from client.tokens import SessionUser
from core.errors import AccessDenied
from schemas.match import MatchHistory, MatchHistoryForm

logger = logging.getLogger(__name__)

router = APIRouter()


def _own_history(client: ScoutingApiClient, talent_id: int) -> list[MatchHistory]:
    rows = client.list_match_history_by_talent(talent_id)
    return sorted(rows, key=lambda m: m.match_date, reverse=True)


def _check_owner(client: ScoutingApiClient, history_id: int, talent_id: int) -> None:
    if client.get_match_history(history_id).talent_id != talent_id:
        raise AccessDenied("You can only change your own match history")


@router.get("", response_model=list[MatchHistory], summary="All match history")
def all_history(
    talent_id: int | None = Query(None, description="Only this talent's records"),
    user: SessionUser = Depends(require_roles("ADMIN")),
    client: ScoutingApiClient = Depends(get_upstream),
):
    rows = client.list_match_history_by_talent(talent_id) if talent_id is not None else client.list_match_history()
    return sorted(rows, key=lambda m: m.match_date, reverse=True)


@router.get("/me", response_model=list[MatchHistory], summary="Own match history")
def my_history(
    talent_id: int = Depends(get_talent_id),
    client: ScoutingApiClient = Depends(get_upstream),
):
    return _own_history(client, talent_id)


@router.post("", response_model=list[MatchHistory], status_code=201, summary="Add match record")
def add_record(
    form: MatchHistoryForm,
    talent_id: int = Depends(get_talent_id),
    client: ScoutingApiClient = Depends(get_upstream),
):
    created = client.create_match_history(form.to_upstream_for(talent_id))
    logger.info("match history added", extra={"talent_id": talent_id, "history_id": created.id})
    return _own_history(client, talent_id)


@router.put("/{history_id}", response_model=list[MatchHistory], summary="Edit match record")
def update_record(
    history_id: int,
    form: MatchHistoryForm,
    talent_id: int = Depends(get_talent_id),
    client: ScoutingApiClient = Depends(get_upstream),
):
    _check_owner(client, history_id, talent_id)
    client.update_match_history(history_id, form.to_upstream_for(talent_id))
    return _own_history(client, talent_id)


@router.delete("/{history_id}", response_model=list[MatchHistory], summary="Delete match record")
def delete_record(
    history_id: int,
    talent_id: int = Depends(get_talent_id),
    client: ScoutingApiClient = Depends(get_upstream),
):
    _check_owner(client, history_id, talent_id)
    client.delete_match_history(history_id)
    logger.info("match history deleted", extra={"talent_id": talent_id, "history_id": history_id})
    return _own_history(client, talent_id)
