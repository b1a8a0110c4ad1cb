"""api/v1/endpoints/talents.py — Talent profiles, scout search, and follows.

Routes:
    POST   /talents/onboarding       Create the caller's talent profile (TALENT)
    GET    /talents/me               Own profile + team name + photo URL (TALENT)
    PUT    /talents/me               Edit own profile and season totals (TALENT)
    POST   /talents/me/photo         Upload a profile photo (TALENT)
    GET    /talents/search           Filtered, rated, paginated list (SCOUT, ADMIN)
    GET    /talents/{id}             Detail: history, upcoming matches, follow status (SCOUT, ADMIN)
    POST   /talents/{id}/follow      Follow a talent (SCOUT)
    DELETE /talents/{id}/follow      Unfollow a talent (SCOUT)
"""

from __future__ import annotations

import logging
import math

from fastapi import APIRouter, Depends, File, Query, UploadFile

from api.dependencies import (
    get_current_session,
    get_scout_id,
    get_session_store,
    get_talent_id,
    get_upstream,
    require_roles,
)
from client.api_client import ScoutingApiClient
from client.tokens import SessionUser
from core.config import settings
from core.errors import PortalError, UpstreamError, ValidationFailed
from db.models import PortalSession
from db.session_store import SessionStore
from schemas.shared import PaginationMeta
from schemas.talent import (
    POSITIONS,
    FollowResponse,
    PhotoUploadResponse,
    Talent,
    TalentDetailResponse,
    TalentOnboardingForm,
    TalentProfileResponse,
    TalentSearchItem,
    TalentSearchResponse,
    TalentUpdateForm,
)
from services import talents as svc

logger = logging.getLogger(__name__)

router = APIRouter()

MAX_PHOTO_BYTES = 5 * 1024 * 1024
PHOTO_TYPES = ("image/jpeg", "image/png", "image/gif")


def _profile(client: ScoutingApiClient, talent: Talent) -> TalentProfileResponse:
    name = talent.team_name
    if name is None and talent.team_id is not None:
        name = svc.team_name(client.list_teams(), talent.team_id)
    return TalentProfileResponse(
        talent=talent,
        team_name=name,
        photo_url=svc.photo_url(talent, settings.upstream_uploads_url),
    )


@router.post("/onboarding", response_model=Talent, status_code=201, summary="Create talent profile")
def create_profile(
    form: TalentOnboardingForm,
    user: SessionUser = Depends(require_roles("TALENT")),
    row: PortalSession = Depends(get_current_session),
    client: ScoutingApiClient = Depends(get_upstream),
    store: SessionStore = Depends(get_session_store),
):
    if user.talent_id is not None:
        raise PortalError("Talent profile already exists", 409)
    talent = client.create_talent(form.to_upstream_create(user.id))
    store.update_profile(row.id, talent_id=talent.id)
    logger.info("talent profile created", extra={"user_id": user.id, "talent_id": talent.id})
    return talent


@router.get("/me", response_model=TalentProfileResponse, summary="Own talent profile")
def my_profile(
    talent_id: int = Depends(get_talent_id),
    client: ScoutingApiClient = Depends(get_upstream),
):
    return _profile(client, client.get_talent(talent_id))


@router.put("/me", response_model=TalentProfileResponse, summary="Edit own talent profile")
def update_profile(
    form: TalentUpdateForm,
    user: SessionUser = Depends(require_roles("TALENT")),
    talent_id: int = Depends(get_talent_id),
    client: ScoutingApiClient = Depends(get_upstream),
):
    client.update_talent(talent_id, form.to_upstream_update(user.id))
    return _profile(client, client.get_talent(talent_id))


@router.post("/me/photo", response_model=PhotoUploadResponse, summary="Upload profile photo")
def upload_photo(
    file: UploadFile = File(...),
    talent_id: int = Depends(get_talent_id),
    client: ScoutingApiClient = Depends(get_upstream),
):
    if file.content_type not in PHOTO_TYPES:
        raise ValidationFailed("Photo must be a JPEG, PNG or GIF image")
    content = file.file.read(MAX_PHOTO_BYTES + 1)
    if len(content) > MAX_PHOTO_BYTES:
        raise ValidationFailed(f"File size must be less than {MAX_PHOTO_BYTES // (1024 * 1024)}MB")

    url = client.upload_talent_photo(talent_id, file.filename or "photo", content, file.content_type)
    logger.info("talent photo uploaded", extra={"talent_id": talent_id, "bytes": len(content)})
    return PhotoUploadResponse(url=url)


@router.get("/search", response_model=TalentSearchResponse, summary="Search talents")
def search_talents(
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    page_size: int = Query(10, ge=1, le=100, description="Results per page"),
    age_group: str | None = Query(None, description="U18, U21, U23 or SENIOR"),
    position: str | None = Query(None, description=" / ".join(POSITIONS)),
    team: str | None = Query(None, description="Partial team name match"),
    user: SessionUser = Depends(require_roles("SCOUT", "ADMIN")),
    client: ScoutingApiClient = Depends(get_upstream),
):
    matches = svc.filter_talents(client.list_talents(), age_group, position, team)
    total = len(matches)
    offset = (page - 1) * page_size

    items = []
    for talent in matches[offset:offset + page_size]:
        rating = svc.estimated_rating(talent)
        items.append(TalentSearchItem(talent=talent, rating=rating, rating_band=svc.rating_band(rating)))

    return TalentSearchResponse(
        data=items,
        meta=PaginationMeta(
            page=page,
            page_size=page_size,
            total=total,
            total_pages=math.ceil(total / page_size) if total else 0,
        ),
    )


@router.get("/{talent_id}", response_model=TalentDetailResponse, summary="Talent detail")
def get_talent(
    talent_id: int,
    user: SessionUser = Depends(require_roles("SCOUT", "ADMIN")),
    client: ScoutingApiClient = Depends(get_upstream),
):
    talent = client.get_talent(talent_id)
    history = sorted(client.list_match_history_by_talent(talent_id), key=lambda m: m.match_date, reverse=True)

    upcoming = []
    if talent.team_id is not None:
        upcoming = svc.decorate_calendar(client.list_match_calendar_by_team(talent.team_id), client.list_teams())

    following = None
    if user.user_type == "SCOUT":
        try:
            scout = client.get_scout(user.scout_id) if user.scout_id else client.get_scout_by_user(user.id)
            following = talent_id in scout.followed_talent_ids
        except UpstreamError as exc:
            if not exc.is_not_found:
                raise

    return TalentDetailResponse(
        talent=talent,
        photo_url=svc.photo_url(talent, settings.upstream_uploads_url),
        match_history=history,
        upcoming_matches=upcoming,
        average_rating=round(svc.average_match_rating(history), 1),
        goals_per_match=round(svc.goals_per_match(talent), 2),
        is_following=following,
    )


@router.post("/{talent_id}/follow", response_model=FollowResponse, summary="Follow talent")
def follow(
    talent_id: int,
    scout_id: int = Depends(get_scout_id),
    client: ScoutingApiClient = Depends(get_upstream),
):
    scout = client.follow_talent(scout_id, talent_id)
    logger.info("talent followed", extra={"scout_id": scout_id, "talent_id": talent_id})
    return FollowResponse(
        talent_id=talent_id,
        is_following=talent_id in scout.followed_talent_ids,
        followed_talent_ids=scout.followed_talent_ids,
    )


@router.delete("/{talent_id}/follow", response_model=FollowResponse, summary="Unfollow talent")
def unfollow(
    talent_id: int,
    scout_id: int = Depends(get_scout_id),
    client: ScoutingApiClient = Depends(get_upstream),
):
    scout = client.unfollow_talent(scout_id, talent_id)
    logger.info("talent unfollowed", extra={"scout_id": scout_id, "talent_id": talent_id})
    return FollowResponse(
        talent_id=talent_id,
        is_following=talent_id in scout.followed_talent_ids,
        followed_talent_ids=scout.followed_talent_ids,
    )
