"""schemas/talent.py — Talent (player profile) request/response schemas.

Upstream source:
    /talents                 — profile record + season totals
    /match-history/by-talent — per-match records used for the detail view
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import Field, field_validator

from schemas.match import MatchCalendarEntry, MatchHistory
from schemas.shared import CamelModel, PaginationMeta, check_required

Position = Literal["GOALKEEPER", "DEFENDER", "MIDFIELDER", "FORWARD"]
POSITIONS: tuple[str, ...] = ("GOALKEEPER", "DEFENDER", "MIDFIELDER", "FORWARD")

MIN_AGE = 16
MAX_AGE = 50


class Talent(CamelModel):
    id: int
    user_id: int
    first_name: str
    last_name: str
    age: int
    position: str
    team_id: Optional[int] = None

    # Season totals
    matches_played: int = 0
    goals: int = 0
    assists: int = 0
    clean_sheets: int = 0

    photo_path: Optional[str] = None          # file name under the uploads origin
    match_history_ids: Optional[list[int]] = None
    team_name: Optional[str] = None           # denormalised by the upstream API

    @property
    def full_name(self) -> str:
        return " ".join(filter(None, [self.first_name, self.last_name]))


class TalentOnboardingForm(CamelModel):
    first_name: str
    last_name: str
    age: int = MIN_AGE
    position: Position = "GOALKEEPER"
    team_id: Optional[int] = None

    @field_validator("first_name")
    @classmethod
    def _first_name(cls, v: str) -> str:
        return check_required(v, "First name")

    @field_validator("last_name")
    @classmethod
    def _last_name(cls, v: str) -> str:
        return check_required(v, "Last name")

    @field_validator("age")
    @classmethod
    def _age(cls, v: int) -> int:
        if v < MIN_AGE:
            raise ValueError(f"Must be at least {MIN_AGE} years old")
        if v > MAX_AGE:
            raise ValueError(f"Must be under {MAX_AGE} years old")
        return v

    @field_validator("team_id", mode="before")
    @classmethod
    def _blank_team(cls, v):
        # A "no team" choice arrives as an empty select value
        return None if v in ("", None) else v

    def to_upstream_create(self, user_id: int) -> dict:
        body = self.to_upstream()
        body.update(userId=user_id, matchesPlayed=0, goals=0, assists=0, cleanSheets=0)
        return body


class TalentUpdateForm(TalentOnboardingForm):
    matches_played: int = Field(default=0, ge=0)
    goals: int = Field(default=0, ge=0)
    assists: int = Field(default=0, ge=0)
    clean_sheets: int = Field(default=0, ge=0)

    def to_upstream_update(self, user_id: int) -> dict:
        body = self.to_upstream()
        body["userId"] = user_id
        return body


class TalentProfileResponse(CamelModel):
    """Talent dashboard: the profile plus its resolved team and photo."""

    talent: Talent
    team_name: Optional[str] = None
    photo_url: Optional[str] = None


class TalentSearchItem(CamelModel):
    talent: Talent
    rating: float          # estimated from season totals, 1.0–10.0
    rating_band: str       # success / primary / warning / error


class TalentSearchResponse(CamelModel):
    data: list[TalentSearchItem]
    meta: PaginationMeta


class TalentDetailResponse(CamelModel):
    talent: Talent
    photo_url: Optional[str] = None
    match_history: list[MatchHistory]
    upcoming_matches: list[MatchCalendarEntry]
    average_rating: float
    goals_per_match: float
    is_following: Optional[bool] = None   # only computed for scouts


class FollowResponse(CamelModel):
    talent_id: int
    is_following: bool
    followed_talent_ids: list[int]


class PhotoUploadResponse(CamelModel):
    url: str
