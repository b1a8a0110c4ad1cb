"""schemas/scout.py — Scout profiles and scouting reports."""

from __future__ import annotations

from datetime import date
from typing import Literal, Optional

from pydantic import Field, field_validator

from schemas.shared import CamelModel, check_email, check_required
from schemas.talent import Talent

Recommendation = Literal["STRONG_BUY", "BUY", "HOLD", "SELL", "STRONG_SELL"]


class Scout(CamelModel):
    id: int
    user_id: int
    first_name: str
    last_name: str
    email: str
    followed_talent_ids: list[int] = Field(default_factory=list)


class ScoutForm(CamelModel):
    first_name: str
    last_name: str
    email: str

    @field_validator("first_name")
    @classmethod
    def _first_name(cls, v: str) -> str:
        return check_required(v, "First name")

    @field_validator("last_name")
    @classmethod
    def _last_name(cls, v: str) -> str:
        return check_required(v, "Last name")

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        return check_email(v)

    def to_upstream_for(self, user_id: int, followed_talent_ids: list[int]) -> dict:
        body = self.to_upstream()
        body.update(userId=user_id, followedTalentIds=list(followed_talent_ids))
        return body


class ScoutDashboardResponse(CamelModel):
    scout: Scout
    followed_talents: list[Talent]


class ScoutingReport(CamelModel):
    id: int
    scout_id: int
    talent_id: int
    match_id: Optional[int] = None
    report_date: date
    technical_rating: int
    tactical_rating: int
    physical_rating: int
    mental_rating: int
    notes: str = ""
    recommendation: Recommendation

    @property
    def overall_rating(self) -> float:
        ratings = (self.technical_rating, self.tactical_rating,
                   self.physical_rating, self.mental_rating)
        return round(sum(ratings) / len(ratings), 1)


class ScoutingReportForm(CamelModel):
    talent_id: int
    match_id: Optional[int] = None
    report_date: date
    technical_rating: int = Field(ge=1, le=10)
    tactical_rating: int = Field(ge=1, le=10)
    physical_rating: int = Field(ge=1, le=10)
    mental_rating: int = Field(ge=1, le=10)
    notes: str = ""
    recommendation: Recommendation

    def to_upstream_for(self, scout_id: int) -> dict:
        body = self.to_upstream()
        body["scoutId"] = scout_id
        return body
