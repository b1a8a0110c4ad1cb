"""schemas/match.py — Match history (played) and match calendar (scheduled) schemas."""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import Field, field_validator, model_validator

from schemas.shared import CamelModel, check_required


class MatchHistory(CamelModel):
    id: int
    talent_id: int
    match_date: date
    opponent_team: str
    goals: int = 0
    assists: int = 0
    starter: bool = False
    clean_sheet: bool = False
    rating: float = 0.0      # computed by the upstream API from the match line


class MatchHistoryForm(CamelModel):
    match_date: date
    opponent_team: str
    goals: int = Field(default=0, ge=0)
    assists: int = Field(default=0, ge=0)
    starter: bool = False
    clean_sheet: bool = False

    @field_validator("opponent_team")
    @classmethod
    def _opponent(cls, v: str) -> str:
        return check_required(v, "Opponent team")

    def to_upstream_for(self, talent_id: int) -> dict:
        body = self.to_upstream()
        body["talentId"] = talent_id
        return body


class MatchCalendar(CamelModel):
    id: int
    home_team_id: int
    guest_team_id: int
    match_date_time: datetime
    description: str = ""


class MatchCalendarForm(CamelModel):
    home_team_id: int
    guest_team_id: int
    match_date_time: datetime
    description: str = ""

    @model_validator(mode="after")
    def _distinct_teams(self) -> "MatchCalendarForm":
        if self.home_team_id == self.guest_team_id:
            raise ValueError("Home and guest team must be different")
        return self


class MatchCalendarEntry(MatchCalendar):
    """Calendar row decorated with team names for display."""

    home_team_name: Optional[str] = None
    guest_team_name: Optional[str] = None
