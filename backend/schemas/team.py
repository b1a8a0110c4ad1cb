"""schemas/team.py — Team (roster) schemas."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import field_validator

from schemas.shared import CamelModel, check_required

AgeGroup = Literal["U10", "U12", "U14", "U16", "U18", "U20", "U21", "Senior"]
AGE_GROUPS: tuple[str, ...] = ("U10", "U12", "U14", "U16", "U18", "U20", "U21", "Senior")


class Team(CamelModel):
    id: int
    name: str
    city: str = ""
    age_group: str = ""
    player_ids: Optional[list[int]] = None


class TeamForm(CamelModel):
    name: str
    city: str
    age_group: AgeGroup

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        return check_required(v, "Team name")

    @field_validator("city")
    @classmethod
    def _city(cls, v: str) -> str:
        return check_required(v, "City")


class RosterPlayer(CamelModel):
    id: int
    first_name: str
    last_name: str
    position: str
    age: int
    photo_url: Optional[str] = None


class TeamDetailResponse(CamelModel):
    team: Team
    players: list[RosterPlayer]
    missing_player_ids: list[int]   # listed on the team but not resolvable upstream
