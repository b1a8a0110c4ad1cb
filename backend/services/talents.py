"""services/talents.py — Talent search filters and derived statistics.

Pure functions over schema objects; no I/O. The upstream API has no search
endpoint, so scouts' filters are applied to the full talent list here.

Age groups used by the scout search:
    U18     age < 18
    U21     age < 21
    U23     age < 23
    SENIOR  age >= 23
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, Optional

from schemas.match import MatchCalendar, MatchCalendarEntry, MatchHistory
from schemas.talent import Talent
from schemas.team import Team

_AGE_LIMITS = {"U18": 18, "U21": 21, "U23": 23}
SENIOR_AGE = 23

NEUTRAL_RATING = 5.0
MIN_RATING = 1.0
MAX_RATING = 10.0


def matches_age_group(age: int, group: Optional[str]) -> bool:
    if not group:
        return True
    group = group.upper()
    if group in _AGE_LIMITS:
        return age < _AGE_LIMITS[group]
    if group == "SENIOR":
        return age >= SENIOR_AGE
    # Unknown groups do not filter anything out
    return True


def filter_talents(
    talents: Iterable[Talent],
    age_group: Optional[str] = None,
    position: Optional[str] = None,
    team: Optional[str] = None,
) -> list[Talent]:
    """Apply the scout search filters. Empty filters are ignored."""
    team_term = team.lower() if team else ""
    result = []
    for talent in talents:
        if not matches_age_group(talent.age, age_group):
            continue
        if position and talent.position != position:
            continue
        if team_term and team_term not in (talent.team_name or "").lower():
            continue
        result.append(talent)
    return result


def estimated_rating(talent: Talent) -> float:
    """Rate a talent from season totals when no scouting report exists.

    5.0 baseline, +2 per goal per match, +1.5 per assist per match,
    clamped to 1–10 and rounded to one decimal.
    """
    if not talent.matches_played:
        return NEUTRAL_RATING
    goals_per_match = talent.goals / talent.matches_played
    assists_per_match = talent.assists / talent.matches_played
    rating = NEUTRAL_RATING + goals_per_match * 2 + assists_per_match * 1.5
    return round(min(MAX_RATING, max(MIN_RATING, rating)), 1)


def rating_band(rating: float) -> str:
    if rating >= 8:
        return "success"
    if rating >= 6:
        return "primary"
    if rating >= 4:
        return "warning"
    return "error"


def average_match_rating(history: list[MatchHistory]) -> float:
    if not history:
        return 0.0
    return sum(m.rating for m in history) / len(history)


def goals_per_match(talent: Talent) -> float:
    if not talent.matches_played:
        return 0.0
    return talent.goals / talent.matches_played


def photo_url(talent: Talent, uploads_url: str) -> Optional[str]:
    if not talent.photo_path:
        return None
    if talent.photo_path.startswith(("http://", "https://")):
        return talent.photo_path
    return f"{uploads_url.rstrip('/')}/{talent.photo_path.lstrip('/')}"


def filter_teams(teams: Iterable[Team], term: Optional[str]) -> list[Team]:
    """Case-insensitive substring match on team name or city."""
    if not term:
        return list(teams)
    term = term.lower()
    return [t for t in teams if term in t.name.lower() or term in (t.city or "").lower()]


def team_name(teams: Iterable[Team], team_id: Optional[int]) -> Optional[str]:
    if team_id is None:
        return None
    for team in teams:
        if team.id == team_id:
            return team.name
    return f"Team {team_id}"


def _as_utc(value: datetime) -> datetime:
    # Upstream times may come with or without an offset; naive ones are UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def decorate_calendar(matches: Iterable[MatchCalendar], teams: list[Team]) -> list[MatchCalendarEntry]:
    """Attach team names to calendar rows, ordered by kick-off."""
    entries = [
        MatchCalendarEntry(
            **m.model_dump(),
            home_team_name=team_name(teams, m.home_team_id),
            guest_team_name=team_name(teams, m.guest_team_id),
        )
        for m in matches
    ]
    return sorted(entries, key=lambda e: _as_utc(e.match_date_time))
