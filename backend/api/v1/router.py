"""api/v1/router.py — Aggregates all v1 endpoint routers.

Included in api/main.py under the prefix /api/v1, so final paths are:
    /api/v1/auth
    /api/v1/access
    /api/v1/talents
    /api/v1/match-history
    /api/v1/match-calendars
    /api/v1/teams
    /api/v1/scouts
    /api/v1/scouting-reports
    /api/v1/account
    /api/v1/admin
"""

from fastapi import APIRouter

from api.v1.endpoints import (
    access,
    account,
    admin,
    auth,
    match_calendars,
    match_history,
    scouting_reports,
    scouts,
    talents,
    teams,
)

v1_router = APIRouter()

v1_router.include_router(auth.router,             prefix="/auth",             tags=["auth"])
v1_router.include_router(access.router,           prefix="/access",           tags=["access"])
v1_router.include_router(talents.router,          prefix="/talents",          tags=["talents"])
v1_router.include_router(match_history.router,    prefix="/match-history",    tags=["match-history"])
v1_router.include_router(match_calendars.router,  prefix="/match-calendars",  tags=["match-calendars"])
v1_router.include_router(teams.router,            prefix="/teams",            tags=["teams"])
v1_router.include_router(scouts.router,           prefix="/scouts",           tags=["scouts"])
v1_router.include_router(scouting_reports.router, prefix="/scouting-reports", tags=["scouting-reports"])
v1_router.include_router(account.router,          prefix="/account",          tags=["account"])
v1_router.include_router(admin.router,            prefix="/admin",            tags=["admin"])
