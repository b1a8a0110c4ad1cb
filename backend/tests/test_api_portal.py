"""Portal endpoints: view gating, forced logout, role checks, and resource routes."""

from conftest import make_calendar, make_history, make_scout, make_talent, make_team
from core.errors import UpstreamError
from schemas.scout import ScoutingReport
from schemas.user import SystemStats, User
from services.cascade import CascadeReport


def _session_id(headers):
    return next(iter(headers.values()))


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------

def test_root_and_health(client):
    assert client.get("/").json()["service"] == "Scouting Portal API"
    body = client.get("/health").json()
    assert body["status"] == "ok"
    assert "upstream" in body


def test_health_db_unreachable(client, monkeypatch):
    from api.routers import health

    def _fail():
        raise RuntimeError("Session store connectivity check failed: down")

    monkeypatch.setattr(health, "check_db_connectivity", _fail)
    resp = client.get("/health/db")
    assert resp.status_code == 503
    assert resp.json()["status"] == "error"


def test_request_id_echoed(client):
    resp = client.get("/health", headers={"X-Request-ID": "trace-1"})
    assert resp.headers["X-Request-ID"] == "trace-1"


def test_unknown_route_uses_error_body(client):
    resp = client.get("/api/v1/nowhere")
    assert resp.status_code == 404
    assert set(resp.json()) >= {"error", "status_code", "request_id"}


# ---------------------------------------------------------------------------
# /access
# ---------------------------------------------------------------------------

def test_access_without_session(client):
    body = client.get("/api/v1/access", params={"path": "/talent/dashboard"}).json()
    assert (body["action"], body["target"]) == ("redirect", "/login")


def test_access_probe_records_profile(client, login, upstream, store):
    headers = login()
    upstream.get_talent_by_user.return_value = make_talent(id=7)

    body = client.get("/api/v1/access", params={"path": "/talent/dashboard"}, headers=headers).json()

    assert body["action"] == "render"
    assert store.get(_session_id(headers)).talent_id == 7


def test_access_onboarding(client, login, upstream):
    headers = login("SCOUT", user_id=50)
    upstream.get_scout_by_user.side_effect = UpstreamError(404, "", "/scouts/user/50")
    body = client.get("/api/v1/access", params={"path": "/scout/talents"}, headers=headers).json()
    assert (body["action"], body["target"]) == ("onboarding", "/scout/create")


def test_access_auth_failure_ends_session(client, login, upstream, store):
    headers = login()
    upstream.get_talent_by_user.side_effect = UpstreamError(401, "", "/talents/user/42")

    body = client.get("/api/v1/access", params={"path": "/talent/dashboard"}, headers=headers).json()

    assert (body["action"], body["target"]) == ("redirect", "/login")
    assert store.get(_session_id(headers)) is None


# ---------------------------------------------------------------------------
# Forced logout and role gating
# ---------------------------------------------------------------------------

def test_upstream_401_forces_logout(client, login, upstream, store):
    headers = login(talent_id=7)
    upstream.get_talent.side_effect = UpstreamError(401, "Token expired", "/talents/7")

    resp = client.get("/api/v1/talents/me", headers=headers)

    assert resp.status_code == 401
    assert resp.json()["redirect"] == "/login"
    assert store.get(_session_id(headers)) is None


def test_upstream_403_forces_logout(client, login, upstream, store):
    headers = login(talent_id=7)
    upstream.get_talent.side_effect = UpstreamError(403, "Forbidden", "/talents/7")

    resp = client.get("/api/v1/talents/me", headers=headers)

    assert resp.status_code == 403
    assert resp.json()["redirect"] == "/login"
    assert store.get(_session_id(headers)) is None


def test_calendar_403_keeps_session(client, login, upstream, store):
    headers = login()
    upstream.list_match_calendar.side_effect = UpstreamError(403, "Forbidden", "/match-calendars")

    resp = client.get("/api/v1/match-calendars", headers=headers)

    assert resp.status_code == 403
    assert "redirect" not in resp.json()
    assert store.get(_session_id(headers)) is not None


def test_wrong_role_is_denied(client, login, upstream):
    headers = login("SCOUT", user_id=50)
    resp = client.get("/api/v1/talents/me", headers=headers)
    assert resp.status_code == 403
    assert resp.json()["redirect"] == "/"
    upstream.get_talent.assert_not_called()


def test_missing_profile_is_conflict(client, login, upstream):
    headers = login()
    upstream.get_talent_by_user.side_effect = UpstreamError(404, "", "/talents/user/42")
    resp = client.get("/api/v1/talents/me", headers=headers)
    assert resp.status_code == 409
    assert resp.json()["error"] == "Complete your talent profile first"


# ---------------------------------------------------------------------------
# Talents
# ---------------------------------------------------------------------------

def test_talent_onboarding(client, login, upstream, store):
    headers = login()
    upstream.create_talent.return_value = make_talent(id=7)

    resp = client.post("/api/v1/talents/onboarding", headers=headers, json={
        "firstName": "Jane", "lastName": "Doe", "age": 19, "position": "FORWARD", "teamId": "",
    })

    assert resp.status_code == 201
    sent = upstream.create_talent.call_args.args[0]
    assert sent["userId"] == 42 and sent["teamId"] is None and sent["goals"] == 0
    assert store.get(_session_id(headers)).talent_id == 7


def test_talent_onboarding_age_limits(client, login):
    headers = login()
    resp = client.post("/api/v1/talents/onboarding", headers=headers, json={
        "firstName": "Jane", "lastName": "Doe", "age": 15, "position": "FORWARD",
    })
    assert resp.status_code == 422
    assert resp.json()["error"] == "Must be at least 16 years old"

    resp = client.post("/api/v1/talents/onboarding", headers=headers, json={
        "firstName": "Jane", "lastName": "Doe", "age": 51, "position": "FORWARD",
    })
    assert resp.json()["error"] == "Must be under 50 years old"


def test_my_profile_resolves_team_and_photo(client, login, upstream):
    headers = login(talent_id=7)
    upstream.get_talent.return_value = make_talent(team_name=None, team_id=3, photo_path="p.png")
    upstream.list_teams.return_value = [make_team(id=3, name="Riverside FC")]

    body = client.get("/api/v1/talents/me", headers=headers).json()

    assert body["teamName"] == "Riverside FC"
    assert body["photoUrl"].endswith("/p.png")


def test_photo_upload_rejects_non_images(client, login, upstream):
    headers = login(talent_id=7)
    resp = client.post("/api/v1/talents/me/photo", headers=headers,
                       files={"file": ("notes.txt", b"hello", "text/plain")})
    assert resp.status_code == 422
    upstream.upload_talent_photo.assert_not_called()


def test_photo_upload_rejects_large_files(client, login, upstream):
    headers = login(talent_id=7)
    big = b"\xff\xd8" + b"0" * (5 * 1024 * 1024)
    resp = client.post("/api/v1/talents/me/photo", headers=headers,
                       files={"file": ("big.jpg", big, "image/jpeg")})
    assert resp.status_code == 422
    assert resp.json()["error"] == "File size must be less than 5MB"
    upstream.upload_talent_photo.assert_not_called()


def test_photo_upload(client, login, upstream):
    headers = login(talent_id=7)
    upstream.upload_talent_photo.return_value = "/uploads/p.png"
    resp = client.post("/api/v1/talents/me/photo", headers=headers,
                       files={"file": ("p.png", b"\x89PNG", "image/png")})
    assert resp.json() == {"url": "/uploads/p.png"}
    upstream.upload_talent_photo.assert_called_once_with(7, "p.png", b"\x89PNG", "image/png")


def test_search_filters_and_paginates(client, login, upstream):
    headers = login("SCOUT", user_id=50, scout_id=11)
    upstream.list_talents.return_value = [
        make_talent(id=i, age=17, position="FORWARD") for i in range(1, 13)
    ] + [make_talent(id=99, age=30, position="FORWARD")]

    body = client.get("/api/v1/talents/search", headers=headers,
                      params={"age_group": "U18", "page": 2, "page_size": 5}).json()

    assert [item["talent"]["id"] for item in body["data"]] == [6, 7, 8, 9, 10]
    assert body["meta"] == {"page": 2, "pageSize": 5, "total": 12, "totalPages": 3}
    assert body["data"][0]["ratingBand"] == "primary"


def test_talent_detail_for_scout(client, login, upstream):
    headers = login("SCOUT", user_id=50, scout_id=11)
    upstream.get_talent.return_value = make_talent(id=7, matches_played=4, goals=2)
    upstream.list_match_history_by_talent.return_value = [
        make_history(id=1, match_date="2024-01-01", rating=6.0),
        make_history(id=2, match_date="2024-02-01", rating=8.0),
    ]
    upstream.list_match_calendar_by_team.return_value = [make_calendar()]
    upstream.list_teams.return_value = [make_team(id=3), make_team(id=4, name="Hill United")]
    upstream.get_scout.return_value = make_scout(followed_talent_ids=[7])

    body = client.get("/api/v1/talents/7", headers=headers).json()

    assert [m["id"] for m in body["matchHistory"]] == [2, 1]
    assert body["averageRating"] == 7.0
    assert body["goalsPerMatch"] == 0.5
    assert body["isFollowing"] is True
    assert body["upcomingMatches"][0]["guestTeamName"] == "Hill United"


def test_follow_and_unfollow(client, login, upstream):
    headers = login("SCOUT", user_id=50, scout_id=11)
    upstream.follow_talent.return_value = make_scout(followed_talent_ids=[7])
    upstream.unfollow_talent.return_value = make_scout(followed_talent_ids=[])

    assert client.post("/api/v1/talents/7/follow", headers=headers).json()["isFollowing"] is True
    assert client.delete("/api/v1/talents/7/follow", headers=headers).json()["isFollowing"] is False
    upstream.follow_talent.assert_called_once_with(11, 7)
    upstream.unfollow_talent.assert_called_once_with(11, 7)


# ---------------------------------------------------------------------------
# Match history / calendar
# ---------------------------------------------------------------------------

def test_add_match_history_refetches(client, login, upstream):
    headers = login(talent_id=7)
    upstream.create_match_history.return_value = make_history(id=3)
    upstream.list_match_history_by_talent.return_value = [make_history(id=3)]

    resp = client.post("/api/v1/match-history", headers=headers, json={
        "matchDate": "2024-03-09", "opponentTeam": "Hill United", "goals": 2, "assists": 1,
        "starter": True, "cleanSheet": False,
    })

    assert resp.status_code == 201
    assert [m["id"] for m in resp.json()] == [3]
    assert upstream.create_match_history.call_args.args[0]["talentId"] == 7


def test_match_history_owner_check(client, login, upstream):
    headers = login(talent_id=7)
    upstream.get_match_history.return_value = make_history(id=3, talent_id=8)
    resp = client.delete("/api/v1/match-history/3", headers=headers)
    assert resp.status_code == 403
    upstream.delete_match_history.assert_not_called()


def test_calendar_range_and_same_team_validation(client, login, upstream):
    headers = login(talent_id=7)
    upstream.list_match_calendar_by_date_range.return_value = [make_calendar()]
    upstream.list_teams.return_value = [make_team(id=3), make_team(id=4, name="Hill United")]

    body = client.get("/api/v1/match-calendars", headers=headers,
                      params={"start": "2024-05-01", "end": "2024-05-31"}).json()
    assert body[0]["homeTeamName"] == "Riverside FC"
    upstream.list_match_calendar_by_date_range.assert_called_once_with("2024-05-01", "2024-05-31")

    resp = client.post("/api/v1/match-calendars", headers=headers, json={
        "homeTeamId": 3, "guestTeamId": 3, "matchDateTime": "2024-05-01T15:00:00",
    })
    assert resp.status_code == 422
    assert resp.json()["error"] == "Home and guest team must be different"


def test_scout_cannot_schedule_matches(client, login):
    headers = login("SCOUT", user_id=50, scout_id=11)
    resp = client.post("/api/v1/match-calendars", headers=headers, json={
        "homeTeamId": 3, "guestTeamId": 4, "matchDateTime": "2024-05-01T15:00:00",
    })
    assert resp.status_code == 403


# ---------------------------------------------------------------------------
# Teams / scouts / reports / account
# ---------------------------------------------------------------------------

def test_team_roster_reports_missing_players(client, login, upstream):
    headers = login(talent_id=7)
    upstream.get_team.return_value = make_team(player_ids=[7, 8])
    upstream.get_talent.side_effect = [make_talent(id=7), UpstreamError(404, "", "/talents/8")]

    body = client.get("/api/v1/teams/3", headers=headers).json()

    assert [p["id"] for p in body["players"]] == [7]
    assert body["missingPlayerIds"] == [8]


def test_missing_team_is_not_found(client, login, upstream):
    headers = login(talent_id=7)
    upstream.get_team.side_effect = UpstreamError(404, "", "/teams/99")
    resp = client.get("/api/v1/teams/99", headers=headers)
    assert resp.status_code == 404
    assert resp.json()["error"] == "Resource not found"


def test_team_form_requires_name(client, login):
    headers = login("ADMIN", user_id=1)
    resp = client.post("/api/v1/teams", headers=headers, json={"name": "  ", "city": "Leeds", "ageGroup": "U18"})
    assert resp.status_code == 422
    assert resp.json()["error"] == "Team name is required"


def test_scout_update_keeps_follow_list(client, login, upstream):
    headers = login("SCOUT", user_id=50, scout_id=11)
    upstream.get_scout.return_value = make_scout(followed_talent_ids=[1, 2])
    upstream.update_scout.return_value = make_scout(first_name="Samuel", followed_talent_ids=[1, 2])

    resp = client.put("/api/v1/scouts/me", headers=headers, json={
        "firstName": "Samuel", "lastName": "Reed", "email": "sam@example.com",
    })

    assert resp.status_code == 200
    assert upstream.update_scout.call_args.args[1]["followedTalentIds"] == [1, 2]


def test_scouting_report_ratings_bounded(client, login):
    headers = login("SCOUT", user_id=50, scout_id=11)
    resp = client.post("/api/v1/scouting-reports", headers=headers, json={
        "talentId": 7, "reportDate": "2024-04-01", "technicalRating": 11, "tacticalRating": 5,
        "physicalRating": 5, "mentalRating": 5, "recommendation": "BUY",
    })
    assert resp.status_code == 422


def test_scouting_reports_for_talent(client, login, upstream):
    headers = login("SCOUT", user_id=50, scout_id=11)
    upstream.list_scouting_reports_by_talent.return_value = [ScoutingReport(
        id=5, scout_id=11, talent_id=7, report_date="2024-04-01", technical_rating=7,
        tactical_rating=6, physical_rating=8, mental_rating=7, recommendation="BUY",
    )]
    body = client.get("/api/v1/scouting-reports", headers=headers, params={"talent_id": 7}).json()
    assert body[0]["recommendation"] == "BUY"


def test_change_password(client, login, upstream):
    headers = login()
    resp = client.put("/api/v1/account/password", headers=headers,
                      json={"newPassword": "secret2", "confirmPassword": "secret2"})
    assert resp.status_code == 200
    user = upstream.change_password.call_args.args[0]
    assert (user.id, user.email, user.user_type) == (42, "jane@example.com", "TALENT")


def test_change_password_upstream_400(client, login, upstream):
    headers = login()
    upstream.change_password.side_effect = UpstreamError(400, "", "/users/42")
    resp = client.put("/api/v1/account/password", headers=headers,
                      json={"newPassword": "secret2", "confirmPassword": "secret2"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Invalid password format"


# ---------------------------------------------------------------------------
# Admin
# ---------------------------------------------------------------------------

def test_admin_stats_requires_admin(client, login, upstream):
    upstream.get_system_stats.return_value = SystemStats(user_count=3)
    assert client.get("/api/v1/admin/stats", headers=login()).status_code == 403
    body = client.get("/api/v1/admin/stats", headers=login("ADMIN", user_id=1)).json()
    assert body["userCount"] == 3


def test_admin_users_paginated(client, login, upstream):
    upstream.list_users.return_value = [
        User(id=i, email=f"u{i}@example.com", user_type="TALENT") for i in range(1, 8)
    ]
    body = client.get("/api/v1/admin/users", headers=login("ADMIN", user_id=1),
                      params={"page": 2, "page_size": 5}).json()
    assert [u["id"] for u in body["data"]] == [6, 7]
    assert body["meta"]["totalPages"] == 2


def test_admin_delete_user_cascades_and_logs_out(client, login, upstream, store, monkeypatch):
    from api.v1.endpoints import admin

    victim = login(user_id=42)
    report = CascadeReport(user_id=42, talent_deleted=True, match_history_deleted=2)
    monkeypatch.setattr(admin, "delete_user_cascade", lambda c, user_id: report)

    body = client.delete("/api/v1/admin/users/42", headers=login("ADMIN", user_id=1)).json()

    assert body["talentDeleted"] is True
    assert body["matchHistoryDeleted"] == 2
    assert store.get(_session_id(victim)) is None


def test_admin_lists_scouts_and_history(client, login, upstream):
    headers = login("ADMIN", user_id=1)
    upstream.list_scouts.return_value = [make_scout(id=2, last_name="Young"), make_scout(id=1, last_name="Adams")]
    upstream.list_match_history.return_value = [make_history(id=1, match_date="2024-01-01"),
                                                make_history(id=2, match_date="2024-02-01")]

    assert [s["id"] for s in client.get("/api/v1/scouts", headers=headers).json()] == [1, 2]
    assert [m["id"] for m in client.get("/api/v1/match-history", headers=headers).json()] == [2, 1]
    assert client.get("/api/v1/scouts", headers=login()).status_code == 403
