"""client/api_client.py — The one HTTP client for the upstream scouting API.

Every portal operation goes through ScoutingApiClient. It owns a
requests.Session, attaches the bearer token, logs each call, and turns
failures into the exceptions in core/errors.py:

    requests.RequestException   → UpstreamUnavailable  (no response at all)
    HTTP status >= 400          → UpstreamError        (status kept for branching)

There are no retries: a failed call is reported once and the user decides
what to do next. The upstream API is the source of truth, so nothing is
cached between calls.

Usage:
    client = ScoutingApiClient(settings.upstream_api_url, token=session.token)
    talent = client.get_talent_by_user(user_id)
"""

from __future__ import annotations

import logging
import time
from typing import Any, Optional

import requests

from client.tokens import SessionUser, is_well_formed, user_from_token
from core.errors import (
    CONNECTION_MESSAGE,
    AuthenticationError,
    SessionExpired,
    UpstreamError,
    UpstreamUnavailable,
)
from schemas.match import MatchCalendar, MatchHistory
from schemas.scout import Scout, ScoutingReport
from schemas.talent import Talent
from schemas.team import Team
from schemas.user import SystemStats, User

logger = logging.getLogger(__name__)

_JSON_HEADERS = {"Accept": "application/json"}


class LoginResult:
    """Token plus the user decoded from it."""

    def __init__(self, token: str, user: SessionUser):
        self.token = token
        self.user = user


class ScoutingApiClient:
    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: float = 15.0,
        session: Optional[requests.Session] = None,
        request_id: Optional[str] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.token = token.strip() if token else None
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(_JSON_HEADERS)
        if request_id:
            self.session.headers["X-Request-ID"] = request_id

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _auth_headers(self) -> dict[str, str]:
        if not self.token:
            return {}
        if not is_well_formed(self.token):
            raise SessionExpired("Invalid token format")
        return {"Authorization": f"Bearer {self.token}"}

    def _request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: Optional[dict] = None,
        files: Optional[dict] = None,
        authenticated: bool = True,
    ) -> Any:
        url = f"{self.base_url}{path}"
        headers = self._auth_headers() if authenticated else {}

        start = time.perf_counter()
        try:
            response = self.session.request(
                method,
                url,
                json=json,
                params=params,
                files=files,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as exc:
            logger.error(
                "upstream unreachable",
                extra={"method": method, "path": path, "error": str(exc)},
            )
            raise UpstreamUnavailable() from exc

        duration_ms = round((time.perf_counter() - start) * 1000, 2)
        logger.debug(
            "upstream call",
            extra={
                "method": method,
                "path": path,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            },
        )

        if response.status_code >= 400:
            message = _error_message(response)
            logger.warning(
                "upstream error",
                extra={
                    "method": method,
                    "path": path,
                    "status_code": response.status_code,
                    "error": message,
                },
            )
            raise UpstreamError(response.status_code, message, path)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    def _get(self, path: str, **kwargs) -> Any:
        return self._request("GET", path, **kwargs)

    def _post(self, path: str, body: Any = None, **kwargs) -> Any:
        return self._request("POST", path, json=body, **kwargs)

    def _put(self, path: str, body: Any) -> Any:
        return self._request("PUT", path, json=body)

    def _delete(self, path: str) -> None:
        self._request("DELETE", path)

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    def register(self, email: str, password: str, user_type: str) -> None:
        # The upstream answer carries no token; callers log in afterwards.
        self._post(
            "/auth/register",
            {"email": email, "password": password, "userType": user_type},
            authenticated=False,
        )
        logger.info("account registered", extra={"user_type": user_type})

    def login(self, email: str, password: str) -> LoginResult:
        """Exchange credentials for a token and decode the user from it.

        Upstream failures are collapsed into the messages shown on the
        login form; the server answers 500 for unknown emails, so that is
        treated like a wrong password.
        """
        try:
            data = self._post(
                "/auth/login",
                {"email": email, "password": password},
                authenticated=False,
            )
        except UpstreamUnavailable as exc:
            raise AuthenticationError(CONNECTION_MESSAGE, 502) from exc
        except UpstreamError as exc:
            if exc.status_code in (401, 403, 500):
                raise AuthenticationError("Invalid email or password") from exc
            if exc.status_code == 404:
                raise AuthenticationError("Login service not available", 503) from exc
            raise AuthenticationError("Login failed. Please try again.", 502) from exc

        token = data.get("token") if isinstance(data, dict) else None
        if not token:
            raise AuthenticationError("No token received from server", 502)

        token = token.strip()
        user = user_from_token(token)
        logger.info("login succeeded", extra={"user_id": user.id, "user_type": user.user_type})
        return LoginResult(token, user)

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def get_current_user(self) -> User:
        return User.model_validate(self._get("/users/me"))

    def list_users(self) -> list[User]:
        return [User.model_validate(u) for u in self._get("/users") or []]

    def create_user(self, body: dict) -> User:
        return User.model_validate(self._post("/users", body))

    def update_user(self, user_id: int, body: dict) -> User:
        return User.model_validate(self._put(f"/users/{user_id}", body))

    def change_password(self, user: SessionUser, new_password: str) -> None:
        # Password changes go through the generic user update; the role has
        # to be resent or the upstream API resets it.
        self._put(
            f"/users/{user.id}",
            {"email": user.email, "password": new_password, "userType": user.user_type or "TALENT"},
        )

    def delete_user(self, user_id: int) -> None:
        self._delete(f"/users/{user_id}")

    # ------------------------------------------------------------------
    # Talents
    # ------------------------------------------------------------------

    def create_talent(self, body: dict) -> Talent:
        return Talent.model_validate(self._post("/talents", body))

    def get_talent(self, talent_id: int) -> Talent:
        return Talent.model_validate(self._get(f"/talents/{talent_id}"))

    def get_talent_by_user(self, user_id: int) -> Talent:
        return Talent.model_validate(self._get(f"/talents/user/{user_id}"))

    def list_talents(self) -> list[Talent]:
        return [Talent.model_validate(t) for t in self._get("/talents") or []]

    def update_talent(self, talent_id: int, body: dict) -> Talent:
        return Talent.model_validate(self._put(f"/talents/{talent_id}", body))

    def delete_talent(self, talent_id: int) -> None:
        self._delete(f"/talents/{talent_id}")

    def upload_talent_photo(self, talent_id: int, filename: str, content: bytes,
                            content_type: str = "application/octet-stream") -> str:
        data = self._request(
            "POST",
            f"/talents/{talent_id}/photo",
            files={"file": (filename, content, content_type)},
        )
        if isinstance(data, dict):
            return data.get("url", "")
        return data or ""

    # ------------------------------------------------------------------
    # Teams
    # ------------------------------------------------------------------

    def create_team(self, body: dict) -> Team:
        return Team.model_validate(self._post("/teams", body))

    def get_team(self, team_id: int) -> Team:
        return Team.model_validate(self._get(f"/teams/{team_id}"))

    def list_teams(self) -> list[Team]:
        return [Team.model_validate(t) for t in self._get("/teams") or []]

    def update_team(self, team_id: int, body: dict) -> Team:
        return Team.model_validate(self._put(f"/teams/{team_id}", body))

    def delete_team(self, team_id: int) -> None:
        self._delete(f"/teams/{team_id}")

    # ------------------------------------------------------------------
    # Match history
    # ------------------------------------------------------------------

    def create_match_history(self, body: dict) -> MatchHistory:
        return MatchHistory.model_validate(self._post("/match-history", body))

    def get_match_history(self, history_id: int) -> MatchHistory:
        return MatchHistory.model_validate(self._get(f"/match-history/{history_id}"))

    def list_match_history(self) -> list[MatchHistory]:
        return [MatchHistory.model_validate(m) for m in self._get("/match-history") or []]

    def list_match_history_by_talent(self, talent_id: int) -> list[MatchHistory]:
        rows = self._get(f"/match-history/by-talent/{talent_id}") or []
        return [MatchHistory.model_validate(m) for m in rows]

    def update_match_history(self, history_id: int, body: dict) -> MatchHistory:
        return MatchHistory.model_validate(self._put(f"/match-history/{history_id}", body))

    def delete_match_history(self, history_id: int) -> None:
        self._delete(f"/match-history/{history_id}")

    # ------------------------------------------------------------------
    # Match calendar
    # ------------------------------------------------------------------

    def create_match_calendar(self, body: dict) -> MatchCalendar:
        return MatchCalendar.model_validate(self._post("/match-calendars", body))

    def get_match_calendar(self, calendar_id: int) -> MatchCalendar:
        return MatchCalendar.model_validate(self._get(f"/match-calendars/{calendar_id}"))

    def list_match_calendar(self) -> list[MatchCalendar]:
        return [MatchCalendar.model_validate(m) for m in self._get("/match-calendars") or []]

    def list_match_calendar_by_date_range(self, start: str, end: str) -> list[MatchCalendar]:
        rows = self._get("/match-calendars/date-range", params={"start": start, "end": end}) or []
        return [MatchCalendar.model_validate(m) for m in rows]

    def list_match_calendar_by_team(self, team_id: int) -> list[MatchCalendar]:
        rows = self._get(f"/match-calendars/team/{team_id}") or []
        return [MatchCalendar.model_validate(m) for m in rows]

    def update_match_calendar(self, calendar_id: int, body: dict) -> MatchCalendar:
        return MatchCalendar.model_validate(self._put(f"/match-calendars/{calendar_id}", body))

    def delete_match_calendar(self, calendar_id: int) -> None:
        self._delete(f"/match-calendars/{calendar_id}")

    # ------------------------------------------------------------------
    # Scouts
    # ------------------------------------------------------------------

    def create_scout(self, body: dict) -> Scout:
        return Scout.model_validate(self._post("/scouts", body))

    def get_scout(self, scout_id: int) -> Scout:
        return Scout.model_validate(self._get(f"/scouts/{scout_id}"))

    def get_scout_by_user(self, user_id: int) -> Scout:
        return Scout.model_validate(self._get(f"/scouts/user/{user_id}"))

    def list_scouts(self) -> list[Scout]:
        return [Scout.model_validate(s) for s in self._get("/scouts") or []]

    def update_scout(self, scout_id: int, body: dict) -> Scout:
        return Scout.model_validate(self._put(f"/scouts/{scout_id}", body))

    def delete_scout(self, scout_id: int) -> None:
        self._delete(f"/scouts/{scout_id}")

    def list_followed_talents(self, scout_id: int) -> list[Talent]:
        rows = self._get(f"/scouts/{scout_id}/followed-talents") or []
        return [Talent.model_validate(t) for t in rows]

    def follow_talent(self, scout_id: int, talent_id: int) -> Scout:
        # The upstream endpoint adds the posted ids to the followed set
        return Scout.model_validate(self._post(f"/scouts/{scout_id}/followed-talents", [talent_id]))

    def unfollow_talent(self, scout_id: int, talent_id: int) -> Scout:
        scout = self.get_scout(scout_id)
        remaining = [tid for tid in scout.followed_talent_ids if tid != talent_id]
        return Scout.model_validate(self._post(f"/scouts/{scout_id}/followed-talents", remaining))

    # ------------------------------------------------------------------
    # Scouting reports
    # ------------------------------------------------------------------

    def create_scouting_report(self, body: dict) -> ScoutingReport:
        return ScoutingReport.model_validate(self._post("/scouting-reports", body))

    def get_scouting_report(self, report_id: int) -> ScoutingReport:
        return ScoutingReport.model_validate(self._get(f"/scouting-reports/{report_id}"))

    def list_scouting_reports_by_scout(self, scout_id: int) -> list[ScoutingReport]:
        rows = self._get(f"/scouting-reports/scout/{scout_id}") or []
        return [ScoutingReport.model_validate(r) for r in rows]

    def list_scouting_reports_by_talent(self, talent_id: int) -> list[ScoutingReport]:
        rows = self._get(f"/scouting-reports/talent/{talent_id}") or []
        return [ScoutingReport.model_validate(r) for r in rows]

    def update_scouting_report(self, report_id: int, body: dict) -> ScoutingReport:
        return ScoutingReport.model_validate(self._put(f"/scouting-reports/{report_id}", body))

    def delete_scouting_report(self, report_id: int) -> None:
        self._delete(f"/scouting-reports/{report_id}")

    # ------------------------------------------------------------------
    # Admin
    # ------------------------------------------------------------------

    def get_system_stats(self) -> SystemStats:
        return SystemStats.model_validate(self._get("/admin/stats") or {})

    def create_backup(self, name: str) -> None:
        self._post("/admin/backups", {"name": name})

    def restore_backup(self, backup_id: int) -> None:
        self._post(f"/admin/backups/{backup_id}/restore")


def _error_message(response: requests.Response) -> str:
    """Pull the human-readable message out of an upstream error body."""
    try:
        body = response.json()
    except ValueError:
        return ""
    if isinstance(body, dict):
        for key in ("message", "error", "detail"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    return ""
