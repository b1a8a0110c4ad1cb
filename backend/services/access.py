"""services/access.py — Session bootstrap and profile-completeness gating.

Two decisions live here:

login_destination()
    Right after login: where should this user land? Talents and scouts are
    probed for an existing profile; a 404 sends them to onboarding.

resolve_access()
    Every time a view is opened: may this session see it, and is the
    role-specific profile in place? Checks run in a fixed order:

        1. no session                    → redirect /login
        2. unknown view                  → redirect /login
        3. role not allowed              → redirect /
        4. "/"                           → redirect to the role's dashboard
        5. on own onboarding page        → render
        6. profile id already known      → render
        7. admin                         → render
        8. probe profile upstream:
             found                       → render (profile id recorded)
             404                         → onboarding
             401/403                     → logout, redirect /login
             anything else               → error "Failed to load profile"

Neither function touches the session store; callers persist the profile id
or drop the session based on the returned decision.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional

from client.api_client import ScoutingApiClient
from client.tokens import SessionUser
from core.errors import PortalError, UpstreamError

logger = logging.getLogger(__name__)

LOGIN = "/login"
HOME = "/"

DASHBOARDS = {
    "TALENT": "/talent/dashboard",
    "SCOUT": "/scout/dashboard",
    "ADMIN": "/admin/dashboard",
}
ONBOARDING = {
    "TALENT": "/talent/create",
    "SCOUT": "/scout/create",
}

_TALENT = frozenset({"TALENT"})
_SCOUT = frozenset({"SCOUT"})
_ADMIN = frozenset({"ADMIN"})
_SCOUT_OR_ADMIN = frozenset({"SCOUT", "ADMIN"})
_ANY = None

# (pattern, roles allowed; None = any logged-in user)
_VIEWS: list[tuple[re.Pattern, Optional[frozenset]]] = [
    (re.compile(r"^/$"), _ANY),
    (re.compile(r"^/talent/(create|dashboard|calendar|history|profile/edit)$"), _TALENT),
    (re.compile(r"^/talent/\d+$"), _SCOUT_OR_ADMIN),
    (re.compile(r"^/scout/(create|dashboard|talents)$"), _SCOUT),
    (re.compile(r"^/teams(/\d+)?$"), _ANY),
    (re.compile(r"^/account/settings$"), _ANY),
    (re.compile(r"^/admin/(dashboard|users|teams|data|matches)$"), _ADMIN),
]


@dataclass
class AccessDecision:
    path: str
    action: str                       # render / redirect / onboarding / error
    target: Optional[str] = None
    message: Optional[str] = None
    profile_id: Optional[int] = None  # newly discovered profile id to remember
    logout: bool = False              # the session must be dropped


def normalize_path(path: str) -> str:
    path = "/" + path.strip().lstrip("/")
    return path.rstrip("/") or "/"


def view_roles(path: str) -> tuple[bool, Optional[frozenset]]:
    """Return (known view?, roles allowed) for a portal path."""
    for pattern, roles in _VIEWS:
        if pattern.match(path):
            return True, roles
    return False, None


def dashboard_for(role: str) -> str:
    return DASHBOARDS.get(role, LOGIN)


def probe_profile(client: ScoutingApiClient, user: SessionUser) -> Optional[int]:
    """Look up the role-specific profile id; raises UpstreamError on failure."""
    if user.user_type == "TALENT":
        return client.get_talent_by_user(user.id).id
    if user.user_type == "SCOUT":
        return client.get_scout_by_user(user.id).id
    return None


def _remember(user: SessionUser, profile_id: Optional[int]) -> None:
    if user.user_type == "TALENT":
        user.talent_id = profile_id
    elif user.user_type == "SCOUT":
        user.scout_id = profile_id


def login_destination(client: ScoutingApiClient, user: SessionUser) -> tuple[str, Optional[str]]:
    """Pick the landing page after login and fill in the user's profile id.

    Returns (target path, warning). A profile lookup that fails for any
    reason other than 404 still lands on the dashboard, with a warning.
    """
    if user.user_type == "ADMIN":
        return DASHBOARDS["ADMIN"], None

    try:
        _remember(user, probe_profile(client, user))
    except UpstreamError as exc:
        if exc.is_not_found:
            logger.info("no profile yet, onboarding", extra={"user_id": user.id})
            return ONBOARDING[user.user_type], None
        logger.warning(
            "profile check failed at login",
            extra={"user_id": user.id, "status_code": exc.status_code},
        )
        return dashboard_for(user.user_type), "Error checking profile status"
    except PortalError as exc:
        logger.warning("profile check failed at login", extra={"user_id": user.id, "error": exc.message})
        return dashboard_for(user.user_type), "Error checking profile status"

    return dashboard_for(user.user_type), None


def resolve_access(
    user: Optional[SessionUser],
    path: str,
    client: Optional[ScoutingApiClient],
) -> AccessDecision:
    path = normalize_path(path)

    if user is None or client is None:
        return AccessDecision(path, "redirect", target=LOGIN)

    known, roles = view_roles(path)
    if not known:
        return AccessDecision(path, "redirect", target=LOGIN)
    if roles is not None and user.user_type not in roles:
        logger.info("view not allowed for role", extra={"user_id": user.id, "path": path})
        return AccessDecision(path, "redirect", target=HOME)

    if path == HOME:
        return AccessDecision(path, "redirect", target=dashboard_for(user.user_type))

    if path == ONBOARDING.get(user.user_type):
        return AccessDecision(path, "render")
    if user.profile_id is not None or user.user_type == "ADMIN":
        return AccessDecision(path, "render")

    try:
        profile_id = probe_profile(client, user)
    except UpstreamError as exc:
        if exc.is_not_found:
            return AccessDecision(path, "onboarding", target=ONBOARDING[user.user_type])
        if exc.is_auth_failure:
            return AccessDecision(path, "redirect", target=LOGIN, logout=True)
        logger.error(
            "profile check failed",
            extra={"user_id": user.id, "path": path, "status_code": exc.status_code},
        )
        return AccessDecision(path, "error", message="Failed to load profile")
    except PortalError as exc:
        logger.error("profile check failed", extra={"user_id": user.id, "path": path, "error": exc.message})
        return AccessDecision(path, "error", message="Failed to load profile")

    if profile_id is None:
        return AccessDecision(path, "onboarding", target=ONBOARDING[user.user_type])

    _remember(user, profile_id)
    return AccessDecision(path, "render", profile_id=profile_id)
